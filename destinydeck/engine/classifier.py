"""
Outcome classification.

One ordered-threshold classifier serves both engines: actions classify a
score against a single target (two bands), crafting classifies a score
against the quality tier table (six bands).

INVARIANTS:
- Bands are sorted ascending by min_score with no duplicates
- Lower bounds are inclusive
- A score below the lowest band falls into the lowest band
- Classification is total and never raises
"""

from bisect import bisect_right
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from destinydeck.models.crafting import DEFAULT_QUALITY_TIERS, ItemQuality, QualityTier

T = TypeVar("T")


class ThresholdTable(Generic[T]):
    """Ordered (min_score, value) bands."""

    def __init__(self, bands: Iterable[tuple[int, T]]):
        ordered = list(bands)
        if not ordered:
            raise ValueError("ThresholdTable needs at least one band")
        bounds = [bound for bound, _ in ordered]
        if any(low >= high for low, high in zip(bounds, bounds[1:], strict=False)):
            raise ValueError(f"Threshold bounds must be strictly ascending: {bounds}")
        self._bounds = bounds
        self._values = [value for _, value in ordered]

    @classmethod
    def binary(cls, threshold: int, below: T, at_or_above: T) -> "ThresholdTable[T]":
        """Two-band table split at `threshold`."""
        return cls([(threshold - 1, below), (threshold, at_or_above)])

    def classify(self, score: int | float) -> T:
        index = bisect_right(self._bounds, score) - 1
        return self._values[max(index, 0)]

    @property
    def bands(self) -> list[tuple[int, T]]:
        return list(zip(self._bounds, self._values, strict=True))

    def __len__(self) -> int:
        return len(self._bounds)


@dataclass(frozen=True, slots=True)
class Outcome:
    """Success and signed margin of a score against a target."""

    success: bool
    margin: int
    total: int
    target: int


def classify_outcome(total: int, target: int) -> Outcome:
    """Succeed iff total >= target. The margin is reported either way."""
    success = ThresholdTable.binary(target, False, True).classify(total)
    return Outcome(success=success, margin=total - target, total=total, target=target)


def quality_table(
    tiers: Sequence[QualityTier] = DEFAULT_QUALITY_TIERS,
) -> ThresholdTable[QualityTier]:
    """Threshold table over quality tiers, keyed by each tier's min_score."""
    return ThresholdTable((tier.min_score, tier) for tier in tiers)


_DEFAULT_QUALITY_TABLE = quality_table()


def classify_tier(total: int, table: ThresholdTable[QualityTier] | None = None) -> QualityTier:
    return (_DEFAULT_QUALITY_TABLE if table is None else table).classify(total)


def classify_quality(
    total: int, table: ThresholdTable[QualityTier] | None = None
) -> ItemQuality:
    """Highest quality whose min_score is at or below `total`."""
    return classify_tier(total, table).quality
