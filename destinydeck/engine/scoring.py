"""
Score composition.

Combines a hand's base strength with suit bonuses and context modifiers into
one integer total, recording every term for the audit breakdown.

Composition order (fixed, so results are reproducible):
1. Hand strength
2. Suit bonuses, in declared order, only for suits present in the hand
3. Context modifiers, in declared order

Numeric policy: each contribution is truncated toward zero with
truncate_score() as it is applied, so the running total is always an integer.
No term reads the final total.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from destinydeck.models.action import BonusKind, SuitBonus
from destinydeck.models.breakdown import BreakdownEntry
from destinydeck.models.card import Hand
from destinydeck.models.hand import HandEvaluation
from destinydeck.models.result import AppliedSuitBonus


def truncate_score(value: float) -> int:
    """The single rounding rule for every score contribution."""
    return int(value)


@dataclass(frozen=True, slots=True)
class ScoreModifier:
    """A named context modifier (e.g. a crafting bonus)."""

    name: str
    value: float
    kind: BonusKind = BonusKind.FLAT


@dataclass
class ScoreLedger:
    """Running total plus the ordered breakdown of how it was reached."""

    total: int = 0
    entries: list[BreakdownEntry] = field(default_factory=list)

    def add(self, amount: float, label: str) -> int:
        """Add a flat amount. Returns the truncated contribution."""
        contribution = truncate_score(amount)
        self.total += contribution
        self.entries.append(
            BreakdownEntry(
                label=label,
                contribution=contribution,
                running_total=self.total,
                value=float(amount) if contribution != amount else None,
            )
        )
        return contribution

    def apply_percent(self, percent: float, label: str) -> int:
        """Scale the running total by 1 + percent / 100. Returns the contribution."""
        contribution = truncate_score(self.total * percent / 100)
        self.total += contribution
        self.entries.append(
            BreakdownEntry(
                label=label,
                contribution=contribution,
                running_total=self.total,
                value=float(percent),
            )
        )
        return contribution

    def apply(self, amount: float, kind: BonusKind, label: str) -> int:
        if kind == BonusKind.PERCENT:
            return self.apply_percent(amount, label)
        return self.add(amount, label)

    @property
    def breakdown(self) -> tuple[BreakdownEntry, ...]:
        return tuple(self.entries)


@dataclass(frozen=True, slots=True)
class ComposedScore:
    """Result of composing a score."""

    base_score: int
    applied_suit_bonuses: tuple[AppliedSuitBonus, ...]
    total: int
    breakdown: tuple[BreakdownEntry, ...]


def compose_score(
    evaluation: HandEvaluation,
    suit_bonuses: Iterable[SuitBonus],
    hand: Hand,
    context_modifiers: Iterable[ScoreModifier] = (),
) -> ComposedScore:
    """
    Compose the total score for an evaluated hand.

    Args:
        evaluation: Evaluation of `hand`
        suit_bonuses: Candidate suit bonuses, in application order
        hand: The hand, used to decide which suit bonuses apply
        context_modifiers: Additional modifiers, applied after suit bonuses

    Returns:
        ComposedScore with the total, matched suit bonuses and breakdown
    """
    ledger = ScoreLedger()
    ledger.add(
        evaluation.strength_score,
        evaluation.description or evaluation.category.display_name,
    )

    applied: list[AppliedSuitBonus] = []
    for bonus in suit_bonuses:
        if not hand.contains_suit(bonus.suit):
            continue
        contribution = ledger.apply(bonus.bonus, bonus.kind, bonus.label)
        applied.append(
            AppliedSuitBonus(
                suit=bonus.suit,
                kind=bonus.kind,
                bonus=bonus.bonus,
                contribution=contribution,
                source=bonus.source,
            )
        )

    for modifier in context_modifiers:
        ledger.apply(modifier.value, modifier.kind, modifier.name)

    return ComposedScore(
        base_score=evaluation.strength_score,
        applied_suit_bonuses=tuple(applied),
        total=ledger.total,
        breakdown=ledger.breakdown,
    )
