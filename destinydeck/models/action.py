"""
Action reference data.

Actions are static definitions loaded once into the registry. The resolver
reads them and never mutates them, so every type here is frozen.

Action categories are a tagged variant: `type` selects the category and
category-specific data rides along in an optional record (`crime` for CRIME
actions) instead of a subclass per category.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any

from destinydeck.models.card import Suit
from destinydeck.models.hand import HandCategory


class ActionType(str, Enum):
    """Categories of player actions."""

    CRIME = "CRIME"
    COMBAT = "COMBAT"
    CRAFT = "CRAFT"
    SOCIAL = "SOCIAL"


class BonusKind(str, Enum):
    """How a bonus combines with the running score."""

    FLAT = "flat"  # adds the bonus
    PERCENT = "percent"  # multiplies the running score by 1 + bonus / 100


@dataclass(frozen=True, slots=True)
class SuitBonus:
    """
    Suit affinity attached to an action or a character.

    Applied only when the resolved hand holds at least one card of `suit`.
    """

    suit: Suit
    bonus: float
    kind: BonusKind = BonusKind.FLAT
    source: str = ""

    @property
    def label(self) -> str:
        name = self.source or f"{self.suit.value.capitalize()} affinity"
        return f"{name} ({self.kind.value})"


@dataclass(frozen=True, slots=True)
class ActionReward:
    """Experience, gold and items granted for an action."""

    xp: int
    gold: int
    items: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"xp": self.xp, "gold": self.gold, "items": list(self.items)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActionReward":
        return cls(xp=data["xp"], gold=data["gold"], items=tuple(data.get("items", ())))


@dataclass(frozen=True, slots=True)
class CrimeProperties:
    """
    Crime-specific data, present only on CRIME actions.

    Attributes:
        witness_chance: Base chance (0-100) of being caught after a failure
        jail_chance: Chance (0-100) that a caught character is jailed
        jail_time_on_failure: Minutes in jail when jailed (0 = never jailed)
        wanted_level_increase: Wanted level added when caught (0-5)
        bail_cost: Gold needed to leave jail early
    """

    witness_chance: float
    jail_chance: float = 100.0
    jail_time_on_failure: int = 0
    wanted_level_increase: int = 0
    bail_cost: int = 0


def frozen_mapping(values: Mapping[str, int] | None = None) -> Mapping[str, int]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True, slots=True)
class ActionRequirements:
    """Level and skill gates checked before an attempt."""

    min_level: int = 1
    skills: Mapping[str, int] = field(default_factory=frozen_mapping)


@dataclass(frozen=True, slots=True)
class CooldownPolicy:
    """Per-character cooldown applied after every attempt of the action."""

    seconds: int = 0

    @property
    def duration(self) -> timedelta | None:
        if self.seconds <= 0:
            return None
        return timedelta(seconds=self.seconds)


@dataclass(frozen=True, slots=True)
class Action:
    """
    A static action definition.

    Attributes:
        id: Stable identifier used by the registry and in results
        name: Display name
        type: Action category
        description: Player-facing description
        difficulty: 1-100 difficulty rating
        energy_cost: Energy deducted per attempt
        target_score: Score needed for success
        suit_bonuses: Suit affinities, applied in declared order
        rewards: Base rewards, scaled by the success margin
        requirements: Level and skill gates
        cooldown: Cooldown started by each attempt
        unlock_requirements: Flags the character must hold
        crime: Crime properties (CRIME actions only)
        min_hand_category: Weakest hand category that can succeed (optional)
        tier: Content tier (1-4)
        is_active: Inactive actions cannot be attempted
    """

    id: str
    name: str
    type: ActionType
    difficulty: int
    energy_cost: int
    target_score: int
    rewards: ActionReward
    description: str = ""
    suit_bonuses: tuple[SuitBonus, ...] = ()
    requirements: ActionRequirements = field(default_factory=ActionRequirements)
    cooldown: CooldownPolicy = field(default_factory=CooldownPolicy)
    unlock_requirements: frozenset[str] = frozenset()
    crime: CrimeProperties | None = None
    min_hand_category: HandCategory | None = None
    tier: int = 1
    is_active: bool = True

    @property
    def is_crime(self) -> bool:
        return self.type == ActionType.CRIME and self.crime is not None
