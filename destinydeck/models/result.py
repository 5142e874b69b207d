"""
Resolution results.

An ActionResult is created exactly once per attempt, never modified, and
handed to the persistence collaborator.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from destinydeck.models.action import ActionReward, ActionType, BonusKind
from destinydeck.models.breakdown import BreakdownEntry
from destinydeck.models.card import Hand, Suit
from destinydeck.models.hand import HandEvaluation


@dataclass(frozen=True, slots=True)
class AppliedSuitBonus:
    """A suit bonus that matched the hand, with what it contributed."""

    suit: Suit
    kind: BonusKind
    bonus: float
    contribution: int
    source: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "suit": self.suit.value,
            "kind": self.kind.value,
            "bonus": self.bonus,
            "contribution": self.contribution,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AppliedSuitBonus":
        return cls(
            suit=Suit(data["suit"]),
            kind=BonusKind(data["kind"]),
            bonus=data["bonus"],
            contribution=data["contribution"],
            source=data.get("source", ""),
        )


@dataclass(frozen=True, slots=True)
class CrimeResolution:
    """
    Outcome of the crime sub-procedure.

    Rolls are d100 (1-100). A roll at or above its target triggers the
    consequence; `None` rolls were never made.
    """

    witness_chance: float
    witness_roll: int | None
    witness_target: float | None
    caught: bool
    jail_roll: int | None = None
    jail_target: float | None = None
    jailed: bool = False
    jail_minutes: int = 0
    wanted_level_delta: int = 0
    bail_cost: int = 0

    @classmethod
    def clean_getaway(cls, witness_chance: float) -> "CrimeResolution":
        """Resolution for a successful crime: no witness roll, no consequences."""
        return cls(
            witness_chance=witness_chance,
            witness_roll=None,
            witness_target=None,
            caught=False,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "witness_chance": self.witness_chance,
            "witness_roll": self.witness_roll,
            "witness_target": self.witness_target,
            "caught": self.caught,
            "jail_roll": self.jail_roll,
            "jail_target": self.jail_target,
            "jailed": self.jailed,
            "jail_minutes": self.jail_minutes,
            "wanted_level_delta": self.wanted_level_delta,
            "bail_cost": self.bail_cost,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CrimeResolution":
        return cls(**data)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """
    One resolved action attempt.

    Attributes:
        character_id: Who attempted the action
        action_id: Which action was attempted
        action_type: Category of the action
        hand: Cards dealt for the attempt
        hand_evaluation: Poker evaluation of the hand
        applied_suit_bonuses: Suit bonuses that matched the hand, in order
        total_score: Composed score
        target_score: Score the action required
        success: True if total_score reached target_score
        margin: total_score - target_score (negative on failure)
        rewards: Scaled rewards, present only on success
        reward_multiplier: Multiplier applied to the base rewards (0 on failure)
        energy_spent: Energy deducted for the attempt
        cooldown_until: When the action can next be attempted
        timestamp: When the attempt was resolved
        crime_resolution: Crime sub-procedure outcome (CRIME actions only)
        breakdown: Every scoring term in application order
    """

    character_id: str
    action_id: str
    action_type: ActionType
    hand: Hand
    hand_evaluation: HandEvaluation
    applied_suit_bonuses: tuple[AppliedSuitBonus, ...]
    total_score: int
    target_score: int
    success: bool
    margin: int
    rewards: ActionReward | None
    reward_multiplier: float
    energy_spent: int
    cooldown_until: datetime | None
    timestamp: datetime
    crime_resolution: CrimeResolution | None = None
    breakdown: tuple[BreakdownEntry, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "character_id": self.character_id,
            "action_id": self.action_id,
            "action_type": self.action_type.value,
            "hand": self.hand.to_list(),
            "hand_evaluation": self.hand_evaluation.to_dict(),
            "applied_suit_bonuses": [bonus.to_dict() for bonus in self.applied_suit_bonuses],
            "total_score": self.total_score,
            "target_score": self.target_score,
            "success": self.success,
            "margin": self.margin,
            "rewards": self.rewards.to_dict() if self.rewards else None,
            "reward_multiplier": self.reward_multiplier,
            "energy_spent": self.energy_spent,
            "cooldown_until": self.cooldown_until.isoformat() if self.cooldown_until else None,
            "timestamp": self.timestamp.isoformat(),
            "crime_resolution": (
                self.crime_resolution.to_dict() if self.crime_resolution else None
            ),
            "breakdown": [entry.to_dict() for entry in self.breakdown],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActionResult":
        """Rebuild a result from its to_dict() form."""
        cooldown_until = data.get("cooldown_until")
        crime = data.get("crime_resolution")
        rewards = data.get("rewards")
        return cls(
            character_id=data["character_id"],
            action_id=data["action_id"],
            action_type=ActionType(data["action_type"]),
            hand=Hand.from_list(data["hand"]),
            hand_evaluation=HandEvaluation.from_dict(data["hand_evaluation"]),
            applied_suit_bonuses=tuple(
                AppliedSuitBonus.from_dict(bonus) for bonus in data["applied_suit_bonuses"]
            ),
            total_score=data["total_score"],
            target_score=data["target_score"],
            success=data["success"],
            margin=data["margin"],
            rewards=ActionReward.from_dict(rewards) if rewards else None,
            reward_multiplier=data["reward_multiplier"],
            energy_spent=data["energy_spent"],
            cooldown_until=datetime.fromisoformat(cooldown_until) if cooldown_until else None,
            timestamp=datetime.fromisoformat(data["timestamp"]),
            crime_resolution=CrimeResolution.from_dict(crime) if crime else None,
            breakdown=tuple(BreakdownEntry.from_dict(entry) for entry in data.get("breakdown", ())),
        )
