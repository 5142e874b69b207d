"""
Catalog schema for reference data.

The catalog is a JSON document with three lists: actions, quality_tiers and
special_effects. These pydantic models validate field ranges on load; the
registry then converts them to the frozen dataclasses the engines use and
checks cross-record rules (unique ids, ascending tiers).
"""

from typing import Any

from pydantic import BaseModel, Field

from destinydeck.models.action import (
    Action,
    ActionRequirements,
    ActionReward,
    ActionType,
    BonusKind,
    CooldownPolicy,
    CrimeProperties,
    SuitBonus,
    frozen_mapping,
)
from destinydeck.models.card import Suit
from destinydeck.models.crafting import CraftingCategory, ItemQuality, QualityTier, SpecialEffect
from destinydeck.models.failure import CatalogError
from destinydeck.models.hand import HandCategory


class SuitBonusSpec(BaseModel):
    suit: Suit
    bonus: float
    kind: BonusKind = BonusKind.FLAT
    source: str = ""

    def to_suit_bonus(self) -> SuitBonus:
        return SuitBonus(suit=self.suit, bonus=self.bonus, kind=self.kind, source=self.source)


class RewardSpec(BaseModel):
    xp: int = Field(default=0, ge=0)
    gold: int = Field(default=0, ge=0)
    items: list[str] = Field(default_factory=list)


class CrimeSpec(BaseModel):
    witness_chance: float = Field(..., ge=0, le=100)
    jail_chance: float = Field(default=100.0, ge=0, le=100)
    jail_time_on_failure: int = Field(default=0, ge=0, description="Minutes")
    wanted_level_increase: int = Field(default=0, ge=0, le=5)
    bail_cost: int = Field(default=0, ge=0)


class ActionSpec(BaseModel):
    """One action as written in the catalog."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: ActionType
    description: str = ""
    difficulty: int = Field(..., ge=1, le=100)
    energy_cost: int = Field(..., ge=0)
    target_score: int = Field(..., ge=0)
    suit_bonuses: list[SuitBonusSpec] = Field(default_factory=list)
    rewards: RewardSpec = Field(default_factory=RewardSpec)
    min_level: int = Field(default=1, ge=1)
    required_skills: dict[str, int] = Field(default_factory=dict)
    cooldown_seconds: int = Field(default=0, ge=0)
    unlock_requirements: list[str] = Field(default_factory=list)
    crime: CrimeSpec | None = None
    min_hand_category: str | None = Field(
        default=None,
        description="HandCategory name, e.g. PAIR",
    )
    tier: int = Field(default=1, ge=1, le=4)
    is_active: bool = True

    def to_action(self) -> Action:
        """
        Convert to the engine's Action.

        Raises:
            CatalogError: If crime data does not match the action type or
                min_hand_category is not a known category
        """
        if self.type == ActionType.CRIME and self.crime is None:
            raise CatalogError(
                f"Crime action '{self.id}' is missing crime properties",
                detail=f"action={self.id}",
            )
        if self.type != ActionType.CRIME and self.crime is not None:
            raise CatalogError(
                f"Action '{self.id}' has crime properties but is {self.type.value}",
                detail=f"action={self.id}",
            )

        min_category: HandCategory | None = None
        if self.min_hand_category is not None:
            try:
                min_category = HandCategory[self.min_hand_category.upper()]
            except KeyError:
                raise CatalogError(
                    f"Unknown hand category '{self.min_hand_category}' on action '{self.id}'",
                    detail=f"action={self.id}",
                ) from None

        crime = None
        if self.crime is not None:
            crime = CrimeProperties(**self.crime.model_dump())

        return Action(
            id=self.id,
            name=self.name,
            type=self.type,
            description=self.description,
            difficulty=self.difficulty,
            energy_cost=self.energy_cost,
            target_score=self.target_score,
            suit_bonuses=tuple(bonus.to_suit_bonus() for bonus in self.suit_bonuses),
            rewards=ActionReward(
                xp=self.rewards.xp, gold=self.rewards.gold, items=tuple(self.rewards.items)
            ),
            requirements=ActionRequirements(
                min_level=self.min_level,
                skills=frozen_mapping(self.required_skills),
            ),
            cooldown=CooldownPolicy(seconds=self.cooldown_seconds),
            unlock_requirements=frozenset(self.unlock_requirements),
            crime=crime,
            min_hand_category=min_category,
            tier=self.tier,
            is_active=self.is_active,
        )


class QualityTierSpec(BaseModel):
    quality: ItemQuality
    min_score: int
    stat_multiplier: float = Field(..., gt=0)
    durability_multiplier: float = Field(..., gt=0)
    min_effects: int = Field(default=0, ge=0)
    max_effects: int = Field(default=0, ge=0)
    allows_custom_name: bool = False

    def to_tier(self) -> QualityTier:
        if self.min_effects > self.max_effects:
            raise CatalogError(
                f"Tier {self.quality.value} has min_effects above max_effects",
                detail=f"min={self.min_effects} max={self.max_effects}",
            )
        return QualityTier(**self.model_dump())


class SpecialEffectSpec(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    categories: list[CraftingCategory] = Field(..., min_length=1)
    stat: str
    value: float
    description: str = ""

    def to_effect(self) -> SpecialEffect:
        return SpecialEffect(
            id=self.id,
            name=self.name,
            categories=frozenset(self.categories),
            stat=self.stat,
            value=self.value,
            description=self.description,
        )


class CatalogSpec(BaseModel):
    """
    Whole catalog document.

    An empty quality_tiers list means the default tier table.
    """

    actions: list[ActionSpec] = Field(default_factory=list)
    quality_tiers: list[QualityTierSpec] = Field(default_factory=list)
    special_effects: list[SpecialEffectSpec] = Field(default_factory=list)

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> "CatalogSpec":
        return cls.model_validate(data)
