"""
Crafting models for the Masterwork Quality Engine.

A CraftingContext describes one crafting attempt; a QualityRoll is the
auditable scoring of that attempt; CraftedItemData is the finished item handed
to the inventory and persistence collaborators.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from destinydeck.models.breakdown import BreakdownEntry


class ItemQuality(str, Enum):
    """Crafted item quality, lowest to highest."""

    POOR = "POOR"
    COMMON = "COMMON"
    FINE = "FINE"
    SUPERIOR = "SUPERIOR"
    EXCEPTIONAL = "EXCEPTIONAL"
    MASTERWORK = "MASTERWORK"

    @property
    def order(self) -> int:
        return _QUALITY_ORDER[self]


_QUALITY_ORDER = {quality: index for index, quality in enumerate(ItemQuality)}


class CraftingCategory(str, Enum):
    """Item categories; special effects are pooled per category."""

    WEAPON = "WEAPON"
    ARMOR = "ARMOR"
    TOOL = "TOOL"
    CONSUMABLE = "CONSUMABLE"
    ACCESSORY = "ACCESSORY"


@dataclass(frozen=True, slots=True)
class QualityTier:
    """
    Score band and effects of one quality level.

    Attributes:
        quality: Quality level this tier describes
        min_score: Inclusive lower bound of the band
        stat_multiplier: Multiplier applied to the item's base stats
        durability_multiplier: Multiplier applied to the item's base durability
        min_effects: Fewest special effects an item of this tier carries
        max_effects: Most special effects an item of this tier carries
        allows_custom_name: True if the crafter may name the item
    """

    quality: ItemQuality
    min_score: int
    stat_multiplier: float
    durability_multiplier: float
    min_effects: int = 0
    max_effects: int = 0
    allows_custom_name: bool = False


DEFAULT_QUALITY_TIERS: tuple[QualityTier, ...] = (
    QualityTier(ItemQuality.POOR, 0, 0.6, 0.5),
    QualityTier(ItemQuality.COMMON, 25, 0.8, 0.8),
    QualityTier(ItemQuality.FINE, 45, 0.95, 1.0),
    QualityTier(ItemQuality.SUPERIOR, 60, 1.1, 1.2, min_effects=0, max_effects=1),
    QualityTier(ItemQuality.EXCEPTIONAL, 85, 1.3, 1.5, min_effects=1, max_effects=2),
    QualityTier(
        ItemQuality.MASTERWORK,
        100,
        1.5,
        2.0,
        min_effects=2,
        max_effects=3,
        allows_custom_name=True,
    ),
)


@dataclass(frozen=True, slots=True)
class SpecialEffect:
    """A named modifier attached to an item after its quality is resolved."""

    id: str
    name: str
    categories: frozenset[CraftingCategory]
    stat: str
    value: float
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "categories": sorted(category.value for category in self.categories),
            "stat": self.stat,
            "value": self.value,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SpecialEffect":
        return cls(
            id=data["id"],
            name=data["name"],
            categories=frozenset(CraftingCategory(value) for value in data["categories"]),
            stat=data["stat"],
            value=data["value"],
            description=data.get("description", ""),
        )


@dataclass(frozen=True, slots=True)
class CraftingContext:
    """
    Inputs of one crafting attempt.

    Bonuses are integer score points supplied by the caller (materials used,
    tool quality, workshop facility, profession specialization).
    """

    character_id: str
    recipe_id: str
    item_name: str
    category: CraftingCategory
    skill_level: int
    recipe_level: int
    material_bonus: int = 0
    tool_bonus: int = 0
    facility_bonus: int = 0
    specialization_bonus: int = 0
    base_durability: int = 100
    custom_name: str | None = None


@dataclass(frozen=True, slots=True)
class QualityRoll:
    """
    Scoring of one crafting attempt.

    `breakdown` lists every term with its contribution in application order,
    so total_score can be re-derived from it.
    """

    base_chance: int
    material_bonus: int
    tool_bonus: int
    facility_bonus: int
    specialization_bonus: int
    luck_roll: int
    total_score: int
    final_quality: ItemQuality
    breakdown: tuple[BreakdownEntry, ...]

    def breakdown_lines(self) -> list[str]:
        return [str(entry) for entry in self.breakdown]

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_chance": self.base_chance,
            "material_bonus": self.material_bonus,
            "tool_bonus": self.tool_bonus,
            "facility_bonus": self.facility_bonus,
            "specialization_bonus": self.specialization_bonus,
            "luck_roll": self.luck_roll,
            "total_score": self.total_score,
            "final_quality": self.final_quality.value,
            "breakdown": [entry.to_dict() for entry in self.breakdown],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QualityRoll":
        return cls(
            **{key: data[key] for key in _ROLL_SCORE_FIELDS},
            final_quality=ItemQuality(data["final_quality"]),
            breakdown=tuple(BreakdownEntry.from_dict(entry) for entry in data["breakdown"]),
        )


_ROLL_SCORE_FIELDS = (
    "base_chance",
    "material_bonus",
    "tool_bonus",
    "facility_bonus",
    "specialization_bonus",
    "luck_roll",
    "total_score",
)


@dataclass(frozen=True, slots=True)
class CraftedItemData:
    """A finished crafted item."""

    item_id: str
    character_id: str
    recipe_id: str
    name: str
    category: CraftingCategory
    quality: ItemQuality
    stat_multiplier: float
    durability: int
    max_durability: int
    special_effects: tuple[SpecialEffect, ...]
    quality_roll: QualityRoll
    crafted_at: datetime
    custom_name: str | None = None

    @property
    def display_name(self) -> str:
        return self.custom_name or self.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "character_id": self.character_id,
            "recipe_id": self.recipe_id,
            "name": self.name,
            "custom_name": self.custom_name,
            "category": self.category.value,
            "quality": self.quality.value,
            "stat_multiplier": self.stat_multiplier,
            "durability": self.durability,
            "max_durability": self.max_durability,
            "special_effects": [effect.to_dict() for effect in self.special_effects],
            "quality_roll": self.quality_roll.to_dict(),
            "crafted_at": self.crafted_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CraftedItemData":
        return cls(
            item_id=data["item_id"],
            character_id=data["character_id"],
            recipe_id=data["recipe_id"],
            name=data["name"],
            custom_name=data.get("custom_name"),
            category=CraftingCategory(data["category"]),
            quality=ItemQuality(data["quality"]),
            stat_multiplier=data["stat_multiplier"],
            durability=data["durability"],
            max_durability=data["max_durability"],
            special_effects=tuple(
                SpecialEffect.from_dict(effect) for effect in data["special_effects"]
            ),
            quality_roll=QualityRoll.from_dict(data["quality_roll"]),
            crafted_at=datetime.fromisoformat(data["crafted_at"]),
        )
