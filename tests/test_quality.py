"""
Tests for the Masterwork Quality Engine.

INVARIANTS:
- The breakdown sums to the total
- Base chance is clamped to [0, 60]
- A higher total never yields a lower quality
"""

import random

import pytest

from destinydeck.engine.quality import (
    assign_special_effects,
    base_chance,
    eligible_effects,
    roll_luck,
    roll_quality,
    roll_quality_tier,
)
from destinydeck.models.crafting import (
    DEFAULT_QUALITY_TIERS,
    CraftingCategory,
    CraftingContext,
    ItemQuality,
    QualityTier,
    SpecialEffect,
)


def _context(**overrides) -> CraftingContext:
    values = {
        "character_id": "smith-1",
        "recipe_id": "colt_revolver",
        "item_name": "Colt Revolver",
        "category": CraftingCategory.WEAPON,
        "skill_level": 20,
        "recipe_level": 10,
        "material_bonus": 10,
        "tool_bonus": 5,
        "facility_bonus": 5,
        "specialization_bonus": 0,
    }
    values.update(overrides)
    return CraftingContext(**values)


def _tier(quality: ItemQuality) -> QualityTier:
    return next(tier for tier in DEFAULT_QUALITY_TIERS if tier.quality == quality)


EFFECT_POOL = (
    SpecialEffect(
        "hair_trigger", "Hair Trigger", frozenset({CraftingCategory.WEAPON}), "speed", 0.1
    ),
    SpecialEffect(
        "true_aim", "True Aim", frozenset({CraftingCategory.WEAPON}), "accuracy", 0.15
    ),
    SpecialEffect(
        "featherweight",
        "Featherweight",
        frozenset({CraftingCategory.WEAPON, CraftingCategory.ARMOR}),
        "weight",
        -0.2,
    ),
    SpecialEffect(
        "potent_brew", "Potent Brew", frozenset({CraftingCategory.CONSUMABLE}), "potency", 0.3
    ),
)


class TestBaseChance:
    def test_equal_levels(self) -> None:
        assert base_chance(10, 10) == 20

    def test_skill_above_recipe(self) -> None:
        assert base_chance(20, 10) == 40

    def test_clamped_at_zero(self) -> None:
        assert base_chance(1, 50) == 0

    def test_clamped_at_sixty(self) -> None:
        assert base_chance(100, 1) == 60


class TestRollQuality:
    def test_superior_scenario(self) -> None:
        """40 base + 10 material + 5 tool + 5 facility + 10 luck = 70, SUPERIOR."""
        roll = roll_quality(_context(), luck_roll=10)

        assert roll.base_chance == 40
        assert roll.total_score == 70
        assert roll.final_quality == ItemQuality.SUPERIOR

    def test_breakdown_order_and_sum(self) -> None:
        roll = roll_quality(_context(), luck_roll=10)

        assert [entry.label for entry in roll.breakdown] == [
            "Base chance (skill 20 vs recipe 10)",
            "Material bonus",
            "Tool bonus",
            "Facility bonus",
            "Specialization bonus",
            "Luck roll",
        ]
        assert sum(entry.contribution for entry in roll.breakdown) == roll.total_score

    def test_breakdown_lines_are_readable(self) -> None:
        roll = roll_quality(_context(), luck_roll=10)
        assert roll.breakdown_lines()[-1] == "+10 Luck roll = 70"

    def test_masterwork(self) -> None:
        roll = roll_quality(
            _context(skill_level=50, material_bonus=20, tool_bonus=10, facility_bonus=10),
            luck_roll=0,
        )
        assert roll.total_score == 100
        assert roll.final_quality == ItemQuality.MASTERWORK

    def test_poor(self) -> None:
        roll = roll_quality(
            _context(skill_level=1, material_bonus=0, tool_bonus=0, facility_bonus=0),
            luck_roll=0,
        )
        assert roll.total_score == 2
        assert roll.final_quality == ItemQuality.POOR

    def test_monotonic_in_luck(self) -> None:
        context = _context(skill_level=5)
        orders = [
            roll_quality(context, luck_roll=luck).final_quality.order for luck in range(0, 21)
        ]
        assert orders == sorted(orders)

    def test_seeded_rng_reproduces(self) -> None:
        first = roll_quality(_context(), rng=random.Random(8))
        second = roll_quality(_context(), rng=random.Random(8))
        assert first == second

    def test_luck_within_configured_range(self) -> None:
        rng = random.Random(4)
        rolls = [roll_luck(rng) for _ in range(300)]
        assert min(rolls) >= 0
        assert max(rolls) <= 20

    def test_custom_tiers(self) -> None:
        tiers = (
            QualityTier(ItemQuality.COMMON, 0, 1.0, 1.0),
            QualityTier(ItemQuality.FINE, 80, 1.2, 1.2),
        )
        roll, tier = roll_quality_tier(_context(), luck_roll=10, tiers=tiers)

        assert roll.final_quality == ItemQuality.COMMON
        assert tier is tiers[0]


class TestSpecialEffects:
    def test_eligible_effects_filtered_and_sorted(self) -> None:
        eligible = eligible_effects(CraftingCategory.WEAPON, EFFECT_POOL)
        assert [effect.id for effect in eligible] == ["featherweight", "hair_trigger", "true_aim"]

    def test_poor_gets_no_effects(self) -> None:
        effects = assign_special_effects(
            _tier(ItemQuality.POOR), CraftingCategory.WEAPON, EFFECT_POOL, random.Random(1)
        )
        assert effects == ()

    def test_masterwork_gets_two_or_three(self) -> None:
        for seed in range(25):
            effects = assign_special_effects(
                _tier(ItemQuality.MASTERWORK),
                CraftingCategory.WEAPON,
                EFFECT_POOL,
                random.Random(seed),
            )
            assert 2 <= len(effects) <= 3
            assert len({effect.id for effect in effects}) == len(effects)
            assert all(CraftingCategory.WEAPON in effect.categories for effect in effects)

    def test_capped_by_pool_size(self) -> None:
        effects = assign_special_effects(
            _tier(ItemQuality.MASTERWORK),
            CraftingCategory.CONSUMABLE,
            EFFECT_POOL,
            random.Random(2),
        )
        assert [effect.id for effect in effects] == ["potent_brew"]

    def test_empty_pool(self) -> None:
        effects = assign_special_effects(
            _tier(ItemQuality.EXCEPTIONAL), CraftingCategory.TOOL, EFFECT_POOL, random.Random(2)
        )
        assert effects == ()


@pytest.mark.parametrize("quality", list(ItemQuality))
def test_default_tiers_cover_every_quality(quality: ItemQuality) -> None:
    assert _tier(quality).quality == quality
