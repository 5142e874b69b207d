"""
Masterwork Quality Engine.

Scores a crafting attempt and classifies it into a quality tier:

    total = base_chance + material + tool + facility + specialization + luck
    base_chance = clamp(20 + 2 * (skill_level - recipe_level), 0, 60)

The luck roll is a uniform integer in [luck_roll_min, luck_roll_max].
Every term lands in the breakdown in the order above, so the total can be
re-derived from the breakdown alone.
"""

import random
from collections.abc import Iterable, Sequence

from destinydeck.config import (
    BASE_CHANCE_MAX,
    BASE_CHANCE_MIN,
    BASE_CHANCE_OFFSET,
    BASE_CHANCE_PER_LEVEL,
    settings,
)
from destinydeck.engine.classifier import classify_tier, quality_table
from destinydeck.engine.scoring import ScoreLedger
from destinydeck.models.crafting import (
    DEFAULT_QUALITY_TIERS,
    CraftingCategory,
    CraftingContext,
    QualityRoll,
    QualityTier,
    SpecialEffect,
)


def base_chance(skill_level: int, recipe_level: int) -> int:
    """Skill-versus-recipe component of the quality score."""
    raw = BASE_CHANCE_OFFSET + BASE_CHANCE_PER_LEVEL * (skill_level - recipe_level)
    return max(BASE_CHANCE_MIN, min(BASE_CHANCE_MAX, raw))


def roll_luck(rng: random.Random) -> int:
    return rng.randint(settings.luck_roll_min, settings.luck_roll_max)


def roll_quality_tier(
    context: CraftingContext,
    *,
    rng: random.Random | None = None,
    luck_roll: int | None = None,
    tiers: Sequence[QualityTier] = DEFAULT_QUALITY_TIERS,
) -> tuple[QualityRoll, QualityTier]:
    """Score `context` and return the roll together with its tier."""
    if luck_roll is None:
        luck_roll = roll_luck(rng if rng is not None else random.Random())

    chance = base_chance(context.skill_level, context.recipe_level)
    ledger = ScoreLedger()
    ledger.add(
        chance, f"Base chance (skill {context.skill_level} vs recipe {context.recipe_level})"
    )
    ledger.add(context.material_bonus, "Material bonus")
    ledger.add(context.tool_bonus, "Tool bonus")
    ledger.add(context.facility_bonus, "Facility bonus")
    ledger.add(context.specialization_bonus, "Specialization bonus")
    ledger.add(luck_roll, "Luck roll")

    table = None if tiers is DEFAULT_QUALITY_TIERS else quality_table(tiers)
    tier = classify_tier(ledger.total, table)
    roll = QualityRoll(
        base_chance=chance,
        material_bonus=context.material_bonus,
        tool_bonus=context.tool_bonus,
        facility_bonus=context.facility_bonus,
        specialization_bonus=context.specialization_bonus,
        luck_roll=luck_roll,
        total_score=ledger.total,
        final_quality=tier.quality,
        breakdown=ledger.breakdown,
    )
    return roll, tier


def roll_quality(
    context: CraftingContext,
    *,
    rng: random.Random | None = None,
    luck_roll: int | None = None,
    tiers: Sequence[QualityTier] = DEFAULT_QUALITY_TIERS,
) -> QualityRoll:
    """
    Score a crafting attempt.

    Args:
        context: The crafting attempt
        rng: Random source for the luck roll (ignored when luck_roll is given)
        luck_roll: Fixed luck roll, for replays and tests
        tiers: Quality tier table, ascending by min_score

    Returns:
        QualityRoll with the total, final quality and breakdown
    """
    roll, _ = roll_quality_tier(context, rng=rng, luck_roll=luck_roll, tiers=tiers)
    return roll


def eligible_effects(
    category: CraftingCategory, pool: Iterable[SpecialEffect]
) -> list[SpecialEffect]:
    """Effects that apply to `category`, in stable id order."""
    return sorted(
        (effect for effect in pool if category in effect.categories),
        key=lambda effect: effect.id,
    )


def assign_special_effects(
    tier: QualityTier,
    category: CraftingCategory,
    pool: Iterable[SpecialEffect],
    rng: random.Random,
) -> tuple[SpecialEffect, ...]:
    """
    Draw special effects for an item of the given tier.

    Draws randint(min_effects, max_effects) distinct effects from the
    category's pool, capped by the pool size.
    """
    if tier.max_effects <= 0:
        return ()
    eligible = eligible_effects(category, pool)
    if not eligible:
        return ()
    count = min(rng.randint(tier.min_effects, tier.max_effects), len(eligible))
    return tuple(rng.sample(eligible, count))
