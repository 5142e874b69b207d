"""
Crafting orchestrator.

Turns a CraftingContext into a finished item: roll quality, scale stats and
durability by tier, draw special effects, then hand the item to the result
store and the crafter's inventory.
"""

import logging
import random
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from destinydeck.engine.quality import assign_special_effects, roll_quality_tier
from destinydeck.models.crafting import CraftedItemData, CraftingContext
from destinydeck.models.failure import FailureKind, ValidationError
from destinydeck.services.collaborators import ResultStore, RewardSink
from destinydeck.services.registry import ReferenceRegistry, get_registry

logger = logging.getLogger(__name__)

MAX_CUSTOM_NAME_LENGTH = 40


class CustomNameError(ValidationError):
    """A custom name was rejected."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=message,
            detail=detail,
            suggestion=f"Use 1-{MAX_CUSTOM_NAME_LENGTH} printable characters.",
        )


def clean_custom_name(name: str | None) -> str | None:
    """
    Normalize a requested custom name.

    Raises:
        CustomNameError: If the name is blank, too long or unprintable
    """
    if name is None:
        return None
    cleaned = " ".join(name.split())
    if not cleaned:
        raise CustomNameError("Custom names cannot be blank.")
    if len(cleaned) > MAX_CUSTOM_NAME_LENGTH:
        raise CustomNameError(
            "Custom name is too long.",
            detail=f"length={len(cleaned)} max={MAX_CUSTOM_NAME_LENGTH}",
        )
    if not cleaned.isprintable():
        raise CustomNameError("Custom name contains unprintable characters.")
    return cleaned


class MasterworkCrafter:
    """Crafts items through the Masterwork Quality Engine."""

    def __init__(
        self,
        result_store: ResultStore,
        reward_sink: RewardSink,
        registry: ReferenceRegistry | None = None,
        *,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self.result_store = result_store
        self.reward_sink = reward_sink
        self._registry = registry
        self.clock = clock
        self.id_factory = id_factory

    @property
    def registry(self) -> ReferenceRegistry:
        if self._registry is None:
            self._registry = get_registry()
        return self._registry

    async def craft(
        self,
        context: CraftingContext,
        *,
        seed: int | None = None,
        luck_roll: int | None = None,
    ) -> CraftedItemData:
        """
        Craft one item.

        The custom name is kept only when the resulting tier allows naming;
        an invalid name is rejected before anything is rolled.
        """
        custom_name = clean_custom_name(context.custom_name)
        rng = random.Random(seed)

        roll, tier = roll_quality_tier(
            context,
            rng=rng,
            luck_roll=luck_roll,
            tiers=self.registry.quality_tiers,
        )
        effects = assign_special_effects(
            tier,
            context.category,
            self.registry.effects_for(context.category),
            rng,
        )
        max_durability = max(1, int(context.base_durability * tier.durability_multiplier))

        item = CraftedItemData(
            item_id=self.id_factory(),
            character_id=context.character_id,
            recipe_id=context.recipe_id,
            name=context.item_name,
            category=context.category,
            quality=roll.final_quality,
            stat_multiplier=tier.stat_multiplier,
            durability=max_durability,
            max_durability=max_durability,
            special_effects=effects,
            quality_roll=roll,
            crafted_at=self.clock(),
            custom_name=custom_name if tier.allows_custom_name else None,
        )

        await self.result_store.save_crafted_item(item)
        await self.reward_sink.grant_item(item)

        logger.info(
            "ITEM_CRAFTED",
            extra={
                "character_id": context.character_id,
                "recipe_id": context.recipe_id,
                "quality": roll.final_quality.value,
                "total_score": roll.total_score,
                "special_effects": [effect.id for effect in effects],
            },
        )
        return item
