"""
Reference-data registry.

Actions, quality tiers and special effects are loaded once and shared
read-only by every resolution. Lookups hand out frozen dataclasses and
MappingProxyType views, so nothing downstream can mutate the tables.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from destinydeck.config import settings
from destinydeck.engine.classifier import ThresholdTable, quality_table
from destinydeck.models.action import Action, ActionType
from destinydeck.models.catalog import CatalogSpec
from destinydeck.models.crafting import (
    DEFAULT_QUALITY_TIERS,
    CraftingCategory,
    QualityTier,
    SpecialEffect,
)
from destinydeck.models.failure import ActionNotFoundError, CatalogError
from destinydeck.services.starter_catalog import STARTER_CATALOG

logger = logging.getLogger(__name__)


class ReferenceRegistry:
    """
    Read-only tables of static game data.

    Raises CatalogError on construction if ids repeat or tiers are not
    strictly ascending by min_score.
    """

    def __init__(
        self,
        actions: Iterable[Action],
        quality_tiers: Iterable[QualityTier] = DEFAULT_QUALITY_TIERS,
        special_effects: Iterable[SpecialEffect] = (),
    ):
        self._actions = MappingProxyType(_index_unique(actions, "action"))
        self._effects = MappingProxyType(_index_unique(special_effects, "special effect"))

        tiers = tuple(quality_tiers)
        if not tiers:
            raise CatalogError("Catalog defines no quality tiers")
        try:
            self._quality_table = quality_table(tiers)
        except ValueError as e:
            raise CatalogError(
                "Quality tiers must be strictly ascending by min_score", str(e)
            ) from e
        qualities = [tier.quality for tier in tiers]
        if len(set(qualities)) != len(qualities):
            raise CatalogError("Quality tiers repeat a quality level")
        self._quality_tiers = tiers

    @property
    def actions(self) -> Mapping[str, Action]:
        return self._actions

    @property
    def special_effects(self) -> Mapping[str, SpecialEffect]:
        return self._effects

    @property
    def quality_tiers(self) -> tuple[QualityTier, ...]:
        return self._quality_tiers

    @property
    def quality_table(self) -> ThresholdTable[QualityTier]:
        return self._quality_table

    def get_action(self, action_id: str) -> Action:
        try:
            return self._actions[action_id]
        except KeyError:
            raise ActionNotFoundError(action_id) from None

    def actions_by_type(self, action_type: ActionType, *, active_only: bool = True) -> list[Action]:
        """Actions of one type, easiest first."""
        matching = [
            action
            for action in self._actions.values()
            if action.type == action_type and (action.is_active or not active_only)
        ]
        return sorted(matching, key=lambda action: (action.difficulty, action.id))

    def effects_for(self, category: CraftingCategory) -> list[SpecialEffect]:
        return [effect for effect in self._effects.values() if category in effect.categories]

    @classmethod
    def from_spec(cls, spec: CatalogSpec) -> "ReferenceRegistry":
        tiers = [tier.to_tier() for tier in spec.quality_tiers] or list(DEFAULT_QUALITY_TIERS)
        return cls(
            actions=[action.to_action() for action in spec.actions],
            quality_tiers=tiers,
            special_effects=[effect.to_effect() for effect in spec.special_effects],
        )

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> "ReferenceRegistry":
        """
        Validate a raw catalog document and build a registry from it.

        Raises:
            CatalogError: If the document fails validation
        """
        try:
            spec = CatalogSpec.from_data(data)
        except PydanticValidationError as e:
            raise CatalogError(
                "Catalog failed validation",
                detail=f"{e.error_count()} errors: {e.errors()[0]['loc']}",
            ) from e
        return cls.from_spec(spec)


def _index_unique(records: Iterable[Any], kind: str) -> dict[str, Any]:
    indexed: dict[str, Any] = {}
    for record in records:
        if record.id in indexed:
            raise CatalogError(f"Duplicate {kind} id: {record.id}", detail=f"id={record.id}")
        indexed[record.id] = record
    return indexed


def load_registry(path: str | Path | None = None) -> ReferenceRegistry:
    """
    Load reference data from a JSON catalog.

    Args:
        path: Catalog file. None loads the built-in starter catalog.

    Raises:
        CatalogError: If the file is missing, unreadable or invalid
    """
    if path is None:
        registry = ReferenceRegistry.from_data(STARTER_CATALOG)
        source = "starter"
    else:
        catalog_path = Path(path)
        try:
            with open(catalog_path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CatalogError(f"Catalog not found at {catalog_path}") from e
        except json.JSONDecodeError as e:
            raise CatalogError(f"Catalog at {catalog_path} is not valid JSON", str(e)) from e
        registry = ReferenceRegistry.from_data(data)
        source = str(catalog_path)

    logger.info(
        "CATALOG_LOADED",
        extra={
            "source": source,
            "actions": len(registry.actions),
            "quality_tiers": len(registry.quality_tiers),
            "special_effects": len(registry.special_effects),
        },
    )
    return registry


# =============================================================================
# GLOBAL REGISTRY INSTANCE
# =============================================================================


@lru_cache(maxsize=1)
def get_registry() -> ReferenceRegistry:
    """
    Get the process-wide registry.

    Loaded from the configured catalog on first use and cached after.
    """
    return load_registry(settings.catalog_path)


def reset_registry() -> None:
    """Drop the cached registry so the next lookup reloads it (for testing)."""
    get_registry.cache_clear()
