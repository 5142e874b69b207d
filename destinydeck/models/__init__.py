from destinydeck.models.action import (
    Action,
    ActionRequirements,
    ActionReward,
    ActionType,
    BonusKind,
    CooldownPolicy,
    CrimeProperties,
    SuitBonus,
)
from destinydeck.models.breakdown import BreakdownEntry
from destinydeck.models.card import STANDARD_DECK, Card, Hand, Rank, Suit
from destinydeck.models.character import ApplyStatus, CharacterSnapshot
from destinydeck.models.crafting import (
    DEFAULT_QUALITY_TIERS,
    CraftedItemData,
    CraftingCategory,
    CraftingContext,
    ItemQuality,
    QualityRoll,
    QualityTier,
    SpecialEffect,
)
from destinydeck.models.failure import (
    ActionNotFoundError,
    CatalogError,
    CharacterNotFoundError,
    ConcurrencyConflictError,
    DeckExhaustedError,
    FailureDetail,
    FailureKind,
    InsufficientCardsError,
    KnownError,
    OutcomeType,
    PreconditionError,
    PreconditionKind,
    ResolutionFailure,
    ResolutionResponse,
    ValidationError,
)
from destinydeck.models.hand import CATEGORY_STRENGTH, HandCategory, HandEvaluation
from destinydeck.models.result import ActionResult, AppliedSuitBonus, CrimeResolution

__all__ = [
    "Action",
    "ActionNotFoundError",
    "ActionRequirements",
    "ActionResult",
    "ActionReward",
    "ActionType",
    "AppliedSuitBonus",
    "ApplyStatus",
    "BonusKind",
    "BreakdownEntry",
    "CATEGORY_STRENGTH",
    "Card",
    "CatalogError",
    "CharacterNotFoundError",
    "CharacterSnapshot",
    "ConcurrencyConflictError",
    "CooldownPolicy",
    "CraftedItemData",
    "CraftingCategory",
    "CraftingContext",
    "CrimeProperties",
    "CrimeResolution",
    "DEFAULT_QUALITY_TIERS",
    "DeckExhaustedError",
    "FailureDetail",
    "FailureKind",
    "Hand",
    "HandCategory",
    "HandEvaluation",
    "InsufficientCardsError",
    "ItemQuality",
    "KnownError",
    "OutcomeType",
    "PreconditionError",
    "PreconditionKind",
    "QualityRoll",
    "QualityTier",
    "Rank",
    "ResolutionFailure",
    "ResolutionResponse",
    "STANDARD_DECK",
    "SpecialEffect",
    "Suit",
    "SuitBonus",
    "ValidationError",
]
