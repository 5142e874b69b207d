from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "DestinyDeck"
    debug: bool = False

    database_url: str = "sqlite+aiosqlite:///./destinydeck.db"

    # JSON catalog of actions, quality tiers and special effects.
    # When unset the built-in starter catalog is used.
    catalog_path: str | None = None

    # Cards dealt per action attempt
    hand_size: int = Field(default=5, ge=1)

    # Reward scaling: each full `reward_margin_step` points of margin above the
    # target adds `reward_step_bonus` to the multiplier, capped at the maximum.
    reward_margin_step: int = 10
    reward_step_bonus: float = 0.1
    max_reward_multiplier: float = 2.0

    # Crafting luck roll bounds (inclusive, uniform)
    luck_roll_min: int = 0
    luck_roll_max: int = 20


settings = Settings()


# =============================================================================
# DESTINY DECK
# =============================================================================

DECK_SIZE = 52

# Largest hand the evaluator scores directly; larger hands use the best subset
POKER_HAND_SIZE = 5


# =============================================================================
# MASTERWORK BASE CHANCE
# =============================================================================

# base chance = BASE + PER_LEVEL * (skill level - recipe level), clamped
BASE_CHANCE_OFFSET = 20
BASE_CHANCE_PER_LEVEL = 2
BASE_CHANCE_MIN = 0
BASE_CHANCE_MAX = 60


# =============================================================================
# CHARACTER STATE
# =============================================================================

MAX_WANTED_LEVEL = 5

# History queries
DEFAULT_HISTORY_LIMIT = 20
MAX_HISTORY_LIMIT = 100
