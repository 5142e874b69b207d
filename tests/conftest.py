from datetime import UTC, datetime

import pytest

from destinydeck.models.action import (
    Action,
    ActionReward,
    ActionType,
    CrimeProperties,
    SuitBonus,
)
from destinydeck.models.card import Suit
from destinydeck.models.character import CharacterSnapshot
from destinydeck.services.registry import ReferenceRegistry, reset_registry

FIXED_NOW = datetime(2026, 3, 14, 22, 30, tzinfo=UTC)


@pytest.fixture(autouse=True)
def clear_registry():
    """Drop the process-wide registry between tests."""
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def bar_brawl() -> Action:
    """A plain combat action with a flat Clubs bonus."""
    return Action(
        id="bar_brawl",
        name="Bar Brawl",
        type=ActionType.COMBAT,
        difficulty=40,
        energy_cost=15,
        target_score=50,
        rewards=ActionReward(xp=40, gold=20),
        suit_bonuses=(SuitBonus(suit=Suit.CLUBS, bonus=15, source="Brawler"),),
    )


@pytest.fixture
def pickpocket() -> Action:
    """A crime that is always witnessed and always jails on failure."""
    return Action(
        id="pickpocket_drunk",
        name="Pickpocket Drunk",
        type=ActionType.CRIME,
        difficulty=25,
        energy_cost=10,
        target_score=200,
        rewards=ActionReward(xp=10, gold=10),
        crime=CrimeProperties(
            witness_chance=100,
            jail_chance=100,
            jail_time_on_failure=30,
            wanted_level_increase=1,
            bail_cost=50,
        ),
    )


@pytest.fixture
def registry(bar_brawl: Action, pickpocket: Action) -> ReferenceRegistry:
    return ReferenceRegistry(actions=[bar_brawl, pickpocket])


@pytest.fixture
def outlaw() -> CharacterSnapshot:
    """A character able to attempt every fixture action."""
    return CharacterSnapshot(
        character_id="outlaw-1",
        energy=100,
        level=10,
        location_id="red_gulch",
    )
