"""
DestinyDeck services.

Orchestration of action attempts and crafting on top of the pure engines.
"""

from destinydeck.services.action_resolver import ActionResolver, validate_preconditions
from destinydeck.services.collaborators import (
    CharacterStateStore,
    HistoryQuery,
    InMemoryCharacterStore,
    InMemoryResultStore,
    InMemoryRewardLedger,
    ResultStore,
    RewardSink,
    TimeOfDayService,
)
from destinydeck.services.crafting import CustomNameError, MasterworkCrafter
from destinydeck.services.registry import (
    ReferenceRegistry,
    get_registry,
    load_registry,
    reset_registry,
)
from destinydeck.services.time_of_day import (
    ClockTimeOfDayService,
    FixedTimeOfDayService,
    TimePeriod,
)

__all__ = [
    # Orchestrators
    "ActionResolver",
    "MasterworkCrafter",
    "CustomNameError",
    "validate_preconditions",
    # Collaborator interfaces
    "CharacterStateStore",
    "HistoryQuery",
    "ResultStore",
    "RewardSink",
    "TimeOfDayService",
    # In-memory implementations
    "InMemoryCharacterStore",
    "InMemoryResultStore",
    "InMemoryRewardLedger",
    # Reference data
    "ReferenceRegistry",
    "get_registry",
    "load_registry",
    "reset_registry",
    # Time of day
    "ClockTimeOfDayService",
    "FixedTimeOfDayService",
    "TimePeriod",
]
