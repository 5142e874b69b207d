"""
Collaborator interfaces consumed by the orchestrators.

The resolvers never touch storage directly; they talk to these protocols.

Implementations:
- InMemoryCharacterStore / InMemoryResultStore / InMemoryRewardLedger:
  process-local state (tests, simulations)
- SqlCharacterStore / SqlResultStore (destinydeck.db.stores): SQLAlchemy
"""

import asyncio
from collections import defaultdict
from dataclasses import replace
from datetime import datetime
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from destinydeck.config import DEFAULT_HISTORY_LIMIT, MAX_HISTORY_LIMIT, MAX_WANTED_LEVEL
from destinydeck.models.action import ActionReward, ActionType
from destinydeck.models.character import ApplyStatus, CharacterSnapshot
from destinydeck.models.crafting import CraftedItemData
from destinydeck.models.failure import CharacterNotFoundError
from destinydeck.models.result import ActionResult


class HistoryQuery(BaseModel):
    """Filters and pagination for action history."""

    character_id: str | None = None
    action_type: ActionType | None = None
    success: bool | None = None
    limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=1, le=MAX_HISTORY_LIMIT)
    offset: int = Field(default=0, ge=0)

    def matches(self, result: ActionResult) -> bool:
        if self.character_id is not None and result.character_id != self.character_id:
            return False
        if self.action_type is not None and result.action_type != self.action_type:
            return False
        if self.success is not None and result.success != self.success:
            return False
        return True


@runtime_checkable
class CharacterStateStore(Protocol):
    """Character state the resolver reads and atomically mutates."""

    async def get_energy_level_cooldown(self, character_id: str) -> CharacterSnapshot:
        """Current snapshot. Raises CharacterNotFoundError if unknown."""
        ...

    async def apply_energy_and_cooldown(
        self,
        character_id: str,
        cost: int,
        action_id: str,
        cooldown_until: datetime | None,
        expected_version: int,
    ) -> ApplyStatus:
        """
        Deduct energy and set the cooldown as one atomic step.

        Returns CONFLICT without changing anything if the character's version
        moved past `expected_version` or its energy no longer covers `cost`.
        """
        ...

    async def apply_crime_consequences(
        self,
        character_id: str,
        jail_until: datetime | None,
        wanted_level_delta: int,
    ) -> None:
        """Record jail time and wanted level after a caught crime."""
        ...


@runtime_checkable
class TimeOfDayService(Protocol):
    async def get_crime_detection_modifier(self, location_id: str | None, now: datetime) -> float:
        """Multiplier applied to witness chances at a location and time."""
        ...


@runtime_checkable
class RewardSink(Protocol):
    async def grant_rewards(self, character_id: str, reward: ActionReward) -> None:
        """Credit xp, gold and items to a character."""
        ...

    async def grant_item(self, item: CraftedItemData) -> None:
        """Place a crafted item in its crafter's inventory."""
        ...


@runtime_checkable
class ResultStore(Protocol):
    async def save_action_result(self, result: ActionResult) -> None:
        """Persist a finished attempt."""
        ...

    async def save_crafted_item(self, item: CraftedItemData) -> None:
        """Persist a crafted item."""
        ...

    async def list_action_results(self, query: HistoryQuery) -> list[ActionResult]:
        """Matching results, newest first."""
        ...


# =============================================================================
# IN-MEMORY IMPLEMENTATIONS
# =============================================================================


class InMemoryCharacterStore:
    """
    Character state held in a dict.

    Mutations for one character are serialized by that character's lock;
    different characters never contend.
    """

    def __init__(self, characters: list[CharacterSnapshot] | None = None):
        self._characters: dict[str, CharacterSnapshot] = {}
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        for character in characters or []:
            self.put(character)

    def put(self, snapshot: CharacterSnapshot) -> None:
        """Insert or replace a character."""
        self._characters[snapshot.character_id] = snapshot

    async def save(self, snapshot: CharacterSnapshot) -> None:
        self.put(snapshot)

    def get(self, character_id: str) -> CharacterSnapshot:
        try:
            return self._characters[character_id]
        except KeyError:
            raise CharacterNotFoundError(character_id) from None

    async def get_energy_level_cooldown(self, character_id: str) -> CharacterSnapshot:
        return self.get(character_id)

    async def apply_energy_and_cooldown(
        self,
        character_id: str,
        cost: int,
        action_id: str,
        cooldown_until: datetime | None,
        expected_version: int,
    ) -> ApplyStatus:
        async with self._locks[character_id]:
            current = self.get(character_id)
            if current.version != expected_version or current.energy < cost:
                return ApplyStatus.CONFLICT

            cooldowns = dict(current.cooldowns)
            if cooldown_until is not None:
                cooldowns[action_id] = cooldown_until
            self._characters[character_id] = replace(
                current,
                energy=current.energy - cost,
                cooldowns=MappingProxyType(cooldowns),
                version=current.version + 1,
            )
            return ApplyStatus.OK

    async def apply_crime_consequences(
        self,
        character_id: str,
        jail_until: datetime | None,
        wanted_level_delta: int,
    ) -> None:
        async with self._locks[character_id]:
            current = self.get(character_id)
            self._characters[character_id] = replace(
                current,
                jailed_until=jail_until if jail_until is not None else current.jailed_until,
                wanted_level=min(MAX_WANTED_LEVEL, current.wanted_level + wanted_level_delta),
                version=current.version + 1,
            )


class InMemoryResultStore:
    """Results and crafted items kept in insertion order."""

    def __init__(self) -> None:
        self.results: list[ActionResult] = []
        self.items: list[CraftedItemData] = []

    async def save_action_result(self, result: ActionResult) -> None:
        self.results.append(result)

    async def save_crafted_item(self, item: CraftedItemData) -> None:
        self.items.append(item)

    async def list_action_results(self, query: HistoryQuery) -> list[ActionResult]:
        matching = [result for result in reversed(self.results) if query.matches(result)]
        # Stable sort keeps later inserts first among equal timestamps
        matching.sort(key=lambda result: result.timestamp, reverse=True)
        return matching[query.offset : query.offset + query.limit]


class InMemoryRewardLedger:
    """Accumulates granted rewards per character."""

    def __init__(self) -> None:
        self.xp: defaultdict[str, int] = defaultdict(int)
        self.gold: defaultdict[str, int] = defaultdict(int)
        self.items: defaultdict[str, list[str]] = defaultdict(list)
        self.crafted: defaultdict[str, list[CraftedItemData]] = defaultdict(list)

    async def grant_rewards(self, character_id: str, reward: ActionReward) -> None:
        self.xp[character_id] += reward.xp
        self.gold[character_id] += reward.gold
        self.items[character_id].extend(reward.items)

    async def grant_item(self, item: CraftedItemData) -> None:
        self.crafted[item.character_id].append(item)
