"""
SQL-backed collaborators.

Adapt the CRUD operations to the CharacterStateStore and ResultStore
protocols. Each call runs in its own session and commits before returning.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from destinydeck.db import operations
from destinydeck.db.database import async_session_factory, session_scope
from destinydeck.models.character import ApplyStatus, CharacterSnapshot
from destinydeck.models.crafting import CraftedItemData
from destinydeck.models.failure import CharacterNotFoundError
from destinydeck.models.result import ActionResult
from destinydeck.services.collaborators import HistoryQuery


class SqlCharacterStore:
    """Character state in the `character_states` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None):
        self.session_factory = session_factory or async_session_factory

    async def create(self, snapshot: CharacterSnapshot) -> None:
        async with session_scope(self.session_factory) as session:
            await operations.create_character(session, snapshot)

    async def save(self, snapshot: CharacterSnapshot) -> None:
        """Insert or replace a character."""
        async with session_scope(self.session_factory) as session:
            await operations.save_character(session, snapshot)

    async def get_energy_level_cooldown(self, character_id: str) -> CharacterSnapshot:
        async with session_scope(self.session_factory) as session:
            character = await operations.get_character(session, character_id)
            if character is None:
                raise CharacterNotFoundError(character_id)
            return operations.character_to_snapshot(character)

    async def apply_energy_and_cooldown(
        self,
        character_id: str,
        cost: int,
        action_id: str,
        cooldown_until: datetime | None,
        expected_version: int,
    ) -> ApplyStatus:
        async with session_scope(self.session_factory) as session:
            applied = await operations.apply_energy_and_cooldown(
                session, character_id, cost, action_id, cooldown_until, expected_version
            )
        return ApplyStatus.OK if applied else ApplyStatus.CONFLICT

    async def apply_crime_consequences(
        self,
        character_id: str,
        jail_until: datetime | None,
        wanted_level_delta: int,
    ) -> None:
        async with session_scope(self.session_factory) as session:
            character = await operations.apply_crime_consequences(
                session, character_id, jail_until, wanted_level_delta
            )
            if character is None:
                raise CharacterNotFoundError(character_id)


class SqlResultStore:
    """Action results and crafted items in their tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None):
        self.session_factory = session_factory or async_session_factory

    async def save_action_result(self, result: ActionResult) -> None:
        async with session_scope(self.session_factory) as session:
            await operations.save_action_result(session, result)

    async def save_crafted_item(self, item: CraftedItemData) -> None:
        async with session_scope(self.session_factory) as session:
            await operations.save_crafted_item(session, item)

    async def list_action_results(self, query: HistoryQuery) -> list[ActionResult]:
        async with session_scope(self.session_factory) as session:
            rows = await operations.list_action_results(session, query)
            return [operations.result_to_model(row) for row in rows]

    async def list_crafted_items(self, character_id: str, limit: int = 50) -> list[CraftedItemData]:
        async with session_scope(self.session_factory) as session:
            rows = await operations.get_crafted_items(session, character_id, limit)
            return [operations.crafted_item_to_model(row) for row in rows]
