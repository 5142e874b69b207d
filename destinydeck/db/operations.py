"""
Database CRUD operations.

Provides async functions for character state, action results and crafted
items. Callers own the transaction: these functions flush but never commit.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from types import MappingProxyType

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from destinydeck.config import MAX_WANTED_LEVEL
from destinydeck.models.action import BonusKind, SuitBonus
from destinydeck.models.card import Suit
from destinydeck.models.character import CharacterSnapshot
from destinydeck.models.crafting import CraftedItemData
from destinydeck.models.db import ActionResultDB, CharacterStateDB, CraftedItemDB
from destinydeck.models.result import ActionResult
from destinydeck.services.collaborators import HistoryQuery


def to_utc_iso(moment: datetime) -> str:
    """UTC ISO timestamp; lexical order matches chronological order."""
    return moment.astimezone(UTC).isoformat()


def _parse_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


# --- Character State Operations ---


async def get_character(session: AsyncSession, character_id: str) -> CharacterStateDB | None:
    """
    Get a character's state by id.

    Always reloads from the database so conditional updates issued earlier in
    the same session are visible.
    """
    result = await session.execute(
        select(CharacterStateDB)
        .where(CharacterStateDB.character_id == character_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create_character(session: AsyncSession, snapshot: CharacterSnapshot) -> CharacterStateDB:
    """
    Create a character from a snapshot.

    Raises IntegrityError if the character already exists.
    """
    character = snapshot_to_model(snapshot)
    session.add(character)
    await session.flush()
    return character


async def save_character(session: AsyncSession, snapshot: CharacterSnapshot) -> CharacterStateDB:
    """Insert or overwrite a character, version included."""
    character = await session.merge(snapshot_to_model(snapshot))
    await session.flush()
    return character


async def apply_energy_and_cooldown(
    session: AsyncSession,
    character_id: str,
    cost: int,
    action_id: str,
    cooldown_until: datetime | None,
    expected_version: int,
) -> bool:
    """
    Deduct energy and record a cooldown if the character is unchanged.

    The UPDATE is conditional on the version and on the energy still covering
    the cost, so a stale snapshot can never be applied.

    Returns:
        True if the row was updated, False on a version or energy conflict
    """
    character = await get_character(session, character_id)
    if character is None or character.version != expected_version:
        return False

    cooldowns = dict(character.cooldowns or {})
    if cooldown_until is not None:
        cooldowns[action_id] = to_utc_iso(cooldown_until)

    result = await session.execute(
        update(CharacterStateDB)
        .where(
            CharacterStateDB.character_id == character_id,
            CharacterStateDB.version == expected_version,
            CharacterStateDB.energy >= cost,
        )
        .values(
            energy=CharacterStateDB.energy - cost,
            cooldowns=cooldowns,
            version=CharacterStateDB.version + 1,
        )
        .execution_options(synchronize_session=False)
    )
    # rowcount is available on UPDATE results; type stubs incomplete for async
    return int(result.rowcount) == 1  # type: ignore[attr-defined]


async def apply_crime_consequences(
    session: AsyncSession,
    character_id: str,
    jail_until: datetime | None,
    wanted_level_delta: int,
) -> CharacterStateDB | None:
    """
    Record jail time and raise the wanted level (capped).

    Returns None if the character does not exist.
    """
    character = await get_character(session, character_id)
    if character is None:
        return None

    if jail_until is not None:
        character.jailed_until = to_utc_iso(jail_until)
    character.wanted_level = min(MAX_WANTED_LEVEL, character.wanted_level + wanted_level_delta)
    character.version = character.version + 1
    await session.flush()
    return character


def snapshot_to_model(snapshot: CharacterSnapshot) -> CharacterStateDB:
    """Convert a domain snapshot to a database row."""
    return CharacterStateDB(
        character_id=snapshot.character_id,
        energy=snapshot.energy,
        level=snapshot.level,
        cooldowns={
            action_id: to_utc_iso(until) for action_id, until in snapshot.cooldowns.items()
        },
        skills=dict(snapshot.skills),
        unlocked=sorted(snapshot.unlocked),
        suit_bonuses=[
            {
                "suit": bonus.suit.value,
                "bonus": bonus.bonus,
                "kind": bonus.kind.value,
                "source": bonus.source,
            }
            for bonus in snapshot.suit_bonuses
        ],
        location_id=snapshot.location_id,
        jailed_until=to_utc_iso(snapshot.jailed_until) if snapshot.jailed_until else None,
        wanted_level=snapshot.wanted_level,
        version=snapshot.version,
    )


def character_to_snapshot(character: CharacterStateDB) -> CharacterSnapshot:
    """Convert a database row to a domain snapshot."""
    cooldowns: Mapping[str, datetime] = MappingProxyType(
        {
            action_id: datetime.fromisoformat(until)
            for action_id, until in (character.cooldowns or {}).items()
        }
    )
    return CharacterSnapshot(
        character_id=character.character_id,
        energy=character.energy,
        level=character.level,
        cooldowns=cooldowns,
        skills=MappingProxyType(dict(character.skills or {})),
        unlocked=frozenset(character.unlocked or ()),
        suit_bonuses=tuple(
            SuitBonus(
                suit=Suit(bonus["suit"]),
                bonus=bonus["bonus"],
                kind=BonusKind(bonus.get("kind", BonusKind.FLAT.value)),
                source=bonus.get("source", ""),
            )
            for bonus in character.suit_bonuses or ()
        ),
        location_id=character.location_id,
        jailed_until=_parse_iso(character.jailed_until),
        wanted_level=character.wanted_level,
        version=character.version,
    )


# --- Action Result Operations ---


async def save_action_result(session: AsyncSession, result: ActionResult) -> ActionResultDB:
    """Insert a resolved attempt."""
    row = ActionResultDB(
        character_id=result.character_id,
        action_id=result.action_id,
        action_type=result.action_type.value,
        success=result.success,
        total_score=result.total_score,
        target_score=result.target_score,
        margin=result.margin,
        reward_multiplier=result.reward_multiplier,
        energy_spent=result.energy_spent,
        resolved_at=to_utc_iso(result.timestamp),
        payload=result.to_dict(),
    )
    session.add(row)
    await session.flush()
    return row


async def list_action_results(session: AsyncSession, query: HistoryQuery) -> list[ActionResultDB]:
    """Results matching the query's filters, newest first, paginated."""
    statement = select(ActionResultDB)
    if query.character_id is not None:
        statement = statement.where(ActionResultDB.character_id == query.character_id)
    if query.action_type is not None:
        statement = statement.where(ActionResultDB.action_type == query.action_type.value)
    if query.success is not None:
        statement = statement.where(ActionResultDB.success == query.success)

    result = await session.execute(
        statement.order_by(ActionResultDB.resolved_at.desc(), ActionResultDB.id.desc())
        .offset(query.offset)
        .limit(query.limit)
    )
    return list(result.scalars().all())


def result_to_model(row: ActionResultDB) -> ActionResult:
    """Convert a database result to a domain model."""
    return ActionResult.from_dict(row.payload)


# --- Crafted Item Operations ---


async def save_crafted_item(session: AsyncSession, item: CraftedItemData) -> CraftedItemDB:
    """Insert a crafted item."""
    row = CraftedItemDB(
        item_id=item.item_id,
        character_id=item.character_id,
        recipe_id=item.recipe_id,
        name=item.name,
        custom_name=item.custom_name,
        category=item.category.value,
        quality=item.quality.value,
        total_score=item.quality_roll.total_score,
        crafted_at=to_utc_iso(item.crafted_at),
        payload=item.to_dict(),
    )
    session.add(row)
    await session.flush()
    return row


async def get_crafted_items(
    session: AsyncSession, character_id: str, limit: int = 50
) -> list[CraftedItemDB]:
    """A character's crafted items, newest first."""
    result = await session.execute(
        select(CraftedItemDB)
        .where(CraftedItemDB.character_id == character_id)
        .order_by(CraftedItemDB.crafted_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


def crafted_item_to_model(row: CraftedItemDB) -> CraftedItemData:
    """Convert a database item to a domain model."""
    return CraftedItemData.from_dict(row.payload)
