from destinydeck.db.database import init_db, session_scope
from destinydeck.db.operations import (
    apply_crime_consequences,
    apply_energy_and_cooldown,
    character_to_snapshot,
    crafted_item_to_model,
    create_character,
    get_character,
    get_crafted_items,
    list_action_results,
    result_to_model,
    save_action_result,
    save_character,
    save_crafted_item,
    snapshot_to_model,
)
from destinydeck.db.stores import SqlCharacterStore, SqlResultStore

__all__ = [
    "SqlCharacterStore",
    "SqlResultStore",
    "apply_crime_consequences",
    "apply_energy_and_cooldown",
    "character_to_snapshot",
    "crafted_item_to_model",
    "create_character",
    "get_character",
    "get_crafted_items",
    "init_db",
    "list_action_results",
    "result_to_model",
    "save_action_result",
    "save_character",
    "save_crafted_item",
    "session_scope",
    "snapshot_to_model",
]
