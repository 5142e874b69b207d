from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType

from destinydeck.models.action import SuitBonus


class ApplyStatus(str, Enum):
    """Outcome of an atomic check-and-apply on character state."""

    OK = "ok"
    CONFLICT = "conflict"


@dataclass(frozen=True, slots=True)
class CharacterSnapshot:
    """
    Point-in-time view of the character state an attempt depends on.

    `version` increases on every mutation; the resolver hands it back to the
    store so a mutation based on a stale snapshot is rejected.

    Attributes:
        character_id: Character identifier
        energy: Current energy
        level: Character level
        cooldowns: Action id -> time the cooldown ends
        skills: Skill name -> level
        unlocked: Unlock flags the character holds
        suit_bonuses: Suit affinities from the character's skills
        location_id: Where the character currently is
        jailed_until: End of the current jail sentence, if any
        wanted_level: Current wanted level
        version: Optimistic concurrency version
    """

    character_id: str
    energy: int
    level: int
    cooldowns: Mapping[str, datetime] = field(default_factory=lambda: MappingProxyType({}))
    skills: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    unlocked: frozenset[str] = frozenset()
    suit_bonuses: tuple[SuitBonus, ...] = ()
    location_id: str | None = None
    jailed_until: datetime | None = None
    wanted_level: int = 0
    version: int = 0

    def cooldown_until(self, action_id: str) -> datetime | None:
        return self.cooldowns.get(action_id)

    def is_jailed(self, now: datetime) -> bool:
        return self.jailed_until is not None and self.jailed_until > now
