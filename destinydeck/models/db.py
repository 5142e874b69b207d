"""
SQLAlchemy ORM models for persistent storage.

Models mirror the dataclass models but add database persistence. Results and
items keep their full to_dict() form in `payload`; the scalar columns exist
for filtering and ordering.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CharacterStateDB(Base):
    """
    The slice of character state that action resolution reads and mutates.

    `version` increases on every mutation and guards conditional updates.
    """

    __tablename__ = "character_states"

    character_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    energy: Mapped[int] = mapped_column(Integer, default=0)
    level: Mapped[int] = mapped_column(Integer, default=1)

    # action_id -> ISO timestamp the cooldown ends
    cooldowns: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    skills: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    unlocked: Mapped[list[str]] = mapped_column(JSON, default=list)
    suit_bonuses: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)

    location_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    jailed_until: Mapped[str | None] = mapped_column(String(64), nullable=True)
    wanted_level: Mapped[int] = mapped_column(Integer, default=0)
    version: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<CharacterStateDB(id={self.character_id}, version={self.version})>"


class ActionResultDB(Base):
    """One resolved action attempt."""

    __tablename__ = "action_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    character_id: Mapped[str] = mapped_column(String(255), index=True)
    action_id: Mapped[str] = mapped_column(String(255), index=True)
    action_type: Mapped[str] = mapped_column(String(20), index=True)
    success: Mapped[bool] = mapped_column(Boolean, index=True)
    total_score: Mapped[int] = mapped_column(Integer)
    target_score: Mapped[int] = mapped_column(Integer)
    margin: Mapped[int] = mapped_column(Integer)
    reward_multiplier: Mapped[float] = mapped_column(Float, default=0.0)
    energy_spent: Mapped[int] = mapped_column(Integer, default=0)

    # UTC timestamp of the attempt, ISO formatted so it sorts lexically
    resolved_at: Mapped[str] = mapped_column(String(64), index=True)

    payload: Mapped[dict[str, Any]] = mapped_column(JSON)

    def __repr__(self) -> str:
        return (
            f"<ActionResultDB(character={self.character_id}, action={self.action_id}, "
            f"success={self.success})>"
        )


class CraftedItemDB(Base):
    """A crafted item."""

    __tablename__ = "crafted_items"

    item_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    character_id: Mapped[str] = mapped_column(String(255), index=True)
    recipe_id: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(255))
    custom_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    category: Mapped[str] = mapped_column(String(20))
    quality: Mapped[str] = mapped_column(String(20), index=True)
    total_score: Mapped[int] = mapped_column(Integer)
    crafted_at: Mapped[str] = mapped_column(String(64), index=True)

    payload: Mapped[dict[str, Any]] = mapped_column(JSON)

    def __repr__(self) -> str:
        return f"<CraftedItemDB(id={self.item_id}, quality={self.quality})>"
