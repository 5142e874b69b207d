from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class HandCategory(IntEnum):
    """Poker hand categories, ordered by strength."""

    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()


# Base strength per category, the starting point of every action score.
# Strictly increasing with the category.
CATEGORY_STRENGTH: dict[HandCategory, int] = {
    HandCategory.HIGH_CARD: 10,
    HandCategory.PAIR: 20,
    HandCategory.TWO_PAIR: 30,
    HandCategory.THREE_OF_A_KIND: 40,
    HandCategory.STRAIGHT: 50,
    HandCategory.FLUSH: 60,
    HandCategory.FULL_HOUSE: 70,
    HandCategory.FOUR_OF_A_KIND: 80,
    HandCategory.STRAIGHT_FLUSH: 90,
    HandCategory.ROYAL_FLUSH: 100,
}


@dataclass(frozen=True, slots=True)
class HandEvaluation:
    """
    Result of evaluating a hand.

    Attributes:
        category: Poker category of the best hand
        strength_score: Base score for the category (input to scoring)
        tiebreakers: Contributing ranks, most significant first
        description: Human-readable summary ("Pair of Jacks")
    """

    category: HandCategory
    strength_score: int
    tiebreakers: tuple[int, ...] = ()
    description: str = ""

    @property
    def sort_key(self) -> tuple[int, tuple[int, ...]]:
        return (int(self.category), self.tiebreakers)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.name,
            "strength_score": self.strength_score,
            "tiebreakers": list(self.tiebreakers),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HandEvaluation":
        return cls(
            category=HandCategory[data["category"]],
            strength_score=data["strength_score"],
            tiebreakers=tuple(data.get("tiebreakers", ())),
            description=data.get("description", ""),
        )
