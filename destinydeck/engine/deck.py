"""
The Destiny Deck.

A standard 52-card deck with a shuffle/draw protocol. Randomness comes from
an injected random.Random so a fixed seed reproduces the same order.

INVARIANTS:
- No card appears twice between shuffles
- The deck only shrinks between shuffles; redrawing needs an explicit shuffle
- A failed draw removes nothing
"""

import random

from destinydeck.config import settings
from destinydeck.models.card import STANDARD_DECK, Card, Hand
from destinydeck.models.failure import InsufficientCardsError


class Deck:
    """Shuffled 52-card deck. One instance per resolution; never shared."""

    def __init__(self, rng: random.Random | None = None, seed: int | None = None):
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        self._rng = rng if rng is not None else random.Random(seed)
        self._cards: list[Card] = []
        self.shuffle()

    def shuffle(self) -> None:
        """Reset to all 52 cards in a uniformly random order."""
        self._cards = list(STANDARD_DECK)
        self._rng.shuffle(self._cards)

    def draw(self, n: int = 1) -> tuple[Card, ...]:
        """
        Remove and return the top n cards.

        Raises:
            ValueError: If n is negative
            InsufficientCardsError: If fewer than n cards remain
        """
        if n < 0:
            raise ValueError(f"Cannot draw a negative number of cards: {n}")
        if n > len(self._cards):
            raise InsufficientCardsError(requested=n, remaining=len(self._cards))

        drawn = tuple(self._cards[:n])
        del self._cards[:n]
        return drawn

    def deal_hand(self, size: int | None = None) -> Hand:
        """Draw a hand of `size` cards (configured hand size by default)."""
        return Hand(cards=self.draw(settings.hand_size if size is None else size))

    @property
    def remaining(self) -> int:
        """Cards left before a reshuffle is needed."""
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)
