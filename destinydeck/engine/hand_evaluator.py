"""
Poker hand evaluation for the Destiny Deck.

Classifies a hand into a HandCategory with a base strength score and
tiebreakers. Pure and total: any hand, including an empty one, yields an
evaluation, and identical cards always yield identical evaluations.

Rules:
- Straights and flushes need five cards; A-2-3-4-5 is a five-high straight
- Hands larger than five cards are scored by their best five-card subset
- Within a category, compare the highest contributing rank, then the next
  (groups ordered by size then rank, kickers last)
"""

from collections import Counter
from collections.abc import Iterable, Mapping
from itertools import combinations

from destinydeck.config import POKER_HAND_SIZE
from destinydeck.models.card import Card, Hand, Rank
from destinydeck.models.hand import CATEGORY_STRENGTH, HandCategory, HandEvaluation

_WHEEL = frozenset({Rank.ACE, Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE})


class HandEvaluator:
    """Evaluates hands against a category strength table."""

    def __init__(self, strength_table: Mapping[HandCategory, int] | None = None):
        table = dict(strength_table or CATEGORY_STRENGTH)
        missing = [category.name for category in HandCategory if category not in table]
        if missing:
            raise ValueError(f"Strength table missing categories: {', '.join(missing)}")
        ordered = [table[category] for category in HandCategory]
        if any(low >= high for low, high in zip(ordered, ordered[1:], strict=False)):
            raise ValueError("Strength table must strictly increase with the category")
        self.strength_table = table

    def evaluate(self, hand: Hand | Iterable[Card]) -> HandEvaluation:
        """Evaluate the best poker hand contained in `hand`."""
        cards = tuple(hand)
        if len(cards) > POKER_HAND_SIZE:
            return max(
                (self._evaluate_cards(subset) for subset in combinations(cards, POKER_HAND_SIZE)),
                key=lambda evaluation: evaluation.sort_key,
            )
        return self._evaluate_cards(cards)

    def _evaluate_cards(self, cards: tuple[Card, ...]) -> HandEvaluation:
        if not cards:
            return self._result(HandCategory.HIGH_CARD, (), "High Card")

        rank_counts = Counter(card.rank for card in cards)
        # Ranks ordered by group size, then rank: (trips, pair) for a full house
        groups = sorted(rank_counts.items(), key=lambda item: (item[1], item[0]), reverse=True)
        ranks = tuple(rank for rank, _ in groups)
        counts = [count for _, count in groups]
        tiebreakers = tuple(int(rank) for rank in ranks)

        full_hand = len(cards) == POKER_HAND_SIZE
        is_flush = full_hand and len({card.suit for card in cards}) == 1
        straight_high = self._straight_high(rank_counts) if full_hand else None

        if straight_high is not None and is_flush:
            if straight_high == Rank.ACE:
                return self._result(HandCategory.ROYAL_FLUSH, (int(straight_high),), "Royal Flush")
            return self._result(
                HandCategory.STRAIGHT_FLUSH,
                (int(straight_high),),
                f"Straight Flush, {straight_high.title} high",
            )

        if counts[0] >= 4:
            return self._result(
                HandCategory.FOUR_OF_A_KIND, tiebreakers, f"Four of a Kind, {ranks[0].plural}"
            )

        if counts[0] == 3 and len(counts) > 1 and counts[1] >= 2:
            return self._result(
                HandCategory.FULL_HOUSE,
                tiebreakers,
                f"Full House, {ranks[0].plural} over {ranks[1].plural}",
            )

        if is_flush:
            return self._result(HandCategory.FLUSH, tiebreakers, f"Flush, {ranks[0].title} high")

        if straight_high is not None:
            return self._result(
                HandCategory.STRAIGHT,
                (int(straight_high),),
                f"Straight, {straight_high.title} high",
            )

        if counts[0] == 3:
            return self._result(
                HandCategory.THREE_OF_A_KIND, tiebreakers, f"Three of a Kind, {ranks[0].plural}"
            )

        if counts[0] == 2 and len(counts) > 1 and counts[1] == 2:
            return self._result(
                HandCategory.TWO_PAIR,
                tiebreakers,
                f"Two Pair, {ranks[0].plural} and {ranks[1].plural}",
            )

        if counts[0] == 2:
            return self._result(HandCategory.PAIR, tiebreakers, f"Pair of {ranks[0].plural}")

        return self._result(HandCategory.HIGH_CARD, tiebreakers, f"High Card, {ranks[0].title}")

    @staticmethod
    def _straight_high(rank_counts: Counter[Rank]) -> Rank | None:
        """High card of a five-card straight, or None."""
        if len(rank_counts) != POKER_HAND_SIZE:
            return None
        distinct = set(rank_counts)
        if distinct == _WHEEL:
            return Rank.FIVE
        highest = max(distinct)
        if highest - min(distinct) == POKER_HAND_SIZE - 1:
            return highest
        return None

    def _result(
        self, category: HandCategory, tiebreakers: tuple[int, ...], description: str
    ) -> HandEvaluation:
        return HandEvaluation(
            category=category,
            strength_score=self.strength_table[category],
            tiebreakers=tiebreakers,
            description=description,
        )


_default_evaluator = HandEvaluator()


def evaluate_hand(hand: Hand | Iterable[Card]) -> HandEvaluation:
    """Convenience function to evaluate a hand with the default strength table."""
    return _default_evaluator.evaluate(hand)


def compare_hands(first: Hand | Iterable[Card], second: Hand | Iterable[Card]) -> int:
    """
    Compare two hands.

    Returns:
        1 if `first` is stronger, -1 if `second` is stronger, 0 on a tie
    """
    first_key = evaluate_hand(first).sort_key
    second_key = evaluate_hand(second).sort_key
    return (first_key > second_key) - (first_key < second_key)
