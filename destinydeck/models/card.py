from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any


class Suit(str, Enum):
    """The four suits of the Destiny Deck."""

    SPADES = "SPADES"
    HEARTS = "HEARTS"
    CLUBS = "CLUBS"
    DIAMONDS = "DIAMONDS"

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]


_SUIT_SYMBOLS = {
    Suit.SPADES: "S",
    Suit.HEARTS: "H",
    Suit.CLUBS: "C",
    Suit.DIAMONDS: "D",
}


class Rank(IntEnum):
    """Card ranks. The integer value is the rank's order (ace high)."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def label(self) -> str:
        """Short label used on the card face (2-10, J, Q, K, A)."""
        if self <= Rank.TEN:
            return str(int(self))
        return self.name[0]

    @property
    def title(self) -> str:
        """Singular name used in hand descriptions."""
        if self <= Rank.TEN:
            return str(int(self))
        return self.name.capitalize()

    @property
    def plural(self) -> str:
        """Plural name used in hand descriptions ("Jacks", "7s")."""
        return f"{self.title}s"


@dataclass(frozen=True, slots=True)
class Card:
    """
    A single card.

    Attributes:
        rank: Card rank (2 through ace)
        suit: Card suit
    """

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank.label}{self.suit.symbol}"

    def to_dict(self) -> dict[str, str]:
        return {"rank": self.rank.name, "suit": self.suit.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Card":
        return cls(rank=Rank[data["rank"]], suit=Suit(data["suit"]))

    @classmethod
    def parse(cls, label: str) -> "Card":
        """Parse a face label such as "AS", "10H" or "7d"."""
        text = label.strip().upper()
        rank_label, symbol = text[:-1], text[-1:]
        try:
            return cls(rank=_RANKS_BY_LABEL[rank_label], suit=_SUITS_BY_SYMBOL[symbol])
        except KeyError:
            raise ValueError(f"Invalid card label: {label!r}") from None


_RANKS_BY_LABEL = {rank.label: rank for rank in Rank}
_SUITS_BY_SYMBOL = {symbol: suit for suit, symbol in _SUIT_SYMBOLS.items()}

# Full 52-card deck in canonical order (suit-major, ascending rank)
STANDARD_DECK: tuple[Card, ...] = tuple(
    Card(rank=rank, suit=suit) for suit in Suit for rank in Rank
)


@dataclass(frozen=True, slots=True)
class Hand:
    """
    Cards dealt together for one attempt.

    Immutable once dealt; order is the order the cards were drawn.
    """

    cards: tuple[Card, ...]

    @classmethod
    def of(cls, cards: Iterable[Card]) -> "Hand":
        return cls(cards=tuple(cards))

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        return " ".join(str(card) for card in self.cards)

    @property
    def suits(self) -> frozenset[Suit]:
        """Distinct suits present in the hand."""
        return frozenset(card.suit for card in self.cards)

    def contains_suit(self, suit: Suit) -> bool:
        return any(card.suit == suit for card in self.cards)

    def to_list(self) -> list[dict[str, str]]:
        return [card.to_dict() for card in self.cards]

    @classmethod
    def parse(cls, labels: str) -> "Hand":
        """Parse space-separated face labels: Hand.parse("AS KS QS JS 10S")."""
        return cls(cards=tuple(Card.parse(label) for label in labels.split()))

    @classmethod
    def from_list(cls, data: Iterable[dict[str, Any]]) -> "Hand":
        return cls(cards=tuple(Card.from_dict(card) for card in data))
