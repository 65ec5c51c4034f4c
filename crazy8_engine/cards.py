"""Card, Suit, Rank and Deck models for Crazy Eights."""

from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable


class Suit(IntEnum):
    """The four suits, in deck construction order."""

    HEARTS = 0
    DIAMONDS = 1
    CLUBS = 2
    SPADES = 3

    def __str__(self) -> str:
        return self.symbol

    @property
    def symbol(self) -> str:
        return {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }[self]

    @property
    def label(self) -> str:
        """Capitalized name, e.g. 'Spades'."""
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: str) -> Suit:
        """Look up a suit by name, case-insensitively."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown suit: {value!r}") from None


class Rank(IntEnum):
    """Card ranks (Two=2 through Ace=14).

    Values are only compared for equality; no rule depends on rank order.
    """

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

    def __str__(self) -> str:
        return self.symbol

    @property
    def symbol(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return self.name[0]


def _new_card_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Card:
    """A playing card.

    Two cards with the same rank and suit are still distinct: ``id`` tells
    them apart when selecting or removing cards from a hand. Rules only look
    at ``rank`` and ``suit``.
    """

    rank: Rank
    suit: Suit
    id: str = field(default_factory=_new_card_id)

    @property
    def face(self) -> tuple[Rank, Suit]:
        """Rank and suit without the instance identifier."""
        return (self.rank, self.suit)

    @property
    def is_wild(self) -> bool:
        return self.rank == Rank.EIGHT

    @property
    def is_queen_of_spades(self) -> bool:
        return self.rank == Rank.QUEEN and self.suit == Suit.SPADES

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    def __str__(self) -> str:
        return f"{self.rank.symbol}{self.suit.symbol}"


def create_deck() -> list[Card]:
    """Create a standard 52-card deck in construction order."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Deck:
    """Ordered, mutable pile of cards drawn from the front."""

    def __init__(self, cards: Iterable[Card] | None = None):
        self._cards = list(cards) if cards is not None else create_deck()

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def cards(self) -> tuple[Card, ...]:
        """Remaining cards, front first."""
        return tuple(self._cards)

    @property
    def is_empty(self) -> bool:
        return not self._cards

    def shuffle(self, rng: random.Random | None = None) -> None:
        """Uniformly permute the remaining cards."""
        (rng or random.Random()).shuffle(self._cards)

    def draw(self) -> Card | None:
        """Remove and return the front card, or None if the deck is empty."""
        if not self._cards:
            return None
        return self._cards.pop(0)

    def draw_many(self, count: int) -> list[Card]:
        """Draw up to ``count`` cards, stopping early if the deck runs out."""
        drawn = []
        for _ in range(count):
            card = self.draw()
            if card is None:
                break
            drawn.append(card)
        return drawn
