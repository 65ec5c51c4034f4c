"""Immutable game state models for Crazy Eights."""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from crazy8_engine.cards import Deck

if TYPE_CHECKING:
    from crazy8_engine.cards import Card, Suit

HAND_SIZE = 8


class Side(IntEnum):
    """The two sides of the table."""

    PLAYER = 0  # Human
    OPPONENT = 1  # Computer

    @property
    def other(self) -> Side:
        return Side(1 - self.value)

    @property
    def label(self) -> str:
        return self.name.capitalize()


class GamePhase(IntEnum):
    """Current phase of the game."""

    MAIN = auto()  # Acting side may play or draw
    CHOOSE_SUIT = auto()  # An eight was played without a suit; acting side must pick one
    SKIP_PENDING = auto()  # A four or ace was played; waiting for the skip toggle
    GAME_OVER = auto()  # A hand is empty


@dataclass(frozen=True, slots=True)
class GameState:
    """Complete immutable game state.

    Attributes:
        hands: Player and opponent hands, indexed by Side
        deck: Remaining draw pile, front first
        discard: Cards buried under the active card, oldest first
        active_card: Top of the discard pile; plays must match it
        current_side: Who is authorized to act
        phase: Current game phase
        pending_pickup: Accumulated forced-draw penalty (twos, queen of spades)
        wild_suit: Suit named by the last eight, overrides the active card's suit
        winner: Side that emptied its hand first, or None
        turn_number: Increments each time ownership passes
        recycle_discards: Reshuffle the discard pile into the deck when it runs out
    """

    hands: tuple[tuple[Card, ...], tuple[Card, ...]]
    deck: tuple[Card, ...]
    active_card: Card
    current_side: Side = Side.PLAYER
    discard: tuple[Card, ...] = ()
    phase: GamePhase = GamePhase.MAIN
    pending_pickup: int = 0
    wild_suit: Suit | None = None
    winner: Side | None = None
    turn_number: int = 1
    recycle_discards: bool = False

    @property
    def is_game_over(self) -> bool:
        return self.winner is not None

    @property
    def current_hand(self) -> tuple[Card, ...]:
        return self.hands[self.current_side]

    @property
    def effective_suit(self) -> Suit:
        """Suit new plays must follow (wild suit when one is named)."""
        if self.wild_suit is not None:
            return self.wild_suit
        return self.active_card.suit

    @property
    def player_hand(self) -> tuple[Card, ...]:
        return self.hands[Side.PLAYER]

    @property
    def opponent_hand(self) -> tuple[Card, ...]:
        return self.hands[Side.OPPONENT]

    def all_cards(self) -> list[Card]:
        """Every card in the game: deck, both hands, discard and active card."""
        return [
            *self.deck,
            *self.hands[Side.PLAYER],
            *self.hands[Side.OPPONENT],
            *self.discard,
            self.active_card,
        ]

    def check_winner(self) -> Side | None:
        """Return the side whose hand is empty (player checked first)."""
        for side in (Side.PLAYER, Side.OPPONENT):
            if not self.hands[side]:
                return side
        return None

    def with_hand(self, side: Side, hand: tuple[Card, ...]) -> GameState:
        """Return new state with one side's hand replaced."""
        hands = list(self.hands)
        hands[side] = hand
        return replace(self, hands=(hands[0], hands[1]))

    def with_winner(self, winner: Side | None) -> GameState:
        """Return new state with winner set."""
        return replace(
            self,
            winner=winner,
            phase=GamePhase.GAME_OVER if winner is not None else self.phase,
        )


def create_initial_state(
    seed: int | None = None,
    first_side: Side | None = None,
    hand_size: int = HAND_SIZE,
    recycle_discards: bool = False,
    deck: Deck | None = None,
) -> GameState:
    """Create the initial game state.

    Args:
        seed: Random seed for shuffling and picking the first side.
        first_side: Who acts first. Random if None.
        hand_size: Cards dealt to each side.
        recycle_discards: Whether the discard pile is reshuffled on exhaustion.
        deck: Optional pre-ordered deck, dealt without shuffling.

    Returns:
        Initial game state with both hands dealt and one active card.
    """
    rng = random.Random(seed)

    if deck is None:
        deck = Deck()
        deck.shuffle(rng)

    player_hand = tuple(deck.draw_many(hand_size))
    opponent_hand = tuple(deck.draw_many(hand_size))
    active_card = deck.draw()
    if active_card is None:
        raise ValueError("Deck too small to deal a game")

    if first_side is None:
        first_side = rng.choice(list(Side))

    return GameState(
        hands=(player_hand, opponent_hand),
        deck=deck.cards,
        active_card=active_card,
        current_side=first_side,
        recycle_discards=recycle_discards,
    )
