"""Move execution for Crazy Eights."""

from __future__ import annotations

import logging
import random
from dataclasses import replace

from crazy8_engine.cards import Card, Deck, Rank, Suit
from crazy8_engine.move_generator import can_play
from crazy8_engine.moves import ChooseSuit, Draw, Move, PlayCards, ResolveSkip
from crazy8_engine.state import GamePhase, GameState

logger = logging.getLogger(__name__)

TWO_PENALTY = 2
QUEEN_OF_SPADES_PENALTY = 5

# Ranks whose play leaves ownership with the side that played them
TURN_RETAINING_RANKS = frozenset({Rank.FOUR, Rank.ACE, Rank.EIGHT})


class IllegalMoveError(Exception):
    """Raised when an illegal move is attempted."""

    pass


class InvalidSuitChoiceError(IllegalMoveError):
    """Raised when a suit is chosen while no eight is waiting for one."""

    pass


def execute_move(
    state: GameState, move: Move, rng: random.Random | None = None
) -> GameState:
    """Execute a move for the acting side and return the new game state.

    Args:
        state: Current game state.
        move: Move to execute.
        rng: Random source, only used when the discard pile is reshuffled.

    Returns:
        New game state after the move.

    Raises:
        IllegalMoveError: If the move is not legal. The input state is never
            modified.
    """
    if state.is_game_over:
        raise IllegalMoveError("Game is already over")

    match move:
        case PlayCards():
            return _execute_play_cards(state, move)
        case Draw():
            return _execute_draw(state, rng)
        case ChooseSuit():
            return _execute_choose_suit(state, move)
        case ResolveSkip():
            return _execute_resolve_skip(state)
        case _:
            raise IllegalMoveError(f"Unknown move type: {type(move)}")


def _execute_play_cards(state: GameState, move: PlayCards) -> GameState:
    """Play a batch of cards; only the first is checked against the active card."""
    if state.phase != GamePhase.MAIN:
        raise IllegalMoveError(f"Cannot play cards during {state.phase.name}")
    if not move.cards:
        raise IllegalMoveError("No cards selected")

    selected_ids = [card.id for card in move.cards]
    if len(set(selected_ids)) != len(selected_ids):
        raise IllegalMoveError("A card was selected more than once")

    hand = state.current_hand
    by_id = {card.id: card for card in hand}
    for card in move.cards:
        if card.id not in by_id:
            raise IllegalMoveError(f"Card {card} not in hand")

    # Rules only ever see the hand's own cards, never the caller's copies
    cards = tuple(by_id[card.id] for card in move.cards)

    lead = cards[0]
    if not can_play(lead, state.active_card, state.pending_pickup, state.wild_suit):
        raise IllegalMoveError(f"{lead} cannot be played on {state.active_card}")

    *buried, top = cards
    if move.suit is not None and top.rank != Rank.EIGHT:
        raise IllegalMoveError("Only an eight can name a suit")

    # Remove by identity so duplicate faces in a hand are never collapsed
    played = set(selected_ids)
    new_hand = tuple(c for c in hand if c.id not in played)

    new_state = replace(
        state.with_hand(state.current_side, new_hand),
        discard=state.discard + (state.active_card, *buried),
        active_card=top,
        wild_suit=None,
    )
    new_state = _resolve_effect(new_state, top, move.suit)

    new_state = _check_win(new_state)
    if new_state.is_game_over:
        return new_state

    if top.rank in TURN_RETAINING_RANKS:
        return new_state
    return _end_turn(new_state)


def _resolve_effect(state: GameState, card: Card, suit: Suit | None) -> GameState:
    """Apply the special effect of a card that just became active."""
    match card.rank:
        case Rank.TWO:
            return replace(state, pending_pickup=state.pending_pickup + TWO_PENALTY)
        case Rank.FOUR | Rank.ACE:
            return replace(state, phase=GamePhase.SKIP_PENDING)
        case Rank.QUEEN if card.suit == Suit.SPADES:
            return replace(
                state, pending_pickup=state.pending_pickup + QUEEN_OF_SPADES_PENALTY
            )
        case Rank.EIGHT:
            if suit is None:
                return replace(state, phase=GamePhase.CHOOSE_SUIT)
            return replace(state, wild_suit=suit)
        case _:
            return state


def _execute_draw(state: GameState, rng: random.Random | None) -> GameState:
    """Draw the pending penalty (at least one card) and pass the turn."""
    if state.phase != GamePhase.MAIN:
        raise IllegalMoveError(f"Cannot draw during {state.phase.name}")

    count = max(1, state.pending_pickup)
    deck = Deck(state.deck)
    discard = state.discard
    drawn = deck.draw_many(count)

    if len(drawn) < count and state.recycle_discards and discard:
        deck = Deck(discard)
        deck.shuffle(rng)
        discard = ()
        drawn.extend(deck.draw_many(count - len(drawn)))

    if len(drawn) < count:
        logger.debug(f"Deck exhausted: drew {len(drawn)} of {count} for {state.current_side.label}")

    new_hand = state.current_hand + tuple(drawn)
    new_state = replace(
        state.with_hand(state.current_side, new_hand),
        deck=deck.cards,
        discard=discard,
        pending_pickup=0,
    )

    new_state = _check_win(new_state)
    if new_state.is_game_over:
        return new_state

    # Drawing always hands the turn over, whatever the active card is
    return _end_turn(new_state)


def _execute_choose_suit(state: GameState, move: ChooseSuit) -> GameState:
    """Name the wild suit for a pending eight; the same side acts next."""
    if state.phase != GamePhase.CHOOSE_SUIT:
        raise InvalidSuitChoiceError("No eight is waiting for a suit")

    return replace(state, wild_suit=move.suit, phase=GamePhase.MAIN)


def _execute_resolve_skip(state: GameState) -> GameState:
    """Toggle ownership twice: the skipped side forfeits its turn."""
    if state.phase != GamePhase.SKIP_PENDING:
        raise IllegalMoveError("No skip is pending")

    new_state = replace(state, phase=GamePhase.MAIN)
    return _end_turn(_end_turn(new_state))


def _end_turn(state: GameState) -> GameState:
    """End the current turn and switch to the other side."""
    return replace(
        state,
        current_side=state.current_side.other,
        turn_number=state.turn_number + 1,
    )


def _check_win(state: GameState) -> GameState:
    """Check if a hand is empty and update state accordingly."""
    winner = state.check_winner()
    if winner is not None:
        return state.with_winner(winner)
    return state
