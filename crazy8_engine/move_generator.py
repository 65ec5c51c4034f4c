"""Play legality and legal move generation for Crazy Eights."""

from __future__ import annotations

from crazy8_engine.cards import Card, Rank, Suit
from crazy8_engine.moves import ChooseSuit, Draw, Move, PlayCards, ResolveSkip
from crazy8_engine.state import GamePhase, GameState


def can_play(
    card: Card,
    active_card: Card,
    pending_pickup: int = 0,
    wild_suit: Suit | None = None,
) -> bool:
    """Whether a card may lead a play on top of the active card.

    A card is playable if it follows suit (the wild suit when one is named),
    matches rank, is an eight, or is a two while a pickup penalty is pending.
    """
    suit_to_follow = wild_suit if wild_suit is not None else active_card.suit
    return (
        card.suit == suit_to_follow
        or card.rank == active_card.rank
        or card.rank == Rank.EIGHT
        or (pending_pickup > 0 and card.rank == Rank.TWO)
    )


def playable_cards(state: GameState) -> list[Card]:
    """Cards in the acting hand that may lead a play, in hand order."""
    return [
        card
        for card in state.current_hand
        if can_play(card, state.active_card, state.pending_pickup, state.wild_suit)
    ]


def generate_legal_moves(state: GameState) -> list[Move]:
    """Generate all legal moves for the current game state.

    Only single-card plays are listed; multi-card batches are accepted by
    the executor but not enumerated here.

    Args:
        state: Current game state.

    Returns:
        List of legal moves for the acting side.
    """
    if state.is_game_over:
        return []

    match state.phase:
        case GamePhase.MAIN:
            moves: list[Move] = [Draw()]
            moves.extend(PlayCards(cards=(card,)) for card in playable_cards(state))
            return moves
        case GamePhase.CHOOSE_SUIT:
            return [ChooseSuit(suit=suit) for suit in Suit]
        case GamePhase.SKIP_PENDING:
            return [ResolveSkip()]

    return []
