"""Crazy Eights card game engine."""

from crazy8_engine.cards import Card, Deck, Rank, Suit
from crazy8_engine.executor import IllegalMoveError, InvalidSuitChoiceError, execute_move
from crazy8_engine.move_generator import can_play, generate_legal_moves
from crazy8_engine.moves import ChooseSuit, Draw, Move, MoveType, PlayCards, ResolveSkip
from crazy8_engine.state import GamePhase, GameState, Side, create_initial_state

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "GameState",
    "GamePhase",
    "Side",
    "create_initial_state",
    "Move",
    "MoveType",
    "PlayCards",
    "Draw",
    "ChooseSuit",
    "ResolveSkip",
    "can_play",
    "generate_legal_moves",
    "execute_move",
    "IllegalMoveError",
    "InvalidSuitChoiceError",
]
