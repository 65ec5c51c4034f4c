"""Computer opponent: play the first legal card, otherwise draw."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from crazy8_engine.cards import Rank, Suit
from crazy8_engine.move_generator import can_play
from crazy8_engine.moves import ChooseSuit, Draw, PlayCards, ResolveSkip
from crazy8_engine.state import GamePhase
from strategies.base import Strategy

if TYPE_CHECKING:
    from crazy8_engine.moves import Move
    from crazy8_engine.state import GameState


class FirstPlayableStrategy(Strategy):
    """The computer opponent's policy.

    Decision order:
    1. A pending pickup is always drawn; the opponent never stacks a two on it.
    2. Otherwise play the first card in hand order that can be played.
    3. Otherwise draw one card.

    Eights are played with a uniformly random suit, so the opponent never
    leaves the game waiting on a suit choice.
    """

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    @property
    def name(self) -> str:
        return "First Playable"

    def select_move(self, state: GameState, legal_moves: list[Move]) -> Move:
        """Select a move from the hand, active card and pending pickup."""
        if not legal_moves:
            raise ValueError("No legal moves available")

        match state.phase:
            case GamePhase.CHOOSE_SUIT:
                return ChooseSuit(suit=self._random_suit())
            case GamePhase.SKIP_PENDING:
                return ResolveSkip()

        if state.pending_pickup > 0:
            return Draw()

        for card in state.current_hand:
            if can_play(card, state.active_card, state.pending_pickup, state.wild_suit):
                suit = self._random_suit() if card.rank == Rank.EIGHT else None
                return PlayCards(cards=(card,), suit=suit)

        return Draw()

    def _random_suit(self) -> Suit:
        return self._rng.choice(list(Suit))
