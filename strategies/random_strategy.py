"""Random strategy for baseline testing."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from crazy8_engine.cards import Rank, Suit
from crazy8_engine.moves import PlayCards
from strategies.base import Strategy

if TYPE_CHECKING:
    from crazy8_engine.moves import Move
    from crazy8_engine.state import GameState


class RandomStrategy(Strategy):
    """Strategy that selects moves uniformly at random.

    Eights are always played with a random suit so the game never waits
    on a suit choice.
    """

    def __init__(self, seed: int | None = None):
        """Initialize the random strategy.

        Args:
            seed: Optional random seed for reproducibility.
        """
        self._rng = random.Random(seed)
        self._seed = seed

    @property
    def name(self) -> str:
        return "Random"

    def select_move(self, state: GameState, legal_moves: list[Move]) -> Move:
        """Select a random legal move."""
        if not legal_moves:
            raise ValueError("No legal moves available")
        move = self._rng.choice(legal_moves)
        if isinstance(move, PlayCards) and move.cards[-1].rank == Rank.EIGHT:
            return PlayCards(cards=move.cards, suit=self._rng.choice(list(Suit)))
        return move

    def reset_seed(self, seed: int | None = None) -> None:
        """Reset the random number generator with a new seed."""
        self._seed = seed
        self._rng = random.Random(seed)
