"""Base strategy interface for Crazy Eights players."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crazy8_engine.moves import Move
    from crazy8_engine.state import GameState, Side


class Strategy(ABC):
    """Abstract base class for player strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this strategy."""
        ...

    @abstractmethod
    def select_move(self, state: GameState, legal_moves: list[Move]) -> Move:
        """Select a move for the acting side.

        Args:
            state: Current game state.
            legal_moves: Legal moves for the current situation. A returned
                play of an eight may carry a suit not listed here.

        Returns:
            The selected move.
        """
        ...

    def on_game_start(self, state: GameState, side: Side) -> None:
        """Called when a game starts.

        Override to initialize per-game state.

        Args:
            state: Initial game state.
            side: Which side this strategy controls.
        """
        pass

    def on_game_end(self, state: GameState, winner: Side | None) -> None:
        """Called when a game ends.

        Args:
            state: Final game state.
            winner: Winning side, or None if the game was cut short.
        """
        pass
