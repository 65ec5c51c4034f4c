"""Headless game runner for Crazy Eights simulations."""

from __future__ import annotations

import random
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Callable

from crazy8_engine.executor import execute_move
from crazy8_engine.move_generator import generate_legal_moves
from crazy8_engine.state import Side, create_initial_state

if TYPE_CHECKING:
    from crazy8_engine.state import GameState
    from strategies.base import Strategy


@dataclass
class GameResult:
    """Result of a completed game."""

    game_id: str
    winner: Side | None  # None if max_turns was reached
    turns: int
    final_hand_sizes: tuple[int, int]
    strategies: tuple[str, str]
    seed: int | None
    duration_ms: float
    move_count: int


@dataclass
class MoveRecord:
    """Record of a single move."""

    turn: int
    side: Side
    move: str
    state_after: dict


@dataclass
class GameLog:
    """In-memory log of a game."""

    game_id: str
    timestamp: str
    seed: int | None
    strategies: tuple[str, str]
    initial_state: dict
    moves: list[MoveRecord] = field(default_factory=list)
    result: GameResult | None = None


class GameRunner:
    """Runs Crazy Eights games between two strategies."""

    def __init__(
        self,
        player_strategy: Strategy,
        opponent_strategy: Strategy,
        max_turns: int = 1000,
        log_moves: bool = True,
        recycle_discards: bool = False,
        on_state: Callable[[GameState], None] | None = None,
    ):
        """Initialize the game runner.

        Args:
            player_strategy: Strategy for the player side.
            opponent_strategy: Strategy for the opponent side.
            max_turns: Turns before the game is abandoned without a winner.
            log_moves: Whether to log individual moves.
            recycle_discards: Reshuffle the discard pile when the deck runs out.
            on_state: Called with every state, initial state included.
        """
        self.strategies = (player_strategy, opponent_strategy)
        self.max_turns = max_turns
        self.log_moves = log_moves
        self.recycle_discards = recycle_discards
        self.on_state = on_state

    def run_game(self, seed: int | None = None) -> tuple[GameResult, GameLog | None]:
        """Run a single game.

        Args:
            seed: Random seed for reproducibility.

        Returns:
            Tuple of (result, log). Log is None if log_moves is False.
        """
        start_time = time.perf_counter()
        game_id = str(uuid.uuid4())
        rng = random.Random(seed)

        state = create_initial_state(seed=seed, recycle_discards=self.recycle_discards)
        self._observe(state)

        for side in Side:
            self.strategies[side].on_game_start(state, side)

        game_log = None
        if self.log_moves:
            game_log = GameLog(
                game_id=game_id,
                timestamp=datetime.now().isoformat(),
                seed=seed,
                strategies=(self.strategies[0].name, self.strategies[1].name),
                initial_state=self._state_to_dict(state),
            )

        move_count = 0

        while not state.is_game_over and state.turn_number <= self.max_turns:
            acting_side = state.current_side
            legal_moves = generate_legal_moves(state)

            if not legal_moves:
                # Shouldn't happen in a valid game
                break

            move = self.strategies[acting_side].select_move(state, legal_moves)
            new_state = execute_move(state, move, rng)
            move_count += 1
            self._observe(new_state)

            if game_log:
                game_log.moves.append(
                    MoveRecord(
                        turn=state.turn_number,
                        side=acting_side,
                        move=str(move),
                        state_after=self._state_to_dict(new_state),
                    )
                )

            state = new_state

        duration_ms = (time.perf_counter() - start_time) * 1000

        result = GameResult(
            game_id=game_id,
            winner=state.winner,
            turns=state.turn_number,
            final_hand_sizes=(len(state.player_hand), len(state.opponent_hand)),
            strategies=(self.strategies[0].name, self.strategies[1].name),
            seed=seed,
            duration_ms=duration_ms,
            move_count=move_count,
        )

        if game_log:
            game_log.result = result

        for strategy in self.strategies:
            strategy.on_game_end(state, state.winner)

        return result, game_log

    def _observe(self, state: GameState) -> None:
        if self.on_state is not None:
            self.on_state(state)

    def _state_to_dict(self, state: GameState) -> dict:
        """Convert game state to a dictionary for logging."""
        return {
            "turn": state.turn_number,
            "current_side": state.current_side.name,
            "phase": state.phase.name,
            "deck_size": len(state.deck),
            "discard_size": len(state.discard),
            "active_card": str(state.active_card),
            "wild_suit": state.wild_suit.name if state.wild_suit is not None else None,
            "pending_pickup": state.pending_pickup,
            "hands": [[str(c) for c in hand] for hand in state.hands],
        }


def run_batch(
    player_strategy: Strategy,
    opponent_strategy: Strategy,
    num_games: int,
    start_seed: int = 0,
    log_moves: bool = False,
    recycle_discards: bool = False,
) -> list[GameResult]:
    """Run multiple games.

    Args:
        player_strategy: Strategy for the player side.
        opponent_strategy: Strategy for the opponent side.
        num_games: Number of games to run.
        start_seed: Starting seed (incremented for each game).
        log_moves: Whether to log moves (slower).
        recycle_discards: Reshuffle the discard pile when the deck runs out.

    Returns:
        List of game results.
    """
    runner = GameRunner(
        player_strategy,
        opponent_strategy,
        log_moves=log_moves,
        recycle_discards=recycle_discards,
    )
    results = []

    for i in range(num_games):
        result, _ = runner.run_game(seed=start_seed + i)
        results.append(result)

    return results
