"""Game session management for the web API.

A session owns one game at a time against a computer opponent. Human
intents are plain methods called from the event loop; the opponent's moves
and the four/ace skip toggle run later as timer callbacks on the same loop,
so at most one transition is ever in flight.
"""

from __future__ import annotations

import asyncio
import logging
import os
import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Sequence

from crazy8_engine.cards import Deck, Rank, Suit
from crazy8_engine.executor import IllegalMoveError, execute_move
from crazy8_engine.move_generator import generate_legal_moves
from crazy8_engine.moves import ChooseSuit, Draw, PlayCards, ResolveSkip
from crazy8_engine.state import HAND_SIZE, GamePhase, Side, create_initial_state

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from crazy8_engine.cards import Card
    from crazy8_engine.moves import Move
    from crazy8_engine.state import GameState
    from strategies.base import Strategy


def _env_ms(name: str, default: float) -> float:
    """Read a millisecond setting from the environment, returned in seconds."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw) / 1000
    except ValueError:
        raise ValueError(f"{name} must be a number of milliseconds, got {raw!r}") from None


@dataclass
class SessionConfig:
    """Settings for a game session."""

    opponent_delay: float = 1.0  # Seconds before the opponent moves
    skip_delay: float = 0.5  # Seconds before a four/ace skip resolves
    hand_size: int = HAND_SIZE
    recycle_discards: bool = False
    strategy_name: str = "first-playable"
    strategy_params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> SessionConfig:
        """Build a config from CRAZY8_* environment variables."""
        return cls(
            opponent_delay=_env_ms("CRAZY8_OPPONENT_DELAY_MS", 1.0),
            skip_delay=_env_ms("CRAZY8_SKIP_DELAY_MS", 0.5),
            recycle_discards=os.environ.get("CRAZY8_RECYCLE_DISCARDS", "").lower()
            in ("1", "true", "yes"),
        )


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a human intent. Rejected intents never change the game."""

    accepted: bool
    reason: str | None = None


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a session for presentation."""

    game_id: str
    generation: int
    player_hand: tuple[Card, ...]
    opponent_hand_count: int
    deck_count: int
    active_card: Card
    wild_suit: Suit | None
    current_side: Side
    phase: GamePhase
    pending_pickup: int
    suit_choice_required: bool
    is_game_over: bool
    winner: Side | None
    message: str

    @property
    def is_player_turn(self) -> bool:
        return self.current_side == Side.PLAYER and not self.is_game_over

    @property
    def winner_label(self) -> str | None:
        if self.winner is None:
            return None
        return f"{self.winner.label} wins!"

    def to_dict(self) -> dict:
        """Convert to a client-friendly format."""
        return {
            "game_id": self.game_id,
            "generation": self.generation,
            "player_hand": [_card_to_dict(c) for c in self.player_hand],
            "opponent_hand_count": self.opponent_hand_count,
            "deck_count": self.deck_count,
            "active_card": _card_to_dict(self.active_card),
            "wild_suit": self.wild_suit.name if self.wild_suit is not None else None,
            "current_side": self.current_side.name,
            "is_player_turn": self.is_player_turn,
            "phase": self.phase.name,
            "pending_pickup": self.pending_pickup,
            "suit_choice_required": self.suit_choice_required,
            "is_game_over": self.is_game_over,
            "winner": self.winner.name if self.winner is not None else None,
            "winner_label": self.winner_label,
            "message": self.message,
        }


def _card_to_dict(card: Card) -> dict:
    """Convert a Card to a dictionary."""
    return {
        "id": card.id,
        "rank": card.rank.value,
        "rank_symbol": card.rank.symbol,
        "rank_name": card.rank.name,
        "suit": card.suit.value,
        "suit_symbol": card.suit.symbol,
        "suit_name": card.suit.name,
        "display": str(card),
    }


@dataclass(eq=False)
class DeferredAction:
    """A timer callback bound to the game generation it was scheduled for."""

    name: str
    generation: int
    callback: Callable[[], None]
    handle: asyncio.TimerHandle | None = None

    def cancel(self) -> None:
        if self.handle is not None:
            self.handle.cancel()


class GameSession:
    """A human player against a computer opponent."""

    def __init__(
        self,
        session_id: str,
        strategy: Strategy,
        config: SessionConfig | None = None,
        seed: int | None = None,
    ):
        self.id = session_id
        self.strategy = strategy
        self.config = config or SessionConfig()
        self.created_at = datetime.now()
        self.generation = 0
        self.message = ""
        self.move_history: list[dict] = []
        self._rng = random.Random(seed)
        self._pending: set[DeferredAction] = set()
        self._state_listeners: list[Callable[[dict], None]] = []
        self._state: GameState | None = None

    @property
    def state(self) -> GameState:
        if self._state is None:
            raise RuntimeError(f"Session {self.id} has no game; call start_new_game()")
        return self._state

    @property
    def has_pending_actions(self) -> bool:
        return bool(self._pending)

    # Intents

    def start_new_game(
        self, first_side: Side | None = None, deck: Deck | None = None
    ) -> MoveResult:
        """Deal a fresh game, invalidating anything scheduled for the old one.

        Args:
            first_side: Who acts first. Random if None.
            deck: Optional pre-ordered deck to deal from instead of a shuffled one.
        """
        self.cancel_pending()
        self.generation += 1
        self._state = create_initial_state(
            seed=self._rng.randrange(2**32),
            first_side=first_side,
            hand_size=self.config.hand_size,
            recycle_discards=self.config.recycle_discards,
            deck=deck,
        )
        self.move_history = []
        self.message = ""
        logger.info(
            f"Session {self.id}: game {self.generation} started, "
            f"{self._state.current_side.label} to act on {self._state.active_card}"
        )

        self.strategy.on_game_start(self._state, Side.OPPONENT)
        self._after_transition()
        self._notify_listeners({"type": "game_started", "state": self.snapshot().to_dict()})
        return MoveResult(True)

    def play_cards(self, card_ids: Sequence[str]) -> MoveResult:
        """Play the selected cards from the player's hand, in selection order."""
        hand = {card.id: card for card in self.state.player_hand}
        cards = []
        for card_id in card_ids:
            card = hand.get(card_id)
            if card is None:
                return self._reject(f"Card {card_id} not in hand")
            cards.append(card)
        return self._apply_player_move(PlayCards(cards=tuple(cards)))

    def draw_card(self) -> MoveResult:
        """Draw the pending penalty, or one card."""
        return self._apply_player_move(Draw())

    def choose_suit(self, suit: Suit) -> MoveResult:
        """Name the suit for the eight the player just played."""
        return self._apply_player_move(ChooseSuit(suit=suit))

    # Observation

    def snapshot(self) -> GameSnapshot:
        state = self.state
        return GameSnapshot(
            game_id=self.id,
            generation=self.generation,
            player_hand=state.player_hand,
            opponent_hand_count=len(state.opponent_hand),
            deck_count=len(state.deck),
            active_card=state.active_card,
            wild_suit=state.wild_suit,
            current_side=state.current_side,
            phase=state.phase,
            pending_pickup=state.pending_pickup,
            suit_choice_required=(
                state.phase == GamePhase.CHOOSE_SUIT
                and state.current_side == Side.PLAYER
            ),
            is_game_over=state.is_game_over,
            winner=state.winner,
            message=self.message,
        )

    def add_listener(self, callback: Callable[[dict], None]) -> None:
        """Add a state change listener."""
        self._state_listeners.append(callback)

    def remove_listener(self, callback: Callable[[dict], None]) -> None:
        """Remove a state change listener."""
        if callback in self._state_listeners:
            self._state_listeners.remove(callback)

    async def wait_until_idle(self, poll_interval: float = 0.01) -> None:
        """Wait until no deferred action is scheduled."""
        while self._pending:
            await asyncio.sleep(poll_interval)

    def cancel_pending(self) -> None:
        """Cancel every deferred action, e.g. when the session is deleted."""
        for action in self._pending:
            action.cancel()
        self._pending.clear()

    # Internals

    def _reject(self, reason: str) -> MoveResult:
        logger.info(f"Session {self.id}: rejected intent: {reason}")
        return MoveResult(False, reason)

    def _apply_player_move(self, move: Move) -> MoveResult:
        state = self.state
        if state.is_game_over:
            return self._reject("Game is already over")
        if state.current_side != Side.PLAYER:
            return self._reject("Not your turn")
        try:
            self._apply(move)
        except IllegalMoveError as e:
            return self._reject(str(e))
        return MoveResult(True)

    def _apply(self, move: Move) -> None:
        """Run a move through the engine, then schedule whatever comes next."""
        old_state = self.state
        actor = old_state.current_side
        self._state = execute_move(old_state, move, self._rng)
        self.message = self._describe(actor, move, old_state, self._state)

        move_record = {
            "turn": old_state.turn_number,
            "side": actor.name,
            "move": str(move),
            "move_type": move.move_type.name,
            "timestamp": datetime.now().isoformat(),
        }
        self.move_history.append(move_record)
        logger.debug(f"Session {self.id}: {actor.label}: {move}")

        self._after_transition()
        self._notify_listeners({
            "type": "move_made",
            "move": move_record,
            "state": self.snapshot().to_dict(),
        })

    def _after_transition(self) -> None:
        state = self.state
        if state.is_game_over:
            logger.info(f"Session {self.id}: game {self.generation} over, {state.winner.label} wins")
            self.strategy.on_game_end(state, state.winner)
            return

        if state.phase == GamePhase.SKIP_PENDING:
            self._schedule("skip", self.config.skip_delay, self._resolve_skip)
        elif state.current_side == Side.OPPONENT:
            self._schedule("opponent", self.config.opponent_delay, self._run_opponent_turn)

    def _schedule(self, name: str, delay: float, callback: Callable[[], None]) -> None:
        loop = asyncio.get_running_loop()
        action = DeferredAction(name=name, generation=self.generation, callback=callback)
        action.handle = loop.call_later(delay, self._fire, action)
        self._pending.add(action)

    def _fire(self, action: DeferredAction) -> None:
        self._pending.discard(action)
        if action.generation != self.generation:
            logger.debug(
                f"Session {self.id}: dropped stale {action.name} action "
                f"for game {action.generation} (now {self.generation})"
            )
            return
        action.callback()

    def _resolve_skip(self) -> None:
        self._apply(ResolveSkip())

    def _run_opponent_turn(self) -> None:
        state = self.state
        if state.is_game_over or state.current_side != Side.OPPONENT:
            return

        legal_moves = generate_legal_moves(state)
        if not legal_moves:
            return

        try:
            move = self.strategy.select_move(state, legal_moves)
        except Exception:
            logger.exception(f"Strategy {self.strategy.name} failed, falling back to {legal_moves[0]}")
            move = legal_moves[0]

        try:
            self._apply(move)
        except IllegalMoveError as e:
            logger.error(f"Opponent move {move} rejected ({e}), falling back to {legal_moves[0]}")
            self._apply(legal_moves[0])

    def _describe(self, actor: Side, move: Move, old: GameState, new: GameState) -> str:
        """Transient human-readable message for a transition."""
        if new.is_game_over:
            return f"{new.winner.label} wins!"

        match move:
            case ChooseSuit(suit=suit):
                return f"{actor.label} changed suit to {suit.label}."
            case PlayCards(cards=cards, suit=suit):
                top = cards[-1]
                if top.rank == Rank.EIGHT and suit is not None:
                    return f"{actor.label} changed suit to {suit.label}."
                if new.phase == GamePhase.SKIP_PENDING:
                    return f"{actor.other.label}'s turn is skipped."
                if new.pending_pickup > old.pending_pickup:
                    return f"{actor.other.label} must pick up {new.pending_pickup}."
            case Draw():
                drawn = len(new.hands[actor]) - len(old.hands[actor])
                return f"{actor.label} drew {drawn} card{'s' if drawn != 1 else ''}."
        return ""

    def _notify_listeners(self, event: dict) -> None:
        """Notify all listeners of a state change."""
        for listener in self._state_listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"Session {self.id}: state listener failed")


class GameSessionManager:
    """Manages all active game sessions."""

    def __init__(self, config: SessionConfig | None = None):
        self._sessions: dict[str, GameSession] = {}
        self._strategy_factory = StrategyFactory()
        self.config = config or SessionConfig.from_env()

    def create_session(
        self,
        config: SessionConfig | None = None,
        seed: int | None = None,
        first_side: Side | None = None,
    ) -> GameSession:
        """Create a new game session and deal its first game.

        Must be called from a running event loop.
        """
        config = config or self.config
        strategy = self._strategy_factory.create(config.strategy_name, config.strategy_params)
        session = GameSession(
            session_id=str(uuid.uuid4()),
            strategy=strategy,
            config=config,
            seed=seed,
        )
        self._sessions[session.id] = session
        session.start_new_game(first_side=first_side)
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session, cancelling its deferred actions."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.cancel_pending()
        return True

    def list_sessions(self) -> list[dict]:
        """List all active sessions."""
        return [
            {
                "id": s.id,
                "created_at": s.created_at.isoformat(),
                "generation": s.generation,
                "turn_number": s.state.turn_number,
                "is_game_over": s.state.is_game_over,
                "winner": s.state.winner.name if s.state.winner is not None else None,
                "strategy": s.strategy.name,
            }
            for s in self._sessions.values()
        ]


class StrategyFactory:
    """Factory for creating opponent strategy instances."""

    AVAILABLE_STRATEGIES = {
        "first-playable": "Plays the first legal card, draws penalties (default)",
        "random": "Random legal move (baseline)",
    }

    def create(self, name: str, params: dict[str, Any] | None = None) -> Strategy:
        """Create a strategy instance."""
        params = params or {}

        match name.lower():
            case "first-playable":
                from strategies.first_playable import FirstPlayableStrategy
                return FirstPlayableStrategy(seed=params.get("seed"))

            case "random":
                from strategies.random_strategy import RandomStrategy
                return RandomStrategy(seed=params.get("seed"))

            case _:
                raise ValueError(f"Unknown strategy: {name}")

    def list_strategies(self) -> dict[str, str]:
        """List available strategies with descriptions."""
        return self.AVAILABLE_STRATEGIES.copy()


# Global session manager instance
session_manager = GameSessionManager()
