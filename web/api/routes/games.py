"""Game API routes."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from crazy8_engine.cards import Suit
from crazy8_engine.state import Side
from web.api.session_manager import (
    GameSession,
    MoveResult,
    SessionConfig,
    StrategyFactory,
    session_manager,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["games"])


# Request/Response models
class CreateGameRequest(BaseModel):
    """Request to create a new game."""

    strategy: str = Field("first-playable", description="Opponent strategy name")
    strategy_params: dict[str, Any] = Field(
        default_factory=dict, description="Strategy parameters"
    )
    seed: int | None = Field(None, description="Random seed for reproducibility")
    first_side: str | None = Field(None, description="'player' or 'opponent'; random if omitted")
    opponent_delay_ms: int | None = Field(None, ge=0, description="Delay before the opponent moves")
    skip_delay_ms: int | None = Field(None, ge=0, description="Delay before a four/ace skip resolves")
    recycle_discards: bool | None = Field(
        None, description="Reshuffle the discard pile when the deck runs out"
    )


class NewGameRequest(BaseModel):
    """Request to deal a new game in an existing session."""

    first_side: str | None = Field(None, description="'player' or 'opponent'; random if omitted")


class PlayCardsRequest(BaseModel):
    """Request to play cards from the player's hand."""

    card_ids: list[str] = Field(..., description="Card ids in play order; the last becomes active")


class ChooseSuitRequest(BaseModel):
    """Request to name the suit after playing an eight."""

    suit: str = Field(..., description="hearts, diamonds, clubs or spades")


class StrategyInfo(BaseModel):
    """Information about an available strategy."""

    name: str
    description: str


def _parse_side(value: str | None) -> Side | None:
    if value is None:
        return None
    try:
        return Side[value.upper()]
    except KeyError:
        raise HTTPException(status_code=400, detail=f"Unknown side: {value}") from None


def _parse_suit(value: str) -> Suit:
    try:
        return Suit.parse(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None


def _get_session(game_id: str) -> GameSession:
    session = session_manager.get_session(game_id)
    if not session:
        raise HTTPException(status_code=404, detail="Game not found")
    return session


def _intent_response(session: GameSession, result: MoveResult) -> dict:
    if not result.accepted:
        raise HTTPException(status_code=400, detail=result.reason)
    return {"state": session.snapshot().to_dict()}


# REST Endpoints


@router.get("/strategies", response_model=list[StrategyInfo])
async def list_strategies():
    """List available opponent strategies."""
    factory = StrategyFactory()
    strategies = factory.list_strategies()
    return [StrategyInfo(name=name, description=desc) for name, desc in strategies.items()]


@router.post("/games", response_model=dict)
async def create_game(request: CreateGameRequest):
    """Create a new game session and deal the first game."""
    defaults = session_manager.config
    config = SessionConfig(
        opponent_delay=(
            request.opponent_delay_ms / 1000
            if request.opponent_delay_ms is not None
            else defaults.opponent_delay
        ),
        skip_delay=(
            request.skip_delay_ms / 1000
            if request.skip_delay_ms is not None
            else defaults.skip_delay
        ),
        hand_size=defaults.hand_size,
        recycle_discards=(
            request.recycle_discards
            if request.recycle_discards is not None
            else defaults.recycle_discards
        ),
        strategy_name=request.strategy,
        strategy_params=request.strategy_params,
    )

    try:
        session = session_manager.create_session(
            config=config,
            seed=request.seed,
            first_side=_parse_side(request.first_side),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"game_id": session.id, "state": session.snapshot().to_dict()}


@router.get("/games", response_model=list[dict])
async def list_games():
    """List all active game sessions."""
    return session_manager.list_sessions()


@router.get("/games/{game_id}")
async def get_game(game_id: str):
    """Get the current snapshot of a game."""
    session = _get_session(game_id)
    return {
        "state": session.snapshot().to_dict(),
        "move_history": session.move_history,
    }


@router.post("/games/{game_id}/new")
async def new_game(game_id: str, request: NewGameRequest | None = None):
    """Deal a new game, cancelling anything pending from the old one."""
    session = _get_session(game_id)
    first_side = _parse_side(request.first_side) if request else None
    return _intent_response(session, session.start_new_game(first_side=first_side))


@router.post("/games/{game_id}/play")
async def play_cards(game_id: str, request: PlayCardsRequest):
    """Play the selected cards."""
    session = _get_session(game_id)
    return _intent_response(session, session.play_cards(request.card_ids))


@router.post("/games/{game_id}/draw")
async def draw_card(game_id: str):
    """Draw the pending penalty, or one card."""
    session = _get_session(game_id)
    return _intent_response(session, session.draw_card())


@router.post("/games/{game_id}/suit")
async def choose_suit(game_id: str, request: ChooseSuitRequest):
    """Name the suit for the eight just played."""
    session = _get_session(game_id)
    return _intent_response(session, session.choose_suit(_parse_suit(request.suit)))


@router.delete("/games/{game_id}")
async def delete_game(game_id: str):
    """Delete a game session."""
    if session_manager.delete_session(game_id):
        return {"deleted": True}
    raise HTTPException(status_code=404, detail="Game not found")


# WebSocket endpoint for real-time game play


@router.websocket("/ws/game/{game_id}")
async def game_websocket(websocket: WebSocket, game_id: str):
    """WebSocket endpoint for real-time game updates.

    Protocol:
    Server -> Client messages:
        - game_state: Full snapshot (sent on connect and on request)
        - game_started: A new game was dealt
        - move_made: A move was executed, by either side
        - error: An intent was rejected

    Client -> Server messages:
        - play: {card_ids: [str]}
        - draw
        - choose_suit: {suit: str}
        - new_game
        - get_state
    """
    session = session_manager.get_session(game_id)
    if not session:
        logger.warning(f"WebSocket: Game not found: {game_id}")
        await websocket.close(code=4004, reason="Game not found")
        return

    await websocket.accept()
    logger.info(f"WebSocket connected: game_id={game_id}")

    # Deferred opponent moves fire outside this handler; forward them through a queue
    event_queue: asyncio.Queue = asyncio.Queue()
    session.add_listener(event_queue.put_nowait)

    async def forward_events():
        while True:
            event = await event_queue.get()
            try:
                await websocket.send_json(event)
            except (WebSocketDisconnect, RuntimeError):
                logger.debug(f"WebSocket closed while forwarding events: game_id={game_id}")
                break

    event_task = asyncio.create_task(forward_events())

    try:
        await websocket.send_json({"type": "game_state", "state": session.snapshot().to_dict()})

        while True:
            data = await websocket.receive_json()
            msg_type = data.get("type", "")

            match msg_type:
                case "play":
                    result = session.play_cards(data.get("card_ids") or [])
                case "draw":
                    result = session.draw_card()
                case "choose_suit":
                    try:
                        result = session.choose_suit(Suit.parse(str(data.get("suit", ""))))
                    except ValueError as e:
                        result = MoveResult(False, str(e))
                case "new_game":
                    result = session.start_new_game()
                case "get_state":
                    await websocket.send_json(
                        {"type": "game_state", "state": session.snapshot().to_dict()}
                    )
                    continue
                case _:
                    result = MoveResult(False, f"Unknown message type: {msg_type}")

            if not result.accepted:
                await websocket.send_json({"type": "error", "message": result.reason})

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: game_id={game_id}")
    finally:
        session.remove_listener(event_queue.put_nowait)
        event_task.cancel()
        try:
            await event_task
        except asyncio.CancelledError:
            pass
