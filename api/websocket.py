"""WebSocket connection management with game engine integration."""

import asyncio
import json
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from typing import Any, Callable

from api.routes.game import get_or_create_game, state_response
from api.schemas import CardResponse
from core.game import (
    ClearSelection,
    DealMore,
    EventType,
    GameEvent,
    SelectCard,
    SetGame,
    StartOrRestart,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class ConnectionManager:
    """Manage WebSocket connections and their game subscriptions."""

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}
        self._event_queues: dict[str, asyncio.Queue[GameEvent]] = {}
        self._unsubscribers: dict[str, Callable[[], None]] = {}

    async def connect(self, websocket: WebSocket, session_id: str) -> SetGame:
        """Accept a connection and subscribe it to the session's game."""
        await websocket.accept()
        self._connections[session_id] = websocket
        self._event_queues[session_id] = asyncio.Queue()
        return self.attach(session_id, get_or_create_game(session_id))

    def attach(self, session_id: str, game: SetGame) -> SetGame:
        """Route the game's state changes to this session's queue."""
        self._detach(session_id)
        self._unsubscribers[session_id] = game.subscribe(
            lambda event: self._queue_event(session_id, event),
            EventType.STATE_CHANGED,
        )
        return game

    def disconnect(self, session_id: str) -> None:
        """Remove a connection; the game itself is kept for reconnection."""
        self._detach(session_id)
        self._connections.pop(session_id, None)
        self._event_queues.pop(session_id, None)

    def _detach(self, session_id: str) -> None:
        unsubscribe = self._unsubscribers.pop(session_id, None)
        if unsubscribe is not None:
            unsubscribe()

    def _queue_event(self, session_id: str, event: GameEvent) -> None:
        """Queue an event for async delivery."""
        queue = self._event_queues.get(session_id)
        if queue is not None:
            queue.put_nowait(event)

    async def next_event(self, session_id: str) -> GameEvent:
        """Wait for the next queued event."""
        return await self._event_queues[session_id].get()

    async def send_message(self, session_id: str, message: dict[str, Any]) -> None:
        """Send a message to a specific session."""
        websocket = self._connections.get(session_id)
        if websocket is None:
            return
        try:
            await websocket.send_json(message)
        except (RuntimeError, WebSocketDisconnect):
            logger.debug("Dropped message for closed session %s", session_id[:8])

    @property
    def active_connections(self) -> int:
        """Return number of active connections."""
        return len(self._connections)


# Global connection manager
manager = ConnectionManager()


def _state_message(game: SetGame) -> dict[str, Any]:
    """Build a state_update message."""
    return {"type": "state_update", "state": state_response(game).model_dump()}


def _hint_message(game: SetGame) -> dict[str, Any]:
    """Build a hint message for the current table."""
    triple = game.find_hint()
    if triple is None:
        return {"type": "hint", "found": False, "indices": [], "cards": []}
    table = game.current_state().table
    return {
        "type": "hint",
        "found": True,
        "indices": [table.index(c) for c in triple],
        "cards": [CardResponse.from_card(c).model_dump() for c in triple],
    }


def _error(message: str) -> dict[str, Any]:
    return {"type": "error", "message": message}


@router.websocket("/game/{session_id}")
async def game_websocket(websocket: WebSocket, session_id: str) -> None:
    """
    WebSocket endpoint for real-time game updates.

    Messages from client:
    - {"type": "select", "index": 3}
    - {"type": "deal"}
    - {"type": "clear"}
    - {"type": "hint"}
    - {"type": "restart"}
    - {"type": "get_state"}

    Messages to client:
    - {"type": "state_update", "state": {...}}  (after every state change,
      including the delayed resolution of a matched set)
    - {"type": "hint", "found": bool, "indices": [...], "cards": [...]}
    - {"type": "error", "message": "..."}
    """
    game = await manager.connect(websocket, session_id)
    await manager.send_message(session_id, _state_message(game))

    async def push_state_changes() -> None:
        """Forward every state change to the client."""
        while True:
            await manager.next_event(session_id)
            await manager.send_message(session_id, _state_message(game))

    push_task = asyncio.create_task(push_state_changes())

    try:
        while True:
            try:
                message = json.loads(await websocket.receive_text())
            except json.JSONDecodeError:
                await manager.send_message(session_id, _error("Malformed JSON"))
                continue
            if not isinstance(message, dict):
                await manager.send_message(session_id, _error("Expected a JSON object"))
                continue

            msg_type = message.get("type")
            before = game.version

            if msg_type == "get_state":
                await manager.send_message(session_id, _state_message(game))

            elif msg_type == "select":
                index = message.get("index")
                table = game.current_state().table
                if not isinstance(index, int) or not 0 <= index < len(table):
                    await manager.send_message(session_id, _error(f"No card at index {index}"))
                    continue
                game.dispatch(SelectCard(table[index]))
                if game.version == before:
                    await manager.send_message(session_id, _error("Selection is full"))

            elif msg_type == "deal":
                game.dispatch(DealMore())
                if game.version == before:
                    await manager.send_message(session_id, _error("Cannot deal more cards now"))

            elif msg_type == "clear":
                game.dispatch(ClearSelection())

            elif msg_type == "hint":
                await manager.send_message(session_id, _hint_message(game))

            elif msg_type == "restart":
                game.dispatch(StartOrRestart())

            else:
                await manager.send_message(
                    session_id, _error(f"Unknown message type: {msg_type}")
                )

    except WebSocketDisconnect:
        pass
    finally:
        push_task.cancel()
        try:
            await push_task
        except asyncio.CancelledError:
            pass
        manager.disconnect(session_id)
