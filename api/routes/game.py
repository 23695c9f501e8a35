"""Game API endpoints."""

import logging
from fastapi import APIRouter, HTTPException, Header
from typing import Annotated

from api.schemas import CardResponse, GameStateResponse, HintResponse, SelectRequest
from api.session import extract_session_id, get_session_store
from config import config
from core.game import (
    AsyncioScheduler,
    ClearSelection,
    DealMore,
    Intent,
    SelectCard,
    SetGame,
    StartOrRestart,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# One live game per session; games are not persisted
_games: dict[str, SetGame] = {}


def _new_game() -> SetGame:
    """Create a game whose match resolution runs on the event loop."""
    return SetGame(rules=config.game.rules(), scheduler=AsyncioScheduler())


def get_or_create_game(session_id: str) -> SetGame:
    """Get the session's game, starting one if needed."""
    get_session_store().touch(session_id)
    if session_id not in _games:
        _games[session_id] = _new_game()
        logger.info("Started game for session %s", session_id[:8])
    return _games[session_id]


def reset_game(session_id: str) -> SetGame:
    """
    Deal the session's game afresh.

    An existing game is restarted in place, so WebSockets subscribed to it
    keep receiving its state changes.
    """
    game = _games.get(session_id)
    if game is None:
        return get_or_create_game(session_id)

    get_session_store().touch(session_id)
    game.dispatch(StartOrRestart())
    return game


def drop_expired_games() -> int:
    """Forget games whose sessions expired."""
    expired = get_session_store().cleanup_expired()
    for session_id in expired:
        _games.pop(session_id, None)
    return len(expired)


def state_response(game: SetGame) -> GameStateResponse:
    """Convert the game's current snapshot to a response."""
    return GameStateResponse.from_state(game.current_state(), can_deal=game.can_deal)


def _require_session(session_id: str) -> SetGame:
    """Resolve a signed session header to its game."""
    if extract_session_id(session_id) is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session")
    return get_or_create_game(session_id)


def _apply(game: SetGame, intent: Intent, error: str) -> GameStateResponse:
    """Dispatch an intent; a refused intent becomes a 400 with a message."""
    before = game.version
    game.dispatch(intent)
    if game.version == before:
        raise HTTPException(status_code=400, detail=error)
    return state_response(game)


@router.post("/new")
async def new_game(
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> dict[str, str]:
    """Create a new game session (or restart the given one)."""
    drop_expired_games()
    if session_id is None or extract_session_id(session_id) is None:
        session_id = get_session_store().create()

    reset_game(session_id)
    return {"session_id": session_id}


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current game state."""
    return state_response(_require_session(session_id))


@router.post("/select")
async def select_card(
    request: SelectRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Toggle the card at a table index."""
    game = _require_session(session_id)
    table = game.current_state().table
    if request.index >= len(table):
        raise HTTPException(status_code=400, detail=f"No card at index {request.index}")
    return _apply(game, SelectCard(table[request.index]), "Selection is full")


@router.post("/deal")
async def deal_more(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Deal three more cards."""
    game = _require_session(session_id)
    return _apply(game, DealMore(), "Cannot deal more cards now")


@router.post("/clear")
async def clear_selection(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Clear the current selection."""
    game = _require_session(session_id)
    return _apply(game, ClearSelection(), "Cannot clear selection")


@router.post("/restart")
async def restart_game(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Shuffle a new deck and deal a fresh table."""
    game = _require_session(session_id)
    return _apply(game, StartOrRestart(), "Cannot restart")


@router.get("/hint")
async def get_hint(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> HintResponse:
    """Point out one valid set on the table, if there is one."""
    game = _require_session(session_id)
    triple = game.find_hint()
    if triple is None:
        return HintResponse(found=False)

    table = game.current_state().table
    return HintResponse(
        found=True,
        indices=[table.index(c) for c in triple],
        cards=[CardResponse.from_card(c) for c in triple],
    )
