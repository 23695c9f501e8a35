"""Game engine and state management."""

from core.game.events import GameEvent, EventType, EventEmitter
from core.game.intents import (
    Intent,
    StartOrRestart,
    SelectCard,
    ResolveMatch,
    DealMore,
    ClearSelection,
)
from core.game.state import GamePhase, GameState, Outcome
from core.game.timers import (
    DeferredCall,
    Scheduler,
    ManualScheduler,
    ThreadingScheduler,
    AsyncioScheduler,
)
from core.game.engine import SetGame

__all__ = [
    "GameEvent",
    "EventType",
    "EventEmitter",
    "Intent",
    "StartOrRestart",
    "SelectCard",
    "ResolveMatch",
    "DealMore",
    "ClearSelection",
    "GamePhase",
    "GameState",
    "Outcome",
    "DeferredCall",
    "Scheduler",
    "ManualScheduler",
    "ThreadingScheduler",
    "AsyncioScheduler",
    "SetGame",
]
