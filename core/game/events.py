"""Game events for the event system."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Types of game events."""

    # Game flow events
    GAME_STARTED = auto()
    GAME_ENDED = auto()

    # Selection events
    CARD_SELECTED = auto()
    CARD_DESELECTED = auto()
    SELECTION_CLEARED = auto()

    # Outcome events
    SET_FOUND = auto()
    SET_REJECTED = auto()
    MATCH_RESOLVED = auto()

    # Table events
    CARDS_DEALT = auto()
    DEAL_REFUSED = auto()
    HINT_GIVEN = auto()

    # One per accepted intent, carries the new snapshot
    STATE_CHANGED = auto()

    # Error events
    INVALID_ACTION = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Immutable game event.

    Events are the primary communication mechanism between the core engine
    and the presentation layer.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Event emitter for game events.

    Handlers subscribe to one event type or to everything; they are called
    synchronously, in subscription order, on the emitting thread.
    """

    def __init__(self, max_history: int = 500) -> None:
        """Initialize the emitter with a bounded event history."""
        self._handlers: dict[EventType | None, list[EventHandler]] = {}
        self._event_history: deque[GameEvent] = deque(maxlen=max_history)

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> Callable[[], None]:
        """
        Subscribe to events.

        Args:
            handler: Function to call when event occurs
            event_type: Specific event type to subscribe to, or None for all events

        Returns:
            A callable that removes the subscription
        """
        self._handlers.setdefault(event_type, []).append(handler)
        return lambda: self.unsubscribe(handler, event_type)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        """Record an event and deliver it to type-specific then catch-all handlers."""
        self._event_history.append(event)

        # Copy so handlers may unsubscribe while being called
        for handler in list(self._handlers.get(event.event_type, [])):
            handler(event)
        for handler in list(self._handlers.get(None, [])):
            handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Create and emit a new event."""
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Return the retained event history, oldest first."""
        return list(self._event_history)

    def clear_history(self) -> None:
        """Clear the event history."""
        self._event_history.clear()
