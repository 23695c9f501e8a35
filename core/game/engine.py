"""Set game engine with state machine."""

import logging
import threading
from random import Random
from typing import Callable

from transitions import Machine

from core.cards import Card, Deck
from core.rules import SetRules
from core.sets import Triple, find_valid_set, has_valid_set, is_valid_set
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.intents import (
    ClearSelection,
    DealMore,
    Intent,
    ResolveMatch,
    SelectCard,
    StartOrRestart,
)
from core.game.state import GamePhase, GameState, Outcome
from core.game.timers import DeferredCall, Scheduler, ThreadingScheduler

logger = logging.getLogger(__name__)


class SetGame:
    """
    Set game engine using a state machine.

    This is the core game logic, completely UI-agnostic. Presentation layers
    send intents through dispatch() and read back immutable GameState
    snapshots; events describe what happened along the way.

    Intents are processed one at a time under a re-entrant lock, so a
    deferred resolution firing on a timer thread never interleaves with a
    player intent.
    """

    # State machine states
    STATES = [p.name.lower() for p in GamePhase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "begin", "source": "*", "dest": "playing"},
        {"trigger": "set_found", "source": "playing", "dest": "match_pending"},
        {"trigger": "selection_dropped", "source": "match_pending", "dest": "playing"},
        {"trigger": "match_resolved", "source": "match_pending", "dest": "playing"},
        {"trigger": "deck_exhausted", "source": "playing", "dest": "game_over"},
    ]

    def __init__(
        self,
        rules: SetRules | None = None,
        rng: Random | None = None,
        scheduler: Scheduler | None = None,
        auto_start: bool = True,
    ) -> None:
        """
        Initialize a new Set game.

        Args:
            rules: Table policy (uses defaults if not provided)
            rng: Random number generator for reproducible shuffles
            scheduler: Runs the delayed match resolution (timer threads by default)
            auto_start: Deal the first table immediately
        """
        self.rules = rules or SetRules()
        self.scheduler = scheduler or ThreadingScheduler()
        self.events = EventEmitter()
        self._rng = rng or Random()
        self._lock = threading.RLock()

        self._table: list[Card] = []
        self._deck = Deck(self._rng)
        self._selection: list[Card] = []
        self._discarded: list[Card] = []
        self._outcome = Outcome.UNKNOWN
        self._sets_found = 0
        self._game_over = False
        self._last_matched: tuple[Card, ...] = ()
        self._version = 0
        self._pending: DeferredCall | None = None

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="playing",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

        if auto_start:
            self.dispatch(StartOrRestart())

    @property
    def phase(self) -> GamePhase:
        """Get current game phase as enum."""
        return GamePhase[self._machine_state.upper()]  # type: ignore

    @property
    def version(self) -> int:
        """Number of intents accepted so far."""
        return self._version

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> Callable[[], None]:
        """Subscribe to game events; returns an unsubscribe callable."""
        return self.events.subscribe(handler, event_type)

    def on_state_change(self, listener: Callable[[GameState], None]) -> Callable[[], None]:
        """Call listener with the new snapshot once per accepted intent."""
        return self.events.subscribe(
            lambda event: listener(event.data["state"]),
            EventType.STATE_CHANGED,
        )

    def current_state(self) -> GameState:
        """Return a read-only snapshot of the game."""
        with self._lock:
            return GameState(
                table=tuple(self._table),
                remaining_deck=self._deck.cards,
                selection=tuple(self._selection),
                last_outcome=self._outcome,
                sets_found=self._sets_found,
                game_over=self._game_over,
                last_matched=self._last_matched,
                discarded=tuple(self._discarded),
                phase=self.phase,
                version=self._version,
            )

    def dispatch(self, intent: Intent) -> GameState:
        """
        Apply one intent and return the resulting snapshot.

        Intents that are invalid for the current state are ignored: the
        snapshot comes back unchanged and no STATE_CHANGED event is emitted.
        """
        with self._lock:
            match intent:
                case StartOrRestart():
                    accepted = self._start()
                case SelectCard(card=card):
                    accepted = self._select(card)
                case ResolveMatch(cards=cards, version=version):
                    accepted = self._resolve(tuple(cards), version)
                case DealMore():
                    accepted = self._deal()
                case ClearSelection():
                    accepted = self._clear()
                case _:
                    accepted = self._reject(f"Unknown intent: {intent!r}")

            if not accepted:
                return self.current_state()

            self._version += 1
            self._cancel_pending()
            if self._outcome is Outcome.VALID:
                self._schedule_resolution()

            state = self.current_state()
            logger.debug(
                "Accepted %s (version %d, phase %s)",
                type(intent).__name__,
                self._version,
                state.phase.name,
            )
            self.events.emit_new(
                EventType.STATE_CHANGED,
                intent=type(intent).__name__,
                state=state,
            )
            return state

    # Convenience wrappers

    def restart(self) -> GameState:
        """Start a fresh game."""
        return self.dispatch(StartOrRestart())

    def select(self, card: Card) -> GameState:
        """Toggle a card in the selection."""
        return self.dispatch(SelectCard(card))

    def select_index(self, index: int) -> GameState:
        """Toggle the card at a table index; out-of-range indices are ignored."""
        with self._lock:
            if not 0 <= index < len(self._table):
                self._reject(f"No card at index {index}", index=index)
                return self.current_state()
            return self.dispatch(SelectCard(self._table[index]))

    def deal_more(self) -> GameState:
        """Deal extra cards if the table allows it."""
        return self.dispatch(DealMore())

    def clear_selection(self) -> GameState:
        """Drop the current selection."""
        return self.dispatch(ClearSelection())

    def find_hint(self) -> Triple | None:
        """Return one valid triple on the table without changing the game."""
        with self._lock:
            triple = find_valid_set(self._table)
            if triple is not None:
                self.events.emit_new(EventType.HINT_GIVEN, cards=[str(c) for c in triple])
            return triple

    @property
    def can_deal(self) -> bool:
        """Check if a DealMore intent would be accepted."""
        with self._lock:
            return bool(self._deck) and (
                len(self._table) < self.rules.deal_gate_table_size
                or not has_valid_set(self._table)
            )

    @property
    def has_pending_resolution(self) -> bool:
        """Check if a matched triple is waiting for its deferred resolution."""
        return self._pending is not None and self._pending.pending

    # Intent handlers

    def _start(self) -> bool:
        """Shuffle a new deck and deal the opening table."""
        self._deck.restock()
        self._table = self._deck.draw(self.rules.table_size)
        self._selection.clear()
        self._discarded.clear()
        self._outcome = Outcome.UNKNOWN
        self._sets_found = 0
        self._game_over = False
        self._last_matched = ()

        self.begin()  # Trigger state transition
        self.events.emit_new(
            EventType.GAME_STARTED,
            table_size=len(self._table),
            cards_remaining=len(self._deck),
        )
        self._update_game_over()
        return True

    def _select(self, card: Card) -> bool:
        """Toggle a card, evaluating the selection once it holds three cards."""
        if card not in self._table:
            return self._reject("Card is not on the table", card=str(card))

        if card in self._selection:
            had_match = self._outcome is Outcome.VALID
            self._selection.remove(card)
            self._outcome = Outcome.UNKNOWN
            if had_match:
                self.selection_dropped()
            self.events.emit_new(EventType.CARD_DESELECTED, card=str(card))
            return True

        if len(self._selection) >= 3:
            if self.rules.reselect_policy == "ignore":
                return self._reject("Selection is full", card=str(card))
            self._drop_selection()

        self._selection.append(card)
        self.events.emit_new(EventType.CARD_SELECTED, card=str(card))

        if len(self._selection) == 3:
            if is_valid_set(*self._selection):
                self._outcome = Outcome.VALID
                self.set_found()
                self.events.emit_new(
                    EventType.SET_FOUND,
                    cards=[str(c) for c in self._selection],
                )
            else:
                self._outcome = Outcome.INVALID
                self.events.emit_new(
                    EventType.SET_REJECTED,
                    cards=[str(c) for c in self._selection],
                )
        return True

    def _resolve(self, cards: tuple[Card, ...], version: int | None) -> bool:
        """Replace a matched triple with cards from the deck."""
        if version is not None and version != self._version:
            return self._reject("Stale match resolution", version=version)
        if len(cards) != 3 or len(set(cards)) != 3:
            return self._reject("A match needs three distinct cards")
        if not all(card in self._table for card in cards):
            return self._reject("Matched cards are not on the table")
        if self._outcome is not Outcome.VALID or set(cards) != set(self._selection):
            return self._reject("Matched cards do not match the selection")

        self._table = [card for card in self._table if card not in cards]
        drawn = self._deck.draw(len(cards))
        self._table.extend(drawn)
        self._discarded.extend(cards)

        self._selection.clear()
        self._outcome = Outcome.UNKNOWN
        self._sets_found += 1
        self._last_matched = cards

        self.match_resolved()
        self.events.emit_new(
            EventType.MATCH_RESOLVED,
            cards=[str(c) for c in cards],
            replaced=len(drawn),
            sets_found=self._sets_found,
        )
        self._update_game_over()
        return True

    def _deal(self) -> bool:
        """Deal extra cards unless the deck is empty or the table is large and solvable."""
        if not self._deck:
            self.events.emit_new(EventType.DEAL_REFUSED, reason="deck_empty")
            return False
        if len(self._table) >= self.rules.deal_gate_table_size and has_valid_set(self._table):
            self.events.emit_new(EventType.DEAL_REFUSED, reason="set_on_table")
            return False

        self._drop_selection()
        drawn = self._deck.draw(self.rules.deal_size)
        self._table.extend(drawn)
        self.events.emit_new(
            EventType.CARDS_DEALT,
            cards=[str(c) for c in drawn],
            cards_remaining=len(self._deck),
        )
        self._update_game_over()
        return True

    def _clear(self) -> bool:
        """Drop the selection; always accepted."""
        self._drop_selection()
        self.events.emit_new(EventType.SELECTION_CLEARED)
        return True

    # Helpers

    def _drop_selection(self) -> None:
        """Clear the selection, leaving MATCH_PENDING if a valid triple was shown."""
        had_match = self._outcome is Outcome.VALID
        self._selection.clear()
        self._outcome = Outcome.UNKNOWN
        if had_match:
            self.selection_dropped()

    def _update_game_over(self) -> None:
        """Re-evaluate game over after the table or deck changed."""
        if self._game_over or self._deck or has_valid_set(self._table):
            return
        self._game_over = True
        self.deck_exhausted()
        self.events.emit_new(EventType.GAME_ENDED, sets_found=self._sets_found)

    def _schedule_resolution(self) -> None:
        """Schedule the matched selection to resolve after the display delay."""
        cards = tuple(self._selection)
        version = self._version
        self._pending = self.scheduler.call_later(
            self.rules.resolve_delay,
            lambda: self.dispatch(ResolveMatch(cards, version)),
        )
        logger.debug("Scheduled match resolution for version %d", version)

    def _cancel_pending(self) -> None:
        """Cancel a scheduled resolution, if any."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _reject(self, message: str, **data: object) -> bool:
        """Report an ignored intent; always returns False."""
        logger.debug("Ignored intent: %s", message)
        self.events.emit_new(EventType.INVALID_ACTION, message=message, **data)
        return False
