"""Game phases, selection outcomes, and the immutable state snapshot."""

from dataclasses import dataclass
from enum import Enum, auto

from core.cards import Card


class GamePhase(Enum):
    """
    Game state machine phases.

    Flow: PLAYING → MATCH_PENDING → PLAYING ... → GAME_OVER
    """

    # Player is selecting cards
    PLAYING = auto()

    # A valid triple is displayed, waiting for the deferred resolution
    MATCH_PENDING = auto()

    # Deck exhausted and no set left on the table
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid phase transitions
VALID_TRANSITIONS: dict[GamePhase, list[GamePhase]] = {
    GamePhase.PLAYING: [GamePhase.PLAYING, GamePhase.MATCH_PENDING, GamePhase.GAME_OVER],
    GamePhase.MATCH_PENDING: [GamePhase.PLAYING, GamePhase.GAME_OVER],
    GamePhase.GAME_OVER: [GamePhase.PLAYING],  # Restart only
}


def is_valid_transition(from_phase: GamePhase, to_phase: GamePhase) -> bool:
    """
    Check if a phase transition is valid.

    Args:
        from_phase: Current phase
        to_phase: Desired phase

    Returns:
        True if the transition is allowed
    """
    return to_phase in VALID_TRANSITIONS.get(from_phase, [])


class Outcome(Enum):
    """Verdict on the current selection."""

    UNKNOWN = auto()
    VALID = auto()
    INVALID = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class GameState:
    """
    Read-only snapshot of a game after a transition.

    Snapshots are what the engine hands to presentation adapters; they are
    never mutated, a new one is built after every accepted intent.
    """

    table: tuple[Card, ...] = ()
    remaining_deck: tuple[Card, ...] = ()
    selection: tuple[Card, ...] = ()
    last_outcome: Outcome = Outcome.UNKNOWN
    sets_found: int = 0
    game_over: bool = False
    last_matched: tuple[Card, ...] = ()
    discarded: tuple[Card, ...] = ()
    phase: GamePhase = GamePhase.PLAYING
    version: int = 0

    @property
    def remaining_cards(self) -> int:
        """Return the number of undealt cards."""
        return len(self.remaining_deck)

    @property
    def selected_indices(self) -> tuple[int, ...]:
        """Return the table indices of the selected cards, in selection order."""
        return tuple(self.table.index(card) for card in self.selection)

    def is_selected(self, card: Card) -> bool:
        """Check if a card is part of the current selection."""
        return card in self.selection

    def check_invariants(self) -> None:
        """Raise AssertionError if the snapshot breaks a table invariant."""
        table = set(self.table)
        deck = set(self.remaining_deck)
        assert len(table) == len(self.table), "duplicate card on table"
        assert len(deck) == len(self.remaining_deck), "duplicate card in deck"
        assert not table & deck, "card both on table and in deck"
        assert not set(self.discarded) & (table | deck), "matched card back in play"
        assert len(self.selection) <= 3, "more than three cards selected"
        assert set(self.selection) <= table, "selected card not on table"
        assert len(set(self.selection)) == len(self.selection), "card selected twice"
        if self.last_outcome is not Outcome.UNKNOWN:
            assert len(self.selection) == 3, "outcome set without a full selection"
        assert self.sets_found >= 0, "negative score"
