"""Player and system intents accepted by the game engine."""

from dataclasses import dataclass

from core.cards import Card


@dataclass(frozen=True)
class StartOrRestart:
    """Shuffle a new deck and deal a fresh table."""


@dataclass(frozen=True)
class SelectCard:
    """Toggle a table card in the selection."""

    card: Card


@dataclass(frozen=True)
class ResolveMatch:
    """
    Remove a matched triple and replace it from the deck.

    version is the engine version when the resolution was scheduled; None
    skips the staleness check for a resolution requested directly.
    """

    cards: tuple[Card, ...]
    version: int | None = None


@dataclass(frozen=True)
class DealMore:
    """Deal extra cards onto the table."""


@dataclass(frozen=True)
class ClearSelection:
    """Drop the current selection."""


Intent = StartOrRestart | SelectCard | ResolveMatch | DealMore | ClearSelection
