"""Plain-text rendering of game snapshots."""

from core.cards import Card
from core.game.state import GameState, Outcome

HELP_TEXT = """\
Set Game Commands:
------------------
select <index> - Select or deselect a card by its index
deal           - Deal three more cards
clear          - Clear current selection
hint           - Get a hint for a valid set
restart        - Start a new game
help           - Display this help message
quit           - Exit the game"""


def render_status(state: GameState) -> str:
    """Score and deck line."""
    return f"Sets found: {state.sets_found}   Cards in deck: {state.remaining_cards}"


def render_table(state: GameState) -> str:
    """Render the table with stable indices; selected cards are starred."""
    width = len(str(max(len(state.table) - 1, 0)))
    lines = ["Cards on the table:", "-------------------"]
    for index, card in enumerate(state.table):
        marker = " *" if state.is_selected(card) else ""
        lines.append(f"[{index:>{width}}] {card}{marker}")
    return "\n".join(lines)


def render_selection(state: GameState) -> str:
    """List the selected cards."""
    if not state.selection:
        return "No cards selected."
    lines = ["Selected cards:"]
    lines.extend(f"- {card}" for card in state.selection)
    return "\n".join(lines)


def render_outcome(state: GameState) -> str | None:
    """Verdict on a full selection, if there is one."""
    if state.last_outcome is Outcome.VALID:
        return "Valid set found!"
    if state.last_outcome is Outcome.INVALID:
        return "Not a valid set. Try again!"
    return None


def render_hint(triple: tuple[Card, ...] | None, state: GameState) -> str:
    """Describe a hint triple by index and card."""
    if triple is None:
        return "No valid sets on the table. Try dealing more cards."
    lines = ["Hint: Look for a set containing these cards:"]
    lines.extend(f"- [{state.table.index(card)}] {card}" for card in triple)
    return "\n".join(lines)


def render_state(state: GameState) -> str:
    """Full screen: status, table, selection and the game-over banner."""
    parts = [render_status(state), render_table(state), render_selection(state)]
    if state.game_over:
        parts.append(
            f"Game Over! You found {state.sets_found} sets.\n"
            "Type 'restart' to play again or 'quit' to exit."
        )
    return "\n\n".join(parts)
