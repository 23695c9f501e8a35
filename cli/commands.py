"""Line-oriented command grammar for the text adapter."""

from dataclasses import dataclass

COMMANDS = ("select", "deal", "clear", "hint", "restart", "help", "quit")


class CommandError(ValueError):
    """Input that does not parse as a command."""


@dataclass(frozen=True)
class Command:
    """A parsed command; index is set only for select."""

    name: str
    index: int | None = None


def parse_command(line: str) -> Command:
    """
    Parse one line of input.

    Accepts `select <index>`, `deal`, `clear`, `hint`, `restart`, `help`
    and `quit`, case-insensitively. `s <index>` and a bare number are
    shorthand for select; `exit` is an alias for quit.

    Raises:
        CommandError: with a user-facing message
    """
    words = line.strip().lower().split()
    if not words:
        raise CommandError("Type a command, or 'help' for a list of commands.")

    name, args = words[0], words[1:]
    if name.isdigit():
        name, args = "select", words
    elif name == "s":
        name = "select"
    elif name == "exit":
        name = "quit"

    if name not in COMMANDS:
        raise CommandError(f"Unknown command '{words[0]}'. Type 'help' for a list of commands.")

    if name == "select":
        if len(args) != 1:
            raise CommandError("Please specify a card index: select <index>")
        try:
            index = int(args[0])
        except ValueError:
            raise CommandError("Invalid index. Please enter a number.") from None
        return Command("select", index)

    if args:
        raise CommandError(f"'{name}' takes no arguments.")
    return Command(name)
