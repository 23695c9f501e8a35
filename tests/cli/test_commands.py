"""Tests for the text command grammar."""

import pytest

from cli.commands import Command, CommandError, parse_command


class TestParseCommand:
    @pytest.mark.parametrize(
        "line, expected",
        [
            ("select 3", Command("select", 3)),
            ("  SELECT   11 ", Command("select", 11)),
            ("s 0", Command("select", 0)),
            ("7", Command("select", 7)),
            ("deal", Command("deal")),
            ("Clear", Command("clear")),
            ("hint", Command("hint")),
            ("restart", Command("restart")),
            ("help", Command("help")),
            ("quit", Command("quit")),
            ("exit", Command("quit")),
        ],
    )
    def test_valid_commands(self, line, expected):
        assert parse_command(line) == expected

    def test_negative_index_parses(self):
        assert parse_command("select -1") == Command("select", -1)

    @pytest.mark.parametrize(
        "line, message",
        [
            ("", "Type a command, or 'help' for a list of commands."),
            ("select", "Please specify a card index: select <index>"),
            ("select 1 2", "Please specify a card index: select <index>"),
            ("select two", "Invalid index. Please enter a number."),
            ("shuffle", "Unknown command 'shuffle'. Type 'help' for a list of commands."),
            ("deal 3", "'deal' takes no arguments."),
        ],
    )
    def test_errors(self, line, message):
        with pytest.raises(CommandError) as exc_info:
            parse_command(line)
        assert str(exc_info.value) == message

    def test_command_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_command("fold")
