"""Tests for the terminal adapter and text rendering."""

import pytest

from cli import main as cli_main
from cli.main import TextAdapter
from cli.render import HELP_TEXT, render_hint, render_state, render_table
from config import AppConfig, GameConfig
from core.game import GameState
from core.rules import SetRules
from core.sets import is_valid_set


@pytest.fixture
def output():
    return []


@pytest.fixture
def adapter(ordered_game, scheduler, output):
    return TextAdapter(ordered_game, scheduler, write=output.append)


class TestRender:
    def test_table_lines(self, ordered_game):
        state = ordered_game.select_index(1)
        lines = render_table(state).splitlines()
        assert lines[2] == "[ 0] 1 red oval (solid)"
        assert lines[3] == "[ 1] 1 red oval (striped) *"
        assert len(lines) == 14

    def test_state_shows_status_and_selection(self, ordered_game):
        text = render_state(ordered_game.select_index(0))
        assert text.startswith("Sets found: 0   Cards in deck: 69")
        assert "Selected cards:\n- 1 red oval (solid)" in text
        assert "Game Over" not in text

    def test_empty_selection(self, ordered_game):
        assert "No cards selected." in render_state(ordered_game.current_state())

    def test_game_over_banner(self):
        text = render_state(GameState(sets_found=27, game_over=True))
        assert "Game Over! You found 27 sets." in text

    def test_hint(self, ordered_game):
        state = ordered_game.current_state()
        text = render_hint(ordered_game.find_hint(), state)
        assert text.splitlines() == [
            "Hint: Look for a set containing these cards:",
            "- [0] 1 red oval (solid)",
            "- [1] 1 red oval (striped)",
            "- [2] 1 red oval (open)",
        ]

    def test_no_hint(self, ordered_game):
        assert render_hint(None, ordered_game.current_state()).startswith("No valid sets")


class TestTextAdapter:
    def test_valid_set_resolved_before_next_prompt(self, adapter, ordered_game, output):
        for line in ("select 0", "select 1", "2"):
            assert adapter.handle(line)

        assert "Valid set found!" in output
        state = ordered_game.current_state()
        assert state.sets_found == 1
        assert state.selection == ()
        assert len(state.table) == 12

    def test_invalid_set_cleared(self, adapter, ordered_game, output):
        for line in ("select 0", "select 1", "select 3"):
            adapter.handle(line)

        assert "Not a valid set. Try again!" in output
        state = ordered_game.current_state()
        assert state.selection == ()
        assert state.sets_found == 0

    def test_invalid_index(self, adapter, output):
        adapter.handle("select 12")
        adapter.handle("select -1")
        assert output == ["Invalid card index: 12", "Invalid card index: -1"]

    def test_parse_errors_are_reported(self, adapter, output):
        assert adapter.handle("select")
        assert output == ["Please specify a card index: select <index>"]

    def test_deal_and_refusal(self, adapter, ordered_game, output):
        adapter.handle("deal")
        assert len(ordered_game.current_state().table) == 15
        adapter.handle("deal")
        assert output == ["There is already a set on the table. Keep looking!"]

    def test_clear(self, adapter, ordered_game, output):
        adapter.handle("select 5")
        adapter.handle("clear")
        assert ordered_game.current_state().selection == ()
        assert output[-1] == "Selection cleared."

    def test_hint(self, adapter, output):
        adapter.handle("hint")
        assert output[0].startswith("Hint: Look for a set containing these cards:")

    def test_restart(self, adapter, ordered_game, output):
        adapter.handle("deal")
        adapter.handle("restart")
        assert len(ordered_game.current_state().table) == 12
        assert output[-1] == "Game restarted!"

    def test_help(self, adapter, output):
        adapter.handle("help")
        assert output == [HELP_TEXT]

    def test_quit(self, adapter, output):
        assert adapter.handle("quit") is False
        assert output == ["Thanks for playing Set!"]

    def test_run_stops_at_quit(self, adapter, ordered_game, output):
        adapter.run(["select 0", "quit", "deal"])
        assert output[0] == "Welcome to the Set Card Game!"
        assert output[-1] == "Thanks for playing Set!"
        assert len(ordered_game.current_state().table) == 12

    def test_play_by_hints(self, adapter, ordered_game):
        for _ in range(5):
            triple = ordered_game.find_hint()
            assert is_valid_set(*triple)
            table = ordered_game.current_state().table
            for card in triple:
                adapter.handle(f"select {table.index(card)}")
        assert ordered_game.current_state().sets_found == 5


class TestMain:
    def test_plays_until_eof(self, monkeypatch, capsys):
        lines = iter(["hint", "deal", "quit"])

        def fake_input(prompt=""):
            try:
                return next(lines)
            except StopIteration:
                raise EOFError from None

        monkeypatch.setattr("builtins.input", fake_input)
        cli_main.main(["--seed", "3"])

        out = capsys.readouterr().out
        assert "Welcome to the Set Card Game!" in out
        assert "Thanks for playing Set!" in out

    def test_eof_ends_quietly(self, monkeypatch, capsys):
        def fake_input(prompt=""):
            raise EOFError

        monkeypatch.setattr("builtins.input", fake_input)
        cli_main.main(["--policy", "restart"])
        assert "Cards on the table:" in capsys.readouterr().out

    def test_parser(self):
        args = cli_main.build_parser().parse_args(["--seed", "5", "--verbose"])
        assert args.seed == 5
        assert args.verbose
        assert args.policy is None

    @pytest.mark.parametrize(
        "argv, expected",
        [
            (["--rules", "classic"], SetRules.classic()),
            (["--rules", "instant"], SetRules.instant()),
            (["--rules", "forgiving"], SetRules.forgiving()),
            (
                ["--rules", "instant", "--policy", "restart"],
                SetRules(resolve_delay=0.0, reselect_policy="restart"),
            ),
        ],
    )
    def test_rule_presets(self, argv, expected):
        args = cli_main.build_parser().parse_args(argv)
        assert cli_main.build_rules(args) == expected

    def test_configured_rules_by_default(self, monkeypatch):
        monkeypatch.setattr(cli_main, "config", AppConfig(game=GameConfig(resolve_delay_ms=250)))
        args = cli_main.build_parser().parse_args([])
        assert cli_main.build_rules(args).resolve_delay == 0.25

    def test_instant_preset_resolves_on_select(self, monkeypatch):
        games = []

        class RecordingGame(cli_main.SetGame):
            def __init__(self, *args, **kwargs):
                super().__init__(*args, **kwargs)
                games.append(self)

        def fake_input(prompt=""):
            game = games[0]
            if game.current_state().sets_found:
                raise EOFError
            triple = game.find_hint()
            if triple is None:
                return "deal"
            state = game.current_state()
            return str(state.table.index(triple[len(state.selection)]))

        monkeypatch.setattr(cli_main, "SetGame", RecordingGame)
        monkeypatch.setattr("builtins.input", fake_input)
        cli_main.main(["--rules", "instant", "--seed", "1"])
        assert games[0].current_state().sets_found == 1
        assert games[0].rules.resolve_delay == 0.0
