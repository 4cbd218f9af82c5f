"""Smoke tests for the typer CLI."""

import pytest
from rich.text import Text
from typer.testing import CliRunner

from connectk.cli import _parse_column, _parse_moves, app, render_board, run_match
from connectk.agents import HeuristicAgent, RandomAgent
from connectk.game import GameConfig, replay

runner = CliRunner()


class TestHelpers:
    @pytest.mark.parametrize("raw,expected", [("0", 0), ("6", 6), ("7", 6), (" 3 ", 3), ("", None), ("x", None), ("8", None)])
    def test_parse_column(self, raw: str, expected) -> None:
        assert _parse_column(raw, 7) == expected

    def test_parse_moves(self) -> None:
        assert _parse_moves("3, 3,4") == [3, 3, 4]
        assert _parse_moves("") == []

    def test_render_board_marks_tokens(self) -> None:
        game = replay([0, 0, 1, 1, 2, 2, 3])
        plain = Text.from_markup(render_board(game)).plain
        lines = plain.splitlines()
        assert lines[0] == "| 0 | 1 | 2 | 3 | 4 | 5 | 6 |"
        assert plain.count("●") == 7
        # header + 6 rows with separators + closing separator
        assert len(lines) == 1 + 2 * 6 + 1

    def test_run_match_counts_every_game(self) -> None:
        cfg = GameConfig(5, 4, 3)
        result = run_match(cfg, RandomAgent("a", seed=0), HeuristicAgent("b", seed=1), games=4, show_progress=False)
        assert sum(result.values()) == 4


class TestCommands:
    def test_match(self) -> None:
        result = runner.invoke(app, ["match", "--first", "random", "--second", "heuristic", "--games", "2", "--seed", "1"])
        assert result.exit_code == 0, result.output
        assert "wins" in result.output

    def test_match_rejects_humans(self) -> None:
        result = runner.invoke(app, ["match", "--first", "human"])
        assert result.exit_code != 0

    def test_play_between_agents(self) -> None:
        result = runner.invoke(
            app,
            ["play", "--first", "random", "--second", "heuristic", "--seed", "3", "--cols", "5", "--rows", "4", "--win-len", "3"],
        )
        assert result.exit_code == 0, result.output
        assert "Result:" in result.output

    def test_play_with_mcts_prints_win_rates(self) -> None:
        result = runner.invoke(
            app,
            ["play", "--first", "mcts", "--second", "random", "--think-time", "0.02", "--seed", "0", "--cols", "4", "--rows", "4", "--win-len", "3"],
        )
        assert result.exit_code == 0, result.output
        assert "win-rates" in result.output

    def test_analyze(self) -> None:
        result = runner.invoke(app, ["analyze", "--moves", "3,3", "--think-time", "0.2", "--seed", "0"])
        assert result.exit_code == 0, result.output
        assert "best move" in result.output

    def test_analyze_finished_game(self) -> None:
        result = runner.invoke(app, ["analyze", "--moves", "0,1,0,1,0,1,0"])
        assert result.exit_code == 0, result.output
        assert "wins" in result.output

    def test_analyze_bad_moves(self) -> None:
        result = runner.invoke(app, ["analyze", "--moves", "a,b"])
        assert result.exit_code != 0

    def test_bad_geometry(self) -> None:
        result = runner.invoke(app, ["analyze", "--cols", "0"])
        assert result.exit_code != 0
