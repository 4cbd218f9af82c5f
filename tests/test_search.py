"""Tests for candidate-line generation and win detection."""

from typing import Iterable, Set

import pytest

from connectk.board import Board, Player
from connectk.search import Line, find_winning_line, search_ranges

GEOMETRIES = [(7, 6, 4), (4, 4, 4), (5, 3, 3), (3, 5, 2), (6, 7, 5), (8, 2, 3), (2, 8, 3), (3, 3, 1)]


def _all_windows(cols: int, rows: int, k: int) -> Iterable[Line]:
    """Brute force: every length-k window on the board."""
    for dc, dr in [(0, 1), (1, 0), (1, 1), (1, -1)]:
        for c in range(cols):
            for r in range(rows):
                line = tuple((c + i * dc, r + i * dr) for i in range(k))
                if all(0 <= x < cols and 0 <= y < rows for x, y in line):
                    yield line


class TestSearchRanges:
    """Enumeration of lines through a cell."""

    def test_memoized_per_geometry_and_cell(self) -> None:
        assert search_ranges(7, 6, 4, 2, 2) is search_ranges(7, 6, 4, 2, 2)

    @pytest.mark.parametrize("cols,rows,k", GEOMETRIES)
    def test_matches_brute_force(self, cols: int, rows: int, k: int) -> None:
        windows = list(_all_windows(cols, rows, k))
        for c in range(cols):
            for r in range(rows):
                lines = search_ranges(cols, rows, k, c, r)
                expected: Set[Line] = {w for w in windows if (c, r) in w}
                if k == 1:
                    # One single-cell line per family.
                    assert lines == (((c, r),),) * 4
                    continue
                assert set(lines) == expected
                assert len(lines) == len(expected)

    @pytest.mark.parametrize("cols,rows,k", GEOMETRIES)
    def test_lines_are_in_bounds_and_contiguous(self, cols: int, rows: int, k: int) -> None:
        for c in range(cols):
            for r in range(rows):
                for line in search_ranges(cols, rows, k, c, r):
                    assert len(line) == k
                    assert (c, r) in line
                    assert all(0 <= x < cols and 0 <= y < rows for x, y in line)
                    steps = {(b[0] - a[0], b[1] - a[1]) for a, b in zip(line, line[1:])}
                    assert len(steps) <= 1

    def test_family_order_on_bottom_row(self) -> None:
        lines = search_ranges(7, 6, 4, 3, 0)
        assert lines == (
            ((3, 0), (3, 1), (3, 2), (3, 3)),
            ((0, 0), (1, 0), (2, 0), (3, 0)),
            ((1, 0), (2, 0), (3, 0), (4, 0)),
            ((2, 0), (3, 0), (4, 0), (5, 0)),
            ((3, 0), (4, 0), (5, 0), (6, 0)),
            ((3, 0), (4, 1), (5, 2), (6, 3)),
            ((0, 3), (1, 2), (2, 1), (3, 0)),
        )

    def test_line_count_is_bounded(self) -> None:
        for c in range(7):
            for r in range(6):
                assert len(search_ranges(7, 6, 4, c, r)) <= 4 * 4

    def test_degenerate_families_are_empty(self) -> None:
        # Too short for vertical lines or diagonals; horizontals remain.
        lines = search_ranges(7, 2, 4, 3, 1)
        assert len(lines) == 4
        assert all(len({r for _, r in line}) == 1 for line in lines)

        # Too small in both directions: nothing at all.
        assert search_ranges(3, 2, 4, 1, 1) == ()

    def test_rejects_out_of_bounds_cell(self) -> None:
        with pytest.raises(ValueError):
            search_ranges(7, 6, 4, 7, 0)


def _board_with(cols: int, rows: int, cells: Iterable, player: Player = Player.ONE) -> Board:
    """Build a board where `cells` hold player and anything needed underneath holds the opponent."""
    board = Board(cols, rows)
    for c, r in sorted(cells, key=lambda cell: cell[1]):
        while board.top(c) is not None and board.top(c) < r:
            board.drop(c, player.other)
        board.drop(c, player)
    return board


class TestFindWinningLine:
    """First fully-held line through the last move."""

    @pytest.mark.parametrize("cols,rows,k", [(7, 6, 4), (4, 4, 4), (5, 3, 3), (6, 7, 5), (3, 5, 2)])
    def test_every_family_is_detected(self, cols: int, rows: int, k: int) -> None:
        families = {
            "vertical": [(0, i) for i in range(k)],
            "horizontal": [(i, 0) for i in range(k)],
            "rising": [(i, i) for i in range(k)],
            "falling": [(i, k - 1 - i) for i in range(k)],
        }
        for name, cells in families.items():
            board = _board_with(cols, rows, cells)
            for last in cells:
                found = find_winning_line(board, Player.ONE, last[0], last[1], k)
                assert found is not None, name
                assert sorted(found) == sorted(cells), name
                assert len(found) == k
                assert find_winning_line(board, Player.TWO, last[0], last[1], k) is None

    def test_incomplete_line_is_not_a_win(self) -> None:
        board = _board_with(7, 6, [(0, 0), (1, 0), (2, 0)])
        assert find_winning_line(board, Player.ONE, 2, 0, 4) is None

    def test_simultaneous_lines_report_first_in_order(self) -> None:
        # (3, 3) completes both a vertical and a rising diagonal.
        cells = [(3, 0), (3, 1), (3, 2), (3, 3), (0, 0), (1, 1), (2, 2)]
        board = _board_with(7, 6, cells)
        found = find_winning_line(board, Player.ONE, 3, 3, 4)
        assert found == ((3, 0), (3, 1), (3, 2), (3, 3))

    def test_longest_run_reports_leftmost_window(self) -> None:
        board = _board_with(7, 6, [(i, 0) for i in range(5)])
        assert find_winning_line(board, Player.ONE, 2, 0, 4) == ((0, 0), (1, 0), (2, 0), (3, 0))

    def test_degenerate_geometry_never_wins(self) -> None:
        board = Board(3, 3)
        for c in range(3):
            board.drop(c, Player.ONE)
        assert find_winning_line(board, Player.ONE, 1, 0, 4) is None
