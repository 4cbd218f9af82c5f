"""Win detection restricted to the lines through the last move."""

from __future__ import annotations

import functools
from typing import List, Optional, Tuple

import numpy as np

from connectk.board import Board, Player

Cell = Tuple[int, int]  # (col, row)
Line = Tuple[Cell, ...]

# Direction (dcol, drow) per family, in search order:
# vertical, horizontal, rising diagonal, falling diagonal.
FAMILIES: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (1, 1), (1, -1))


def _family_lines(cols: int, rows: int, win_len: int, col: int, row: int, dc: int, dr: int) -> List[Line]:
    lines: List[Line] = []
    # k = how many steps back from (col, row) the line starts; walking k from
    # win_len-1 down to 0 yields start points in ascending order.
    for k in range(win_len - 1, -1, -1):
        c0, r0 = col - k * dc, row - k * dr
        c1, r1 = c0 + (win_len - 1) * dc, r0 + (win_len - 1) * dr
        if not (0 <= c0 < cols and 0 <= c1 < cols):
            continue
        if not (0 <= r0 < rows and 0 <= r1 < rows):
            continue
        lines.append(tuple((c0 + i * dc, r0 + i * dr) for i in range(win_len)))
    return lines


@functools.lru_cache(maxsize=None)
def search_ranges(cols: int, rows: int, win_len: int, col: int, row: int) -> Tuple[Line, ...]:
    """
    Every in-bounds length-win_len line passing through (col, row).

    Order is fixed: all vertical lines, then horizontal, then rising diagonals,
    then falling diagonals; within a family, start points ascend. A family
    that does not fit on the board simply contributes nothing.
    """

    if win_len < 1:
        raise ValueError("win_len must be >= 1")
    if not (0 <= col < cols and 0 <= row < rows):
        raise ValueError(f"cell out of bounds: ({col}, {row})")

    lines: List[Line] = []
    for dc, dr in FAMILIES:
        lines.extend(_family_lines(cols, rows, win_len, col, row, dc, dr))
    return tuple(lines)


@functools.lru_cache(maxsize=None)
def _line_index(cols: int, rows: int, win_len: int, col: int, row: int) -> Tuple[Tuple[Line, ...], np.ndarray, np.ndarray]:
    lines = search_ranges(cols, rows, win_len, col, row)
    if not lines:
        empty = np.zeros((0, win_len), dtype=np.intp)
        return lines, empty, empty
    col_idx = np.array([[c for c, _ in line] for line in lines], dtype=np.intp)
    row_idx = np.array([[r for _, r in line] for line in lines], dtype=np.intp)
    return lines, row_idx, col_idx


def find_winning_line(board: Board, player: Player, col: int, row: int, win_len: int) -> Optional[Line]:
    """
    Return the first candidate line through (col, row) fully held by player.

    All candidates are gathered with one fancy-index read of shape (n, win_len),
    so the cost is O(win_len) per family rather than a full-board rescan.
    """

    lines, row_idx, col_idx = _line_index(board.cols, board.rows, win_len, col, row)
    if not lines:
        return None

    hits = np.all(board.cells[row_idx, col_idx] == int(player), axis=1)
    found = np.flatnonzero(hits)
    if found.size == 0:
        return None
    return lines[int(found[0])]
