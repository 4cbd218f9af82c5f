"""Gravity-drop grid for Connect-K."""

from __future__ import annotations

import enum
from typing import Optional

import numpy as np

EMPTY = 0


class Player(enum.IntEnum):
    ONE = 1
    TWO = 2

    @property
    def other(self) -> "Player":
        return Player.TWO if self is Player.ONE else Player.ONE

    def __str__(self) -> str:
        return f"Player {int(self)}"


class InvalidColumnError(ValueError):
    """Raised when dropping into a column that is out of range or full."""

    def __init__(self, col: int, reason: str = "invalid column") -> None:
        super().__init__(f"{reason}: {col}")
        self.col = col


class Board:
    """
    Fixed cols x rows grid.

    cells values:
      0 = empty
      1 = Player.ONE
      2 = Player.TWO

    cells is stored (row, col) with row 0 at the bottom, the same layout the
    numpy board of the engine has always used. Public coordinates are (col, row).
    heights[c] counts the tokens in column c, so filled cells are always
    rows 0..heights[c]-1.
    """

    def __init__(self, cols: int, rows: int) -> None:
        if cols < 1 or rows < 1:
            raise ValueError("cols/rows must be >= 1")
        self._cells = np.zeros((rows, cols), dtype=np.int8)
        self._heights = np.zeros((cols,), dtype=np.int16)

    @property
    def cols(self) -> int:
        return int(self._cells.shape[1])

    @property
    def rows(self) -> int:
        return int(self._cells.shape[0])

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the (row, col) cell array."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def top(self, col: int) -> Optional[int]:
        if col < 0 or col >= self.cols:
            raise InvalidColumnError(col, "column out of range")
        h = int(self._heights[col])
        if h >= self.rows:
            return None
        return h

    def drop(self, col: int, token: Player) -> int:
        row = self.top(col)
        if row is None:
            raise InvalidColumnError(col, "column full")

        self._cells[row, col] = int(token)
        self._heights[col] += 1
        return row

    def token_at(self, col: int, row: int) -> Optional[Player]:
        if not (0 <= col < self.cols and 0 <= row < self.rows):
            raise IndexError(f"cell out of bounds: ({col}, {row})")
        v = int(self._cells[row, col])
        if v == EMPTY:
            return None
        return Player(v)

    def is_full(self) -> bool:
        return bool(np.all(self._heights >= self.rows))

    def free_columns(self) -> np.ndarray:
        return np.nonzero(self._heights < self.rows)[0]

    def filled(self) -> int:
        return int(self._heights.sum())

    def to_bytes(self) -> bytes:
        # Column-major: (col 0, row 0), (col 0, row 1), ...
        return self._cells.T.tobytes()

    def copy(self) -> "Board":
        other = Board.__new__(Board)
        other._cells = self._cells.copy()
        other._heights = self._heights.copy()
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self._cells, other._cells)

    __hash__ = None  # type: ignore[assignment]
