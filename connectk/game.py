"""Connect-K game state machine."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from connectk.board import Board, InvalidColumnError, Player
from connectk.search import Line, find_winning_line

logger = logging.getLogger(__name__)

DEFAULT_COLS = 7
DEFAULT_ROWS = 6
DEFAULT_WIN_LEN = 4

# Canonical serialization of the cells; see Game.state().
State = bytes


@dataclass(frozen=True)
class GameConfig:
    cols: int = DEFAULT_COLS
    rows: int = DEFAULT_ROWS
    win_len: int = DEFAULT_WIN_LEN

    def validate(self) -> None:
        if self.cols < 1 or self.rows < 1:
            raise ValueError("cols/rows must be >= 1")
        if self.win_len < 1:
            raise ValueError("win_len must be >= 1")


class GameStatus(enum.Enum):
    IN_PROGRESS = "in-progress"
    WON = "won"
    TIED = "tied"


@dataclass(frozen=True)
class Move:
    ply: int
    player: Player
    col: int
    row: int


@dataclass(frozen=True)
class Winner:
    player: Player
    cells: Line  # win_len (col, row) pairs in line order


@dataclass(frozen=True)
class TerminalResult:
    is_terminal: bool
    winner: Optional[Player]
    reason: str


class GameOverError(ValueError):
    """Raised when a move is attempted after the game has ended."""

    def __init__(self) -> None:
        super().__init__("game is already over")


class Game:
    """
    Mutable game owning one Board.

    Player.ONE always moves first, so the player to move can be recovered from
    the parity of the filled-cell count; State relies on this.
    """

    def __init__(self, cols: int = DEFAULT_COLS, rows: int = DEFAULT_ROWS, win_len: int = DEFAULT_WIN_LEN) -> None:
        cfg = GameConfig(cols=cols, rows=rows, win_len=win_len)
        cfg.validate()
        self._cfg = cfg
        self._board = Board(cols, rows)
        self._current = Player.ONE
        self._status = GameStatus.IN_PROGRESS
        self._winner: Optional[Winner] = None
        self._moves: List[Move] = []

    @classmethod
    def from_config(cls, cfg: GameConfig) -> "Game":
        return cls(cols=cfg.cols, rows=cfg.rows, win_len=cfg.win_len)

    @property
    def config(self) -> GameConfig:
        return self._cfg

    @property
    def cols(self) -> int:
        return self._cfg.cols

    @property
    def rows(self) -> int:
        return self._cfg.rows

    @property
    def win_len(self) -> int:
        return self._cfg.win_len

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def ply(self) -> int:
        return len(self._moves)

    @property
    def moves(self) -> Tuple[Move, ...]:
        return tuple(self._moves)

    def drop(self, col: int) -> int:
        """
        Drop the current player's token into col and return the row it landed in.

        Raises GameOverError on a finished game and InvalidColumnError for an
        out-of-range or full column; neither mutates anything.
        """

        if self._status is not GameStatus.IN_PROGRESS:
            raise GameOverError()

        player = self._current
        row = self._board.drop(col, player)
        self._moves.append(Move(ply=len(self._moves), player=player, col=col, row=row))

        cells = find_winning_line(self._board, player, col, row, self._cfg.win_len)
        if cells is not None:
            self._winner = Winner(player=player, cells=cells)
            self._status = GameStatus.WON
            logger.debug("%s wins at ply %d with %s", player, self.ply, cells)
        elif self._board.is_full():
            self._status = GameStatus.TIED
            logger.debug("board full at ply %d: tie", self.ply)
        else:
            self._current = player.other

        return row

    def is_valid_move(self, col: int) -> bool:
        return 0 <= col < self.cols and self._board.top(col) is not None

    def valid_moves(self) -> List[int]:
        return self._board.free_columns().tolist()

    def over(self) -> bool:
        return self._status is not GameStatus.IN_PROGRESS

    def current_player(self) -> Player:
        return self._current

    def winner(self) -> Optional[Winner]:
        return self._winner

    def result(self) -> TerminalResult:
        if self._status is GameStatus.WON:
            assert self._winner is not None
            return TerminalResult(True, self._winner.player, "connect-k")
        if self._status is GameStatus.TIED:
            return TerminalResult(True, None, "draw")
        return TerminalResult(False, None, "in-progress")

    def state(self) -> State:
        """
        Cell contents as bytes (0 empty, 1/2 player), column-major.

        The player to move is not encoded.
        """

        return self._board.to_bytes()

    def board(self) -> Board:
        """Snapshot of the board, detached from this game."""
        return self._board.copy()

    def copy(self) -> "Game":
        other = Game.__new__(Game)
        other._cfg = self._cfg
        other._board = self._board.copy()
        other._current = self._current
        other._status = self._status
        other._winner = self._winner
        other._moves = list(self._moves)
        return other

    def __repr__(self) -> str:
        return (
            f"Game(cols={self.cols}, rows={self.rows}, win_len={self.win_len}, "
            f"ply={self.ply}, status={self._status.value})"
        )


def replay(moves: List[int], cfg: Optional[GameConfig] = None) -> Game:
    """Build a game by dropping the given columns in order."""

    game = Game.from_config(cfg or GameConfig())
    for col in moves:
        game.drop(col)
    return game


__all__ = [
    "Game",
    "GameConfig",
    "GameOverError",
    "GameStatus",
    "InvalidColumnError",
    "Move",
    "State",
    "TerminalResult",
    "Winner",
    "replay",
]
