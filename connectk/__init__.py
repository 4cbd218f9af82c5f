"""Connect-K package (engine + MCTS + agents + CLI)."""

from connectk.board import Board, InvalidColumnError, Player
from connectk.game import Game, GameConfig, GameOverError, GameStatus, Move, TerminalResult, Winner
from connectk.mcts import MCTS, Outcome, ThinkResult, UnknownStateError

__all__ = [
    "Board",
    "Game",
    "GameConfig",
    "GameOverError",
    "GameStatus",
    "InvalidColumnError",
    "MCTS",
    "Move",
    "Outcome",
    "Player",
    "TerminalResult",
    "ThinkResult",
    "UnknownStateError",
    "Winner",
]
