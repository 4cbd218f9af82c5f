"""Greedy line-building agent."""

from __future__ import annotations

import random
from typing import List, Optional

from connectk.agents.base import Agent
from connectk.board import Board, Player
from connectk.game import Game
from connectk.search import Line, search_ranges


class HeuristicAgent(Agent):
    """
    One-ply heuristic opponent.

    For each legal column, take the cell the token would land in and look at
    every candidate line through it. A line holding any opponent token is
    blocked and scores 0; otherwise it scores the number of the mover's tokens
    already in it. The column keeps its best line score, and the agent picks
    uniformly among the best columns.

    Plain token counting would also credit lines the opponent has already
    broken; zeroing them keeps the agent building only lines that can still win.
    """

    def __init__(self, name: str, seed: Optional[int] = None) -> None:
        self.name = name
        self.rng = random.Random(seed)

    def select_move(self, game: Game) -> int:
        legal = game.valid_moves()
        if not legal:
            raise ValueError("no legal moves available")

        board = game.board()
        me = game.current_player()
        scores = [column_score(board, me, game.win_len, col) for col in legal]

        best = max(scores)
        best_columns = [col for col, score in zip(legal, scores) if score == best]
        return self.rng.choice(best_columns)


def column_score(board: Board, player: Player, win_len: int, col: int) -> int:
    row = board.top(col)
    if row is None:
        return 0
    lines = search_ranges(board.cols, board.rows, win_len, col, row)
    return max((_line_score(board, player, line) for line in lines), default=0)


def _line_score(board: Board, player: Player, line: Line) -> int:
    held: List[Player] = [t for t in (board.token_at(c, r) for c, r in line) if t is not None]
    if any(t != player for t in held):
        return 0
    return len(held)
