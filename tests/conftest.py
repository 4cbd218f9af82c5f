"""Shared pytest fixtures for connectk tests."""

from typing import List

import pytest

from connectk.game import Game


def _pair(a: int, b: int) -> List[int]:
    # Fills column a (bottom token Player 1) and column b (bottom token Player 2)
    # together, keeping both columns alternating.
    return [a, b, b, a, a, b, b, a, a, b, b, a]


# 42 moves on 7x6 (k=4) that fill the board without any 4-in-a-row.
# Final columns 0,1,4,5 read 1,2,1,2,1,2 bottom-up and 2,3,6 read 2,1,2,1,2,1.
DRAW_7X6: List[int] = _pair(0, 2) + _pair(1, 3) + _pair(4, 6) + [5] * 6


@pytest.fixture
def game() -> Game:
    """Fresh default 7x6, k=4 game."""
    return Game()


@pytest.fixture
def draw_moves() -> List[int]:
    return list(DRAW_7X6)
