"""Random baseline agent."""

from __future__ import annotations

import random
from typing import Optional

from connectk.agents.base import Agent
from connectk.game import Game


class RandomAgent(Agent):
    def __init__(self, name: str, seed: Optional[int] = None) -> None:
        self.name = name
        self.rng = random.Random(seed)

    def select_move(self, game: Game) -> int:
        legal = game.valid_moves()
        if not legal:
            raise ValueError("no legal moves available")
        return self.rng.choice(legal)
