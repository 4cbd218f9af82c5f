"""Agent backed by the tabular self-play MCTS engine."""

from __future__ import annotations

from typing import Optional

from connectk.agents.base import Agent
from connectk.game import Game
from connectk.mcts import MCTS, Duration, ThinkResult


class MCTSAgent(Agent):
    """
    Thinks for a fixed wall-clock budget, then plays the best-rated column.

    The engine and its statistics table live as long as the agent, so earlier
    moves and games keep informing later ones.
    """

    def __init__(
        self,
        name: str,
        *,
        think_time: Duration = 1.0,
        seed: Optional[int] = None,
        engine: Optional[MCTS] = None,
        progress: bool = False,
    ) -> None:
        self.name = name
        self.think_time = think_time
        self.progress = progress
        self.engine = engine if engine is not None else MCTS(seed=seed)
        self.last_result: Optional[ThinkResult] = None

    def select_move(self, game: Game) -> int:
        self.last_result = self.engine.think(game, self.think_time, progress=self.progress)
        if game.state() not in self.engine:
            # Budget too small for even one rollout; run one so the position is known.
            w, l, t = self.engine.simulate(game)
            self.last_result = self.last_result._replace(
                wins=self.last_result.wins + w,
                losses=self.last_result.losses + l,
                ties=self.last_result.ties + t,
                rollouts=self.last_result.rollouts + 1,
            )
        return self.engine.best_move(game)
