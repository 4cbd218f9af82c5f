"""Tabular MCTS over random self-play rollouts."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
from tqdm import tqdm

from connectk.game import Game, GameOverError, State

logger = logging.getLogger(__name__)

# Win-rate assumed for a column that has never been tried.
PRIOR_WINRATE = 0.5


@dataclass
class SlotStats:
    """
    Per-state statistics, stored as arrays indexed by column.

    score[c]  : cumulative backed-up score
    visits[c] : number of times column c was played from this state
    """

    score: np.ndarray  # float64, shape (C,)
    visits: np.ndarray  # int64,   shape (C,)

    @classmethod
    def zeros(cls, cols: int) -> "SlotStats":
        return cls(score=np.zeros((cols,), dtype=np.float64), visits=np.zeros((cols,), dtype=np.int64))

    def winrates(self, cols: Sequence[int]) -> np.ndarray:
        idx = np.asarray(cols, dtype=np.intp)
        n = self.visits[idx]
        out = np.full(idx.shape, PRIOR_WINRATE, dtype=np.float64)
        seen = n > 0
        out[seen] = self.score[idx][seen] / n[seen]
        return out


class Outcome(NamedTuple):
    wins: int
    losses: int
    ties: int


class ThinkResult(NamedTuple):
    wins: int
    losses: int
    ties: int
    rollouts: int


class UnknownStateError(KeyError):
    """Raised when statistics are requested for a state no rollout has visited."""

    def __init__(self, state: State) -> None:
        super().__init__(state)
        self.state = state

    def __str__(self) -> str:
        return "state has not been visited by simulate/think; run think() on this position first"


Duration = Union[float, int, timedelta]
SeatLog = List[Tuple[State, int]]


class MCTS:
    """
    Self-play engine with a lifetime statistics table.

    Each rollout samples moves in proportion to the current win-rate of every
    legal column, plays to the end, then credits both seats' moves. The score
    added to a slot is 0.5 + outcome * 0.5 / (distance + 1), where distance
    counts that seat's moves back from its last one: every visit drifts toward
    0.5, and the result matters most for moves close to the end of the game.

    The engine owns its table and its random generator; it is not thread safe.
    States only make sense for one board shape, so the engine is pinned to the
    (cols, rows) of the first game it sees, or to the shape passed in.
    """

    def __init__(
        self,
        *,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        shape: Optional[Tuple[int, int]] = None,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.shape = shape
        # Keyed by Game.state(). Player-to-move is implicit in the cell parity.
        self.memory: Dict[State, SlotStats] = {}

    def __len__(self) -> int:
        return len(self.memory)

    def __contains__(self, state: object) -> bool:
        return state in self.memory

    def __iter__(self) -> Iterator[State]:
        return iter(self.memory)

    def stats(self, state: State) -> SlotStats:
        stats = self.memory.get(state)
        if stats is None:
            raise UnknownStateError(state)
        return stats

    def move_weights(self, state: State, columns: Sequence[int]) -> np.ndarray:
        """Win-rate of each candidate column at state (0.5 for untried columns)."""
        return self.stats(state).winrates(columns)

    def best_move(self, game: Game) -> int:
        """Legal column with the highest win-rate; ties go to the lowest column."""

        self._bind(game)
        legal = game.valid_moves()
        if game.over() or not legal:
            raise GameOverError()
        weights = self.move_weights(game.state(), legal)
        return legal[int(np.argmax(weights))]

    def simulate(self, game: Game) -> Outcome:
        """
        Play one rollout from game (on a private copy) and back it up.

        The seat to move in game is "self"; the returned triple is from its
        point of view.
        """

        self._bind(game)
        game = game.copy()
        my_moves: SeatLog = []
        their_moves: SeatLog = []
        cols = game.cols

        ply = 0
        while not game.over():
            state = game.state()
            stats = self.memory.get(state)
            if stats is None:
                # Expansion: one zeroed row per newly seen position.
                stats = SlotStats.zeros(cols)
                self.memory[state] = stats

            col = self._pick_move(stats, game.valid_moves())

            log = my_moves if ply % 2 == 0 else their_moves
            log.append((state, col))

            game.drop(col)
            ply += 1

        # The rollout ends right after the deciding move, so the winner is the
        # seat that played ply-1: odd ply means self moved last.
        if game.winner() is None:
            my_score, their_score, outcome = 0.0, 0.0, Outcome(0, 0, 1)
        elif ply % 2 == 0:
            my_score, their_score, outcome = -1.0, 1.0, Outcome(0, 1, 0)
        else:
            my_score, their_score, outcome = 1.0, -1.0, Outcome(1, 0, 0)

        self._backup(my_score, my_moves)
        self._backup(their_score, their_moves)
        return outcome

    def think(self, game: Game, duration: Duration, *, progress: bool = False) -> ThinkResult:
        """
        Run rollouts from game until duration (seconds or timedelta) has passed.

        The clock is only checked between rollouts, so the call can overrun by
        one rollout. game itself is never modified.
        """

        self._bind(game)
        budget = duration.total_seconds() if isinstance(duration, timedelta) else float(duration)
        wins = losses = ties = rollouts = 0

        start = time.monotonic()
        with tqdm(desc="think", unit="rollout", disable=not progress, leave=False) as bar:
            while time.monotonic() - start < budget:
                w, l, t = self.simulate(game)
                wins += w
                losses += l
                ties += t
                rollouts += 1
                bar.update(1)

        elapsed = time.monotonic() - start
        logger.debug(
            "think: %d rollouts in %.3fs (w/l/t=%d/%d/%d), %d states in memory",
            rollouts,
            elapsed,
            wins,
            losses,
            ties,
            len(self.memory),
        )
        return ThinkResult(wins, losses, ties, rollouts)

    def _bind(self, game: Game) -> None:
        shape = (game.cols, game.rows)
        if self.shape is None:
            self.shape = shape
        elif self.shape != shape:
            raise ValueError(
                f"engine holds statistics for a {self.shape[0]}x{self.shape[1]} board, "
                f"got a {shape[0]}x{shape[1]} game"
            )

    def _pick_move(self, stats: SlotStats, legal: List[int]) -> int:
        weights = stats.winrates(legal)
        if not np.any(weights):
            return legal[int(self.rng.integers(len(legal)))]
        # Weighted index over unnormalized weights; zero-weight columns are never drawn.
        cum = np.cumsum(weights)
        i = int(np.searchsorted(cum, self.rng.random() * cum[-1], side="right"))
        return legal[min(i, len(legal) - 1)]

    def _backup(self, score: float, moves: SeatLog) -> None:
        for distance, (state, col) in enumerate(reversed(moves)):
            stats = self.memory[state]
            stats.score[col] += 0.5 + score * 0.5 / (distance + 1)
            stats.visits[col] += 1
