"""Abstract base class for Connect-K agents."""

from __future__ import annotations

import abc

from connectk.game import Game


class Agent(abc.ABC):
    """
    Chooses one column for the player to move.

    Implementations only read the game through its public queries and must
    return a member of game.valid_moves(); the caller applies the move.
    """

    name: str

    @abc.abstractmethod
    def select_move(self, game: Game) -> int:
        raise NotImplementedError
