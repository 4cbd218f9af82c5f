"""Agent implementations for Connect-K."""

from connectk.agents.base import Agent
from connectk.agents.heuristic import HeuristicAgent
from connectk.agents.human import HumanAgent
from connectk.agents.mcts_agent import MCTSAgent
from connectk.agents.random_agent import RandomAgent

__all__ = ["Agent", "HumanAgent", "RandomAgent", "HeuristicAgent", "MCTSAgent"]
