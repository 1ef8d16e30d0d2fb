"""Move generation, search and bot strategies for Cozen."""

from .greedy_bot import GreedyBot
from .minimax_bot import MinimaxBot
from .random_bot import RandomBot
from .search import Difficulty, SearchConfig, calculate_move

__all__ = ["GreedyBot", "MinimaxBot", "RandomBot", "Difficulty", "SearchConfig", "calculate_move"]
