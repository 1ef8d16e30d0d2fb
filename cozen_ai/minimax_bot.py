"""Search-backed bot wrapping calculate_move."""

from __future__ import annotations

from typing import Optional

from cozen.cards import Color
from cozen.moves import Move
from cozen.state import Round

from .base import BotStrategy
from .search import Difficulty, SearchConfig, calculate_move


class MinimaxBot(BotStrategy):
    name = "Minimax"

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.MEDIUM,
        depth: Optional[int] = None,
        config: Optional[SearchConfig] = None,
    ) -> None:
        self.difficulty = difficulty
        self.depth = depth
        self.config = config or SearchConfig()
        self.name = f"Minimax-{difficulty.value}"

    def choose_move(self, round_: Round, color: Color) -> Optional[Move]:
        return calculate_move(round_, color, self.difficulty, self.depth, self.config)
