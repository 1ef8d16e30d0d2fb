"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional

from cozen.cards import Color
from cozen.moves import Move
from cozen.state import Round

from .base import BotStrategy
from .move_generator import generate_moves


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def choose_move(self, round_: Round, color: Color) -> Optional[Move]:
        candidates = generate_moves(round_, color)
        if not candidates:
            return None
        return self._rng.choice(candidates).move
