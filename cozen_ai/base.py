"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Optional

from cozen.cards import Color
from cozen.moves import Move
from cozen.state import Round

from .move_generator import generate_moves


class BotStrategy:
    """Base class for bot policies."""

    name: str = "BaseBot"

    def on_round_start(self, round_: Round, color: Color) -> None:
        """Optional hook invoked at the start of each round."""
        return None

    def choose_move(self, round_: Round, color: Color) -> Optional[Move]:
        """Return the move to play, or None when nothing is legal."""
        candidates = generate_moves(round_, color)
        if not candidates:
            return None
        return candidates[0].move
