"""Baseline greedy bot."""

from __future__ import annotations

from typing import Optional

from cozen.cards import Color
from cozen.game import play_move
from cozen.moves import Move
from cozen.state import Round

from .base import BotStrategy
from .heuristics import evaluate_state
from .move_generator import generate_moves, without_split_pairs


class GreedyBot(BotStrategy):
    """Play the move whose resulting position evaluates best, one ply deep."""

    name = "Greedy"

    def choose_move(self, round_: Round, color: Color) -> Optional[Move]:
        candidates = without_split_pairs(generate_moves(round_, color))
        best_move: Optional[Move] = None
        best_value = float("-inf")
        for candidate in candidates:
            child = round_.clone()
            play_move(child, candidate.move)
            value = evaluate_state(child, color)
            if value > best_value:
                best_move, best_value = candidate.move, value
        return best_move
