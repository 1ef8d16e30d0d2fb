"""Depth-limited minimax with alpha-beta pruning for the Cozen AI."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from random import Random
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from cozen.cards import Color
from cozen.game import play_move
from cozen.moves import Move, describe_move
from cozen.state import Round

from .heuristics import evaluate_state
from .move_generator import CandidateMove, generate_moves, without_split_pairs

log = logging.getLogger(__name__)


class Difficulty(Enum):
    NOVICE = "novice"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    NIGHTMARE = "nightmare"

    def __str__(self) -> str:
        return self.value


DIFFICULTY_SCALAR = 0.75
FULL_HAND = 5
MAX_NOISE_INDEX = 5

# Poisson means for move-index noise, scaled so a full hand uses the largest value.
DIFFICULTY_VALUES: dict[Difficulty, float] = {
    Difficulty.NOVICE: 1.0 / DIFFICULTY_SCALAR**4,
    Difficulty.EASY: 0.7 / DIFFICULTY_SCALAR**4,
    Difficulty.MEDIUM: 0.5 / DIFFICULTY_SCALAR**4,
    Difficulty.HARD: 0.3 / DIFFICULTY_SCALAR**4,
    Difficulty.NIGHTMARE: 0.1 / DIFFICULTY_SCALAR**4,
}

DEFAULT_DEPTH: dict[Difficulty, int] = {
    Difficulty.NOVICE: 1,
    Difficulty.EASY: 1,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 3,
    Difficulty.NIGHTMARE: 4,
}

BUDGET_MULTIPLIER: dict[Difficulty, float] = {
    Difficulty.NOVICE: 0.25,
    Difficulty.EASY: 0.5,
    Difficulty.MEDIUM: 1.0,
    Difficulty.HARD: 2.0,
    Difficulty.NIGHTMARE: 4.0,
}


class SearchConfig(BaseModel):
    base_node_budget: int = Field(1500, gt=0, description="Nodes expanded at medium difficulty.")
    verbose: bool = Field(False, description="Log every root candidate at INFO level.")
    trace: bool = Field(False, description="Return the explored tree with the result.")
    noise: bool = Field(True, description="Sample the chosen move index by difficulty.")
    seed: Optional[int] = Field(None, description="Seed for the noise generator.")


@dataclass
class SearchNode:
    """One explored state in the optional search trace."""

    move: Optional[Move]
    color: Color
    depth: int
    maximizing: bool
    score: Optional[float] = None
    alpha: float = -math.inf
    beta: float = math.inf
    pruned: bool = False
    children: List["SearchNode"] = field(default_factory=list)

    def size(self) -> int:
        return 1 + sum(child.size() for child in self.children)


@dataclass
class SearchResult:
    move: Optional[Move]
    score: Optional[float]
    nodes: int
    ranked: List[Tuple[CandidateMove, float]] = field(default_factory=list)
    trace: Optional[SearchNode] = None


def node_budget(difficulty: Difficulty, config: SearchConfig) -> int:
    return max(1, int(config.base_node_budget * BUDGET_MULTIPLIER[difficulty]))


def noise_mean(difficulty: Difficulty, hand_size: int) -> float:
    """Poisson mean shrinking by the scalar for every card short of a full hand."""
    missing = max(0, FULL_HAND - hand_size)
    return DIFFICULTY_VALUES[difficulty] * DIFFICULTY_SCALAR**missing


def sample_poisson(mean: float, rng: Random) -> int:
    limit = math.exp(-mean)
    k = 0
    p = 1.0
    while True:
        p *= rng.random()
        if p <= limit:
            return k
        k += 1


def pick_index(count: int, difficulty: Difficulty, hand_size: int, rng: Random, *, noise: bool = True) -> int:
    if count <= 1 or not noise or difficulty is Difficulty.NIGHTMARE:
        return 0
    cap = min(count // 2, MAX_NOISE_INDEX)
    return min(sample_poisson(noise_mean(difficulty, hand_size), rng), cap)


class Minimax:
    """Alpha-beta search rooted at a private clone of the round."""

    def __init__(
        self,
        ai_color: Color,
        depth: int,
        *,
        budget: int,
        config: Optional[SearchConfig] = None,
    ) -> None:
        if depth < 1:
            raise ValueError("Search depth must be at least 1.")
        self.ai_color = ai_color
        self.depth = depth
        self.budget = budget
        self.config = config or SearchConfig()
        self.nodes = 0

    def _log(self, message: str, *args) -> None:
        if self.config.verbose:
            log.info(message, *args)
        else:
            log.debug(message, *args)

    def _child_node(self, parent: Optional[SearchNode], move: Move, round_: Round, depth: int) -> Optional[SearchNode]:
        if parent is None:
            return None
        node = SearchNode(move=move, color=round_.active, depth=depth, maximizing=round_.active is self.ai_color)
        parent.children.append(node)
        return node

    def search(self, round_: Round) -> SearchResult:
        self.nodes = 0
        root = round_.clone()
        mover = root.active
        maximizing = mover is self.ai_color
        trace = SearchNode(move=None, color=mover, depth=self.depth, maximizing=maximizing) if self.config.trace else None

        candidates = without_split_pairs(generate_moves(root, mover))
        if not candidates:
            self._log("No legal moves for %s", mover)
            return SearchResult(move=None, score=None, nodes=0, trace=trace)

        ranked: List[Tuple[CandidateMove, float]] = []
        for candidate in candidates:
            child = root.clone()
            play_move(child, candidate.move)
            node = self._child_node(trace, candidate.move, child, self.depth - 1)
            value = self._minimax(child, self.depth - 1, -math.inf, math.inf, node)
            if node is not None:
                node.score = value
            ranked.append((candidate, value))
            self._log("Root %s scores %.2f", describe_move(candidate.move), value)

        sign = 1.0 if maximizing else -1.0
        ranked.sort(key=lambda item: (-sign * item[1], -item[0].card_count, item[0].strength))
        best_move, best_value = ranked[0][0].move, ranked[0][1]
        if trace is not None:
            trace.score = best_value
        return SearchResult(move=best_move, score=best_value, nodes=self.nodes, ranked=ranked, trace=trace)

    def _minimax(self, round_: Round, depth: int, alpha: float, beta: float, node: Optional[SearchNode]) -> float:
        self.nodes += 1
        if depth <= 0 or round_.is_complete or self.nodes >= self.budget:
            return evaluate_state(round_, self.ai_color)

        candidates = generate_moves(round_, round_.active)
        if not candidates:
            return evaluate_state(round_, self.ai_color)

        maximizing = round_.active is self.ai_color
        best = -math.inf if maximizing else math.inf
        for candidate in candidates:
            child = round_.clone()
            play_move(child, candidate.move)
            child_node = self._child_node(node, candidate.move, child, depth - 1)
            value = self._minimax(child, depth - 1, alpha, beta, child_node)
            if child_node is not None:
                child_node.score = value
                child_node.alpha, child_node.beta = alpha, beta
            if maximizing:
                best = max(best, value)
                alpha = max(alpha, best)
            else:
                best = min(best, value)
                beta = min(beta, best)
            if beta <= alpha:
                if node is not None:
                    node.pruned = True
                break
        return best


def search_move(
    round_: Round,
    ai_color: Color,
    difficulty: Difficulty = Difficulty.MEDIUM,
    depth: Optional[int] = None,
    config: Optional[SearchConfig] = None,
) -> SearchResult:
    """Run the search and apply difficulty noise to the ranked root moves."""
    if round_.active is not ai_color:
        raise ValueError(f"It is {round_.active}'s turn, not {ai_color}'s.")
    config = config or SearchConfig()
    depth = depth or DEFAULT_DEPTH[difficulty]
    searcher = Minimax(ai_color, depth, budget=node_budget(difficulty, config), config=config)
    result = searcher.search(round_)
    if not result.ranked:
        return result

    rng = Random(config.seed)
    index = pick_index(
        len(result.ranked),
        difficulty,
        len(round_.player(ai_color).hand),
        rng,
        noise=config.noise,
    )
    chosen, value = result.ranked[index]
    searcher._log(
        "%s (%s, depth %d) picks #%d %s after %d nodes",
        ai_color,
        difficulty,
        depth,
        index,
        describe_move(chosen.move),
        result.nodes,
    )
    result.move = chosen.move
    result.score = value
    return result


def calculate_move(
    round_: Round,
    ai_color: Color,
    difficulty: Difficulty = Difficulty.MEDIUM,
    depth: Optional[int] = None,
    config: Optional[SearchConfig] = None,
) -> Optional[Move]:
    """Return the AI's move for ``ai_color`` or None when it has no legal move."""
    return search_move(round_, ai_color, difficulty, depth, config).move
