"""Legal move enumeration with provisional scores for ordering."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from itertools import combinations, product
from typing import Dict, Iterable, List, Sequence, Tuple

from cozen.cards import CardRegistry, Color
from cozen.evaluation import evaluate_hand
from cozen.moves import Move, Stake, Wager, next_stake_column
from cozen.state import Round, RoundState

MAX_STRAIGHT = 5
ACE_HIGH = 14
ACE_LOW = 1

# Weights of the provisional ordering score.
STAKE_BASE = 1.0
STAKE_RANK_WEIGHT = 0.25
SPLIT_PAIR_PENALTY = 2.0
EXPOSURE_WEIGHT = 0.02


@dataclass(frozen=True)
class CandidateMove:
    move: Move
    strength: int
    value: int
    score: float
    split_pair: bool = False

    @property
    def card_count(self) -> int:
        return len(self.move.card_ids)

    @property
    def is_stake(self) -> bool:
        return isinstance(self.move, Stake)


def _straights(by_rank: Dict[int, List[str]]) -> List[Tuple[str, ...]]:
    values = set(by_rank)
    if ACE_HIGH in by_rank:
        values.add(ACE_LOW)
    ordered = sorted(values)

    def cards_at(value: int) -> List[str]:
        return by_rank[ACE_HIGH if value == ACE_LOW else value]

    found: List[Tuple[str, ...]] = []
    for start, first in enumerate(ordered):
        window = [first]
        for value in ordered[start + 1 :]:
            if value != window[-1] + 1 or len(window) == MAX_STRAIGHT:
                break
            window.append(value)
            for choice in product(*(cards_at(v) for v in window)):
                found.append(tuple(choice))
    return found


def card_combinations(card_ids: Sequence[str], registry: CardRegistry) -> List[Tuple[str, ...]]:
    """Singles, same-rank pairs and straights of two to five cards."""
    by_rank: Dict[int, List[str]] = defaultdict(list)
    for card_id in card_ids:
        by_rank[registry.rank(card_id)].append(card_id)

    combos: List[Tuple[str, ...]] = [(card_id,) for card_id in card_ids]
    for rank in sorted(by_rank):
        combos.extend(combinations(by_rank[rank], 2))
    combos.extend(_straights(by_rank))
    return combos


def _stake_candidates(round_: Round, color: Color) -> List[CandidateMove]:
    player = round_.player(color)
    if not player.available_stakes:
        return []
    column = next_stake_column(player)
    if round_.board[column].is_staked:
        return []
    registry = round_.registry
    ranks = registry.ranks(player.hand)
    candidates = []
    for card_id in player.hand:
        card = registry[card_id]
        split_pair = ranks.count(card.rank) >= 2
        score = STAKE_BASE + STAKE_RANK_WEIGHT * card.rank - EXPOSURE_WEIGHT * card.victory_points
        if split_pair:
            score -= SPLIT_PAIR_PENALTY
        candidates.append(
            CandidateMove(
                move=Stake(card_id),
                strength=0,
                value=card.victory_points,
                score=score,
                split_pair=split_pair,
            )
        )
    return candidates


def _wager_candidates(round_: Round, color: Color) -> List[CandidateMove]:
    registry = round_.registry
    combos = card_combinations(round_.player(color).hand, registry)
    candidates = []
    for column in round_.board.staked_columns():
        free = len(column.open_positions(color))
        if not free:
            continue
        own_ranks = registry.ranks(column.cards_for(color))
        stake_rank = registry.rank(column.stake) if round_.stake_owner(column) is color else None
        for combo in combos:
            if len(combo) > free:
                continue
            evaluation = evaluate_hand(own_ranks + registry.ranks(combo), stake_rank)
            value = registry.points(combo)
            candidates.append(
                CandidateMove(
                    move=Wager(card_ids=combo, column=column.index),
                    strength=evaluation.strength,
                    value=value,
                    score=evaluation.strength - EXPOSURE_WEIGHT * value,
                )
            )
    return candidates


def ranking_key(candidate: CandidateMove) -> tuple:
    return (-candidate.score, -candidate.card_count, candidate.strength)


def _dedupe(candidates: Iterable[CandidateMove]) -> List[CandidateMove]:
    seen = set()
    unique = []
    for candidate in candidates:
        move = candidate.move
        key = (type(move).__name__, tuple(sorted(move.card_ids)), getattr(move, "column", None))
        if key in seen:
            continue
        seen.add(key)
        unique.append(candidate)
    return unique


def generate_moves(round_: Round, color: Color) -> List[CandidateMove]:
    """Every legal move for ``color`` ordered best-first by provisional score."""
    if round_.state is RoundState.COMPLETE or color is not round_.active:
        return []
    if not round_.player(color).hand:
        return []
    candidates = _dedupe(_stake_candidates(round_, color) + _wager_candidates(round_, color))
    candidates.sort(key=ranking_key)
    return candidates


def without_split_pairs(candidates: Sequence[CandidateMove]) -> List[CandidateMove]:
    """Drop stakes that break a pair in hand unless nothing else is left."""
    kept = [candidate for candidate in candidates if not candidate.split_pair]
    return kept or list(candidates)
