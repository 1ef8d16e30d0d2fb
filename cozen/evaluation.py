"""Hand strength evaluation and head-to-head comparison."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from itertools import zip_longest
from typing import Iterable, List, Optional, Sequence, Set

ACE_HIGH = 14
ACE_LOW = 1
PAIR_POINTS = 3


@dataclass(frozen=True)
class HandEvaluation:
    strength: int
    high_cards: tuple[int, ...]
    includes_stake: bool


@dataclass(frozen=True)
class WinningHand:
    hand1_wins: bool
    stake_goes_to_jail: bool
    jail_cards: tuple[int, ...] = ()
    winning_card: Optional[int] = None


def _longest_consecutive(ranks: Iterable[int]) -> int:
    ordered = sorted(set(ranks))
    best = 0
    current = 0
    previous: Optional[int] = None
    for rank in ordered:
        current = current + 1 if previous is not None and rank == previous + 1 else 1
        best = max(best, current)
        previous = rank
    return best


def longest_run(ranks: Iterable[int]) -> int:
    """Length of the longest run of distinct ranks, 0 when shorter than two.

    An ace is tried once as high and once as low; it never counts as both.
    """
    distinct: Set[int] = set(ranks)
    if not distinct:
        return 0
    best = _longest_consecutive(distinct)
    if ACE_HIGH in distinct:
        low = (distinct - {ACE_HIGH}) | {ACE_LOW}
        best = max(best, _longest_consecutive(low))
    return best if best >= 2 else 0


def _split_pairs(counts: Counter) -> tuple[int, Set[int]]:
    """Return (pair count, ranks left over for runs)."""
    pairs = sum(1 for count in counts.values() if count >= 2)
    leftover = {rank for rank, count in counts.items() if count != 2}
    return pairs, leftover


def evaluate_hand(ranks: Sequence[int], stake_rank: Optional[int] = None) -> HandEvaluation:
    """Score ``ranks`` for pairs and the single longest run.

    The stake is optional and used at most once, either to complete a pair
    with a lone card of its rank or to extend the run. Whichever use gives the
    highest strength wins; without an improvement the stake is left out.
    """
    if not ranks:
        return HandEvaluation(strength=0, high_cards=(), includes_stake=False)

    counts = Counter(ranks)
    pairs, leftover = _split_pairs(counts)
    strength = PAIR_POINTS * pairs + longest_run(leftover)
    includes_stake = False

    if stake_rank is not None:
        if counts.get(stake_rank) == 1:
            paired = PAIR_POINTS * (pairs + 1) + longest_run(leftover - {stake_rank})
            if paired > strength:
                strength = paired
                includes_stake = True
        if stake_rank not in leftover:
            base_run = longest_run(leftover)
            extended_run = longest_run(leftover | {stake_rank})
            extended = PAIR_POINTS * pairs + extended_run
            if extended_run > base_run and extended > strength:
                strength = extended
                includes_stake = True

    cards: List[int] = list(ranks)
    if includes_stake and stake_rank is not None:
        cards.append(stake_rank)
    return HandEvaluation(
        strength=strength,
        high_cards=tuple(sorted(cards, reverse=True)),
        includes_stake=includes_stake,
    )


def get_winning_hand(
    hand1: Sequence[int],
    hand2: Sequence[int],
    stake_rank: Optional[int],
    stake_is_for_hand1: bool,
) -> Optional[WinningHand]:
    """Decide which hand takes a contested column, or None on a perfect tie.

    The stake counts only for its owner. It stays with its owner when that
    hand wins and is jailed otherwise.
    """
    first = evaluate_hand(hand1, stake_rank if stake_is_for_hand1 else None)
    second = evaluate_hand(hand2, None if stake_is_for_hand1 else stake_rank)

    winning_card: Optional[int] = None
    if first.strength != second.strength:
        hand1_wins = first.strength > second.strength
    else:
        decided: Optional[bool] = None
        for left, right in zip_longest(first.high_cards, second.high_cards, fillvalue=0):
            if left != right:
                decided = left > right
                winning_card = left if decided else right
                break
        if decided is None:
            return None
        hand1_wins = decided

    stake_goes_to_jail = stake_rank is not None and hand1_wins != stake_is_for_hand1
    jail_cards: tuple[int, ...] = (stake_rank,) if stake_goes_to_jail and stake_rank is not None else ()
    return WinningHand(
        hand1_wins=hand1_wins,
        stake_goes_to_jail=stake_goes_to_jail,
        jail_cards=jail_cards,
        winning_card=winning_card,
    )
