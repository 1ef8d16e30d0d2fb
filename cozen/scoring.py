"""Round-end board resolution and victory checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .board import Column
from .cards import Color
from .evaluation import WinningHand, get_winning_hand
from .state import Round, RoundState

log = logging.getLogger(__name__)


class ScoringError(RuntimeError):
    """Raised when the board is scored at the wrong time."""


@dataclass(frozen=True)
class ColumnOutcome:
    column: int
    contested: bool
    winner: Optional[Color]
    jailed: tuple[str, ...]
    points: int
    winning_card: Optional[int] = None


@dataclass(frozen=True)
class RoundScoreResult:
    victory_point_scores: Dict[Color, int]
    cards_jailed: int
    winner: Optional[Color]
    columns: tuple[ColumnOutcome, ...]

    def as_signal(self) -> dict:
        signal = {
            "victory_point_scores": {color.value: points for color, points in self.victory_point_scores.items()},
            "cards_jailed": self.cards_jailed,
        }
        if self.winner is not None:
            signal["winner"] = self.winner.value
        return signal


def project_column(round_: Round, column: Column) -> Optional[ColumnOutcome]:
    """Preview how ``column`` would resolve if the round ended now."""
    if column.stake is None:
        return None
    registry = round_.registry
    red_cards = column.cards_for(Color.RED)
    black_cards = column.cards_for(Color.BLACK)
    if not red_cards or not black_cards:
        return ColumnOutcome(column=column.index, contested=False, winner=None, jailed=(), points=0)

    stake_owner = registry.owner(column.stake)
    result: Optional[WinningHand] = get_winning_hand(
        registry.ranks(red_cards),
        registry.ranks(black_cards),
        registry.rank(column.stake),
        stake_owner is Color.RED,
    )
    if result is None:
        return ColumnOutcome(column=column.index, contested=True, winner=None, jailed=(), points=0)

    winner = Color.RED if result.hand1_wins else Color.BLACK
    captured: List[str] = list(black_cards if winner is Color.RED else red_cards)
    if result.stake_goes_to_jail:
        captured.append(column.stake)
    jailed = tuple(cid for cid in captured if registry[cid].color is not winner)
    return ColumnOutcome(
        column=column.index,
        contested=True,
        winner=winner,
        jailed=jailed,
        points=registry.points(jailed),
        winning_card=result.winning_card,
    )


def project_board(round_: Round) -> List[ColumnOutcome]:
    outcomes = []
    for column in round_.board.staked_columns():
        outcome = project_column(round_, column)
        if outcome is not None:
            outcomes.append(outcome)
    return outcomes


def check_for_winner(round_: Round, threshold: Optional[int] = None) -> Optional[Color]:
    """Return the first color at or above the threshold, red checked first."""
    target = round_.rules.victory_points_to_win if threshold is None else threshold
    for color in (Color.RED, Color.BLACK):
        if round_.player(color).victory_points >= target:
            return color
    return None


def score_board(round_: Round) -> RoundScoreResult:
    """Resolve every staked column, jailing captured cards and returning the rest."""
    if round_.state is not RoundState.COMPLETE:
        raise ScoringError("The board can only be scored once the round is complete.")
    registry = round_.registry
    outcomes = project_board(round_)
    for outcome in outcomes:
        column = round_.board[outcome.column]
        jailed = set(outcome.jailed)
        if outcome.winner is not None and jailed:
            winner = round_.player(outcome.winner)
            winner.jail.extend(outcome.jailed)
            winner.victory_points += outcome.points
            round_.victory_point_scores[outcome.winner] += outcome.points
            round_.cards_jailed += len(outcome.jailed)
            log.info(
                "Column %d: %s jails %s for %d points",
                outcome.column,
                outcome.winner,
                list(outcome.jailed),
                outcome.points,
            )
        for card_id in column.clear():
            if card_id in jailed:
                continue
            round_.player(registry.owner(card_id)).cards.append(card_id)
            registry.mark_returned(card_id)

    winner = check_for_winner(round_)
    if winner is not None:
        log.info("%s reached %d victory points", winner, round_.player(winner).victory_points)
    return RoundScoreResult(
        victory_point_scores=dict(round_.victory_point_scores),
        cards_jailed=round_.cards_jailed,
        winner=winner,
        columns=tuple(outcomes),
    )
