"""Static evaluation of a round from one color's point of view."""

from __future__ import annotations

from cozen.cards import FACE_POINTS, Color
from cozen.evaluation import evaluate_hand
from cozen.scoring import check_for_winner, project_board
from cozen.state import Round

BANKED_WEIGHT = 1.0
PROJECTED_WEIGHT = 0.8
POTENTIAL_WEIGHT = 0.5
HAND_VALUE_WEIGHT = 0.02
STAKE_WEIGHT = 0.5
BOARD_WEIGHT = 0.3
WIN_SCORE = 1000.0


def hand_potential(round_: Round, color: Color, *, mask_poison: bool = False) -> float:
    """Combination strength of the hand plus a small term for its card values.

    With ``mask_poison`` the poison kings count as ordinary face cards.
    """
    registry = round_.registry
    hand = round_.player(color).hand
    strength = evaluate_hand(registry.ranks(hand)).strength
    value = 0
    for card_id in hand:
        card = registry[card_id]
        value += FACE_POINTS if mask_poison and card.is_poison else card.victory_points
    return strength + HAND_VALUE_WEIGHT * value


def projected_captures(round_: Round, color: Color) -> int:
    """Net victory points ``color`` would jail if the board were scored now."""
    net = 0
    for outcome in project_board(round_):
        if outcome.winner is color:
            net += outcome.points
        elif outcome.winner is not None:
            net -= outcome.points
    return net


def board_potential(round_: Round, color: Color) -> int:
    """Summed column strength of ``color`` minus the opponent's, stakes counted for their owner."""
    registry = round_.registry
    net = 0
    for column in round_.board.staked_columns():
        stake_rank = registry.rank(column.stake)
        owner = round_.stake_owner(column)
        for side in (color, color.opponent):
            cards = column.cards_for(side)
            if not cards:
                continue
            strength = evaluate_hand(registry.ranks(cards), stake_rank if owner is side else None).strength
            net += strength if side is color else -strength
    return net


def stake_control(round_: Round, color: Color) -> int:
    net = 0
    for column in round_.board.staked_columns():
        net += 1 if round_.stake_owner(column) is color else -1
    return net


def evaluate_state(round_: Round, ai_color: Color) -> float:
    """Positive values favor ``ai_color``."""
    opponent = ai_color.opponent
    banked = round_.victory_point_scores[ai_color] - round_.victory_point_scores[opponent]
    score = BANKED_WEIGHT * banked

    winner = check_for_winner(round_)
    if winner is not None:
        score += WIN_SCORE if winner is ai_color else -WIN_SCORE
    if round_.is_complete:
        return score

    score += PROJECTED_WEIGHT * projected_captures(round_, ai_color)
    score += POTENTIAL_WEIGHT * (
        hand_potential(round_, ai_color) - hand_potential(round_, opponent, mask_poison=True)
    )
    score += BOARD_WEIGHT * board_potential(round_, ai_color)
    score += STAKE_WEIGHT * stake_control(round_, ai_color)
    return score
