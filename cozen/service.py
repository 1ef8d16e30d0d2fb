"""Convenience service layer for transport and UI collaborators."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from .cards import Card, Color, card_label, serialize_card
from .commands import move_to_command, parse_move_command
from .game import MatchError, MatchSession
from .moves import InvalidMove, Move, NoStakeAvailable, next_stake_column
from .scoring import RoundScoreResult
from .state import Round, deserialize_round, serialize_round

log = logging.getLogger(__name__)


class MovePicker(Protocol):
    name: str

    def choose_move(self, round_: Round, color: Color) -> Optional[Move]: ...


@dataclass
class ColumnView:
    index: int
    stake: Optional[dict]
    stake_owner: Optional[str]
    red: list[dict]
    black: list[dict]


@dataclass
class RoundView:
    state: str
    turn: int
    active: str
    perspective: str
    hand: list[dict]
    hand_labels: list[str]
    opponent_hand_size: int
    deck_sizes: dict[str, int]
    jail_sizes: dict[str, int]
    next_stake_column: Optional[int]
    columns: list[ColumnView]
    round_scores: dict[str, int]


@dataclass
class SessionView:
    victory_points: dict[str, int]
    rounds_played: int
    winner: Optional[str]
    round: Optional[RoundView]


class MatchService:
    """Facade around MatchSession for collaborators that speak plain dicts."""

    def __init__(self, session: Optional[MatchSession] = None) -> None:
        self.session = session or MatchSession()

    # Session lifecycle -------------------------------------------------

    def start_match(self, seed: Optional[int] = None) -> RoundView:
        self.session = MatchSession(seed=seed, rules=self.session.rules)
        self.session.start_round()
        return self.get_round_view()

    def start_next_round(self) -> RoundView:
        self.session.start_round()
        return self.get_round_view()

    def has_active_round(self) -> bool:
        round_ = self.session.current_round
        return round_ is not None and not round_.is_complete

    # Actions -----------------------------------------------------------

    def submit(self, payload: Mapping[str, Any]) -> RoundView:
        """Validate and apply a move command for the active player."""
        round_ = self._require_round()
        move = parse_move_command(payload)
        perspective = round_.active
        self.session.play(move)
        return self.get_round_view(perspective)

    def play_bot_turn(self, bot: MovePicker) -> Optional[dict]:
        """Let ``bot`` move for the active player; returns the command it played."""
        round_ = self._require_round()
        move = bot.choose_move(round_.clone(), round_.active)
        if move is None:
            log.info("%s found no move for %s", bot.name, round_.active)
            return None
        self.session.play(move)
        return move_to_command(move)

    # Signals and persistence -------------------------------------------

    def scoring_signal(self) -> Optional[dict]:
        result: Optional[RoundScoreResult] = self.session.last_result
        if result is None:
            return None
        return result.as_signal()

    def export_state(self) -> dict:
        return serialize_round(self._require_round(allow_complete=True))

    def load_state(self, payload: Mapping[str, Any]) -> RoundView:
        """Replace the players and current round with a serialized round."""
        round_ = deserialize_round(payload)
        self.session.red = round_.red
        self.session.black = round_.black
        self.session.current_round = round_
        self.session.starting_color = round_.active
        return self.get_round_view()

    # Views -------------------------------------------------------------

    def get_session_view(self, perspective: Color = Color.RED) -> SessionView:
        round_view = self.get_round_view(perspective) if self.session.current_round is not None else None
        return SessionView(
            victory_points={
                Color.RED.value: self.session.red.victory_points,
                Color.BLACK.value: self.session.black.victory_points,
            },
            rounds_played=len(self.session.round_history),
            winner=self.session.winner.value if self.session.winner else None,
            round=round_view,
        )

    def get_round_view(self, perspective: Optional[Color] = None) -> RoundView:
        round_ = self._require_round(allow_complete=True)
        viewer = perspective or round_.active
        player = round_.player(viewer)
        hand_cards: list[Card] = [round_.registry[cid] for cid in player.hand]
        try:
            stake_column: Optional[int] = next_stake_column(player)
        except NoStakeAvailable:
            stake_column = None

        columns = []
        for column in round_.board:
            stake_card = round_.registry[column.stake] if column.stake else None
            owner = round_.stake_owner(column)
            columns.append(
                ColumnView(
                    index=column.index,
                    stake=serialize_card(stake_card) if stake_card else None,
                    stake_owner=owner.value if owner else None,
                    red=[serialize_card(round_.registry[cid]) for cid in column.cards_for(Color.RED)],
                    black=[serialize_card(round_.registry[cid]) for cid in column.cards_for(Color.BLACK)],
                )
            )

        return RoundView(
            state=round_.state.value,
            turn=round_.turn,
            active=round_.active.value,
            perspective=viewer.value,
            hand=[serialize_card(card) for card in hand_cards],
            hand_labels=[card_label(card) for card in hand_cards],
            opponent_hand_size=len(round_.player(viewer.opponent).hand),
            deck_sizes={p.color.value: len(p.cards) for p in round_.players},
            jail_sizes={p.color.value: len(p.jail) for p in round_.players},
            next_stake_column=stake_column,
            columns=columns,
            round_scores={color.value: points for color, points in round_.victory_point_scores.items()},
        )

    # Helpers -----------------------------------------------------------

    def _require_round(self, allow_complete: bool = False) -> Round:
        round_ = self.session.current_round
        if round_ is None:
            raise MatchError("No active round.")
        if round_.is_complete and not allow_complete:
            raise InvalidMove("The round is complete; start the next round first.")
        return round_
