"""Move types and the move processor for Cozen."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Union

from .board import COLUMNS
from .cards import Color
from .player import Player
from .state import Round, RoundState

log = logging.getLogger(__name__)


class InvalidMove(ValueError):
    """Base class for rejected moves. Round state is left unchanged."""


class RoundComplete(InvalidMove):
    """Raised when a move is attempted after the round has been scored."""


class NotPlayersTurn(InvalidMove):
    """Raised when a player moves out of turn."""


class CardNotInHand(InvalidMove):
    """Raised when a referenced card is not in the mover's hand."""


class NoStakeAvailable(InvalidMove):
    """Raised when the mover has no stake columns left."""


class ColumnAlreadyStaked(InvalidMove):
    """Raised when the next stake column already holds a stake."""


class ColumnNotStaked(InvalidMove):
    """Raised when wagering into a column without a stake."""


class InsufficientPositions(InvalidMove):
    """Raised when the mover lacks open positions for a wager."""


class EmptyWager(InvalidMove):
    """Raised when a wager names no cards or repeats a card."""


@dataclass(frozen=True)
class Stake:
    card_id: str

    @property
    def card_ids(self) -> tuple[str, ...]:
        return (self.card_id,)


@dataclass(frozen=True)
class Wager:
    card_ids: tuple[str, ...]
    column: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "card_ids", tuple(self.card_ids))


Move = Union[Stake, Wager]


def next_stake_column(player: Player) -> int:
    """Black stakes toward column 0, red toward column 9."""
    if not player.available_stakes:
        raise NoStakeAvailable(f"{player.color} has no stake columns left.")
    if player.color is Color.BLACK:
        return max(player.available_stakes)
    return min(player.available_stakes)


def _ensure_can_move(round_: Round, color: Color) -> Player:
    if round_.state is RoundState.COMPLETE:
        raise RoundComplete("The round is complete; no further moves are allowed.")
    if color is not round_.active:
        raise NotPlayersTurn(f"It is {round_.active}'s turn, not {color}'s.")
    return round_.player(color)


def stake_card(round_: Round, color: Color, card_id: str) -> int:
    """Place ``card_id`` in the mover's next stake column and return that column."""
    player = _ensure_can_move(round_, color)
    if card_id not in player.hand:
        raise CardNotInHand(f"{card_id} is not in {color}'s hand.")
    column_index = next_stake_column(player)
    column = round_.board[column_index]
    if column.is_staked:
        raise ColumnAlreadyStaked(f"Column {column_index} already holds a stake.")

    player.hand.remove(card_id)
    column.stake = card_id
    player.available_stakes.remove(column_index)
    round_.registry.mark_played(card_id, color)
    if round_.state is not RoundState.LAST_PLAY or round_.rules.draw_on_last_play_stake:
        player.draw_one()
    log.debug("%s staked %s in column %d", color, card_id, column_index)
    return column_index


def wager_cards(round_: Round, color: Color, card_ids: Sequence[str], column: int) -> List[int]:
    """Play ``card_ids`` into ``column``; all cards are placed or none are.

    Returns the board indices the cards landed on.
    """
    player = _ensure_can_move(round_, color)
    if not card_ids:
        raise EmptyWager("A wager needs at least one card.")
    if len(set(card_ids)) != len(card_ids):
        raise EmptyWager("A wager cannot repeat a card.")
    if not 0 <= column < COLUMNS:
        raise ColumnNotStaked(f"Column {column} does not exist.")
    target = round_.board[column]
    if not target.is_staked:
        raise ColumnNotStaked(f"Column {column} has no stake.")
    free = target.open_positions(color)
    if not free:
        raise InsufficientPositions(f"{color} has no open positions in column {column}.")
    missing = [cid for cid in card_ids if cid not in player.hand]
    if missing:
        raise CardNotInHand(f"{', '.join(missing)} not in {color}'s hand.")
    if len(free) < len(card_ids):
        raise InsufficientPositions(
            f"{color} has {len(free)} open positions in column {column}, needs {len(card_ids)}."
        )

    placed: List[int] = []
    for card_id, position in zip(card_ids, free):
        player.hand.remove(card_id)
        position.card = card_id
        round_.registry.mark_played(card_id, color)
        placed.append(position.index)
    log.debug("%s wagered %s into column %d", color, list(card_ids), column)
    return placed


def apply_move(round_: Round, color: Color, move: Move) -> None:
    """Apply a move without advancing the round state machine."""
    if isinstance(move, Stake):
        stake_card(round_, color, move.card_id)
    elif isinstance(move, Wager):
        wager_cards(round_, color, move.card_ids, move.column)
    else:
        raise InvalidMove(f"Unknown move type: {type(move).__name__}")


def describe_move(move: Move) -> str:
    if isinstance(move, Stake):
        return f"stake {move.card_id}"
    return f"wager {','.join(move.card_ids)} -> column {move.column}"
