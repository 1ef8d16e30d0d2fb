"""Board topology: columns, positions and stake slots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .cards import Color

ROWS = 11
COLUMNS = 10
STAKE_ROW = 5

# Staking territory per color, listed from the center outward.
STAKE_COLUMNS: dict[Color, Tuple[int, ...]] = {
    Color.BLACK: (4, 3, 2, 1, 0),
    Color.RED: (5, 6, 7, 8, 9),
}


class StateInvariantViolation(RuntimeError):
    """Raised when round state is structurally inconsistent."""


def row_owner(row: int) -> Color:
    if row < STAKE_ROW:
        return Color.BLACK
    if row > STAKE_ROW:
        return Color.RED
    raise StateInvariantViolation("The stake row holds no positions.")


@dataclass
class Position:
    row: int
    column: int
    owner: Color
    card: Optional[str] = None

    @property
    def index(self) -> int:
        return self.row * COLUMNS + self.column

    @property
    def coord(self) -> Tuple[int, int]:
        return (self.row, self.column)

    @property
    def is_open(self) -> bool:
        return self.card is None


@dataclass
class Column:
    index: int
    positions: List[Position]
    stake: Optional[str] = None

    @classmethod
    def empty(cls, index: int) -> "Column":
        positions = [
            Position(row=row, column=index, owner=row_owner(row))
            for row in range(ROWS)
            if row != STAKE_ROW
        ]
        return cls(index=index, positions=positions)

    @property
    def is_staked(self) -> bool:
        return self.stake is not None

    def positions_for(self, color: Color) -> List[Position]:
        """Positions owned by ``color`` ordered by distance from the stake row."""
        owned = [pos for pos in self.positions if pos.owner is color]
        return sorted(owned, key=lambda pos: abs(pos.row - STAKE_ROW))

    def open_positions(self, color: Color) -> List[Position]:
        return [pos for pos in self.positions_for(color) if pos.is_open]

    def cards_for(self, color: Color) -> List[str]:
        return [pos.card for pos in self.positions_for(color) if pos.card is not None]

    def played_cards(self) -> List[str]:
        return [pos.card for pos in self.positions if pos.card is not None]

    def clear(self) -> List[str]:
        """Empty every position and the stake slot, returning what was removed."""
        removed = self.played_cards()
        if self.stake is not None:
            removed.append(self.stake)
        for pos in self.positions:
            pos.card = None
        self.stake = None
        return removed

    def copy(self) -> "Column":
        return Column(
            index=self.index,
            positions=[Position(pos.row, pos.column, pos.owner, pos.card) for pos in self.positions],
            stake=self.stake,
        )


@dataclass
class Board:
    columns: List[Column] = field(default_factory=lambda: [Column.empty(i) for i in range(COLUMNS)])

    def __iter__(self) -> Iterator[Column]:
        return iter(self.columns)

    def __getitem__(self, index: int) -> Column:
        if not 0 <= index < COLUMNS:
            raise IndexError(f"Column out of range: {index}")
        return self.columns[index]

    def validate(self) -> None:
        if len(self.columns) != COLUMNS:
            raise StateInvariantViolation(f"Board must have {COLUMNS} columns, found {len(self.columns)}.")
        for expected, column in enumerate(self.columns):
            if column.index != expected:
                raise StateInvariantViolation(f"Column {column.index} stored at index {expected}.")
            if len(column.positions) != ROWS - 1:
                raise StateInvariantViolation(f"Column {expected} has {len(column.positions)} positions.")
            for pos in column.positions:
                if pos.column != expected or pos.row == STAKE_ROW or not 0 <= pos.row < ROWS:
                    raise StateInvariantViolation(f"Position {pos.coord} misplaced in column {expected}.")
                if pos.owner is not row_owner(pos.row):
                    raise StateInvariantViolation(f"Position {pos.coord} has the wrong owner.")

    def staked_columns(self) -> List[Column]:
        return [column for column in self.columns if column.is_staked]

    def all_card_ids(self) -> List[str]:
        ids: List[str] = []
        for column in self.columns:
            ids.extend(column.played_cards())
            if column.stake is not None:
                ids.append(column.stake)
        return ids

    def copy(self) -> "Board":
        return Board(columns=[column.copy() for column in self.columns])
