"""Boundary validation for incoming move commands."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .board import COLUMNS
from .moves import InvalidMove, Move, Stake, Wager


class StakeCommand(BaseModel):
    kind: Literal["stake"]
    card_id: str = Field(..., alias="cardId", min_length=1, description="Card to place in the next stake slot.")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def to_move(self) -> Stake:
        return Stake(card_id=self.card_id)


class WagerCommand(BaseModel):
    kind: Literal["wager"]
    card_ids: list[str] = Field(..., alias="cardIds", min_length=1, description="Cards to play into the column.")
    column: int = Field(..., ge=0, lt=COLUMNS, description="Staked column receiving the cards.")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("card_ids")
    @classmethod
    def ensure_unique(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("A wager cannot repeat a card.")
        return value

    def to_move(self) -> Wager:
        return Wager(card_ids=tuple(self.card_ids), column=self.column)


MoveCommand = Annotated[Union[StakeCommand, WagerCommand], Field(discriminator="kind")]

_MOVE_ADAPTER: TypeAdapter = TypeAdapter(MoveCommand)


def parse_move_command(payload: Mapping[str, Any]) -> Move:
    """Validate a raw ``{"kind": ...}`` payload and return the engine move."""
    try:
        command = _MOVE_ADAPTER.validate_python(dict(payload))
    except ValidationError as exc:
        raise InvalidMove(f"Malformed move command: {exc.errors()}") from exc
    return command.to_move()


def move_to_command(move: Move) -> dict[str, Any]:
    if isinstance(move, Stake):
        return {"kind": "stake", "cardId": move.card_id}
    return {"kind": "wager", "cardIds": list(move.card_ids), "column": move.column}
