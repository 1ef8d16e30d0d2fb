"""Validation schema for Cozen rules configuration."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUIT_NAMES = ("hearts", "diamonds", "clubs", "spades")


def _validate_suit(value: str) -> str:
    normalized = value.lower()
    if normalized not in SUIT_NAMES:
        raise ValueError(f"Unknown suit: {value!r}")
    return normalized


class RuleSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    hand_size: int = Field(5, ge=1, le=13, description="Cards held in hand after drawing up.")
    victory_points_to_win: int = Field(70, gt=0, description="Match ends once a player reaches this total.")
    poison_suits: tuple[str, ...] = Field(
        ("spades", "hearts"),
        description="Suits whose king is worth the poison value.",
    )
    poison_points: int = Field(70, ge=0, description="Victory points of a poison king.")
    face_card_points: int = Field(10, ge=0, description="Victory points of jacks, queens, kings and aces.")
    draw_on_last_play_stake: bool = Field(
        False,
        description="Whether staking during last play still draws a replacement card.",
    )
    max_first_stake_attempts: int = Field(
        10,
        ge=1,
        description="Reshuffles allowed while first stakes keep tying.",
    )

    @field_validator("poison_suits")
    @classmethod
    def validate_poison_suits(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(_validate_suit(suit) for suit in value)


DEFAULT_RULES = RuleSet()


def load_rules(payload: Optional[Mapping[str, Any]] = None) -> RuleSet:
    if not payload:
        return DEFAULT_RULES
    return RuleSet.model_validate(dict(payload))
