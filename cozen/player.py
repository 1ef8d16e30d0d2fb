"""Per-player card piles and match totals."""

from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import List, Optional

from .board import STAKE_COLUMNS
from .cards import Color


def initial_stakes(color: Color) -> List[int]:
    return sorted(STAKE_COLUMNS[color])


@dataclass
class Player:
    """Hand, deck and jail of one side, stored as card ids."""

    color: Color
    hand: List[str] = field(default_factory=list)
    cards: List[str] = field(default_factory=list)
    jail: List[str] = field(default_factory=list)
    victory_points: int = 0
    available_stakes: Optional[List[int]] = None

    def __post_init__(self) -> None:
        if self.available_stakes is None:
            self.available_stakes = initial_stakes(self.color)

    def draw_one(self) -> Optional[str]:
        if not self.cards:
            return None
        card_id = self.cards.pop(0)
        self.hand.append(card_id)
        return card_id

    def draw_up(self, hand_size: int) -> List[str]:
        drawn: List[str] = []
        while len(self.hand) < hand_size and self.cards:
            card_id = self.cards.pop(0)
            self.hand.append(card_id)
            drawn.append(card_id)
        return drawn

    def return_hand_to_deck(self) -> None:
        self.cards.extend(self.hand)
        self.hand = []

    def shuffle_deck(self, rng: Random) -> None:
        rng.shuffle(self.cards)

    def reset_stakes(self) -> None:
        self.available_stakes = initial_stakes(self.color)

    def copy(self) -> "Player":
        return Player(
            color=self.color,
            hand=list(self.hand),
            cards=list(self.cards),
            jail=list(self.jail),
            victory_points=self.victory_points,
            available_stakes=list(self.available_stakes),
        )
