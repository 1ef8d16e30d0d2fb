"""Deck creation utilities for Cozen."""

from __future__ import annotations

from typing import List, Optional

from .cards import RANKS, SUITS_BY_COLOR, Card, Color, Suit, make_card
from .rules_schema import RuleSet

DECK_SIZE = 26


def _point_kwargs(rules: Optional[RuleSet]) -> dict:
    if rules is None:
        return {}
    return {
        "face_points": rules.face_card_points,
        "poison_points": rules.poison_points,
        "poison_suits": [Suit(name) for name in rules.poison_suits],
    }


def build_deck(color: Color, rules: Optional[RuleSet] = None) -> List[Card]:
    """Return the ordered 26-card deck of one color."""
    kwargs = _point_kwargs(rules)
    return [make_card(rank, suit, **kwargs) for suit in SUITS_BY_COLOR[color] for rank in RANKS]


def build_card_set(rules: Optional[RuleSet] = None) -> List[Card]:
    """Return both decks, red first."""
    return build_deck(Color.RED, rules) + build_deck(Color.BLACK, rules)
