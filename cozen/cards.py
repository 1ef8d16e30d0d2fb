"""Card-related data structures and helpers for Cozen."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, Mapping, Set


class Color(Enum):
    RED = "red"
    BLACK = "black"

    def __str__(self) -> str:
        return self.value

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.RED else Color.RED


class Suit(Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        return self.value


SUITS_BY_COLOR: dict[Color, tuple[Suit, Suit]] = {
    Color.RED: (Suit.HEARTS, Suit.DIAMONDS),
    Color.BLACK: (Suit.CLUBS, Suit.SPADES),
}

RANKS: tuple[int, ...] = tuple(range(2, 15))
KING = 13
FACE_RANK = 11

# Kings of these suits carry the match-deciding value.
POISON_SUITS: frozenset[Suit] = frozenset({Suit.SPADES, Suit.HEARTS})
POISON_POINTS = 70
FACE_POINTS = 10

RANK_LABELS: dict[int, str] = {11: "J", 12: "Q", 13: "K", 14: "A"}
RANK_NAMES: dict[int, str] = {11: "Jack", 12: "Queen", 13: "King", 14: "Ace"}
SUIT_LETTERS: dict[Suit, str] = {
    Suit.HEARTS: "H",
    Suit.DIAMONDS: "D",
    Suit.CLUBS: "C",
    Suit.SPADES: "S",
}


class UnknownCard(KeyError):
    """Raised when a card id is not part of the registry."""


def victory_points_for(
    rank: int,
    suit: Suit,
    *,
    face_points: int = FACE_POINTS,
    poison_points: int = POISON_POINTS,
    poison_suits: Iterable[Suit] = POISON_SUITS,
) -> int:
    if rank == KING and suit in set(poison_suits):
        return poison_points
    if rank >= FACE_RANK:
        return face_points
    return rank


def color_of(suit: Suit) -> Color:
    return Color.RED if suit in SUITS_BY_COLOR[Color.RED] else Color.BLACK


def card_id_for(rank: int, suit: Suit) -> str:
    return f"{RANK_LABELS.get(rank, str(rank))}{SUIT_LETTERS[suit]}"


@dataclass(frozen=True)
class Card:
    """Immutable identity of a single card."""

    id: str
    color: Color
    suit: Suit
    rank: int
    victory_points: int

    @property
    def is_poison(self) -> bool:
        return self.rank == KING and self.victory_points > FACE_POINTS


def make_card(rank: int, suit: Suit, **points) -> Card:
    if rank not in RANKS:
        raise ValueError(f"Rank out of range: {rank}")
    return Card(
        id=card_id_for(rank, suit),
        color=color_of(suit),
        suit=suit,
        rank=rank,
        victory_points=victory_points_for(rank, suit, **points),
    )


@dataclass
class CardRegistry:
    """Per-round arena of cards keyed by id.

    Everything else in a round refers to cards by id; the registry is the only
    place holding ``Card`` objects together with their mutable ``played`` and
    ``owner`` bookkeeping.
    """

    cards: Dict[str, Card]
    played: Set[str] = field(default_factory=set)
    owners: Dict[str, Color] = field(default_factory=dict)

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> "CardRegistry":
        mapping: Dict[str, Card] = {}
        for card in cards:
            if card.id in mapping:
                raise ValueError(f"Duplicate card id: {card.id}")
            mapping[card.id] = card
        return cls(cards=mapping, owners={cid: card.color for cid, card in mapping.items()})

    def __getitem__(self, card_id: str) -> Card:
        try:
            return self.cards[card_id]
        except KeyError as exc:
            raise UnknownCard(card_id) from exc

    def __contains__(self, card_id: object) -> bool:
        return card_id in self.cards

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards.values())

    def __len__(self) -> int:
        return len(self.cards)

    def rank(self, card_id: str) -> int:
        return self[card_id].rank

    def ranks(self, card_ids: Iterable[str]) -> list[int]:
        return [self[cid].rank for cid in card_ids]

    def points(self, card_ids: Iterable[str]) -> int:
        return sum(self[cid].victory_points for cid in card_ids)

    def owner(self, card_id: str) -> Color:
        return self.owners.get(card_id, self[card_id].color)

    def mark_played(self, card_id: str, owner: Color) -> None:
        if card_id not in self.cards:
            raise UnknownCard(card_id)
        self.played.add(card_id)
        self.owners[card_id] = owner

    def mark_returned(self, card_id: str) -> None:
        self.played.discard(card_id)

    def copy(self) -> "CardRegistry":
        # Card objects are frozen and shared between copies.
        return CardRegistry(cards=self.cards, played=set(self.played), owners=dict(self.owners))


def serialize_card(card: Card) -> dict[str, object]:
    return {
        "id": card.id,
        "color": card.color.value,
        "suit": card.suit.value,
        "rank": card.rank,
        "victory_points": card.victory_points,
    }


def deserialize_card(payload: Mapping[str, object]) -> Card:
    suit = Suit(str(payload["suit"]).lower())
    rank = int(payload["rank"])  # type: ignore[arg-type]
    points = payload.get("victory_points")
    return Card(
        id=str(payload.get("id") or card_id_for(rank, suit)),
        color=color_of(suit),
        suit=suit,
        rank=rank,
        victory_points=int(points) if points is not None else victory_points_for(rank, suit),  # type: ignore[arg-type]
    )


def card_label(card: Card) -> str:
    name = RANK_NAMES.get(card.rank, str(card.rank))
    return f"{name} of {card.suit.value.title()}"
