"""Round state for Cozen and its plain-structure serialization."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .board import COLUMNS, Board, Column, Position, StateInvariantViolation
from .cards import CardRegistry, Color, deserialize_card, serialize_card
from .player import Player
from .rules_schema import DEFAULT_RULES, RuleSet


class RoundState(Enum):
    RUNNING = "running"
    LAST_PLAY = "last_play"
    COMPLETE = "complete"

    def __str__(self) -> str:
        return self.value


def _zero_scores() -> Dict[Color, int]:
    return {Color.RED: 0, Color.BLACK: 0}


def _no_stakes() -> Dict[Color, List[str]]:
    return {Color.RED: [], Color.BLACK: []}


@dataclass
class Round:
    """Mutable state of a single round.

    Cards are referenced by id everywhere; ``registry`` owns the Card objects.
    """

    red: Player
    black: Player
    registry: CardRegistry
    board: Board = field(default_factory=Board)
    active: Color = Color.BLACK
    state: RoundState = RoundState.RUNNING
    turn: int = 1
    victory_point_scores: Dict[Color, int] = field(default_factory=_zero_scores)
    cards_jailed: int = 0
    first_stakes: Dict[Color, List[str]] = field(default_factory=_no_stakes)
    rules: RuleSet = DEFAULT_RULES
    # Color that moves while the round is in last play.
    last_play_mover: Optional[Color] = None

    def player(self, color: Color) -> Player:
        return self.red if color is Color.RED else self.black

    @property
    def inactive(self) -> Color:
        return self.active.opponent

    @property
    def active_player(self) -> Player:
        return self.player(self.active)

    @property
    def inactive_player(self) -> Player:
        return self.player(self.inactive)

    @property
    def players(self) -> tuple[Player, Player]:
        return (self.red, self.black)

    @property
    def is_complete(self) -> bool:
        return self.state is RoundState.COMPLETE

    def swap_turn(self) -> None:
        self.active = self.inactive
        self.turn += 1

    def stake_owner(self, column: Column) -> Optional[Color]:
        if column.stake is None:
            return None
        return self.registry.owner(column.stake)

    def total_cards(self) -> int:
        count = len(self.board.all_card_ids())
        for player in self.players:
            count += len(player.hand) + len(player.cards) + len(player.jail)
        return count

    def clone(self) -> "Round":
        return Round(
            red=self.red.copy(),
            black=self.black.copy(),
            registry=self.registry.copy(),
            board=self.board.copy(),
            active=self.active,
            state=self.state,
            turn=self.turn,
            victory_point_scores=dict(self.victory_point_scores),
            cards_jailed=self.cards_jailed,
            first_stakes={color: list(ids) for color, ids in self.first_stakes.items()},
            rules=self.rules,
            last_play_mover=self.last_play_mover,
        )

    def check_invariants(self) -> None:
        """Raise StateInvariantViolation unless every card sits in exactly one place."""
        self.board.validate()
        placements: Counter[str] = Counter()
        off_board: List[str] = []
        for player in self.players:
            for pile in (player.hand, player.cards, player.jail):
                placements.update(pile)
            off_board.extend(player.hand)
            off_board.extend(player.cards)
        on_board = self.board.all_card_ids()
        placements.update(on_board)

        duplicated = sorted(cid for cid, count in placements.items() if count > 1)
        if duplicated:
            raise StateInvariantViolation(f"Cards found in more than one place: {duplicated}")
        unknown = sorted(cid for cid in placements if cid not in self.registry)
        if unknown:
            raise StateInvariantViolation(f"Cards missing from the registry: {unknown}")
        missing = sorted(cid for cid in self.registry.cards if cid not in placements)
        if missing:
            raise StateInvariantViolation(f"Cards with no location: {missing}")

        for card_id in on_board:
            if card_id not in self.registry.played:
                raise StateInvariantViolation(f"Card {card_id} is on the board but not played.")
        for card_id in off_board:
            if card_id in self.registry.played:
                raise StateInvariantViolation(f"Card {card_id} is held but flagged as played.")
        for player in self.players:
            for card_id in player.hand + player.cards:
                if self.registry[card_id].color is not player.color:
                    raise StateInvariantViolation(f"Card {card_id} is held by the wrong player.")


def _serialize_player(player: Player) -> dict[str, Any]:
    return {
        "color": player.color.value,
        "hand": list(player.hand),
        "cards": list(player.cards),
        "jail": list(player.jail),
        "victory_points": player.victory_points,
        "available_stakes": list(player.available_stakes or []),
    }


def _deserialize_player(payload: Mapping[str, Any]) -> Player:
    return Player(
        color=Color(payload["color"]),
        hand=list(payload.get("hand", [])),
        cards=list(payload.get("cards", [])),
        jail=list(payload.get("jail", [])),
        victory_points=int(payload.get("victory_points", 0)),
        available_stakes=list(payload.get("available_stakes", [])),
    )


def serialize_round(round_: Round) -> dict[str, Any]:
    columns = []
    for column in round_.board:
        columns.append(
            {
                "index": column.index,
                "stake": column.stake,
                "positions": [
                    {"index": pos.index, "owner": pos.owner.value, "card": pos.card}
                    for pos in column.positions
                ],
            }
        )
    return {
        "cards": [serialize_card(card) for card in round_.registry],
        "played": sorted(round_.registry.played),
        "owners": {cid: color.value for cid, color in round_.registry.owners.items()},
        "red": _serialize_player(round_.red),
        "black": _serialize_player(round_.black),
        "board": columns,
        "active": round_.active.value,
        "state": round_.state.value,
        "turn": round_.turn,
        "victory_point_scores": {color.value: points for color, points in round_.victory_point_scores.items()},
        "cards_jailed": round_.cards_jailed,
        "first_stakes": {color.value: list(ids) for color, ids in round_.first_stakes.items()},
        "last_play_mover": round_.last_play_mover.value if round_.last_play_mover else None,
        "rules": round_.rules.model_dump(),
    }


def _deserialize_board(columns: Iterable[Mapping[str, Any]]) -> Board:
    built: List[Column] = []
    for entry in columns:
        index = int(entry["index"])
        positions = []
        for pos in entry.get("positions", []):
            row, col = divmod(int(pos["index"]), COLUMNS)
            positions.append(Position(row=row, column=col, owner=Color(pos["owner"]), card=pos.get("card")))
        built.append(Column(index=index, positions=positions, stake=entry.get("stake")))
    return Board(columns=built)


def deserialize_round(payload: Mapping[str, Any]) -> Round:
    """Rebuild a Round from ``serialize_round`` output and verify its invariants."""
    try:
        registry = CardRegistry.from_cards(deserialize_card(card) for card in payload["cards"])
        registry.played = set(payload.get("played", []))
        registry.owners.update({cid: Color(value) for cid, value in payload.get("owners", {}).items()})
        mover = payload.get("last_play_mover")
        round_ = Round(
            red=_deserialize_player(payload["red"]),
            black=_deserialize_player(payload["black"]),
            registry=registry,
            board=_deserialize_board(payload["board"]),
            active=Color(payload["active"]),
            state=RoundState(payload["state"]),
            turn=int(payload.get("turn", 1)),
            victory_point_scores={
                Color(key): int(value) for key, value in payload.get("victory_point_scores", {}).items()
            }
            or _zero_scores(),
            cards_jailed=int(payload.get("cards_jailed", 0)),
            first_stakes={Color(key): list(ids) for key, ids in payload.get("first_stakes", {}).items()}
            or _no_stakes(),
            rules=RuleSet.model_validate(payload["rules"]) if payload.get("rules") else DEFAULT_RULES,
            last_play_mover=Color(mover) if mover else None,
        )
    except (KeyError, ValueError, TypeError) as exc:
        raise StateInvariantViolation(f"Malformed round payload: {exc}") from exc
    if round_.red.color is not Color.RED or round_.black.color is not Color.BLACK:
        raise StateInvariantViolation("Player colors do not match their seats.")
    round_.check_invariants()
    return round_
