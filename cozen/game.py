"""Round lifecycle and match orchestration for Cozen."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Dict, List, Optional, Sequence

from .cards import CardRegistry, Color
from .deck import build_card_set, build_deck
from .moves import Move, NoStakeAvailable, apply_move, describe_move, next_stake_column
from .player import Player
from .rules_schema import DEFAULT_RULES, RuleSet
from .scoring import RoundScoreResult, score_board
from .state import Round, RoundState

log = logging.getLogger(__name__)


class MatchError(RuntimeError):
    """Raised when the match is driven out of order."""


# Round state machine -------------------------------------------------------


def advance_round(round_: Round) -> Optional[RoundScoreResult]:
    """Apply the post-move transition for the player who just moved.

    The active player is swapped after every move. Returns the scoring result
    when the round completes, otherwise None.
    """
    mover = round_.active
    waiting = round_.inactive
    if round_.state is RoundState.RUNNING:
        if not round_.player(waiting).hand or not round_.player(mover).hand:
            round_.state = RoundState.LAST_PLAY
            round_.last_play_mover = waiting
            log.debug("Round enters last play on turn %d", round_.turn)
    elif round_.state is RoundState.LAST_PLAY and mover is round_.last_play_mover:
        round_.state = RoundState.COMPLETE

    if round_.state is RoundState.LAST_PLAY and not round_.player(waiting).hand:
        round_.state = RoundState.COMPLETE

    if round_.state is RoundState.COMPLETE:
        result = score_board(round_)
        log.info(
            "Round complete after %d turns: red %d, black %d, %d cards jailed",
            round_.turn,
            result.victory_point_scores[Color.RED],
            result.victory_point_scores[Color.BLACK],
            result.cards_jailed,
        )
        round_.swap_turn()
        return result

    round_.swap_turn()
    return None


def play_move(round_: Round, move: Move, color: Optional[Color] = None) -> Optional[RoundScoreResult]:
    """Apply ``move`` for the active player and advance the round."""
    mover = round_.active if color is None else color
    apply_move(round_, mover, move)
    log.debug("Turn %d: %s plays %s", round_.turn, mover, describe_move(move))
    return advance_round(round_)


# Round initialization ------------------------------------------------------


def _place_stake(round_: Round, color: Color, card_id: str) -> int:
    player = round_.player(color)
    column_index = next_stake_column(player)
    column = round_.board[column_index]
    if column.is_staked:
        raise MatchError(f"Column {column_index} is already staked during setup.")
    player.available_stakes.remove(column_index)
    column.stake = card_id
    round_.registry.mark_played(card_id, color)
    round_.first_stakes[color].append(card_id)
    return column_index


def _stake_from_hand(round_: Round, color: Color) -> Optional[str]:
    player = round_.player(color)
    if not player.hand or not player.available_stakes:
        return None
    card_id = player.hand.pop(0)
    _place_stake(round_, color, card_id)
    player.draw_up(round_.rules.hand_size)
    return card_id


def _stake_ranks(round_: Round, color: Color) -> List[int]:
    return round_.registry.ranks(round_.first_stakes[color])


def _compare_first_stakes(round_: Round) -> Optional[Color]:
    """Color holding the higher first stake, stake by stake; None on a tie."""
    for red_rank, black_rank in zip(_stake_ranks(round_, Color.RED), _stake_ranks(round_, Color.BLACK)):
        if red_rank != black_rank:
            return Color.RED if red_rank > black_rank else Color.BLACK
    return None


def _gather_cards(player: Player, round_: Round) -> None:
    """Pull every card of ``player`` off the board and out of hand back into the deck."""
    for column in round_.board:
        if column.stake is not None and round_.registry[column.stake].color is player.color:
            player.cards.append(column.stake)
            column.stake = None
    player.return_hand_to_deck()
    player.reset_stakes()


def start_round(
    red: Player,
    black: Player,
    *,
    rng: Optional[Random] = None,
    rules: RuleSet = DEFAULT_RULES,
    first_round: bool = True,
    starting_color: Optional[Color] = None,
    carry_stakes: Optional[Dict[Color, Sequence[str]]] = None,
    shuffle: bool = True,
) -> Round:
    """Deal hands and set the first stakes of a round.

    Each side stakes the front card of its hand, red in column 5 and black in
    column 4. On the first round the higher first stake moves first; equal
    stakes add a second stake each and a second tie reshuffles. ``carry_stakes``
    re-stakes the given cards ahead of one fresh stake per side.
    """
    rng = rng or Random()
    registry = CardRegistry.from_cards(build_card_set(rules))
    attempts = 0
    while True:
        attempts += 1
        if shuffle:
            red.shuffle_deck(rng)
            black.shuffle_deck(rng)
        round_ = Round(red=red, black=black, registry=registry.copy(), rules=rules)

        for player in (red, black):
            carried = list((carry_stakes or {}).get(player.color, ()))
            for card_id in carried:
                if card_id not in player.cards:
                    raise MatchError(f"Carried stake {card_id} is not in {player.color}'s deck.")
                player.cards.remove(card_id)
                _place_stake(round_, player.color, card_id)
            player.draw_up(rules.hand_size)
            _stake_from_hand(round_, player.color)

        if starting_color is not None:
            round_.active = starting_color
            break
        leader = _compare_first_stakes(round_)
        if leader is None and first_round:
            _stake_from_hand(round_, Color.RED)
            _stake_from_hand(round_, Color.BLACK)
            leader = _compare_first_stakes(round_)
        if leader is not None or not first_round:
            round_.active = leader or Color.BLACK
            break
        if attempts >= rules.max_first_stake_attempts:
            log.warning("First stakes tied %d times; black starts", attempts)
            round_.active = Color.BLACK
            break
        log.debug("First stakes tied twice, reshuffling")
        _gather_cards(red, round_)
        _gather_cards(black, round_)
        shuffle = True

    round_.check_invariants()
    log.info(
        "Round starts: red stakes %s, black stakes %s, %s to move",
        round_.first_stakes[Color.RED],
        round_.first_stakes[Color.BLACK],
        round_.active,
    )
    return round_


def new_player(color: Color, rules: RuleSet = DEFAULT_RULES) -> Player:
    return Player(color=color, cards=[card.id for card in build_deck(color, rules)])


# Match session -------------------------------------------------------------


@dataclass
class MatchSession:
    """Track victory points and jails across rounds of one match."""

    seed: Optional[int] = None
    rules: RuleSet = DEFAULT_RULES
    red: Player = field(init=False)
    black: Player = field(init=False)
    rng: Random = field(init=False)
    current_round: Optional[Round] = field(default=None, init=False)
    round_history: List[RoundScoreResult] = field(default_factory=list)
    starting_color: Optional[Color] = field(default=None, init=False)
    winner: Optional[Color] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.rng = Random(self.seed)
        self.red = new_player(Color.RED, self.rules)
        self.black = new_player(Color.BLACK, self.rules)

    @property
    def last_result(self) -> Optional[RoundScoreResult]:
        return self.round_history[-1] if self.round_history else None

    def player(self, color: Color) -> Player:
        return self.red if color is Color.RED else self.black

    def start_round(self) -> Round:
        if self.winner is not None:
            raise MatchError(f"The match is over; {self.winner} won.")
        if self.current_round is not None and not self.current_round.is_complete:
            raise MatchError("The current round is still in progress.")

        if not self.round_history:
            round_ = start_round(self.red, self.black, rng=self.rng, rules=self.rules, first_round=True)
        else:
            previous = self.current_round
            for player in (self.red, self.black):
                player.return_hand_to_deck()
                player.reset_stakes()
            carry: Optional[Dict[Color, List[str]]] = None
            if previous is not None and self.round_history[-1].cards_jailed == 0:
                carry = {color: list(ids) for color, ids in previous.first_stakes.items()}
            assert self.starting_color is not None
            try:
                round_ = start_round(
                    self.red,
                    self.black,
                    rng=self.rng,
                    rules=self.rules,
                    first_round=False,
                    starting_color=self.starting_color.opponent,
                    carry_stakes=carry,
                )
            except NoStakeAvailable as exc:
                raise MatchError("Not enough stake columns to carry the previous stakes.") from exc
        self.starting_color = round_.active
        self.current_round = round_
        return round_

    def play(self, move: Move) -> Optional[RoundScoreResult]:
        round_ = self._require_round()
        result = play_move(round_, move)
        if result is not None:
            self.round_history.append(result)
            self.winner = result.winner
            if self.winner is not None:
                log.info("Match won by %s after %d rounds", self.winner, len(self.round_history))
        return result

    def finish_round(self) -> RoundScoreResult:
        """Return the scoring result of the current round once play is complete."""
        round_ = self._require_round()
        if not round_.is_complete or self.last_result is None:
            raise MatchError("Cannot finish a round before play is complete.")
        return self.last_result

    def _require_round(self) -> Round:
        if self.current_round is None:
            raise MatchError("No round in progress.")
        return self.current_round
