import pytest

from cozen.cards import Color
from cozen.deck import build_deck
from cozen.game import play_move, start_round
from cozen.moves import (
    CardNotInHand,
    ColumnNotStaked,
    EmptyWager,
    InsufficientPositions,
    NoStakeAvailable,
    NotPlayersTurn,
    RoundComplete,
    Stake,
    Wager,
    next_stake_column,
    stake_card,
    wager_cards,
)
from cozen.player import Player
from cozen.state import RoundState, serialize_round


def full_deck(color, front):
    rest = [card.id for card in build_deck(color) if card.id not in front]
    return list(front) + rest


def build_round(starting=Color.BLACK):
    red = Player(Color.RED, cards=full_deck(Color.RED, ["9H", "2D", "3D", "4D", "5D", "6D"]))
    black = Player(Color.BLACK, cards=full_deck(Color.BLACK, ["7S", "6S", "2C", "3C", "4C", "5C"]))
    return start_round(red, black, shuffle=False, starting_color=starting)


def fill_positions(round_, color, column, count):
    player = round_.player(color)
    for position in round_.board[column].open_positions(color)[:count]:
        card_id = player.cards.pop()
        position.card = card_id
        round_.registry.mark_played(card_id, color)


def test_first_stakes_are_placed():
    round_ = build_round()
    assert round_.board[5].stake == "9H"
    assert round_.board[4].stake == "7S"
    assert round_.red.hand == ["2D", "3D", "4D", "5D", "6D"]
    assert round_.black.hand == ["6S", "2C", "3C", "4C", "5C"]
    assert round_.red.available_stakes == [6, 7, 8, 9]
    assert round_.black.available_stakes == [0, 1, 2, 3]


def test_next_stake_column_spreads_outward():
    round_ = build_round()
    assert next_stake_column(round_.black) == 3
    assert next_stake_column(round_.red) == 6
    round_.black.available_stakes = []
    with pytest.raises(NoStakeAvailable):
        next_stake_column(round_.black)


def test_stake_moves_card_and_draws():
    round_ = build_round()
    column = stake_card(round_, Color.BLACK, "2C")
    assert column == 3
    assert round_.board[3].stake == "2C"
    assert "2C" in round_.registry.played
    assert round_.registry.owner("2C") is Color.BLACK
    assert len(round_.black.hand) == 5
    assert 3 not in round_.black.available_stakes
    round_.check_invariants()


def test_stake_during_last_play_does_not_draw():
    round_ = build_round()
    round_.state = RoundState.LAST_PLAY
    stake_card(round_, Color.BLACK, "2C")
    assert len(round_.black.hand) == 4


def test_rejected_moves_leave_state_unchanged():
    round_ = build_round()
    before = serialize_round(round_)
    with pytest.raises(CardNotInHand):
        stake_card(round_, Color.BLACK, "9S")
    with pytest.raises(NotPlayersTurn):
        stake_card(round_, Color.RED, "2D")
    with pytest.raises(ColumnNotStaked):
        wager_cards(round_, Color.BLACK, ["2C"], 2)
    with pytest.raises(CardNotInHand):
        wager_cards(round_, Color.BLACK, ["2C", "2D"], 4)
    with pytest.raises(EmptyWager):
        wager_cards(round_, Color.BLACK, [], 4)
    with pytest.raises(EmptyWager):
        wager_cards(round_, Color.BLACK, ["2C", "2C"], 4)
    assert serialize_round(round_) == before


def test_wager_fills_positions_closest_to_stake_row():
    round_ = build_round()
    placed = wager_cards(round_, Color.BLACK, ["2C", "3C"], 4)
    assert placed == [44, 34]
    assert len(round_.black.hand) == 3
    round_.swap_turn()
    placed = wager_cards(round_, Color.RED, ["2D", "3D"], 4)
    assert placed == [64, 74]
    round_.check_invariants()


def test_wager_is_all_or_nothing():
    round_ = build_round()
    fill_positions(round_, Color.BLACK, 4, 4)
    before = serialize_round(round_)
    with pytest.raises(InsufficientPositions):
        wager_cards(round_, Color.BLACK, ["2C", "3C"], 4)
    assert serialize_round(round_) == before
    fill_positions(round_, Color.BLACK, 4, 1)
    with pytest.raises(InsufficientPositions):
        wager_cards(round_, Color.BLACK, ["2C"], 4)
    round_.check_invariants()


def test_moves_rejected_once_round_is_complete():
    round_ = build_round()
    round_.state = RoundState.COMPLETE
    with pytest.raises(RoundComplete):
        stake_card(round_, Color.BLACK, "2C")
    with pytest.raises(RoundComplete):
        play_move(round_, Wager(("2C",), 4))


def test_play_move_swaps_players():
    round_ = build_round()
    assert play_move(round_, Stake("2C")) is None
    assert round_.active is Color.RED
    assert round_.turn == 2
