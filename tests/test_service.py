import pytest

from cozen.cards import Color
from cozen.commands import move_to_command, parse_move_command
from cozen.game import MatchSession
from cozen.moves import InvalidMove, Stake, Wager
from cozen.service import MatchService

from cozen_ai.random_bot import RandomBot


def test_parse_move_commands():
    assert parse_move_command({"kind": "stake", "cardId": "5H"}) == Stake("5H")
    wager = parse_move_command({"kind": "wager", "cardIds": ["5H", "6H"], "column": 5})
    assert wager == Wager(("5H", "6H"), 5)
    assert parse_move_command(move_to_command(wager)) == wager


@pytest.mark.parametrize(
    "payload",
    [
        {"kind": "discard", "cardId": "5H"},
        {"kind": "stake"},
        {"kind": "wager", "cardIds": [], "column": 5},
        {"kind": "wager", "cardIds": ["5H", "5H"], "column": 5},
        {"kind": "wager", "cardIds": ["5H"], "column": 10},
    ],
)
def test_malformed_commands_are_invalid_moves(payload):
    with pytest.raises(InvalidMove):
        parse_move_command(payload)


def test_round_view_hides_opponent_hand():
    service = MatchService(MatchSession(seed=4))
    view = service.start_match(seed=4)
    assert view.perspective == view.active
    assert len(view.hand) == 5
    assert view.opponent_hand_size == 5
    assert view.state == "running"
    staked = [column for column in view.columns if column.stake]
    assert {4, 5} <= {column.index for column in staked}
    assert service.scoring_signal() is None


def test_submit_applies_move_for_active_player():
    service = MatchService()
    view = service.start_match(seed=9)
    mover = view.active
    card_id = view.hand[0]["id"]
    after = service.submit({"kind": "stake", "cardId": card_id})
    assert after.perspective == mover
    assert after.active != mover
    assert all(card["id"] != card_id for card in after.hand)


def test_rejected_submit_keeps_state():
    service = MatchService()
    service.start_match(seed=9)
    before = service.export_state()
    with pytest.raises(InvalidMove):
        service.submit({"kind": "wager", "cardIds": ["ZZ"], "column": 5})
    assert service.export_state() == before


def test_export_and_load_state():
    service = MatchService()
    service.start_match(seed=3)
    payload = service.export_state()
    other = MatchService()
    view = other.load_state(payload)
    assert view.turn == payload["turn"]
    assert other.export_state() == payload


def test_bot_turns_until_round_completes():
    service = MatchService()
    service.start_match(seed=12)
    bot = RandomBot(seed=1)
    while service.has_active_round():
        assert service.play_bot_turn(bot) is not None
    signal = service.scoring_signal()
    assert signal is not None
    assert set(signal["victory_point_scores"]) == {"red", "black"}
    session_view = service.get_session_view(Color.BLACK)
    assert session_view.rounds_played == 1
    with pytest.raises(InvalidMove):
        service.submit({"kind": "stake", "cardId": "2H"})
