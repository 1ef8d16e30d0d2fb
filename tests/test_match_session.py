import pytest

from cozen.cards import Color
from cozen.game import MatchError, MatchSession
from cozen.rules_schema import RuleSet, load_rules

from cozen_ai.base import BotStrategy


def autoplay_round(session):
    bot = BotStrategy()
    round_ = session.current_round
    while not round_.is_complete:
        session.play(bot.choose_move(round_, round_.active))
    return round_


def test_full_round_flow():
    session = MatchSession(seed=11)
    round_ = session.start_round()
    assert len(round_.red.hand) == 5
    assert len(round_.black.hand) == 5
    assert round_.board[5].stake is not None
    assert round_.board[4].stake is not None

    autoplay_round(session)
    assert len(session.round_history) == 1
    assert session.last_result is not None
    round_.check_invariants()


def test_next_round_swaps_starter_and_keeps_jails():
    session = MatchSession(seed=5)
    first = session.start_round()
    first_starter = first.active
    autoplay_round(session)
    jailed = list(session.red.jail) + list(session.black.jail)
    previous_stakes = {color: list(ids) for color, ids in first.first_stakes.items()}

    second = session.start_round()
    assert second.active is first_starter.opponent
    assert list(session.red.jail) + list(session.black.jail) == jailed
    if session.round_history[-1].cards_jailed == 0:
        for color in (Color.RED, Color.BLACK):
            assert second.first_stakes[color][: len(previous_stakes[color])] == previous_stakes[color]
            assert len(second.first_stakes[color]) == len(previous_stakes[color]) + 1
    else:
        assert len(second.first_stakes[Color.RED]) == 1
        assert len(second.first_stakes[Color.BLACK]) == 1
    second.check_invariants()


def test_cannot_start_round_while_one_is_running():
    session = MatchSession(seed=1)
    session.start_round()
    with pytest.raises(MatchError):
        session.start_round()


def test_play_requires_round():
    session = MatchSession(seed=1)
    with pytest.raises(MatchError):
        session.play(None)


def test_finish_round_returns_score_once_complete():
    session = MatchSession(seed=5)
    with pytest.raises(MatchError):
        session.finish_round()
    session.start_round()
    with pytest.raises(MatchError):
        session.finish_round()

    autoplay_round(session)
    result = session.finish_round()
    assert result is session.last_result
    assert result is session.round_history[-1]


def test_every_round_starts_with_full_hands():
    session = MatchSession(seed=11)
    for _ in range(3):
        if session.winner is not None:
            break
        round_ = session.start_round()
        assert len(round_.red.hand) == 5
        assert len(round_.black.hand) == 5
        autoplay_round(session)


def test_match_ends_at_threshold():
    session = MatchSession(seed=2, rules=RuleSet(victory_points_to_win=1))
    for _ in range(20):
        if session.winner is not None:
            break
        session.start_round()
        autoplay_round(session)
    assert session.winner is not None
    assert session.player(session.winner).victory_points >= 1
    with pytest.raises(MatchError):
        session.start_round()


def test_load_rules_defaults_and_overrides():
    assert load_rules(None).victory_points_to_win == 70
    rules = load_rules({"hand_size": 4, "poison_suits": ["Clubs"]})
    assert rules.hand_size == 4
    assert rules.poison_suits == ("clubs",)
    with pytest.raises(ValueError):
        load_rules({"poison_suits": ["stars"]})
