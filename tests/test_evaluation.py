from itertools import product

from cozen.evaluation import evaluate_hand, get_winning_hand, longest_run


def test_empty_hand_scores_zero():
    result = evaluate_hand([], 10)
    assert result.strength == 0
    assert not result.includes_stake
    assert result.high_cards == ()


def test_pair_and_run_basics():
    assert evaluate_hand([5, 5], 10).strength == 3
    assert evaluate_hand([3, 4, 5], 10).strength == 3
    assert evaluate_hand([5, 5, 7, 7]).strength == 6


def test_only_longest_run_counts():
    assert evaluate_hand([2, 3, 4, 7, 8], 10).strength == 3


def test_stake_extends_run():
    result = evaluate_hand([3, 4], 5)
    assert result.strength == 3
    assert result.includes_stake
    assert result.high_cards == (5, 4, 3)


def test_stake_completes_pair_with_single_card():
    result = evaluate_hand([5], 5)
    assert result.strength == 3
    assert result.includes_stake


def test_unused_stake_is_left_out():
    result = evaluate_hand([5], 10)
    assert result.strength == 0
    assert not result.includes_stake
    assert result.high_cards == (5,)


def test_ace_high_and_low_runs():
    assert evaluate_hand([13, 14], 12).strength == 3
    assert evaluate_hand([2, 14], 3).strength == 3
    assert evaluate_hand([14, 2, 3]).strength == 3


def test_ace_never_counts_twice():
    # A-2 and K-A cannot join into one run through the ace.
    assert longest_run([13, 14, 2]) == 2
    assert longest_run([12, 13, 14, 2, 3]) == 3
    for ranks in product(range(2, 15), repeat=3):
        strength = evaluate_hand(list(ranks)).strength
        assert strength <= 3


def test_third_card_of_a_rank_can_join_run():
    assert evaluate_hand([5, 5, 5, 6]).strength == 3 + 2


def test_empty_hand_loses_to_any_card():
    result = get_winning_hand([], [2], 10, True)
    assert result is not None
    assert result.hand1_wins is False
    assert result.stake_goes_to_jail is True


def test_identical_hands_tie():
    assert get_winning_hand([5], [5], 10, True) is None


def test_unused_stake_of_loser_is_captured():
    result = get_winning_hand([5, 5], [2], 2, False)
    assert result is not None
    assert result.hand1_wins is True
    assert result.stake_goes_to_jail is True
    assert result.jail_cards == (2,)


def test_stake_owner_win_keeps_stake():
    result = get_winning_hand([5], [6], 5, True)
    assert result is not None
    assert result.hand1_wins is True
    assert result.stake_goes_to_jail is False
    assert result.jail_cards == ()


def test_high_card_breaks_strength_tie():
    result = get_winning_hand([2, 3], [4, 5], 10, True)
    assert result is not None
    assert result.hand1_wins is False
    assert result.winning_card == 5

    result = get_winning_hand([2, 2, 7], [2, 2, 6], None, True)
    assert result is not None
    assert result.hand1_wins is True
    assert result.winning_card == 7
    assert result.stake_goes_to_jail is False


def test_used_stake_counts_in_high_cards():
    # Black pairs its 5 with the stake; red's pair of sixes still ranks higher.
    result = get_winning_hand([6, 6], [5], 5, False)
    assert result is not None
    assert result.hand1_wins is True
    assert result.stake_goes_to_jail is True


def test_used_stake_sorts_with_hand_for_high_card():
    # Run 2-3 plus stake 4 ties a pair of threes; the stake is the top card.
    result = get_winning_hand([2, 3], [3, 3], 4, True)
    assert result is not None
    assert result.hand1_wins is True
    assert result.winning_card == 4
    assert result.stake_goes_to_jail is False
