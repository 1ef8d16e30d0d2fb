from cozen.cards import CardRegistry, Color
from cozen.deck import build_card_set, build_deck
from cozen.game import play_move, start_round
from cozen.moves import Stake, Wager
from cozen.player import Player

from cozen_ai.move_generator import card_combinations, generate_moves, without_split_pairs


def full_deck(color, front):
    rest = [card.id for card in build_deck(color) if card.id not in front]
    return list(front) + rest


def build_round(red_front, black_front, starting=Color.BLACK):
    red = Player(Color.RED, cards=full_deck(Color.RED, red_front))
    black = Player(Color.BLACK, cards=full_deck(Color.BLACK, black_front))
    return start_round(red, black, shuffle=False, starting_color=starting)


REGISTRY = CardRegistry.from_cards(build_card_set())


def test_combinations_cover_singles_pairs_and_straights():
    combos = {tuple(sorted(combo)) for combo in card_combinations(["3C", "4C", "4S", "5C"], REGISTRY)}
    assert ("3C",) in combos
    assert ("4C", "4S") in combos
    assert tuple(sorted(("3C", "4C", "5C"))) in combos
    assert tuple(sorted(("3C", "4S", "5C"))) in combos
    assert ("4S", "5C") in combos
    assert ("3C", "5C") not in combos


def test_ace_plays_low_in_straights():
    combos = {tuple(sorted(combo)) for combo in card_combinations(["AS", "2C", "KC"], REGISTRY)}
    assert ("2C", "AS") in combos
    assert ("AS", "KC") in combos
    assert ("2C", "AS", "KC") not in combos


def test_straights_stop_at_five_cards():
    hand = ["2C", "3C", "4C", "5C", "6C", "7C"]
    combos = card_combinations(hand, REGISTRY)
    assert max(len(combo) for combo in combos) == 5


def test_generate_moves_targets_every_staked_column():
    round_ = build_round(["9H", "2D", "3D", "4D", "5D", "6D"], ["7S", "6S", "2C", "3C", "4C", "5C"])
    candidates = generate_moves(round_, Color.BLACK)
    stakes = [c for c in candidates if isinstance(c.move, Stake)]
    wagers = [c for c in candidates if isinstance(c.move, Wager)]
    assert len(stakes) == 5
    assert {c.move.column for c in wagers} == {4, 5}
    assert generate_moves(round_, Color.RED) == []
    for candidate in candidates:
        play_move(round_.clone(), candidate.move)


def test_own_stake_counts_toward_wager_strength():
    round_ = build_round(["9H", "2D", "3D", "4D", "5D", "6D"], ["7S", "6S", "2C", "3C", "4C", "5C"])
    candidates = generate_moves(round_, Color.BLACK)
    single_six = {
        c.move.column: c.strength
        for c in candidates
        if isinstance(c.move, Wager) and c.move.card_ids == ("6S",)
    }
    # 6S runs with black's own 7S stake in column 4 but not with red's 9H.
    assert single_six == {4: 2, 5: 0}


def test_split_pair_stakes_are_filtered():
    round_ = build_round(["9H", "2D", "3D", "4D", "5D", "6D"], ["7S", "6S", "6C", "3C", "8C", "10C"])
    candidates = generate_moves(round_, Color.BLACK)
    flagged = {c.move.card_id for c in candidates if c.split_pair}
    assert flagged == {"6S", "6C"}
    kept = without_split_pairs(candidates)
    assert all(not c.split_pair for c in kept)
    only_pairs = [c for c in candidates if c.split_pair]
    assert without_split_pairs(only_pairs) == only_pairs


def test_ordering_prefers_stronger_wagers():
    round_ = build_round(["9H", "2D", "3D", "4D", "5D", "6D"], ["7S", "6S", "2C", "3C", "4C", "5C"])
    candidates = generate_moves(round_, Color.BLACK)
    scores = [c.score for c in candidates]
    assert scores == sorted(scores, reverse=True)
    assert candidates[0].strength >= 4
