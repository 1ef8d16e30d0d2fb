from cozen_ai.bot_arena import BOT_REGISTRY, main, run_match
from cozen_ai.greedy_bot import GreedyBot
from cozen_ai.random_bot import RandomBot


def test_run_match_executes():
    results = run_match(GreedyBot(), RandomBot(seed=3), n_matches=2, seed=7, max_rounds=2)
    assert set(results["wins"]) == {"red", "black", "none"}
    assert sum(results["wins"].values()) == 2
    assert len(results["history"]) == 2
    for entry in results["history"]:
        assert 1 <= entry["rounds"] <= 2


def test_registry_lists_bots():
    assert {"random", "greedy", "minimax"} <= set(BOT_REGISTRY)


def test_main_prints_summary(capsys):
    main(["--red", "random", "--black", "random", "--n", "1", "--max-rounds", "1"])
    out = capsys.readouterr().out
    assert "Results after 1 matches" in out
