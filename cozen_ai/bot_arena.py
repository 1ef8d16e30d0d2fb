"""Simple bot arena for Cozen."""

from __future__ import annotations

import argparse
import logging
from typing import Dict, Iterable

from cozen.cards import Color
from cozen.game import MatchSession

from .base import BotStrategy
from .greedy_bot import GreedyBot
from .minimax_bot import MinimaxBot
from .random_bot import RandomBot
from .search import Difficulty

log = logging.getLogger(__name__)

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "random": RandomBot,
    "greedy": GreedyBot,
    "minimax": MinimaxBot,
}


def _play_round(session: MatchSession, bots: Dict[Color, BotStrategy]) -> None:
    round_ = session.start_round()
    for color, bot in bots.items():
        bot.on_round_start(round_.clone(), color)
    while not round_.is_complete:
        color = round_.active
        move = bots[color].choose_move(round_.clone(), color)
        if move is None:
            raise RuntimeError(f"{bots[color].name} found no legal move for {color}.")
        session.play(move)


def run_match(
    red_bot: BotStrategy,
    black_bot: BotStrategy,
    n_matches: int = 1,
    seed: int = 0,
    max_rounds: int = 30,
) -> dict:
    """Play ``n_matches`` full matches and tally the winners."""
    bots = {Color.RED: red_bot, Color.BLACK: black_bot}
    wins = {Color.RED.value: 0, Color.BLACK.value: 0, "none": 0}
    history = []
    for index in range(n_matches):
        session = MatchSession(seed=seed + index)
        while session.winner is None and len(session.round_history) < max_rounds:
            _play_round(session, bots)
        winner = session.winner.value if session.winner else "none"
        wins[winner] += 1
        history.append(
            {
                "winner": winner,
                "rounds": len(session.round_history),
                "victory_points": {
                    Color.RED.value: session.red.victory_points,
                    Color.BLACK.value: session.black.victory_points,
                },
                "cards_jailed": sum(result.cards_jailed for result in session.round_history),
            }
        )
        log.info("Match %d: winner %s after %d rounds", index + 1, winner, len(session.round_history))
    return {"wins": wins, "history": history}


def _build_bot(key: str, difficulty: Difficulty, seed: int) -> BotStrategy:
    if key == "minimax":
        return MinimaxBot(difficulty=difficulty)
    if key == "random":
        return RandomBot(seed=seed)
    return BOT_REGISTRY[key]()


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a Cozen bot match.")
    parser.add_argument("--red", default="greedy", choices=BOT_REGISTRY.keys())
    parser.add_argument("--black", default="random", choices=BOT_REGISTRY.keys())
    parser.add_argument("--difficulty", default="easy", choices=[d.value for d in Difficulty])
    parser.add_argument("--n", type=int, default=10, help="Number of matches to play.")
    parser.add_argument("--max-rounds", type=int, default=30)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    difficulty = Difficulty(args.difficulty)
    red = _build_bot(args.red, difficulty, args.seed)
    black = _build_bot(args.black, difficulty, args.seed + 1)
    results = run_match(red, black, n_matches=args.n, seed=args.seed, max_rounds=args.max_rounds)

    print(f"Results after {args.n} matches ({red.name} vs {black.name}): {results['wins']}")
    rounds = sum(entry["rounds"] for entry in results["history"])
    print(f"Average rounds per match: {rounds / max(1, len(results['history'])):.1f}")


if __name__ == "__main__":
    main()
