from __future__ import annotations

import argparse
import logging
import random
from typing import List, Optional

import numpy as np

from .agents import RandomWizardAgent
from .engine import GameEngine
from .game import WizardConfig
from .state import RewardMode

REWARD_MODES = {
    "normal": RewardMode.NORMAL,
    "binary": RewardMode.BINARY,
}


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Simulate Wizard rounds or full games between random agents and "
            "log the score distribution per seat."
        )
    )

    parser.add_argument(
        "--players",
        type=int,
        default=4,
        help="Number of players, 3 to 6 (default: 4).",
    )
    parser.add_argument(
        "--round",
        type=int,
        default=None,
        help=(
            "Play only this round (number of cards per player). "
            "If omitted, full games are played."
        ),
    )
    parser.add_argument(
        "--start-player",
        type=int,
        default=0,
        help="Seat that deals first and leads when --round is given (default: 0).",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=1,
        help="Number of rounds or games to simulate (default: 1).",
    )
    parser.add_argument(
        "--reward-mode",
        choices=sorted(REWARD_MODES),
        default="normal",
        help="Payoff scale recorded per round (default: normal).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Base random seed for the deal and the agents.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ...). Default: INFO.",
    )

    return parser.parse_args(argv)


def _make_engine(
    game_index: int, args: argparse.Namespace
) -> GameEngine:
    agents = [
        RandomWizardAgent(rng=random.Random(args.seed + game_index * 1000 + i))
        for i in range(args.players)
    ]
    return GameEngine(
        agents=agents,
        player_names=[f"random-{i}" for i in range(args.players)],
        rng_seed=args.seed + game_index,
        game_label=f"game-{game_index}",
        reward_mode=REWARD_MODES[args.reward_mode],
    )


def run(args: argparse.Namespace) -> np.ndarray:
    """Play the requested simulations and return a (games, players) score array."""
    results: List[List[float]] = []
    for game_index in range(args.games):
        engine = _make_engine(game_index, args)
        if args.round is not None:
            round_ = engine.play_round(args.round, args.start_player)
            results.append(round_.returns())
        else:
            game_state = engine.play_game()
            results.append([float(p.score) for p in game_state.players])
    return np.asarray(results, dtype=np.float64)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = WizardConfig(
            players=args.players,
            round=args.round if args.round is not None else 1,
            start_player=args.start_player,
            reward_mode=REWARD_MODES[args.reward_mode],
        )
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    if args.games < 1:
        raise SystemExit("--games must be at least 1")

    logging.info(
        "Simulating %d %s with %d players",
        args.games,
        f"round(s) of {config.round} card(s)" if args.round is not None else "game(s)",
        config.players,
    )

    scores = run(args)
    means = scores.mean(axis=0)
    stds = scores.std(axis=0)
    for seat in range(config.players):
        logging.info(
            "Seat %d: mean %.2f, std %.2f",
            seat,
            means[seat],
            stds[seat],
        )


if __name__ == "__main__":
    main()

'''
python3 -m wizard_engine.cli --players 4 --round 5 --games 200 --seed 1
'''
