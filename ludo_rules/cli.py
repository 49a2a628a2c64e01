import argparse
import json
import sys
import time
from typing import Optional, Sequence

from loguru import logger

from .config import config
from .strategy import STRATEGY_REGISTRY
from .simulator import Simulator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Play batches of automated Ludo games and report results"
    )
    parser.add_argument("--games", type=int, default=100, help="Number of games to play")
    parser.add_argument(
        "--players",
        type=int,
        default=config.NUM_PLAYERS,
        help="Players per game (2-4)",
    )
    parser.add_argument(
        "--strategy",
        action="append",
        choices=sorted(STRATEGY_REGISTRY),
        help="Move picker per seat; repeat to vary seats (cycled). Default: random",
    )
    parser.add_argument("--seed", type=int, default=config.SEED)
    parser.add_argument(
        "--max-turns",
        type=int,
        default=config.MAX_TURNS,
        help="Rolls per game before it is abandoned",
    )
    parser.add_argument("--log-level", type=str, default=config.LOG_LEVEL)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())

    sim = Simulator(
        num_players=args.players,
        strategy_names=tuple(args.strategy or ["random"]),
        seed=args.seed,
        max_turns=args.max_turns,
    )
    start_time = time.time()
    stats = sim.run(args.games)
    logger.info(f"Simulated {args.games} games in {time.time() - start_time:.2f} seconds")
    print(json.dumps(stats, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
