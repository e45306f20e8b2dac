"""Command-line entry point: train on a random grid and print the learned path."""

import argparse
import sys
import time
from typing import List, Optional

from .domain.environment import Environment
from .domain.errors import QPathError, PathNotFoundError
from .domain.qlearning import QLearningAgent
from .domain.types import Action, QLearnConfig, State
from .utils.matprint import TableConfig, table
from .utils.rng import SeededRNG


def build_parser() -> argparse.ArgumentParser:
    defaults = QLearnConfig()
    parser = argparse.ArgumentParser(
        prog="qpath", description="Q-Learning: find the shortest path across a random grid"
    )
    parser.add_argument("--rows", type=int, default=defaults.num_rows, help="Grid height")
    parser.add_argument("--cols", type=int, default=defaults.num_cols, help="Grid width")
    parser.add_argument("--rounds", type=int, default=defaults.exploration_rounds,
                        help="Number of random exploration rounds")
    parser.add_argument("--max-iterations", type=int, default=defaults.max_iterations,
                        help="Maximum steps when walking the learned table")
    parser.add_argument("--gamma", type=float, default=defaults.gamma, help="Discount factor")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--start", type=int, nargs=2, metavar=("ROW", "COL"),
                        default=[defaults.start_row, defaults.start_col], help="Start cell")
    parser.add_argument("--wall-probability", type=float, default=defaults.wall_probability,
                        help="Chance of each cell being impassable")
    parser.add_argument("--learn-during-search", action="store_true",
                        help="Keep updating the Q-table while walking the path")
    parser.add_argument("--show-tiles", action="store_true", help="Print the tile grid")
    parser.add_argument("--show-rewards", action="store_true", help="Print the reward matrix")
    parser.add_argument("--show-qtable", action="store_true", help="Print the trained Q-table")
    parser.add_argument("--precision", type=int, default=0, help="Decimal places for printed tables")
    parser.add_argument("--verbose", action="store_true",
                        help="Print every exploration update and location keys")
    return parser


def config_from_args(args: argparse.Namespace) -> QLearnConfig:
    return QLearnConfig(
        num_rows=args.rows,
        num_cols=args.cols,
        exploration_rounds=args.rounds,
        max_iterations=args.max_iterations,
        gamma=args.gamma,
        seed=args.seed,
        start_row=args.start[0],
        start_col=args.start[1],
        wall_probability=args.wall_probability,
        learn_during_search=args.learn_during_search,
        verbose=args.verbose,
    )


def format_path(env: Environment, path: List[int], verbose: bool = False) -> str:
    return " -> ".join(env.format_location(key, verbose) for key in path)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    print("🧠 Q-Learning: Finding the shortest path")
    print("=" * 50)

    try:
        config = config_from_args(args)
        agent = QLearningAgent(config)
        rng = SeededRNG(config.seed)
        env = agent.create_environment(rng)
    except QPathError as e:
        print(f"❌ {e}")
        return 1

    print(f"📐 Grid: {env.num_rows}x{env.num_cols}")
    print(f"🎯 Start: {config.start} → Goal: {env.coords(env.goal.location)}")

    printer = TableConfig(precision=args.precision)
    if args.show_tiles:
        print(f"Tiles:\n{table(env.tiles, printer)}")
    if args.show_rewards:
        print(f"Rewards:\n{table(env.rewards, printer)}")

    def print_round(state: State, action: Action, before: float, after: float):
        print(f"{env.format_location(state.location, True)} -> "
              f"{env.format_location(action.location, True)} "
              f"reward {action.reward:.0f}, Q {before:.0f} -> {after:.0f}")

    start_time = time.time()
    training = agent.train(env, rng, round_callback=print_round if config.verbose else None)
    print(f"⏱️  Exploration: {training.rounds} rounds "
          f"({training.skipped_rounds} skipped, {training.skip_rate:.1%}) in {time.time() - start_time:.3f}s")

    if args.show_qtable:
        print(f"Q-table:\n{table(agent.qtable.values, printer)}")

    result = agent.find_path(env, config.start, rng)
    if not result.found:
        print(f"❌ {PathNotFoundError.__name__}: {result.error}")
        if result.path:
            print(f"Partial path: {format_path(env, result.path, config.verbose)}")
        return 1

    print(f"✅ Path ({result.steps_taken} steps): {format_path(env, result.path, config.verbose)}")
    print(f"⏱️  Path finding: {result.elapsed_time:.6f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
