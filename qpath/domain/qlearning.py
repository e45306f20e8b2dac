"""Q-Learning algorithm implementation for shortest-path finding."""

import time
from typing import Callable, List, Optional

from .environment import Environment
from .errors import ConfigurationError, EmptySelectionError, PathNotFoundError
from .qtable import QTable
from .sampler import sample_random_action
from .types import (
    Action, Coord, LocationKey, PathfindingResult, QLearnConfig, State, TrainingResult,
)
from ..utils.rng import SeededRNG

# Called with (rounds_done, rounds_total); returning False stops training
ProgressCallback = Callable[[int, int], Optional[bool]]

# Called with (state, action, q_before, q_after) after each update
RoundCallback = Callable[[State, Action, float, float], None]


def run_one_round(env: Environment, qtable: QTable, gamma: float, rng: SeededRNG,
                  round_callback: Optional[RoundCallback] = None) -> bool:
    """
    Run one exploration round.

    Starts at a random cell, samples one of its available actions uniformly and
    applies the Q-table update for it.

    Returns:
        True if the table was updated, False if the cell had no available actions
    """
    state = State(env.random_location(rng))
    actions = env.available_actions(state)
    try:
        action = sample_random_action(actions, rng)
    except EmptySelectionError:
        return False

    before = qtable.value(state, action.location)
    qtable.update(state, action, gamma)
    if round_callback:
        round_callback(state, action, before, qtable.value(state, action.location))
    return True


def explore(env: Environment, qtable: QTable, gamma: float, rounds: int, rng: SeededRNG,
            progress_callback: Optional[ProgressCallback] = None,
            progress_interval: int = 10_000,
            round_callback: Optional[RoundCallback] = None) -> TrainingResult:
    """
    Populate the Q-table by random exploration.

    Runs a fixed number of rounds; there is no convergence check. The progress
    callback is invoked every ``progress_interval`` rounds and after the last
    one, and may return False to stop early.
    """
    start_time = time.time()
    updates = 0
    skipped = 0
    stopped_early = False

    for done in range(1, rounds + 1):
        if run_one_round(env, qtable, gamma, rng, round_callback):
            updates += 1
        else:
            skipped += 1

        if progress_callback and (done % progress_interval == 0 or done == rounds):
            if progress_callback(done, rounds) is False and done < rounds:
                stopped_early = True
                break

    return TrainingResult(
        rounds=updates + skipped,
        updates=updates,
        skipped_rounds=skipped,
        elapsed_time=time.time() - start_time,
        stopped_early=stopped_early,
    )


def find_shortest_path(env: Environment, qtable: QTable, gamma: float, start: LocationKey,
                       max_iterations: int, rng: SeededRNG,
                       learn_during_search: bool = False) -> List[LocationKey]:
    """
    Walk the learned Q-table greedily from a start location to the goal.

    At each step the action with the highest Q-value is taken, with ties broken
    uniformly at random. The returned path may contain revisits; how short it
    is depends on how well the table has converged.

    Args:
        env: Environment to walk
        qtable: Trained Q-table
        gamma: Discount factor, used when learning during the search
        start: Location to start from
        max_iterations: Maximum number of steps before giving up
        rng: Random source for tie-breaking
        learn_during_search: Keep updating the table for each step taken

    Returns:
        Location keys from start to goal, inclusive

    Raises:
        ConfigurationError: If the start location is not a cell of the grid,
            or max_iterations is not positive
        PathNotFoundError: If the goal is not reached within max_iterations, or
            the walk gets stuck on a cell with no available actions
    """
    if not 0 <= start < env.num_cells:
        raise ConfigurationError(f"Start location {start} is outside a grid of {env.num_cells} cells")
    if max_iterations <= 0:
        raise ConfigurationError(f"Max iterations must be positive, got {max_iterations}")

    state = State(start)
    path = [start]

    for _ in range(max_iterations):
        if state == env.goal:
            return path

        actions = env.available_actions(state)
        _, best = qtable.best_actions(state, actions)
        try:
            action = sample_random_action(best, rng)
        except EmptySelectionError as e:
            raise PathNotFoundError(
                f"sampling random action from {env.format_location(state.location)}: {e}", path
            ) from e

        if learn_during_search:
            qtable.update(state, action, gamma)

        path.append(action.location)
        state = State(action.location)

    if state == env.goal:
        return path

    raise PathNotFoundError(f"couldn't find path within max iterations ({max_iterations})", path)


class QLearningAgent:
    """Q-Learning agent for shortest-path finding."""

    def __init__(self, config: QLearnConfig):
        config.validate()
        self.config = config
        self.qtable: Optional[QTable] = None
        self.training_result: Optional[TrainingResult] = None

    def create_environment(self, rng: SeededRNG) -> Environment:
        """Generate a random environment using the configured size."""
        return Environment.create(
            self.config.num_rows, self.config.num_cols, rng, self.config.wall_probability
        )

    def train(self, env: Environment, rng: SeededRNG,
              progress_callback: Optional[ProgressCallback] = None,
              round_callback: Optional[RoundCallback] = None) -> TrainingResult:
        """Train a fresh Q-table for the environment by random exploration."""
        self.qtable = QTable.for_environment(env)
        self.training_result = explore(
            env, self.qtable, self.config.gamma, self.config.exploration_rounds, rng,
            progress_callback=progress_callback,
            progress_interval=self.config.progress_interval,
            round_callback=round_callback,
        )
        return self.training_result

    def find_path(self, env: Environment, start: Coord, rng: SeededRNG) -> PathfindingResult:
        """Find a path from a start coordinate using the learned Q-values."""
        row, col = start
        if not (0 <= row < env.num_rows and 0 <= col < env.num_cols):
            raise ConfigurationError(
                f"Start position {start} is out of bounds for a {env.num_rows}x{env.num_cols} grid"
            )
        if self.qtable is None:
            self.qtable = QTable.for_environment(env)

        start_key = env.location_key(*start)
        start_time = time.time()
        try:
            path = find_shortest_path(
                env, self.qtable, self.config.gamma, start_key,
                self.config.max_iterations, rng,
                learn_during_search=self.config.learn_during_search,
            )
            found = True
            error = ""
        except PathNotFoundError as e:
            path = e.path
            found = False
            error = str(e)

        return PathfindingResult(
            path=path,
            coords=[env.coords(key) for key in path],
            found=found,
            total_reward=self._path_reward(env, path),
            elapsed_time=time.time() - start_time,
            error=error,
        )

    def run(self, rng: Optional[SeededRNG] = None) -> tuple[Environment, PathfindingResult]:
        """Create an environment, train on it and find a path from the configured start."""
        if rng is None:
            rng = SeededRNG(self.config.seed)
        env = self.create_environment(rng)
        self.train(env, rng)
        return env, self.find_path(env, self.config.start, rng)

    @staticmethod
    def _path_reward(env: Environment, path: List[LocationKey]) -> float:
        """Sum of immediate rewards along a path."""
        return float(sum(env.rewards[a, b] for a, b in zip(path, path[1:])))
