"""Tests for the exploration loop, path extraction and the agent facade."""

import numpy as np
import pytest

from qpath.domain.environment import Environment
from qpath.domain.errors import ConfigurationError, EmptySelectionError, PathNotFoundError
from qpath.domain.qlearning import QLearningAgent, explore, find_shortest_path, run_one_round
from qpath.domain.qtable import QTable
from qpath.domain.types import QLearnConfig, State
from qpath.utils.rng import SeededRNG


def trained_table(env: Environment, rounds: int, seed: int = 0, gamma: float = 0.8) -> QTable:
    table = QTable.for_environment(env)
    explore(env, table, gamma, rounds, SeededRNG(seed))
    return table


# Exploration


def test_run_one_round_updates_sampled_entry(two_by_two, scripted_rng):
    table = QTable.for_environment(two_by_two)
    # Start at (0,1), pick the last of [0, 1, 3] which is the goal
    rng = scripted_rng(floats=[0.9], ints=[1])

    assert run_one_round(two_by_two, table, 0.8, rng) is True
    assert table.value(State(1), 3) == 100.0


def test_run_one_round_skips_isolated_cell(walled_goal, scripted_rng):
    table = QTable.for_environment(walled_goal)

    assert run_one_round(walled_goal, table, 0.8, scripted_rng(ints=[0])) is False
    assert not table.values.any()


def test_explore_counts_skipped_rounds(walled_goal):
    table = QTable.for_environment(walled_goal)
    result = explore(walled_goal, table, 0.8, 300, SeededRNG(1))

    assert result.rounds == 300
    assert result.updates + result.skipped_rounds == 300
    # Four edge cells and the goal have moves; the four corners are isolated
    assert result.skipped_rounds > 0
    assert not result.stopped_early
    assert result.skip_rate == result.skipped_rounds / 300


def test_explore_zero_rounds_leaves_table_empty(two_by_two):
    table = QTable.for_environment(two_by_two)
    result = explore(two_by_two, table, 0.8, 0, SeededRNG(1))
    assert result.rounds == 0
    assert result.skip_rate == 0.0
    assert not table.values.any()


def test_explore_progress_callback_can_stop(two_by_two):
    calls = []

    def progress(done, total):
        calls.append((done, total))
        return done < 20

    table = QTable.for_environment(two_by_two)
    result = explore(two_by_two, table, 0.8, 100, SeededRNG(1),
                     progress_callback=progress, progress_interval=10)

    assert calls == [(10, 100), (20, 100)]
    assert result.rounds == 20
    assert result.stopped_early


def test_explore_round_callback_sees_each_update(two_by_two):
    seen = []
    table = QTable.for_environment(two_by_two)
    explore(two_by_two, table, 0.8, 50, SeededRNG(2),
            round_callback=lambda s, a, before, after: seen.append((s, a, before, after)))

    assert len(seen) == 50
    state, action, _, after = seen[-1]
    assert table.value(state, action.location) == after


# Path extraction


def test_two_by_two_prefers_moving_toward_goal(two_by_two):
    table = trained_table(two_by_two, rounds=1000, seed=42)
    start = State(two_by_two.location_key(0, 0))

    max_value, best = table.best_actions(start, two_by_two.available_actions(start))

    assert max_value > table.value(start, start.location)
    assert {action.location for action in best} <= {1, 2}


def test_two_by_two_path_reaches_goal_quickly(two_by_two):
    table = trained_table(two_by_two, rounds=1000, seed=42)

    path = find_shortest_path(two_by_two, table, 0.8, 0, 4, SeededRNG(42))

    assert path[0] == 0
    assert path[-1] == two_by_two.goal.location
    assert len(path) <= 3


def test_start_at_goal_returns_single_step(walled_goal):
    table = trained_table(walled_goal, rounds=100)
    goal = walled_goal.goal.location
    assert find_shortest_path(walled_goal, table, 0.8, goal, 10, SeededRNG(0)) == [goal]


def test_unreachable_goal_raises_with_partial_path(cut_off_corridor):
    table = trained_table(cut_off_corridor, rounds=2000)

    with pytest.raises(PathNotFoundError) as excinfo:
        find_shortest_path(cut_off_corridor, table, 0.8, 0, 10, SeededRNG(0))

    assert len(excinfo.value.path) == 11
    assert set(excinfo.value.path) <= {0, 1}


def test_isolated_start_raises_path_not_found(walled_goal):
    table = QTable.for_environment(walled_goal)

    with pytest.raises(PathNotFoundError) as excinfo:
        find_shortest_path(walled_goal, table, 0.8, 0, 10, SeededRNG(0))

    assert excinfo.value.path == [0]
    assert isinstance(excinfo.value.__cause__, EmptySelectionError)


def test_read_only_search_leaves_table_unchanged(two_by_two):
    table = trained_table(two_by_two, rounds=1000)
    before = table.values.copy()

    find_shortest_path(two_by_two, table, 0.8, 0, 10, SeededRNG(0))

    assert np.array_equal(table.values, before)


def test_learning_search_updates_table(two_by_two):
    table = QTable.for_environment(two_by_two)

    path = find_shortest_path(two_by_two, table, 0.8, 0, 100, SeededRNG(0), learn_during_search=True)

    assert path[-1] == two_by_two.goal.location
    assert table.value(State(path[-2]), path[-1]) == 100.0


def test_open_grid_path_is_shortest():
    env = Environment.create(3, 3, SeededRNG(5), wall_probability=0.0)
    table = trained_table(env, rounds=20000)
    goal_row, goal_col = env.coords(env.goal.location)

    for key in range(env.num_cells):
        row, col = env.coords(key)
        # Toroidal distance on a 3x3 grid is at most one step per axis
        distance = min(abs(row - goal_row), 3 - abs(row - goal_row)) + \
            min(abs(col - goal_col), 3 - abs(col - goal_col))
        path = find_shortest_path(env, table, 0.8, key, 10, SeededRNG(key))
        assert len(path) == distance + 1


# Agent facade


def test_agent_rejects_invalid_config():
    with pytest.raises(ConfigurationError):
        QLearningAgent(QLearnConfig(num_rows=0))
    with pytest.raises(ConfigurationError):
        QLearningAgent(QLearnConfig(gamma=1.5))
    with pytest.raises(ConfigurationError):
        QLearningAgent(QLearnConfig(num_rows=3, num_cols=3, start_row=3))
    with pytest.raises(ConfigurationError):
        QLearningAgent(QLearnConfig(max_iterations=0))


def test_agent_run_is_deterministic_for_a_seed():
    config = QLearnConfig(num_rows=5, num_cols=5, exploration_rounds=5000, seed=1234)

    first = QLearningAgent(config)
    env_a, result_a = first.run()
    second = QLearningAgent(config)
    env_b, result_b = second.run()

    assert np.array_equal(env_a.tiles, env_b.tiles)
    assert np.array_equal(first.qtable.values, second.qtable.values)
    assert result_a.path == result_b.path
    assert result_a.found == result_b.found


def test_agent_find_path_reports_failure(cut_off_corridor):
    agent = QLearningAgent(QLearnConfig(num_rows=1, num_cols=5, max_iterations=5,
                                        exploration_rounds=500))
    rng = SeededRNG(3)
    agent.train(cut_off_corridor, rng)

    result = agent.find_path(cut_off_corridor, (0, 0), rng)

    assert not result.found
    assert not result.success
    assert result.steps_taken == 5
    assert "max iterations" in result.error


def test_agent_find_path_success_reports_coords_and_reward(two_by_two):
    agent = QLearningAgent(QLearnConfig(num_rows=2, num_cols=2, exploration_rounds=1000))
    rng = SeededRNG(9)
    training = agent.train(two_by_two, rng)

    result = agent.find_path(two_by_two, (0, 0), rng)

    assert training.rounds == 1000
    assert result.success
    assert result.coords[0] == (0, 0)
    assert result.coords[-1] == (1, 1)
    assert result.total_reward == 100.0


def test_out_of_range_start_key_is_rejected(two_by_two):
    table = QTable.for_environment(two_by_two)
    with pytest.raises(ConfigurationError):
        find_shortest_path(two_by_two, table, 0.8, 4, 10, SeededRNG(0))
    with pytest.raises(ConfigurationError):
        find_shortest_path(two_by_two, table, 0.8, -1, 10, SeededRNG(0))
    with pytest.raises(ConfigurationError):
        find_shortest_path(two_by_two, table, 0.8, 0, 0, SeededRNG(0))


def test_agent_find_path_rejects_start_outside_grid():
    agent = QLearningAgent(QLearnConfig(num_rows=3, num_cols=3, exploration_rounds=100))
    rng = SeededRNG(6)
    env = agent.create_environment(rng)
    agent.train(env, rng)

    with pytest.raises(ConfigurationError):
        agent.find_path(env, (10, 10), rng)
    with pytest.raises(ConfigurationError):
        agent.find_path(env, (-1, 0), rng)
