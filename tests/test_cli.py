"""Tests for the command-line entry point."""

from qpath.__main__ import build_parser, config_from_args, main
from qpath.domain.qlearning import QLearningAgent
from qpath.domain.types import QLearnConfig
from qpath.utils.rng import SeededRNG


def test_parser_maps_onto_config():
    args = build_parser().parse_args([
        "--rows", "4", "--cols", "6", "--rounds", "100", "--max-iterations", "7",
        "--gamma", "0.5", "--seed", "3", "--start", "1", "2", "--learn-during-search",
    ])
    config = config_from_args(args)

    assert (config.num_rows, config.num_cols) == (4, 6)
    assert config.exploration_rounds == 100
    assert config.max_iterations == 7
    assert config.gamma == 0.5
    assert config.seed == 3
    assert config.start == (1, 2)
    assert config.learn_during_search


def test_invalid_grid_exits_with_error(capsys):
    assert main(["--rows", "0"]) == 1
    assert "Grid dimensions must be positive" in capsys.readouterr().out


def test_open_grid_prints_path(capsys):
    code = main(["--rows", "3", "--cols", "3", "--rounds", "20000", "--seed", "5",
                 "--wall-probability", "0", "--show-tiles", "--show-qtable"])
    out = capsys.readouterr().out

    assert code == 0
    assert "Tiles:" in out
    assert "Q-table:" in out
    assert "Path (" in out
    assert "(0,0)" in out


def test_isolated_start_exits_with_error(capsys):
    # Every cell is a wall except the goal; a diagonal start has no moves at all
    env = QLearningAgent(QLearnConfig(num_rows=3, num_cols=3, wall_probability=1.0)) \
        .create_environment(SeededRNG(1))
    goal_row, goal_col = env.coords(env.goal.location)
    start = [str((goal_row + 1) % 3), str((goal_col + 1) % 3)]

    code = main(["--rows", "3", "--cols", "3", "--rounds", "10", "--seed", "1",
                 "--wall-probability", "1", "--start", *start])
    out = capsys.readouterr().out

    assert code == 1
    assert "PathNotFoundError" in out
    assert "Partial path" in out


def test_verbose_prints_each_round(capsys):
    main(["--rows", "2", "--cols", "2", "--rounds", "3", "--seed", "1",
          "--wall-probability", "0", "--verbose"])
    out = capsys.readouterr().out
    assert out.count(", Q ") == 3


def test_exploration_summary_reports_skip_rate(capsys):
    main(["--rows", "2", "--cols", "2", "--rounds", "50", "--seed", "1", "--wall-probability", "0"])
    out = capsys.readouterr().out
    assert "50 rounds (0 skipped, 0.0%)" in out
