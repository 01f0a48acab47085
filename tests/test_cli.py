import logging

import numpy as np
import pytest

from wizard_engine import cli


def test_parse_args_defaults():
    args = cli.parse_args([])
    assert args.players == 4
    assert args.round is None
    assert args.games == 1
    assert args.reward_mode == "normal"


def test_run_single_rounds():
    args = cli.parse_args(["--players", "3", "--round", "4", "--games", "5", "--seed", "2"])
    scores = cli.run(args)
    assert scores.shape == (5, 3)
    # every round score is either a hit bonus or a multiple of -10
    assert np.all((scores >= 20) | (scores <= -10))


def test_run_binary_rounds():
    args = cli.parse_args(
        ["--players", "5", "--round", "2", "--games", "3", "--reward-mode", "binary"]
    )
    scores = cli.run(args)
    assert scores.shape == (3, 5)
    assert set(np.unique(scores)) <= {-1.0, 1.0}


def test_run_is_reproducible():
    args = cli.parse_args(["--players", "6", "--round", "7", "--games", "4", "--seed", "8"])
    np.testing.assert_array_equal(cli.run(args), cli.run(args))


def test_run_full_games():
    args = cli.parse_args(["--players", "6", "--games", "1"])
    scores = cli.run(args)
    assert scores.shape == (1, 6)
    assert np.all(scores % 10 == 0)


def test_main_logs_seat_summary(caplog):
    with caplog.at_level(logging.INFO):
        cli.main(["--players", "3", "--round", "2", "--games", "3", "--seed", "1"])
    assert "Simulating 3 round(s) of 2 card(s) with 3 players" in caplog.text
    for seat in range(3):
        assert f"Seat {seat}: mean" in caplog.text


@pytest.mark.parametrize(
    "argv",
    [
        ["--players", "7"],
        ["--players", "4", "--round", "16"],
        ["--players", "3", "--start-player", "3", "--round", "1"],
        ["--games", "0"],
    ],
)
def test_main_rejects_bad_arguments(argv):
    with pytest.raises(SystemExit):
        cli.main(argv)
