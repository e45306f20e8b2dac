"""Shared fixtures for the pathfinder tests."""

from typing import Iterable, Optional

import pytest

from qpath.domain.environment import Environment
from qpath.domain.types import TILE_GOAL, TILE_IMPASSABLE, TILE_PASSABLE


class ScriptedRNG:
    """Random source that replays fixed draws, for pinning down sampling behaviour."""

    def __init__(self, floats: Iterable[float] = (), ints: Iterable[int] = ()):
        self._floats = list(floats)
        self._ints = list(ints)

    def random(self) -> float:
        return self._floats.pop(0)

    def randrange(self, stop: int) -> int:
        value = self._ints.pop(0)
        assert 0 <= value < stop
        return value


W, P, G = TILE_IMPASSABLE, TILE_PASSABLE, TILE_GOAL


@pytest.fixture
def scripted_rng():
    def make(floats: Iterable[float] = (), ints: Iterable[int] = ()) -> ScriptedRNG:
        return ScriptedRNG(floats, ints)
    return make


@pytest.fixture
def two_by_two() -> Environment:
    """All passable, goal in the bottom-right corner."""
    return Environment.from_tiles([[P, P], [P, G]])


@pytest.fixture
def walled_goal() -> Environment:
    """Only the centre goal cell is passable."""
    return Environment.from_tiles([[W, W, W], [W, G, W], [W, W, W]])


@pytest.fixture
def cut_off_corridor() -> Environment:
    """Cells 0 and 1 form an island that cannot reach the goal at 3."""
    return Environment.from_tiles([[P, P, W, G, W]])
