"""Grid world environment: tile grid and the reward matrix derived from it."""

from typing import List, Sequence

import numpy as np

from .codec import to_coords, to_key
from .errors import ConfigurationError
from .types import (
    Action, Coord, LocationKey, State, NEIGHBOR_DELTAS,
    TILE_GOAL, TILE_IMPASSABLE, TILE_KINDS, TILE_PASSABLE,
    REWARD_GOAL, REWARD_NONE, REWARD_STEP,
)
from ..utils.rng import SeededRNG


class Environment:
    """
    Environment for Q-Learning pathfinding.

    Holds the tile grid (-1 impassable, 0 passable, 1 goal) and the reward
    matrix, where ``rewards[from, to]`` is the reward for moving from location
    ``from`` to location ``to``. Both are read-only once built.
    """

    def __init__(self, tiles: np.ndarray):
        raw = np.asarray(tiles)
        if raw.ndim != 2 or raw.size == 0:
            raise ConfigurationError(f"Tile grid must be a non-empty 2-D matrix, got shape {raw.shape}")

        # Must run on the raw values, before the integer cast
        unknown = raw[~np.isin(raw, TILE_KINDS)]
        if unknown.size:
            raise ConfigurationError(f"Unknown tile values: {sorted(set(unknown.tolist()))}")

        tiles = raw.astype(np.int64)

        goals = np.flatnonzero(tiles == TILE_GOAL)
        if len(goals) != 1:
            raise ConfigurationError(f"Tile grid must contain exactly one goal, found {len(goals)}")

        tiles.setflags(write=False)
        self.tiles = tiles
        self.num_rows, self.num_cols = tiles.shape
        self.goal = State(int(goals[0]))
        self.rewards = self._build_rewards()
        self.rewards.setflags(write=False)

    @classmethod
    def create(cls, num_rows: int, num_cols: int, rng: SeededRNG,
               wall_probability: float = 0.3) -> "Environment":
        """
        Generate a random environment.

        Args:
            num_rows: Grid height (must be > 0)
            num_cols: Grid width (must be > 0)
            rng: Random source to draw walls and the goal from
            wall_probability: Chance of each cell being impassable

        Returns:
            New Environment with exactly one goal cell

        Raises:
            ConfigurationError: If the dimensions or wall probability are invalid
        """
        if num_rows <= 0 or num_cols <= 0:
            raise ConfigurationError(f"Grid dimensions must be positive, got {num_rows}x{num_cols}")
        if not (0.0 <= wall_probability <= 1.0):
            raise ConfigurationError(f"Wall probability must be between 0.0 and 1.0, got {wall_probability}")

        tiles = np.full((num_rows, num_cols), TILE_PASSABLE, dtype=np.int64)
        for i in range(num_rows):
            for j in range(num_cols):
                if rng.random() < wall_probability:
                    tiles[i, j] = TILE_IMPASSABLE

        # The goal overrides whatever was drawn for its cell
        goal = rng.randrange(num_rows * num_cols)
        tiles[to_coords(goal, num_cols)] = TILE_GOAL

        return cls(tiles)

    @classmethod
    def from_tiles(cls, tiles: Sequence[Sequence[int]]) -> "Environment":
        """Build an environment from an explicit tile grid."""
        return cls(np.asarray(tiles))

    @property
    def num_cells(self) -> int:
        """Total number of cells in the grid."""
        return self.num_rows * self.num_cols

    def _build_rewards(self) -> np.ndarray:
        """Build the reward matrix from the tile grid."""
        rewards = np.full((self.num_cells, self.num_cells), REWARD_NONE)
        flat = self.tiles.ravel()

        for i in range(self.num_rows):
            for j in range(self.num_cols):
                origin = to_key(i, j, self.num_rows, self.num_cols)
                for di, dj in NEIGHBOR_DELTAS:
                    dest = to_key(i + di, j + dj, self.num_rows, self.num_cols)
                    if flat[dest] == TILE_IMPASSABLE:
                        rewards[origin, dest] = REWARD_NONE
                    elif flat[dest] == TILE_GOAL:
                        rewards[origin, dest] = REWARD_GOAL
                    else:
                        rewards[origin, dest] = REWARD_STEP

        return rewards

    def available_actions(self, state: State) -> List[Action]:
        """Get the actions from a state whose reward is non-negative, by ascending location."""
        row = self.rewards[state.location]
        return [Action(int(loc), float(row[loc])) for loc in np.flatnonzero(row >= 0)]

    def random_location(self, rng: SeededRNG) -> LocationKey:
        """Get a location chosen uniformly over all cells."""
        return rng.randrange(self.num_cells)

    def location_key(self, row: int, col: int) -> LocationKey:
        """Convert a (row, col) coordinate into a location key."""
        return to_key(row, col, self.num_rows, self.num_cols)

    def coords(self, key: LocationKey) -> Coord:
        """Convert a location key into its (row, col) coordinate."""
        return to_coords(key, self.num_cols)

    def is_passable(self, key: LocationKey) -> bool:
        """Check if the agent can stand on this location."""
        return bool(self.tiles[self.coords(key)] != TILE_IMPASSABLE)

    def format_location(self, key: LocationKey, verbose: bool = False) -> str:
        """Format a location for display, optionally prefixed by its key."""
        i, j = self.coords(key)
        if verbose:
            return f"{key}({i},{j})"
        return f"({i},{j})"

    def __repr__(self) -> str:
        return f"Environment({self.num_rows}x{self.num_cols}, goal={self.coords(self.goal.location)})"
