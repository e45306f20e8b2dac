"""Core type definitions for the Q-Learning pathfinding algorithm."""

from dataclasses import dataclass, field
from typing import Optional, Tuple, List, Literal

from .errors import ConfigurationError

# Flattened index of a grid cell (row * num_cols + col)
LocationKey = int

# Coordinate type for grid positions, (row, col)
Coord = Tuple[int, int]

# Tile kinds, as stored in the tile grid
TILE_IMPASSABLE = -1
TILE_PASSABLE = 0
TILE_GOAL = 1

TILE_KINDS = (TILE_IMPASSABLE, TILE_PASSABLE, TILE_GOAL)

# Reward matrix entries
REWARD_NONE = -1.0
REWARD_STEP = 0.0
REWARD_GOAL = 100.0

# Node states for visualization
NodeState = Literal["wall", "empty", "goal", "start", "path"]

# Self-transition first, then up, down, left, right
NEIGHBOR_DELTAS: Tuple[Coord, ...] = (
    (0, 0),
    (-1, 0),
    (1, 0),
    (0, -1),
    (0, 1),
)


@dataclass(frozen=True)
class State:
    """The agent's current cell."""
    location: LocationKey


@dataclass(frozen=True)
class Action:
    """A candidate move to a location together with its immediate reward."""
    location: LocationKey
    reward: float


@dataclass
class QLearnConfig:
    """Configuration for the Q-Learning pathfinder."""
    num_rows: int = 10
    num_cols: int = 10
    exploration_rounds: int = 250_000
    max_iterations: int = 100
    gamma: float = 0.8  # Discount factor
    seed: Optional[int] = None
    start_row: int = 0
    start_col: int = 0
    wall_probability: float = 0.3
    # Keep updating the Q-table while walking the learned policy
    learn_during_search: bool = False
    progress_interval: int = 10_000  # rounds between progress callbacks
    verbose: bool = False

    @property
    def start(self) -> Coord:
        """Start coordinate for path queries."""
        return (self.start_row, self.start_col)

    def validate(self) -> None:
        """
        Check the configuration for values the algorithm cannot work with.

        Raises:
            ConfigurationError: If any value is out of range
        """
        if self.num_rows <= 0 or self.num_cols <= 0:
            raise ConfigurationError(
                f"Grid dimensions must be positive, got {self.num_rows}x{self.num_cols}"
            )
        if not (0 <= self.start_row < self.num_rows and 0 <= self.start_col < self.num_cols):
            raise ConfigurationError(
                f"Start position {self.start} is out of bounds for a {self.num_rows}x{self.num_cols} grid"
            )
        if self.exploration_rounds < 0:
            raise ConfigurationError(
                f"Exploration rounds must be non-negative, got {self.exploration_rounds}"
            )
        if self.max_iterations <= 0:
            raise ConfigurationError(
                f"Max iterations must be positive, got {self.max_iterations}"
            )
        if not (0.0 <= self.gamma <= 1.0):
            raise ConfigurationError(f"Gamma must be between 0.0 and 1.0, got {self.gamma}")
        if not (0.0 <= self.wall_probability <= 1.0):
            raise ConfigurationError(
                f"Wall probability must be between 0.0 and 1.0, got {self.wall_probability}"
            )
        if self.progress_interval <= 0:
            raise ConfigurationError(
                f"Progress interval must be positive, got {self.progress_interval}"
            )


@dataclass
class TrainingResult:
    """Result of a run of the exploration loop."""
    rounds: int
    updates: int
    skipped_rounds: int
    elapsed_time: float = 0.0
    stopped_early: bool = False

    @property
    def skip_rate(self) -> float:
        """Fraction of rounds that landed on a cell with no available actions."""
        return self.skipped_rounds / self.rounds if self.rounds > 0 else 0.0


@dataclass
class PathfindingResult:
    """Result of walking the learned Q-table from a start cell."""
    path: List[LocationKey] = field(default_factory=list)
    coords: List[Coord] = field(default_factory=list)
    found: bool = False
    total_reward: float = 0.0
    elapsed_time: float = 0.0
    error: str = ""

    @property
    def steps_taken(self) -> int:
        """Number of moves made (the start cell is not a move)."""
        return max(len(self.path) - 1, 0)

    @property
    def success(self) -> bool:
        """Whether pathfinding was successful."""
        return self.found and len(self.path) > 0
