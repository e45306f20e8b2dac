"""Q-value table and its temporal-difference update rule."""

from typing import List, Sequence, Tuple

import numpy as np

from .types import Action, LocationKey, State


class QTable:
    """
    Learned values indexed by (state location, action location).

    Shares its shape and indexing with the environment's reward matrix and
    starts out all zeros.
    """

    def __init__(self, num_cells: int):
        self._values = np.zeros((num_cells, num_cells))

    @classmethod
    def for_environment(cls, env) -> "QTable":
        """Create an empty table sized for an environment."""
        return cls(env.num_cells)

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the underlying matrix."""
        view = self._values.view()
        view.setflags(write=False)
        return view

    @property
    def num_cells(self) -> int:
        return self._values.shape[0]

    def value(self, state: State, location: LocationKey) -> float:
        """Get the Q-value for moving from a state to a location."""
        return float(self._values[state.location, location])

    def max_q(self, location: LocationKey) -> float:
        """Get the maximum Q-value in the row for a location."""
        return float(np.max(self._values[location]))

    def update(self, state: State, action: Action, gamma: float) -> None:
        """
        Update the Q-value for taking an action from a state.

        Uses the temporal difference method:
        Q(s, a) = reward(a) + gamma * max Q(a, *)
        """
        self._values[state.location, action.location] = action.reward + gamma * self.max_q(action.location)

    def best_actions(self, state: State, candidates: Sequence[Action]) -> Tuple[float, List[Action]]:
        """
        Filter candidates down to those with the maximum Q-value for a state.

        All tied candidates are returned, in their original order, so the caller
        can break the tie at random.

        Args:
            state: State the candidates are taken from
            candidates: Actions to choose between

        Returns:
            Tuple of (max_value, best_actions); (0.0, []) when there are no candidates
        """
        if not candidates:
            return 0.0, []

        row = self._values[state.location]
        max_value = float(row[candidates[0].location])
        best: List[Action] = []
        for action in candidates:
            q_value = float(row[action.location])
            if q_value == max_value:
                best.append(action)
            elif q_value > max_value:
                max_value = q_value
                best = [action]

        return max_value, best

