"""Finite State Machine for the train-then-search workflow."""

from enum import Enum, auto
from typing import Dict, Callable, Optional


class RLState(Enum):
    """States of the Q-Learning workflow."""
    IDLE = auto()
    TRAINING = auto()
    TRAINED = auto()
    SEARCHING = auto()
    SOLVED = auto()
    ERROR = auto()


class RLStateMachine:
    """State machine for managing Q-Learning execution."""

    def __init__(self):
        self.current_state = RLState.IDLE
        self._enter_callbacks: Dict[RLState, Callable[[Optional[Dict]], None]] = {}

        # Define valid state transitions
        self._valid_transitions = {
            RLState.IDLE: {RLState.TRAINING},
            RLState.TRAINING: {RLState.TRAINED, RLState.ERROR, RLState.IDLE},
            RLState.TRAINED: {RLState.SEARCHING, RLState.TRAINING, RLState.IDLE},
            RLState.SEARCHING: {RLState.SOLVED, RLState.ERROR},
            RLState.SOLVED: {RLState.SEARCHING, RLState.TRAINING, RLState.IDLE},
            RLState.ERROR: {RLState.IDLE, RLState.TRAINED},
        }

    def on_state_enter(self, state: RLState, callback: Callable[[Optional[Dict]], None]):
        """Register callback for state entry."""
        self._enter_callbacks[state] = callback

    def can_transition(self, to_state: RLState) -> bool:
        """Check if transition to target state is valid."""
        return to_state in self._valid_transitions.get(self.current_state, set())

    def transition(self, to_state: RLState, context: Optional[Dict] = None) -> bool:
        """Attempt to transition to target state."""
        if not self.can_transition(to_state):
            return False

        self.current_state = to_state

        if to_state in self._enter_callbacks:
            self._enter_callbacks[to_state](context)

        return True

    # Convenience methods for common transitions

    def start_training(self, context: Optional[Dict] = None) -> bool:
        return self.transition(RLState.TRAINING, context)

    def finish_training(self, context: Optional[Dict] = None) -> bool:
        return self.transition(RLState.TRAINED, context)

    def start_search(self, context: Optional[Dict] = None) -> bool:
        return self.transition(RLState.SEARCHING, context)

    def solve(self, context: Optional[Dict] = None) -> bool:
        return self.transition(RLState.SOLVED, context)

    def reset_to_idle(self, context: Optional[Dict] = None) -> bool:
        return self.transition(RLState.IDLE, context)

    def fail_error(self, context: Optional[Dict] = None) -> bool:
        return self.transition(RLState.ERROR, context)

    # State checking methods

    def is_idle(self) -> bool:
        return self.current_state == RLState.IDLE

    def is_training(self) -> bool:
        return self.current_state == RLState.TRAINING

    def is_trained(self) -> bool:
        """Check if a learned table is available for searching."""
        return self.current_state in {RLState.TRAINED, RLState.SOLVED}

    def is_error(self) -> bool:
        return self.current_state == RLState.ERROR

    def get_state_description(self) -> str:
        """Get human-readable state description."""
        descriptions = {
            RLState.IDLE: "Ready - Click Train to start exploring",
            RLState.TRAINING: "Exploring grid and updating Q-table",
            RLState.TRAINED: "Training finished - click a cell and Find Path",
            RLState.SEARCHING: "Walking learned Q-table",
            RLState.SOLVED: "Path found",
            RLState.ERROR: "Error occurred during execution",
        }
        return descriptions.get(self.current_state, "Unknown state")
