"""Application controller connecting the UI to the Q-Learning domain logic."""

from typing import Optional

from PySide6.QtCore import QObject, Signal, QThread

from ..domain.environment import Environment
from ..domain.errors import QPathError
from ..domain.qlearning import QLearningAgent
from ..domain.types import Coord, QLearnConfig, PathfindingResult, TrainingResult
from ..utils.matprint import table
from ..utils.rng import SeededRNG
from .fsm import RLStateMachine, RLState


class TrainingWorker(QObject):
    """Worker that runs the exploration loop off the UI thread."""

    progress_updated = Signal(int, int)  # rounds_done, rounds_total
    training_finished = Signal(object)  # TrainingResult
    error_occurred = Signal(str)

    def __init__(self, agent: QLearningAgent, env: Environment, rng: SeededRNG):
        super().__init__()
        self.agent = agent
        self.env = env
        self.rng = rng
        self.should_stop = False

    def stop(self):
        """Ask the exploration loop to stop at its next progress check."""
        self.should_stop = True

    def _on_progress(self, done: int, total: int) -> bool:
        self.progress_updated.emit(done, total)
        return not self.should_stop

    def run(self):
        """Train the agent, reporting progress through signals."""
        try:
            result = self.agent.train(self.env, self.rng, progress_callback=self._on_progress)
            self.training_finished.emit(result)
        except QPathError as e:
            self.error_occurred.emit(str(e))


class QLearnController(QObject):
    """
    Controller that owns the environment, agent and random source.

    Signals:
        state_changed: Emitted when the workflow state changes
        grid_updated: Emitted when a new environment is generated or the start moves
        training_progress: Emitted periodically while exploring
        training_completed: Emitted when exploration finishes
        path_found: Emitted with the PathfindingResult of a search
        error_occurred: Emitted when an error occurs
    """

    state_changed = Signal(object)  # RLState
    grid_updated = Signal()
    training_progress = Signal(int, int)
    training_completed = Signal(object)  # TrainingResult
    path_found = Signal(object)  # PathfindingResult
    error_occurred = Signal(str)

    def __init__(self, config: Optional[QLearnConfig] = None):
        super().__init__()

        self._config = config or QLearnConfig(num_rows=8, num_cols=8, exploration_rounds=50_000, seed=42)
        self._agent = QLearningAgent(self._config)
        self._state_machine = RLStateMachine()
        self._rng = SeededRNG(self._config.seed)
        self._env: Optional[Environment] = None
        self._start: Coord = self._config.start
        self._last_path: Optional[PathfindingResult] = None

        self._training_thread: Optional[QThread] = None
        self._training_worker: Optional[TrainingWorker] = None

        for state in RLState:
            self._state_machine.on_state_enter(state, self._emit_state)

        self.new_grid(self._config.num_rows, self._config.num_cols, self._config.seed)

    # Properties

    @property
    def config(self) -> QLearnConfig:
        return self._config

    @property
    def environment(self) -> Optional[Environment]:
        return self._env

    @property
    def agent(self) -> QLearningAgent:
        return self._agent

    @property
    def start(self) -> Coord:
        return self._start

    @property
    def last_path(self) -> Optional[PathfindingResult]:
        return self._last_path

    @property
    def state(self) -> RLState:
        return self._state_machine.current_state

    def state_description(self) -> str:
        return self._state_machine.get_state_description()

    # Grid management

    def new_grid(self, num_rows: int, num_cols: int, seed: Optional[int] = None) -> bool:
        """Generate a new random environment and forget the learned table."""
        if self._state_machine.is_training():
            return False

        try:
            config = QLearnConfig(
                num_rows=num_rows,
                num_cols=num_cols,
                exploration_rounds=self._config.exploration_rounds,
                max_iterations=self._config.max_iterations,
                gamma=self._config.gamma,
                seed=seed,
                wall_probability=self._config.wall_probability,
                learn_during_search=self._config.learn_during_search,
                progress_interval=self._config.progress_interval,
            )
            agent = QLearningAgent(config)
            rng = SeededRNG(seed)
            env = agent.create_environment(rng)
        except QPathError as e:
            self.error_occurred.emit(str(e))
            return False

        self._config, self._agent, self._rng, self._env = config, agent, rng, env
        self._start = config.start
        self._last_path = None

        if not self._state_machine.is_idle():
            self._state_machine.reset_to_idle()
        self.grid_updated.emit()
        return True

    def set_start(self, coord: Coord) -> bool:
        """Move the path-query start cell."""
        if self._env is None or self._state_machine.is_training():
            return False
        row, col = coord
        if not (0 <= row < self._env.num_rows and 0 <= col < self._env.num_cols):
            return False

        self._start = coord
        self._last_path = None
        self.grid_updated.emit()
        return True

    def set_exploration_rounds(self, rounds: int):
        self._config.exploration_rounds = rounds

    # Training

    def start_training(self) -> bool:
        """Start exploring in a worker thread."""
        if self._env is None or not self._state_machine.start_training():
            return False

        self._last_path = None
        self._training_thread = QThread()
        self._training_thread.setObjectName("QPath-TrainingThread")
        self._training_worker = TrainingWorker(self._agent, self._env, self._rng)
        self._training_worker.moveToThread(self._training_thread)

        self._training_worker.progress_updated.connect(self.training_progress)
        self._training_worker.training_finished.connect(self._on_training_finished)
        self._training_worker.error_occurred.connect(self._on_training_error)
        self._training_thread.started.connect(self._training_worker.run)

        self._training_thread.start()
        return True

    def stop_training(self):
        """Ask a running worker to stop; the partial table is kept."""
        if self._training_worker:
            self._training_worker.stop()

    def _on_training_finished(self, result: TrainingResult):
        self._cleanup_training_thread()
        self._state_machine.finish_training({"result": result})
        self.training_completed.emit(result)
        self.grid_updated.emit()

    def _on_training_error(self, message: str):
        self._cleanup_training_thread()
        self._state_machine.fail_error({"error": message})
        self.error_occurred.emit(message)

    def _cleanup_training_thread(self):
        if self._training_thread:
            self._training_thread.quit()
            self._training_thread.wait(2000)
            self._training_thread.deleteLater()
        if self._training_worker:
            self._training_worker.deleteLater()
        self._training_thread = None
        self._training_worker = None

    # Path finding

    def find_path(self) -> Optional[PathfindingResult]:
        """Walk the learned table from the start cell."""
        if self._env is None or not self._state_machine.is_trained():
            return None
        if not self._state_machine.start_search():
            return None

        result = self._agent.find_path(self._env, self._start, self._rng)
        self._last_path = result
        if result.found:
            self._state_machine.solve({"result": result})
        else:
            self._state_machine.fail_error({"error": result.error})
            # The table is still usable for another query
            self._state_machine.finish_training()
            self.error_occurred.emit(result.error)

        self.path_found.emit(result)
        self.grid_updated.emit()
        return result

    def max_q_by_cell(self):
        """Maximum learned value per cell, or None before training."""
        if self._agent.qtable is None or self._env is None:
            return None
        return self._agent.qtable.values.max(axis=1).reshape(self._env.num_rows, self._env.num_cols)

    def describe_start(self, precision: int = 1) -> str:
        """Q-table row for the start cell, restricted to its available actions."""
        if self._env is None or self._agent.qtable is None:
            return ""
        key = self._env.location_key(*self._start)
        lines = [f"Start {self._env.format_location(key, True)}"]
        qrow = self._agent.qtable.values[key]
        for loc in range(self._env.num_cells):
            if self._env.rewards[key, loc] >= 0:
                lines.append(f"  -> {self._env.format_location(loc, True)}: "
                             f"reward {self._env.rewards[key, loc]:.0f}, Q {qrow[loc]:.{precision}f}")
        lines.append("")
        lines.append(table(self.max_q_by_cell(), precision=precision))
        return "\n".join(lines)

    def _emit_state(self, context):
        self.state_changed.emit(self._state_machine.current_state)

    def cleanup(self):
        """Stop any running worker before application shutdown."""
        self.stop_training()
        self._cleanup_training_thread()
