"""Main window for the Q-Learning shortest path visualizer."""

from PySide6.QtWidgets import (
    QMainWindow, QVBoxLayout, QHBoxLayout, QWidget, QPushButton,
    QLabel, QCheckBox, QSpinBox, QStatusBar, QGroupBox, QTextEdit, QProgressBar
)
from PySide6.QtGui import QCloseEvent, QFont

from ..app.controller import QLearnController
from ..app.fsm import RLState
from ..domain.types import PathfindingResult, TrainingResult
from .grid_view import GridView


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, controller: QLearnController):
        super().__init__()
        self.controller = controller

        self.setWindowTitle("Q-Learning Shortest Path")
        self.setMinimumSize(1000, 700)

        self._create_ui()
        self._setup_connections()
        self._update_button_states()

    def _create_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)

        main_layout.addWidget(self._create_controls())

        content_layout = QHBoxLayout()
        self.grid_view = GridView(self.controller)
        content_layout.addWidget(self.grid_view, 3)

        self.details = QTextEdit()
        self.details.setReadOnly(True)
        self.details.setFont(QFont("Courier", 9))
        content_layout.addWidget(self.details, 2)
        main_layout.addLayout(content_layout, 1)

        self.progress_bar = QProgressBar()
        main_layout.addWidget(self.progress_bar)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage(self.controller.state_description())

    def _create_controls(self) -> QGroupBox:
        group = QGroupBox("Q-Learning")
        layout = QHBoxLayout(group)
        config = self.controller.config

        self.rows_spin = self._spin_box(layout, "Rows", 1, 40, config.num_rows)
        self.cols_spin = self._spin_box(layout, "Cols", 1, 40, config.num_cols)
        self.seed_spin = self._spin_box(layout, "Seed", 0, 1_000_000, config.seed or 0)
        self.rounds_spin = self._spin_box(layout, "Rounds", 1, 5_000_000, config.exploration_rounds)
        self.rounds_spin.setSingleStep(10_000)

        self.new_btn = QPushButton("New Grid")
        self.train_btn = QPushButton("Train")
        self.stop_btn = QPushButton("Stop")
        self.path_btn = QPushButton("Find Path")
        for btn in [self.new_btn, self.train_btn, self.stop_btn, self.path_btn]:
            layout.addWidget(btn)

        self.values_check = QCheckBox("Show values")
        self.values_check.setChecked(True)
        layout.addWidget(self.values_check)
        layout.addStretch()
        return group

    @staticmethod
    def _spin_box(layout: QHBoxLayout, label: str, low: int, high: int, value: int) -> QSpinBox:
        layout.addWidget(QLabel(label))
        spin = QSpinBox()
        spin.setRange(low, high)
        spin.setValue(value)
        layout.addWidget(spin)
        return spin

    def _setup_connections(self):
        self.new_btn.clicked.connect(self._on_new_grid)
        self.train_btn.clicked.connect(self._on_train)
        self.stop_btn.clicked.connect(self.controller.stop_training)
        self.path_btn.clicked.connect(self.controller.find_path)
        self.values_check.toggled.connect(self.grid_view.set_show_q_values)

        self.controller.state_changed.connect(self._on_state_changed)
        self.controller.training_progress.connect(self._on_training_progress)
        self.controller.training_completed.connect(self._on_training_completed)
        self.controller.path_found.connect(self._on_path_found)
        self.controller.error_occurred.connect(self._on_error)
        self.controller.grid_updated.connect(self._update_details)

    def _on_new_grid(self):
        self.controller.new_grid(self.rows_spin.value(), self.cols_spin.value(), self.seed_spin.value())
        self.progress_bar.reset()
        self.grid_view.fit_in_view()

    def _on_train(self):
        self.controller.set_exploration_rounds(self.rounds_spin.value())
        self.progress_bar.setRange(0, self.rounds_spin.value())
        self.progress_bar.setValue(0)
        self.controller.start_training()

    def _on_state_changed(self, state: RLState):
        self.status_bar.showMessage(self.controller.state_description())
        self._update_button_states()

    def _on_training_progress(self, done: int, total: int):
        self.progress_bar.setRange(0, total)
        self.progress_bar.setValue(done)

    def _on_training_completed(self, result: TrainingResult):
        self.status_bar.showMessage(
            f"Explored {result.rounds} rounds ({result.skipped_rounds} skipped, {result.skip_rate:.1%}) "
            f"in {result.elapsed_time:.2f}s"
        )

    def _on_path_found(self, result: PathfindingResult):
        if result.found:
            self.status_bar.showMessage(
                f"Path found: {result.steps_taken} steps in {result.elapsed_time * 1000:.2f}ms"
            )

    def _on_error(self, message: str):
        self.status_bar.showMessage(f"Error: {message}")
        self._update_button_states()

    def _update_details(self):
        self.details.setPlainText(self.controller.describe_start())

    def _update_button_states(self):
        training = self.controller.state == RLState.TRAINING
        trained = self.controller.state in {RLState.TRAINED, RLState.SOLVED}
        self.new_btn.setEnabled(not training)
        self.train_btn.setEnabled(not training and self.controller.state != RLState.ERROR)
        self.stop_btn.setEnabled(training)
        self.path_btn.setEnabled(trained)

    def closeEvent(self, event: QCloseEvent):
        self.controller.cleanup()
        super().closeEvent(event)
