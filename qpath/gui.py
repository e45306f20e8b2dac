"""Desktop entry point for the Q-Learning shortest path visualizer."""

import sys
from PySide6.QtWidgets import QApplication


def main():
    """Main entry point for the GUI application."""
    app = QApplication(sys.argv)
    app.setApplicationName("Q-Learning Shortest Path")
    app.setApplicationVersion("1.0.0")

    # Import UI components (after QApplication is created)
    from .ui.main_window import MainWindow
    from .app.controller import QLearnController

    controller = QLearnController()
    try:
        window = MainWindow(controller)
        window.show()
        return app.exec()
    finally:
        controller.cleanup()


if __name__ == "__main__":
    sys.exit(main())
