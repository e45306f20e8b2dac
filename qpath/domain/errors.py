"""Exception types raised by the Q-Learning pathfinder."""

from typing import List, Optional


class QPathError(Exception):
    """Base class for all pathfinder errors."""


class ConfigurationError(QPathError, ValueError):
    """Invalid grid dimensions or configuration values."""


class EmptySelectionError(QPathError):
    """No candidate actions to sample from (isolated or fully walled cell)."""


class PathNotFoundError(QPathError):
    """The goal could not be reached from the start location."""

    def __init__(self, message: str, path: Optional[List[int]] = None):
        super().__init__(message)
        # Path walked so far, kept for diagnostics
        self.path: List[int] = list(path) if path else []
