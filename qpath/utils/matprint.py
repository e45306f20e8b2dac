"""Plain-text table rendering for tile grids, reward matrices and Q-tables."""

from dataclasses import dataclass, replace
from typing import List, Optional

import numpy as np


@dataclass
class TableConfig:
    """Configuration for matrix table printing."""
    pad: int = 0  # 0 = fit the widest cell
    separator: str = " "
    precision: int = 2
    row_header: bool = True
    col_header: bool = True


def digit_count(n: int) -> int:
    """Number of decimal digits in n, ignoring the sign."""
    return len(str(abs(int(n))))


def _max_width(matrix: np.ndarray, precision: int, minimum: int) -> int:
    """Width of the widest formatted cell."""
    widest = minimum
    for value in matrix.flat:
        widest = max(widest, len(f"{value:.{precision}f}"))
    return widest


def _header(cols: int, prepad: int, pad: int, separator: str) -> List[str]:
    """Column index line and the divider below it."""
    labels = [str(j).rjust(pad) for j in range(cols)]
    numbers = " " * prepad + separator.join(labels)
    divider = "-" * (sum(len(label) for label in labels) + len(separator) * (cols - 1) + prepad)
    return [numbers, divider]


def table(matrix, config: Optional[TableConfig] = None, **overrides) -> str:
    """
    Render a matrix as a text table.

    Args:
        matrix: 2-D array-like of numbers
        config: Base configuration (defaults used if None)
        **overrides: TableConfig fields to override for this call

    Returns:
        The table, one line per matrix row, ending with a newline
    """
    cfg = replace(config or TableConfig(), **overrides)
    m = np.atleast_2d(np.asarray(matrix, dtype=float))
    rows, cols = m.shape

    header_width = digit_count(cols - 1) if cfg.col_header else 0
    pad = cfg.pad or _max_width(m, cfg.precision, header_width)

    lines = [
        cfg.separator.join(f"{value:{pad}.{cfg.precision}f}" for value in m[i])
        for i in range(rows)
    ]

    prepad = 0
    if cfg.row_header:
        prefixes = [str(i).rjust(header_width) + " |" for i in range(rows)]
        prepad = len(prefixes[0]) if prefixes else 0
        lines = [prefix + line for prefix, line in zip(prefixes, lines)]

    if cfg.col_header:
        lines = _header(cols, prepad, pad, cfg.separator) + lines

    return "\n".join(lines) + "\n"
