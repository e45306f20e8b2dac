"""Mapping between (row, col) tile coordinates and flat location keys.

Coordinates one step outside the grid wrap around to the opposite edge, so
every cell, including those on the boundary, has four neighbours.
"""

from .types import Coord, LocationKey


def wrap(row: int, col: int, num_rows: int, num_cols: int) -> Coord:
    """Wrap a coordinate that is at most one grid length out of range."""
    if row < 0:
        row += num_rows
    elif row >= num_rows:
        row -= num_rows

    if col < 0:
        col += num_cols
    elif col >= num_cols:
        col -= num_cols

    return row, col


def to_key(row: int, col: int, num_rows: int, num_cols: int) -> LocationKey:
    """Convert a (row, col) coordinate into a location key."""
    row, col = wrap(row, col, num_rows, num_cols)
    return row * num_cols + col


def to_coords(key: LocationKey, num_cols: int) -> Coord:
    """Convert a location key back into its (row, col) coordinate."""
    return key // num_cols, key % num_cols
