"""
Neighbour geometry for a rectangular grid.
"""
from typing import Iterator, Tuple


def is_within_bounds(row: int, column: int, rows: int, columns: int) -> bool:
    """Check if position is within grid bounds."""
    return 0 <= row < rows and 0 <= column < columns


def neighbor_positions(
    row: int, column: int, rows: int, columns: int
) -> Iterator[Tuple[int, int]]:
    """
    Yield valid neighbouring cell positions.

    Args:
        row: Row index of center cell.
        column: Column index of center cell.
        rows: Number of rows in the grid.
        columns: Number of columns in the grid.

    Yields:
        (row, column) tuples for the up to 8 surrounding cells, in
        row-major order. The center cell is never included.
    """
    for delta_row in (-1, 0, 1):
        for delta_col in (-1, 0, 1):
            if delta_row == 0 and delta_col == 0:
                continue
            new_row = row + delta_row
            new_col = column + delta_col
            if is_within_bounds(new_row, new_col, rows, columns):
                yield new_row, new_col
