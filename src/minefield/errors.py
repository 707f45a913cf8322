"""
Exceptions raised by the Minefield engine.

Only caller programming errors are raised. Commands issued in the wrong
game state (revealing a flagged cell, flagging after the game ended) are
silent no-ops instead.
"""


class MinefieldError(Exception):
    """Base class for all engine errors."""


class InvalidConfiguration(MinefieldError, ValueError):
    """Board dimensions or mine count are not usable."""


class IndexOutOfRange(MinefieldError, IndexError):
    """A coordinate lies outside the grid."""

    def __init__(self, row: int, column: int, rows: int, columns: int) -> None:
        super().__init__(
            f"Position ({row}, {column}) is outside a {rows}x{columns} grid"
        )
        self.row = row
        self.column = column
