"""
Cell module for the Minefield engine.

Represents individual cells on the grid with their visible state
(hidden/flagged/revealed and the end-of-game mine states) and their
hidden content (mine flag and adjacent mine count).
"""
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional, Tuple


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visible states of a cell."""

    HIDDEN = auto()
    FLAGGED = auto()
    REVEALED = auto()
    EXPLODED_MINE = auto()
    REVEALED_MINE = auto()
    MISFLAGGED_MINE = auto()


# ============================================================================
# Read-only View
# ============================================================================

@dataclass(frozen=True)
class CellView:
    """
    Snapshot of a cell as seen from outside the grid.

    Attributes:
        row: Row index of the cell.
        column: Column index of the cell.
        state: Visible state at the time the snapshot was taken.
        adjacent_mines: Neighbouring mine count, or None unless revealed.
    """

    row: int
    column: int
    state: CellState
    adjacent_mines: Optional[int] = None

    @property
    def position(self) -> Tuple[int, int]:
        """Get (row, column) of the cell."""
        return self.row, self.column

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    @property
    def is_revealed(self) -> bool:
        """Check if cell was revealed as a safe cell."""
        return self.state == CellState.REVEALED


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the grid.

    Cells are plain records owned by a Minefield. Every method below is a
    guarded state transition called by the grid; a cell never notifies
    anyone and knows nothing about its neighbours.

    Attributes:
        row: Row index (fixed).
        column: Column index (fixed).
        is_mine: Whether this cell contains a mine.
        adjacent_mines: Count of mines in neighbouring cells (0-8).
        state: Current visible state.
    """

    row: int
    column: int
    is_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN

    @property
    def position(self) -> Tuple[int, int]:
        """Get (row, column) of the cell."""
        return self.row, self.column

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    @property
    def is_revealed(self) -> bool:
        """Check if cell was revealed as a safe cell."""
        return self.state == CellState.REVEALED

    # ========================================================================
    # Placement
    # ========================================================================

    def plant_mine(self) -> None:
        """Put a mine in this cell."""
        self.is_mine = True

    def add_adjacent_mine(self) -> None:
        """Count one more neighbouring mine."""
        if self.adjacent_mines >= 8:
            raise ValueError(f"Cell {self.position} already has 8 mine neighbours")
        self.adjacent_mines += 1

    # ========================================================================
    # Transitions
    # ========================================================================

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if the cell is no longer
            hidden or flagged.
        """
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
            return True
        if self.state == CellState.FLAGGED:
            self.state = CellState.HIDDEN
            return True
        return False

    def expose(self) -> bool:
        """
        Reveal this cell as a safe cell.

        A flagged cell may be exposed; the cascade only reaches cells that
        cannot be mines, so such a flag was wrong.

        Returns:
            True if the cell changed, False if it was already revealed.
        """
        if self.is_mine:
            raise ValueError(f"Cell {self.position} is a mine and cannot be exposed")
        if self.state not in (CellState.HIDDEN, CellState.FLAGGED):
            return False
        self.state = CellState.REVEALED
        return True

    def explode(self) -> None:
        """Mark the mine that ended the game."""
        self.state = CellState.EXPLODED_MINE

    def show_mine(self) -> None:
        """Show an untouched mine after a loss."""
        self.state = CellState.REVEALED_MINE

    def misflag(self) -> None:
        """Mark a flag that was placed on a safe cell."""
        self.state = CellState.MISFLAGGED_MINE

    def auto_flag(self) -> None:
        """Flag a mine once the game is won."""
        self.state = CellState.FLAGGED

    # ========================================================================
    # Views
    # ========================================================================

    def view(self) -> CellView:
        """Snapshot of this cell, hiding the mine count until revealed."""
        count = self.adjacent_mines if self.is_revealed else None
        return CellView(self.row, self.column, self.state, count)

    def to_observation(self) -> int:
        """
        Convert cell to a numeric board value.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            -3: Flag on a safe cell, shown after a loss
            0-8: Revealed cell with adjacent mine count
            9: Mine shown after a loss
            10: Mine that was hit
        """
        if self.state == CellState.HIDDEN:
            return -1
        if self.state == CellState.FLAGGED:
            return -2
        if self.state == CellState.MISFLAGGED_MINE:
            return -3
        if self.state == CellState.REVEALED_MINE:
            return 9
        if self.state == CellState.EXPLODED_MINE:
            return 10
        return self.adjacent_mines
