"""
Board module for the Minefield engine.

Implements the grid with deferred mine placement, cascade revealing,
chording, flagging and the game phase state machine. Every change is
reported to subscribed listeners before the command returns.
"""
import logging
import numbers
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import (
    Any, Iterator, List, MutableSequence, Optional, Protocol, Set, Tuple,
)

import numpy as np

from .cell import Cell, CellView
from .errors import IndexOutOfRange, InvalidConfiguration
from .geometry import is_within_bounds, neighbor_positions
from .listeners import ListenerRegistry, MinefieldListener, Subscription

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


# ============================================================================
# Constants
# ============================================================================

class Phase(Enum):
    """Top-level state of the game."""

    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    WON = auto()
    LOST = auto()


class RandomSource(Protocol):
    """Anything that can shuffle a list in place, e.g. ``random.Random``."""

    def shuffle(self, x: MutableSequence[Any]) -> None:
        ...


@dataclass(frozen=True)
class MinefieldConfig:
    """
    Dimensions and mine count of a Minefield.

    Attributes:
        rows: Number of rows.
        columns: Number of columns.
        mines: Total mines to place.
    """

    rows: int
    columns: int
    mines: int

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        for name in ("rows", "columns", "mines"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidConfiguration(f"{name} must be an integer: {value!r}")
            object.__setattr__(self, name, int(value))
        if self.rows < 1 or self.columns < 1:
            raise InvalidConfiguration("Grid dimensions must be positive")
        if self.mines < 1:
            raise InvalidConfiguration("Number of mines must be positive")
        max_mines = self.rows * self.columns - 1
        if self.mines > max_mines:
            raise InvalidConfiguration(f"Too many mines (max {max_mines})")

    @property
    def cell_count(self) -> int:
        """Total number of cells."""
        return self.rows * self.columns

    @property
    def safe_cell_count(self) -> int:
        """Number of cells without a mine."""
        return self.cell_count - self.mines


# ============================================================================
# Minefield Class
# ============================================================================

@dataclass(eq=False)
class Minefield:
    """
    Minesweeper game grid.

    Manages the grid of cells, mine placement, revealing logic, win/lose
    conditions and listener notification. Not thread-safe: callers must
    serialize commands themselves.
    """

    config: MinefieldConfig
    random_source: Optional[RandomSource] = None
    _grid: List[List[Cell]] = field(default_factory=list, init=False, repr=False)
    _phase: Phase = field(default=Phase.NOT_STARTED, init=False)
    _remaining_safe_cells: int = field(default=0, init=False)
    _mines: Set[Position] = field(default_factory=set, init=False, repr=False)
    _flags: Set[Position] = field(default_factory=set, init=False, repr=False)
    _listeners: ListenerRegistry = field(
        default_factory=ListenerRegistry, init=False, repr=False
    )

    def __post_init__(self) -> None:
        """Initialize the grid after dataclass creation."""
        if self.random_source is None:
            self.random_source = random.Random()
        self._init_grid()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create a fresh grid of hidden cells without mines."""
        self._grid = [
            [Cell(row, col) for col in range(self.config.columns)]
            for row in range(self.config.rows)
        ]
        self._mines = set()
        self._flags = set()
        self._remaining_safe_cells = self.config.safe_cell_count

    def _place_mines(self, first: Cell) -> None:
        """
        Place mines uniformly at random, never on the first revealed cell.

        Only positions are handed to the random source; the cells stay
        inside the grid.

        Args:
            first: The cell whose reveal triggered placement.
        """
        candidates = [
            position for position in self.positions() if position != first.position
        ]
        self.random_source.shuffle(candidates)
        for row, col in candidates[:self.config.mines]:
            mine = self._grid[row][col]
            mine.plant_mine()
            self._mines.add(mine.position)
            for neighbor in self._neighbors(mine):
                neighbor.add_adjacent_mine()
        logger.debug(
            "Placed %d mines on %dx%d grid, first reveal at %s",
            self.config.mines, self.config.rows, self.config.columns,
            first.position,
        )

    # ========================================================================
    # Cell Access (Low-level)
    # ========================================================================

    def _cell(self, row: int, column: int) -> Cell:
        """Get the internal cell at a position, checking bounds."""
        if not is_within_bounds(row, column, self.config.rows, self.config.columns):
            raise IndexOutOfRange(row, column, self.config.rows, self.config.columns)
        return self._grid[row][column]

    def _neighbors(self, cell: Cell) -> List[Cell]:
        """Get the cells surrounding a cell."""
        return [
            self._grid[row][col]
            for row, col in neighbor_positions(
                cell.row, cell.column, self.config.rows, self.config.columns
            )
        ]

    def _iter_cells(self) -> Iterator[Cell]:
        """Iterate over every cell in row-major order."""
        for row in self._grid:
            yield from row

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, row: int, column: int) -> bool:
        """
        Reveal a cell at the given position.

        On the first reveal, places mines avoiding this cell. An empty cell
        (0 adjacent mines) cascades to its neighbours. Revealing a mine
        loses the game.

        Args:
            row: Row index to reveal.
            column: Column index to reveal.

        Returns:
            True if the reveal took effect, False if it was a no-op.

        Raises:
            IndexOutOfRange: If the position is outside the grid.
        """
        cell = self._cell(row, column)
        if self.is_game_over or not cell.is_hidden:
            return False

        starting = self._phase == Phase.NOT_STARTED
        if starting:
            self._place_mines(cell)
            self._enter_phase(Phase.IN_PROGRESS)

        if cell.is_mine:
            self._lose(cell)
            changed = None
        else:
            changed = self._reveal_safe(cell)

        if starting:
            self._listeners.phase_changed(Phase.IN_PROGRESS)
        if changed is None:
            self._listeners.board_changed()
        else:
            self._listeners.cell_changed(changed)
        if self.is_game_over:
            self._listeners.phase_changed(self._phase)
        return True

    def _reveal_safe(self, cell: Cell) -> Optional[CellView]:
        """
        Cascade from a safe cell and end the game if nothing is left.

        Returns:
            View of the cell when it was the only one revealed, None when
            the whole board needs redrawing.
        """
        exposed = self._cascade(cell)
        self._remaining_safe_cells -= exposed
        logger.debug(
            "Revealed %d cell(s) from %s, %d safe cells left",
            exposed, cell.position, self._remaining_safe_cells,
        )

        if self._remaining_safe_cells == 0:
            self._win()
            return None
        if exposed == 1:
            return cell.view()
        return None

    def _cascade(self, origin: Cell) -> int:
        """
        Flood-fill reveal starting at a safe cell.

        Uses an explicit stack so large empty regions do not hit the
        recursion limit.

        Returns:
            Number of cells newly revealed.
        """
        exposed = 0
        pending = [origin]
        while pending:
            cell = pending.pop()
            if not cell.expose():
                continue
            self._flags.discard(cell.position)
            exposed += 1
            if cell.adjacent_mines == 0:
                pending.extend(
                    neighbor for neighbor in self._neighbors(cell)
                    if not neighbor.is_revealed
                )
        return exposed

    def _lose(self, hit: Cell) -> None:
        """Show every mine and every wrong flag, then end the game."""
        hit.explode()
        for row, col in self._mines:
            mine = self._grid[row][col]
            if mine is not hit:
                mine.show_mine()
        for row, col in self._flags:
            cell = self._grid[row][col]
            if not cell.is_mine:
                cell.misflag()
        self._flags = set()
        self._enter_phase(Phase.LOST)

    def _win(self) -> None:
        """Flag every remaining mine and end the game."""
        for row, col in self._mines:
            self._grid[row][col].auto_flag()
        self._flags = set(self._mines)
        self._enter_phase(Phase.WON)

    def toggle_flag(self, row: int, column: int) -> bool:
        """
        Toggle flag on a cell.

        Args:
            row: Row index.
            column: Column index.

        Returns:
            True if flag was toggled, False otherwise.

        Raises:
            IndexOutOfRange: If the position is outside the grid.
        """
        cell = self._cell(row, column)
        if self.is_game_over:
            return False
        if not cell.toggle_flag():
            return False

        if cell.is_flagged:
            self._flags.add(cell.position)
        else:
            self._flags.discard(cell.position)
        self._listeners.cell_changed(cell.view())
        return True

    def reveal_nearby(self, row: int, column: int) -> bool:
        """
        Chord action: reveal all hidden neighbours if the flag count matches.

        Each neighbour goes through the full ``reveal`` contract, so a wrong
        flag can still lose the game.

        Args:
            row: Row index of a revealed cell.
            column: Column index of a revealed cell.

        Returns:
            True if at least one neighbour was revealed, False otherwise.

        Raises:
            IndexOutOfRange: If the position is outside the grid.
        """
        cell = self._cell(row, column)
        if self._phase != Phase.IN_PROGRESS or not cell.is_revealed:
            return False

        neighbors = self._neighbors(cell)
        flag_count = sum(1 for neighbor in neighbors if neighbor.is_flagged)
        if flag_count != cell.adjacent_mines:
            return False

        revealed_any = False
        for neighbor in neighbors:
            if neighbor.is_hidden:
                revealed_any = self.reveal(neighbor.row, neighbor.column) or revealed_any
        return revealed_any

    def reset(self) -> None:
        """Discard all cells and start a new game with the same settings."""
        self._init_grid()
        restarted = self._enter_phase(Phase.NOT_STARTED)
        self._listeners.board_changed()
        if restarted:
            self._listeners.phase_changed(Phase.NOT_STARTED)

    def _enter_phase(self, phase: Phase) -> bool:
        """Move to a phase without notifying; True if the phase changed."""
        if self._phase == phase:
            return False
        logger.debug("Phase changed from %s to %s", self._phase.name, phase.name)
        self._phase = phase
        return True

    # ========================================================================
    # Observation
    # ========================================================================

    def subscribe(self, listener: MinefieldListener) -> Subscription:
        """
        Register a listener.

        The listener immediately receives ``on_board_changed`` so it can
        draw the current board.

        Returns:
            Handle that removes the listener when called.
        """
        subscription = self._listeners.add(listener)
        listener.on_board_changed()
        return subscription

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def row_count(self) -> int:
        """Get number of rows."""
        return self.config.rows

    @property
    def column_count(self) -> int:
        """Get number of columns."""
        return self.config.columns

    @property
    def mine_count(self) -> int:
        """Get number of mines."""
        return self.config.mines

    @property
    def phase(self) -> Phase:
        """Get current game phase."""
        return self._phase

    @property
    def is_game_over(self) -> bool:
        """Check if the game was won or lost."""
        return self._phase in (Phase.WON, Phase.LOST)

    @property
    def remaining_safe_cells(self) -> int:
        """Number of non-mine cells still to be revealed."""
        return self._remaining_safe_cells

    @property
    def flags_placed(self) -> int:
        """Number of cells currently flagged."""
        return len(self._flags)

    @property
    def mines_remaining(self) -> int:
        """Mine count minus flags placed; negative when over-flagged."""
        return self.config.mines - len(self._flags)

    def cell_at(self, row: int, column: int) -> CellView:
        """
        Get a read-only snapshot of the cell at a position.

        Raises:
            IndexOutOfRange: If the position is outside the grid.
        """
        return self._cell(row, column).view()

    def is_revealable(self, row: int, column: int) -> bool:
        """Check if ``reveal`` at this position would take effect."""
        return not self.is_game_over and self._cell(row, column).is_hidden

    def positions(self) -> Iterator[Position]:
        """Iterate over every (row, column) position in row-major order."""
        for row in range(self.config.rows):
            for col in range(self.config.columns):
                yield row, col

    def to_array(self) -> np.ndarray:
        """
        Get the visible board as a numpy array.

        Returns:
            2D int8 array where:
                -1 = hidden
                -2 = flagged
                -3 = misflagged (after a loss)
                0-8 = revealed with adjacent count
                9 = revealed mine (after a loss)
                10 = exploded mine
        """
        board = np.zeros((self.config.rows, self.config.columns), dtype=np.int8)
        for cell in self._iter_cells():
            board[cell.row, cell.column] = cell.to_observation()
        return board

    def render(self) -> str:
        """Render the visible board as text, one line per row."""
        symbols = {-1: ".", -2: "F", -3: "X", 0: " ", 9: "*", 10: "#"}
        return "\n".join(
            " ".join(symbols.get(int(value), str(value)) for value in row)
            for row in self.to_array()
        )

    def __str__(self) -> str:
        """Text rendering of the visible board."""
        return self.render()


# ============================================================================
# Factory
# ============================================================================

def create(
    rows: int,
    columns: int,
    mine_count: int,
    random_source: Optional[RandomSource] = None,
) -> Minefield:
    """
    Create a new Minefield.

    Args:
        rows: Number of rows (positive).
        columns: Number of columns (positive).
        mine_count: Number of mines, at least 1 and less than rows * columns.
        random_source: Object with a ``shuffle`` method used to place mines.
            Defaults to a fresh ``random.Random``.

    Raises:
        InvalidConfiguration: If the arguments describe an unplayable grid.
    """
    return Minefield(MinefieldConfig(rows, columns, mine_count), random_source)
