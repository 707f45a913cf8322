"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path
from typing import Any, Callable, Iterable, List, MutableSequence, Optional, Set, Tuple

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import CellView, Minefield, MinefieldConfig, MinefieldListener, Phase, create
from minefield.cell import Cell


# ============================================================================
# Random Sources
# ============================================================================

class ReversingRandom:
    """Shuffle that reverses the candidates, so the last ones become mines."""

    def shuffle(self, x: MutableSequence[Any]) -> None:
        x.reverse()


class FixedMines:
    """Shuffle that moves the given positions to the front."""

    def __init__(self, mines: Iterable[Tuple[int, int]]) -> None:
        self.mines = set(mines)

    def shuffle(self, x: MutableSequence[Any]) -> None:
        x.sort(key=lambda position: position not in self.mines)


# ============================================================================
# Listener
# ============================================================================

class RecordingListener(MinefieldListener):
    """Listener that records every notification it receives."""

    def __init__(self) -> None:
        self.events: List[tuple] = []

    def on_cell_changed(self, cell: CellView) -> None:
        self.events.append(("cell", cell))

    def on_board_changed(self) -> None:
        self.events.append(("board",))

    def on_phase_changed(self, phase: Phase) -> None:
        self.events.append(("phase", phase))

    def kinds(self) -> List[str]:
        return [event[0] for event in self.events]

    def clear(self) -> None:
        self.events.clear()


# ============================================================================
# Minefield Fixtures
# ============================================================================

@pytest.fixture
def default_field() -> Minefield:
    """Create a seeded 9x9 field with 10 mines."""
    return create(9, 9, 10, random.Random(1234))


@pytest.fixture
def two_mine_field() -> Minefield:
    """
    Create a 4x4 field whose mines land on (0, 0) and (0, 2).

    Adjacent counts once placed:
        *  2  *  1
        1  2  1  1
        0  0  0  0
        0  0  0  0
    """
    return create(4, 4, 2, FixedMines([(0, 0), (0, 2)]))


@pytest.fixture
def strip_field() -> Minefield:
    """Create a 1x5 field whose single mine lands on the last column."""
    return create(1, 5, 1, ReversingRandom())


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> MinefieldConfig:
    """Create a valid field configuration."""
    return MinefieldConfig(9, 9, 10)


# ============================================================================
# Factories
# ============================================================================

@pytest.fixture
def make_field() -> Callable[..., Minefield]:
    """
    Factory for fields with a known mine layout.

    ``make_field(rows, columns, mines=[(r, c), ...])`` places exactly the
    listed mines on the first reveal (as long as the first reveal is not
    one of them). Without ``mines``, ``count`` mines are placed by a
    ``random.Random`` seeded with ``seed``.
    """
    def factory(
        rows: int,
        columns: int,
        mines: Optional[Iterable[Tuple[int, int]]] = None,
        count: int = 1,
        seed: int = 0,
    ) -> Minefield:
        if mines is None:
            return create(rows, columns, count, random.Random(seed))
        mines = list(mines)
        return create(rows, columns, len(mines), FixedMines(mines))

    return factory


@pytest.fixture
def make_listener() -> Callable[[], RecordingListener]:
    return RecordingListener


# ============================================================================
# Hidden Layout Access
# ============================================================================

def _hidden_cell(field: Minefield, row: int, col: int) -> Cell:
    """The only place tests read the grid's private cells."""
    return field._grid[row][col]


@pytest.fixture
def mine_positions() -> Callable[[Minefield], Set[Tuple[int, int]]]:
    """Positions currently holding a mine."""
    def positions(field: Minefield) -> Set[Tuple[int, int]]:
        return {
            (row, col) for row, col in field.positions()
            if _hidden_cell(field, row, col).is_mine
        }

    return positions


@pytest.fixture
def adjacent_count() -> Callable[[Minefield, int, int], int]:
    """Adjacent mine count of a cell, whether revealed or not."""
    def count(field: Minefield, row: int, col: int) -> int:
        return _hidden_cell(field, row, col).adjacent_mines

    return count
