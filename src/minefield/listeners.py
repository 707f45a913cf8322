"""
Observer plumbing for the Minefield engine.

Listeners are notified synchronously, in registration order, from inside
the grid operation that caused the change.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

from .cell import CellView

if TYPE_CHECKING:
    from .board import Phase


# ============================================================================
# Listener Interface
# ============================================================================

class MinefieldListener(ABC):
    """
    Abstract base class for Minefield observers.

    A presentation layer implements these three callbacks to keep its view
    of the board in sync with the engine.
    """

    @abstractmethod
    def on_cell_changed(self, cell: CellView) -> None:
        """
        Called when a single cell changed.

        Args:
            cell: Snapshot of the cell after the change.
        """
        pass

    @abstractmethod
    def on_board_changed(self) -> None:
        """
        Called when many cells may have changed at once.

        This happens on subscription, on reset, after a cascade that
        revealed more than one cell and when the game ends.
        """
        pass

    @abstractmethod
    def on_phase_changed(self, phase: "Phase") -> None:
        """
        Called after the game phase changed.

        Args:
            phase: The new phase.
        """
        pass


# ============================================================================
# Subscription Handle
# ============================================================================

class Subscription:
    """
    Handle returned by ``subscribe``.

    Calling the handle (or ``cancel``) removes the listener. Repeated calls
    are harmless.
    """

    def __init__(
        self, registry: "ListenerRegistry", listener: MinefieldListener
    ) -> None:
        self._registry = registry
        self._listener = listener
        self._active = True

    @property
    def active(self) -> bool:
        """Check if the listener is still registered."""
        return self._active

    def cancel(self) -> None:
        """Remove the listener."""
        if self._active:
            self._active = False
            self._registry.remove(self._listener)

    def __call__(self) -> None:
        self.cancel()


# ============================================================================
# Registry
# ============================================================================

class ListenerRegistry:
    """
    Ordered collection of listeners with snapshot dispatch.

    Each dispatch iterates over a copy of the listener list taken when the
    dispatch starts, so listeners may subscribe or unsubscribe while being
    notified. Newly added listeners are first called by the next dispatch.
    Exceptions raised by a listener propagate to the caller.
    """

    def __init__(self) -> None:
        self._listeners: List[MinefieldListener] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def __contains__(self, listener: object) -> bool:
        return listener in self._listeners

    def add(self, listener: MinefieldListener) -> Subscription:
        """Register a listener and return its subscription handle."""
        self._listeners.append(listener)
        return Subscription(self, listener)

    def remove(self, listener: MinefieldListener) -> bool:
        """
        Remove a listener.

        Returns:
            True if it was registered, False otherwise.
        """
        if listener in self._listeners:
            self._listeners.remove(listener)
            return True
        return False

    def cell_changed(self, cell: CellView) -> None:
        """Notify every listener of a single cell change."""
        for listener in tuple(self._listeners):
            listener.on_cell_changed(cell)

    def board_changed(self) -> None:
        """Notify every listener that the board needs redrawing."""
        for listener in tuple(self._listeners):
            listener.on_board_changed()

    def phase_changed(self, phase: "Phase") -> None:
        """Notify every listener of a phase change."""
        for listener in tuple(self._listeners):
            listener.on_phase_changed(phase)
