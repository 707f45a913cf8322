"""
Minefield: an embeddable Minesweeper engine.

Provides the game grid with deferred mine placement, cascade revealing
and listener notification.
"""
import logging

from .cell import CellState, CellView
from .board import Minefield, MinefieldConfig, Phase, RandomSource, create
from .errors import IndexOutOfRange, InvalidConfiguration, MinefieldError
from .listeners import MinefieldListener, Subscription

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CellState",
    "CellView",
    "Minefield",
    "MinefieldConfig",
    "Phase",
    "RandomSource",
    "create",
    "IndexOutOfRange",
    "InvalidConfiguration",
    "MinefieldError",
    "MinefieldListener",
    "Subscription",
]
