"""Terminal Conway's Game of Life with differential rendering."""

__version__ = "0.1.0"

from .core.grid import Dimensions, Grid
from .core.game import GameOfLife, advance, count_live_neighbors, initialize

__all__ = ["Dimensions", "Grid", "GameOfLife", "advance", "count_live_neighbors", "initialize"]
