"""Core cellular automata logic."""

from .grid import Dimensions, Grid
from .game import GameOfLife, advance, count_live_neighbors, initialize

__all__ = ["Dimensions", "Grid", "GameOfLife", "advance", "count_live_neighbors", "initialize"]
