"""Conway's Game of Life engine."""

from typing import Optional
import numpy as np

from .grid import Dimensions, Grid


DEFAULT_LIVE_PROBABILITY = 0.2


def initialize(
    dimensions: Dimensions,
    live_probability: float = DEFAULT_LIVE_PROBABILITY,
    border: bool = False,
    rng: Optional[np.random.Generator] = None,
) -> Grid:
    """Create a randomly seeded grid.

    Args:
        dimensions: Grid size as (rows, cols)
        live_probability: Chance each cell starts alive
        border: Whether the outermost rows and columns form a fixed live wall
        rng: Random generator, for reproducible seeds

    Returns:
        The new grid
    """
    grid = Grid.from_dimensions(dimensions, walled=border)
    grid.randomize(live_probability, rng=rng)
    return grid


def count_live_neighbors(grid: Grid, row: int, col: int) -> int:
    """Count live cells in the Moore neighborhood of (row, col).

    Positions past the grid edge contribute nothing; there is no wraparound.
    """
    return grid.get_neighbors(row, col)


def advance(grid: Grid) -> Grid:
    """Compute the next generation under the B3/S23 rule.

    The input grid is left untouched; every cell of the result depends only
    on the input generation.

    Returns:
        A new grid with the same dimensions
    """
    neighbor_counts = grid.count_all_neighbors()
    cells = grid.cells > 0

    # Birth on exactly 3, survival on 2 or 3
    born = ~cells & (neighbor_counts == 3)
    survives = cells & ((neighbor_counts == 2) | (neighbor_counts == 3))

    next_grid = Grid(grid.rows, grid.cols)
    next_grid.cells[born | survives] = 1
    if grid.walled:
        next_grid.walled = True
        next_grid.build_wall()
    return next_grid


class GameOfLife:
    """Conway's Game of Life simulation engine.

    Implements the classic rules:
    - Live cell with 2-3 neighbors survives
    - Dead cell with exactly 3 neighbors becomes alive
    - All other cells die or stay dead

    The engine owns the current generation and the one before it. Each step
    replaces the current grid with a freshly built one, so a grid handed out
    earlier is never modified underneath its holder.
    """

    def __init__(self, grid: Grid) -> None:
        """Initialize the game with a grid.

        Args:
            grid: The starting generation
        """
        self._grid = grid
        self._previous_grid: Optional[Grid] = None
        self._generation = 0

    @classmethod
    def random(
        cls,
        dimensions: Dimensions,
        live_probability: float = DEFAULT_LIVE_PROBABILITY,
        border: bool = False,
        rng: Optional[np.random.Generator] = None,
    ) -> "GameOfLife":
        """Start a game from a randomly seeded grid."""
        return cls(initialize(dimensions, live_probability, border=border, rng=rng))

    @property
    def grid(self) -> Grid:
        """Current generation."""
        return self._grid

    @property
    def previous_grid(self) -> Optional[Grid]:
        """Generation before the current one (None before the first step)."""
        return self._previous_grid

    @property
    def dimensions(self) -> Dimensions:
        return self._grid.dimensions

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self._grid.population

    def step(self) -> Grid:
        """Advance the simulation by one generation.

        Returns:
            The new current grid
        """
        next_grid = advance(self._grid)
        self._previous_grid, self._grid = self._grid, next_grid
        self._generation += 1
        return next_grid
