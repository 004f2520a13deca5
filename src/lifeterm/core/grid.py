"""Grid data structure for the terminal Game of Life."""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple
import numpy as np
import torch
import torch.nn.functional as F


# Moore neighborhood kernel shaped (out_channels, in_channels, kH, kW) for conv2d
_NEIGHBOR_KERNEL = torch.tensor([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=torch.float32).unsqueeze(0).unsqueeze(0)


@dataclass(frozen=True)
class Dimensions:
    """Grid size as (rows, cols), fixed for the lifetime of a run."""

    rows: int
    cols: int

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.rows}x{self.cols}")

    def __iter__(self) -> Iterator[int]:
        return iter((self.rows, self.cols))


class Grid:
    """A bounded 2D grid of live/dead cells indexed by (row, col).

    Cells are stored row-major in a numpy array of shape (rows, cols).
    There is no wraparound: anything past the edge is simply absent.
    A walled grid keeps its outermost rows and columns alive.
    """

    def __init__(self, rows: int, cols: int, walled: bool = False) -> None:
        """Initialize an all-dead grid.

        Args:
            rows: Number of rows
            cols: Number of columns
            walled: Whether the outer ring of cells is a fixed live wall
        """
        self.dimensions = Dimensions(rows, cols)
        self.walled = walled
        self._cells = np.zeros((rows, cols), dtype=np.int8)
        if walled:
            self.build_wall()

    @classmethod
    def from_dimensions(cls, dimensions: Dimensions, walled: bool = False) -> "Grid":
        return cls(dimensions.rows, dimensions.cols, walled=walled)

    @property
    def rows(self) -> int:
        return self.dimensions.rows

    @property
    def cols(self) -> int:
        return self.dimensions.cols

    @property
    def cells(self) -> np.ndarray:
        """Get the underlying cell array."""
        return self._cells

    @property
    def shape(self) -> Tuple[int, int]:
        """Get grid dimensions as (rows, cols)."""
        return (self.rows, self.cols)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get_cell(self, row: int, col: int) -> bool:
        """Get the state of a cell.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not self.in_bounds(row, col):
            raise IndexError(f"Coordinates ({row}, {col}) out of bounds")
        return bool(self._cells[row, col])

    def set_cell(self, row: int, col: int, alive: bool) -> None:
        """Set the state of a cell.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not self.in_bounds(row, col):
            raise IndexError(f"Coordinates ({row}, {col}) out of bounds")
        self._cells[row, col] = 1 if alive else 0

    def clear(self) -> None:
        """Kill every cell. The wall, if any, is rebuilt."""
        self._cells.fill(0)
        if self.walled:
            self.build_wall()

    def randomize(self, probability: float = 0.2, rng: Optional[np.random.Generator] = None) -> None:
        """Randomly populate the grid.

        Each cell is independently alive with the given probability. Values at
        or below 0.0 leave every cell dead and values at or above 1.0 make every
        cell alive.

        Args:
            probability: Chance each cell will be alive
            rng: Random generator to draw from (a fresh default one if omitted)
        """
        if rng is None:
            rng = np.random.default_rng()
        mask = rng.random((self.rows, self.cols)) < probability
        self._cells[mask] = 1
        self._cells[~mask] = 0
        if self.walled:
            self.build_wall()

    def build_wall(self) -> None:
        """Force the outermost rows and columns alive."""
        self._cells[0, :] = 1
        self._cells[-1, :] = 1
        self._cells[:, 0] = 1
        self._cells[:, -1] = 1

    def copy(self) -> "Grid":
        other = Grid(self.rows, self.cols, walled=self.walled)
        other._cells[:] = self._cells
        return other

    @property
    def population(self) -> int:
        """Get the number of living cells."""
        return int(np.sum(self._cells > 0))

    def get_neighbors(self, row: int, col: int) -> int:
        """Count living neighbors of a cell.

        Neighbors that fall outside the grid count as dead.

        Returns:
            Number of living neighbors (0-8)
        """
        count = 0
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue

                nr, nc = row + dr, col + dc
                if 0 <= nr < self.rows and 0 <= nc < self.cols:
                    count += int(self._cells[nr, nc])

        return count

    def count_all_neighbors(self) -> np.ndarray:
        """Count neighbors for all cells using a zero-padded convolution.

        Returns:
            (rows, cols) array with the live neighbor count of each cell
        """
        torch_input = torch.from_numpy((self._cells > 0).astype(np.float32)).unsqueeze(0).unsqueeze(0)
        neighbors = F.conv2d(torch_input, _NEIGHBOR_KERNEL, padding=1)
        return neighbors[0, 0].round().numpy().astype(np.int8)

    def changed_cells(self, other: "Grid") -> Iterator[Tuple[int, int]]:
        """Get coordinates of cells whose state differs from another grid.

        Yields:
            (row, col) tuples in row-major order

        Raises:
            ValueError: If grids have different dimensions
        """
        if other.shape != self.shape:
            raise ValueError(f"Grid dimensions don't match: {other.shape} vs {self.shape}")

        rows, cols = np.nonzero(self._cells != other._cells)
        for row, col in zip(rows, cols):
            yield (int(row), int(col))

    def to_list(self) -> list:
        """Convert grid to a nested list of booleans, one list per row."""
        return (self._cells > 0).tolist()

    def from_list(self, data: list) -> None:
        """Load cell states from a nested list, one list per row.

        Raises:
            ValueError: If data dimensions don't match grid
        """
        arr = np.array(data, dtype=np.int8)
        if arr.shape != self.shape:
            raise ValueError(f"Data shape {arr.shape} doesn't match grid {self.shape}")

        self._cells[:] = arr
        if self.walled:
            self.build_wall()

    def __eq__(self, other: object) -> bool:
        """Check if two grids are equal."""
        if not isinstance(other, Grid):
            return False
        return (
            self.shape == other.shape
            and self.walled == other.walled
            and np.array_equal(self._cells > 0, other._cells > 0)
        )

    def __str__(self) -> str:
        """String representation showing living cells as '*' and dead as '.'."""
        return "\n".join("".join("*" if cell else "." for cell in row) for row in self._cells)
