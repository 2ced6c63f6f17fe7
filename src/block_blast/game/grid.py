from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple

import numpy as np


@dataclass
class LineClear:
    rows: List[int] = field(default_factory=list)
    cols: List[int] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.rows) + len(self.cols)


class GameGrid:
    """Square board for block placement.

    The grid uses 0 for empty cells and positive integers for filled cells.
    Integer values correspond to block colors.
    """

    def __init__(self, size: int = 8) -> None:
        if int(size) <= 0:
            raise ValueError(f"grid size must be positive, got {size}")
        self.size = int(size)
        self.grid = np.zeros((self.size, self.size), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def fits_bounds(self, shape: np.ndarray, row: int, col: int) -> bool:
        h, w = shape.shape
        return row >= 0 and col >= 0 and row + h <= self.size and col + w <= self.size

    def can_place(self, shape: np.ndarray, row: int, col: int) -> bool:
        """Check if shape can be anchored with its top-left cell at (row, col)."""
        if not self.fits_bounds(shape, row, col):
            return False
        h, w = shape.shape
        window = self.grid[row : row + h, col : col + w]
        return not np.any((shape != 0) & (window != 0))

    def place(self, shape: np.ndarray, row: int, col: int, value: int) -> int:
        """
        Stamp shape cells with `value` and return number of cells placed.
        Assumes position is already validated.
        """
        h, w = shape.shape
        mask = shape != 0
        self.grid[row : row + h, col : col + w][mask] = value
        return int(np.count_nonzero(mask))

    def full_lines(self) -> Tuple[List[int], List[int]]:
        # Rows and columns are both scanned exhaustively.
        filled = self.grid != 0
        rows = [int(r) for r in np.flatnonzero(np.all(filled, axis=1))]
        cols = [int(c) for c in np.flatnonzero(np.all(filled, axis=0))]
        return rows, cols

    def clear_complete_lines(self) -> LineClear:
        """Empty every full row and column; a shared cell is cleared once."""
        rows, cols = self.full_lines()
        for r in rows:
            self.grid[r, :] = 0
        for c in cols:
            self.grid[:, c] = 0
        return LineClear(rows=rows, cols=cols)

    def valid_anchors(self, shape: np.ndarray) -> Iterator[Tuple[int, int]]:
        h, w = shape.shape
        for row in range(self.size - h + 1):
            for col in range(self.size - w + 1):
                if self.can_place(shape, row, col):
                    yield row, col

    def can_place_any(self, shapes: Iterable[np.ndarray]) -> bool:
        for shape in shapes:
            for _ in self.valid_anchors(shape):
                return True
        return False

    def filled_cells(self) -> int:
        return int(np.count_nonzero(self.grid))

    def get_filled_ratio(self) -> float:
        return self.filled_cells() / float(self.size * self.size)

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
