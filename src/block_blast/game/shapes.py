from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Tuple

import numpy as np

from .rules import ScoringRules


class BlockColor(IntEnum):
    """Display colors; 0 is reserved for an empty grid cell."""

    RED = 1
    ORANGE = 2
    YELLOW = 3
    GREEN = 4
    BLUE = 5


Shape = np.ndarray


def _shape(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


# Fixed orientations; rotated/mirrored variants are separate entries.
SHAPES: Tuple[Shape, ...] = (
    _shape([[1]]),                                # 1x1
    _shape([[1, 1]]),                             # 1x2
    _shape([[1], [1]]),                           # 2x1
    _shape([[1, 1], [1, 1]]),                     # 2x2
    _shape([[1, 1, 1]]),                          # 1x3
    _shape([[1], [1], [1]]),                      # 3x1
    _shape([[1, 1, 1, 1]]),                       # 1x4
    _shape([[1], [1], [1], [1]]),                 # 4x1
    _shape([[1, 1, 1], [1, 0, 0]]),               # L
    _shape([[1, 1, 1], [0, 0, 1]]),               # J
    _shape([[1, 0, 0], [1, 1, 1]]),               # L mirrored
    _shape([[0, 0, 1], [1, 1, 1]]),               # J mirrored
    _shape([[1, 1], [1, 0]]),                     # small corners
    _shape([[1, 1], [0, 1]]),
    _shape([[0, 1], [1, 1]]),
    _shape([[1, 0], [1, 1]]),
    _shape([[1, 1, 1], [0, 1, 0]]),               # T
    _shape([[0, 1, 0], [1, 1, 1]]),               # T down
    _shape([[1, 0], [1, 1], [1, 0]]),             # T left
    _shape([[0, 1], [1, 1], [0, 1]]),             # T right
    _shape([[1, 1, 1], [1, 1, 1]]),               # 3x2
    _shape([[1, 1], [1, 1], [1, 1]]),             # 2x3
    _shape([[1, 1, 1], [1, 1, 1], [1, 1, 1]]),    # 3x3
)

# Shapes with 4+ cells, drawn from when the difficulty roll succeeds.
LARGE_SHAPE_INDICES: Tuple[int, ...] = (6, 7, 8, 9, 10, 11, 16, 17, 18, 19, 20, 21, 22)


@dataclass(frozen=True)
class Block:
    """A catalog shape paired with a display color."""

    shape_id: int
    color: BlockColor

    @property
    def shape(self) -> Shape:
        return SHAPES[self.shape_id]

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def size(self) -> int:
        """Number of occupied cells."""
        return int(np.count_nonzero(self.shape))

    def cells_at(self, row: int, col: int) -> List[Tuple[int, int]]:
        s = self.shape
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for dr in range(h):
            for dc in range(w):
                if s[dr, dc]:
                    cells.append((row + dr, col + dc))
        return cells


def random_block(rng: random.Random, score: int, rules: ScoringRules) -> Block:
    """Draw one block, favouring large shapes as the score climbs.

    The difficulty roll only consumes randomness once the chance is positive,
    so below the first level the shape and color draws come straight from rng.
    """
    chance = rules.large_shape_chance(score)
    use_large_pool = chance > 0 and rng.random() < chance
    pool = LARGE_SHAPE_INDICES if use_large_pool else range(len(SHAPES))
    shape_id = rng.choice(pool)
    color = rng.choice(list(BlockColor))
    return Block(shape_id=shape_id, color=color)


def three_blocks(rng: random.Random, score: int, rules: ScoringRules, count: int = 3) -> List[Block]:
    return [random_block(rng, score, rules) for _ in range(count)]
