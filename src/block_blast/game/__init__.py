"""Game module for Block Blast.

Exports the core game engine and supporting classes:
- GameGrid: 8x8 grid representation, placement checks and line clearing
- Block / BlockColor / SHAPES: the fixed shape catalog and block instances
- ScoringRules: Scoring and difficulty configuration and helpers
- BlockBlastGame: Turn controller and session state
"""

from .grid import GameGrid, LineClear
from .rules import ScoringRules
from .shapes import SHAPES, LARGE_SHAPE_INDICES, Block, BlockColor, random_block, three_blocks
from .core import (
    BlockBlastGame,
    GameConfig,
    GamePhase,
    MoveResult,
    RejectReason,
    SessionSnapshot,
    format_block,
    format_grid,
)

__all__ = [
    "GameGrid",
    "LineClear",
    "ScoringRules",
    "SHAPES",
    "LARGE_SHAPE_INDICES",
    "Block",
    "BlockColor",
    "random_block",
    "three_blocks",
    "BlockBlastGame",
    "GameConfig",
    "GamePhase",
    "MoveResult",
    "RejectReason",
    "SessionSnapshot",
    "format_block",
    "format_grid",
]
