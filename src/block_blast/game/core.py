from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

import numpy as np

from .grid import GameGrid
from .rules import ScoringRules
from .shapes import Block, random_block, three_blocks

logger = logging.getLogger(__name__)


class GamePhase(IntEnum):
    PLAYING = 0
    GAME_OVER = 1


class RejectReason(Enum):
    INVALID_INDEX = "invalid_index"
    INVALID_PLACEMENT = "invalid_placement"
    MOVE_AFTER_GAME_OVER = "move_after_game_over"


@dataclass
class GameConfig:
    grid_size: int = 8
    blocks_per_set: int = 3
    random_seed: Optional[int] = None


@dataclass
class MoveResult:
    accepted: bool
    cleared_rows: List[int] = field(default_factory=list)
    cleared_cols: List[int] = field(default_factory=list)
    score_delta: int = 0
    total_score: int = 0
    game_over: bool = False
    combo: int = 0
    streak: int = 0
    reason: Optional[RejectReason] = None

    @property
    def lines_cleared(self) -> int:
        return len(self.cleared_rows) + len(self.cleared_cols)


@dataclass(frozen=True)
class SessionSnapshot:
    grid: np.ndarray
    blocks: Tuple[Block, ...]
    score: int
    combo: int
    streak: int
    game_over: bool

    @property
    def phase(self) -> GamePhase:
        return GamePhase.GAME_OVER if self.game_over else GamePhase.PLAYING


class BlockBlastGame:
    """Turn controller owning one game session.

    Every move runs to completion before the next is accepted: the block is
    stamped, lines are cleared and scored, the tray is refilled and the
    game-over check runs, all inside `attempt_placement`.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig()
        if self.config.blocks_per_set < 1:
            raise ValueError(f"blocks_per_set must be at least 1, got {self.config.blocks_per_set}")
        self.rules = rules or ScoringRules()
        self.rng = rng or random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.grid_size)
        self.current_blocks: List[Block] = []
        self.score = 0
        self.combo = 0
        self.streak = 0
        self.game_over = False
        self.moves_made = 0
        self.total_lines_cleared = 0
        self.start_new_game()

    @property
    def phase(self) -> GamePhase:
        return GamePhase.GAME_OVER if self.game_over else GamePhase.PLAYING

    def start_new_game(self) -> SessionSnapshot:
        self.grid.reset()
        self.score = 0
        self.combo = 0
        self.streak = 0
        self.game_over = False
        self.moves_made = 0
        self.total_lines_cleared = 0
        self.current_blocks = three_blocks(self.rng, self.score, self.rules, self.config.blocks_per_set)
        logger.info("New game started with blocks %s", [b.shape_id for b in self.current_blocks])
        return self.get_session_snapshot()

    def reset(self, seed: Optional[int] = None) -> SessionSnapshot:
        if seed is not None:
            self.rng.seed(seed)
        return self.start_new_game()

    def _random_block(self) -> Block:
        return random_block(self.rng, self.score, self.rules)

    def _block_at(self, block_idx: int) -> Optional[Block]:
        if 0 <= block_idx < len(self.current_blocks):
            return self.current_blocks[block_idx]
        return None

    def query_valid_placement(self, block_idx: int, row: int, col: int) -> bool:
        """Read-only fit check for live previews."""
        block = self._block_at(block_idx)
        if block is None:
            return False
        return self.grid.can_place(block.shape, row, col)

    def can_place_any(self) -> bool:
        return self.grid.can_place_any(b.shape for b in self.current_blocks)

    def get_valid_actions(self) -> List[Tuple[int, int, int]]:
        """List of (block_idx, row, col) valid actions"""
        if self.game_over:
            return []
        actions: List[Tuple[int, int, int]] = []
        for block_idx, block in enumerate(self.current_blocks):
            for row, col in self.grid.valid_anchors(block.shape):
                actions.append((block_idx, row, col))
        return actions

    def _reject(self, reason: RejectReason) -> MoveResult:
        return MoveResult(
            accepted=False,
            total_score=self.score,
            game_over=self.game_over,
            combo=self.combo,
            streak=self.streak,
            reason=reason,
        )

    def attempt_placement(self, block_idx: int, row: int, col: int) -> MoveResult:
        if self.game_over:
            return self._reject(RejectReason.MOVE_AFTER_GAME_OVER)
        block = self._block_at(block_idx)
        if block is None:
            logger.debug("Rejected move: no block at index %s", block_idx)
            return self._reject(RejectReason.INVALID_INDEX)
        if not self.grid.can_place(block.shape, row, col):
            logger.debug("Rejected move: block %s does not fit at (%s, %s)", block_idx, row, col)
            return self._reject(RejectReason.INVALID_PLACEMENT)

        self.grid.place(block.shape, row, col, int(block.color))
        delta = self.rules.placement_points
        cleared = self.grid.clear_complete_lines()
        if cleared.count > 0:
            # Streak bonus uses the streak entering this move.
            delta += self.rules.clear_bonus(cleared.count, self.streak)
            self.combo = cleared.count
            self.streak += 1
            logger.debug("Cleared rows %s cols %s (streak %d)", cleared.rows, cleared.cols, self.streak)
        else:
            self.combo = 0
            self.streak = 0
        self.score += delta
        self.moves_made += 1
        self.total_lines_cleared += cleared.count

        self.current_blocks.pop(block_idx)
        while len(self.current_blocks) < self.config.blocks_per_set:
            self.current_blocks.append(self._random_block())

        if not self.can_place_any():
            self.game_over = True
            logger.info("Game over after %d moves with score %d", self.moves_made, self.score)

        return MoveResult(
            accepted=True,
            cleared_rows=cleared.rows,
            cleared_cols=cleared.cols,
            score_delta=delta,
            total_score=self.score,
            game_over=self.game_over,
            combo=self.combo,
            streak=self.streak,
        )

    def get_session_snapshot(self) -> SessionSnapshot:
        grid = self.grid.clone_state()
        grid.setflags(write=False)
        return SessionSnapshot(
            grid=grid,
            blocks=tuple(self.current_blocks),
            score=self.score,
            combo=self.combo,
            streak=self.streak,
            game_over=self.game_over,
        )

    def get_game_stats(self) -> dict:
        return {
            "final_score": self.score,
            "moves_made": self.moves_made,
            "lines_cleared": self.total_lines_cleared,
            "final_fill_ratio": self.grid.get_filled_ratio(),
            "avg_score_per_move": self.score / max(1, self.moves_made),
        }


def format_grid(grid: np.ndarray) -> str:
    return "\n".join("".join("█" if cell else "·" for cell in row) for row in grid)


def format_block(block: Block) -> str:
    return format_grid(block.shape)
