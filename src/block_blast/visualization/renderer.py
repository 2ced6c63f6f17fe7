from __future__ import annotations

from typing import Iterable, Optional, Tuple

import pygame

from block_blast.game import Block, SessionSnapshot

BACKGROUND = (15, 15, 20)
EMPTY = (40, 40, 48)
TEXT = (230, 230, 230)
GHOST_INVALID = (220, 120, 120)
BLAST = (255, 240, 160)


def _color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        0: EMPTY,
        1: (230, 80, 80),    # red
        2: (240, 160, 60),   # orange
        3: (240, 220, 80),   # yellow
        4: (90, 200, 120),   # green
        5: (80, 140, 240),   # blue
    }
    return palette.get(int(v), (200, 200, 200))


class Renderer:
    """Draws snapshots; holds layout only, never game state."""

    def __init__(self, grid_size: int = 8, cell_size: int = 40, margin: int = 20) -> None:
        self.grid_size = grid_size
        self.cell_size = cell_size
        self.margin = margin
        self.tray_cell = cell_size // 2
        self.tray_y = margin * 2 + grid_size * cell_size
        self.slot_width = (grid_size * cell_size) // 3
        self._font: Optional[pygame.font.Font] = None

    @property
    def window_size(self) -> Tuple[int, int]:
        board = self.grid_size * self.cell_size
        return self.margin * 2 + board, self.tray_y + self.tray_cell * 5 + self.margin * 3

    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 26)
        return self._font

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Tuple[int, int]]:
        """Map a pixel position to a (row, col) on the board, or None."""
        x, y = pos
        col = (x - self.margin) // self.cell_size
        row = (y - self.margin) // self.cell_size
        if 0 <= row < self.grid_size and 0 <= col < self.grid_size:
            return int(row), int(col)
        return None

    def slot_at(self, pos: Tuple[int, int]) -> Optional[int]:
        x, y = pos
        if not (self.tray_y <= y < self.tray_y + self.tray_cell * 5):
            return None
        idx = (x - self.margin) // self.slot_width
        if 0 <= idx < 3:
            return int(idx)
        return None

    def _cell_rect(self, row: int, col: int) -> pygame.Rect:
        return pygame.Rect(
            self.margin + col * self.cell_size,
            self.margin + row * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def draw_board(self, screen: pygame.Surface, snapshot: SessionSnapshot) -> None:
        screen.fill(BACKGROUND)
        h, w = snapshot.grid.shape
        for row in range(h):
            for col in range(w):
                pygame.draw.rect(screen, _color_for_value(snapshot.grid[row, col]), self._cell_rect(row, col))

    def draw_blast(self, screen: pygame.Surface, rows: Iterable[int], cols: Iterable[int]) -> None:
        cells = {(r, c) for r in rows for c in range(self.grid_size)}
        cells |= {(r, c) for c in cols for r in range(self.grid_size)}
        for row, col in cells:
            pygame.draw.rect(screen, BLAST, self._cell_rect(row, col), 3)

    def draw_invalid(self, screen: pygame.Surface, row: int, col: int) -> None:
        pygame.draw.rect(screen, GHOST_INVALID, self._cell_rect(row, col), 3)

    def draw_tray(self, screen: pygame.Surface, blocks: Tuple[Block, ...], selected: int, dragging: int) -> None:
        for idx, block in enumerate(blocks):
            if idx == dragging:
                continue
            x0 = self.margin + idx * self.slot_width
            for row, col in block.cells_at(0, 0):
                rect = pygame.Rect(
                    x0 + col * self.tray_cell,
                    self.tray_y + row * self.tray_cell,
                    self.tray_cell - 1,
                    self.tray_cell - 1,
                )
                pygame.draw.rect(screen, _color_for_value(block.color), rect)
            if idx == selected:
                outline = pygame.Rect(x0 - 2, self.tray_y - 2,
                                      block.width * self.tray_cell + 4, block.height * self.tray_cell + 4)
                pygame.draw.rect(screen, (255, 255, 255), outline, 2)

    def draw_ghost(self, screen: pygame.Surface, block: Block, row: int, col: int, valid: bool) -> None:
        color = _color_for_value(block.color) if valid else GHOST_INVALID
        for r, c in block.cells_at(row, col):
            if 0 <= r < self.grid_size and 0 <= c < self.grid_size:
                pygame.draw.rect(screen, color, self._cell_rect(r, c), 0 if valid else 2)

    def draw_status(self, screen: pygame.Surface, snapshot: SessionSnapshot, best: int) -> None:
        font = self.font()
        y = self.tray_y + self.tray_cell * 5 + self.margin
        text = f"Score: {snapshot.score}   Best: {max(best, snapshot.score)}"
        if snapshot.streak > 1:
            text += f"   Streak x{snapshot.streak}"
        screen.blit(font.render(text, True, TEXT), (self.margin, y))
        if snapshot.game_over:
            over = font.render("Game Over - no space left! Press N to restart", True, (255, 100, 100))
            screen.blit(over, (self.margin, 2))
