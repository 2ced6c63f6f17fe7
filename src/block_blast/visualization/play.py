from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Tuple

import pygame

from block_blast.game import BlockBlastGame, GameConfig, MoveResult
from block_blast.storage import HighScoreStore
from .renderer import Renderer

BLAST_MS = 650
INVALID_MS = 300


class MoveFeedback:
    """Cosmetic timers for the last move; never read back by the engine."""

    def __init__(self) -> None:
        self.blast_rows: List[int] = []
        self.blast_cols: List[int] = []
        self.blast_until = 0
        self.invalid_cell: Optional[Tuple[int, int]] = None
        self.invalid_until = 0

    def record(self, result: MoveResult, cell: Tuple[int, int], now: int) -> None:
        if not result.accepted:
            self.invalid_cell = cell
            self.invalid_until = now + INVALID_MS
        elif result.lines_cleared:
            self.blast_rows, self.blast_cols = result.cleared_rows, result.cleared_cols
            self.blast_until = now + BLAST_MS

    def blast(self, now: int) -> Optional[Tuple[List[int], List[int]]]:
        if now < self.blast_until:
            return self.blast_rows, self.blast_cols
        return None

    def invalid(self, now: int) -> Optional[Tuple[int, int]]:
        if self.invalid_cell is not None and now < self.invalid_until:
            return self.invalid_cell
        return None


KEY_TO_INDEX = {
    pygame.K_1: 0,
    pygame.K_2: 1,
    pygame.K_3: 2,
    pygame.K_KP1: 0,
    pygame.K_KP2: 1,
    pygame.K_KP3: 2,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Block Blast")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=40)
    p.add_argument("--highscore-file", type=str, default=None)
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def run(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="[BLOCK_BLAST] %(asctime)s - %(levelname)s: %(message)s")

    game = BlockBlastGame(GameConfig(random_seed=args.seed))
    store = HighScoreStore(args.highscore_file)
    best = store.load()
    renderer = Renderer(game.config.grid_size, cell_size=args.cell_size)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size)
        pygame.display.set_caption("Block Blast")
        clock = pygame.time.Clock()

        selected = -1
        dragging = -1
        feedback = MoveFeedback()

        def place(block_idx: int, pos) -> bool:
            nonlocal best
            cell = renderer.cell_at(pos)
            if cell is None:
                return False
            result = game.attempt_placement(block_idx, *cell)
            feedback.record(result, cell, pygame.time.get_ticks())
            if not result.accepted:
                return False
            if store.submit(result.total_score):
                best = result.total_score
            return True

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in KEY_TO_INDEX:
                        selected = KEY_TO_INDEX[event.key]
                    elif event.key in (pygame.K_n, pygame.K_r):
                        game.start_new_game()
                        selected = dragging = -1
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    slot = renderer.slot_at(event.pos)
                    if slot is not None and slot < len(game.current_blocks):
                        selected = dragging = slot
                    elif selected >= 0 and place(selected, event.pos):
                        selected = -1
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    if dragging >= 0 and renderer.cell_at(event.pos) is not None:
                        if place(dragging, event.pos):
                            selected = -1
                    dragging = -1

            snapshot = game.get_session_snapshot()
            renderer.draw_board(screen, snapshot)
            now = pygame.time.get_ticks()
            blast = feedback.blast(now)
            if blast is not None:
                renderer.draw_blast(screen, *blast)
            invalid_cell = feedback.invalid(now)
            if invalid_cell is not None:
                renderer.draw_invalid(screen, *invalid_cell)
            preview = dragging if dragging >= 0 else selected
            cell = renderer.cell_at(pygame.mouse.get_pos())
            if preview >= 0 and cell is not None and not snapshot.game_over:
                valid = game.query_valid_placement(preview, *cell)
                renderer.draw_ghost(screen, snapshot.blocks[preview], cell[0], cell[1], valid)
            renderer.draw_tray(screen, snapshot.blocks, selected, dragging)
            renderer.draw_status(screen, snapshot, best)

            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
