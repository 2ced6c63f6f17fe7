import random
import unittest
from unittest import mock

import numpy as np

from block_blast.game import (
    Block,
    BlockBlastGame,
    BlockColor,
    GameConfig,
    GamePhase,
    RejectReason,
    ScoringRules,
    format_block,
    three_blocks,
)

DOT = 0
LINE4 = 6
SQUARE3 = 22


def _blocks(*shape_ids):
    return [Block(shape_id=s, color=BlockColor.GREEN) for s in shape_ids]


class PlacementTests(unittest.TestCase):
    def setUp(self):
        self.game = BlockBlastGame(GameConfig(random_seed=42))

    def test_placement_stamps_color_and_scores_five(self):
        self.game.current_blocks = _blocks(SQUARE3, DOT, DOT)
        result = self.game.attempt_placement(0, 2, 3)
        self.assertTrue(result.accepted)
        self.assertEqual((result.score_delta, result.total_score), (5, 5))
        self.assertEqual(self.game.grid.filled_cells(), 9)
        self.assertTrue(np.all(self.game.grid.grid[2:5, 3:6] == BlockColor.GREEN))
        self.assertEqual(result.lines_cleared, 0)

    def test_row_clears_only_when_full(self):
        self.game.current_blocks = _blocks(LINE4, LINE4, LINE4)
        first = self.game.attempt_placement(0, 0, 0)
        self.assertEqual((first.cleared_rows, first.score_delta), ([], 5))
        self.assertEqual(self.game.grid.filled_cells(), 4)

        self.game.current_blocks[0] = Block(LINE4, BlockColor.RED)
        second = self.game.attempt_placement(0, 0, 4)
        self.assertEqual(second.cleared_rows, [0])
        self.assertEqual(second.cleared_cols, [])
        self.assertEqual(second.score_delta, 17)
        self.assertEqual(second.total_score, 22)
        self.assertEqual(self.game.grid.filled_cells(), 0)
        self.assertEqual((self.game.combo, self.game.streak), (1, 1))

    def test_double_clear_with_streak(self):
        self.game.grid.grid[0, :7] = 1
        self.game.grid.grid[1:, 7] = 2
        self.game.streak = 3
        self.game.current_blocks = _blocks(DOT, DOT, DOT)
        result = self.game.attempt_placement(0, 0, 7)
        self.assertEqual((result.cleared_rows, result.cleared_cols), ([0], [7]))
        self.assertEqual(result.score_delta, 89)
        self.assertEqual((result.combo, result.streak), (2, 4))
        self.assertEqual(self.game.grid.filled_cells(), 0)

    def test_move_without_clear_breaks_streak(self):
        self.game.streak = 4
        self.game.combo = 2
        self.game.current_blocks = _blocks(DOT, DOT, DOT)
        result = self.game.attempt_placement(1, 5, 5)
        self.assertTrue(result.accepted)
        self.assertEqual(result.score_delta, 5)
        self.assertEqual((self.game.combo, self.game.streak), (0, 0))

    def test_placed_block_removed_and_tray_refilled(self):
        self.game.current_blocks = _blocks(DOT, SQUARE3, LINE4)
        self.game.attempt_placement(0, 0, 0)
        self.assertEqual(len(self.game.current_blocks), 3)
        self.assertEqual([b.shape_id for b in self.game.current_blocks[:2]], [SQUARE3, LINE4])

    def test_refill_keeps_three_blocks_through_a_game(self):
        rng = random.Random(5)
        for _ in range(200):
            actions = self.game.get_valid_actions()
            if not actions:
                break
            result = self.game.attempt_placement(*rng.choice(actions))
            self.assertTrue(result.accepted)
            self.assertEqual(len(self.game.current_blocks), 3)
            self.assertEqual(result.total_score, self.game.score)


class RejectionTests(unittest.TestCase):
    def setUp(self):
        self.game = BlockBlastGame(GameConfig(random_seed=1))
        self.game.current_blocks = _blocks(SQUARE3, DOT, LINE4)
        self.game.grid.grid[4, 4] = 3
        self.before = self.game.get_session_snapshot()

    def assertUnchanged(self):
        after = self.game.get_session_snapshot()
        self.assertTrue(np.array_equal(after.grid, self.before.grid))
        self.assertEqual(after.blocks, self.before.blocks)
        self.assertEqual(after.score, self.before.score)

    def test_invalid_index(self):
        for idx in (-1, 3, 10):
            result = self.game.attempt_placement(idx, 0, 0)
            self.assertFalse(result.accepted)
            self.assertEqual(result.reason, RejectReason.INVALID_INDEX)
        self.assertUnchanged()

    def test_out_of_bounds_and_overlap(self):
        for idx, row, col in ((0, 6, 0), (0, 0, 6), (2, 0, 5), (0, 3, 3), (1, 4, 4), (1, -1, 0)):
            result = self.game.attempt_placement(idx, row, col)
            self.assertFalse(result.accepted)
            self.assertEqual(result.reason, RejectReason.INVALID_PLACEMENT)
        self.assertUnchanged()

    def test_query_valid_placement_is_read_only(self):
        self.assertTrue(self.game.query_valid_placement(0, 5, 5))
        self.assertFalse(self.game.query_valid_placement(0, 3, 3))
        self.assertFalse(self.game.query_valid_placement(5, 0, 0))
        self.assertUnchanged()


class GameOverTests(unittest.TestCase):
    def setUp(self):
        self.game = BlockBlastGame(GameConfig(random_seed=9))
        # Checkerboard of holes: only single cells fit and no line is one cell from full.
        rows, cols = np.indices((8, 8))
        self.game.grid.grid[:] = np.where((rows + cols) % 2 == 0, 0, 1)
        self.game.current_blocks = _blocks(DOT, SQUARE3, SQUARE3)

    def test_game_over_after_refill(self):
        with mock.patch.object(self.game, "_random_block", return_value=Block(SQUARE3, BlockColor.RED)):
            result = self.game.attempt_placement(0, 0, 0)
        self.assertTrue(result.accepted)
        self.assertTrue(result.game_over)
        self.assertEqual(self.game.phase, GamePhase.GAME_OVER)
        self.assertFalse(self.game.can_place_any())
        self.assertEqual(self.game.get_valid_actions(), [])
        self.assertEqual(len(self.game.current_blocks), 3)

        after = self.game.attempt_placement(0, 0, 2)
        self.assertFalse(after.accepted)
        self.assertEqual(after.reason, RejectReason.MOVE_AFTER_GAME_OVER)
        self.assertEqual(after.total_score, 5)

    def test_game_continues_while_a_block_fits(self):
        with mock.patch.object(self.game, "_random_block", return_value=Block(DOT, BlockColor.RED)):
            result = self.game.attempt_placement(0, 0, 0)
        self.assertFalse(result.game_over)
        self.assertEqual(self.game.phase, GamePhase.PLAYING)

    def test_restart_from_game_over(self):
        with mock.patch.object(self.game, "_random_block", return_value=Block(SQUARE3, BlockColor.RED)):
            self.game.attempt_placement(0, 0, 0)
        self.game.streak = 2
        self.game.combo = 1
        snapshot = self.game.start_new_game()
        self.assertEqual(snapshot.phase, GamePhase.PLAYING)
        self.assertFalse(snapshot.game_over)
        self.assertEqual((snapshot.score, snapshot.combo, snapshot.streak), (0, 0, 0))
        self.assertEqual(int(np.count_nonzero(snapshot.grid)), 0)
        self.assertEqual(len(snapshot.blocks), 3)


class SessionTests(unittest.TestCase):
    def test_seeded_games_are_independent_and_repeatable(self):
        a = BlockBlastGame(GameConfig(random_seed=11))
        b = BlockBlastGame(GameConfig(random_seed=11))
        self.assertEqual(a.current_blocks, b.current_blocks)
        action = a.get_valid_actions()[0]
        a.attempt_placement(*action)
        self.assertEqual(b.score, 0)
        self.assertEqual(b.grid.filled_cells(), 0)

    def test_reset_with_seed_replays_blocks(self):
        game = BlockBlastGame()
        first = game.reset(seed=3).blocks
        game.attempt_placement(*game.get_valid_actions()[0])
        self.assertEqual(game.reset(seed=3).blocks, first)

    def test_injected_rng_is_used(self):
        game = BlockBlastGame(rng=random.Random(99))
        expected = BlockBlastGame(GameConfig(random_seed=99))
        self.assertEqual(game.current_blocks, expected.current_blocks)

    def test_snapshot_is_read_only_copy(self):
        game = BlockBlastGame(GameConfig(random_seed=2))
        snapshot = game.get_session_snapshot()
        with self.assertRaises(ValueError):
            snapshot.grid[0, 0] = 1
        game.current_blocks = _blocks(DOT, DOT, DOT)
        game.attempt_placement(0, 0, 0)
        self.assertEqual(snapshot.grid[0, 0], 0)
        self.assertEqual(snapshot.score, 0)

    def test_new_game_deals_three_blocks_from_rng(self):
        game = BlockBlastGame(GameConfig(random_seed=21))
        self.assertEqual(game.current_blocks, three_blocks(random.Random(21), 0, ScoringRules()))

    def test_game_stats_after_moves(self):
        game = BlockBlastGame(GameConfig(random_seed=8))
        game.current_blocks = _blocks(LINE4, LINE4, LINE4)
        game.attempt_placement(0, 0, 0)
        game.current_blocks[0] = Block(LINE4, BlockColor.RED)
        game.attempt_placement(0, 0, 4)
        game.current_blocks[0] = Block(SQUARE3, BlockColor.RED)
        game.attempt_placement(0, 5, 5)
        stats = game.get_game_stats()
        self.assertEqual(stats["final_score"], 27)
        self.assertEqual(stats["moves_made"], 3)
        self.assertEqual(stats["lines_cleared"], 1)
        self.assertAlmostEqual(stats["final_fill_ratio"], 9 / 64)
        self.assertAlmostEqual(stats["avg_score_per_move"], 9.0)

    def test_bad_config(self):
        with self.assertRaises(ValueError):
            BlockBlastGame(GameConfig(blocks_per_set=0))

    def test_format_block(self):
        self.assertEqual(format_block(Block(16, BlockColor.RED)), "███\n·█·")


if __name__ == "__main__":
    unittest.main()
