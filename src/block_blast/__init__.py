"""Block Blast: an 8x8 block placement puzzle.

Place three offered blocks (no rotation) to fill rows and columns, which
clear and score. The game ends when none of the current blocks fits.
"""

from .game import BlockBlastGame, GameConfig, MoveResult, ScoringRules, SessionSnapshot

__all__ = ["BlockBlastGame", "GameConfig", "MoveResult", "ScoringRules", "SessionSnapshot"]
