from __future__ import annotations

import json
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_HIGH_SCORE_PATH = os.path.join(os.path.expanduser("~"), ".block_blast", "highscore.json")


class HighScoreStore:
    """Best-ever score kept in a small JSON file.

    The engine never touches this; front ends read it at startup and submit
    the running total after each move.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path or DEFAULT_HIGH_SCORE_PATH
        self._best: Optional[int] = None

    def load(self) -> int:
        if self._best is None:
            self._best = self._read()
        return self._best

    def _read(self) -> int:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return 0
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable high score file %s: %s", self.path, e)
            return 0
        try:
            return max(0, int(data.get("high_score", 0)))
        except (AttributeError, TypeError, ValueError):
            logger.warning("Ignoring malformed high score file %s", self.path)
            return 0

    def submit(self, score: int) -> bool:
        """Store `score` if it beats the current best; return whether it did."""
        if score <= self.load():
            return False
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"high_score": int(score)}, f)
        self._best = int(score)
        logger.info("New high score %d saved to %s", score, self.path)
        return True
