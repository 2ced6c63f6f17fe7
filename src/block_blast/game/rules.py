from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    placement_points: int = 5
    line_points: int = 10
    streak_points: int = 20
    level_size: int = 250
    large_chance_per_level: float = 0.08

    def level_for(self, score: int) -> int:
        return max(0, int(score)) // self.level_size

    def large_shape_chance(self, score: int) -> float:
        # A uniform draw is always < 1, so anything above saturates anyway.
        return min(1.0, self.level_for(score) * self.large_chance_per_level)

    def clear_bonus(self, count: int, streak: int) -> int:
        """Points for clearing `count` lines, given the streak entering the move."""
        if count <= 0:
            return 0
        points = count * self.line_points + 2 ** count
        if streak > 0:
            points += streak * self.streak_points
        return points
