from dataclasses import dataclass
from typing import Optional, Tuple

from emojicrush.constants import DEFAULT_GOAL, DEFAULT_MOVES, STAR_RATIOS


@dataclass(frozen=True, slots=True)
class ClearRequirement:
    """Clear at least ``count`` tiles of ``tile`` during the level."""
    tile: str
    count: int


@dataclass(slots=True)
class LevelConfig:
    """Level parameters supplied by the host's level progression.

    star_thresholds defaults to fixed fractions of the goal.
    """
    level: int = 1
    goal: int = DEFAULT_GOAL
    moves: int = DEFAULT_MOVES
    time_limit: int = 0
    clear_specific: Optional[ClearRequirement] = None
    star_thresholds: Tuple[int, int, int] = ()

    def __post_init__(self) -> None:
        if not self.star_thresholds:
            one, two, three = STAR_RATIOS
            self.star_thresholds = (
                int(self.goal * one),
                int(self.goal * two),
                int(self.goal * three),
            )

    def stars_for(self, score: int) -> int:
        one, two, three = self.star_thresholds
        if score >= three:
            return 3
        if score >= two:
            return 2
        if score >= one:
            return 1
        return 0
