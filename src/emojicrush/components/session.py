from dataclasses import dataclass, field
from typing import Dict

from emojicrush.constants import DEFAULT_GOAL, DEFAULT_MOVES

@dataclass(slots=True)
class Session:
    """Scalar counters for the level being played.

    cascade_active is set while a cascade or power-up runs; swaps and
    power-ups requested during that window are refused. cleared counts basic
    tiles cleared since the level was loaded.
    """
    score: int = 0
    moves_remaining: int = DEFAULT_MOVES
    goal: int = DEFAULT_GOAL
    level: int = 1
    time_left: float = 0.0
    cascade_active: bool = False
    cleared: Dict[str, int] = field(default_factory=dict)

    def record_cleared(self, tile: str, amount: int = 1) -> None:
        if amount <= 0:
            return
        self.cleared[tile] = self.cleared.get(tile, 0) + amount
