from dataclasses import dataclass, field
from typing import Dict

@dataclass(slots=True)
class GameStats:
    """In-memory play statistics. Persisting them is left to the host."""
    games_played: int = 0
    levels_completed: int = 0
    total_score: int = 0
    total_matches: int = 0
    total_specials: int = 0
    longest_combo: int = 0
    best_score: int = 0
    cleared: Dict[str, int] = field(default_factory=dict)

    def record_cleared(self, tile: str, amount: int = 1) -> None:
        if amount <= 0:
            return
        self.cleared[tile] = self.cleared.get(tile, 0) + amount
