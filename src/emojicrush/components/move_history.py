from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional, Tuple

from emojicrush.constants import HISTORY_LIMIT

BoardSnapshot = Tuple[Tuple[Optional[str], ...], ...]


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    board: BoardSnapshot
    score: int
    moves_remaining: int
    combo_multiplier: int
    cleared: Tuple[Tuple[str, int], ...] = ()


@dataclass(slots=True)
class MoveHistory:
    """Bounded undo stack; pushing past ``limit`` evicts the oldest entry."""
    limit: int = HISTORY_LIMIT
    entries: Deque[HistoryEntry] = field(init=False)

    def __post_init__(self) -> None:
        self.entries = deque(maxlen=self.limit)

    def push(self, entry: HistoryEntry) -> None:
        self.entries.append(entry)

    def pop(self) -> Optional[HistoryEntry]:
        if not self.entries:
            return None
        return self.entries.pop()

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)
