from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from emojicrush.constants import DEFAULT_POWER_UPS


class PowerUpKind(Enum):
    HAMMER = "hammer"
    SHUFFLE = "shuffle"
    UNDO = "undo"


def _default_counts() -> Dict[PowerUpKind, int]:
    return {kind: DEFAULT_POWER_UPS[kind.value] for kind in PowerUpKind}


@dataclass(slots=True)
class PowerUpInventory:
    """Remaining uses per power-up kind."""
    counts: Dict[PowerUpKind, int] = field(default_factory=_default_counts)

    def available(self, kind: PowerUpKind) -> int:
        return self.counts.get(kind, 0)

    def consume(self, kind: PowerUpKind) -> bool:
        if self.counts.get(kind, 0) <= 0:
            return False
        self.counts[kind] -= 1
        return True

    def refill(self) -> None:
        self.counts = _default_counts()
