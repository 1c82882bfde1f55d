from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from emojicrush.components.match import Match


class SpecialKind(Enum):
    STRIPED = "striped"
    BOMB = "bomb"
    RAINBOW = "rainbow"


@dataclass(frozen=True, slots=True)
class SpecialTileCreation:
    """A special tile to place at the end of a cascade step, and the match that earned it."""
    kind: SpecialKind
    position: Tuple[int, int]
    source: "Match"
