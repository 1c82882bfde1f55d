from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

Position = Tuple[int, int]


class MatchKind(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    SHAPED = "shaped"


class ShapeType(Enum):
    L = "L"
    T = "T"


@dataclass(frozen=True, slots=True)
class Match:
    """One detected match. Produced fresh by every scan.

    Linear matches record the run span: ``line`` is the row of a horizontal run
    or the column of a vertical run, ``start``/``end`` the inclusive span along
    the run. Shaped matches keep both source runs, the intersection and the
    L/T subtype; their ``length`` is the combined run length.
    """
    kind: MatchKind
    tile: str
    positions: Tuple[Position, ...]
    length: int
    line: int = -1
    start: int = -1
    end: int = -1
    intersection: Optional[Position] = None
    subtype: Optional[ShapeType] = None
    horizontal: Optional["Match"] = None
    vertical: Optional["Match"] = None

    @property
    def is_shaped(self) -> bool:
        return self.kind is MatchKind.SHAPED
