from dataclasses import dataclass, field
from typing import List, Optional

@dataclass(slots=True)
class Board:
    """Square grid of tile values.

    cells[row][col] holds a basic kind, a special symbol, or None while a
    cascade step has cleared the cell. Row ``size - 1`` is the bottom row.
    """
    size: int
    cells: List[List[Optional[str]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"Board size must be positive, got {self.size}")
        if not self.cells:
            self.cells = [[None] * self.size for _ in range(self.size)]
