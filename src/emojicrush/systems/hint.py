from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from emojicrush.components.board import Board
from emojicrush.components.tile_types import TileTypes
from emojicrush.systems.board_ops import find_possible_moves, swap_tiles
from emojicrush.systems.match import find_matches
from emojicrush.systems.specials import plan_special_tiles

Position = Tuple[int, int]
Move = Tuple[Position, Position]


@dataclass(frozen=True, slots=True)
class Hint:
    move: Move
    priority: str
    reason: str


def find_hint(
    board: Board,
    registry: TileTypes,
    moves: Optional[Sequence[Move]] = None,
) -> Optional[Hint]:
    """Suggest a move, preferring the first one that would earn a special tile."""
    candidates: List[Move] = list(moves) if moves is not None else find_possible_moves(board, registry)
    if not candidates:
        return None
    for src, dst in candidates:
        swap_tiles(board, src, dst)
        specials = plan_special_tiles(find_matches(board, registry))
        swap_tiles(board, src, dst)
        if specials:
            return Hint(move=(src, dst), priority="high", reason="Creates special tile")
    return Hint(move=candidates[0], priority="normal", reason="Creates match")
