from __future__ import annotations

import random
from typing import List, Optional, Sequence

from emojicrush.components.board import Board
from emojicrush.components.tile_types import TileTypes
from emojicrush.engine import CrushEngine
from emojicrush.events.bus import EventBus
from emojicrush.systems.board_ops import restore_board

# Refills draw from all six kinds; the filler pattern only uses the first three.
KINDS = ['A', 'B', 'C', 'D', 'E', 'F']
PATTERN = ['A', 'B', 'C']


def diagonal_layout(size: int) -> List[List[Optional[str]]]:
    """A board with no match and no swap that could make one."""
    return [[PATTERN[(r + c) % 3] for c in range(size)] for r in range(size)]


def board_from(layout: Sequence[Sequence[Optional[str]]]) -> Board:
    board = Board(size=len(layout))
    restore_board(board, layout)
    return board


def registry(kinds: Sequence[str] = KINDS) -> TileTypes:
    return TileTypes(kinds=list(kinds))


def make_engine(layout: Sequence[Sequence[Optional[str]]], seed: int = 0, **options) -> CrushEngine:
    """Engine whose board is replaced by ``layout`` after creation."""
    options.setdefault('kinds', KINDS)
    engine = CrushEngine(EventBus(), rng=random.Random(seed), size=len(layout), **options)
    restore_board(engine.board, layout)
    return engine


def single_match_layout(size: int = 6) -> List[List[Optional[str]]]:
    """Diagonal filler where swapping (4, 2) with (5, 2) lines up three 'D' on the bottom row."""
    layout = diagonal_layout(size)
    layout[size - 1][0] = 'D'
    layout[size - 1][1] = 'D'
    layout[size - 2][2] = 'D'
    return layout
