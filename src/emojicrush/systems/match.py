from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from emojicrush.components.board import Board
from emojicrush.components.match import Match, MatchKind, ShapeType
from emojicrush.components.tile_types import TileTypes
from emojicrush.systems.board_ops import find_possible_moves, get_tile

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


def find_linear_matches(board: Board, registry: TileTypes) -> List[Match]:
    """Detect maximal horizontal and vertical runs of three or more equal basic tiles.

    Rows are scanned left to right, then columns top to bottom. Special tiles
    and empty cells never take part in a run. After a run is recorded the scan
    resumes past its last cell.
    """
    size = board.size
    cells = board.cells
    matches: List[Match] = []
    # Horizontal runs
    for row in range(size):
        col = 0
        while col < size - 2:
            tile = cells[row][col]
            if not registry.is_basic(tile):
                col += 1
                continue
            end = col + 1
            while end < size and cells[row][end] == tile:
                end += 1
            length = end - col
            if length >= 3:
                matches.append(Match(
                    kind=MatchKind.HORIZONTAL,
                    tile=tile,
                    positions=tuple((row, c) for c in range(col, end)),
                    length=length,
                    line=row,
                    start=col,
                    end=end - 1,
                ))
                col = end
            else:
                col += 1
    # Vertical runs
    for col in range(size):
        row = 0
        while row < size - 2:
            tile = cells[row][col]
            if not registry.is_basic(tile):
                row += 1
                continue
            end = row + 1
            while end < size and cells[end][col] == tile:
                end += 1
            length = end - row
            if length >= 3:
                matches.append(Match(
                    kind=MatchKind.VERTICAL,
                    tile=tile,
                    positions=tuple((r, col) for r in range(row, end)),
                    length=length,
                    line=col,
                    start=row,
                    end=end - 1,
                ))
                row = end
            else:
                row += 1
    return matches


def shape_type(horizontal: Match, vertical: Match) -> ShapeType:
    total = horizontal.length + vertical.length - 1
    return ShapeType.T if total >= 5 else ShapeType.L


def find_shaped_matches(linear: Sequence[Match]) -> List[Match]:
    """Combine every crossing horizontal/vertical pair of the same tile into a shaped match.

    Pairs are not deduplicated against each other: a tile may belong to more
    than one shaped match in the same scan.
    """
    horizontals = [m for m in linear if m.kind is MatchKind.HORIZONTAL]
    verticals = [m for m in linear if m.kind is MatchKind.VERTICAL]
    shaped: List[Match] = []
    for h in horizontals:
        for v in verticals:
            if h.tile != v.tile:
                continue
            if not (v.start <= h.line <= v.end and h.start <= v.line <= h.end):
                continue
            positions = tuple(dict.fromkeys(h.positions + v.positions))
            shaped.append(Match(
                kind=MatchKind.SHAPED,
                tile=h.tile,
                positions=positions,
                length=h.length + v.length - 1,
                intersection=(h.line, v.line),
                subtype=shape_type(h, v),
                horizontal=h,
                vertical=v,
            ))
    return shaped


def find_matches(board: Board, registry: TileTypes) -> List[Match]:
    """Linear matches followed by the shaped matches built from them."""
    linear = find_linear_matches(board, registry)
    shaped = find_shaped_matches(linear)
    if linear:
        logger.debug("Scan found %d linear and %d shaped matches", len(linear), len(shaped))
    return linear + shaped


def all_match_positions(matches: Iterable[Match]) -> List[Position]:
    """Ordered union of every position covered by ``matches``."""
    seen: Dict[Position, None] = {}
    for match in matches:
        for pos in match.positions:
            seen.setdefault(pos, None)
    return list(seen)


def validate_matches(board: Board, matches: Iterable[Match]) -> List[Match]:
    """Keep matches whose cells still all hold the matched tile."""
    valid: List[Match] = []
    for match in matches:
        if len(match.positions) < 3:
            continue
        if all(get_tile(board, row, col) == match.tile for row, col in match.positions):
            valid.append(match)
    return valid


@dataclass(slots=True)
class BoardAnalysis:
    total_matches: int
    horizontal: int
    vertical: int
    shaped: int
    special_opportunities: int
    possible_moves: int


def analyze_board(board: Board, registry: TileTypes) -> BoardAnalysis:
    linear = find_linear_matches(board, registry)
    shaped = find_shaped_matches(linear)
    horizontal = sum(1 for m in linear if m.kind is MatchKind.HORIZONTAL)
    long_runs = sum(1 for m in linear if m.length >= 4)
    return BoardAnalysis(
        total_matches=len(linear) + len(shaped),
        horizontal=horizontal,
        vertical=len(linear) - horizontal,
        shaped=len(shaped),
        special_opportunities=long_runs + len(shaped),
        possible_moves=len(find_possible_moves(board, registry)),
    )
