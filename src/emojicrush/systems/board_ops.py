from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from esper import World

from emojicrush.components.board import Board
from emojicrush.components.move_history import BoardSnapshot
from emojicrush.components.special_kind import SpecialKind
from emojicrush.components.tile_type_registry import TileTypeRegistry
from emojicrush.components.tile_types import TileTypes
from emojicrush.constants import REPAIR_PASS_LIMIT, TILE_PICK_ATTEMPTS

logger = logging.getLogger(__name__)

Position = Tuple[int, int]
Move = Tuple[Position, Position]


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    tile: str


@dataclass(slots=True)
class RefillEntry:
    position: Position
    tile: str


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def get_tile_registry(world: World) -> TileTypes:
    for entity, _ in world.get_component(TileTypeRegistry):
        return world.component_for_entity(entity, TileTypes)
    raise RuntimeError("TileTypes definitions not found")


def is_valid_position(board: Board, row: int, col: int) -> bool:
    return 0 <= row < board.size and 0 <= col < board.size


def get_tile(board: Board, row: int, col: int) -> Optional[str]:
    """Return the tile at (row, col), or None when the position is off the board."""
    if not is_valid_position(board, row, col):
        return None
    return board.cells[row][col]


def set_tile(board: Board, row: int, col: int, tile: Optional[str]) -> None:
    if is_valid_position(board, row, col):
        board.cells[row][col] = tile


def swap_tiles(board: Board, a: Position, b: Position) -> bool:
    """Exchange two cells. Applying the same swap twice restores the board."""
    if not is_valid_position(board, *a) or not is_valid_position(board, *b):
        return False
    cells = board.cells
    (ar, ac), (br, bc) = a, b
    cells[ar][ac], cells[br][bc] = cells[br][bc], cells[ar][ac]
    return True


def are_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)


def would_create_match(board: Board, row: int, col: int, tile: Optional[str]) -> bool:
    """Return True if ``tile`` placed at (row, col) lines up with two equal neighbours."""
    if tile is None:
        return False
    cells = board.cells
    size = board.size
    # Horizontal sweep
    count = 1
    c = col - 1
    while c >= 0 and cells[row][c] == tile:
        count += 1
        c -= 1
    c = col + 1
    while c < size and cells[row][c] == tile:
        count += 1
        c += 1
    if count >= 3:
        return True
    # Vertical sweep
    count = 1
    r = row - 1
    while r >= 0 and cells[r][col] == tile:
        count += 1
        r -= 1
    r = row + 1
    while r < size and cells[r][col] == tile:
        count += 1
        r += 1
    return count >= 3


def random_kind_for(
    board: Board,
    row: int,
    col: int,
    kinds: Sequence[str],
    rng: random.Random,
    *,
    attempts: int = TILE_PICK_ATTEMPTS,
) -> str:
    """Pick a kind for (row, col), retrying a bounded number of times to avoid a match."""
    tile = rng.choice(kinds)
    # The top-left corner cannot complete a run yet.
    if row < 2 and col < 2:
        return tile
    tries = 1
    while tries < attempts and would_create_match(board, row, col, tile):
        tile = rng.choice(kinds)
        tries += 1
    return tile


def repair_matches(
    board: Board,
    kinds: Sequence[str],
    rng: random.Random,
    *,
    limit: int = REPAIR_PASS_LIMIT,
) -> int:
    """Replace basic tiles that sit inside a run until a pass finds none.

    Returns the number of passes used. Reaching ``limit`` leaves any residual
    match in place.
    """
    kind_set = set(kinds)
    passes = 0
    dirty = True
    while dirty and passes < limit:
        dirty = False
        for row in range(board.size):
            for col in range(board.size):
                tile = board.cells[row][col]
                if tile in kind_set and would_create_match(board, row, col, tile):
                    board.cells[row][col] = random_kind_for(board, row, col, kinds, rng)
                    dirty = True
        passes += 1
    if dirty:
        logger.debug("Repair stopped at pass limit %d; residual matches may remain", limit)
    return passes


def init_board(
    board: Board,
    kinds: Sequence[str],
    rng: random.Random,
    *,
    repair_limit: int = REPAIR_PASS_LIMIT,
) -> None:
    for row in range(board.size):
        for col in range(board.size):
            board.cells[row][col] = rng.choice(kinds)
    passes = repair_matches(board, kinds, rng, limit=repair_limit)
    logger.debug("Initialised %dx%d board after %d repair passes", board.size, board.size, passes)


def apply_gravity(board: Board) -> List[GravityMove]:
    """Let tiles fall to the bottom of each column, keeping their order.

    Vacated cells at the top are left empty.
    """
    moves: List[GravityMove] = []
    cells = board.cells
    for col in range(board.size):
        write_row = board.size - 1
        for row in range(board.size - 1, -1, -1):
            tile = cells[row][col]
            if tile is None:
                continue
            if row != write_row:
                moves.append(GravityMove(source=(row, col), target=(write_row, col), tile=tile))
                cells[write_row][col] = tile
                cells[row][col] = None
            write_row -= 1
    return moves


def fill_empty(board: Board, kinds: Sequence[str], rng: random.Random) -> List[RefillEntry]:
    spawned: List[RefillEntry] = []
    for col in range(board.size):
        for row in range(board.size):
            if board.cells[row][col] is None:
                tile = rng.choice(kinds)
                board.cells[row][col] = tile
                spawned.append(RefillEntry(position=(row, col), tile=tile))
    return spawned


def remove_tiles(board: Board, positions: Iterable[Position]) -> None:
    for row, col in positions:
        if is_valid_position(board, row, col):
            board.cells[row][col] = None


def empty_positions(board: Board) -> List[Position]:
    return [
        (row, col)
        for row in range(board.size)
        for col in range(board.size)
        if board.cells[row][col] is None
    ]


def create_special_tile(board: Board, row: int, col: int, kind: SpecialKind, registry: TileTypes) -> None:
    """Overwrite (row, col) with the special symbol. The caller decides where specials go."""
    set_tile(board, row, col, registry.symbol_for(kind))


def shuffle_board(
    board: Board,
    kinds: Sequence[str],
    rng: random.Random,
    *,
    repair_limit: int = REPAIR_PASS_LIMIT,
) -> None:
    tiles = [tile for row in board.cells for tile in row]
    # Fisher-Yates
    for i in range(len(tiles) - 1, 0, -1):
        j = rng.randrange(i + 1)
        tiles[i], tiles[j] = tiles[j], tiles[i]
    for index, tile in enumerate(tiles):
        board.cells[index // board.size][index % board.size] = tile
    repair_matches(board, kinds, rng, limit=repair_limit)


def has_matches(board: Board, registry: TileTypes) -> bool:
    """Return True if any row or column holds a run of three equal basic tiles."""
    cells = board.cells
    size = board.size
    for row in range(size):
        run = 1
        for col in range(1, size):
            tile = cells[row][col]
            if registry.is_basic(tile) and tile == cells[row][col - 1]:
                run += 1
                if run >= 3:
                    return True
            else:
                run = 1
    for col in range(size):
        run = 1
        for row in range(1, size):
            tile = cells[row][col]
            if registry.is_basic(tile) and tile == cells[row - 1][col]:
                run += 1
                if run >= 3:
                    return True
            else:
                run = 1
    return False


def find_possible_moves(board: Board, registry: TileTypes) -> List[Move]:
    """Enumerate right/down swaps that would produce at least one match."""
    moves: List[Move] = []
    size = board.size
    for row in range(size):
        for col in range(size):
            pos = (row, col)
            for other in ((row, col + 1), (row + 1, col)):
                if not is_valid_position(board, *other):
                    continue
                swap_tiles(board, pos, other)
                if has_matches(board, registry):
                    moves.append((pos, other))
                swap_tiles(board, pos, other)
    return moves


def snapshot_board(board: Board) -> BoardSnapshot:
    return tuple(tuple(row) for row in board.cells)


def restore_board(board: Board, layout: Sequence[Sequence[Optional[str]]]) -> None:
    """Copy ``layout`` into the board. The board never aliases the given rows."""
    if len(layout) != board.size or any(len(row) != board.size for row in layout):
        raise ValueError(f"Layout does not match a {board.size}x{board.size} board")
    board.cells = [list(row) for row in layout]
