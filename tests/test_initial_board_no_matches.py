import random

from emojicrush.components.board import Board
from emojicrush.constants import TILE_PALETTES
from emojicrush.events.bus import EventBus
from emojicrush.systems.board_ops import empty_positions, get_board, get_tile_registry, has_matches, init_board
from emojicrush.world import create_world
from tests.helpers import registry


def test_initial_boards_rarely_start_with_a_match():
    kinds = TILE_PALETTES['regular']
    reg = registry(kinds)
    failures = 0
    trials = 200
    for seed in range(trials):
        board = Board(size=8)
        init_board(board, kinds, random.Random(seed))
        assert empty_positions(board) == []
        if has_matches(board, reg):
            failures += 1
    assert failures <= trials // 100, f"{failures} of {trials} boards started with a match"


def test_create_world_generates_a_full_board():
    world = create_world(EventBus(), size=6, rng=random.Random(42), palette='fruit')
    board = get_board(world)
    kinds = get_tile_registry(world).all_kinds()
    assert board.size == 6
    assert kinds == TILE_PALETTES['fruit']
    assert all(tile in kinds for row in board.cells for tile in row)
