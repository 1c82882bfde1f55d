import random

import pytest

from emojicrush.components.special_kind import SpecialKind
from emojicrush.systems.board_ops import create_special_tile
from emojicrush.systems.match import find_matches
from emojicrush.systems.specials import activate_special, plan_special_tiles, special_effect
from tests.helpers import KINDS, board_from, diagonal_layout, registry


def _board_with(tile, positions, size=6):
    layout = diagonal_layout(size)
    for row, col in positions:
        layout[row][col] = tile
    return board_from(layout)


def test_three_in_a_row_creates_nothing():
    board = _board_with('D', [(0, 0), (0, 1), (0, 2)])
    assert plan_special_tiles(find_matches(board, registry())) == []


def test_four_in_a_row_creates_striped_in_the_middle():
    board = _board_with('D', [(3, 1), (3, 2), (3, 3), (3, 4)])
    planned = plan_special_tiles(find_matches(board, registry()))
    assert [(p.kind, p.position) for p in planned] == [(SpecialKind.STRIPED, (3, 3))]


def test_five_in_a_column_creates_rainbow():
    board = _board_with('E', [(r, 2) for r in range(5)])
    planned = plan_special_tiles(find_matches(board, registry()))
    assert [(p.kind, p.position) for p in planned] == [(SpecialKind.RAINBOW, (2, 2))]


def test_shaped_match_creates_bomb_at_intersection():
    board = _board_with('D', [(0, 0), (0, 1), (0, 2), (1, 0), (2, 0)])
    planned = plan_special_tiles(find_matches(board, registry()))
    assert [(p.kind, p.position) for p in planned] == [(SpecialKind.BOMB, (0, 0))]
    assert planned[0].source.is_shaped


def test_bomb_area_is_clipped_at_the_edge():
    board = board_from(diagonal_layout(5))
    reg = registry()
    rng = random.Random(0)
    assert len(special_effect(board, (0, 0), SpecialKind.BOMB, reg, rng)) == 4
    assert sorted(special_effect(board, (2, 2), SpecialKind.BOMB, reg, rng)) == [
        (r, c) for r in range(1, 4) for c in range(1, 4)
    ]


def test_striped_clears_a_full_row_or_column():
    board = board_from(diagonal_layout(5))
    reg = registry()
    rng = random.Random(4)
    for _ in range(10):
        cleared = special_effect(board, (1, 3), SpecialKind.STRIPED, reg, rng)
        assert len(cleared) == 5
        assert (1, 3) in cleared
        rows = {r for r, _ in cleared}
        cols = {c for _, c in cleared}
        assert rows == {1} or cols == {3}


def test_rainbow_clears_every_tile_of_one_present_kind():
    board = board_from(diagonal_layout(6))
    reg = registry()
    cleared = special_effect(board, (0, 0), SpecialKind.RAINBOW, reg, random.Random(2))
    kinds = {board.cells[r][c] for r, c in cleared}
    assert len(kinds) == 1
    (kind,) = kinds
    assert kind in KINDS
    assert len(cleared) == sum(row.count(kind) for row in board.cells)


def test_unknown_special_kind_is_rejected():
    board = board_from(diagonal_layout(3))
    with pytest.raises(ValueError):
        special_effect(board, (0, 0), "laser", registry(), random.Random(0))


def test_activating_a_plain_tile_does_nothing():
    board = board_from(diagonal_layout(4))
    activation = activate_special(board, (1, 1), registry(), random.Random(0))
    assert activation.affected == ()
    assert activation.triggered == ()


def test_bomb_chains_into_striped_tile():
    reg = registry()
    board = board_from(diagonal_layout(6))
    create_special_tile(board, 2, 2, SpecialKind.BOMB, reg)
    create_special_tile(board, 3, 3, SpecialKind.STRIPED, reg)
    activation = activate_special(board, (2, 2), reg, random.Random(1))
    assert activation.triggered[0] == ((2, 2), SpecialKind.BOMB)
    assert ((3, 3), SpecialKind.STRIPED) in activation.triggered
    assert activation.affected[0] == (2, 2)
    # The striped line reaches past the bomb's 3x3 area.
    assert len(activation.affected) > 9


def test_specials_covering_each_other_fire_once():
    reg = registry()
    board = board_from(diagonal_layout(6))
    create_special_tile(board, 2, 2, SpecialKind.BOMB, reg)
    create_special_tile(board, 2, 3, SpecialKind.BOMB, reg)
    create_special_tile(board, 3, 2, SpecialKind.BOMB, reg)
    activation = activate_special(board, (2, 2), reg, random.Random(0))
    fired = [pos for pos, _ in activation.triggered]
    assert sorted(fired) == [(2, 2), (2, 3), (3, 2)]
    assert len(activation.affected) == len(set(activation.affected))
    # Activation only reports; the board is untouched.
    assert board.cells[2][2] == reg.symbol_for(SpecialKind.BOMB)
