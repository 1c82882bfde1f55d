from emojicrush.components.combo_state import ComboState
from emojicrush.systems.match import find_matches
from emojicrush.systems.scoring import points_per_tile, score_step
from emojicrush.systems.specials import plan_special_tiles
from tests.helpers import board_from, diagonal_layout, registry


def _scan(tile, positions, size=6):
    layout = diagonal_layout(size)
    for row, col in positions:
        layout[row][col] = tile
    matches = find_matches(board_from(layout), registry())
    return matches, plan_special_tiles(matches)


def test_single_run_of_three_at_base_multiplier():
    matches, specials = _scan('D', [(4, 0), (4, 1), (4, 2)])
    score = score_step(matches, specials, 1)
    assert (score.base, score.special_bonus, score.total) == (30, 0, 30)


def test_vertical_four_with_striped_at_double_combo():
    matches, specials = _scan('E', [(r, 5) for r in range(4)])
    assert len(specials) == 1
    score = score_step(matches, specials, 2)
    assert score.base == 80
    assert score.special_bonus == 100
    assert score.total == 360


def test_shaped_match_scores_its_five_cells():
    matches, specials = _scan('D', [(0, 0), (0, 1), (0, 2), (1, 0), (2, 0)])
    shaped = [m for m in matches if m.is_shaped]
    assert points_per_tile(shaped[0]) == 25
    assert score_step(shaped, [], 1).base == 125
    assert len(specials) == 1


def test_cells_shared_by_runs_and_shape_score_every_time():
    matches, specials = _scan('D', [(0, 0), (0, 1), (0, 2), (1, 0), (2, 0)])
    # Two runs of three plus the shape built from them, with one bomb.
    score = score_step(matches, specials, 1)
    assert score.base == 30 + 30 + 125
    assert score.total == 285


def test_long_runs_pay_more_per_tile():
    four, _ = _scan('D', [(1, 0), (1, 1), (1, 2), (1, 3)])
    five, _ = _scan('D', [(1, 0), (1, 1), (1, 2), (1, 3), (1, 4)])
    assert points_per_tile(four[0]) == 20
    assert points_per_tile(five[0]) == 50


def test_combo_advances_before_scoring_and_caps():
    combo = ComboState(max_multiplier=3)
    assert combo.advance(True) == 2
    assert combo.advance(True) == 3
    assert combo.advance(True) == 3
    assert combo.advance(False) == 1
    combo.advance(True)
    combo.reset()
    assert combo.multiplier == 1
