from emojicrush.components.game_state import PlayMode
from emojicrush.events.bus import EVENT_MATCH_FOUND, EVENT_TILE_SWAP_INVALID
from emojicrush.systems.board_ops import snapshot_board
from emojicrush.systems.cascade import SwapRejection
from emojicrush.utils.session import get_history
from tests.helpers import diagonal_layout, make_engine, single_match_layout


def test_swap_without_match_is_reverted():
    engine = make_engine(diagonal_layout(6))
    before = snapshot_board(engine.board)
    captured = {}
    engine.event_bus.subscribe(EVENT_TILE_SWAP_INVALID, lambda s, **k: captured.update(k))
    outcome = engine.try_swap((0, 0), (0, 1))
    assert not outcome.accepted
    assert outcome.reason is SwapRejection.NO_MATCH
    assert snapshot_board(engine.board) == before
    assert engine.session.moves_remaining == 30
    assert captured['reason'] is SwapRejection.NO_MATCH
    assert len(get_history(engine.world)) == 0


def test_non_adjacent_swap_is_rejected():
    engine = make_engine(single_match_layout())
    outcome = engine.try_swap((3, 2), (5, 2))
    assert outcome.reason is SwapRejection.NOT_ADJACENT


def test_out_of_bounds_swap_is_rejected():
    engine = make_engine(single_match_layout())
    outcome = engine.try_swap((0, 0), (0, -1))
    assert outcome.reason is SwapRejection.OUT_OF_BOUNDS


def test_swap_with_no_moves_left_is_rejected():
    engine = make_engine(single_match_layout(), moves=0)
    outcome = engine.try_swap((4, 2), (5, 2))
    assert outcome.reason is SwapRejection.NO_MOVES_LEFT
    assert engine.session.score == 0


def test_endless_mode_ignores_the_move_budget():
    engine = make_engine(single_match_layout(), moves=0, play_mode=PlayMode.ENDLESS)
    outcome = engine.try_swap((4, 2), (5, 2))
    assert outcome.accepted
    assert engine.session.moves_remaining == 0


def test_swap_while_paused_is_rejected():
    engine = make_engine(single_match_layout())
    assert engine.game_flow_system.pause()
    outcome = engine.try_swap((4, 2), (5, 2))
    assert outcome.reason is SwapRejection.NOT_PLAYING
    assert engine.game_flow_system.resume()
    assert engine.try_swap((4, 2), (5, 2)).accepted


def test_swap_requested_during_cascade_is_busy():
    engine = make_engine(single_match_layout())
    nested = []

    def swap_again(sender, **payload):
        if not nested:
            nested.append(engine.try_swap((0, 0), (0, 1)))

    engine.event_bus.subscribe(EVENT_MATCH_FOUND, swap_again)
    outcome = engine.try_swap((4, 2), (5, 2))
    assert outcome.accepted
    assert nested[0].reason is SwapRejection.BUSY
    assert not engine.session.cascade_active
