from emojicrush.components.game_state import GameMode, PlayMode
from emojicrush.components.level_config import ClearRequirement, LevelConfig
from emojicrush.components.power_up_inventory import PowerUpKind
from emojicrush.events.bus import (
    EVENT_GAME_OVER,
    EVENT_LEVEL_COMPLETED,
    EVENT_LEVEL_LOADED,
    EVENT_NO_MOVES_REMAINING,
)
from emojicrush.utils.game_state import get_game_state
from emojicrush.utils.session import get_history, get_level_config, get_stats
from tests.helpers import diagonal_layout, make_engine, single_match_layout


def _mode(engine):
    return get_game_state(engine.world).mode


def test_reaching_the_goal_completes_the_level_with_bonus():
    engine = make_engine(single_match_layout(), goal=10, moves=5)
    captured = {}
    engine.event_bus.subscribe(EVENT_LEVEL_COMPLETED, lambda s, **k: captured.update(k))
    outcome = engine.try_swap((4, 2), (5, 2))
    result = captured['result']
    assert result.bonus == 4 * 50
    assert result.score == outcome.total_score + 200
    assert result.stars == 3
    assert result.is_high_score
    assert _mode(engine) is GameMode.LEVEL_COMPLETE
    assert get_stats(engine.world).levels_completed == 1
    assert get_stats(engine.world).best_score == result.score


def test_clear_requirement_holds_back_completion():
    engine = make_engine(single_match_layout())
    engine.game_flow_system.load_level(
        LevelConfig(goal=10, moves=5, clear_specific=ClearRequirement(tile='Z', count=5))
    )
    engine.session.score = 50
    assert engine.game_flow_system.check_game_end() is None
    assert _mode(engine) is GameMode.PLAYING
    engine.session.record_cleared('Z', 5)
    assert engine.game_flow_system.check_game_end() == 'level_complete'


def test_spending_the_last_move_ends_the_game():
    engine = make_engine(single_match_layout(), goal=100000, moves=1)
    captured = {}
    engine.event_bus.subscribe(EVENT_GAME_OVER, lambda s, **k: captured.update(k))
    engine.try_swap((4, 2), (5, 2))
    assert captured['reason'] == 'out_of_moves'
    assert captured['final_score'] == engine.session.score
    assert _mode(engine) is GameMode.GAME_OVER


def test_stuck_board_asks_for_a_shuffle_then_ends():
    engine = make_engine(diagonal_layout(6))
    stuck = {}
    engine.event_bus.subscribe(EVENT_NO_MOVES_REMAINING, lambda s, **k: stuck.update(k))
    assert engine.game_flow_system.check_game_end() is None
    assert stuck['shuffles_left'] == 2

    engine = make_engine(diagonal_layout(6), power_ups={PowerUpKind.SHUFFLE: 0})
    assert engine.game_flow_system.check_game_end() == 'no_moves'
    assert _mode(engine) is GameMode.GAME_OVER


def test_timed_game_ends_when_the_clock_runs_out():
    engine = make_engine(diagonal_layout(6))
    engine.game_flow_system.start_new_game(PlayMode.TIMED)
    captured = {}
    engine.event_bus.subscribe(EVENT_GAME_OVER, lambda s, **k: captured.update(k))
    assert engine.session.time_left == 60
    engine.tick(30.0)
    assert engine.session.time_left == 30
    assert _mode(engine) is GameMode.PLAYING
    engine.tick(45.0)
    assert engine.session.time_left == 0
    assert captured['reason'] == 'time_up'


def test_paused_game_does_not_tick():
    engine = make_engine(diagonal_layout(6))
    engine.game_flow_system.load_level(LevelConfig(time_limit=20))
    engine.game_flow_system.pause()
    engine.tick(5.0)
    assert engine.session.time_left == 20
    assert not engine.game_flow_system.pause()
    assert engine.game_flow_system.resume()
    assert not engine.game_flow_system.resume()


def test_load_level_resets_the_session():
    engine = make_engine(single_match_layout())
    engine.try_swap((4, 2), (5, 2))
    loaded = {}
    engine.event_bus.subscribe(EVENT_LEVEL_LOADED, lambda s, **k: loaded.update(k))
    config = LevelConfig(level=2, goal=500, moves=12)
    engine.game_flow_system.next_level(config)
    assert loaded == {'level': 2, 'goal': 500, 'moves': 12, 'time_limit': 0}
    assert engine.session.moves_remaining == 12
    assert engine.session.goal == 500
    assert len(get_history(engine.world)) == 0
    assert get_level_config(engine.world) is config
    engine.session.moves_remaining = 3
    engine.game_flow_system.restart_level()
    assert engine.session.moves_remaining == 12


def test_new_game_resets_score_and_power_ups():
    engine = make_engine(single_match_layout(), power_ups={PowerUpKind.HAMMER: 0})
    engine.session.score = 400
    engine.game_flow_system.start_new_game()
    assert engine.session.score == 0
    assert engine.apply_power_up(PowerUpKind.HAMMER, (0, 0)).applied
    assert get_stats(engine.world).games_played == 1


def test_progress_reports_percentage_of_goal():
    engine = make_engine(diagonal_layout(6), goal=200)
    engine.session.score = 50
    progress = engine.game_flow_system.progress()
    assert progress.percentage == 25.0
    assert progress.mode is GameMode.PLAYING
    assert progress.power_ups[PowerUpKind.UNDO] == 5


def test_star_thresholds_follow_goal():
    config = LevelConfig(goal=1000)
    assert config.star_thresholds == (600, 800, 1000)
    assert [config.stars_for(s) for s in (0, 600, 850, 1200)] == [0, 1, 2, 3]
    assert LevelConfig(star_thresholds=(1, 2, 3)).stars_for(2) == 2


def test_clear_requirement_counts_only_the_current_level():
    engine = make_engine(single_match_layout())
    engine.session.record_cleared('A', 20)
    get_stats(engine.world).record_cleared('A', 20)
    engine.game_flow_system.next_level(
        LevelConfig(level=2, goal=10, moves=5, clear_specific=ClearRequirement(tile='A', count=10))
    )
    engine.session.score = 50
    assert engine.session.cleared == {}
    assert engine.game_flow_system.check_game_end() is None
    assert _mode(engine) is GameMode.PLAYING


def test_undo_takes_back_the_level_clears():
    engine = make_engine(single_match_layout(), goal=100000)
    assert engine.try_swap((4, 2), (5, 2)).accepted
    assert engine.session.cleared['D'] >= 3
    assert engine.apply_power_up(PowerUpKind.UNDO).applied
    assert engine.session.cleared == {}
    assert get_stats(engine.world).cleared['D'] >= 3


def test_lifetime_total_counts_each_point_once():
    engine = make_engine(single_match_layout(), goal=10, moves=5)
    engine.try_swap((4, 2), (5, 2))
    assert _mode(engine) is GameMode.LEVEL_COMPLETE
    first_level = engine.session.score
    assert get_stats(engine.world).total_score == first_level
    engine.game_flow_system.next_level(LevelConfig(level=2, goal=100000, moves=5))
    engine.game_flow_system.end_game('out_of_moves')
    assert engine.session.score == first_level
    assert get_stats(engine.world).total_score == first_level
