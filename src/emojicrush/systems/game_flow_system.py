"""Level and game lifecycle: loading levels, win/loss evaluation, pause and timers."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, Optional

from esper import World

from emojicrush.components.game_state import GameMode, PlayMode
from emojicrush.components.level_config import LevelConfig
from emojicrush.components.power_up_inventory import PowerUpKind
from emojicrush.constants import LEVEL_MOVE_BONUS, LEVEL_TIME_BONUS, REPAIR_PASS_LIMIT, TIMED_MODE_SECONDS
from emojicrush.events.bus import (
    EventBus,
    EVENT_GAME_OVER,
    EVENT_LEVEL_COMPLETED,
    EVENT_LEVEL_LOADED,
    EVENT_NO_MOVES_REMAINING,
    EVENT_POWER_UP_USED,
    EVENT_TICK,
    EVENT_TILE_SWAP_VALID,
)
from emojicrush.systems.board_ops import find_possible_moves, get_board, get_tile_registry, init_board
from emojicrush.utils.game_state import get_game_state, set_game_mode
from emojicrush.utils.session import (
    get_combo,
    get_history,
    get_inventory,
    get_level_config,
    get_session,
    get_stats,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LevelResult:
    level: int
    score: int
    bonus: int
    stars: int
    is_high_score: bool


@dataclass(frozen=True, slots=True)
class Progress:
    score: int
    goal: int
    level: int
    moves_remaining: int
    time_left: float
    percentage: float
    combo: int
    power_ups: Dict[PowerUpKind, int]
    mode: GameMode


class GameFlowSystem:
    """Evaluates the level after every settled action.

    Checks, in order, once a swap or power-up settles:
      - goal score reached (and any clear requirement met) -> level complete;
      - move budget spent -> game over ``out_of_moves``;
      - no swap can make a match -> EVENT_NO_MOVES_REMAINING, or game over
        ``no_moves`` when no shuffle is left to unstick the board.
    Timed play counts ``time_left`` down on EVENT_TICK.
    """

    def __init__(self, world: World, event_bus: EventBus, *, rng: random.Random | None = None) -> None:
        self.world = world
        self.event_bus = event_bus
        self.random = rng or getattr(world, "random", None) or random.Random()
        self._banked_score = 0
        self.event_bus.subscribe(EVENT_TILE_SWAP_VALID, self._on_action_settled)
        self.event_bus.subscribe(EVENT_POWER_UP_USED, self._on_action_settled)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_action_settled(self, sender, **payload) -> None:
        self.check_game_end()

    def on_tick(self, sender, **payload) -> None:
        dt = payload.get("dt", 0.0)
        session = get_session(self.world)
        if get_game_state(self.world).mode is not GameMode.PLAYING or session.time_left <= 0:
            return
        session.time_left = max(0.0, session.time_left - dt)
        if session.time_left == 0.0:
            self.end_game("time_up")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_new_game(
        self,
        play_mode: PlayMode = PlayMode.NORMAL,
        level: Optional[LevelConfig] = None,
    ) -> None:
        state = get_game_state(self.world)
        state.play_mode = play_mode
        session = get_session(self.world)
        session.score = 0
        self._banked_score = 0
        get_inventory(self.world).refill()
        get_stats(self.world).games_played += 1
        self.load_level(level or LevelConfig())
        logger.info("New %s game started", play_mode.value)

    def load_level(self, config: LevelConfig) -> None:
        self._replace_level_config(config)
        session = get_session(self.world)
        session.level = config.level
        session.goal = config.goal
        session.moves_remaining = config.moves
        session.time_left = float(config.time_limit)
        session.cleared = {}
        if session.time_left <= 0 and get_game_state(self.world).play_mode is PlayMode.TIMED:
            session.time_left = float(TIMED_MODE_SECONDS)
        get_combo(self.world).reset()
        get_history(self.world).clear()
        registry = get_tile_registry(self.world)
        init_board(
            get_board(self.world),
            registry.all_kinds(),
            self.random,
            repair_limit=getattr(self.world, "repair_limit", REPAIR_PASS_LIMIT),
        )
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        logger.info("Level %d loaded: goal=%d moves=%d", config.level, config.goal, config.moves)
        self.event_bus.emit(
            EVENT_LEVEL_LOADED,
            level=config.level,
            goal=config.goal,
            moves=config.moves,
            time_limit=int(session.time_left),
        )

    def restart_level(self) -> None:
        self.load_level(get_level_config(self.world))

    def next_level(self, config: LevelConfig) -> None:
        self.load_level(config)

    def pause(self) -> bool:
        if get_game_state(self.world).mode is not GameMode.PLAYING:
            return False
        set_game_mode(self.world, self.event_bus, GameMode.PAUSED)
        return True

    def resume(self) -> bool:
        if get_game_state(self.world).mode is not GameMode.PAUSED:
            return False
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        return True

    # ------------------------------------------------------------------
    # Win / loss evaluation
    # ------------------------------------------------------------------

    def check_game_end(self) -> Optional[str]:
        """Return "level_complete", a game-over reason, or None while play continues."""
        state = get_game_state(self.world)
        if state.mode is not GameMode.PLAYING:
            return None
        session = get_session(self.world)
        if session.score >= session.goal and self._requirements_met():
            self.complete_level()
            return "level_complete"
        if state.play_mode is not PlayMode.ENDLESS and session.moves_remaining <= 0:
            self.end_game("out_of_moves")
            return "out_of_moves"
        if not find_possible_moves(get_board(self.world), get_tile_registry(self.world)):
            shuffles = get_inventory(self.world).available(PowerUpKind.SHUFFLE)
            if shuffles <= 0:
                self.end_game("no_moves")
                return "no_moves"
            self.event_bus.emit(EVENT_NO_MOVES_REMAINING, shuffles_left=shuffles)
        return None

    def complete_level(self) -> LevelResult:
        session = get_session(self.world)
        stats = get_stats(self.world)
        config = get_level_config(self.world)
        bonus = session.moves_remaining * LEVEL_MOVE_BONUS + int(session.time_left) * LEVEL_TIME_BONUS
        session.score += bonus
        stats.levels_completed += 1
        self._bank_score()
        is_high_score = session.score > stats.best_score
        stats.best_score = max(stats.best_score, session.score)
        result = LevelResult(
            level=session.level,
            score=session.score,
            bonus=bonus,
            stars=config.stars_for(session.score),
            is_high_score=is_high_score,
        )
        set_game_mode(self.world, self.event_bus, GameMode.LEVEL_COMPLETE)
        logger.info("Level %d complete: score=%d stars=%d", result.level, result.score, result.stars)
        self.event_bus.emit(EVENT_LEVEL_COMPLETED, result=result)
        return result

    def end_game(self, reason: str) -> None:
        session = get_session(self.world)
        stats = get_stats(self.world)
        self._bank_score()
        stats.best_score = max(stats.best_score, session.score)
        set_game_mode(self.world, self.event_bus, GameMode.GAME_OVER)
        logger.info("Game over (%s) at level %d with %d points", reason, session.level, session.score)
        self.event_bus.emit(EVENT_GAME_OVER, reason=reason, final_score=session.score, level=session.level)

    def progress(self) -> Progress:
        session = get_session(self.world)
        percentage = min(session.score / session.goal * 100, 100.0) if session.goal > 0 else 100.0
        return Progress(
            score=session.score,
            goal=session.goal,
            level=session.level,
            moves_remaining=session.moves_remaining,
            time_left=session.time_left,
            percentage=percentage,
            combo=get_combo(self.world).multiplier,
            power_ups=dict(get_inventory(self.world).counts),
            mode=get_game_state(self.world).mode,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _requirements_met(self) -> bool:
        requirement = get_level_config(self.world).clear_specific
        if requirement is None:
            return True
        return get_session(self.world).cleared.get(requirement.tile, 0) >= requirement.count

    def _bank_score(self) -> None:
        """Add the score earned since the last bank to the lifetime total."""
        score = get_session(self.world).score
        get_stats(self.world).total_score += score - self._banked_score
        self._banked_score = score

    def _replace_level_config(self, config: LevelConfig) -> None:
        for entity, _ in self.world.get_component(LevelConfig):
            self.world.add_component(entity, config)
            return
        self.world.create_entity(config)
