from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from esper import World

from emojicrush.components.game_state import GameMode
from emojicrush.components.power_up_inventory import PowerUpKind
from emojicrush.constants import REPAIR_PASS_LIMIT
from emojicrush.events.bus import (
    EventBus,
    EVENT_BOARD_SHUFFLED,
    EVENT_GRAVITY_APPLIED,
    EVENT_MOVE_UNDONE,
    EVENT_POWER_UP_USED,
    EVENT_REFILL_COMPLETED,
    EVENT_SCORE_CHANGED,
    EVENT_SPECIAL_ACTIVATED,
)
from emojicrush.systems.board_ops import (
    apply_gravity,
    fill_empty,
    get_board,
    get_tile_registry,
    is_valid_position,
    remove_tiles,
    restore_board,
    shuffle_board,
)
from emojicrush.systems.cascade import CascadeStep, CascadeSystem
from emojicrush.systems.specials import Activation, activate_special
from emojicrush.utils.game_state import get_game_state
from emojicrush.utils.session import get_combo, get_history, get_inventory, get_session, get_stats

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class PowerUpRejection(Enum):
    NOT_PLAYING = "not_playing"
    BUSY = "busy"
    NONE_LEFT = "none_left"
    INVALID_TARGET = "invalid_target"
    NOTHING_TO_UNDO = "nothing_to_undo"


@dataclass(slots=True)
class PowerUpOutcome:
    kind: PowerUpKind
    applied: bool
    reason: Optional[PowerUpRejection] = None
    target: Optional[Position] = None
    removed_positions: List[Position] = field(default_factory=list)
    activation: Optional[Activation] = None
    steps: List[CascadeStep] = field(default_factory=list)
    score_delta: int = 0
    remaining: int = 0


class PowerUpSystem:
    """Applies hammer, shuffle and undo outside the swap validation path.

    The hammer clears one cell (or fires the special sitting there), then
    gravity, refill and any cascade the refill set up. Shuffle never cascades.
    Undo restores the latest history snapshot as-is.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        cascade_system: CascadeSystem,
        rng: random.Random | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.cascade_system = cascade_system
        self.random = rng or getattr(world, "random", None) or random.Random()

    def apply_power_up(self, kind: PowerUpKind, target: Optional[Position] = None) -> PowerUpOutcome:
        inventory = get_inventory(self.world)
        reason = self._precheck(kind)
        if reason is not None:
            return self._reject(kind, target, reason)
        session = get_session(self.world)
        session.cascade_active = True
        try:
            if kind is PowerUpKind.HAMMER:
                outcome = self._hammer(target)
            elif kind is PowerUpKind.SHUFFLE:
                outcome = self._shuffle()
            elif kind is PowerUpKind.UNDO:
                outcome = self._undo()
            else:
                raise ValueError(f"Unknown power-up {kind!r}")
        finally:
            session.cascade_active = False
        if not outcome.applied:
            return outcome
        inventory.consume(kind)
        outcome.remaining = inventory.available(kind)
        logger.debug("Power-up %s applied, %d left", kind.value, outcome.remaining)
        self.event_bus.emit(EVENT_POWER_UP_USED, kind=kind, target=outcome.target, remaining=outcome.remaining)
        return outcome

    def _hammer(self, target: Optional[Position]) -> PowerUpOutcome:
        board = get_board(self.world)
        if target is None or not is_valid_position(board, *target):
            return self._reject(PowerUpKind.HAMMER, target, PowerUpRejection.INVALID_TARGET)
        target = tuple(target)
        registry = get_tile_registry(self.world)
        stats = get_stats(self.world)
        session = get_session(self.world)

        activation: Optional[Activation] = None
        special_kind = registry.special_kind(board.cells[target[0]][target[1]])
        if special_kind is not None:
            activation = activate_special(board, target, registry, self.random)
            removed = list(activation.affected)
            self.event_bus.emit(
                EVENT_SPECIAL_ACTIVATED,
                kind=special_kind,
                position=target,
                affected=removed,
                triggered=list(activation.triggered),
            )
        else:
            removed = [target]
        for row, col in removed:
            tile = board.cells[row][col]
            if registry.is_basic(tile):
                stats.record_cleared(tile)
                session.record_cleared(tile)
        remove_tiles(board, removed)
        movements = apply_gravity(board)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=movements)
        refills = fill_empty(board, registry.all_kinds(), self.random)
        self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=refills)

        steps = self.cascade_system.resolve_cascade()
        return PowerUpOutcome(
            kind=PowerUpKind.HAMMER,
            applied=True,
            target=target,
            removed_positions=removed,
            activation=activation,
            steps=steps,
            score_delta=sum(step.score.total for step in steps),
        )

    def _shuffle(self) -> PowerUpOutcome:
        board = get_board(self.world)
        registry = get_tile_registry(self.world)
        shuffle_board(
            board,
            registry.all_kinds(),
            self.random,
            repair_limit=getattr(self.world, "repair_limit", REPAIR_PASS_LIMIT),
        )
        self.event_bus.emit(EVENT_BOARD_SHUFFLED, reason="power_up")
        return PowerUpOutcome(kind=PowerUpKind.SHUFFLE, applied=True)

    def _undo(self) -> PowerUpOutcome:
        entry = get_history(self.world).pop()
        if entry is None:
            return self._reject(PowerUpKind.UNDO, None, PowerUpRejection.NOTHING_TO_UNDO)
        session = get_session(self.world)
        restore_board(get_board(self.world), entry.board)
        delta = entry.score - session.score
        session.score = entry.score
        session.moves_remaining = entry.moves_remaining
        get_combo(self.world).multiplier = entry.combo_multiplier
        session.cleared = dict(entry.cleared)
        self.event_bus.emit(EVENT_MOVE_UNDONE, score=session.score, moves_remaining=session.moves_remaining)
        if delta:
            self.event_bus.emit(EVENT_SCORE_CHANGED, score=session.score, delta=delta)
        return PowerUpOutcome(kind=PowerUpKind.UNDO, applied=True, score_delta=delta)

    def _precheck(self, kind: PowerUpKind) -> Optional[PowerUpRejection]:
        if get_game_state(self.world).mode is not GameMode.PLAYING:
            return PowerUpRejection.NOT_PLAYING
        if get_session(self.world).cascade_active:
            return PowerUpRejection.BUSY
        if get_inventory(self.world).available(kind) <= 0:
            return PowerUpRejection.NONE_LEFT
        return None

    def _reject(self, kind: PowerUpKind, target: Optional[Position], reason: PowerUpRejection) -> PowerUpOutcome:
        logger.debug("Power-up %s rejected: %s", kind.value, reason.value)
        return PowerUpOutcome(
            kind=kind,
            applied=False,
            reason=reason,
            target=target,
            remaining=get_inventory(self.world).available(kind),
        )
