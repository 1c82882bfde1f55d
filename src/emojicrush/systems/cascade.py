from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from esper import World

from emojicrush.components.game_state import GameMode, PlayMode
from emojicrush.components.match import Match
from emojicrush.components.move_history import HistoryEntry
from emojicrush.components.special_kind import SpecialTileCreation
from emojicrush.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_COMBO_CHANGED,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_SCORE_CHANGED,
    EVENT_SPECIAL_CREATED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
)
from emojicrush.systems.board_ops import (
    GravityMove,
    RefillEntry,
    apply_gravity,
    are_adjacent,
    create_special_tile,
    fill_empty,
    find_possible_moves,
    get_board,
    get_tile_registry,
    is_valid_position,
    remove_tiles,
    snapshot_board,
    swap_tiles,
)
from emojicrush.systems.match import all_match_positions, find_matches
from emojicrush.systems.scoring import StepScore, score_step
from emojicrush.systems.specials import plan_special_tiles
from emojicrush.utils.game_state import get_game_state
from emojicrush.utils.session import get_combo, get_history, get_session, get_stats

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class SwapRejection(Enum):
    NOT_PLAYING = "not_playing"
    BUSY = "busy"
    OUT_OF_BOUNDS = "out_of_bounds"
    NOT_ADJACENT = "not_adjacent"
    NO_MOVES_LEFT = "no_moves_left"
    NO_MATCH = "no_match"


@dataclass(slots=True)
class CascadeStep:
    """Everything one match -> clear -> gravity -> refill round did, in order."""
    depth: int
    matches: List[Match]
    specials_created: List[SpecialTileCreation]
    removed_positions: List[Position]
    movements: List[GravityMove]
    refills: List[RefillEntry]
    score: StepScore


@dataclass(slots=True)
class SwapOutcome:
    accepted: bool
    src: Position
    dst: Position
    reason: Optional[SwapRejection] = None
    steps: List[CascadeStep] = field(default_factory=list)
    total_score: int = 0
    final_combo: int = 1
    moves_remaining: int = 0
    no_moves_remaining: bool = False


class CascadeSystem:
    """Validates swaps and resolves the cascades they start.

    Flow for an accepted swap:
      - snapshot the board for undo, apply the swap tentatively and scan;
      - with no match the swap is reverted and nothing else changes;
      - otherwise spend one move and loop scan -> score -> clear -> place
        specials -> gravity -> refill until a scan comes back empty.
    Each round is announced through EVENT_CASCADE_STEP so a renderer can pause
    between rounds; the loop itself never waits.
    """

    def __init__(self, world: World, event_bus: EventBus, rng: random.Random | None = None):
        self.world = world
        self.event_bus = event_bus
        self.random = rng or getattr(world, "random", None) or random.Random()
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.try_swap(src, dst)

    def try_swap(self, src: Position, dst: Position) -> SwapOutcome:
        src = tuple(src)
        dst = tuple(dst)
        session = get_session(self.world)
        reason = self._precheck(src, dst)
        if reason is not None:
            return self._reject(src, dst, reason)

        board = get_board(self.world)
        registry = get_tile_registry(self.world)
        snapshot = snapshot_board(board)
        swap_tiles(board, src, dst)
        if not find_matches(board, registry):
            swap_tiles(board, src, dst)
            return self._reject(src, dst, SwapRejection.NO_MATCH)

        combo = get_combo(self.world)
        get_history(self.world).push(HistoryEntry(
            board=snapshot,
            score=session.score,
            moves_remaining=session.moves_remaining,
            combo_multiplier=combo.multiplier,
            cleared=tuple(session.cleared.items()),
        ))
        if get_game_state(self.world).play_mode is not PlayMode.ENDLESS:
            session.moves_remaining -= 1
        logger.debug("Swap %s <-> %s accepted, %d moves left", src, dst, session.moves_remaining)

        steps = self.resolve_cascade()
        outcome = SwapOutcome(
            accepted=True,
            src=src,
            dst=dst,
            steps=steps,
            total_score=sum(step.score.total for step in steps),
            final_combo=combo.multiplier,
            moves_remaining=session.moves_remaining,
            no_moves_remaining=not find_possible_moves(board, registry),
        )
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst, outcome=outcome)
        return outcome

    def resolve_cascade(self) -> List[CascadeStep]:
        """Resolve matches on the board until it is stable; commit the accumulated score."""
        board = get_board(self.world)
        registry = get_tile_registry(self.world)
        session = get_session(self.world)
        combo = get_combo(self.world)
        stats = get_stats(self.world)
        steps: List[CascadeStep] = []
        was_active = session.cascade_active
        session.cascade_active = True
        try:
            matches = find_matches(board, registry)
            while matches:
                depth = len(steps) + 1
                steps.append(self._resolve_step(depth, matches))
                stats.total_matches += len(matches)
                stats.longest_combo = max(stats.longest_combo, combo.multiplier)
                matches = find_matches(board, registry)
            combo.advance(False)
        finally:
            session.cascade_active = was_active

        total = sum(step.score.total for step in steps)
        if steps:
            self.event_bus.emit(EVENT_COMBO_CHANGED, multiplier=combo.multiplier)
        if total:
            session.score += total
            self.event_bus.emit(EVENT_SCORE_CHANGED, score=session.score, delta=total)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=len(steps), total_score=total)
        return steps

    def _resolve_step(self, depth: int, matches: List[Match]) -> CascadeStep:
        board = get_board(self.world)
        registry = get_tile_registry(self.world)
        combo = get_combo(self.world)
        stats = get_stats(self.world)
        session = get_session(self.world)

        multiplier = combo.advance(True)
        self.event_bus.emit(EVENT_COMBO_CHANGED, multiplier=multiplier)
        specials = plan_special_tiles(matches)
        step_score = score_step(matches, specials, multiplier)
        positions = all_match_positions(matches)
        self.event_bus.emit(EVENT_MATCH_FOUND, matches=matches, positions=positions, depth=depth)

        typed = [(row, col, board.cells[row][col]) for row, col in positions]
        remove_tiles(board, positions)
        for _, _, tile in typed:
            if registry.is_basic(tile):
                stats.record_cleared(tile)
                session.record_cleared(tile)
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions, types=typed)

        for special in specials:
            row, col = special.position
            create_special_tile(board, row, col, special.kind, registry)
            self.event_bus.emit(EVENT_SPECIAL_CREATED, kind=special.kind, position=special.position)
        stats.total_specials += len(specials)

        movements = apply_gravity(board)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=movements)
        refills = fill_empty(board, registry.all_kinds(), self.random)
        self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=refills)

        step = CascadeStep(
            depth=depth,
            matches=matches,
            specials_created=specials,
            removed_positions=positions,
            movements=movements,
            refills=refills,
            score=step_score,
        )
        logger.debug(
            "Cascade step %d: %d matches, %d specials, %d points (x%d)",
            depth, len(matches), len(specials), step_score.total, multiplier,
        )
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth, step=step)
        return step

    def _precheck(self, src: Position, dst: Position) -> Optional[SwapRejection]:
        state = get_game_state(self.world)
        if state.mode is not GameMode.PLAYING:
            return SwapRejection.NOT_PLAYING
        session = get_session(self.world)
        if session.cascade_active:
            return SwapRejection.BUSY
        board = get_board(self.world)
        if not is_valid_position(board, *src) or not is_valid_position(board, *dst):
            return SwapRejection.OUT_OF_BOUNDS
        if not are_adjacent(src, dst):
            return SwapRejection.NOT_ADJACENT
        if state.play_mode is not PlayMode.ENDLESS and session.moves_remaining <= 0:
            return SwapRejection.NO_MOVES_LEFT
        return None

    def _reject(self, src: Position, dst: Position, reason: SwapRejection) -> SwapOutcome:
        session = get_session(self.world)
        logger.debug("Swap %s <-> %s rejected: %s", src, dst, reason.value)
        outcome = SwapOutcome(
            accepted=False,
            src=src,
            dst=dst,
            reason=reason,
            final_combo=get_combo(self.world).multiplier,
            moves_remaining=session.moves_remaining,
        )
        self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=reason)
        return outcome
