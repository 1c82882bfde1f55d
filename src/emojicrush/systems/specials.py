from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Sequence, Set, Tuple

from emojicrush.components.board import Board
from emojicrush.components.match import Match
from emojicrush.components.special_kind import SpecialKind, SpecialTileCreation
from emojicrush.components.tile_types import TileTypes
from emojicrush.systems.board_ops import get_tile, is_valid_position

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class Activation:
    """Result of triggering a special tile.

    affected: every position cleared by the origin and its chain reactions.
    triggered: (position, kind) of each special that fired, origin first.
    """
    affected: Tuple[Position, ...]
    triggered: Tuple[Tuple[Position, SpecialKind], ...]


def special_for_match(match: Match) -> Optional[SpecialKind]:
    if match.is_shaped:
        return SpecialKind.BOMB
    if match.length == 4:
        return SpecialKind.STRIPED
    if match.length >= 5:
        return SpecialKind.RAINBOW
    return None


def placement_for(match: Match) -> Optional[Position]:
    """Bombs go on the intersection, line specials on the middle cell of the run."""
    if match.is_shaped:
        return match.intersection
    if not match.positions:
        return None
    return match.positions[match.length // 2]


def plan_special_tiles(matches: Sequence[Match]) -> List[SpecialTileCreation]:
    """One creation per qualifying match, each judged on its own."""
    planned: List[SpecialTileCreation] = []
    for match in matches:
        kind = special_for_match(match)
        if kind is None:
            continue
        position = placement_for(match)
        if position is None:
            continue
        planned.append(SpecialTileCreation(kind=kind, position=position, source=match))
    return planned


def special_effect(
    board: Board,
    position: Position,
    kind: SpecialKind,
    registry: TileTypes,
    rng: random.Random,
) -> List[Position]:
    """Positions cleared when the special at ``position`` fires.

    Random choices (row or column, rainbow target) are made now, not when the
    special was created.
    """
    row, col = position
    size = board.size
    if kind is SpecialKind.STRIPED:
        if rng.random() < 0.5:
            return [(row, c) for c in range(size)]
        return [(r, col) for r in range(size)]
    if kind is SpecialKind.BOMB:
        return [
            (r, c)
            for r in range(row - 1, row + 2)
            for c in range(col - 1, col + 2)
            if is_valid_position(board, r, c)
        ]
    if kind is SpecialKind.RAINBOW:
        present = {tile for line in board.cells for tile in line}
        candidates = [tile for tile in registry.kinds if tile in present]
        if not candidates:
            return []
        target = rng.choice(candidates)
        return [
            (r, c)
            for r in range(size)
            for c in range(size)
            if board.cells[r][c] == target
        ]
    raise ValueError(f"Unknown special kind {kind!r}")


def activate_special(
    board: Board,
    position: Position,
    registry: TileTypes,
    rng: random.Random,
) -> Activation:
    """Fire the special at ``position`` and every special caught in its blast.

    Chain reactions run off a worklist; each special fires at most once, so
    specials whose areas cover each other cannot loop. The board is read but
    not modified.
    """
    kind = registry.special_kind(get_tile(board, *position))
    if kind is None:
        return Activation(affected=(), triggered=())
    affected: Dict[Position, None] = {position: None}
    triggered: List[Tuple[Position, SpecialKind]] = []
    visited: Set[Position] = {position}
    queue: Deque[Tuple[Position, SpecialKind]] = deque([(position, kind)])
    while queue:
        origin, origin_kind = queue.popleft()
        triggered.append((origin, origin_kind))
        for target in special_effect(board, origin, origin_kind, registry, rng):
            affected.setdefault(target, None)
            if target in visited:
                continue
            target_kind = registry.special_kind(get_tile(board, *target))
            if target_kind is not None:
                visited.add(target)
                queue.append((target, target_kind))
    if len(triggered) > 1:
        logger.debug("Special at %s chained into %d activations", position, len(triggered))
    return Activation(affected=tuple(affected), triggered=tuple(triggered))
