"""Emoji Crush simulation core.

Module-level helpers wrap a ``CrushEngine`` for hosts that prefer plain calls
over wiring systems to an event bus themselves.
"""
from __future__ import annotations

import random
from typing import Any, List, Optional, Tuple

from emojicrush.components.power_up_inventory import PowerUpKind
from emojicrush.components.special_kind import SpecialKind
from emojicrush.constants import GRID_SIZE
from emojicrush.engine import CrushEngine
from emojicrush.systems.cascade import SwapOutcome, SwapRejection
from emojicrush.systems.hint import Hint
from emojicrush.systems.power_ups import PowerUpOutcome, PowerUpRejection

Position = Tuple[int, int]

__all__ = [
    "CrushEngine",
    "Hint",
    "PowerUpKind",
    "PowerUpOutcome",
    "PowerUpRejection",
    "SpecialKind",
    "SwapOutcome",
    "SwapRejection",
    "apply_power_up",
    "hint",
    "new_grid",
    "possible_moves",
    "try_swap",
]


def new_grid(size: int = GRID_SIZE, rng_seed: Optional[int] = None, **options: Any) -> CrushEngine:
    """Create a game with a freshly generated ``size`` x ``size`` board."""
    return CrushEngine(rng=random.Random(rng_seed), size=size, **options)


def try_swap(engine: CrushEngine, pos1: Position, pos2: Position) -> SwapOutcome:
    return engine.try_swap(pos1, pos2)


def apply_power_up(engine: CrushEngine, kind: PowerUpKind | str, target: Optional[Position] = None) -> PowerUpOutcome:
    return engine.apply_power_up(kind, target)


def possible_moves(engine: CrushEngine) -> List[Tuple[Position, Position]]:
    return engine.possible_moves()


def hint(engine: CrushEngine) -> Optional[Hint]:
    return engine.hint()
