from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from esper import World

from emojicrush.components.board import Board
from emojicrush.components.power_up_inventory import PowerUpKind
from emojicrush.components.session import Session
from emojicrush.components.tile_types import TileTypes
from emojicrush.events.bus import EVENT_TICK, EventBus
from emojicrush.systems.board_ops import find_possible_moves, get_board, get_tile_registry, restore_board, snapshot_board
from emojicrush.systems.cascade import CascadeSystem, SwapOutcome
from emojicrush.systems.game_flow_system import GameFlowSystem
from emojicrush.systems.hint import Hint, find_hint
from emojicrush.systems.power_ups import PowerUpOutcome, PowerUpSystem
from emojicrush.utils.game_state import get_game_state
from emojicrush.utils.session import get_combo, get_inventory, get_session
from emojicrush.world import create_world

logger = logging.getLogger(__name__)

Position = Tuple[int, int]
Move = Tuple[Position, Position]


class CrushEngine:
    """One game: a world, its event bus and the systems that act on it.

    All systems share the bus, so a host can subscribe to any event before
    calling ``try_swap`` or ``apply_power_up``.
    """

    def __init__(self, event_bus: EventBus | None = None, *, rng: random.Random | None = None, **world_options: Any):
        self.event_bus = event_bus or EventBus()
        self.random = rng or random.Random()
        self.world: World = create_world(self.event_bus, rng=self.random, **world_options)
        self.cascade_system = CascadeSystem(self.world, self.event_bus, rng=self.random)
        self.power_up_system = PowerUpSystem(self.world, self.event_bus, self.cascade_system, rng=self.random)
        self.game_flow_system = GameFlowSystem(self.world, self.event_bus, rng=self.random)
        logger.debug("Engine ready: %dx%d board", self.board.size, self.board.size)

    @property
    def board(self) -> Board:
        return get_board(self.world)

    @property
    def registry(self) -> TileTypes:
        return get_tile_registry(self.world)

    @property
    def session(self) -> Session:
        return get_session(self.world)

    def try_swap(self, src: Position, dst: Position) -> SwapOutcome:
        return self.cascade_system.try_swap(src, dst)

    def apply_power_up(self, kind: PowerUpKind | str, target: Optional[Position] = None) -> PowerUpOutcome:
        return self.power_up_system.apply_power_up(PowerUpKind(kind), target)

    def possible_moves(self) -> List[Move]:
        return find_possible_moves(self.board, self.registry)

    def hint(self) -> Optional[Hint]:
        return find_hint(self.board, self.registry)

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    def get_state(self) -> Dict[str, Any]:
        """Plain-data view of the game for hosts that save or display it."""
        session = self.session
        return {
            "board": [list(row) for row in snapshot_board(self.board)],
            "score": session.score,
            "moves_remaining": session.moves_remaining,
            "goal": session.goal,
            "level": session.level,
            "time_left": session.time_left,
            "combo": get_combo(self.world).multiplier,
            "power_ups": {kind.value: count for kind, count in get_inventory(self.world).counts.items()},
            "mode": get_game_state(self.world).mode.name,
        }

    def set_state(self, state: Dict[str, Any]) -> None:
        session = self.session
        if "board" in state:
            restore_board(self.board, state["board"])
        session.score = state.get("score", session.score)
        session.moves_remaining = state.get("moves_remaining", session.moves_remaining)
        session.goal = state.get("goal", session.goal)
        session.level = state.get("level", session.level)
        session.time_left = state.get("time_left", session.time_left)
        get_combo(self.world).multiplier = state.get("combo", 1)
        if "power_ups" in state:
            inventory = get_inventory(self.world)
            for name, count in state["power_ups"].items():
                inventory.counts[PowerUpKind(name)] = count
