import random
from typing import Dict, Mapping, Sequence

from esper import World

from emojicrush.components.board import Board
from emojicrush.components.combo_state import ComboState
from emojicrush.components.game_state import GameMode, GameState, PlayMode
from emojicrush.components.game_stats import GameStats
from emojicrush.components.level_config import LevelConfig
from emojicrush.components.move_history import MoveHistory
from emojicrush.components.power_up_inventory import PowerUpInventory, PowerUpKind
from emojicrush.components.session import Session
from emojicrush.components.tile_type_registry import TileTypeRegistry
from emojicrush.components.tile_types import TileTypes
from emojicrush.constants import (
    DEFAULT_GOAL,
    DEFAULT_MOVES,
    DEFAULT_PALETTE,
    GRID_SIZE,
    HISTORY_LIMIT,
    MAX_COMBO_MULTIPLIER,
    MIN_TILE_KINDS,
    REPAIR_PASS_LIMIT,
    TILE_PALETTES,
)
from emojicrush.events.bus import EventBus
from emojicrush.systems.board_ops import init_board


def resolve_kinds(palette: str = DEFAULT_PALETTE, kinds: Sequence[str] | None = None) -> list[str]:
    if kinds is None:
        try:
            kinds = TILE_PALETTES[palette]
        except KeyError as exc:
            raise ValueError(f"Unknown palette '{palette}'") from exc
    resolved = list(dict.fromkeys(kinds))
    if len(resolved) < MIN_TILE_KINDS:
        raise ValueError(f"Need at least {MIN_TILE_KINDS} tile kinds, got {len(resolved)}")
    return resolved


def create_world(
    event_bus: EventBus,
    *,
    size: int = GRID_SIZE,
    rng: random.Random | None = None,
    palette: str = DEFAULT_PALETTE,
    kinds: Sequence[str] | None = None,
    moves: int = DEFAULT_MOVES,
    goal: int = DEFAULT_GOAL,
    power_ups: Mapping[PowerUpKind, int] | None = None,
    initial_mode: GameMode = GameMode.PLAYING,
    play_mode: PlayMode = PlayMode.NORMAL,
    max_combo: int = MAX_COMBO_MULTIPLIER,
    history_limit: int = HISTORY_LIMIT,
    repair_limit: int = REPAIR_PASS_LIMIT,
) -> World:
    """Build the singleton entities of one game: tile registry, board and session.

    The board is generated immediately from the shared ``world.random``.
    """
    world = World()
    rng = rng or random.Random()
    setattr(world, "random", rng)
    setattr(world, "repair_limit", repair_limit)

    registry = TileTypes(kinds=resolve_kinds(palette, kinds))
    world.create_entity(TileTypeRegistry(), registry)

    board = Board(size=size)
    init_board(board, registry.all_kinds(), rng, repair_limit=repair_limit)
    world.create_entity(board)

    inventory = PowerUpInventory()
    if power_ups is not None:
        counts: Dict[PowerUpKind, int] = {kind: 0 for kind in PowerUpKind}
        counts.update(power_ups)
        inventory.counts = counts
    world.create_entity(
        Session(moves_remaining=moves, goal=goal),
        ComboState(max_multiplier=max_combo),
        MoveHistory(limit=history_limit),
        inventory,
        GameStats(),
        GameState(mode=initial_mode, play_mode=play_mode),
        LevelConfig(goal=goal, moves=moves),
    )
    return world
