from __future__ import annotations

from typing import Type, TypeVar

from esper import World

from emojicrush.components.combo_state import ComboState
from emojicrush.components.game_stats import GameStats
from emojicrush.components.level_config import LevelConfig
from emojicrush.components.move_history import MoveHistory
from emojicrush.components.power_up_inventory import PowerUpInventory
from emojicrush.components.session import Session

C = TypeVar("C")


def _singleton(world: World, component_type: Type[C]) -> C:
    for _, component in world.get_component(component_type):
        return component
    raise RuntimeError(f"{component_type.__name__} component not found")


def get_session(world: World) -> Session:
    return _singleton(world, Session)


def get_combo(world: World) -> ComboState:
    return _singleton(world, ComboState)


def get_history(world: World) -> MoveHistory:
    return _singleton(world, MoveHistory)


def get_inventory(world: World) -> PowerUpInventory:
    return _singleton(world, PowerUpInventory)


def get_stats(world: World) -> GameStats:
    return _singleton(world, GameStats)


def get_level_config(world: World) -> LevelConfig:
    return _singleton(world, LevelConfig)
