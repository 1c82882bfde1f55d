"""Game state resource describing the active high-level mode."""
from dataclasses import dataclass
from enum import Enum, auto


class GameMode(Enum):
    """High-level modes that gate which operations are accepted."""
    MENU = auto()
    PLAYING = auto()
    PAUSED = auto()
    LEVEL_COMPLETE = auto()
    GAME_OVER = auto()


class PlayMode(Enum):
    NORMAL = "normal"
    TIMED = "timed"
    ENDLESS = "endless"


@dataclass
class GameState:
    """Singleton component storing the current mode and play mode."""
    mode: GameMode = GameMode.PLAYING
    play_mode: PlayMode = PlayMode.NORMAL
