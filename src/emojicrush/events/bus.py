from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# SWAPS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(r,c), dst=(r,c), outcome=SwapOutcome
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(r,c), dst=(r,c), reason=SwapRejection


# ============================================================================
# MATCHES & CASCADES
# ============================================================================
EVENT_MATCH_FOUND = "match_found"                  # payload: matches=list[Match], positions=[(r,c),...], depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], types=[(r,c,tile),...]
EVENT_SPECIAL_CREATED = "special_created"          # payload: kind=SpecialKind, position=(r,c)
EVENT_SPECIAL_ACTIVATED = "special_activated"      # payload: kind=SpecialKind, position=(r,c), affected=[(r,c),...], triggered=list
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=list[GravityMove]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=list[RefillEntry]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, step=CascadeStep
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, total_score=int


# ============================================================================
# SCORE & COMBO
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_COMBO_CHANGED = "combo_changed"              # payload: multiplier=int


# ============================================================================
# POWER-UPS & BOARD MAINTENANCE
# ============================================================================
EVENT_POWER_UP_USED = "power_up_used"              # payload: kind=PowerUpKind, target=(r,c)|None, remaining=int
EVENT_BOARD_SHUFFLED = "board_shuffled"            # payload: reason=str
EVENT_MOVE_UNDONE = "move_undone"                  # payload: score=int, moves_remaining=int
EVENT_NO_MOVES_REMAINING = "no_moves_remaining"    # payload: shuffles_left=int


# ============================================================================
# GAME FLOW & STATE
# ============================================================================
EVENT_GAME_MODE_CHANGED = "game_mode_changed"      # payload: previous_mode=GameMode|None, new_mode=GameMode
EVENT_LEVEL_LOADED = "level_loaded"                # payload: level=int, goal=int, moves=int, time_limit=int
EVENT_LEVEL_COMPLETED = "level_completed"          # payload: result=LevelResult
EVENT_GAME_OVER = "game_over"                      # payload: reason=str, final_score=int, level=int
