GRID_SIZE = 8

# Board generation. The repair loop is best effort: once the pass limit is
# reached a freshly generated board may still hold a starting match.
REPAIR_PASS_LIMIT = 100
TILE_PICK_ATTEMPTS = 50
MIN_TILE_KINDS = 3

# Combo multiplier bounds
MAX_COMBO_MULTIPLIER = 8

# Undo keeps only the most recent moves
HISTORY_LIMIT = 5

# ============================================================================
# SCORING
# ============================================================================
POINTS_SHAPED = 25
POINTS_RUN_3 = 10
POINTS_RUN_4 = 20
POINTS_RUN_5_PLUS = 50
SPECIAL_BONUS = 100

# Level completion bonus per remaining move / second
LEVEL_MOVE_BONUS = 50
LEVEL_TIME_BONUS = 10
# Star thresholds as fractions of the goal score (one, two, three stars)
STAR_RATIOS = (0.6, 0.8, 1.0)

# ============================================================================
# SESSION DEFAULTS
# ============================================================================
DEFAULT_MOVES = 30
DEFAULT_GOAL = 1000
TIMED_MODE_SECONDS = 60
DEFAULT_POWER_UPS = {
    'hammer': 3,
    'shuffle': 2,
    'undo': 5,
}

# ============================================================================
# TILES
# ============================================================================
TILE_PALETTES = {
    'regular': ['🍎', '🍌', '🍇', '🍓', '🥑', '🍕', '🍩', '⭐', '🔥', '💎'],
    'fruit': ['🍎', '🍌', '🍇', '🍓', '🥑', '🍒'],
}
DEFAULT_PALETTE = 'regular'

SPECIAL_SYMBOLS = {
    'striped': '⚡',
    'bomb': '💥',
    'rainbow': '🌈',
}
