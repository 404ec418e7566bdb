"""Fixed constants for the pipe puzzle board and its front end."""

from typing import Final

# Board
ROWS: Final[int] = 10
COLS: Final[int] = 6
TOTAL_LEVELS: Final[int] = 96
MIN_TILES: Final[int] = 4
DEFAULT_SEED_TEXT: Final[str] = "zen"

# Generator tuning
TURN_BIAS: Final[float] = 0.85
SYMMETRY_SOFTNESS: Final[float] = 0.18
MAX_CROSSES: Final[int] = 1
EXTRA_EDGE_DIVISOR: Final[int] = 7
T_JUNCTION_DIVISOR: Final[int] = 6
MIN_T_JUNCTION_CAP: Final[int] = 2
LAYOUT_MAX_ATTEMPTS: Final[int] = 60
LAYOUT_SEED_STRIDE: Final[int] = 97
BLANK_MAX_ATTEMPTS: Final[int] = 40
SCRAMBLE_MAX_ATTEMPTS: Final[int] = 20
MIN_CURVES: Final[int] = 8
REPAIR_MAX_STEPS: Final[int] = 300
REPAIR_SIDEWAYS_CHANCE: Final[float] = 0.25
REPAIR_SEED_SALT: Final[int] = 0x9E3779B9

# Window
SCREEN_WIDTH: Final[int] = 480
SCREEN_HEIGHT: Final[int] = 840
BB_HEIGHT: Final[int] = 40
WINDOW_TITLE: Final[str] = "Pipes"
TILE_MARGIN_PX: Final[int] = 4
PIPE_WIDTH_SCALE: Final[float] = 0.22
TERMINAL_RADIUS_SCALE: Final[float] = 0.2
FONT_SIZE_BAR: Final[int] = 18

# Colours
COLOR_BACKGROUND: Final[tuple[int, int, int]] = (28, 30, 34)
COLOR_TILE: Final[tuple[int, int, int]] = (44, 47, 54)
COLOR_PIPE: Final[tuple[int, int, int]] = (120, 128, 140)
COLOR_PIPE_COMPLETE: Final[tuple[int, int, int]] = (50, 215, 200)
COLOR_SOLVED_TILE: Final[tuple[int, int, int]] = (30, 100, 100)
COLOR_STATUS_TEXT: Final[tuple[int, int, int]] = (235, 235, 235)
