"""Seeded pipe-rotation puzzle boards and their connectivity engine."""

from .boards import (
    ProgressionSettings,
    build_progression_seed,
    make_board,
    normalize_progression_settings,
    parse_progression_seed,
)
from .core import Tile, TileType, compute_complete_dirs, compute_connections, is_solved
from .core.game import PuzzleGame, RotationResult

__version__ = "0.1.0"

__all__ = [
    "ProgressionSettings",
    "PuzzleGame",
    "RotationResult",
    "Tile",
    "TileType",
    "build_progression_seed",
    "compute_complete_dirs",
    "compute_connections",
    "is_solved",
    "make_board",
    "normalize_progression_settings",
    "parse_progression_seed",
    "__version__",
]
