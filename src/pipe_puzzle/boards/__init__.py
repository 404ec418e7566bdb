"""Board generation helpers."""

from .generator import generate_layout, make_board, materialize_tiles, resolve_board_config, scramble_tiles
from .presets import DIFFICULTY_LEVELS, DIFFICULTY_PRESETS, BlankConfig, BoardConfig
from .progression import (
    ProgressionSettings,
    build_progression_seed,
    normalize_level_list,
    normalize_progression_settings,
    parse_progression_seed,
    progression_settings_to_board_config,
)
from .repair import repair_layout
from .rng import Mulberry32, hash_string_to_int
from .validation import LayoutConstraints, RetryStrategy, score_layout

__all__ = [
    "BlankConfig",
    "BoardConfig",
    "DIFFICULTY_LEVELS",
    "DIFFICULTY_PRESETS",
    "LayoutConstraints",
    "Mulberry32",
    "ProgressionSettings",
    "RetryStrategy",
    "build_progression_seed",
    "generate_layout",
    "hash_string_to_int",
    "make_board",
    "materialize_tiles",
    "normalize_level_list",
    "normalize_progression_settings",
    "parse_progression_seed",
    "progression_settings_to_board_config",
    "repair_layout",
    "resolve_board_config",
    "score_layout",
    "scramble_tiles",
]
