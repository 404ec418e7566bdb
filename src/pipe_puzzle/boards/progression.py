"""Progression settings and their textual seed encoding.

A progression seed looks like ``P18-2-28-18-4-2-2-2-0-0``: gap rate, gap
clusters, curve bias, terminal rate, max straight run, terminal spacing,
empty row cap, empty column cap, centre bias and variant. Two older, shorter
forms are still accepted:

- 9 fields: the same order without centre bias
- 6 fields: gap rate, gap clusters, curve bias, terminal rate, max straight
  run and variant
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass
from typing import Final, Mapping

from pipe_puzzle.boards.blanks import round_half_up
from pipe_puzzle.boards.presets import BlankConfig, BoardConfig
from pipe_puzzle.config import COLS, MIN_TILES, ROWS, TOTAL_LEVELS


@dataclass(frozen=True)
class ProgressionSettings:
    gap_rate: int = 18
    gap_clusters: int = 2
    curve_bias: int = 28
    terminal_rate: int = 18
    terminal_spacing: int = 2
    straight_run_max: int = 4
    empty_row_max: int = 2
    empty_col_max: int = 2
    center_bias: int = 0
    variant: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


PROGRESSION_SETTINGS_RANGES: Final[dict[str, tuple[int, int]]] = {
    "gap_rate": (0, 96),
    "gap_clusters": (0, 4),
    "curve_bias": (20, 40),
    "terminal_rate": (12, 24),
    "terminal_spacing": (1, 5),
    "straight_run_max": (2, 6),
    "empty_row_max": (0, 5),
    "empty_col_max": (0, 5),
    "center_bias": (0, 100),
    "variant": (0, 9),
}

DEFAULT_PROGRESSION_SETTINGS: Final[ProgressionSettings] = ProgressionSettings()

# Field names used by exported level files.
_CAMEL_CASE_KEYS: Final[dict[str, str]] = {
    "gapRate": "gap_rate",
    "gapClusters": "gap_clusters",
    "curveBias": "curve_bias",
    "terminalRate": "terminal_rate",
    "terminalSpacing": "terminal_spacing",
    "straightRunMax": "straight_run_max",
    "emptyRowMax": "empty_row_max",
    "emptyColMax": "empty_col_max",
    "centerBias": "center_bias",
}

_SEED_FIELDS: Final[tuple[str, ...]] = (
    "gap_rate",
    "gap_clusters",
    "curve_bias",
    "terminal_rate",
    "straight_run_max",
    "terminal_spacing",
    "empty_row_max",
    "empty_col_max",
    "center_bias",
    "variant",
)
_LEGACY_SEED_FIELDS: Final[tuple[str, ...]] = tuple(name for name in _SEED_FIELDS if name != "center_bias")
_LEGACY_SHORT_SEED_FIELDS: Final[tuple[str, ...]] = (
    "gap_rate",
    "gap_clusters",
    "curve_bias",
    "terminal_rate",
    "straight_run_max",
    "variant",
)
_SEED_FORMATS = tuple(
    (re.compile("P" + "-".join([r"([0-9]+)"] * len(names)), re.IGNORECASE), names)
    for names in (_SEED_FIELDS, _LEGACY_SEED_FIELDS, _LEGACY_SHORT_SEED_FIELDS)
)


def clamp_value(value, min_value, max_value):
    return min(max_value, max(min_value, value))


def _finite_number(raw) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_progression_settings(settings=None) -> ProgressionSettings:
    """Round and clamp every field; missing or non-numeric fields keep their default."""

    if isinstance(settings, ProgressionSettings):
        settings = settings.as_dict()
    if not isinstance(settings, Mapping):
        return DEFAULT_PROGRESSION_SETTINGS

    values = DEFAULT_PROGRESSION_SETTINGS.as_dict()
    for key, raw in settings.items():
        name = _CAMEL_CASE_KEYS.get(key, key)
        if name not in PROGRESSION_SETTINGS_RANGES:
            continue
        number = _finite_number(raw)
        if number is None:
            continue
        low, high = PROGRESSION_SETTINGS_RANGES[name]
        values[name] = clamp_value(round_half_up(number), low, high)
    return ProgressionSettings(**values)


def build_progression_seed(settings=None) -> str:
    normalized = normalize_progression_settings(settings)
    return "P" + "-".join(str(getattr(normalized, name)) for name in _SEED_FIELDS)


def parse_progression_seed(seed_text) -> ProgressionSettings | None:
    """Parse a progression seed; returns None when the text is not one."""

    if not seed_text or not isinstance(seed_text, str):
        return None
    for pattern, names in _SEED_FORMATS:
        match = pattern.fullmatch(seed_text)
        if match:
            return normalize_progression_settings(dict(zip(names, (int(g) for g in match.groups()))))
    return None


def progression_settings_to_board_config(settings=None) -> BoardConfig:
    normalized = normalize_progression_settings(settings)
    total_cells = ROWS * COLS
    gap_cells_raw = round_half_up(total_cells * normalized.gap_rate / 100)
    max_blank_cells = max(0, total_cells - MIN_TILES) // 4 * 4
    gap_cells = min(max_blank_cells, max(0, round_half_up(gap_cells_raw / 4) * 4))
    clusters = 0 if gap_cells == 0 else normalized.gap_clusters
    min_cluster_cells = 0 if clusters == 0 else 4 + clusters * 2
    min_terminals = max(4, round_half_up(total_cells * normalized.terminal_rate / 100))
    max_terminals = min(total_cells, min_terminals + 6)
    return BoardConfig(
        blanks=BlankConfig(
            min_cells=gap_cells,
            max_cells=gap_cells,
            clusters=clusters,
            min_cluster_cells=min_cluster_cells,
            max_empty_row_run=normalized.empty_row_max,
            max_empty_col_run=normalized.empty_col_max,
            center_bias=normalized.center_bias / 100,
        ),
        curve_ratio=normalized.curve_bias / 100,
        min_terminals=min_terminals,
        max_terminals=max_terminals,
        max_straight_run=normalized.straight_run_max,
        min_terminal_distance=normalized.terminal_spacing,
        max_terminal_cluster=3,
    )


def normalize_level_list(levels) -> list[str]:
    """Pad or trim a level seed list to TOTAL_LEVELS entries."""

    if isinstance(levels, Mapping):
        levels = levels.get("levels")
    if not isinstance(levels, (list, tuple)):
        levels = []
    result = []
    for index in range(TOTAL_LEVELS):
        value = levels[index] if index < len(levels) else None
        result.append(value if isinstance(value, str) else "")
    return result


__all__ = [
    "DEFAULT_PROGRESSION_SETTINGS",
    "PROGRESSION_SETTINGS_RANGES",
    "ProgressionSettings",
    "build_progression_seed",
    "clamp_value",
    "normalize_level_list",
    "normalize_progression_settings",
    "parse_progression_seed",
    "progression_settings_to_board_config",
]
