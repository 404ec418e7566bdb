"""Board generation presets for the named difficulties."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

from pipe_puzzle.boards.validation import LayoutConstraints
from pipe_puzzle.config import COLS, ROWS


@dataclass(frozen=True)
class BlankConfig:
    """How many cells to blank and how to group them."""

    min_cells: int
    max_cells: int
    clusters: int
    min_cluster_cells: int
    max_empty_row_run: int
    max_empty_col_run: int
    center_bias: float = 0.0


@dataclass(frozen=True)
class BoardConfig:
    """Everything the generator needs besides the seed."""

    blanks: BlankConfig
    curve_ratio: float
    min_terminals: int
    max_terminals: int
    max_straight_run: int
    min_terminal_distance: int
    max_terminal_cluster: int

    def constraints(self) -> LayoutConstraints:
        return LayoutConstraints(
            min_terminals=self.min_terminals,
            max_terminals=self.max_terminals,
            curve_ratio=self.curve_ratio,
            max_straight_run=self.max_straight_run,
            min_terminal_distance=self.min_terminal_distance,
            max_terminal_cluster=self.max_terminal_cluster,
        )


DEFAULT_DIFFICULTY: Final[str] = "medium"
DIFFICULTY_LEVELS: Final[tuple[str, ...]] = ("easy", "medium", "hard")

_MIN_TERMINALS_DEFAULT: Final[int] = max(6, math.floor(ROWS * COLS * 0.12))
_MAX_TERMINALS_DEFAULT: Final[int] = max(_MIN_TERMINALS_DEFAULT + 2, math.floor(ROWS * COLS * 0.22))


def _difficulty_preset(blanks: BlankConfig, curve_ratio: float) -> BoardConfig:
    return BoardConfig(
        blanks=blanks,
        curve_ratio=curve_ratio,
        min_terminals=_MIN_TERMINALS_DEFAULT,
        max_terminals=_MAX_TERMINALS_DEFAULT,
        max_straight_run=4,
        min_terminal_distance=2,
        max_terminal_cluster=3,
    )


DIFFICULTY_PRESETS: Final[dict[str, BoardConfig]] = {
    "easy": _difficulty_preset(
        BlankConfig(
            min_cells=13,
            max_cells=20,
            clusters=3,
            min_cluster_cells=6,
            max_empty_row_run=2,
            max_empty_col_run=2,
        ),
        curve_ratio=0.32,
    ),
    "medium": _difficulty_preset(
        BlankConfig(
            min_cells=4,
            max_cells=12,
            clusters=2,
            min_cluster_cells=6,
            max_empty_row_run=2,
            max_empty_col_run=2,
        ),
        curve_ratio=0.28,
    ),
    "hard": _difficulty_preset(
        BlankConfig(
            min_cells=0,
            max_cells=0,
            clusters=0,
            min_cluster_cells=0,
            max_empty_row_run=0,
            max_empty_col_run=0,
        ),
        curve_ratio=0.24,
    ),
}

__all__ = [
    "BlankConfig",
    "BoardConfig",
    "DEFAULT_DIFFICULTY",
    "DIFFICULTY_LEVELS",
    "DIFFICULTY_PRESETS",
]
