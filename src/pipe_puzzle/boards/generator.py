"""Seeded board generation: carve, shape, blank, validate, materialize, scramble."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Mapping

from pipe_puzzle.boards.blanks import apply_symmetric_blanks
from pipe_puzzle.boards.carving import generate_solved_edges
from pipe_puzzle.boards.edges import Coord, EdgeGrid
from pipe_puzzle.boards.presets import DEFAULT_DIFFICULTY, DIFFICULTY_PRESETS, BoardConfig
from pipe_puzzle.boards.progression import (
    ProgressionSettings,
    parse_progression_seed,
    progression_settings_to_board_config,
)
from pipe_puzzle.boards.repair import repair_layout
from pipe_puzzle.boards.rng import MASK_32, Mulberry32, hash_string_to_int
from pipe_puzzle.boards.validation import LayoutScore, RetryStrategy, score_layout
from pipe_puzzle.config import (
    COLS,
    DEFAULT_SEED_TEXT,
    LAYOUT_MAX_ATTEMPTS,
    LAYOUT_SEED_STRIDE,
    REPAIR_SEED_SALT,
    ROWS,
    SCRAMBLE_MAX_ATTEMPTS,
)
from pipe_puzzle.core.connectivity import compute_complete_dirs, compute_connections, has_any_complete
from pipe_puzzle.core.tiles import Tile, pick_type_for_edges

logger = logging.getLogger(__name__)


@dataclass
class GeneratedLayout:
    """The solved edge layout chosen by the retry loop."""

    grid: EdgeGrid
    rng: Mulberry32
    score: LayoutScore
    attempt: int
    blanks: set[Coord] = field(default_factory=set)


def resolve_board_config(seed_text: str | None, difficulty_or_settings=DEFAULT_DIFFICULTY) -> BoardConfig:
    """Pick generation parameters from explicit settings, a progression seed or a difficulty."""

    if isinstance(difficulty_or_settings, (ProgressionSettings, Mapping)):
        return progression_settings_to_board_config(difficulty_or_settings)

    parsed = parse_progression_seed(seed_text)
    if parsed is not None:
        return progression_settings_to_board_config(parsed)

    difficulty = difficulty_or_settings or DEFAULT_DIFFICULTY
    config = DIFFICULTY_PRESETS.get(difficulty)
    if config is None:
        logger.warning("Unknown difficulty %r, using %s", difficulty, DEFAULT_DIFFICULTY)
        config = DIFFICULTY_PRESETS[DEFAULT_DIFFICULTY]
    return config


def attempt_seed(seed: int, attempt: int) -> int:
    return (seed + attempt * LAYOUT_SEED_STRIDE) & MASK_32


def _has_stranded_cells(grid: EdgeGrid, blanks: set[Coord]) -> bool:
    return any(grid.degree(r, c) == 0 for r, c in grid.iter_cells() if (r, c) not in blanks)


def generate_layout(
    seed: int,
    config: BoardConfig,
    rows: int = ROWS,
    cols: int = COLS,
    strategy: RetryStrategy = RetryStrategy.LAST,
    max_attempts: int = LAYOUT_MAX_ATTEMPTS,
) -> GeneratedLayout:
    """Carve layouts until one satisfies every constraint or attempts run out.

    An attempt that fails a check, or strands a non-blank cell, is repaired
    with its own salted stream before it is scored, so the scramble stream
    in `rng` is the same whether or not a repair ran.

    With RetryStrategy.LAST the final attempt is kept when none passes; with
    RetryStrategy.BEST the highest scoring attempt is kept instead.
    """

    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    strategy = RetryStrategy(strategy)

    blank_min = max(0, math.floor(config.blanks.min_cells))
    blank_max = max(blank_min, math.floor(config.blanks.max_cells))
    constraints = config.constraints()

    chosen = None
    for attempt in range(max_attempts):
        layout_seed = attempt_seed(seed, attempt)
        rng = Mulberry32(layout_seed)
        grid = generate_solved_edges(rows, cols, rng)
        blanks: set[Coord] = set()
        if blank_max > 0:
            target = blank_min + rng.randrange(blank_max - blank_min + 1)
            blanks = apply_symmetric_blanks(
                grid,
                rng,
                target,
                config.blanks.clusters,
                config.blanks.min_cluster_cells,
                config.blanks.max_empty_row_run,
                config.blanks.max_empty_col_run,
                config.blanks.center_bias,
            )
        score = score_layout(grid, constraints)
        if not score.passed or _has_stranded_cells(grid, blanks):
            repair_layout(grid, blanks, constraints, Mulberry32(layout_seed ^ REPAIR_SEED_SALT))
            score = score_layout(grid, constraints)
        candidate = GeneratedLayout(grid=grid, rng=rng, score=score, attempt=attempt, blanks=blanks)

        if score.passed:
            logger.debug("Layout for seed %d accepted on attempt %d", seed, attempt)
            return candidate
        if strategy is RetryStrategy.LAST or chosen is None or score.score > chosen.score.score:
            chosen = candidate

    logger.info(
        "No layout for seed %d met every constraint in %d attempts; keeping attempt %d (%s)",
        seed,
        max_attempts,
        chosen.attempt,
        strategy.value,
    )
    return chosen


def materialize_tiles(grid: EdgeGrid) -> list[Tile]:
    """Turn each cell's edge set into a solved (type, rotation) tile, row-major."""

    tiles = []
    for r, c in grid.iter_cells():
        tile_type, rotation = pick_type_for_edges(grid.edges(r, c))
        tiles.append(Tile(row=r, col=c, type=tile_type, rotation=rotation, target_rotation=rotation))
    return tiles


def _scramble_once(tiles: list[Tile], rng: Mulberry32) -> tuple[list[Tile], bool]:
    scrambled = []
    for tile in tiles:
        offset = rng.randrange(4)
        scrambled.append(
            Tile(
                row=tile.row,
                col=tile.col,
                type=tile.type,
                rotation=(tile.target_rotation + offset) % 4,
                target_rotation=tile.target_rotation,
            )
        )
    complete = compute_complete_dirs(scrambled, compute_connections(scrambled))
    return scrambled, has_any_complete(complete)


def scramble_tiles(tiles: list[Tile], rng: Mulberry32, max_attempts: int = SCRAMBLE_MAX_ATTEMPTS) -> list[Tile]:
    """Randomly rotate every tile, retrying while any side starts out complete."""

    scrambled, has_complete = _scramble_once(tiles, rng)
    attempt = 0
    while has_complete and attempt < max_attempts:
        attempt += 1
        scrambled, has_complete = _scramble_once(tiles, rng)
    if has_complete:
        logger.info("Scramble still has complete sides after %d retries", max_attempts)
    return scrambled


def make_board(
    seed_text: str | None,
    difficulty_or_settings=DEFAULT_DIFFICULTY,
    *,
    strategy: RetryStrategy = RetryStrategy.LAST,
) -> list[Tile]:
    """Generate the scrambled board for a seed and a difficulty or progression settings.

    `difficulty_or_settings` is ``"easy"``, ``"medium"``, ``"hard"``, a
    ProgressionSettings or a mapping of its fields. A progression seed text
    overrides a difficulty name. Identical inputs always give identical boards.
    """

    text = seed_text or DEFAULT_SEED_TEXT
    config = resolve_board_config(text, difficulty_or_settings)
    layout = generate_layout(hash_string_to_int(text), config, strategy=strategy)
    return scramble_tiles(materialize_tiles(layout.grid), layout.rng)


__all__ = [
    "GeneratedLayout",
    "attempt_seed",
    "generate_layout",
    "make_board",
    "materialize_tiles",
    "resolve_board_config",
    "scramble_tiles",
]
