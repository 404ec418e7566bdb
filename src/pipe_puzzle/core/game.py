import logging
import random
from dataclasses import dataclass, field

from pipe_puzzle.boards.generator import make_board
from pipe_puzzle.boards.presets import DEFAULT_DIFFICULTY
from pipe_puzzle.config import DEFAULT_SEED_TEXT
from pipe_puzzle.core.connectivity import (
    compute_complete_dirs,
    compute_connections,
    completion_wave,
    connection_bitmask,
    is_solved,
)

logger = logging.getLogger(__name__)


@dataclass
class RotationResult:
    index: int
    newly_completed: bool
    solved: bool
    wave: dict[int, int] = field(default_factory=dict)


class PuzzleGame:
    def __init__(self, seed_text=DEFAULT_SEED_TEXT, difficulty=DEFAULT_DIFFICULTY):
        self.seed_text = seed_text
        self.difficulty = difficulty
        self.tiles = []
        self.initial_rotations = []
        self.connections = []
        self.complete = []
        self.moves = 0
        self.regenerate(seed_text, difficulty)

    @property
    def solved(self):
        return is_solved(self.tiles, self.complete)

    def regenerate(self, seed_text=None, difficulty=None):
        if seed_text is not None:
            self.seed_text = seed_text
        if difficulty is not None:
            self.difficulty = difficulty
        self.tiles = make_board(self.seed_text, self.difficulty)
        self.initial_rotations = [tile.rotation for tile in self.tiles]
        self.moves = 0
        self._refresh()
        logger.debug("Generated board for seed %r (%s)", self.seed_text, self.difficulty)

    def _refresh(self):
        self.connections = compute_connections(self.tiles)
        self.complete = compute_complete_dirs(self.tiles, self.connections)

    def tile_at(self, row, col):
        for index, tile in enumerate(self.tiles):
            if tile.row == row and tile.col == col:
                return index
        return None

    def rotate_tile(self, index):
        if index < 0 or index >= len(self.tiles):
            raise IndexError(f"No tile at index {index}")

        previous_bits = [connection_bitmask(dirs) for dirs in self.complete]
        self.tiles[index].rotate()
        self.moves += 1
        self._refresh()

        newly_completed = any(
            connection_bitmask(dirs) & ~previous_bits[i]
            for i, dirs in enumerate(self.complete)
        )
        wave = {}
        if newly_completed:
            wave = completion_wave(self.tiles, index, self.connections, self.complete)
        solved = self.solved
        if solved:
            logger.info("Board %r solved in %d moves", self.seed_text, self.moves)
        return RotationResult(index=index, newly_completed=newly_completed, solved=solved, wave=wave)

    def reset(self):
        for tile, rotation in zip(self.tiles, self.initial_rotations):
            tile.set_rotation(rotation)
        self.moves = 0
        self._refresh()

    def solve_all_but_one(self, rng=None):
        """Put every tile in its solved orientation except one random non-blank tile."""

        rng = rng or random
        candidates = [index for index, tile in enumerate(self.tiles) if not tile.is_blank]
        if not candidates:
            return None
        leave_index = rng.choice(candidates)
        for index, tile in enumerate(self.tiles):
            offset = 1 if index == leave_index else 0
            tile.set_rotation(tile.target_rotation + offset)
        self._refresh()
        return leave_index
