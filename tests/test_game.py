import copy
import random

import pytest

from pipe_puzzle import PuzzleGame
from pipe_puzzle.core.connectivity import compute_complete_dirs, compute_connections, has_any_complete
from pipe_puzzle.core.tiles import TileType


def test_new_game_is_scrambled():
    game = PuzzleGame("zen", "medium")
    assert game.moves == 0
    assert not game.solved
    assert not has_any_complete(game.complete)
    assert game.initial_rotations == [tile.rotation for tile in game.tiles]


def test_rotate_matches_full_recompute():
    game = PuzzleGame("zen", "medium")
    index = game.tile_at(0, 0)
    before = game.tiles[index].rotation
    expected_tiles = copy.deepcopy(game.tiles)
    expected_tiles[index].rotation = (before + 1) % 4

    result = game.rotate_tile(index)

    assert result.index == index
    assert game.tiles[index].rotation == (before + 1) % 4
    assert game.moves == 1
    expected_connections = compute_connections(expected_tiles)
    assert game.connections == expected_connections
    assert game.complete == compute_complete_dirs(expected_tiles, expected_connections)


def test_four_turns_restore_the_tile():
    game = PuzzleGame("alpha", "easy")
    index = game.tile_at(4, 3)
    initial = list(game.complete)
    for _ in range(4):
        game.rotate_tile(index)
    assert game.tiles[index].rotation == game.initial_rotations[index]
    assert game.tiles[index].rotation_degrees == game.initial_rotations[index] * 90 + 360
    assert game.complete == initial


def test_rotate_out_of_range():
    game = PuzzleGame("zen", "hard")
    with pytest.raises(IndexError):
        game.rotate_tile(len(game.tiles))
    with pytest.raises(IndexError):
        game.rotate_tile(-1)


def test_tile_at_missing_cell():
    game = PuzzleGame("zen", "hard")
    assert game.tile_at(99, 0) is None


def test_reset_restores_initial_rotations():
    game = PuzzleGame("zen", "medium")
    for index in range(5):
        game.rotate_tile(index)
    game.reset()
    assert game.moves == 0
    assert [tile.rotation for tile in game.tiles] == game.initial_rotations


def test_last_turns_solve_the_board():
    game = PuzzleGame("zen", "medium")
    leave_index = game.solve_all_but_one(random.Random(0))
    left_tile = game.tiles[leave_index]
    assert not left_tile.is_blank
    assert game.solved == (left_tile.type is TileType.CROSS_CURVE)

    results = [game.rotate_tile(leave_index) for _ in range(3)]
    assert results[-1].solved
    assert game.solved
    if left_tile.type is not TileType.CROSS_CURVE:
        assert results[-1].newly_completed
        assert results[-1].wave[leave_index] == 0


def test_regenerate_changes_board_and_resets_moves():
    game = PuzzleGame("zen", "medium")
    game.rotate_tile(0)
    game.regenerate(seed_text="other", difficulty="hard")
    assert game.seed_text == "other"
    assert game.difficulty == "hard"
    assert game.moves == 0
    assert not any(tile.is_blank for tile in game.tiles)
