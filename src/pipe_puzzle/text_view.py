"""Plain-text rendering of a board for terminals and logs."""

from __future__ import annotations

from typing import Sequence

from pipe_puzzle.core.connectivity import connection_bitmask
from pipe_puzzle.core.tiles import Tile

# Indexed by the N=1, E=2, S=4, W=8 open-side bitmask.
BOX_CHARS = " ╵╶└╷│┌├╴┘─┴┐┤┬┼"


def tile_char(tile: Tile) -> str:
    return BOX_CHARS[connection_bitmask(tile.open_sides())]


def format_board(tiles: Sequence[Tile], complete=None) -> str:
    """One text row per board row; complete tiles are marked with '*' after their glyph."""

    if not tiles:
        return ""
    rows = max(tile.row for tile in tiles) + 1
    cols = max(tile.col for tile in tiles) + 1
    grid = [[" "] * cols for _ in range(rows)]
    marks = [[" "] * cols for _ in range(rows)]
    for index, tile in enumerate(tiles):
        grid[tile.row][tile.col] = tile_char(tile)
        if complete is not None and any(complete[index]):
            marks[tile.row][tile.col] = "*"
    return "\n".join(
        "".join(char + mark for char, mark in zip(grid[r], marks[r])).rstrip() for r in range(rows)
    )
