"""Arcade-based rendering for Pipes."""

from __future__ import annotations

from dataclasses import dataclass

import arcade
from arcade.types import LBWH

from pipe_puzzle.config import (
    BB_HEIGHT,
    COLOR_BACKGROUND,
    COLOR_PIPE,
    COLOR_PIPE_COMPLETE,
    COLOR_SOLVED_TILE,
    COLOR_STATUS_TEXT,
    COLOR_TILE,
    COLS,
    FONT_SIZE_BAR,
    PIPE_WIDTH_SCALE,
    ROWS,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TERMINAL_RADIUS_SCALE,
    TILE_MARGIN_PX,
)
from pipe_puzzle.core.tiles import DIR_DELTAS, TileType

_STATUS_SEPARATOR = "   /   "


@dataclass(frozen=True)
class BoardGeometry:
    """Pixel placement of the board; y grows upward as in arcade."""

    cell_px: float
    origin_x_px: float
    top_y_px: float

    def cell_center(self, row: int, col: int) -> tuple[float, float]:
        x = self.origin_x_px + (col + 0.5) * self.cell_px
        y = self.top_y_px - (row + 0.5) * self.cell_px
        return x, y


def compute_board_geometry(
    screen_width_px: int = SCREEN_WIDTH,
    screen_height_px: int = SCREEN_HEIGHT,
    bottom_bar_height_px: int = BB_HEIGHT,
) -> BoardGeometry:
    cell_px = min(screen_width_px / COLS, (screen_height_px - bottom_bar_height_px) / ROWS)
    origin_x = (screen_width_px - cell_px * COLS) / 2
    return BoardGeometry(cell_px=cell_px, origin_x_px=origin_x, top_y_px=screen_height_px)


def get_cell_under_pixel(geometry: BoardGeometry, x: float, y: float) -> tuple[int, int] | None:
    col = int((x - geometry.origin_x_px) // geometry.cell_px)
    row = int((geometry.top_y_px - y) // geometry.cell_px)
    if 0 <= row < ROWS and 0 <= col < COLS:
        return row, col
    return None


def _draw_tile(geometry, tile, complete_dirs):
    cx, cy = geometry.cell_center(tile.row, tile.col)
    size = geometry.cell_px - TILE_MARGIN_PX
    fully_complete = not tile.is_blank and all(
        complete_dirs[d] for d, on in enumerate(tile.open_sides()) if on
    )
    background = COLOR_SOLVED_TILE if fully_complete else COLOR_TILE
    arcade.draw_rect_filled(LBWH(cx - size / 2, cy - size / 2, size, size), background)
    if tile.is_blank:
        return

    line_width = max(2, int(geometry.cell_px * PIPE_WIDTH_SCALE))
    half = geometry.cell_px / 2
    for direction, open_side in enumerate(tile.open_sides()):
        if not open_side:
            continue
        dr, dc = DIR_DELTAS[direction]
        end_x = cx + dc * half
        end_y = cy - dr * half
        color = COLOR_PIPE_COMPLETE if complete_dirs[direction] else COLOR_PIPE
        arcade.draw_line(cx, cy, end_x, end_y, color, line_width)

    if tile.type is TileType.TERMINAL:
        color = COLOR_PIPE_COMPLETE if any(complete_dirs) else COLOR_PIPE
        arcade.draw_circle_filled(cx, cy, geometry.cell_px * TERMINAL_RADIUS_SCALE, color)


def draw_status_bar(text_cache: dict, game) -> None:
    status = "Solved!" if game.solved else f"Moves {game.moves}"
    label = _STATUS_SEPARATOR.join((f"Seed {game.seed_text}", str(game.difficulty), status))
    text = text_cache.get(label)
    if text is None:
        text = arcade.Text(
            label,
            SCREEN_WIDTH / 2,
            BB_HEIGHT / 2,
            COLOR_STATUS_TEXT,
            FONT_SIZE_BAR,
            anchor_x="center",
            anchor_y="center",
        )
        text_cache.clear()
        text_cache[label] = text
    text.draw()


def draw_frame(window: arcade.Window, geometry: BoardGeometry, text_cache: dict, game) -> None:
    window.clear(color=COLOR_BACKGROUND)
    for index, tile in enumerate(game.tiles):
        _draw_tile(geometry, tile, game.complete[index])
    draw_status_bar(text_cache, game)
