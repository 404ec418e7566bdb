"""Tile model and connectivity engine."""

from .connectivity import (
    BoardStatus,
    board_status,
    compute_complete_dirs,
    compute_connections,
    completion_wave,
    connection_bitmask,
    is_solved,
)
from .tiles import BASE_EDGES, Tile, TileType, pick_type_for_edges, rotate_edges

__all__ = [
    "BASE_EDGES",
    "BoardStatus",
    "Tile",
    "TileType",
    "board_status",
    "compute_complete_dirs",
    "compute_connections",
    "completion_wave",
    "connection_bitmask",
    "is_solved",
    "pick_type_for_edges",
    "rotate_edges",
]
