"""Tile types, their edge templates and the materialized tile record."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Sequence

Edges = tuple[bool, bool, bool, bool]

NO_EDGES: Final[Edges] = (False, False, False, False)

N, E, S, W = 0, 1, 2, 3
DIRECTIONS: Final[tuple[int, ...]] = (N, E, S, W)
DIR_DELTAS: Final[tuple[tuple[int, int], ...]] = ((-1, 0), (0, 1), (1, 0), (0, -1))


def opposite_dir(direction: int) -> int:
    return (direction + 2) % 4


class TileType(str, Enum):
    BLANK = "blank"
    TERMINAL = "terminal"
    STRAIGHT = "straight"
    CURVE_LEFT = "curveLeft"
    CURVE_RIGHT = "curveRight"
    T_JUNCTION = "tJunction"
    CROSS_CURVE = "crossCurve"


# Open sides at rotation 0, ordered N, E, S, W.
BASE_EDGES: Final[dict[TileType, Edges]] = {
    TileType.BLANK: (False, False, False, False),
    TileType.TERMINAL: (False, False, True, False),
    TileType.STRAIGHT: (True, False, True, False),
    TileType.CURVE_LEFT: (True, False, False, True),
    TileType.CURVE_RIGHT: (True, True, False, False),
    TileType.T_JUNCTION: (True, True, False, True),
    TileType.CROSS_CURVE: (True, True, True, True),
}


def rotate_edges(edges: Sequence[bool], rotation: int) -> Edges:
    """Rotate an edge tuple clockwise by `rotation` quarter turns."""

    n, e, s, w = edges
    for _ in range(rotation % 4):
        n, e, s, w = w, n, e, s
    return (n, e, s, w)


def _candidates_for(edges: Sequence[bool]) -> tuple[TileType, ...]:
    degree = sum(1 for side in edges if side)
    if degree == 0:
        return (TileType.BLANK,)
    if degree == 1:
        return (TileType.TERMINAL,)
    if degree == 2:
        if (edges[0] and edges[2]) or (edges[1] and edges[3]):
            return (TileType.STRAIGHT,)
        return (TileType.CURVE_LEFT, TileType.CURVE_RIGHT)
    if degree == 3:
        return (TileType.T_JUNCTION,)
    return (TileType.CROSS_CURVE,)


def pick_type_for_edges(edges: Sequence[bool]) -> tuple[TileType, int]:
    """Find the (type, rotation) whose rotated template equals `edges`."""

    target = tuple(bool(side) for side in edges)
    for tile_type in _candidates_for(target):
        base = BASE_EDGES[tile_type]
        for rotation in range(4):
            rotated = base if tile_type is TileType.CROSS_CURVE else rotate_edges(base, rotation)
            if rotated == target:
                return tile_type, rotation
    return TileType.BLANK, 0


def tile_id(row: int, col: int) -> str:
    return f"{row}-{col}"


@dataclass
class Tile:
    """One board cell. Only `rotation` and `rotation_degrees` change after creation."""

    row: int
    col: int
    type: TileType
    rotation: int
    target_rotation: int
    rotation_degrees: int | None = None

    def __post_init__(self):
        self.type = TileType(self.type)
        self.rotation %= 4
        if self.rotation_degrees is None:
            self.rotation_degrees = self.rotation * 90

    @property
    def id(self) -> str:
        return tile_id(self.row, self.col)

    @property
    def is_blank(self) -> bool:
        return self.type is TileType.BLANK

    @property
    def is_solved_orientation(self) -> bool:
        return self.rotation == self.target_rotation

    def open_sides(self) -> Edges:
        # A cross is open on all four sides at every rotation.
        if self.type is TileType.CROSS_CURVE:
            return BASE_EDGES[TileType.CROSS_CURVE]
        return rotate_edges(BASE_EDGES[self.type], self.rotation)

    def rotate(self, steps: int = 1) -> None:
        self.rotation = (self.rotation + steps) % 4
        self.rotation_degrees += 90 * steps

    def set_rotation(self, rotation: int) -> None:
        self.rotation = rotation % 4
        self.rotation_degrees = self.rotation * 90

    def signature(self) -> tuple[str, int, int]:
        return self.type.value, self.rotation, self.target_rotation


__all__ = [
    "BASE_EDGES",
    "DIRECTIONS",
    "DIR_DELTAS",
    "E",
    "Edges",
    "N",
    "NO_EDGES",
    "S",
    "W",
    "Tile",
    "TileType",
    "opposite_dir",
    "pick_type_for_edges",
    "rotate_edges",
    "tile_id",
]
