"""Per-cell open-side storage for a rectangular board."""

from __future__ import annotations

from collections import deque
from typing import Iterator

from pipe_puzzle.core.tiles import DIR_DELTAS, DIRECTIONS, E, N, S, W, opposite_dir

Coord = tuple[int, int]


def direction_between(a: Coord, b: Coord) -> int:
    """Direction from cell a to the adjacent cell b."""

    dr = b[0] - a[0]
    dc = b[1] - a[1]
    if dr > 0:
        return S
    if dr < 0:
        return N
    if dc > 0:
        return E
    return W


def mirror_coord(r: int, c: int, rows: int, cols: int, mode: str) -> Coord:
    if mode == "v":
        return r, cols - 1 - c
    if mode == "h":
        return rows - 1 - r, c
    if mode == "vh":
        return rows - 1 - r, cols - 1 - c
    return r, c


def mirror_dir(direction: int, mode: str) -> int:
    d = direction
    if "v" in mode:
        if d == E:
            d = W
        elif d == W:
            d = E
    if "h" in mode:
        if d == N:
            d = S
        elif d == S:
            d = N
    return d


def edges_degree(edges) -> int:
    return sum(1 for side in edges if side)


def is_straight_edges(edges) -> bool:
    return bool((edges[N] and edges[S]) or (edges[E] and edges[W]))


class EdgeGrid:
    """Row-major grid of [N, E, S, W] open-side flags.

    Edges added through `add_edge` are always reciprocal. Lookups outside the
    board answer "no open sides".
    """

    def __init__(self, rows: int, cols: int):
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid needs at least one row and column, got {rows}x{cols}.")
        self.rows = rows
        self.cols = cols
        self.cells = [[[False, False, False, False] for _ in range(cols)] for _ in range(rows)]

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def is_boundary(self, r: int, c: int) -> bool:
        return r == 0 or c == 0 or r == self.rows - 1 or c == self.cols - 1

    def edges(self, r: int, c: int) -> list[bool]:
        if not self.in_bounds(r, c):
            return [False, False, False, False]
        return self.cells[r][c]

    def degree(self, r: int, c: int) -> int:
        return edges_degree(self.edges(r, c))

    def iter_cells(self) -> Iterator[Coord]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield r, c

    def neighbor(self, r: int, c: int, direction: int) -> Coord:
        dr, dc = DIR_DELTAS[direction]
        return r + dr, c + dc

    def add_edge(self, r: int, c: int, direction: int) -> None:
        nr, nc = self.neighbor(r, c, direction)
        if not self.in_bounds(r, c) or not self.in_bounds(nr, nc):
            raise ValueError(f"Edge ({r},{c}) dir {direction} leaves the board")
        self.cells[r][c][direction] = True
        self.cells[nr][nc][opposite_dir(direction)] = True

    def remove_edge(self, r: int, c: int, direction: int) -> None:
        nr, nc = self.neighbor(r, c, direction)
        if self.in_bounds(r, c):
            self.cells[r][c][direction] = False
        if self.in_bounds(nr, nc):
            self.cells[nr][nc][opposite_dir(direction)] = False

    def can_add_edge(self, r: int, c: int, direction: int, max_degree: int) -> bool:
        edges = self.edges(r, c)
        if edges[direction]:
            return False
        nr, nc = self.neighbor(r, c, direction)
        if self.degree(r, c) + 1 > max_degree or self.degree(nr, nc) + 1 > max_degree:
            return False
        return True

    def count_degree(self, degree: int) -> int:
        return sum(1 for r, c in self.iter_cells() if self.degree(r, c) == degree)

    def cells_with_degree(self, degree: int) -> list[Coord]:
        return [(r, c) for r, c in self.iter_cells() if self.degree(r, c) == degree]

    def is_fully_connected(self) -> bool:
        """True when every cell of the grid is reachable from (0, 0) over open edges."""

        visited = {(0, 0)}
        queue = deque([(0, 0)])
        while queue:
            r, c = queue.popleft()
            for direction, open_side in enumerate(self.cells[r][c]):
                if not open_side:
                    continue
                nxt = self.neighbor(r, c, direction)
                if not self.in_bounds(*nxt) or nxt in visited:
                    continue
                visited.add(nxt)
                queue.append(nxt)
        return len(visited) == self.cell_count


__all__ = [
    "Coord",
    "DIRECTIONS",
    "DIR_DELTAS",
    "E",
    "EdgeGrid",
    "N",
    "S",
    "W",
    "direction_between",
    "edges_degree",
    "is_straight_edges",
    "mirror_coord",
    "mirror_dir",
    "opposite_dir",
]
