"""Quad-symmetric blank (gap) region carving."""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass

from pipe_puzzle.boards.edges import DIRECTIONS, Coord, EdgeGrid
from pipe_puzzle.boards.rng import Mulberry32
from pipe_puzzle.config import BLANK_MAX_ATTEMPTS


@dataclass(frozen=True)
class BlankGroup:
    """A top-left quadrant cell and its three mirror images."""

    r: int
    c: int
    cells: tuple[Coord, ...]


def symmetric_cells(r: int, c: int, rows: int, cols: int) -> list[Coord]:
    """Distinct mirror images of (r, c) in insertion order."""

    cells = []
    for coord in ((r, c), (rows - 1 - r, c), (r, cols - 1 - c), (rows - 1 - r, cols - 1 - c)):
        if coord not in cells:
            cells.append(coord)
    return cells


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def build_blank_groups(rows: int, cols: int) -> tuple[list[BlankGroup], list[list[int]]]:
    group_rows = math.ceil(rows / 2)
    group_cols = math.ceil(cols / 2)
    groups = []
    index_grid = [[-1] * group_cols for _ in range(group_rows)]
    for r in range(group_rows):
        for c in range(group_cols):
            cells = symmetric_cells(r, c, rows, cols)
            if len(cells) != 4:
                continue
            index_grid[r][c] = len(groups)
            groups.append(BlankGroup(r, c, tuple(cells)))
    return groups, index_grid


def is_remainder_connected(blanks: set[Coord], rows: int, cols: int) -> bool:
    """True when the non-blank cells form one 4-connected region."""

    total = rows * cols - len(blanks)
    if total <= 0:
        return True
    start = next(((r, c) for r in range(rows) for c in range(cols) if (r, c) not in blanks), None)
    if start is None:
        return True
    visited = {start}
    queue = deque([start])
    while queue:
        r, c = queue.popleft()
        for nr, nc in ((r + 1, c), (r - 1, c), (r, c + 1), (r, c - 1)):
            if nr < 0 or nr >= rows or nc < 0 or nc >= cols:
                continue
            if (nr, nc) in blanks or (nr, nc) in visited:
                continue
            visited.add((nr, nc))
            queue.append((nr, nc))
    return len(visited) == total


def max_empty_run(blanks: set[Coord], rows: int, cols: int, axis: str) -> int:
    """Longest run of consecutive fully blank rows (axis="row") or columns."""

    outer, inner = (rows, cols) if axis == "row" else (cols, rows)
    best = 0
    run = 0
    for o in range(outer):
        if axis == "row":
            empty = all((o, i) in blanks for i in range(inner))
        else:
            empty = all((i, o) in blanks for i in range(inner))
        if empty:
            run += 1
            best = max(best, run)
        else:
            run = 0
    return best


class _BlankPlanner:
    def __init__(self, rows, cols, rng, group_target, min_cluster_cells, center_bias):
        self.rows = rows
        self.cols = cols
        self.rng = rng
        self.groups, self.index_grid = build_blank_groups(rows, cols)
        self.group_target = group_target
        self.min_groups = max(1, math.ceil(min_cluster_cells / 4))
        self.bias = min(1.0, max(0.0, center_bias))
        self.center_row = (rows - 1) / 2
        self.center_col = (cols - 1) / 2
        max_dist = abs(self.center_row) + abs(self.center_col) or 1
        power = 1 + self.bias * 2.5
        self.weights = []
        for group in self.groups:
            if self.bias <= 0:
                self.weights.append(1.0)
                continue
            normalized = self.center_distance(group) / max_dist
            self.weights.append(1 + normalized ** power * (1 + self.bias * 8))

    def center_distance(self, group: BlankGroup) -> float:
        return abs(group.r - self.center_row) + abs(group.c - self.center_col)

    def pick_weighted(self, available: list[int]) -> int:
        if not available:
            return -1
        if self.bias <= 0 or self.rng.random() > self.bias:
            return self.rng.choice(available)
        total = sum(self.weights[idx] for idx in available)
        roll = self.rng.random() * total
        for idx in available:
            roll -= self.weights[idx]
            if roll <= 0:
                return idx
        return available[-1]

    def _group_neighbors(self, group: BlankGroup) -> list[int]:
        result = []
        for dr, dc in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nr, nc = group.r + dr, group.c + dc
            if 0 <= nr < len(self.index_grid) and 0 <= nc < len(self.index_grid[0]):
                idx = self.index_grid[nr][nc]
                if idx >= 0:
                    result.append(idx)
        return result

    def select_groups(self, cluster_count: int) -> list[int]:
        # insertion order decides which groups are blanked first
        chosen: dict[int, None] = {}
        clusters: list[list[int]] = []
        cluster_total = max(1, cluster_count or 1)
        max_cluster_total = max(1, self.group_target // self.min_groups)
        for _ in range(min(cluster_total, max_cluster_total)):
            available = [idx for idx in range(len(self.groups)) if idx not in chosen]
            seed_index = self.pick_weighted(available)
            if seed_index >= 0:
                chosen[seed_index] = None
                clusters.append([seed_index])

        while len(chosen) < self.group_target:
            cluster = clusters[self.rng.randrange(len(clusters))]
            anchor = cluster[self.rng.randrange(len(cluster))]
            neighbors = [idx for idx in self._group_neighbors(self.groups[anchor]) if idx not in chosen]
            if neighbors:
                next_index = self.rng.choice(neighbors)
            else:
                available = [idx for idx in range(len(self.groups)) if idx not in chosen]
                next_index = self.pick_weighted(available)
                if next_index < 0:
                    break
            chosen[next_index] = None
            cluster.append(next_index)
        return list(chosen)

    def cells_for(self, group_indices) -> set[Coord]:
        blanks = set()
        for idx in group_indices:
            blanks.update(self.groups[idx].cells)
        return blanks

    def pull_toward_center(self, blank_groups: dict[int, None]) -> set[Coord] | None:
        """Swap central blank groups for outer kept ones; None when nothing moved."""

        total_groups = len(self.groups)
        keep_groups = [idx for idx in range(total_groups) if idx not in blank_groups]
        if not keep_groups:
            return None
        by_center = sorted(range(total_groups), key=lambda idx: self.center_distance(self.groups[idx]))
        desired_count = max(1, round_half_up(len(keep_groups) * self.bias))
        desired = by_center[:desired_count]
        desired_set = set(desired)
        missing = [idx for idx in desired if idx in blank_groups]
        if not missing:
            return None
        removable = sorted(
            (idx for idx in keep_groups if idx not in desired_set),
            key=lambda idx: -self.center_distance(self.groups[idx]),
        )
        swap_count = min(len(missing), len(removable))
        if swap_count <= 0:
            return None
        for i in range(swap_count):
            del blank_groups[missing[i]]
            blank_groups[removable[i]] = None
        return self.cells_for(blank_groups)


def apply_symmetric_blanks(
    grid: EdgeGrid,
    rng: Mulberry32,
    target_cells: int,
    cluster_count: int,
    min_cluster_cells: int = 0,
    max_empty_row_run: float = math.inf,
    max_empty_col_run: float = math.inf,
    center_bias: float = 0.0,
) -> set[Coord]:
    """Blank mirrored groups of cells and sever their pipes.

    Returns the blanked coordinates. When no draw meets every constraint, the
    last draw that leaves the other cells connected is applied, or none at all.
    """

    if target_cells <= 0:
        return set()
    if cluster_count < 0:
        raise ValueError("cluster count cannot be negative")

    rows, cols = grid.rows, grid.cols
    groups, _ = build_blank_groups(rows, cols)
    total_groups = len(groups)
    group_target = min(max(0, total_groups - 1), max(1, round_half_up(target_cells / 4)))
    if group_target <= 0:
        return set()

    planner = _BlankPlanner(rows, cols, rng, group_target, min_cluster_cells, center_bias)
    blanks: set[Coord] = set()
    fallback: set[Coord] = set()
    for _ in range(BLANK_MAX_ATTEMPTS):
        grouped = planner.select_groups(cluster_count)
        blank_groups = dict.fromkeys(grouped)
        blanks = set()
        for idx in grouped:
            if len(blanks) >= group_target * 4:
                break
            blanks.update(groups[idx].cells)
        if planner.bias >= 0.4 and 0 < len(blank_groups) < total_groups:
            pulled = planner.pull_toward_center(blank_groups)
            if pulled is not None:
                blanks = pulled

        connected = is_remainder_connected(blanks, rows, cols)
        if (
            connected
            and len(blanks) == group_target * 4
            and max_empty_run(blanks, rows, cols, "row") <= max_empty_row_run
            and max_empty_run(blanks, rows, cols, "col") <= max_empty_col_run
        ):
            break
        if connected:
            fallback = blanks
    else:
        blanks = fallback

    for r, c in blanks:
        for direction in DIRECTIONS:
            if grid.edges(r, c)[direction]:
                grid.remove_edge(r, c, direction)
    return blanks


__all__ = [
    "BlankGroup",
    "apply_symmetric_blanks",
    "build_blank_groups",
    "is_remainder_connected",
    "max_empty_run",
    "round_half_up",
    "symmetric_cells",
]
