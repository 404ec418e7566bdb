"""Layout metrics and the constraint check used by the generator retry loop."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum

from pipe_puzzle.boards.blanks import round_half_up
from pipe_puzzle.boards.edges import E, N, S, W, EdgeGrid, is_straight_edges
from pipe_puzzle.config import MIN_CURVES


class RetryStrategy(str, Enum):
    """Which candidate to keep when no attempt satisfies every constraint."""

    LAST = "last"
    BEST = "best"


@dataclass(frozen=True)
class LayoutConstraints:
    min_terminals: int
    max_terminals: int
    curve_ratio: float
    max_straight_run: int
    min_terminal_distance: int
    max_terminal_cluster: int


@dataclass(frozen=True)
class LayoutScore:
    terminals: int
    longest_straight_run: int
    close_terminals: bool
    terminal_cluster: int
    connected: bool
    curves: int
    min_curves: int
    checks: tuple[bool, ...]

    @property
    def passed(self) -> bool:
        return all(self.checks)

    @property
    def score(self) -> int:
        return sum(1 for check in self.checks if check)


def terminal_cells(grid: EdgeGrid) -> list[tuple[int, int]]:
    return grid.cells_with_degree(1)


def count_terminals(grid: EdgeGrid) -> int:
    return grid.count_degree(1)


def count_curves(grid: EdgeGrid) -> tuple[int, int]:
    """Return (curve count, non-blank count)."""

    curves = 0
    non_blank = 0
    for r, c in grid.iter_cells():
        degree = grid.degree(r, c)
        if degree == 0:
            continue
        non_blank += 1
        if degree == 2 and not is_straight_edges(grid.edges(r, c)):
            curves += 1
    return curves, non_blank


def is_edge_graph_connected(grid: EdgeGrid) -> bool:
    """True when every non-blank cell is reachable from every other over open edges."""

    occupied = [(r, c) for r, c in grid.iter_cells() if grid.degree(r, c) > 0]
    if len(occupied) <= 1:
        return True
    start = occupied[0]
    visited = {start}
    queue = deque([start])
    while queue:
        r, c = queue.popleft()
        for direction, open_side in enumerate(grid.edges(r, c)):
            if not open_side:
                continue
            nxt = grid.neighbor(r, c, direction)
            if not grid.in_bounds(*nxt) or grid.degree(*nxt) == 0 or nxt in visited:
                continue
            visited.add(nxt)
            queue.append(nxt)
    return len(visited) == len(occupied)


def close_terminal_pairs(grid: EdgeGrid, min_distance: int) -> int:
    """Number of terminal pairs closer than `min_distance` (Manhattan)."""

    terminals = terminal_cells(grid)
    pairs = 0
    for i, a in enumerate(terminals):
        for b in terminals[i + 1:]:
            if abs(a[0] - b[0]) + abs(a[1] - b[1]) < min_distance:
                pairs += 1
    return pairs


def has_close_terminals(grid: EdgeGrid, min_distance: int) -> bool:
    return close_terminal_pairs(grid, min_distance) > 0


def max_terminal_cluster(grid: EdgeGrid) -> int:
    """Size of the largest 4-connected group of terminal cells."""

    terminals = set(terminal_cells(grid))
    visited = set()
    best = 0
    for start in grid.iter_cells():
        if start in visited or start not in terminals:
            continue
        size = 0
        visited.add(start)
        queue = deque([start])
        while queue:
            r, c = queue.popleft()
            size += 1
            for nxt in ((r + 1, c), (r - 1, c), (r, c + 1), (r, c - 1)):
                if nxt in terminals and nxt not in visited:
                    visited.add(nxt)
                    queue.append(nxt)
        best = max(best, size)
    return best


def straight_run_lengths(grid: EdgeGrid) -> list[int]:
    """Lengths of every maximal run of collinear pure straights, columns first."""

    runs = []
    for c in range(grid.cols):
        run = 0
        for r in range(grid.rows):
            edges = grid.edges(r, c)
            if edges[N] and edges[S] and not edges[E] and not edges[W]:
                run += 1
                continue
            if run:
                runs.append(run)
            run = 0
        if run:
            runs.append(run)
    for r in range(grid.rows):
        run = 0
        for c in range(grid.cols):
            edges = grid.edges(r, c)
            if edges[E] and edges[W] and not edges[N] and not edges[S]:
                run += 1
                continue
            if run:
                runs.append(run)
            run = 0
        if run:
            runs.append(run)
    return runs


def max_straight_run(grid: EdgeGrid) -> int:
    """Longest run of collinear pure straights along a column or a row."""

    return max(straight_run_lengths(grid), default=0)


def minimum_curves(non_blank: int, curve_ratio: float) -> int:
    if non_blank == 0:
        return 0
    return max(MIN_CURVES, round_half_up(non_blank * curve_ratio))


def score_layout(grid: EdgeGrid, constraints: LayoutConstraints) -> LayoutScore:
    terminals = count_terminals(grid)
    longest_run = max_straight_run(grid)
    close = has_close_terminals(grid, constraints.min_terminal_distance)
    cluster = max_terminal_cluster(grid)
    connected = is_edge_graph_connected(grid)
    curves, non_blank = count_curves(grid)
    min_curves = minimum_curves(non_blank, constraints.curve_ratio)
    checks = (
        constraints.min_terminals <= terminals <= constraints.max_terminals,
        longest_run <= constraints.max_straight_run,
        not close,
        cluster <= constraints.max_terminal_cluster,
        connected,
        curves >= min_curves,
    )
    return LayoutScore(
        terminals=terminals,
        longest_straight_run=longest_run,
        close_terminals=close,
        terminal_cluster=cluster,
        connected=connected,
        curves=curves,
        min_curves=min_curves,
        checks=checks,
    )


__all__ = [
    "LayoutConstraints",
    "LayoutScore",
    "RetryStrategy",
    "close_terminal_pairs",
    "count_curves",
    "count_terminals",
    "has_close_terminals",
    "is_edge_graph_connected",
    "max_straight_run",
    "max_terminal_cluster",
    "minimum_curves",
    "score_layout",
    "straight_run_lengths",
    "terminal_cells",
]
