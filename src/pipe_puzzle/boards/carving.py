"""Spanning-tree carving and topology shaping for solved pipe layouts."""

from __future__ import annotations

from pipe_puzzle.boards.edges import (
    DIRECTIONS,
    Coord,
    EdgeGrid,
    direction_between,
    mirror_coord,
    mirror_dir,
)
from pipe_puzzle.boards.rng import Mulberry32
from pipe_puzzle.config import (
    EXTRA_EDGE_DIVISOR,
    MAX_CROSSES,
    MIN_T_JUNCTION_CAP,
    SYMMETRY_SOFTNESS,
    T_JUNCTION_DIVISOR,
    TURN_BIAS,
)

_MIRROR_MODES = ("v", "h", "vh")


def carve_spanning_tree(rows: int, cols: int, rng: Mulberry32) -> tuple[EdgeGrid, list[Coord]]:
    """Carve a spanning tree with a randomized DFS that prefers turning.

    Returns the grid and the order in which cells were first reached.
    """

    grid = EdgeGrid(rows, cols)
    visited = {(0, 0)}
    order = [(0, 0)]
    stack: list[tuple[int, int, int | None]] = [(0, 0, None)]

    while stack:
        r, c, prev_dir = stack[-1]
        neighbors = []
        for direction in DIRECTIONS:
            nr, nc = grid.neighbor(r, c, direction)
            if grid.in_bounds(nr, nc) and (nr, nc) not in visited:
                neighbors.append((nr, nc, direction))

        if not neighbors:
            stack.pop()
            continue

        chosen = None
        if prev_dir is not None:
            turn_dirs = {(prev_dir + 1) % 4, (prev_dir + 3) % 4}
            turns = [n for n in neighbors if n[2] in turn_dirs]
            if turns and rng.random() < TURN_BIAS:
                chosen = rng.choice(turns)
        if chosen is None:
            chosen = rng.choice(neighbors)

        nr, nc, direction = chosen
        grid.add_edge(r, c, direction)
        visited.add((nr, nc))
        order.append((nr, nc))
        stack.append((nr, nc, direction))

    return grid, order


def _adjacent_pairs(rows: int, cols: int) -> list[tuple[Coord, Coord]]:
    pairs = []
    for r in range(rows):
        for c in range(cols):
            if r < rows - 1:
                pairs.append(((r, c), (r + 1, c)))
            if c < cols - 1:
                pairs.append(((r, c), (r, c + 1)))
    return pairs


def _inject_extra_edges(grid: EdgeGrid, rng: Mulberry32) -> int:
    candidates = _adjacent_pairs(grid.rows, grid.cols)
    target = max(1, grid.cell_count // EXTRA_EDGE_DIVISOR)
    added = 0

    i = 0
    while i < len(candidates) and added < target:
        rng.shuffle_step(candidates, i)
        a, b = candidates[i]
        i += 1
        direction = direction_between(a, b)
        if grid.edges(*a)[direction]:
            continue

        degree_a = grid.degree(*a)
        degree_b = grid.degree(*b)
        if degree_a >= 4 or degree_b >= 4:
            continue
        # Boundary cells never become crosses.
        if degree_a + 1 == 4 and grid.is_boundary(*a):
            continue
        if degree_b + 1 == 4 and grid.is_boundary(*b):
            continue

        grid.add_edge(a[0], a[1], direction)
        if grid.count_degree(4) <= MAX_CROSSES:
            added += 1
        else:
            grid.remove_edge(a[0], a[1], direction)
    return added


def _promote_t_junctions(grid: EdgeGrid, rng: Mulberry32) -> None:
    targets = [
        (r, c)
        for r in range(1, grid.rows - 1)
        for c in range(1, grid.cols - 1)
        if grid.degree(r, c) == 3
    ]
    rng.shuffle(targets)

    for r, c in targets:
        if grid.count_degree(4) >= MAX_CROSSES:
            break
        edges = grid.edges(r, c)
        missing = [d for d in DIRECTIONS if not edges[d]]
        for direction in missing:
            nr, nc = grid.neighbor(r, c, direction)
            neighbor_degree = grid.degree(nr, nc)
            if neighbor_degree >= 4:
                continue
            if neighbor_degree == 3 and grid.is_boundary(nr, nc):
                continue
            grid.add_edge(r, c, direction)
            if grid.count_degree(4) > MAX_CROSSES:
                grid.remove_edge(r, c, direction)
            else:
                break


def _apply_soft_symmetry(grid: EdgeGrid, order: list[Coord], rng: Mulberry32) -> None:
    rows, cols = grid.rows, grid.cols
    for r, c in order:
        edges = grid.edges(r, c)
        for direction in DIRECTIONS:
            if not edges[direction]:
                continue
            for mode in _MIRROR_MODES:
                if rng.random() < SYMMETRY_SOFTNESS:
                    continue
                mr, mc = mirror_coord(r, c, rows, cols, mode)
                mdir = mirror_dir(direction, mode)
                nr, nc = grid.neighbor(mr, mc, mdir)
                if not grid.in_bounds(nr, nc):
                    continue
                if grid.can_add_edge(mr, mc, mdir, 3):
                    grid.add_edge(mr, mc, mdir)


def _strip_boundary_crosses(grid: EdgeGrid, rng: Mulberry32) -> None:
    for r, c in grid.iter_cells():
        if not grid.is_boundary(r, c) or grid.degree(r, c) != 4:
            continue
        open_dirs = [d for d in DIRECTIONS if grid.edges(r, c)[d]]
        grid.remove_edge(r, c, rng.choice(open_dirs))


def can_remove_edge(grid: EdgeGrid, r: int, c: int, direction: int) -> bool:
    """Remove an edge unless doing so disconnects the grid.

    Returns True when the edge was removed.
    """

    nr, nc = grid.neighbor(r, c, direction)
    if not grid.in_bounds(nr, nc) or not grid.edges(r, c)[direction]:
        return False
    grid.remove_edge(r, c, direction)
    if not grid.is_fully_connected():
        grid.add_edge(r, c, direction)
        return False
    return True


def _reduce_degree(grid: EdgeGrid, degree: int, cap: int, rng: Mulberry32) -> None:
    count = grid.count_degree(degree)
    if count <= cap:
        return
    cells = grid.cells_with_degree(degree)
    i = 0
    while i < len(cells) and count > cap:
        rng.shuffle_step(cells, i)
        r, c = cells[i]
        i += 1
        edges = grid.edges(r, c)
        for direction in [d for d in DIRECTIONS if edges[d]]:
            if can_remove_edge(grid, r, c, direction):
                count = grid.count_degree(degree)
                break


def t_junction_cap(rows: int, cols: int) -> int:
    return max(MIN_T_JUNCTION_CAP, (rows * cols) // T_JUNCTION_DIVISOR)


def shape_topology(grid: EdgeGrid, order: list[Coord], rng: Mulberry32) -> EdgeGrid:
    """Add cycles and junctions to a carved tree, mirror it and cap junction counts."""

    _inject_extra_edges(grid, rng)
    _promote_t_junctions(grid, rng)
    _apply_soft_symmetry(grid, order, rng)
    _strip_boundary_crosses(grid, rng)
    _reduce_degree(grid, 4, MAX_CROSSES, rng)
    _reduce_degree(grid, 3, t_junction_cap(grid.rows, grid.cols), rng)
    return grid


def generate_solved_edges(rows: int, cols: int, rng: Mulberry32) -> EdgeGrid:
    grid, order = carve_spanning_tree(rows, cols, rng)
    return shape_topology(grid, order, rng)


__all__ = [
    "can_remove_edge",
    "carve_spanning_tree",
    "generate_solved_edges",
    "shape_topology",
    "t_junction_cap",
]
