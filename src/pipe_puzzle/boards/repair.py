"""Post-blank repair: rejoin split pipe pieces, then nudge the layout toward its constraints."""

from __future__ import annotations

import logging
from collections import deque

from pipe_puzzle.boards.edges import E, S, Coord, EdgeGrid
from pipe_puzzle.boards.rng import Mulberry32
from pipe_puzzle.boards.validation import (
    LayoutConstraints,
    close_terminal_pairs,
    count_curves,
    count_terminals,
    max_terminal_cluster,
    minimum_curves,
    straight_run_lengths,
)
from pipe_puzzle.config import MAX_CROSSES, REPAIR_MAX_STEPS, REPAIR_SIDEWAYS_CHANCE

logger = logging.getLogger(__name__)

# (action, row, col, direction); direction is always E or S
Edit = tuple[str, int, int, int]


def label_pieces(grid: EdgeGrid, blanks: set[Coord]) -> dict[Coord, int]:
    """Piece number of every non-blank cell, following open edges."""

    labels: dict[Coord, int] = {}
    piece = 0
    for start in grid.iter_cells():
        if start in blanks or start in labels:
            continue
        labels[start] = piece
        queue = deque([start])
        while queue:
            r, c = queue.popleft()
            for direction, open_side in enumerate(grid.edges(r, c)):
                if not open_side:
                    continue
                nxt = grid.neighbor(r, c, direction)
                if not grid.in_bounds(*nxt) or nxt in blanks or nxt in labels:
                    continue
                labels[nxt] = piece
                queue.append(nxt)
        piece += 1
    return labels


def count_pieces(grid: EdgeGrid, blanks: set[Coord]) -> int:
    labels = label_pieces(grid, blanks)
    return max(labels.values(), default=-1) + 1


def _adjacent_pairs(grid: EdgeGrid, blanks: set[Coord]):
    for r, c in grid.iter_cells():
        if (r, c) in blanks:
            continue
        for direction in (E, S):
            nr, nc = grid.neighbor(r, c, direction)
            if grid.in_bounds(nr, nc) and (nr, nc) not in blanks:
                yield r, c, direction


def _join_tier(grid: EdgeGrid, r: int, c: int, direction: int, crosses: int) -> int:
    """0 when the joined cells stay at degree 3 or less, 1 when a cross fits under the cap, else 2."""

    degrees = (grid.degree(r, c), grid.degree(*grid.neighbor(r, c, direction)))
    if max(degrees) < 3:
        return 0
    if crosses + sum(1 for degree in degrees if degree == 3) <= MAX_CROSSES:
        return 1
    return 2


def join_pieces(grid: EdgeGrid, blanks: set[Coord], rng: Mulberry32) -> int:
    """Add edges between neighbouring pieces until one piece is left.

    Returns the number of edges added. Stops early when the blanks split the
    remaining cells, since no edge can bridge them.
    """

    added = 0
    while True:
        labels = label_pieces(grid, blanks)
        if max(labels.values(), default=0) == 0:
            return added
        crosses = grid.count_degree(4)
        candidates = [
            (r, c, d)
            for r, c, d in _adjacent_pairs(grid, blanks)
            if labels[(r, c)] != labels[grid.neighbor(r, c, d)]
        ]
        if not candidates:
            return added
        tiers = [_join_tier(grid, r, c, d, crosses) for r, c, d in candidates]
        best = min(tiers)
        r, c, d = rng.choice([pair for pair, tier in zip(candidates, tiers) if tier == best])
        grid.add_edge(r, c, d)
        added += 1


def layout_penalty(grid: EdgeGrid, constraints: LayoutConstraints) -> tuple[int, int]:
    """(terminal and straight-run violations, remaining check violations); (0, 0) passes."""

    terminals = count_terminals(grid)
    terminal_gap = max(0, constraints.min_terminals - terminals, terminals - constraints.max_terminals)
    straight_excess = sum(
        max(0, run - constraints.max_straight_run) for run in straight_run_lengths(grid)
    )
    curves, non_blank = count_curves(grid)
    secondary = (
        close_terminal_pairs(grid, constraints.min_terminal_distance)
        + max(0, max_terminal_cluster(grid) - constraints.max_terminal_cluster)
        + max(0, minimum_curves(non_blank, constraints.curve_ratio) - curves)
    )
    return terminal_gap + straight_excess, secondary


def _addable_pairs(grid: EdgeGrid, blanks: set[Coord]) -> list[tuple[int, int, int]]:
    return [
        (r, c, d)
        for r, c, d in _adjacent_pairs(grid, blanks)
        if not grid.edges(r, c)[d]
        and grid.degree(r, c) < 3
        and grid.degree(*grid.neighbor(r, c, d)) < 3
    ]


def _open_edges(grid: EdgeGrid) -> list[tuple[int, int, int]]:
    return [(r, c, d) for r, c in grid.iter_cells() for d in (E, S) if grid.edges(r, c)[d]]


def _propose(grid: EdgeGrid, blanks: set[Coord], rng: Mulberry32) -> list[Edit]:
    kind = rng.randrange(3)
    if kind == 0:
        pairs = _addable_pairs(grid, blanks)
        return [("add", *rng.choice(pairs))] if pairs else []

    edges = _open_edges(grid)
    if not edges:
        return []
    removed = rng.choice(edges)
    if kind == 1:
        return [("remove", *removed)]

    # Move one edge: drop it, then add one that bridges any split it caused.
    grid.remove_edge(*removed)
    labels = label_pieces(grid, blanks)
    pairs = [pair for pair in _addable_pairs(grid, blanks) if pair != removed]
    r, c, d = removed
    if labels[(r, c)] != labels[grid.neighbor(r, c, d)]:
        pairs = [
            (pr, pc, pd)
            for pr, pc, pd in pairs
            if labels[(pr, pc)] != labels[grid.neighbor(pr, pc, pd)]
        ]
    grid.add_edge(*removed)
    if not pairs:
        return []
    return [("remove", *removed), ("add", *rng.choice(pairs))]


def _apply(grid: EdgeGrid, edits: list[Edit]) -> None:
    for action, r, c, d in edits:
        if action == "add":
            grid.add_edge(r, c, d)
        else:
            grid.remove_edge(r, c, d)


def _undo(grid: EdgeGrid, edits: list[Edit]) -> None:
    for action, r, c, d in reversed(edits):
        if action == "add":
            grid.remove_edge(r, c, d)
        else:
            grid.add_edge(r, c, d)


def repair_layout(
    grid: EdgeGrid,
    blanks: set[Coord],
    constraints: LayoutConstraints,
    rng: Mulberry32,
    max_steps: int = REPAIR_MAX_STEPS,
) -> tuple[int, int]:
    """Rejoin the pipe network, then hill-climb on `layout_penalty`.

    Edits never split the network again and never raise a cell above degree
    3. Equal-penalty edits are kept now and then to cross plateaus. Returns
    the final penalty.
    """

    joined = join_pieces(grid, blanks, rng)
    pieces = count_pieces(grid, blanks)
    penalty = layout_penalty(grid, constraints)
    steps = 0
    while penalty != (0, 0) and steps < max_steps:
        steps += 1
        edits = _propose(grid, blanks, rng)
        if not edits:
            continue
        _apply(grid, edits)
        if count_pieces(grid, blanks) > pieces:
            _undo(grid, edits)
            continue
        candidate = layout_penalty(grid, constraints)
        if candidate < penalty or (candidate == penalty and rng.random() < REPAIR_SIDEWAYS_CHANCE):
            penalty = candidate
        else:
            _undo(grid, edits)

    logger.debug("Repair joined %d pieces, %d steps, penalty %s", joined, steps, penalty)
    return penalty


__all__ = [
    "count_pieces",
    "join_pieces",
    "label_pieces",
    "layout_penalty",
    "repair_layout",
]
