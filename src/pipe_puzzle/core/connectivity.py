"""Neighbor matching and port-graph completion for a board of tiles.

Every open side of a tile is a port with integer id ``index * 4 + direction``.
Ports are joined inside a tile when they belong to the same physical path and
across tiles when both sides face each other. A port with no facing partner is
dangling; a port is complete when its component holds no dangling port.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Sequence

from pipe_puzzle.core.tiles import DIR_DELTAS, NO_EDGES, Edges, Tile, TileType, opposite_dir

ConnectionMap = list[Edges]
CompletionMap = list[Edges]


def _index_by_position(tiles: Sequence[Tile]) -> dict[tuple[int, int], int]:
    return {(tile.row, tile.col): index for index, tile in enumerate(tiles)}


def _neighbor_indices(tile: Tile, by_pos: dict[tuple[int, int], int]) -> list[int | None]:
    return [by_pos.get((tile.row + dr, tile.col + dc)) for dr, dc in DIR_DELTAS]


def compute_connections(tiles: Sequence[Tile]) -> ConnectionMap:
    """Per tile, which open sides face a neighbor with a matching open side."""

    by_pos = _index_by_position(tiles)
    open_sides = [tile.open_sides() for tile in tiles]
    connections = []
    for index, tile in enumerate(tiles):
        edges = open_sides[index]
        neighbors = _neighbor_indices(tile, by_pos)
        connected = [False, False, False, False]
        for direction, has_edge in enumerate(edges):
            neighbor = neighbors[direction]
            if has_edge and neighbor is not None and open_sides[neighbor][opposite_dir(direction)]:
                connected[direction] = True
        connections.append(tuple(connected))
    return connections


def internal_port_pairs(tile: Tile, edges: Sequence[bool]) -> list[tuple[int, int]]:
    """Pairs of a tile's own ports that lie on the same path through it."""

    if tile.type is TileType.CROSS_CURVE:
        # Two independent through-paths whose pairing flips with rotation parity.
        if tile.rotation % 2 == 0:
            return [(0, 3), (1, 2)]
        return [(0, 1), (2, 3)]
    dirs = [direction for direction, on in enumerate(edges) if on]
    if len(dirs) == 2:
        return [(dirs[0], dirs[1])]
    if len(dirs) == 3:
        return [(dirs[0], dirs[1]), (dirs[1], dirs[2]), (dirs[0], dirs[2])]
    return []


class PortUnion:
    """Union-find over port ids that also tracks whether a set has a dangling port."""

    def __init__(self, size: int):
        self.parent = list(range(size))
        self.dangling = [False] * size

    def find(self, port: int) -> int:
        root = port
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[port] != root:
            self.parent[port], port = root, self.parent[port]
        return root

    def union(self, a: int, b: int) -> None:
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return
        self.parent[root_b] = root_a
        self.dangling[root_a] = self.dangling[root_a] or self.dangling[root_b]

    def mark_dangling(self, port: int) -> None:
        self.dangling[self.find(port)] = True

    def is_dangling(self, port: int) -> bool:
        return self.dangling[self.find(port)]


def compute_complete_dirs(tiles: Sequence[Tile], connections: ConnectionMap | None = None) -> CompletionMap:
    """Per tile, which open sides belong to a port component with no dangling port."""

    if connections is None:
        connections = compute_connections(tiles)
    by_pos = _index_by_position(tiles)
    open_sides = [tile.open_sides() for tile in tiles]
    ports = PortUnion(len(tiles) * 4)

    for index, tile in enumerate(tiles):
        edges = open_sides[index]
        connected = connections[index] if index < len(connections) else NO_EDGES
        for direction, has_edge in enumerate(edges):
            if has_edge and not connected[direction]:
                ports.mark_dangling(index * 4 + direction)
        for a, b in internal_port_pairs(tile, edges):
            if edges[a] and edges[b]:
                ports.union(index * 4 + a, index * 4 + b)

    for index, tile in enumerate(tiles):
        connected = connections[index] if index < len(connections) else NO_EDGES
        neighbors = _neighbor_indices(tile, by_pos)
        for direction, is_connected in enumerate(connected):
            neighbor = neighbors[direction]
            if not is_connected or neighbor is None:
                continue
            if open_sides[index][direction] and open_sides[neighbor][opposite_dir(direction)]:
                ports.union(index * 4 + direction, neighbor * 4 + opposite_dir(direction))

    complete = []
    for index in range(len(tiles)):
        edges = open_sides[index]
        complete.append(
            tuple(bool(edges[d]) and not ports.is_dangling(index * 4 + d) for d in range(4))
        )
    return complete


def connection_bitmask(dirs: Sequence[bool]) -> int:
    """Pack N, E, S, W flags into bits 1, 2, 4, 8."""

    return sum(1 << direction for direction, on in enumerate(dirs) if on)


def is_tile_complete(tile: Tile, complete_dirs: Sequence[bool]) -> bool:
    return all(complete_dirs[d] for d, on in enumerate(tile.open_sides()) if on)


def is_solved(tiles: Sequence[Tile], complete: CompletionMap | None = None) -> bool:
    """True when every open side of every tile is complete."""

    if complete is None:
        complete = compute_complete_dirs(tiles)
    return all(is_tile_complete(tile, complete[index]) for index, tile in enumerate(tiles))


def has_any_complete(complete: CompletionMap) -> bool:
    return any(any(dirs) for dirs in complete)


@dataclass(frozen=True)
class BoardStatus:
    connections: ConnectionMap
    complete: CompletionMap
    solved: bool

    @property
    def complete_tile_count(self) -> int:
        return sum(1 for dirs in self.complete if any(dirs))


def board_status(tiles: Sequence[Tile]) -> BoardStatus:
    connections = compute_connections(tiles)
    complete = compute_complete_dirs(tiles, connections)
    return BoardStatus(connections=connections, complete=complete, solved=is_solved(tiles, complete))


def completion_wave(
    tiles: Sequence[Tile],
    start_index: int,
    connections: ConnectionMap,
    complete: CompletionMap,
) -> dict[int, int]:
    """Breadth-first distances from a tile across complete, connected sides.

    Empty when the start tile has no complete side.
    """

    if not any(complete[start_index]):
        return {}
    by_pos = _index_by_position(tiles)
    distances = {start_index: 0}
    queue = deque([start_index])
    while queue:
        current = queue.popleft()
        neighbors = _neighbor_indices(tiles[current], by_pos)
        for direction, neighbor in enumerate(neighbors):
            if neighbor is None or neighbor in distances:
                continue
            if not connections[current][direction] or not complete[current][direction]:
                continue
            if not complete[neighbor][opposite_dir(direction)]:
                continue
            distances[neighbor] = distances[current] + 1
            queue.append(neighbor)
    return distances


__all__ = [
    "BoardStatus",
    "CompletionMap",
    "ConnectionMap",
    "PortUnion",
    "board_status",
    "compute_complete_dirs",
    "compute_connections",
    "completion_wave",
    "connection_bitmask",
    "has_any_complete",
    "internal_port_pairs",
    "is_solved",
    "is_tile_complete",
]
