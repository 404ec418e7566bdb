from pipe_puzzle.core.connectivity import (
    board_status,
    compute_complete_dirs,
    compute_connections,
    completion_wave,
    connection_bitmask,
    has_any_complete,
    internal_port_pairs,
    is_solved,
)
from pipe_puzzle.core.tiles import Tile, TileType

# Terminal rotations that face N, E, S, W.
FACE_N, FACE_E, FACE_S, FACE_W = 2, 3, 0, 1


def terminal(row, col, rotation):
    return Tile(row=row, col=col, type=TileType.TERMINAL, rotation=rotation, target_rotation=rotation)


def test_facing_terminals_are_complete():
    tiles = [terminal(0, 0, FACE_E), terminal(0, 1, FACE_W)]
    connections = compute_connections(tiles)
    assert connections == [(False, True, False, False), (False, False, False, True)]
    complete = compute_complete_dirs(tiles, connections)
    assert complete == connections
    assert is_solved(tiles, complete)


def test_turned_away_terminal_leaves_everything_dangling():
    tiles = [terminal(0, 0, FACE_E), terminal(0, 1, FACE_N)]
    status = board_status(tiles)
    assert status.connections == [(False, False, False, False)] * 2
    assert not has_any_complete(status.complete)
    assert not status.solved


def test_chain_through_straight_is_complete():
    tiles = [
        terminal(0, 0, FACE_E),
        Tile(row=0, col=1, type=TileType.STRAIGHT, rotation=1, target_rotation=1),
        terminal(0, 2, FACE_W),
    ]
    complete = compute_complete_dirs(tiles)
    assert complete[1] == (False, True, False, True)
    assert is_solved(tiles, complete)


def test_one_closed_component_among_open_ones():
    tiles = [terminal(0, 0, FACE_E), terminal(0, 1, FACE_W), terminal(2, 2, FACE_N)]
    status = board_status(tiles)
    assert any(status.complete[0])
    assert any(status.complete[1])
    assert not any(status.complete[2])
    assert status.complete_tile_count == 2
    assert not status.solved


def test_t_junction_needs_all_three_branches():
    t_junction = Tile(row=1, col=1, type=TileType.T_JUNCTION, rotation=2, target_rotation=2)
    assert t_junction.open_sides() == (False, True, True, True)
    tiles = [t_junction, terminal(1, 0, FACE_E), terminal(1, 2, FACE_W), terminal(2, 1, FACE_N)]
    assert is_solved(tiles)

    tiles[3].set_rotation(FACE_S)
    complete = compute_complete_dirs(tiles)
    assert not has_any_complete(complete)


def test_cross_paths_follow_rotation_parity():
    cross = Tile(row=1, col=1, type=TileType.CROSS_CURVE, rotation=0, target_rotation=0)
    tiles = [cross, terminal(0, 1, FACE_S), terminal(1, 0, FACE_E)]

    complete = compute_complete_dirs(tiles)
    assert complete[0] == (True, False, False, True)
    assert any(complete[1]) and any(complete[2])

    cross.rotate()
    complete = compute_complete_dirs(tiles)
    assert not has_any_complete(complete)


def test_internal_port_pairs():
    cross = Tile(row=0, col=0, type=TileType.CROSS_CURVE, rotation=3, target_rotation=0)
    assert internal_port_pairs(cross, cross.open_sides()) == [(0, 1), (2, 3)]
    curve = Tile(row=0, col=0, type=TileType.CURVE_RIGHT, rotation=0, target_rotation=0)
    assert internal_port_pairs(curve, curve.open_sides()) == [(0, 1)]
    end = terminal(0, 0, FACE_N)
    assert internal_port_pairs(end, end.open_sides()) == []


def test_connection_bitmask():
    assert connection_bitmask((False, False, False, False)) == 0
    assert connection_bitmask((True, False, True, False)) == 5
    assert connection_bitmask((True, True, True, True)) == 15


def test_results_follow_list_order_not_board_order():
    tiles = [terminal(0, 1, FACE_W), terminal(0, 0, FACE_E)]
    connections = compute_connections(tiles)
    assert connections == [(False, False, False, True), (False, True, False, False)]


def test_completion_wave_distances():
    tiles = [
        terminal(0, 0, FACE_E),
        Tile(row=0, col=1, type=TileType.STRAIGHT, rotation=1, target_rotation=1),
        terminal(0, 2, FACE_W),
    ]
    status = board_status(tiles)
    assert completion_wave(tiles, 0, status.connections, status.complete) == {0: 0, 1: 1, 2: 2}
    assert completion_wave(tiles, 2, status.connections, status.complete) == {2: 0, 1: 1, 0: 2}


def test_completion_wave_is_empty_from_incomplete_tile():
    tiles = [terminal(0, 0, FACE_E), terminal(0, 1, FACE_N)]
    status = board_status(tiles)
    assert completion_wave(tiles, 0, status.connections, status.complete) == {}
