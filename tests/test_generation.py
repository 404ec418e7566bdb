import copy

import pytest

from pipe_puzzle.boards import edges, progression
from pipe_puzzle.boards.blanks import (
    apply_symmetric_blanks,
    build_blank_groups,
    is_remainder_connected,
    symmetric_cells,
)
from pipe_puzzle.boards.carving import carve_spanning_tree, generate_solved_edges
from pipe_puzzle.boards.edges import EdgeGrid, opposite_dir
from pipe_puzzle.boards.generator import (
    attempt_seed,
    generate_layout,
    make_board,
    materialize_tiles,
    resolve_board_config,
)
from pipe_puzzle.boards.presets import DIFFICULTY_PRESETS
from pipe_puzzle.boards.progression import normalize_progression_settings
from pipe_puzzle.boards.repair import count_pieces, join_pieces, layout_penalty, repair_layout
from pipe_puzzle.boards.rng import Mulberry32, hash_string_to_int
from pipe_puzzle.boards.validation import (
    RetryStrategy,
    is_edge_graph_connected,
    minimum_curves,
    score_layout,
)
from pipe_puzzle.config import COLS, ROWS
from pipe_puzzle.core.connectivity import board_status, has_any_complete, is_solved
from pipe_puzzle.core.tiles import TileType

SAMPLE_SEEDS = ("zen", "alpha", "beta", "gamma", "delta", "42")


def edges_are_reciprocal(grid):
    for r, c in grid.iter_cells():
        for direction, open_side in enumerate(grid.edges(r, c)):
            if not open_side:
                continue
            nr, nc = grid.neighbor(r, c, direction)
            if not grid.in_bounds(nr, nc) or not grid.edges(nr, nc)[opposite_dir(direction)]:
                return False
    return True


def signatures(tiles):
    return [(tile.row, tile.col) + tile.signature() for tile in tiles]


def test_edge_grid_rejects_empty_dimensions():
    with pytest.raises(ValueError):
        EdgeGrid(0, 4)


def test_edge_grid_drops_unused_helpers():
    assert not hasattr(EdgeGrid, "as_rows")
    assert not hasattr(EdgeGrid, "copy")
    assert not hasattr(edges, "grid_neighbors")
    assert not hasattr(progression, "SETTING_NAMES")


def test_add_edge_off_board_raises():
    grid = EdgeGrid(2, 2)
    with pytest.raises(ValueError):
        grid.add_edge(0, 0, 0)


def test_spanning_tree_reaches_every_cell_once():
    grid, order = carve_spanning_tree(ROWS, COLS, Mulberry32(1))
    edge_count = sum(grid.degree(r, c) for r, c in grid.iter_cells()) // 2
    assert edge_count == ROWS * COLS - 1
    assert grid.is_fully_connected()
    assert sorted(order) == sorted(grid.iter_cells())
    assert order[0] == (0, 0)


@pytest.mark.parametrize("seed", range(8))
def test_shaped_topology_invariants(seed):
    grid = generate_solved_edges(ROWS, COLS, Mulberry32(seed))
    assert grid.is_fully_connected()
    assert edges_are_reciprocal(grid)
    assert grid.count_degree(4) <= 1
    assert all(not grid.is_boundary(r, c) for r, c in grid.cells_with_degree(4))


def test_single_cell_grid_has_no_edges():
    grid = generate_solved_edges(1, 1, Mulberry32(3))
    assert grid.edges(0, 0) == [False, False, False, False]


def test_blank_groups_cover_the_top_left_quadrant():
    groups, index_grid = build_blank_groups(ROWS, COLS)
    assert len(groups) == (ROWS // 2) * (COLS // 2)
    assert index_grid[0][0] == 0
    assert symmetric_cells(0, 0, 3, 3)[-1] == (2, 2)
    assert symmetric_cells(1, 1, 3, 3) == [(1, 1)]


@pytest.mark.parametrize("seed", range(6))
def test_blanks_are_mirrored_and_severed(seed):
    rng = Mulberry32(seed)
    grid = generate_solved_edges(ROWS, COLS, rng)
    blanks = apply_symmetric_blanks(grid, rng, 12, 2, min_cluster_cells=8, max_empty_row_run=2, max_empty_col_run=2)
    assert is_remainder_connected(blanks, ROWS, COLS)
    assert len(blanks) % 4 == 0
    for r, c in blanks:
        assert grid.degree(r, c) == 0
        assert (ROWS - 1 - r, COLS - 1 - c) in blanks
        assert (ROWS - 1 - r, c) in blanks
    assert edges_are_reciprocal(grid)


def test_no_blanks_requested():
    rng = Mulberry32(5)
    grid = generate_solved_edges(ROWS, COLS, rng)
    assert apply_symmetric_blanks(grid, rng, 0, 2) == set()


def test_negative_cluster_count_is_rejected():
    rng = Mulberry32(5)
    grid = generate_solved_edges(ROWS, COLS, rng)
    with pytest.raises(ValueError):
        apply_symmetric_blanks(grid, rng, 8, -1)


def test_center_bias_blanks_stay_symmetric():
    rng = Mulberry32(11)
    grid = generate_solved_edges(ROWS, COLS, rng)
    blanks = apply_symmetric_blanks(grid, rng, 16, 1, center_bias=0.9)
    assert len(blanks) % 4 == 0
    assert all((ROWS - 1 - r, COLS - 1 - c) in blanks for r, c in blanks)


def test_minimum_curves():
    assert minimum_curves(0, 0.3) == 0
    assert minimum_curves(10, 0.3) == 8
    assert minimum_curves(60, 0.25) == 15


def test_attempt_seed_wraps():
    assert attempt_seed(10, 2) == 10 + 2 * 97
    assert attempt_seed(0xFFFFFFFF, 1) == 96


def test_generate_layout_needs_an_attempt():
    with pytest.raises(ValueError):
        generate_layout(1, DIFFICULTY_PRESETS["medium"], max_attempts=0)


def test_best_strategy_never_scores_below_last():
    config = DIFFICULTY_PRESETS["easy"]
    seed = hash_string_to_int("zen")
    last = generate_layout(seed, config, strategy=RetryStrategy.LAST, max_attempts=3)
    best = generate_layout(seed, config, strategy="best", max_attempts=3)
    if last.score.passed:
        assert best.attempt == last.attempt
    else:
        assert best.score.score >= last.score.score


def test_materialized_solution_is_solved():
    layout = generate_layout(hash_string_to_int("zen"), DIFFICULTY_PRESETS["medium"])
    tiles = materialize_tiles(layout.grid)
    assert len(tiles) == ROWS * COLS
    assert all(tile.is_solved_orientation for tile in tiles)
    assert is_solved(tiles)
    assert score_layout(layout.grid, DIFFICULTY_PRESETS["medium"].constraints()) == layout.score


@pytest.mark.parametrize("difficulty", ["easy", "medium", "hard"])
def test_make_board_is_deterministic(difficulty):
    assert signatures(make_board("zen", difficulty)) == signatures(make_board("zen", difficulty))


def test_different_seeds_give_different_boards():
    assert signatures(make_board("zen")) != signatures(make_board("zen2"))


@pytest.mark.parametrize("seed", SAMPLE_SEEDS[:3])
def test_scrambled_board_starts_without_complete_sides(seed):
    tiles = make_board(seed, "medium")
    assert not has_any_complete(board_status(tiles).complete)


def test_board_solves_at_target_rotation():
    tiles = make_board("zen", "medium")
    solved = copy.deepcopy(tiles)
    for tile in solved:
        tile.set_rotation(tile.target_rotation)
    status = board_status(solved)
    assert status.solved
    for tile, dirs in zip(solved, status.complete):
        assert dirs == tile.open_sides()


def test_rotation_degrees_match_initial_rotation():
    for tile in make_board("alpha", "easy"):
        assert tile.rotation_degrees == tile.rotation * 90
        assert 0 <= tile.rotation < 4


def test_hard_boards_have_no_blank_tiles():
    assert not any(tile.is_blank for tile in make_board("zen", "hard"))


def test_empty_seed_uses_default_text():
    assert signatures(make_board("", "medium")) == signatures(make_board("zen", "medium"))
    assert signatures(make_board(None, "medium")) == signatures(make_board("zen", "medium"))


def test_unknown_difficulty_falls_back_to_medium():
    assert resolve_board_config("zen", "impossible") == DIFFICULTY_PRESETS["medium"]
    assert signatures(make_board("zen", "impossible")) == signatures(make_board("zen", "medium"))


def test_progression_seed_overrides_difficulty():
    config = resolve_board_config("P0-0-28-18-4-2-2-2-0-0", "easy")
    assert config.blanks.max_cells == 0
    tiles = make_board("P0-0-28-18-4-2-2-2-0-0", "easy")
    assert not any(tile.is_blank for tile in tiles)


def test_settings_object_and_mapping_agree():
    settings = {"gap_rate": 20, "gap_clusters": 1, "center_bias": 60}
    from_mapping = make_board("level-1", settings)
    from_object = make_board("level-1", normalize_progression_settings(settings))
    assert signatures(from_mapping) == signatures(from_object)


def test_cross_tiles_are_never_on_the_border():
    for seed in SAMPLE_SEEDS[:3]:
        for tile in make_board(seed, "hard"):
            if tile.type is TileType.CROSS_CURVE:
                assert 0 < tile.row < ROWS - 1
                assert 0 < tile.col < COLS - 1


def test_join_pieces_links_an_empty_grid():
    grid = EdgeGrid(4, 4)
    added = join_pieces(grid, set(), Mulberry32(8))
    assert added == 15
    assert count_pieces(grid, set()) == 1
    assert edges_are_reciprocal(grid)


def test_join_pieces_leaves_blanks_closed():
    grid = EdgeGrid(3, 3)
    blanks = {(1, 1)}
    assert join_pieces(grid, blanks, Mulberry32(2)) == 7
    assert count_pieces(grid, blanks) == 1
    assert grid.degree(1, 1) == 0


def test_join_pieces_stops_when_blanks_split_the_board():
    grid = EdgeGrid(3, 3)
    blanks = {(0, 1), (1, 1), (2, 1)}
    assert join_pieces(grid, blanks, Mulberry32(2)) == 4
    assert count_pieces(grid, blanks) == 2


@pytest.mark.parametrize("seed", range(6))
def test_repair_rejoins_the_pipes_around_blanks(seed):
    rng = Mulberry32(seed)
    grid = generate_solved_edges(ROWS, COLS, rng)
    blanks = apply_symmetric_blanks(grid, rng, 16, 2, min_cluster_cells=8)
    constraints = DIFFICULTY_PRESETS["easy"].constraints()

    penalty = repair_layout(grid, blanks, constraints, Mulberry32(seed + 1000))

    assert count_pieces(grid, blanks) == 1
    assert all(grid.degree(r, c) == 0 for r, c in blanks)
    assert all(grid.degree(r, c) > 0 for r, c in grid.iter_cells() if (r, c) not in blanks)
    assert edges_are_reciprocal(grid)
    assert penalty == layout_penalty(grid, constraints)
    assert (penalty == (0, 0)) == score_layout(grid, constraints).passed


def test_layout_penalty_counts_terminal_gap():
    grid = EdgeGrid(1, 2)
    grid.add_edge(0, 0, 1)
    constraints = DIFFICULTY_PRESETS["medium"].constraints()
    assert layout_penalty(grid, constraints)[0] == constraints.min_terminals - 2


def test_blank_fallback_keeps_the_rest_connected():
    for seed in range(10):
        rng = Mulberry32(seed)
        grid = generate_solved_edges(ROWS, COLS, rng)
        blanks = apply_symmetric_blanks(grid, rng, 20, 5, min_cluster_cells=10)
        assert is_remainder_connected(blanks, ROWS, COLS)


STAT_SEEDS = tuple(f"stat-{i}" for i in range(50))


def solved_grid(tiles):
    grid = EdgeGrid(ROWS, COLS)
    for tile in tiles:
        solved = copy.copy(tile)
        solved.set_rotation(tile.target_rotation)
        grid.cells[tile.row][tile.col] = list(solved.open_sides())
    return grid


def flood_fill_pieces(tiles):
    """Pieces of non-blank tiles joined through matching open sides in the solved state."""

    grid = solved_grid(tiles)
    cells = {(tile.row, tile.col) for tile in tiles if not tile.is_blank}
    seen = set()
    pieces = 0
    for start in sorted(cells):
        if start in seen:
            continue
        pieces += 1
        seen.add(start)
        stack = [start]
        while stack:
            r, c = stack.pop()
            for direction, open_side in enumerate(grid.edges(r, c)):
                nr, nc = grid.neighbor(r, c, direction)
                if not open_side or (nr, nc) not in cells or (nr, nc) in seen:
                    continue
                if grid.edges(nr, nc)[opposite_dir(direction)]:
                    seen.add((nr, nc))
                    stack.append((nr, nc))
    return pieces


@pytest.fixture(scope="module", params=["easy", "medium", "hard"])
def sampled_boards(request):
    difficulty = request.param
    boards = [make_board(seed, difficulty) for seed in STAT_SEEDS]
    return DIFFICULTY_PRESETS[difficulty].constraints(), boards


def test_every_sampled_board_is_one_network(sampled_boards):
    _, boards = sampled_boards
    for tiles in boards:
        assert flood_fill_pieces(tiles) == 1
        assert is_edge_graph_connected(solved_grid(tiles))


def test_sampled_boards_rarely_break_bounds(sampled_boards):
    constraints, boards = sampled_boards
    scores = [score_layout(solved_grid(tiles), constraints) for tiles in boards]
    terminal_misses = sum(
        1 for s in scores if not constraints.min_terminals <= s.terminals <= constraints.max_terminals
    )
    long_runs = sum(1 for s in scores if s.longest_straight_run > constraints.max_straight_run)
    assert terminal_misses <= 2
    assert long_runs <= 2


def test_sampled_boards_start_unsolved(sampled_boards):
    _, boards = sampled_boards
    for tiles in boards:
        assert not has_any_complete(board_status(tiles).complete)
