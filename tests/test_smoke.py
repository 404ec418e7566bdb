from pipe_puzzle.config import COLS, ROWS
from pipe_puzzle.text_view import format_board


def test_import_package():
    import pipe_puzzle

    assert pipe_puzzle.__version__


def test_make_board_has_one_tile_per_cell():
    import pipe_puzzle

    tiles = pipe_puzzle.make_board("zen", "medium")
    assert len(tiles) == ROWS * COLS
    assert [(tile.row, tile.col) for tile in tiles] == [(r, c) for r in range(ROWS) for c in range(COLS)]
    assert tiles[7].id == "1-1"


def test_format_board_has_one_line_per_row():
    import pipe_puzzle

    text = format_board(pipe_puzzle.make_board("zen", "hard"))
    assert len(text.splitlines()) == ROWS
