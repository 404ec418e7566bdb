import logging
import random

import arcade

import pipe_puzzle.render as ui
from pipe_puzzle.boards.presets import DEFAULT_DIFFICULTY
from pipe_puzzle.config import DEFAULT_SEED_TEXT, SCREEN_HEIGHT, SCREEN_WIDTH, WINDOW_TITLE
from pipe_puzzle.core.game import PuzzleGame

logger = logging.getLogger(__name__)


class PipesWindow(arcade.Window):
    def __init__(self, game):
        super().__init__(SCREEN_WIDTH, SCREEN_HEIGHT, WINDOW_TITLE)
        self.game = game
        self.geometry = ui.compute_board_geometry()
        self.text_cache = {}

    def on_draw(self):
        ui.draw_frame(self, self.geometry, self.text_cache, self.game)

    def on_mouse_press(self, x, y, button, modifiers):
        if button != arcade.MOUSE_BUTTON_LEFT:
            return
        cell = ui.get_cell_under_pixel(self.geometry, x, y)
        if cell is None:
            return
        index = self.game.tile_at(*cell)
        if index is None:
            return
        result = self.game.rotate_tile(index)
        if result.newly_completed:
            logger.debug("Rotation at %s completed %d tiles", cell, len(result.wave))

    def on_key_press(self, symbol, modifiers):
        if symbol == arcade.key.R:
            self.game.reset()
        elif symbol == arcade.key.N:
            self.game.regenerate(seed_text=str(random.randrange(1_000_000)))
        elif symbol == arcade.key.ESCAPE:
            self.close()


def play_pipes(seed_text=DEFAULT_SEED_TEXT, difficulty=DEFAULT_DIFFICULTY):
    game = PuzzleGame(seed_text, difficulty)
    PipesWindow(game)
    arcade.run()


if __name__ == "__main__":
    play_pipes()
