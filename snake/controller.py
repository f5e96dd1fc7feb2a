"""
controller.py — Controller layer.

Responsibilities:
  - Own the pygame event loop.
  - Translate raw keyboard/mouse events into model commands.
  - Own the tick timer: arm it on start, cancel it when the game ends
    or the window closes.
  - Ask the view to render after every tick.
  - Know nothing about rendering details (that's the View's job).
  - Know nothing about game rules (that's the Model's job).

The controller is the only layer that reads pygame events.
"""

import logging
from typing import Optional

import pygame

from .config import WIDTH, HEIGHT, FPS, SNAKE_SPEED
from .model import Direction, GameModel
from .timer import TickTimer
from .view import GameView

logger = logging.getLogger(__name__)

DIRECTION_KEYS = {
    pygame.K_LEFT:  Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_UP:    Direction.UP,
    pygame.K_DOWN:  Direction.DOWN,
}
START_KEYS = (pygame.K_RETURN, pygame.K_SPACE)
QUIT_KEYS = (pygame.K_ESCAPE, pygame.K_q)


class GameController:
    """
    Owns the main loop.
    Glues Model <-> View without them knowing about each other.
    """

    def __init__(self, model: Optional[GameModel] = None):
        pygame.init()
        self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
        pygame.display.set_caption("Snake Game")
        self.clock = pygame.time.Clock()
        self.model = model or GameModel()
        self.view = GameView(self.screen)
        self.timer = TickTimer(SNAKE_SPEED, self._on_tick)
        self.alive = True
        self._hover = False

    # ── Public entry point ────────────────────────────────────────
    def run(self) -> int:
        """Run until the window is closed. Returns the last score."""
        logger.info("snake window open (%dx%d, tick %d ms)", WIDTH, HEIGHT, SNAKE_SPEED)
        self._redraw()
        with self.timer:
            while self.alive:
                elapsed = self.clock.tick(FPS)
                self._handle_events()
                self.timer.advance(elapsed)
        pygame.quit()
        return self.model.score

    def stop(self) -> None:
        self.timer.cancel()
        self.alive = False

    # ── Game lifecycle ────────────────────────────────────────────
    def start_game(self) -> bool:
        if not self.model.start():
            return False
        self.timer.start()
        self._redraw()
        return True

    def _on_tick(self) -> None:
        snapshot = self.model.tick()
        self.view.render(snapshot, self._hover)
        if not self.model.running:
            self.timer.cancel()

    def _redraw(self) -> None:
        self.view.render(self.model.snapshot(), self._hover)

    # ── Event dispatch ────────────────────────────────────────────
    def _handle_events(self) -> None:
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.stop()
        elif event.type == pygame.KEYDOWN:
            self._handle_keydown(event.key)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._handle_click(event.pos)
        elif event.type == pygame.MOUSEMOTION:
            self._handle_motion(event.pos)

    def _handle_keydown(self, key: int) -> None:
        if key in QUIT_KEYS:
            self.stop()
        elif self.model.running:
            if key in DIRECTION_KEYS:
                self.model.set_direction(DIRECTION_KEYS[key])
        elif key in START_KEYS:
            self.start_game()

    def _handle_click(self, pos: tuple[int, int]) -> None:
        # The button is only on screen while no game is running.
        if not self.model.running and self.view.button_rect.collidepoint(pos):
            self.start_game()

    def _handle_motion(self, pos: tuple[int, int]) -> None:
        hover = self.view.button_rect.collidepoint(pos)
        if hover != self._hover:
            self._hover = hover
            if not self.model.running:
                self._redraw()
