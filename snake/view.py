"""
view.py — View layer.

Two levels:
  - render(snapshot, sink) draws the board onto any RenderSink: clear,
    one block per snake cell, one block for the food. Nothing else.
  - GameView wraps a pygame window: it owns a PygameSink for the board
    and draws the chrome around it (score panel, overlays, button, hint).

Public API:
    render(snapshot, sink)      — draw the board
    PygameSink(surface, offset) — RenderSink over a pygame surface
    GameView(screen)            — bind to the window surface
    view.render(snapshot)       — draw the current frame and flip
    view.button_rect            — Start/Restart hit box
"""

from typing import Protocol

import pygame

from .config import (
    WIDTH, HEIGHT, CANVAS_SIZE, CELL,
    OFFSET_X, OFFSET_Y,
    BG, BOARD_BG, BORDER_COL, SNAKE_COL, FOOD_COL,
    TEXT_COL, HINT_COL, OVER_COL, BUTTON_COL, BUTTON_HOT, WHITE,
    PHASE_IDLE, PHASE_OVER,
)
from .model import Snapshot

Color = tuple[int, int, int]
Region = tuple[int, int, int, int]


class RenderSink(Protocol):
    """A 2-D drawing surface in board pixel coordinates."""

    def clear(self, region: Region) -> None: ...

    def fill_rect(self, x: int, y: int, w: int, h: int, color: Color) -> None: ...


def render(snapshot: Snapshot, sink: RenderSink,
           cell: int = CELL, size: int = CANVAS_SIZE) -> None:
    sink.clear((0, 0, size, size))
    for x, y in snapshot.snake:
        sink.fill_rect(x * cell, y * cell, cell, cell, SNAKE_COL)
    fx, fy = snapshot.food
    sink.fill_rect(fx * cell, fy * cell, cell, cell, FOOD_COL)


# ─────────────────────── colour helpers ──────────────────────────
def _with_alpha(color: tuple, alpha: int) -> tuple:
    return (*color[:3], max(0, min(255, alpha)))


# ────────────────────────── PygameSink ───────────────────────────
class PygameSink:
    """RenderSink drawing onto a pygame surface at a pixel offset."""

    def __init__(self, surface: pygame.Surface, offset: tuple[int, int] = (0, 0),
                 background: Color = BOARD_BG):
        self.surface = surface
        self.offset = offset
        self.background = background

    def clear(self, region: Region) -> None:
        x, y, w, h = region
        ox, oy = self.offset
        self.surface.fill(self.background, pygame.Rect(ox + x, oy + y, w, h))

    def fill_rect(self, x: int, y: int, w: int, h: int, color: Color) -> None:
        ox, oy = self.offset
        pygame.draw.rect(self.surface, color, pygame.Rect(ox + x, oy + y, w, h))


# ─────────────────────────── GameView ────────────────────────────
class GameView:
    """Renders the complete game frame from a Snapshot."""

    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        self.sink = PygameSink(screen, (OFFSET_X, OFFSET_Y))
        self._init_fonts()
        self._best: int = 0
        self.button_rect = pygame.Rect(0, 0, 200, 40)
        self.button_rect.center = (WIDTH // 2, OFFSET_Y + CANVAS_SIZE // 2 + 40)

    # ── Main entry ───────────────────────────────────────────────
    def render(self, snapshot: Snapshot, hover: bool = False) -> None:
        self._best = max(self._best, snapshot.score)

        self.screen.fill(BG)
        render(snapshot, self.sink)
        self._draw_border()
        self._draw_panel(snapshot)
        self._draw_hint()

        if snapshot.phase == PHASE_IDLE:
            self._draw_start_overlay(hover)
        elif snapshot.phase == PHASE_OVER:
            self._draw_game_over_overlay(snapshot, hover)

        pygame.display.flip()

    # ── Chrome ───────────────────────────────────────────────────
    def _draw_border(self) -> None:
        pygame.draw.rect(self.screen, BORDER_COL,
                         (OFFSET_X - 2, OFFSET_Y - 2, CANVAS_SIZE + 4, CANVAS_SIZE + 4), 2)

    def _draw_panel(self, snapshot: Snapshot) -> None:
        title = self.font_big.render("Snake Game", True, TEXT_COL)
        self.screen.blit(title, (OFFSET_X, 10))

        score = self.font_med.render(f"Score: {snapshot.score}", True, TEXT_COL)
        self.screen.blit(score, score.get_rect(topright=(WIDTH - OFFSET_X, 8)))
        if self._best > 0:
            best = self.font_small.render(f"Best: {self._best}", True, HINT_COL)
            self.screen.blit(best, best.get_rect(topright=(WIDTH - OFFSET_X, 30)))

    def _draw_hint(self) -> None:
        hint = self.font_small.render(
            "Use arrow keys to control the snake. Eat the red food to grow!",
            True, HINT_COL,
        )
        cy = OFFSET_Y + CANVAS_SIZE + (HEIGHT - OFFSET_Y - CANVAS_SIZE) // 2
        self.screen.blit(hint, hint.get_rect(center=(WIDTH // 2, cy)))

    # ── Overlays ─────────────────────────────────────────────────
    def _draw_overlay_base(self) -> None:
        surf = pygame.Surface((CANVAS_SIZE, CANVAS_SIZE), pygame.SRCALPHA)
        surf.fill(_with_alpha(BOARD_BG, 170))
        self.screen.blit(surf, (OFFSET_X, OFFSET_Y))

    def _draw_text_line(self, text: str, color: tuple,
                        cy: int, font: pygame.font.Font) -> int:
        surf = font.render(text, True, color)
        self.screen.blit(surf, surf.get_rect(center=(WIDTH // 2, cy)))
        return cy + surf.get_height() + 8

    def _draw_button(self, label: str, hover: bool) -> None:
        color = BUTTON_HOT if hover else BUTTON_COL
        pygame.draw.rect(self.screen, color, self.button_rect, border_radius=5)
        txt = self.font_med.render(label, True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=self.button_rect.center))

    def _draw_start_overlay(self, hover: bool) -> None:
        self._draw_overlay_base()
        self._draw_text_line("Press Enter or click to play", HINT_COL,
                             OFFSET_Y + CANVAS_SIZE // 2 - 20, self.font_small)
        self._draw_button("Start Game", hover)

    def _draw_game_over_overlay(self, snapshot: Snapshot, hover: bool) -> None:
        self._draw_overlay_base()
        cy = OFFSET_Y + CANVAS_SIZE // 2 - 50
        cy = self._draw_text_line("Game Over!", OVER_COL, cy, self.font_big)
        self._draw_text_line(f"Final score: {snapshot.score}", TEXT_COL, cy, self.font_med)
        self._draw_button("Restart Game", hover)

    # ── Font init ─────────────────────────────────────────────────
    def _init_fonts(self) -> None:
        specs = [
            ("font_big",   "arial", 26, True),
            ("font_med",   "arial", 17, False),
            ("font_small", "arial", 13, False),
        ]
        for attr, name, size, bold in specs:
            try:
                setattr(self, attr, pygame.font.SysFont(name, size, bold=bold))
            except Exception:
                setattr(self, attr, pygame.font.SysFont(None, size))
