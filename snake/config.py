"""
config.py — Shared constants for the snake game.
No logic, no imports from internal modules.
"""

# ── Window & Grid ─────────────────────────────────────────────────
CANVAS_SIZE     = 400
CELL            = 20
GRID_SIZE       = CANVAS_SIZE // CELL
PANEL_H         = 50
FOOTER_H        = 40
OFFSET_X        = 10
OFFSET_Y        = PANEL_H + 10
WIDTH           = CANVAS_SIZE + 2 * OFFSET_X
HEIGHT          = OFFSET_Y + CANVAS_SIZE + FOOTER_H
FPS             = 60

# ── Timing ────────────────────────────────────────────────────────
SNAKE_SPEED = 150        # milliseconds between ticks

# ── Colors ────────────────────────────────────────────────────────
BG          = (240, 240, 240)
BOARD_BG    = (255, 255, 255)
BORDER_COL  = (51,  51,  51)
SNAKE_COL   = (0,   128, 0)
FOOD_COL    = (255, 0,   0)
TEXT_COL    = (40,  40,  40)
HINT_COL    = (110, 110, 110)
OVER_COL    = (220, 0,   0)
BUTTON_COL  = (76,  175, 80)
BUTTON_HOT  = (69,  160, 73)
WHITE       = (255, 255, 255)

# ── Gameplay ──────────────────────────────────────────────────────
ORIGIN       = (10, 10)
START_DIR    = (1, 0)
IDLE_FOOD    = (15, 15)

# ── Game Phases ───────────────────────────────────────────────────
PHASE_IDLE    = "idle"
PHASE_RUNNING = "running"
PHASE_OVER    = "over"
