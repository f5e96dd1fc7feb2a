"""
timer.py — Repeating tick timer.

The controller's frame loop feeds elapsed milliseconds in; the timer
turns them into serial callback fires at a fixed period. Fires never
overlap, and a cancelled timer never fires again until re-armed.

Use as a context manager so the timer is released with its view:

    with TickTimer(SNAKE_SPEED, on_tick) as timer:
        ...
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class TickTimer:
    """Fixed-period timer advanced explicitly by the owner's clock."""

    def __init__(self, period_ms: int, callback: Callable[[], None]):
        if period_ms <= 0:
            raise ValueError(f"period must be positive, got {period_ms}")
        self.period_ms = period_ms
        self._callback = callback
        self._elapsed: float = 0.0
        self._active: bool = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        """Arm the timer. Accumulated time from a previous run is dropped."""
        self._elapsed = 0.0
        self._active = True
        logger.debug("tick timer armed (%d ms)", self.period_ms)

    def cancel(self) -> None:
        if self._active:
            logger.debug("tick timer cancelled")
        self._active = False
        self._elapsed = 0.0

    def advance(self, elapsed_ms: float) -> int:
        """Feed elapsed time; returns how many times the callback fired."""
        if not self._active:
            return 0
        self._elapsed += elapsed_ms
        fired = 0
        while self._active and self._elapsed >= self.period_ms:
            self._elapsed -= self.period_ms
            fired += 1
            self._callback()
        return fired

    # ── Scoped acquisition ────────────────────────────────────────
    def __enter__(self) -> "TickTimer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()
