#!/usr/bin/env python3
"""
integrator.py - Turns the latest stick sample into an absolute cursor position

tick() is called from the main loop:
- no sample yet, or an axis missing        -> nothing
- both axes non-zero, not tracking         -> adopt the live OS pointer as baseline
- both axes non-zero, tracking             -> pos += (x, -y) * multiplier, warp
- either axis exactly zero                 -> stop tracking, leave pos alone

Dropping tracking on a zero axis means the next movement starts again from
wherever the OS pointer is, so a resting stick cannot accumulate drift.
"""

from typing import Optional, Tuple

DEFAULT_MULTIPLIER = 0.25


class CursorIntegrator:
    def __init__(self, log, mouse, multiplier: float = DEFAULT_MULTIPLIER, log_axes: bool = False):
        self.log = log
        self.mouse = mouse
        self.multiplier = multiplier
        self.log_axes = log_axes

        self._sample = None
        self._position: Optional[Tuple[float, float]] = None
        self._tracking = False

    @property
    def position(self) -> Optional[Tuple[float, float]]:
        return self._position

    @property
    def tracking(self) -> bool:
        return self._tracking

    def update_sample(self, state):
        """Replace the pending directional sample (older samples are dropped)."""
        self._sample = state

    def reset(self):
        """Forget the pending sample and stop tracking (movement controller went away)."""
        self._sample = None
        self._tracking = False

    def tick(self):
        sample = self._sample
        if sample is None:
            return
        if not (sample.x_axis.present and sample.y_axis.present):
            return

        x = sample.x_axis.value
        y = sample.y_axis.value

        if abs(x) > 0 and abs(y) > 0:
            if not self._tracking:
                self._position = self._baseline()
                self._tracking = True
                self.log.debug(f"[CURSOR] Baseline {self._position[0]:.1f},{self._position[1]:.1f}")
                return

            px, py = self._position
            px += x * self.multiplier
            py += -y * self.multiplier
            self.mouse.warp(px, py)
            self._position = (px, py)
            if self.log_axes:
                self.log.debug(f"[CURSOR] x={x:+.3f} y={y:+.3f} -> {px:.2f},{py:.2f}")
        else:
            if self._tracking:
                self.log.debug("[CURSOR] Idle")
            self._tracking = False

    def _baseline(self) -> Tuple[float, float]:
        x, y = self.mouse.position()
        if self.mouse.bottom_left_origin:
            y = self.mouse.screen_height() - y
        return float(x), float(y)
