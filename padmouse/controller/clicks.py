#!/usr/bin/env python3
"""
clicks.py - Mouse button events from gamepad button edges

A -> left button, B -> right button. Press sends down, release sends up,
both at the cursor position the integrator last stored.
"""

from padmouse.controller.inputstate import Button

CLICK_BUTTONS = {
    Button.A: "left",
    Button.B: "right",
}


class ClickSynthesizer:
    def __init__(self, log, mouse, integrator, log_buttons: bool = False):
        self.log = log
        self.mouse = mouse
        self.integrator = integrator
        self.log_buttons = log_buttons

    def handle(self, button: Button, state):
        side = CLICK_BUTTONS.get(button)
        if side is None:
            return
        if not state.is_pressed.present:
            return

        down = bool(state.is_pressed.value)
        x, y = self.integrator.position or (0.0, 0.0)
        if self.log_buttons:
            self.log.debug(f"[CLICK] {side.upper()} {'DOWN' if down else 'UP'} at {x:.0f},{y:.0f}")
        self.mouse.button_event(side, down, x, y)
