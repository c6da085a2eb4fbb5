#!/usr/bin/env python3
"""
gamecontroller.py
Hardware layer for game controllers (gamepads, pads with sticks/triggers).
Uses pygame for cross-platform input.

Every physical joystick is wrapped in a GameController that exposes the
controls of a fixed Xbox-style profile as logical inputs. Interested code
subscribes per control and gets a Subscription handle back:

    sub = controller.element(Button.A).on_press_changed(callback)
    ...
    sub.cancel()

pygame delivers everything through its event queue, so nothing here runs
unless PygameBackend.poll() is called from the main loop.
"""

import os
from typing import Callable, Dict, List, Optional, Tuple

import pygame

from padmouse.controller.inputstate import (
    Button,
    ButtonState,
    ControllerInput,
    DirectionalState,
    Present,
    SNAPSHOT_FIELDS,
)

# --- Xbox-style profile, as pygame numbers XInput pads ---
BUTTON_INDEX = {
    Button.A: 0,
    Button.B: 1,
    Button.X: 2,
    Button.Y: 3,
    Button.LEFT_SHOULDER: 4,
    Button.RIGHT_SHOULDER: 5,
    Button.LEFT_ANALOG_BUTTON: 8,
    Button.RIGHT_ANALOG_BUTTON: 9,
}
PAUSE_BUTTON_INDEX = 7          # Start / Menu. 6 (Back / View) is not mapped
TRIGGER_AXIS = {
    Button.LEFT_TRIGGER: 4,
    Button.RIGHT_TRIGGER: 5,
}
STICK_AXES = {
    Button.LEFT_ANALOG: (0, 1),
    Button.RIGHT_ANALOG: (2, 3),
}
DPAD_HAT = 0

PRESS_THRESHOLD = 0.5           # trigger value counted as pressed
DIRECTION_THRESHOLD = 0.5       # stick deflection counted as up/down/left/right


def _fire(handlers: list, *args):
    # copy: a callback may cancel its own subscription
    for cb in list(handlers):
        cb(*args)


class Subscription:
    """Handle for one registered callback. cancel() is idempotent."""

    def __init__(self, handlers: list, callback: Callable):
        self._handlers = handlers
        self.callback = callback
        self.active = True
        handlers.append(callback)

    def cancel(self):
        if not self.active:
            return
        self.active = False
        for i, cb in enumerate(self._handlers):
            if cb is self.callback:
                del self._handlers[i]
                break

    def __repr__(self):
        return f"Subscription({getattr(self.callback, '__name__', self.callback)!r}, active={self.active})"


class ButtonInput:
    """Discrete button (or trigger) with press state and pressure value."""

    def __init__(self, button: Button):
        self.button = button
        self.is_pressed = False
        self.value = 0.0
        self._press_handlers: List[Callable] = []
        self._value_handlers: List[Callable] = []

    def on_press_changed(self, callback: Callable[[ButtonState], None]) -> Subscription:
        return Subscription(self._press_handlers, callback)

    def on_value_changed(self, callback: Callable[[ButtonState], None]) -> Subscription:
        return Subscription(self._value_handlers, callback)

    @property
    def state(self) -> ButtonState:
        return ButtonState(is_pressed=Present(self.is_pressed), value=Present(self.value))

    def update(self, value: float) -> bool:
        """Apply a new value, fire press then value callbacks. Returns True on any change."""
        value = min(1.0, max(0.0, float(value)))
        pressed = value > PRESS_THRESHOLD
        press_changed = pressed != self.is_pressed
        value_changed = value != self.value
        self.is_pressed = pressed
        self.value = value

        if press_changed or value_changed:
            state = self.state
            if press_changed:
                _fire(self._press_handlers, state)
            if value_changed:
                _fire(self._value_handlers, state)
        return press_changed or value_changed


class DirectionPad:
    """Analog stick or hat. Axes are x right-positive, y up-positive."""

    def __init__(self, button: Button):
        self.button = button
        self.x = 0.0
        self.y = 0.0
        self._value_handlers: List[Callable] = []

    def on_value_changed(self, callback: Callable[[DirectionalState], None]) -> Subscription:
        return Subscription(self._value_handlers, callback)

    @property
    def state(self) -> DirectionalState:
        return DirectionalState(
            x_axis=Present(self.x),
            y_axis=Present(self.y),
            up=Present(self.y >= DIRECTION_THRESHOLD),
            right=Present(self.x >= DIRECTION_THRESHOLD),
            down=Present(self.y <= -DIRECTION_THRESHOLD),
            left=Present(self.x <= -DIRECTION_THRESHOLD),
        )

    def update(self, x: Optional[float] = None, y: Optional[float] = None) -> bool:
        nx = self.x if x is None else float(x)
        ny = self.y if y is None else float(y)
        if nx == self.x and ny == self.y:
            return False
        self.x, self.y = nx, ny
        _fire(self._value_handlers, self.state)
        return True


class GameController:
    def __init__(self, joystick, axis_deadzone: float = 0.05):
        """
        Wrap an initialised pygame joystick (or anything with the same
        getters). Controls the device does not have are left out.
        """
        self.joystick = joystick
        self.axis_deadzone = axis_deadzone
        self.instance_id = joystick.get_instance_id()
        self.player_index: Optional[int] = None

        self.buttons: Dict[Button, ButtonInput] = {}
        self.pads: Dict[Button, DirectionPad] = {}
        self.pause_supported = False
        self._input_handlers: List[Callable] = []
        self._pause_handlers: List[Callable] = []

        num_buttons = joystick.get_numbuttons()
        num_axes = joystick.get_numaxes()
        num_hats = joystick.get_numhats()

        for button, idx in BUTTON_INDEX.items():
            if idx < num_buttons:
                self.buttons[button] = ButtonInput(button)
        for button, axis in TRIGGER_AXIS.items():
            if axis < num_axes:
                self.buttons[button] = ButtonInput(button)
        for button, (ax, ay) in STICK_AXES.items():
            if ay < num_axes:
                self.pads[button] = DirectionPad(button)
        if DPAD_HAT < num_hats:
            self.pads[Button.DPAD] = DirectionPad(Button.DPAD)
        self.pause_supported = PAUSE_BUTTON_INDEX < num_buttons

        self._button_by_index = {BUTTON_INDEX[b]: b for b in self.buttons if b in BUTTON_INDEX}
        self._sync_initial_state()

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    def get_name(self) -> str:
        return self.joystick.get_name()

    def get_guid(self) -> str:
        try:
            return self.joystick.get_guid()
        except AttributeError:
            return f"instance-{self.instance_id}"

    def __repr__(self):
        return f"GameController({self.get_name()!r}, instance={self.instance_id}, slot={self.player_index})"

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------
    def element(self, button: Button):
        """ButtonInput / DirectionPad for a logical control, None if unsupported."""
        return self.buttons.get(button) or self.pads.get(button)

    def on_input_changed(self, callback: Callable[[ControllerInput], None]) -> Subscription:
        return Subscription(self._input_handlers, callback)

    def on_pause(self, callback: Callable[[], None]) -> Optional[Subscription]:
        """Best-effort pause signal from the Start button. None if the device has none."""
        if not self.pause_supported:
            return None
        return Subscription(self._pause_handlers, callback)

    def snapshot(self) -> ControllerInput:
        kwargs = {}
        for button, attr in SNAPSHOT_FIELDS.items():
            el = self.element(button)
            if el is not None:
                kwargs[attr] = el.state
        return ControllerInput(**kwargs)

    # ------------------------------------------------------------------
    # pygame events
    # ------------------------------------------------------------------
    def handle_event(self, event) -> bool:
        """Feed one pygame joystick event. Returns True if any control changed."""
        changed = False

        if event.type in (pygame.JOYBUTTONDOWN, pygame.JOYBUTTONUP):
            down = event.type == pygame.JOYBUTTONDOWN
            if event.button == PAUSE_BUTTON_INDEX and self.pause_supported:
                if down:
                    _fire(self._pause_handlers)
                return False
            button = self._button_by_index.get(event.button)
            if button is not None:
                changed = self.buttons[button].update(1.0 if down else 0.0)

        elif event.type == pygame.JOYAXISMOTION:
            changed = self._apply_axis(event.axis, event.value)

        elif event.type == pygame.JOYHATMOTION:
            pad = self.pads.get(Button.DPAD)
            if pad is not None and event.hat == DPAD_HAT:
                hx, hy = event.value
                changed = pad.update(float(hx), float(hy))

        if changed:
            _fire(self._input_handlers, self.snapshot())
        return changed

    def _apply_axis(self, axis: int, raw: float) -> bool:
        for button, trig_axis in TRIGGER_AXIS.items():
            if axis == trig_axis and button in self.buttons:
                # pygame reports triggers as -1 (released) .. 1 (full)
                return self.buttons[button].update((raw + 1.0) / 2.0)

        for button, (ax, ay) in STICK_AXES.items():
            pad = self.pads.get(button)
            if pad is None:
                continue
            if axis == ax:
                return pad.update(x=self._stick(raw))
            if axis == ay:
                # pygame y grows downward
                return pad.update(y=self._stick(-raw))
        return False

    def _stick(self, value: float) -> float:
        return 0.0 if abs(value) < self.axis_deadzone else float(value)

    def _sync_initial_state(self):
        js = self.joystick
        for idx, button in self._button_by_index.items():
            self.buttons[button].value = 1.0 if js.get_button(idx) else 0.0
            self.buttons[button].is_pressed = bool(js.get_button(idx))
        for button, axis in TRIGGER_AXIS.items():
            if button in self.buttons:
                value = (js.get_axis(axis) + 1.0) / 2.0
                self.buttons[button].value = value
                self.buttons[button].is_pressed = value > PRESS_THRESHOLD
        for button, (ax, ay) in STICK_AXES.items():
            pad = self.pads.get(button)
            if pad is not None:
                pad.x = self._stick(js.get_axis(ax))
                pad.y = self._stick(-js.get_axis(ay))
        pad = self.pads.get(Button.DPAD)
        if pad is not None:
            hx, hy = js.get_hat(DPAD_HAT)
            pad.x, pad.y = float(hx), float(hy)


class PygameBackend:
    """
    Owns pygame's joystick subsystem: enumerates attached controllers,
    reports connect/disconnect and routes input events to controllers.
    """

    def __init__(self, log, axis_deadzone: float = 0.05):
        self.log = log
        self.axis_deadzone = axis_deadzone
        self._controllers: Dict[int, GameController] = {}
        self._connect_handlers: List[Callable] = []
        self._disconnect_handlers: List[Callable] = []

        # we never own a focused window
        os.environ.setdefault("SDL_JOYSTICK_ALLOW_BACKGROUND_EVENTS", "1")
        pygame.init()
        pygame.joystick.init()
        pygame.event.set_blocked(None)
        pygame.event.set_allowed([
            pygame.QUIT,
            pygame.JOYBUTTONDOWN,
            pygame.JOYBUTTONUP,
            pygame.JOYAXISMOTION,
            pygame.JOYHATMOTION,
            pygame.JOYDEVICEADDED,
            pygame.JOYDEVICEREMOVED,
        ])

    def controllers(self) -> List[GameController]:
        """Currently attached controllers in pygame device-index order."""
        attached = []
        for i in range(pygame.joystick.get_count()):
            gc, _ = self._open(i)
            if gc is not None:
                attached.append(gc)
        return attached

    def on_connect(self, callback: Callable[[GameController], None]) -> Subscription:
        return Subscription(self._connect_handlers, callback)

    def on_disconnect(self, callback: Callable[[GameController], None]) -> Subscription:
        return Subscription(self._disconnect_handlers, callback)

    def poll(self) -> bool:
        """Drain the event queue. Returns False once pygame asked to quit."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False

            if event.type == pygame.JOYDEVICEADDED:
                # pygame also posts this for devices that were attached at startup
                gc, created = self._open(event.device_index)
                if created:
                    _fire(self._connect_handlers, gc)

            elif event.type == pygame.JOYDEVICEREMOVED:
                gc = self._controllers.pop(event.instance_id, None)
                if gc is not None:
                    _fire(self._disconnect_handlers, gc)

            else:
                gc = self._controllers.get(getattr(event, "instance_id", None))
                if gc is not None:
                    gc.handle_event(event)
        return True

    def shutdown(self):
        pygame.joystick.quit()
        pygame.quit()

    def _open(self, device_index: int) -> Tuple[Optional[GameController], bool]:
        """Controller for a device index, and whether it was opened just now."""
        try:
            js = pygame.joystick.Joystick(device_index)
        except pygame.error as e:
            self.log.warning(f"[DEVICE] Could not open joystick {device_index}: {e}")
            return None, False
        iid = js.get_instance_id()
        gc = self._controllers.get(iid)
        if gc is None:
            js.init()
            gc = GameController(js, axis_deadzone=self.axis_deadzone)
            self._controllers[iid] = gc
            return gc, True
        return gc, False
