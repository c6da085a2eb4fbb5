#!/usr/bin/env python3
"""
inputstate.py - Snapshot model for controller input

A sample field a device does not report is ABSENT, a reported one is
Present(value). Consumers check `.present` (or use `.value_or()`) instead of
comparing against None.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class _Absent:
    present = False

    def value_or(self, default):
        return default

    def __repr__(self):
        return "ABSENT"


ABSENT = _Absent()


@dataclass(frozen=True)
class Present:
    value: Any
    present = True

    def value_or(self, default):
        return self.value


@dataclass(frozen=True)
class ButtonState:
    is_pressed: Any = ABSENT   # Present[bool] | ABSENT
    value: Any = ABSENT        # Present[float 0..1] | ABSENT


@dataclass(frozen=True)
class DirectionalState:
    # y is positive UP
    x_axis: Any = ABSENT
    y_axis: Any = ABSENT
    up: Any = ABSENT
    right: Any = ABSENT
    down: Any = ABSENT
    left: Any = ABSENT


@dataclass(frozen=True)
class ControllerInput:
    button_a: Optional[ButtonState] = None
    button_b: Optional[ButtonState] = None
    button_x: Optional[ButtonState] = None
    button_y: Optional[ButtonState] = None
    left_shoulder: Optional[ButtonState] = None
    right_shoulder: Optional[ButtonState] = None
    left_trigger: Optional[ButtonState] = None
    right_trigger: Optional[ButtonState] = None
    dpad: Optional[DirectionalState] = None
    left_analog: Optional[DirectionalState] = None
    right_analog: Optional[DirectionalState] = None


class Button(Enum):
    A = "A"
    B = "B"
    X = "X"
    Y = "Y"
    LEFT_SHOULDER = "leftShoulder"
    RIGHT_SHOULDER = "rightShoulder"
    LEFT_TRIGGER = "leftTrigger"
    RIGHT_TRIGGER = "rightTrigger"
    DPAD = "dPad"
    LEFT_ANALOG = "leftAnalog"
    RIGHT_ANALOG = "rightAnalog"
    LEFT_ANALOG_BUTTON = "leftAnalogButton"
    RIGHT_ANALOG_BUTTON = "rightAnalogButton"
    PAUSE = "pause"

    @property
    def is_directional(self) -> bool:
        return self in _DIRECTIONAL

    @property
    def is_discrete(self) -> bool:
        """True for press-able buttons. PAUSE is neither discrete nor directional."""
        return self not in _DIRECTIONAL and self is not Button.PAUSE


_DIRECTIONAL = frozenset({Button.DPAD, Button.LEFT_ANALOG, Button.RIGHT_ANALOG})


# ControllerInput attribute for each button carried in a snapshot
SNAPSHOT_FIELDS = {
    Button.A: "button_a",
    Button.B: "button_b",
    Button.X: "button_x",
    Button.Y: "button_y",
    Button.LEFT_SHOULDER: "left_shoulder",
    Button.RIGHT_SHOULDER: "right_shoulder",
    Button.LEFT_TRIGGER: "left_trigger",
    Button.RIGHT_TRIGGER: "right_trigger",
    Button.DPAD: "dpad",
    Button.LEFT_ANALOG: "left_analog",
    Button.RIGHT_ANALOG: "right_analog",
}
