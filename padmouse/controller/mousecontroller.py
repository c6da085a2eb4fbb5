#!/usr/bin/env python3
"""
mousecontroller.py
Utility for controlling the mouse: read the pointer, warp it, press/release
left and right buttons at a position.

Backends:
- PyAutoGuiMouse  any platform pyautogui supports
- SendInputMouse  Windows only: win32api for the cursor, SendInput for buttons

Failed injection calls are reported as False. The first failure of a streak
is logged as a warning, repeats at debug level. The one exception that does
reach the main loop is MouseAborted, raised when pyautogui's failsafe is on
and the cursor hits a screen corner.
"""

import ctypes
import platform
from typing import Tuple

# --- Constants for input ---
MOUSEEVENTF_LEFTDOWN  = 0x0002
MOUSEEVENTF_LEFTUP    = 0x0004
MOUSEEVENTF_RIGHTDOWN = 0x0008
MOUSEEVENTF_RIGHTUP   = 0x0010

INPUT_MOUSE = 0
SM_CYSCREEN = 1

BUTTON_FLAGS = {
    ("left", True): MOUSEEVENTF_LEFTDOWN,
    ("left", False): MOUSEEVENTF_LEFTUP,
    ("right", True): MOUSEEVENTF_RIGHTDOWN,
    ("right", False): MOUSEEVENTF_RIGHTUP,
}


# --- Structs ---
class MOUSEINPUT(ctypes.Structure):
    _fields_ = (("dx", ctypes.c_long),
                ("dy", ctypes.c_long),
                ("mouseData", ctypes.c_ulong),
                ("dwFlags", ctypes.c_ulong),
                ("time", ctypes.c_ulong),
                ("dwExtraInfo", ctypes.c_void_p))


class INPUT(ctypes.Structure):
    class _INPUT(ctypes.Union):
        _fields_ = [("mi", MOUSEINPUT)]
    _anonymous_ = ("_input",)
    _fields_ = [("type", ctypes.c_ulong),
                ("_input", _INPUT)]


# --- Mouse Controller ---
class MouseAborted(Exception):
    """The backend's own safety stop fired (pyautogui failsafe corner)."""


class MouseController:
    # True when position() reports y growing upward from the bottom edge
    bottom_left_origin = False
    # backend exceptions that must stop the program instead of being logged
    abort_errors: tuple = ()

    def __init__(self, log):
        self.log = log
        self.failures = 0   # consecutive failed injection calls

    def position(self) -> Tuple[float, float]:
        raise NotImplementedError

    def screen_height(self) -> int:
        raise NotImplementedError

    def warp(self, x: float, y: float) -> bool:
        """Absolute move to screen pixel coords (top-left origin)."""
        return self._inject(f"Warp to ({x:.0f},{y:.0f})", self._warp, x, y)

    def button_event(self, button: str, down: bool, x: float, y: float) -> bool:
        """Press (down=True) or release a 'left'/'right' button at (x, y)."""
        what = f"{button} {'DOWN' if down else 'UP'} at ({x:.0f},{y:.0f})"
        ok = self._inject(what, self._button, button, down, x, y)
        if ok:
            self.log.debug(f"[MOUSE] {what}")
        return ok

    def _inject(self, what: str, call, *args) -> bool:
        try:
            ok = call(*args)
        except self.abort_errors as e:
            raise MouseAborted(f"{what}: {e}") from e
        except Exception as e:
            self._failed(f"{what} failed: {e}")
            return False
        if not ok:
            self._failed(f"{what} rejected")
            return False
        if self.failures:
            self.log.info(f"[MOUSE] Injection working again after {self.failures} failed call(s)")
            self.failures = 0
        return True

    def _failed(self, message: str):
        # first failure of a streak is a WARNING, repeats stay at DEBUG until a call succeeds
        self.failures += 1
        if self.failures == 1:
            self.log.warning(f"[MOUSE] {message}")
        else:
            self.log.debug(f"[MOUSE] {message} (#{self.failures})")

    def _warp(self, x: float, y: float) -> bool:
        raise NotImplementedError

    def _button(self, button: str, down: bool, x: float, y: float) -> bool:
        raise NotImplementedError


class PyAutoGuiMouse(MouseController):
    def __init__(self, log, failsafe: bool = False):
        super().__init__(log)
        import pyautogui
        pyautogui.FAILSAFE = failsafe
        pyautogui.PAUSE = 0  # no built-in delay per call, we run every millisecond
        self.gui = pyautogui
        if failsafe:
            self.abort_errors = (pyautogui.FailSafeException,)

    def position(self):
        pos = self.gui.position()
        return float(pos[0]), float(pos[1])

    def screen_height(self):
        return int(self.gui.size()[1])

    def _warp(self, x, y):
        self.gui.moveTo(int(round(x)), int(round(y)))
        return True

    def _button(self, button, down, x, y):
        fn = self.gui.mouseDown if down else self.gui.mouseUp
        fn(x=int(round(x)), y=int(round(y)), button=button)
        return True


class SendInputMouse(MouseController):
    def __init__(self, log):
        super().__init__(log)
        if platform.system().lower() != "windows":
            raise RuntimeError("The sendinput mouse backend is Windows-only")
        import win32api
        self.api = win32api
        self.user32 = ctypes.windll.user32
        try:
            self.user32.SetProcessDPIAware()
        except Exception as e:
            log.debug(f"[MOUSE] SetProcessDPIAware failed: {e}")

    def position(self):
        x, y = self.api.GetCursorPos()
        return float(x), float(y)

    def screen_height(self):
        return int(self.api.GetSystemMetrics(SM_CYSCREEN))

    def _warp(self, x, y):
        self.api.SetCursorPos((int(round(x)), int(round(y))))
        return True

    def _button(self, button, down, x, y):
        flags = BUTTON_FLAGS[(button, down)]
        self.api.SetCursorPos((int(round(x)), int(round(y))))
        inp = INPUT()
        inp.type = INPUT_MOUSE
        inp.mi = MOUSEINPUT(0, 0, 0, flags, 0, None)
        return self.user32.SendInput(1, ctypes.byref(inp), ctypes.sizeof(inp)) == 1


def create_mouse(log, backend: str = "auto", failsafe: bool = False) -> MouseController:
    name = (backend or "auto").strip().lower()
    if name == "auto":
        name = "sendinput" if platform.system().lower() == "windows" else "pyautogui"
    if name == "pyautogui":
        mouse = PyAutoGuiMouse(log, failsafe=failsafe)
    elif name == "sendinput":
        mouse = SendInputMouse(log)
    else:
        raise ValueError(f"Unknown mouse backend '{backend}' (expected auto, pyautogui or sendinput)")
    log.info(f"[MOUSE] Using {name} backend")
    return mouse
