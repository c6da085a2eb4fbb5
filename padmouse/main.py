#!/usr/bin/env python3
"""
main.py - Application context, run loop and CLI for padmouse

One AppContext is built at startup and owns every component. The loop is
single-threaded: drain pygame events (which runs all controller callbacks),
tick the cursor integrator, sleep. Nothing shares state across threads.
"""

import argparse
import ctypes
import logging
import platform
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from padmouse.controller.clicks import CLICK_BUTTONS, ClickSynthesizer
from padmouse.controller.devices import DeviceEnumerator, MOVEMENT_SLOT
from padmouse.controller.dispatcher import ControllerConsumer, EventDispatcher
from padmouse.controller.gamecontroller import PygameBackend
from padmouse.controller.inputstate import Button
from padmouse.controller.integrator import CursorIntegrator
from padmouse.controller.mousecontroller import MouseAborted, MouseController, create_mouse
from padmouse.controller.settings import Settings
from padmouse.file.inireader import IniReader
from padmouse.logger.logger import setup_logger

ERROR_ALREADY_EXISTS = 183
GWL_EXSTYLE = -20
WS_EX_TOOLWINDOW = 0x00000080
WS_EX_APPWINDOW = 0x00040000
SW_HIDE = 0
SW_SHOWNOACTIVATE = 4


# ----------------------------------------------------------------------
# Consumer: routes controller notifications to cursor + clicks
# ----------------------------------------------------------------------
class CursorConsumer(ControllerConsumer):
    def __init__(self, log, enumerator, integrator, clicks, settings: Settings):
        self.log = log
        self.enumerator = enumerator
        self.integrator = integrator
        self.clicks = clicks
        self.settings = settings

    def _drives_cursor(self, controller) -> bool:
        return controller is self.enumerator.slot_controller(MOVEMENT_SLOT)

    def on_connect(self, controller):
        self.log.info(f"[INPUT] {controller.get_name()} connected (slot={controller.player_index})")

    def on_disconnect(self, controller):
        self.log.info(f"[INPUT] {controller.get_name()} disconnected")
        if controller.player_index == MOVEMENT_SLOT:
            # last sample came from a device that is gone
            self.integrator.reset()
            successor = self.enumerator.slot_controller(MOVEMENT_SLOT)
            stick = successor.element(Button.LEFT_ANALOG) if successor is not None else None
            if stick is not None:
                # seed with the current stick of the new slot-1 controller
                self.integrator.update_sample(stick.state)
                self.log.info(f"[INPUT] {successor.get_name()} now drives the cursor")

    def on_directional_changed(self, controller, button, state):
        if button is Button.LEFT_ANALOG and self._drives_cursor(controller):
            self.integrator.update_sample(state)

    def on_button_press_changed(self, controller, button, state):
        # click buttons are logged by the click synthesizer
        if self.settings.log_buttons and button not in CLICK_BUTTONS:
            self.log.debug(f"[INPUT] {button.value} pressed={state.is_pressed.value_or(None)}")
        self.clicks.handle(button, state)

    def on_button_value_changed(self, controller, button, state):
        if self.settings.debug_inputs:
            self.log.debug(f"[INPUT] {button.value} value={state.value.value_or(None)}")

    def on_pause(self, controller):
        self.log.info(f"[INPUT] Pause pressed on {controller.get_name()}")


# ----------------------------------------------------------------------
# Application context
# ----------------------------------------------------------------------
@dataclass
class AppContext:
    log: logging.Logger
    settings: Settings
    backend: object
    mouse: MouseController
    enumerator: DeviceEnumerator
    integrator: CursorIntegrator
    clicks: ClickSynthesizer
    consumer: CursorConsumer
    dispatcher: EventDispatcher


def build_context(log, settings: Settings, backend=None, mouse=None) -> AppContext:
    if backend is None:
        backend = PygameBackend(log, axis_deadzone=settings.axis_deadzone)
    if mouse is None:
        mouse = create_mouse(log, settings.backend, failsafe=settings.failsafe)

    enumerator = DeviceEnumerator(log, backend)
    integrator = CursorIntegrator(log, mouse, settings.movement_multiplier, log_axes=settings.log_axes)
    clicks = ClickSynthesizer(log, mouse, integrator, log_buttons=settings.log_buttons)
    consumer = CursorConsumer(log, enumerator, integrator, clicks, settings)
    dispatcher = EventDispatcher(log, backend, enumerator, consumer)
    return AppContext(log, settings, backend, mouse, enumerator, integrator, clicks, consumer, dispatcher)


def run(ctx: AppContext):
    """Run until pygame reports QUIT, the process is interrupted or the mouse failsafe fires."""
    interval = ctx.settings.tick_interval
    ctx.dispatcher.start()
    ctx.log.info(f"[APP] Running, tick every {interval * 1000:.2f} ms")
    while ctx.backend.poll():
        ctx.integrator.tick()
        time.sleep(interval)


# ----------------------------------------------------------------------
# Platform helpers (Windows only, no-ops elsewhere)
# ----------------------------------------------------------------------
def _is_windows() -> bool:
    return platform.system().lower() == "windows"


def check_single_instance(log, mutex_name="PadMouseMutex"):
    """Ensure only one instance of this program runs. Returns the mutex handle."""
    if not _is_windows():
        return None
    kernel32 = ctypes.windll.kernel32
    kernel32.CreateMutexW.restype = ctypes.c_void_p
    handle = kernel32.CreateMutexW(None, False, mutex_name)
    if kernel32.GetLastError() == ERROR_ALREADY_EXISTS:
        log.error("Another instance is already running.")
        raise SystemExit(1)
    return handle


def hide_from_app_switcher(log) -> bool:
    """Turn the console window into a tool window so it leaves the taskbar and Alt+Tab."""
    if not _is_windows():
        log.debug("[APP] Hiding from the app switcher is not supported on this platform")
        return False
    try:
        user32 = ctypes.windll.user32
        hwnd = ctypes.windll.kernel32.GetConsoleWindow()
        if not hwnd:
            log.debug("[APP] No console window to hide")
            return False
        ex = user32.GetWindowLongW(hwnd, GWL_EXSTYLE)
        user32.ShowWindow(hwnd, SW_HIDE)
        user32.SetWindowLongW(hwnd, GWL_EXSTYLE, (ex | WS_EX_TOOLWINDOW) & ~WS_EX_APPWINDOW)
        user32.ShowWindow(hwnd, SW_SHOWNOACTIVATE)
    except Exception as e:
        log.warning(f"[APP] Could not hide from the app switcher: {e}")
        return False
    log.info("[APP] Hidden from the app switcher")
    return True


# ----------------------------------------------------------------------
# Config selector
# ----------------------------------------------------------------------
def select_config_file(explicit: Optional[str], log) -> Optional[str]:
    if explicit:
        if not Path(explicit).is_file():
            log.error(f"Config file not found: {explicit}")
            raise SystemExit(1)
        return explicit

    ini_files = sorted(Path(".").glob("*.ini"))
    if not ini_files:
        log.info("No INI configuration found, using defaults.")
        return None

    if len(ini_files) == 1:
        log.info(f"Found only one config: {ini_files[0]}")
        return str(ini_files[0])

    # Multiple INIs → let user choose
    print("\nAvailable config files:")
    for idx, f in enumerate(ini_files, start=1):
        print(f"  {idx}. {f.name}")
    while True:
        try:
            choice = int(input("Select config file [1-{}]: ".format(len(ini_files))))
            if 1 <= choice <= len(ini_files):
                return str(ini_files[choice - 1])
        except ValueError:
            pass
        print("Invalid choice, try again.")


def load_settings(cfgfile: Optional[str], log) -> Settings:
    cfg = IniReader(cfgfile) if cfgfile else IniReader()
    return Settings.from_ini(cfg, log)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Use a gamepad as a mouse")
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="INI config file (default: the only *.ini here, ask if several, else built-in defaults)",
    )
    parser.add_argument("--list-devices", action="store_true", help="List attached controllers and exit")
    parser.add_argument("--debug", action="store_true", help="Show DEBUG messages on the console")
    parser.add_argument("--log-file", default="padmouse.log", help="Log file (empty string disables it)")
    parser.add_argument("--no-hide", action="store_true", help="Do not hide from the app switcher")
    return parser.parse_args(argv)


def list_devices(log) -> int:
    backend = PygameBackend(log)
    try:
        devices = DeviceEnumerator.list_devices(backend)
        for idx, guid, name in devices:
            log.info(f"[DEVICE] {idx}: {name} (GUID={guid})")
        if not devices:
            log.info("[DEVICE] No controllers attached")
    finally:
        backend.shutdown()
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    log = setup_logger(
        "padmouse",
        logfile=args.log_file or None,
        console_level=logging.DEBUG if args.debug else logging.INFO,
    )
    log.info("Starting padmouse")

    if args.list_devices:
        return list_devices(log)

    _mutex = check_single_instance(log)  # held for the process lifetime
    settings = load_settings(select_config_file(args.config, log), log)
    if settings.hide_from_switcher and not args.no_hide:
        hide_from_app_switcher(log)

    ctx = build_context(log, settings)
    try:
        run(ctx)
    except KeyboardInterrupt:
        log.info("[EXIT] User aborted.")
    except MouseAborted as e:
        log.warning(f"[EXIT] Stopped by pyautogui failsafe: {e}")
    finally:
        ctx.dispatcher.stop()
        ctx.backend.shutdown()
    return 0
