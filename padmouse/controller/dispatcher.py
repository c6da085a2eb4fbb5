#!/usr/bin/env python3
"""
dispatcher.py - Binds controller callbacks and forwards them to one consumer

For each enumerated controller:
- discrete buttons get a press-edge binding and a value binding
- sticks and the d-pad get one directional binding
- one coarse binding forwards the full snapshot on any change
- one best-effort pause binding (Start button; skipped if the device has none)

Whenever the set of controllers changes, all bindings are cancelled and
created again for the controllers that are attached now.
"""

from functools import partial

from padmouse.controller.inputstate import Button


class ControllerConsumer:
    """Receiver of dispatcher notifications. Override what you need."""

    def on_connect(self, controller):
        pass

    def on_disconnect(self, controller):
        pass

    def on_input_changed(self, controller, snapshot):
        pass

    def on_button_value_changed(self, controller, button, state):
        pass

    def on_button_press_changed(self, controller, button, state):
        pass

    def on_directional_changed(self, controller, button, state):
        pass

    def on_pause(self, controller):
        pass


class EventDispatcher:
    def __init__(self, log, backend, enumerator, consumer: ControllerConsumer):
        self.log = log
        self.backend = backend
        self.enumerator = enumerator
        self.consumer = consumer
        self.subscriptions = []

        self._device_subs = [
            backend.on_connect(self._controller_connected),
            backend.on_disconnect(self._controller_disconnected),
        ]

    def start(self):
        """Initial enumeration + binding."""
        return self.rebind()

    def stop(self):
        for sub in self.subscriptions + self._device_subs:
            sub.cancel()
        self.subscriptions = []
        self._device_subs = []

    def rebind(self):
        for sub in self.subscriptions:
            sub.cancel()
        self.subscriptions = []

        controllers = self.enumerator.enumerate()
        for gc in controllers:
            self._bind_controller(gc)
        self.log.debug(f"[DISPATCH] {len(self.subscriptions)} bindings for {len(controllers)} controller(s)")
        return controllers

    # ------------------------------------------------------------------
    # Connect / disconnect
    # ------------------------------------------------------------------
    def _controller_connected(self, controller):
        self.log.info(f"[DISPATCH] Connected: {controller.get_name()}")
        self.rebind()
        self.consumer.on_connect(controller)

    def _controller_disconnected(self, controller):
        self.log.info(f"[DISPATCH] Disconnected: {controller.get_name()}")
        self.rebind()
        self.consumer.on_disconnect(controller)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------
    def _bind_controller(self, gc):
        subs = self.subscriptions
        for button in Button:
            if button is Button.PAUSE:
                continue
            el = gc.element(button)
            if el is None:
                self.log.debug(f"[DISPATCH] {gc.get_name()}: no {button.value}, not bound")
                continue

            if button.is_discrete:
                subs.append(el.on_press_changed(partial(self._press_changed, gc, button)))
                subs.append(el.on_value_changed(partial(self._value_changed, gc, button)))
            elif button.is_directional:
                subs.append(el.on_value_changed(partial(self._directional_changed, gc, button)))

        subs.append(gc.on_input_changed(partial(self._input_changed, gc)))

        pause = gc.on_pause(partial(self._paused, gc))
        if pause is None:
            self.log.debug(f"[DISPATCH] {gc.get_name()}: pause signal not supported")
        else:
            subs.append(pause)

    # ------------------------------------------------------------------
    # Forwarders
    # ------------------------------------------------------------------
    def _press_changed(self, gc, button, state):
        self.consumer.on_button_press_changed(gc, button, state)

    def _value_changed(self, gc, button, state):
        self.consumer.on_button_value_changed(gc, button, state)

    def _directional_changed(self, gc, button, state):
        self.consumer.on_directional_changed(gc, button, state)

    def _input_changed(self, gc, snapshot):
        self.consumer.on_input_changed(gc, snapshot)

    def _paused(self, gc):
        self.consumer.on_pause(gc)
