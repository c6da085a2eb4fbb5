"""
Unit tests for the event dispatcher.
"""

import unittest

from padmouse.controller.devices import DeviceEnumerator
from padmouse.controller.dispatcher import ControllerConsumer, EventDispatcher
from padmouse.controller.inputstate import Button, ControllerInput, DirectionalState

from fakes import TEST_LOG, FakeBackend, axis_event, button_event, make_controller


class RecordingConsumer(ControllerConsumer):
    def __init__(self):
        self.calls = []

    def on_connect(self, controller):
        self.calls.append(("connect", controller))

    def on_disconnect(self, controller):
        self.calls.append(("disconnect", controller))

    def on_input_changed(self, controller, snapshot):
        self.calls.append(("input", controller, snapshot))

    def on_button_value_changed(self, controller, button, state):
        self.calls.append(("value", controller, button, state))

    def on_button_press_changed(self, controller, button, state):
        self.calls.append(("press", controller, button, state))

    def on_directional_changed(self, controller, button, state):
        self.calls.append(("directional", controller, button, state))

    def on_pause(self, controller):
        self.calls.append(("pause", controller))

    def kinds(self):
        return [c[0] for c in self.calls]


class TestDispatch(unittest.TestCase):

    def setUp(self):
        self.c1 = make_controller(instance_id=1, name="C1")
        self.backend = FakeBackend([self.c1])
        self.consumer = RecordingConsumer()
        self.dispatcher = EventDispatcher(
            TEST_LOG, self.backend, DeviceEnumerator(TEST_LOG, self.backend), self.consumer
        )
        self.dispatcher.start()

    def test_button_press_fans_out(self):
        self.c1.handle_event(button_event(1, 0, down=True))
        self.assertEqual(self.consumer.kinds(), ["press", "value", "input"])

        press, value, coarse = self.consumer.calls
        self.assertEqual(press[1:3], (self.c1, Button.A))
        self.assertEqual(value[1:3], (self.c1, Button.A))
        self.assertIs(press[3], value[3])
        self.assertTrue(press[3].is_pressed.value)
        self.assertIsInstance(coarse[2], ControllerInput)

    def test_stick_motion(self):
        self.c1.handle_event(axis_event(1, 0, 0.4))
        kind, controller, button, state = self.consumer.calls[0]
        self.assertEqual(kind, "directional")
        self.assertIs(button, Button.LEFT_ANALOG)
        self.assertIsInstance(state, DirectionalState)
        self.assertAlmostEqual(state.x_axis.value, 0.4)
        self.assertEqual(self.consumer.kinds()[-1], "input")

    def test_pause(self):
        self.c1.handle_event(button_event(1, 7, down=True))
        self.assertEqual(self.consumer.calls, [("pause", self.c1)])

    def test_connect_rebinds_without_duplicates(self):
        c2 = make_controller(instance_id=2, name="C2")
        self.backend.connect(c2)
        self.assertEqual(self.consumer.calls[-1], ("connect", c2))
        self.consumer.calls.clear()

        self.c1.handle_event(button_event(1, 1, down=True))
        self.assertEqual(self.consumer.kinds(), ["press", "value", "input"])

        self.consumer.calls.clear()
        c2.handle_event(button_event(2, 1, down=True))
        self.assertEqual([c[1] for c in self.consumer.calls], [c2, c2, c2])

    def test_connect_happens_after_rebind(self):
        c2 = make_controller(instance_id=2, name="C2")
        seen = []
        self.consumer.on_connect = lambda controller: seen.append(self.dispatcher.enumerator.controllers[:])
        self.backend.connect(c2)
        self.assertEqual(seen, [[self.c1, c2]])

    def test_disconnect_cancels_old_bindings(self):
        self.backend.disconnect(self.c1)
        self.assertEqual(self.consumer.calls, [("disconnect", self.c1)])
        self.consumer.calls.clear()

        self.c1.handle_event(button_event(1, 0, down=True))
        self.assertEqual(self.consumer.calls, [])
        self.assertEqual(self.dispatcher.subscriptions, [])

    def test_rebind_cancels_previous_subscriptions(self):
        old = list(self.dispatcher.subscriptions)
        self.dispatcher.rebind()
        self.assertTrue(all(not sub.active for sub in old))
        self.assertTrue(all(sub.active for sub in self.dispatcher.subscriptions))
        self.assertEqual(len(old), len(self.dispatcher.subscriptions))

    def test_stop(self):
        self.dispatcher.stop()
        self.c1.handle_event(button_event(1, 0, down=True))
        self.backend.connect(make_controller(instance_id=3))
        self.assertEqual(self.consumer.calls, [])


class TestPartialDevices(unittest.TestCase):

    def test_missing_controls_and_pause_do_not_block(self):
        small = make_controller(instance_id=5, name="Tiny", buttons=2, axes=2, hats=0)
        backend = FakeBackend([small])
        consumer = RecordingConsumer()
        dispatcher = EventDispatcher(TEST_LOG, backend, DeviceEnumerator(TEST_LOG, backend), consumer)

        with self.assertLogs("padmouse.test", level="DEBUG") as cm:
            dispatcher.start()
        self.assertTrue(any("pause signal not supported" in line for line in cm.output))

        # A, B (press + value each), left stick, coarse
        self.assertEqual(len(dispatcher.subscriptions), 6)

        small.handle_event(button_event(5, 1, down=True))
        self.assertEqual(consumer.kinds(), ["press", "value", "input"])

    def test_default_consumer_ignores_everything(self):
        gc = make_controller(instance_id=6)
        backend = FakeBackend([gc])
        dispatcher = EventDispatcher(TEST_LOG, backend, DeviceEnumerator(TEST_LOG, backend), ControllerConsumer())
        dispatcher.start()
        gc.handle_event(button_event(6, 0, down=True))
        gc.handle_event(axis_event(6, 1, 0.9))
        gc.handle_event(button_event(6, 7, down=True))
        backend.disconnect(gc)


if __name__ == "__main__":
    unittest.main()
