"""
Unit tests for the cursor integrator.
"""

import unittest

from padmouse.controller.inputstate import ABSENT, DirectionalState, Present
from padmouse.controller.integrator import CursorIntegrator

from fakes import TEST_LOG, FakeMouse


def stick(x, y):
    return DirectionalState(x_axis=Present(x), y_axis=Present(y))


class TestCursorIntegrator(unittest.TestCase):

    def setUp(self):
        self.mouse = FakeMouse(pos=(100.0, 200.0))
        self.integrator = CursorIntegrator(TEST_LOG, self.mouse)

    def test_idle_without_sample(self):
        self.integrator.tick()
        self.assertIsNone(self.integrator.position)
        self.assertFalse(self.integrator.tracking)
        self.assertEqual(self.mouse.position_calls, 0)
        self.assertEqual(self.mouse.warps, [])

    def test_missing_axis_is_ignored(self):
        self.integrator.update_sample(DirectionalState(x_axis=Present(0.5), y_axis=ABSENT))
        self.integrator.tick()
        self.assertIsNone(self.integrator.position)
        self.assertFalse(self.integrator.tracking)

    def test_first_sample_adopts_os_pointer(self):
        self.integrator.update_sample(stick(1.0, -1.0))
        self.integrator.tick()
        self.assertTrue(self.integrator.tracking)
        self.assertEqual(self.integrator.position, (100.0, 200.0))
        self.assertEqual(self.mouse.warps, [])

    def test_bottom_left_origin_is_flipped(self):
        mouse = FakeMouse(pos=(100.0, 300.0), height=1080, bottom_left=True)
        integrator = CursorIntegrator(TEST_LOG, mouse)
        integrator.update_sample(stick(0.3, 0.3))
        integrator.tick()
        self.assertEqual(integrator.position, (100.0, 780.0))

    def test_integration_step_is_exact(self):
        self.integrator.update_sample(stick(0.5, 0.5))
        self.integrator.tick()
        self.integrator.update_sample(stick(0.8, -0.4))
        self.integrator.tick()
        self.assertEqual(self.integrator.position, (100.0 + 0.8 * 0.25, 200.0 + 0.4 * 0.25))
        self.assertEqual(self.mouse.warps, [self.integrator.position])

    def test_stick_up_moves_cursor_up(self):
        self.integrator.update_sample(stick(0.1, 1.0))
        self.integrator.tick()
        self.integrator.tick()
        self.assertLess(self.integrator.position[1], 200.0)

    def test_zero_axis_stops_tracking(self):
        self.integrator.update_sample(stick(1.0, 1.0))
        self.integrator.tick()
        self.integrator.tick()
        before = self.integrator.position

        self.integrator.update_sample(stick(0.0, 1.0))
        self.integrator.tick()
        self.assertFalse(self.integrator.tracking)
        self.assertEqual(self.integrator.position, before)
        self.assertEqual(len(self.mouse.warps), 1)

        self.integrator.update_sample(stick(1.0, 0.0))
        self.integrator.tick()
        self.assertFalse(self.integrator.tracking)
        self.assertEqual(self.integrator.position, before)

    def test_rebaseline_after_idle(self):
        self.integrator.update_sample(stick(1.0, 1.0))
        self.integrator.tick()
        self.integrator.tick()
        self.integrator.update_sample(stick(0.0, 0.0))
        self.integrator.tick()

        self.mouse.pos = (640.0, 360.0)
        self.integrator.update_sample(stick(1.0, 1.0))
        self.integrator.tick()
        self.assertEqual(self.integrator.position, (640.0, 360.0))
        self.integrator.tick()
        self.assertEqual(self.integrator.position, (640.25, 359.75))

    def test_repeated_ticks_accumulate(self):
        x, y, n = 0.6, -0.3, 40
        self.integrator.update_sample(stick(x, y))
        self.integrator.tick()
        for _ in range(n):
            self.integrator.tick()
        px, py = self.integrator.position
        self.assertAlmostEqual(px, 100.0 + n * x * 0.25, places=9)
        self.assertAlmostEqual(py, 200.0 + n * -y * 0.25, places=9)
        self.assertEqual(len(self.mouse.warps), n)

    def test_only_latest_sample_counts(self):
        self.integrator.update_sample(stick(1.0, 1.0))
        self.integrator.tick()
        self.integrator.update_sample(stick(-1.0, -1.0))
        self.integrator.update_sample(stick(0.4, 0.4))
        self.integrator.tick()
        px, py = self.integrator.position
        self.assertAlmostEqual(px, 100.1)
        self.assertAlmostEqual(py, 199.9)

    def test_custom_multiplier(self):
        integrator = CursorIntegrator(TEST_LOG, self.mouse, multiplier=2.0)
        integrator.update_sample(stick(1.0, 1.0))
        integrator.tick()
        integrator.tick()
        self.assertEqual(integrator.position, (102.0, 198.0))

    def test_reset(self):
        self.integrator.update_sample(stick(1.0, 1.0))
        self.integrator.tick()
        self.integrator.reset()
        self.assertFalse(self.integrator.tracking)
        self.integrator.tick()
        self.assertEqual(self.mouse.warps, [])

    def test_failed_warp_is_reported_and_tracking_continues(self):
        self.mouse.fail = True
        self.integrator.update_sample(stick(1.0, 1.0))
        self.integrator.tick()
        with self.assertLogs("padmouse.test", level="WARNING") as cm:
            self.integrator.tick()
        self.assertIn("Warp", cm.output[0])
        self.assertEqual(self.integrator.position, (100.25, 199.75))
        self.assertTrue(self.integrator.tracking)


if __name__ == "__main__":
    unittest.main()
