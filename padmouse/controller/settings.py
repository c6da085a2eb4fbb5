from padmouse.controller.integrator import DEFAULT_MULTIPLIER


class Settings:
    def __init__(self):
        # [mouse]
        self.backend = "auto"
        self.movement_multiplier = DEFAULT_MULTIPLIER
        self.tick_interval_ms = 1.0
        self.failsafe = False
        # [input]
        self.axis_deadzone = 0.05
        self.debug_inputs = False
        self.log_buttons = False
        self.log_axes = False
        # [app]
        self.hide_from_switcher = True

    @property
    def tick_interval(self) -> float:
        """Seconds between integrator ticks, clamped to 0.1 ms .. 1 s."""
        return min(1.0, max(0.0001, self.tick_interval_ms / 1000.0))

    @classmethod
    def from_ini(cls, cfg, log=None):
        obj = cls()

        obj.backend = cfg.get_str("mouse", "backend", obj.backend) or "auto"
        obj.movement_multiplier = cfg.get_float("mouse", "movement_multiplier", obj.movement_multiplier)
        obj.tick_interval_ms = cfg.get_float("mouse", "tick_interval_ms", obj.tick_interval_ms)
        obj.failsafe = cfg.get_bool("mouse", "failsafe", obj.failsafe)

        obj.axis_deadzone = cfg.get_float("input", "axis_deadzone", obj.axis_deadzone)
        obj.debug_inputs = cfg.get_bool("input", "debug_inputs", obj.debug_inputs)
        obj.log_buttons = cfg.get_bool("input", "log_buttons", obj.log_buttons)
        obj.log_axes = cfg.get_bool("input", "log_axes", obj.log_axes)

        obj.hide_from_switcher = cfg.get_bool("app", "hide_from_switcher", obj.hide_from_switcher)

        if obj.debug_inputs:
            obj.log_buttons = True
            obj.log_axes = True

        if log:
            log.info(
                f"[CONFIG] backend={obj.backend} multiplier={obj.movement_multiplier} "
                f"tick={obj.tick_interval_ms}ms deadzone={obj.axis_deadzone}"
            )
        return obj
