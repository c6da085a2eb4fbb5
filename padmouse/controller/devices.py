#!/usr/bin/env python3
"""
devices.py - Controller enumeration and logical slot assignment

Every pass puts the first enumerated controller into slot 1, overwriting
whatever it had. Other controllers keep the slot the hardware layer gave
them. A disconnected controller just stops showing up.
"""

from typing import List, Optional

MOVEMENT_SLOT = 1


class DeviceEnumerator:
    def __init__(self, log, backend):
        self.log = log
        self.backend = backend
        self.controllers: list = []

    def enumerate(self) -> List:
        controllers = self.backend.controllers()
        if controllers:
            controllers[0].player_index = MOVEMENT_SLOT

        for i, gc in enumerate(controllers):
            js = gc.joystick
            self.log.info(
                f"[DEVICE] Controller {i}: {gc.get_name()} "
                f"(GUID={gc.get_guid()}) slot={gc.player_index} "
                f"Buttons={js.get_numbuttons()} Axes={js.get_numaxes()} Hats={js.get_numhats()}"
            )
        if not controllers:
            self.log.info("[DEVICE] No controllers attached")

        self.controllers = controllers
        return controllers

    def slot_controller(self, slot: int) -> Optional[object]:
        """Controller currently in `slot` (first match), or None."""
        for gc in self.controllers:
            if gc.player_index == slot:
                return gc
        return None

    @staticmethod
    def list_devices(backend):
        """Return list of (index, guid, name) for all attached controllers."""
        return [(i, gc.get_guid(), gc.get_name()) for i, gc in enumerate(backend.controllers())]
