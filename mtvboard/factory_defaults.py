"""Restoring the network settings when the reset button is held."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .netconfig import INTERFACES_FILE, write_config
from .sysfs import read_value

log = logging.getLogger(__name__)

RESET_BUTTON = "/var/volatile/gpio/reset_button"
TICK_INTERVAL = 1.0
HOLD_TICKS = 10

FACTORY_IP = (192, 168, 0, 209)
FACTORY_NETMASK = (255, 255, 255, 0)
FACTORY_GATEWAY = (192, 168, 0, 1)


class FactoryDefaults:
    """Counts seconds the button is pressed and resets after long enough.

    Call tick() every TICK_INTERVAL seconds.
    """

    def __init__(
        self,
        on_reset: Optional[Callable[[], None]] = None,
        reset_button_path: str = RESET_BUTTON,
        interfaces_path: str = INTERFACES_FILE,
        apply: bool = True,
    ) -> None:
        log.debug("creating")
        self.on_reset = on_reset
        self.reset_button_path = reset_button_path
        self.interfaces_path = interfaces_path
        self.apply = apply
        self.cnt_time = 0

    def tick(self) -> bool:
        """Sample the button; return True if the settings were reset."""
        if read_value(self.reset_button_path):
            self.cnt_time = 0
        else:
            self.cnt_time += 1
        if self.cnt_time > HOLD_TICKS:
            self.cnt_time = 0
            self.reset_to_factory_settings()
            return True
        return False

    def reset_to_factory_settings(self) -> None:
        write_config(
            FACTORY_IP,
            FACTORY_NETMASK,
            FACTORY_GATEWAY,
            path=self.interfaces_path,
            apply=self.apply,
        )
        if self.on_reset is not None:
            self.on_reset()