"""Polling of the general purpose inputs and outputs of the board."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .sysfs import read_value, write_state

log = logging.getLogger(__name__)

GPIO_DIR = "/var/volatile/gpio"
INPUT_PATHS = tuple(f"{GPIO_DIR}/SOLO_IN_{n}" for n in range(1, 17))
COMMON_ALARM = f"{GPIO_DIR}/COMMON_ALARM"
SOLO_DISABLE = f"{GPIO_DIR}/SOLO_DISABLE"
TIME_COUNTER = f"{GPIO_DIR}/TIME_COUNTER"
LED_HPS_B = "/gpio/gpio517/value"

UPDATE_INTERVAL = 0.1
LED_INTERVAL = 0.5


class GpioMode(enum.IntEnum):
    SOLO = 0
    TALLY = 1
    PRESET = 2


class GpioListener:
    """Receives input events.

    The default implementation records every event in ``events`` as a
    tuple of the event name and its arguments; override the methods to
    react to events directly.
    """

    def __init__(self) -> None:
        self.events: List[Tuple] = []

    def _record(self, *event) -> None:
        if not hasattr(self, "events"):
            self.events = []
        self.events.append(event)

    def on_solo(self, input_number: int) -> None:
        self._record("solo", input_number)

    def on_preset(self, preset_number: int) -> None:
        self._record("preset", preset_number)

    def on_solo_mode_disabled(self) -> None:
        self._record("solo_mode_disabled")

    def on_tally(self, input_number: int, state: int) -> None:
        self._record("tally", input_number, state)

    def on_time_count_start(self) -> None:
        self._record("time_count_start")

    def on_time_count_stop(self) -> None:
        self._record("time_count_stop")


@dataclass
class _Input:
    path: str
    old_state: int = 1


class Gpio:
    """Watches the input lines and drives the alarm and status outputs.

    Call poll() every UPDATE_INTERVAL seconds and toggle_led_hps_b() every
    LED_INTERVAL seconds.
    """

    def __init__(
        self,
        listener: Optional[GpioListener] = None,
        input_paths: Iterable[str] = INPUT_PATHS,
        solo_disable_path: str = SOLO_DISABLE,
        time_counter_path: str = TIME_COUNTER,
        alarm_path: str = COMMON_ALARM,
        led_path: str = LED_HPS_B,
    ) -> None:
        self.listener = listener if listener is not None else GpioListener()
        self.inputs = [_Input(path) for path in input_paths]
        self.solo_disable = _Input(solo_disable_path)
        self.time_counter = _Input(time_counter_path)
        self.alarm_path = alarm_path
        self.led_path = led_path
        self.mode: int = GpioMode.TALLY
        self._old_common_alarm = -1

    def set_mode(self, mode) -> None:
        self.mode = mode
        log.debug("new gpio mode %s", mode)

    def update_state(self) -> None:
        try:
            mode = GpioMode(self.mode)
        except ValueError:
            mode = GpioMode.SOLO
        if mode is GpioMode.TALLY:
            self.update_tally_state()
        elif mode is GpioMode.PRESET:
            self.update_preset_state()
        else:
            self.update_solo_state()

    def _falling_edges(self):
        for index, line in enumerate(self.inputs):
            state = read_value(line.path)
            falling = bool(line.old_state) and state == 0
            line.old_state = state
            if falling:
                yield index

    def update_preset_state(self) -> None:
        for index in self._falling_edges():
            log.debug("preset number: %d", index)
            self.listener.on_preset(index)

    def update_solo_state(self) -> None:
        for index in self._falling_edges():
            log.debug("solo input: %d", index)
            self.listener.on_solo(index)

    def update_tally_state(self) -> None:
        for index, line in enumerate(self.inputs):
            state = read_value(line.path)
            if line.old_state != state:
                log.debug("tally state: %d, input: %d", state, index)
                self.listener.on_tally(index, state ^ 1)
            line.old_state = state

    def update_solo_mode_disabled(self) -> None:
        state = read_value(self.solo_disable.path)
        if self.solo_disable.old_state != state:
            log.debug("solo mode disabled")
            self.listener.on_solo_mode_disabled()
        self.solo_disable.old_state = state

    def update_time_counter(self) -> None:
        state = read_value(self.time_counter.path)
        if self.time_counter.old_state == state:
            return
        if state:
            log.debug("time counter start")
            self.listener.on_time_count_start()
        else:
            log.debug("time counter stop")
            self.listener.on_time_count_stop()
        self.time_counter.old_state = state

    def poll(self) -> None:
        """Run one round of input checks."""
        self.update_time_counter()
        self.update_solo_mode_disabled()
        self.update_state()

    def set_common_alarm(self, common_alarm) -> None:
        if self._old_common_alarm == common_alarm:
            return
        self._old_common_alarm = common_alarm
        write_state(self.alarm_path, "0" if common_alarm else "1")

    def toggle_led_hps_b(self) -> None:
        state = read_value(self.led_path)
        write_state(self.led_path, "1" if state == 0 else "0")