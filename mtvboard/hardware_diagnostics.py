"""Temperature, power and fan monitoring of the board."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .sysfs import read_value, write_state

log = logging.getLogger(__name__)

FAN_STATE = "/var/volatile/gpio/FAN_STATE"
FAN_STATE_RESET = "/var/volatile/gpio/FAN_STATE_RESET"
POWER_CONSUMPTION = "/var/volatile/gpio/POWER1_INPUT"
TEMPERATURE = "/sys/class/hwmon/hwmon0/temp1_input"

UPDATE_INTERVAL = 3.0
TEMPER_HIGH_LIMIT = 60 * 10
TEMPER_LOW_LIMIT = TEMPER_HIGH_LIMIT - 5 * 10
OVER_TEMPERATURE_MESSAGE = "Device temperature above 60°C"


def _cdiv(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def format_tenths(value: int) -> str:
    """Render a value in tenths with one decimal place."""
    return f"{value / 10:.1f}"


class HardwareDiagnostics:
    """Reads the sensors and reports changes through callbacks.

    Call update() every UPDATE_INTERVAL seconds.
    """

    def __init__(
        self,
        on_over_temperature: Optional[Callable[[str], None]] = None,
        on_fan_state: Optional[Callable[[int], None]] = None,
        on_hardware_state: Optional[Callable[[str, str], None]] = None,
        board_rev: int = 0,
        temperature_path: str = TEMPERATURE,
        power_path: str = POWER_CONSUMPTION,
        fan_state_path: str = FAN_STATE,
        fan_reset_path: str = FAN_STATE_RESET,
    ) -> None:
        self.on_over_temperature = on_over_temperature
        self.on_fan_state = on_fan_state
        self.on_hardware_state = on_hardware_state
        self.board_rev = board_rev
        self.temperature_path = temperature_path
        self.power_path = power_path
        self.fan_state_path = fan_state_path
        self.fan_reset_path = fan_reset_path
        self._temperature_over = False
        self._fan_ok = -1

    def update(self) -> tuple[str, str]:
        """Check all sensors; return the power and temperature texts."""
        self.fan_state()
        temperature = self.get_temperature()
        self.temperature_control(temperature)
        power = self.get_power()
        str_power, str_temperature = format_tenths(power), format_tenths(temperature)
        if self.on_hardware_state is not None:
            self.on_hardware_state(str_power, str_temperature)
        return str_power, str_temperature

    def get_temperature(self) -> int:
        """Temperature in tenths of a degree Celsius."""
        return _cdiv(read_value(self.temperature_path), 100)

    def get_power(self) -> int:
        """Power consumption in tenths of a watt, rounded."""
        return _cdiv(read_value(self.power_path) + 50000, 100000)

    def temperature_control(self, temperature: int) -> bool:
        """Report overheating once until the temperature drops back; True if reported."""
        reported = False
        if temperature > TEMPER_HIGH_LIMIT and not self._temperature_over:
            self._temperature_over = True
            reported = True
            if self.on_over_temperature is not None:
                self.on_over_temperature(OVER_TEMPERATURE_MESSAGE)
        if temperature < TEMPER_LOW_LIMIT:
            self._temperature_over = False
        return reported

    def _reset_fan_state(self) -> None:
        write_state(self.fan_reset_path, "1")
        write_state(self.fan_reset_path, "0")

    def fan_state(self) -> None:
        if self.board_rev == 1:
            return
        fan = read_value(self.fan_state_path)
        self._reset_fan_state()
        if self._fan_ok != fan:
            self._fan_ok = fan
            if self.on_fan_state is not None:
                self.on_fan_state(fan)