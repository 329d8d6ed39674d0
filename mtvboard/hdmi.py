"""Configuration of the ADV7513 HDMI transmitter."""

from __future__ import annotations

import enum
import logging
from typing import Optional, Sequence, Tuple

from .i2c import I2c, I2cError

log = logging.getLogger(__name__)

ADV7513_I2C_ADDR = 0x39
HPD_INT_REGISTER = 0x96
INT_BIT = 0x80
HOT_PLUG_INTERVAL = 1.0

Register = Tuple[int, int]

HDMI_HD: Tuple[Register, ...] = (
    (0x98, 0x03), (0x9A, 0xE0), (0x9C, 0x30), (0x9D, 0x61), (0xA2, 0xA4),
    (0xA3, 0xA4), (0xE0, 0xD0), (0xF9, 0x00), (0x55, 0x02), (0x41, 0x00),
    (0x15, 0x21), (0x16, 0xB5), (0x17, 0x02), (0x18, 0x4C), (0x19, 0x53),
    (0x1A, 0x08), (0x1B, 0x00), (0x1C, 0x00), (0x1D, 0x00), (0x1E, 0x19),
    (0x1F, 0xD6), (0x20, 0x1C), (0x21, 0x56), (0x22, 0x08), (0x23, 0x00),
    (0x24, 0x1E), (0x25, 0x88), (0x26, 0x02), (0x27, 0x91), (0x28, 0x1F),
    (0x29, 0xFF), (0x2A, 0x08), (0x2B, 0x00), (0x2C, 0x0E), (0x2D, 0x85),
    (0x2E, 0x18), (0x2F, 0xBE), (0x48, 0x00), (0xD0, 0x3C), (0xBA, 0x60),
    (0xDE, 0x10), (0xAF, 0x16), (0x55, 0x22), (0x56, 0x28), (0xC0, 0x01),
    (0xC1, 0x00), (0xC2, 0x0E), (0xC3, 0xB0), (0xC4, 0x01), (0xC5, 0x00),
    (0xC6, 0x0F), (0xC7, 0x00), (0x01, 0x00), (0x02, 0x18), (0x03, 0x00),
    (0x0B, 0x0E), (0x0C, 0x84), (0x0A, 0x00), (0x4A, 0xA0), (0x73, 0x01),
    (0x4A, 0x80),
)

HDMI_SD: Tuple[Register, ...] = (
    (0x98, 0x03), (0x9A, 0xE0), (0x9C, 0x30), (0x9D, 0x61), (0xA2, 0xA4),
    (0xA3, 0xA4), (0xE0, 0xD0), (0xF9, 0x00), (0x55, 0x02), (0x41, 0x00),
    (0x15, 0x23), (0x16, 0xB9), (0x17, 0x00), (0x18, 0x4A), (0x19, 0xF8),
    (0x1A, 0x08), (0x1B, 0x00), (0x1C, 0x00), (0x1D, 0x00), (0x1E, 0x1A),
    (0x1F, 0x84), (0x20, 0x1A), (0x21, 0x6A), (0x22, 0x08), (0x23, 0x00),
    (0x24, 0x1D), (0x25, 0x50), (0x26, 0x04), (0x27, 0x23), (0x28, 0x1F),
    (0x29, 0xFC), (0x2A, 0x08), (0x2B, 0x00), (0x2C, 0x0D), (0x2D, 0xDE),
    (0x2E, 0x19), (0x2F, 0x13), (0x48, 0x00), (0xD0, 0x3C), (0xBA, 0x60),
    (0xDE, 0x10), (0xAF, 0x16), (0x55, 0x22), (0x56, 0x28), (0xC0, 0x01),
    (0xC1, 0x00), (0xC2, 0x0E), (0xC3, 0xB0), (0xC4, 0x01), (0xC5, 0x00),
    (0xC6, 0x0F), (0xC7, 0x00), (0x01, 0x00), (0x02, 0x18), (0x03, 0x00),
    (0x0B, 0x0E), (0x0C, 0x84), (0x0A, 0x00), (0x4A, 0xA0), (0x73, 0x01),
    (0x4A, 0x80),
)

HDMI_COLOR_RGB: Tuple[Register, ...] = (
    (0x16, 0x34),
    (0x18, 0xAC),
    (0x55, 0x01),
    (0x57, 0x14),
)


def bus_path(board_rev: int) -> str:
    """The I2C bus the transmitter sits on for a board revision."""
    return "/dev/i2c-0" if board_rev == 0 else "/dev/i2c-1"


class HdmiFormat(enum.IntEnum):
    SD = 0
    HD = 1


class HdmiAdv7513:
    """Loads the register map and reloads it whenever a monitor is plugged in.

    Call check_hot_plug() every HOT_PLUG_INTERVAL seconds.
    """

    def __init__(self, bus=None, board_rev: int = 0) -> None:
        log.debug("initialization")
        self.bus = bus if bus is not None else I2c(bus_path(board_rev))
        self.hdmi_format = HdmiFormat.HD
        self.color_format = 1
        self.apply_config()

    def _write(self, reg_addr: int, value: int) -> bool:
        try:
            self.bus.write(ADV7513_I2C_ADDR, reg_addr, value)
        except I2cError as err:
            log.debug("register %#04x: %s", reg_addr, err)
            return False
        return True

    def check_hot_plug(self) -> bool:
        """Reconfigure after a hot-plug interrupt; True if one was pending."""
        try:
            status = self.bus.read(ADV7513_I2C_ADDR, HPD_INT_REGISTER)
        except I2cError as err:
            log.debug("interrupt status: %s", err)
            return False
        if not status & INT_BIT:
            return False
        log.debug("HPD interrupt (hot plug detection)")
        self._write(HPD_INT_REGISTER, INT_BIT)
        self.apply_config()
        return True

    def set_hdmi_format(self, fmt) -> None:
        self.hdmi_format = fmt
        self.apply_config()

    def set_color(self, rgb) -> None:
        """Choose RGB output; takes effect at the next configuration."""
        self.color_format = rgb

    def _register_map(self) -> Sequence[Register]:
        return HDMI_SD if self.hdmi_format == HdmiFormat.SD else HDMI_HD

    def apply_config(self) -> int:
        """Write the register map; return the number of failed writes."""
        registers = list(self._register_map())
        if self.color_format:
            registers.extend(HDMI_COLOR_RGB)
        return sum(not self._write(addr, value) for addr, value in registers)


__all__ = [
    "ADV7513_I2C_ADDR",
    "HDMI_COLOR_RGB",
    "HDMI_HD",
    "HDMI_SD",
    "HdmiAdv7513",
    "HdmiFormat",
    "bus_path",
]

_: Optional[int] = None