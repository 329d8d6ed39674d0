"""Byte-wide register access to devices on a Linux I2C bus."""

from __future__ import annotations

import fcntl
import logging
import os
from contextlib import contextmanager
from typing import Iterator

log = logging.getLogger(__name__)

I2C_SLAVE = 0x0703


class I2cError(OSError):
    """A bus transaction could not be carried out."""


def _check_range(name: str, value: int, upper: int) -> None:
    if not 0 <= value <= upper:
        raise ValueError(f"{name} out of range: {value!r}")


class I2c:
    """Opens the bus device for each transaction, as the kernel driver expects."""

    def __init__(self, path: str) -> None:
        self.path = path

    @contextmanager
    def _device(self, slave_addr: int) -> Iterator[int]:
        try:
            fd = os.open(self.path, os.O_RDWR)
        except OSError as err:
            raise I2cError(err.errno, f"failed to open the i2c bus {self.path}") from err
        try:
            try:
                fcntl.ioctl(fd, I2C_SLAVE, slave_addr)
            except OSError as err:
                raise I2cError(
                    err.errno, f"failed to acquire bus access to slave {slave_addr:#04x}"
                ) from err
            yield fd
        finally:
            os.close(fd)

    def read(self, slave_addr: int, reg_addr: int) -> int:
        """Return the byte held in register *reg_addr* of device *slave_addr*."""
        _check_range("slave address", slave_addr, 0x7F)
        _check_range("register address", reg_addr, 0xFF)
        with self._device(slave_addr) as fd:
            try:
                os.write(fd, bytes([reg_addr]))
                data = os.read(fd, 1)
            except OSError as err:
                raise I2cError(err.errno, f"read of register {reg_addr:#04x} failed") from err
        if len(data) != 1:
            raise I2cError(f"read of register {reg_addr:#04x} returned no data")
        return data[0]

    def write(self, slave_addr: int, reg_addr: int, value: int) -> int:
        """Store *value* in register *reg_addr*; return the value written."""
        _check_range("slave address", slave_addr, 0x7F)
        _check_range("register address", reg_addr, 0xFF)
        _check_range("value", value, 0xFF)
        with self._device(slave_addr) as fd:
            try:
                written = os.write(fd, bytes([reg_addr, value]))
            except OSError as err:
                raise I2cError(err.errno, f"write of register {reg_addr:#04x} failed") from err
        if written != 2:
            raise I2cError(f"short write to register {reg_addr:#04x}")
        return value & 0xFF