import pytest

from mtvboard.i2c import I2c, I2cError


def test_missing_bus_raises(tmp_path):
    bus = I2c(str(tmp_path / "no-such-bus"))
    with pytest.raises(I2cError):
        bus.read(0x39, 0x96)


def test_write_to_missing_bus_raises(tmp_path):
    bus = I2c(str(tmp_path / "no-such-bus"))
    with pytest.raises(I2cError):
        bus.write(0x39, 0x96, 0x80)


def test_regular_file_is_not_a_bus(tmp_path):
    path = tmp_path / "plain"
    path.write_bytes(b"\x00")
    bus = I2c(str(path))
    with pytest.raises(I2cError):
        bus.read(0x39, 0x00)


def test_error_is_an_os_error_with_message(tmp_path):
    bus = I2c(str(tmp_path / "absent"))
    with pytest.raises(OSError, match="failed to open the i2c bus"):
        bus.read(0x39, 0x00)


@pytest.mark.parametrize(
    "slave, reg, value",
    [(0x80, 0x00, 0x00), (0x39, 0x100, 0x00), (0x39, 0x00, 0x100), (-1, 0x00, 0x00)],
)
def test_out_of_range_arguments(tmp_path, slave, reg, value):
    bus = I2c(str(tmp_path / "absent"))
    with pytest.raises(ValueError):
        bus.write(slave, reg, value)


def test_read_checks_register_range(tmp_path):
    bus = I2c(str(tmp_path / "absent"))
    with pytest.raises(ValueError):
        bus.read(0x39, 0x1FF)