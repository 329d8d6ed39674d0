import pytest

from mtvboard.hardware_diagnostics import HardwareDiagnostics, format_tenths


@pytest.fixture
def diag(tmp_path):
    events = {"over": [], "fan": [], "state": []}
    d = HardwareDiagnostics(
        on_over_temperature=events["over"].append,
        on_fan_state=events["fan"].append,
        on_hardware_state=lambda p, t: events["state"].append((p, t)),
        temperature_path=str(tmp_path / "temp"),
        power_path=str(tmp_path / "power"),
        fan_state_path=str(tmp_path / "fan"),
        fan_reset_path=str(tmp_path / "fan_reset"),
    )
    return d, events, tmp_path


def test_format_tenths_pinned():
    assert format_tenths(5) == "0.5"
    assert format_tenths(-10) == "-1.0"
    assert format_tenths(600) == "60.0"


@pytest.mark.parametrize("value", range(-50, 1000, 37))
def test_format_tenths_round_trip(value):
    assert round(float(format_tenths(value)) * 10) == value


@pytest.mark.parametrize("tenths", [0, 250, 455, 601])
def test_temperature_from_millidegrees(diag, tenths):
    d, _, tmp = diag
    (tmp / "temp").write_text(str(tenths * 100))
    assert d.get_temperature() == tenths


@pytest.mark.parametrize("tenths", [0, 7, 125])
def test_power_from_microwatts(diag, tenths):
    d, _, tmp = diag
    (tmp / "power").write_text(str(tenths * 100000))
    assert d.get_power() == tenths


def test_missing_sensors_read_as_zero(diag):
    d, _, _ = diag
    assert d.get_temperature() == 0
    assert d.get_power() == 0


def test_over_temperature_has_hysteresis(diag):
    d, events, _ = diag
    assert d.temperature_control(600) is False
    assert d.temperature_control(601) is True
    assert d.temperature_control(700) is False
    assert d.temperature_control(550) is False
    assert d.temperature_control(601) is False
    d.temperature_control(549)
    assert d.temperature_control(601) is True
    assert events["over"] == ["Device temperature above 60°C"] * 2


def test_fan_state_reported_on_change_and_reset(diag):
    d, events, tmp = diag
    (tmp / "fan").write_text("1")
    d.fan_state()
    d.fan_state()
    (tmp / "fan").write_text("0")
    d.fan_state()
    assert events["fan"] == [1, 0]
    assert (tmp / "fan_reset").read_text() == "0"


def test_fan_ignored_on_board_rev_1(tmp_path):
    seen = []
    d = HardwareDiagnostics(
        on_fan_state=seen.append,
        board_rev=1,
        fan_state_path=str(tmp_path / "fan"),
        fan_reset_path=str(tmp_path / "fan_reset"),
    )
    d.fan_state()
    assert seen == []
    assert not (tmp_path / "fan_reset").exists()


def test_update_reports_formatted_values(diag):
    d, events, tmp = diag
    (tmp / "temp").write_text(str(612 * 100))
    (tmp / "power").write_text(str(93 * 100000))
    (tmp / "fan").write_text("1")
    result = d.update()
    assert result == (format_tenths(93), format_tenths(612))
    assert events["state"] == [result]
    assert events["over"] == ["Device temperature above 60°C"]
    assert events["fan"] == [1]