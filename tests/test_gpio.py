import pytest

from mtvboard.gpio import Gpio, GpioListener, GpioMode


class Recorder(GpioListener):
    def __init__(self):
        self.events = []

    def on_solo(self, input_number):
        self.events.append(("solo", input_number))

    def on_preset(self, preset_number):
        self.events.append(("preset", preset_number))

    def on_solo_mode_disabled(self):
        self.events.append(("solo_disabled",))

    def on_tally(self, input_number, state):
        self.events.append(("tally", input_number, state))

    def on_time_count_start(self):
        self.events.append(("start",))

    def on_time_count_stop(self):
        self.events.append(("stop",))


@pytest.fixture
def board(tmp_path):
    inputs = []
    for n in range(16):
        path = tmp_path / f"in_{n}"
        path.write_text("1")
        inputs.append(path)
    solo = tmp_path / "solo_disable"
    solo.write_text("1")
    counter = tmp_path / "time_counter"
    counter.write_text("1")
    recorder = Recorder()
    gpio = Gpio(
        recorder,
        input_paths=[str(p) for p in inputs],
        solo_disable_path=str(solo),
        time_counter_path=str(counter),
        alarm_path=str(tmp_path / "alarm"),
        led_path=str(tmp_path / "led"),
    )
    return gpio, recorder, inputs, solo, counter, tmp_path


def test_default_mode_is_tally(board):
    gpio, *_ = board
    assert gpio.mode == GpioMode.TALLY


def test_tally_reports_changes_inverted(board):
    gpio, rec, inputs, *_ = board
    inputs[3].write_text("0")
    gpio.update_tally_state()
    assert rec.events == [("tally", 3, 1)]
    inputs[3].write_text("1")
    gpio.update_tally_state()
    assert rec.events[-1] == ("tally", 3, 0)


def test_tally_quiet_without_change(board):
    gpio, rec, *_ = board
    gpio.update_tally_state()
    assert rec.events == []


def test_solo_only_on_falling_edge(board):
    gpio, rec, inputs, *_ = board
    gpio.set_mode(GpioMode.SOLO)
    inputs[5].write_text("0")
    gpio.update_state()
    gpio.update_state()
    assert rec.events == [("solo", 5)]


def test_preset_mode(board):
    gpio, rec, inputs, *_ = board
    gpio.set_mode(GpioMode.PRESET)
    inputs[0].write_text("0")
    inputs[15].write_text("0")
    gpio.update_state()
    assert rec.events == [("preset", 0), ("preset", 15)]


def test_unknown_mode_falls_back_to_solo(board):
    gpio, rec, inputs, *_ = board
    gpio.set_mode(7)
    inputs[2].write_text("0")
    gpio.update_state()
    assert rec.events == [("solo", 2)]


def test_time_counter_start_and_stop(board):
    gpio, rec, _, _, counter, _ = board
    counter.write_text("0")
    gpio.update_time_counter()
    counter.write_text("1")
    gpio.update_time_counter()
    gpio.update_time_counter()
    assert rec.events == [("stop",), ("start",)]


def test_solo_mode_disabled_on_any_change(board):
    gpio, rec, _, solo, _, _ = board
    solo.write_text("0")
    gpio.update_solo_mode_disabled()
    gpio.update_solo_mode_disabled()
    solo.write_text("1")
    gpio.update_solo_mode_disabled()
    assert rec.events == [("solo_disabled",), ("solo_disabled",)]


def test_poll_runs_all_checks(board):
    gpio, rec, inputs, solo, counter, _ = board
    counter.write_text("0")
    solo.write_text("0")
    inputs[1].write_text("0")
    gpio.poll()
    assert rec.events == [("stop",), ("solo_disabled",), ("tally", 1, 1)]


def test_common_alarm_is_active_low(board):
    gpio, *_, tmp_path = board
    alarm = tmp_path / "alarm"
    gpio.set_common_alarm(1)
    assert alarm.read_text() == "0"
    gpio.set_common_alarm(0)
    assert alarm.read_text() == "1"


def test_common_alarm_not_rewritten_when_unchanged(board):
    gpio, *_, tmp_path = board
    alarm = tmp_path / "alarm"
    gpio.set_common_alarm(1)
    alarm.unlink()
    gpio.set_common_alarm(1)
    assert not alarm.exists()


def test_led_toggles(board):
    gpio, *_, tmp_path = board
    led = tmp_path / "led"
    led.write_text("0")
    gpio.toggle_led_hps_b()
    assert led.read_text() == "1"
    gpio.toggle_led_hps_b()
    assert led.read_text() == "0"