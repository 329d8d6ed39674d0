# mtvboard

These are building blocks for the control software of a video multiviewer
board. Each module does one job and can be used on its own. The package uses
only the standard library. Several modules rely on Linux interfaces: `fcntl`,
`resource`, Unix domain sockets and `/dev/i2c-*` devices.

## Modules

- `mtvboard.tsutils`
  - `extract_ts(block)` reads the big-endian timestamp in the first four bytes
    of a block and masks it to 27 bits (`MAX_TS`). It raises `ValueError` if
    the block is shorter than four bytes.
  - `ts_diff(t1, t2)` returns `t1 - t2` folded into the shortest signed
    distance on the timestamp ring.
- `mtvboard.tsreader`
  - `TsReader` is a fixed pool of buffers, shared safely between threads.
    `push_data` copies data into a free buffer. It returns `False` when the
    data is dropped: input is disabled, the data is empty, or no buffer is
    free.
  - `get_data(timeout)` returns the oldest filled `TsBlock`. It returns `None`
    if nothing arrives before the timeout.
  - `return_data` gives a block back to the pool.
  - `input_enable` switches input on or off.
  - `queue_empty_size` and `queue_full_size` report how full the pool is.
  - `TsInReader(fname)` fills the pool from a file or device on a background
    thread. Use `start`/`stop`, or use it as a context manager.
- `mtvboard.hls`
  - `HlsServer(path_to_video_folder)` first clears `*.m3u8` and `*.ts` files
    from the folder.
  - `add_packet` writes transport packets into `media_N.ts`. After every 50
    frame starts on PID 101, it begins a new segment. At the same point it
    rewrites `playlist.m3u8`, which lists the last 10 segments, and deletes
    older segment files.
  - `is_frame_start(data)` and `delete_files_from_folder(dir_name, pattern)`
    are also available on their own.
- `mtvboard.framing`
  - `encode_frame(data)` prefixes a payload with its length as a big-endian
    32-bit integer.
  - `FrameDecoder.feed(data)` collects stream bytes and returns the list of
    complete frames. A length of `0xFFFFFFFF` decodes as an empty frame.
- `mtvboard.netconfig`
  - `ip_get_ip(name, path)` reads the address, netmask and gateway of an
    interface from an interfaces file and returns an `InterfaceAddress`. It
    raises `LookupError` if none of them is found.
  - `render_config` builds a static configuration for `eth0`.
  - `write_config` writes that configuration. With `apply=True` it then runs
    `ifconfig eth0 down` and `/etc/init.d/networking restart`.
  - `update_resolvconf(dns, path)` writes a single `nameserver` line.
- `mtvboard.eventlog`
  - `Eventlog.add(category, message)` sends `"<category>, <message>"` to the
    Unix socket `/tmp/event_log_server`. It returns `False` if the socket
    cannot be reached.
  - `EventCategory` lists the categories.
- `mtvboard.sysfs`
  - `read_value(path)` returns the integer in a driver value file. It returns
    -1 if the file cannot be opened, and 0 if the file does not hold a number.
  - `write_state(path, state)` writes a value at the start of a file.
- `mtvboard.gpio`
  - `Gpio.poll()` checks the time-counter line, the solo-disable line and the
    16 input lines. It reports events to a `GpioListener`. How the inputs are
    read depends on the mode set with `set_mode` (`GpioMode.SOLO`, `TALLY` or
    `PRESET`).
  - `set_common_alarm` drives the alarm output.
  - `toggle_led_hps_b` blinks a status LED.
- `mtvboard.factory_defaults`
  - `FactoryDefaults.tick()` samples the reset button. Once the button has
    been held for more than 10 ticks, it writes the factory network settings
    (192.168.0.209/255.255.255.0, gateway 192.168.0.1) and calls `on_reset`.
- `mtvboard.hardware_diagnostics`
  - `HardwareDiagnostics.update()` reads the fan, temperature and power
    sensors. It returns the power and temperature as text with one decimal
    place (`format_tenths`).
  - It reports overheating above 60 °C once. The report is re-armed when the
    temperature drops below 55 °C.
- `mtvboard.file_handle_leaks`
  - `count_open_handles(max_handles)` counts the open descriptors.
  - `FileHandleLeaks.check()` reports once when more than three quarters of
    the descriptor table is in use.
- `mtvboard.i2c`
  - `I2c(path).read(slave_addr, reg_addr)` and
    `write(slave_addr, reg_addr, value)` access byte registers through the
    Linux I2C device. Failures raise `I2cError`.
- `mtvboard.hdmi`
  - `HdmiAdv7513` loads the ADV7513 register map (`HdmiFormat.SD` or `HD`,
    optionally with RGB output).
  - `check_hot_plug()` reloads the map after a hot-plug interrupt.
- `mtvboard.cascade`
  - `CascadeClient` keeps a TCP connection to the next device and retries
    every 5 s while the link is down.
  - `CascadeServer` accepts connections. The latest connection is treated as
    the client.
  - Both exchange frames from `mtvboard.framing` and deliver received frames
    through callbacks.

## Example

```python
from mtvboard.tsutils import ts_diff
from mtvboard.framing import encode_frame, FrameDecoder

print(ts_diff(5, 0x7FFFFFF - 5))   # 10: the difference across the wrap

decoder = FrameDecoder()
print(decoder.feed(encode_frame(b"hello")))  # [b'hello']
```

## What it does not do

The package provides no command and no service process. Nothing schedules the
periodic checks. The caller must:

- call `Gpio.poll` about every 0.1 s;
- call `FactoryDefaults.tick` every second;
- call `HardwareDiagnostics.update` every 3 s;
- call `HdmiAdv7513.check_hot_plug` every second;
- call `FileHandleLeaks.check` every 3 minutes.

`HlsServer` only writes segment and playlist files. It does not serve them
over HTTP.

## Tests

```
pip install .[test]
pytest
```