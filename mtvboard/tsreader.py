"""Buffered reading of an MPEG transport stream from an input device."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass

log = logging.getLogger(__name__)

QUEUE_SIZE = 1024
BUF_SIZE = 16 * 1024


@dataclass
class TsBlock:
    """A pooled buffer and the number of valid bytes in it."""

    buf: bytearray
    size: int = 0

    @property
    def data(self) -> bytes:
        return bytes(self.buf[: self.size])


class TsReader:
    """A fixed pool of buffers passed between a producer and a consumer."""

    def __init__(self, queue_size: int = QUEUE_SIZE, buffer_size: int = BUF_SIZE) -> None:
        self.buffer_size = buffer_size
        self._free: deque[TsBlock] = deque(
            TsBlock(bytearray(buffer_size)) for _ in range(queue_size)
        )
        self._full: deque[TsBlock] = deque()
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._input_enabled = True
        self.input_detected = 0
        self._show_debug = True

    def queue_empty_size(self) -> int:
        return len(self._free)

    def queue_full_size(self) -> int:
        return len(self._full)

    def get_data(self, timeout: float = 1.0) -> TsBlock | None:
        """Take the oldest filled block, or return None if none arrives in time."""
        with self._not_empty:
            if self._not_empty.wait_for(lambda: bool(self._full), timeout):
                return self._full.popleft()
        if self._show_debug:
            log.debug("no transport stream data within %s s", timeout)
            self._show_debug = False
        return None

    def return_data(self, data: TsBlock) -> None:
        """Give a block taken with get_data back to the pool."""
        if data is None:
            raise ValueError("cannot return a missing block")
        with self._lock:
            self._free.append(data)

    def input_enable(self, enable) -> None:
        with self._lock:
            self._input_enabled = bool(enable)

    def get_input_detected(self) -> int:
        return self.input_detected

    def push_data(self, data: bytes) -> bool:
        """Copy *data* into a free buffer; return False if it was dropped."""
        if not self._input_enabled or not data:
            return False
        if len(data) > self.buffer_size:
            raise ValueError(f"block of {len(data)} bytes exceeds {self.buffer_size}")
        with self._not_empty:
            if not self._free or not self._input_enabled:
                return False
            block = self._free.popleft()
            block.buf[: len(data)] = data
            block.size = len(data)
            self._full.append(block)
            self._not_empty.notify_all()
        return True


class TsInReader(TsReader):
    """Reads a stream from a file or device in a background thread."""

    def __init__(self, fname, **kwargs) -> None:
        super().__init__(**kwargs)
        self.fname = fname
        self._exit = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        self._exit.clear()
        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()

    def run(self) -> None:
        with open(self.fname, "rb", buffering=0) as source:
            while not self._exit.is_set():
                chunk = source.read(self.buffer_size)
                if chunk:
                    self.push_data(chunk)
                else:
                    self._exit.wait(0.001)

    def stop(self) -> None:
        self._exit.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def __enter__(self) -> TsInReader:
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()