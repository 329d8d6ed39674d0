"""Length-prefixed byte-array frames as exchanged between cascaded devices."""

from __future__ import annotations

import struct

_HEADER = struct.Struct(">I")
_NULL_LENGTH = 0xFFFFFFFF


def encode_frame(data: bytes) -> bytes:
    """Prefix *data* with its length as a big-endian 32-bit integer."""
    if len(data) >= _NULL_LENGTH:
        raise ValueError("frame too large")
    return _HEADER.pack(len(data)) + bytes(data)


class FrameDecoder:
    """Collects stream bytes and yields every complete frame."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Number of bytes waiting for the rest of their frame."""
        return len(self._buffer)

    def feed(self, data: bytes) -> list[bytes]:
        self._buffer += data
        frames: list[bytes] = []
        while len(self._buffer) >= _HEADER.size:
            (length,) = _HEADER.unpack_from(self._buffer)
            if length == _NULL_LENGTH:
                frames.append(b"")
                del self._buffer[: _HEADER.size]
                continue
            end = _HEADER.size + length
            if len(self._buffer) < end:
                break
            frames.append(bytes(self._buffer[_HEADER.size : end]))
            del self._buffer[:end]
        return frames