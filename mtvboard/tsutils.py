"""Helpers for 27-bit timestamps carried at the head of transport blocks."""

MAX_TS = 0x7FFFFFF

_HALF_TS = MAX_TS // 2


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def extract_ts(block: bytes) -> int:
    """Return the timestamp stored big-endian in the first four bytes of *block*."""
    if len(block) < 4:
        raise ValueError("a timestamp needs at least 4 bytes")
    return int.from_bytes(bytes(block[:4]), "big") & MAX_TS


def ts_diff(t1: int, t2: int) -> int:
    """Return ``t1 - t2`` folded into the shortest distance on the timestamp ring."""
    d = _to_int32(_to_int32(t1) - _to_int32(t2))
    if d > _HALF_TS:
        d -= MAX_TS
    if d < -_HALF_TS:
        d += MAX_TS
    return d