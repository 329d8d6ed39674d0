"""Reading and writing the small value files exposed by board drivers."""

from __future__ import annotations

import logging
import os
from typing import Union

log = logging.getLogger(__name__)


def read_value(path: str) -> int:
    """Return the integer held in *path*.

    Gives -1 if the file cannot be opened and 0 if its text is not a number.
    """
    try:
        with open(path, "rb") as source:
            text = source.read().decode("ascii", errors="replace")
    except OSError:
        log.debug("could not open file %s", path)
        return -1
    try:
        return int(text.strip())
    except ValueError:
        return 0


def write_state(path: str, state: Union[str, bytes]) -> bool:
    """Write *state* at the start of *path* without truncating it.

    Returns False if the file could not be opened.
    """
    payload = state.encode("ascii") if isinstance(state, str) else bytes(state)
    try:
        fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o666)
    except OSError:
        log.debug("could not open file %s", path)
        return False
    try:
        os.write(fd, payload)
    finally:
        os.close(fd)
    return True