"""Watching the process for leaked file descriptors."""

from __future__ import annotations

import fcntl
import logging
import resource
from typing import Callable, Optional

log = logging.getLogger(__name__)

CHECK_INTERVAL = 3 * 60.0
LIMIT_RATIO = 0.75
MESSAGE = "Too many open files!"


def _descriptor_table_size() -> int:
    return resource.getrlimit(resource.RLIMIT_NOFILE)[0]


def count_open_handles(max_handles: int) -> int:
    """Count the open descriptors among 0 .. max_handles - 1."""
    count = 0
    for fd in range(max_handles):
        try:
            fcntl.fcntl(fd, fcntl.F_GETFD)
        except OSError:
            continue
        count += 1
    return count


class FileHandleLeaks:
    """Reports once when more than three quarters of the descriptors are used.

    Call check() every CHECK_INTERVAL seconds.
    """

    def __init__(
        self,
        on_too_many_open_files: Optional[Callable[[str], None]] = None,
        max_handles: Optional[int] = None,
        counter: Callable[[int], int] = count_open_handles,
    ) -> None:
        log.debug("creating")
        self.on_too_many_open_files = on_too_many_open_files
        self.max_handles = max_handles
        self.counter = counter
        self.error_set = False

    def check(self) -> bool:
        """Return True if the limit was crossed on this check."""
        if self.error_set:
            return False
        max_handles = self.max_handles if self.max_handles is not None else _descriptor_table_size()
        if self.counter(max_handles) > max_handles * LIMIT_RATIO:
            self.error_set = True
            if self.on_too_many_open_files is not None:
                self.on_too_many_open_files(MESSAGE)
            return True
        return False