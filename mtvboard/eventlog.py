"""Client for the local event-log service."""

from __future__ import annotations

import enum
import socket

SERVER_NAME = "/tmp/event_log_server"


class EventCategory(enum.IntEnum):
    SYSTEM = 0
    CONNECTION = 1
    WARNING = 2
    CONTROL = 3
    INPUT_STATE = 4
    ERROR = 5


class Eventlog:
    """Sends one message per connection to the event-log socket."""

    def __init__(self, server_name: str = SERVER_NAME, timeout: float = 0.05) -> None:
        self.server_name = server_name
        self.timeout = timeout

    def format(self, category, message: str) -> str:
        return f"{int(category)}, {message}"

    def add(self, category, message: str) -> bool:
        """Deliver the message; return False if the service is unreachable."""
        payload = self.format(category, message).encode("utf-8")
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
                sock.settimeout(self.timeout)
                sock.connect(self.server_name)
                sock.sendall(payload)
        except OSError:
            return False
        return True