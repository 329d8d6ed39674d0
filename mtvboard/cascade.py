"""TCP links between cascaded devices carrying length-prefixed frames."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Callable, Optional

from .framing import FrameDecoder, encode_frame

log = logging.getLogger(__name__)

DO_CONNECT_TIME = 5.0
ACCEPT_POLL = 0.2
RECV_SIZE = 65536


def _shutdown(sock: socket.socket) -> None:
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        pass
    sock.close()


class CascadeClient:
    """Keeps a connection to the next device open, retrying while it is down."""

    def __init__(
        self,
        index: int,
        dst_ip: str,
        dst_port: int,
        enable,
        on_data: Optional[Callable[[int, bytes], None]] = None,
        on_connected: Optional[Callable[[int], None]] = None,
        reconnect_interval: float = DO_CONNECT_TIME,
        connect_timeout: float = 3.0,
    ) -> None:
        log.debug("cascade %d, dst_ip %s: creating (enable=%s)", index, dst_ip, enable)
        self.index = index
        self.dst_ip = dst_ip
        self.dst_port = dst_port
        self.enable = enable
        self.on_data = on_data
        self.on_connected = on_connected
        self.reconnect_interval = reconnect_interval
        self.connect_timeout = connect_timeout
        self._lock = threading.RLock()
        self._sock: Optional[socket.socket] = None
        self._timer: Optional[threading.Timer] = None
        self._closed = False
        self.connect()

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> bool:
        """Try to connect once; on failure a retry is scheduled."""
        with self._lock:
            if self._closed or not self.enable:
                return False
            if self._sock is not None:
                return True
            address = (self.dst_ip, self.dst_port)
        log.debug("connecting to %s:%s", *address)
        try:
            sock = socket.create_connection(address, timeout=self.connect_timeout)
        except OSError as err:
            log.debug("connection to %s:%s failed: %s", address[0], address[1], err)
            self._schedule_retry()
            return False
        sock.settimeout(None)
        with self._lock:
            if self._closed or not self.enable or self._sock is not None:
                sock.close()
                return self._sock is not None
            self._sock = sock
            self._cancel_retry()
        threading.Thread(target=self._read_loop, args=(sock,), daemon=True).start()
        log.debug("connected to %s:%s", *address)
        if self.on_connected is not None:
            self.on_connected(self.index)
        return True

    def _schedule_retry(self) -> None:
        with self._lock:
            if self._closed or self._timer is not None:
                return
            self._timer = threading.Timer(self.reconnect_interval, self._retry)
            self._timer.daemon = True
            self._timer.start()

    def _cancel_retry(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _retry(self) -> None:
        with self._lock:
            self._timer = None
        self.connect()

    def _read_loop(self, sock: socket.socket) -> None:
        decoder = FrameDecoder()
        try:
            while True:
                chunk = sock.recv(RECV_SIZE)
                if not chunk:
                    break
                for frame in decoder.feed(chunk):
                    if self.on_data is not None:
                        self.on_data(self.index, frame)
        except OSError:
            pass
        with self._lock:
            lost = self._sock is sock
            if lost:
                self._sock = None
        sock.close()
        if lost:
            log.debug("cascade device %s disconnected", self.dst_ip)
            self.connect()

    def write(self, data: bytes) -> int:
        """Send one frame; return the bytes sent, or 0 if there is no link."""
        with self._lock:
            sock = self._sock
            if not self.enable or sock is None:
                return 0
        frame = encode_frame(data)
        try:
            sock.sendall(frame)
        except OSError as err:
            log.debug("write failed: %s", err)
            return 0
        return len(frame)

    def _drop_socket(self) -> None:
        with self._lock:
            sock, self._sock = self._sock, None
        if sock is not None:
            _shutdown(sock)

    def update_config(self, dst_ip: str, dst_port: int, enable) -> None:
        with self._lock:
            self.dst_ip = dst_ip
            self.dst_port = dst_port
            self.enable = enable
        if enable:
            self.connect()
            if self.on_connected is not None:
                self.on_connected(self.index)
        else:
            self._cancel_retry()
            self._drop_socket()

    def close(self) -> None:
        with self._lock:
            self._closed = True
        self._cancel_retry()
        self._drop_socket()

    def __enter__(self) -> CascadeClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class CascadeServer:
    """Accepts connections from the previous device; the latest one is the client."""

    def __init__(
        self,
        port: int,
        on_new_client: Optional[Callable[[socket.socket, str], None]] = None,
        on_data: Optional[Callable[[socket.socket, bytes], None]] = None,
        on_disconnected: Optional[Callable[[socket.socket], None]] = None,
        host: str = "",
    ) -> None:
        log.debug("creating")
        self.on_new_client = on_new_client
        self.on_data = on_data
        self.on_disconnected = on_disconnected
        self._listener = socket.create_server((host, port))
        self._listener.settimeout(ACCEPT_POLL)
        self.port: int = self._listener.getsockname()[1]
        self._lock = threading.Lock()
        self._client: Optional[socket.socket] = None
        self._closed = threading.Event()
        self._thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._thread.start()
        log.debug("listening on port %d", self.port)

    def _accept_loop(self) -> None:
        while not self._closed.is_set():
            try:
                conn, addr = self._listener.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            conn.settimeout(None)
            with self._lock:
                self._client = conn
            if self.on_new_client is not None:
                self.on_new_client(conn, addr[0])
            threading.Thread(target=self._read_client, args=(conn,), daemon=True).start()

    def _read_client(self, conn: socket.socket) -> None:
        decoder = FrameDecoder()
        try:
            while True:
                chunk = conn.recv(RECV_SIZE)
                if not chunk:
                    break
                for frame in decoder.feed(chunk):
                    if self.on_data is not None:
                        self.on_data(conn, frame)
        except OSError:
            pass
        with self._lock:
            if self._client is conn:
                self._client = None
        conn.close()
        if self.on_disconnected is not None:
            self.on_disconnected(conn)

    def send_client(self, data: bytes) -> bool:
        """Send one frame to the current client; False if there is none."""
        with self._lock:
            client = self._client
        if client is None:
            return False
        try:
            client.sendall(encode_frame(data))
        except OSError as err:
            log.debug("send failed: %s", err)
            return False
        return True

    def close_all_connections(self) -> None:
        with self._lock:
            client = self._client
        if client is not None:
            _shutdown(client)

    def close(self) -> None:
        self._closed.set()
        self._listener.close()
        self.close_all_connections()
        self._thread.join()

    def __enter__(self) -> CascadeServer:
        return self

    def __exit__(self, *exc) -> None:
        self.close()