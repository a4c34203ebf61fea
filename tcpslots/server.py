"""A TCP server that hands accepted connections a fixed number of slots."""

from __future__ import annotations

import socket
import threading
from contextlib import suppress
from typing import Any, Callable, List, Optional

from .client import STOP_TIMEOUT, ClientConnection

MAX_CLIENT = 8
ACCEPT_POLL = 0.2

ReceivedCallback = Callable[[int, str], None]


class ServerError(Exception):
    """Raised when the listening socket cannot be set up."""


class SimpleServer:
    """Listen on ``host:port`` and keep up to :data:`MAX_CLIENT` clients.

    Each accepted connection takes the lowest free slot; a connection that
    arrives while every slot is taken is closed at once. Text received from a
    client is passed to ``on_received(client_id, text)``.
    """

    def __init__(self, host: str, port: int, on_received: Optional[ReceivedCallback] = None) -> None:
        self._on_received = on_received
        self._lock = threading.Lock()
        self._clients: List[Optional[ClientConnection]] = [None] * MAX_CLIENT
        self._alive = threading.Event()
        self._closed = False

        try:
            self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise ServerError(f"socket() failed: {exc}") from exc
        try:
            self._listener.bind((host, port))
        except OSError as exc:
            self._listener.close()
            raise ServerError(f"bind() failed: {exc}") from exc
        try:
            self._listener.listen(socket.SOMAXCONN)
        except OSError as exc:
            self._listener.close()
            raise ServerError(f"listen() failed: {exc}") from exc
        self._listener.settimeout(ACCEPT_POLL)

        self._alive.set()
        self._thread = threading.Thread(target=self._accept_loop, name="server-accept", daemon=True)
        self._thread.start()

    @property
    def address(self) -> Any:
        """The address the server is listening on."""
        return self._listener.getsockname()

    def _accept_loop(self) -> None:
        while self._alive.is_set():
            try:
                sock, addr = self._listener.accept()
            except socket.timeout:
                continue
            except OSError:
                if not self._alive.is_set():
                    break
                continue
            self._attach(sock, addr)

    def _attach(self, sock: socket.socket, addr: Any) -> None:
        sock.settimeout(None)
        with self._lock:
            if self._alive.is_set():
                for client_id, slot in enumerate(self._clients):
                    if slot is None:
                        self._clients[client_id] = ClientConnection(
                            sock, addr, client_id, self._client_received, self._client_closed
                        )
                        return
        sock.close()

    def _client_received(self, client_id: int, text: str) -> None:
        if self._on_received is not None:
            self._on_received(client_id, text)

    def _client_closed(self, client_id: int) -> None:
        with self._lock:
            conn = self._clients[client_id]
            self._clients[client_id] = None
        if conn is not None:
            conn.close()

    @staticmethod
    def _check_id(client_id: int) -> None:
        if not 0 <= client_id < MAX_CLIENT:
            raise IndexError(f"client id {client_id} out of range 0..{MAX_CLIENT - 1}")

    def send(self, client_id: int, text: str) -> bool:
        """Send text to a client; return False if its slot is empty."""
        self._check_id(client_id)
        with self._lock:
            conn = self._clients[client_id]
        if conn is None:
            return False
        conn.send(text)
        return True

    def is_connected(self, client_id: int) -> bool:
        """Whether a client occupies the given slot."""
        if not 0 <= client_id < MAX_CLIENT:
            return False
        with self._lock:
            return self._clients[client_id] is not None

    def connected_ids(self) -> List[int]:
        """Slots that currently hold a client, in ascending order."""
        with self._lock:
            return [client_id for client_id, conn in enumerate(self._clients) if conn is not None]

    def close(self) -> None:
        """Disconnect every client and stop listening."""
        if self._closed:
            return
        self._closed = True
        self._alive.clear()
        with self._lock:
            connections = [conn for conn in self._clients if conn is not None]
            self._clients = [None] * MAX_CLIENT
        for conn in connections:
            conn.close()
        with suppress(OSError):
            self._listener.shutdown(socket.SHUT_RDWR)
        self._listener.close()
        self._thread.join(STOP_TIMEOUT)

    def __enter__(self) -> "SimpleServer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()