"""One accepted TCP connection, served by its own receiving thread."""

from __future__ import annotations

import socket
import threading
from contextlib import suppress
from typing import Any, Callable, Optional

BUFSIZE = 16384
ENCODING = "utf-8"
STOP_TIMEOUT = 180.0

ReceivedCallback = Callable[[int, str], None]
ClosedCallback = Callable[[int], None]


def encode_message(text: str) -> bytes:
    """Encode text for the wire; nothing after an embedded NUL is sent."""
    data = text.encode(ENCODING, errors="replace")
    return data.split(b"\0", 1)[0]


def decode_message(data: bytes) -> str:
    """Decode received bytes up to the first NUL."""
    return bytes(data).split(b"\0", 1)[0].decode(ENCODING, errors="replace")


class ClientConnection:
    """A connected peer whose incoming data is reported through callbacks.

    ``on_received(client_id, text)`` is called for every chunk read from the
    socket; ``on_closed(client_id)`` is called once when the receiving thread
    ends, whether the peer disconnected or :meth:`close` was called.
    """

    def __init__(
        self,
        sock: socket.socket,
        address: Any,
        client_id: int,
        on_received: Optional[ReceivedCallback] = None,
        on_closed: Optional[ClosedCallback] = None,
    ) -> None:
        self.sock = sock
        self.address = address
        self.client_id = client_id
        self._on_received = on_received
        self._on_closed = on_closed
        self._alive = threading.Event()
        self._alive.set()
        self._close_lock = threading.Lock()
        self._closed = False
        self._thread = threading.Thread(
            target=self._receive_loop,
            name=f"client-{client_id}",
            daemon=True,
        )
        self._thread.start()

    def _receive_loop(self) -> None:
        try:
            while self._alive.is_set():
                try:
                    data = self.sock.recv(BUFSIZE)
                except OSError:
                    break
                if not data:
                    break
                if self._on_received is not None:
                    self._on_received(self.client_id, decode_message(data))
        finally:
            self._alive.clear()
            if self._on_closed is not None:
                self._on_closed(self.client_id)

    def send(self, text: str) -> None:
        """Send text to the peer; raises OSError if the socket fails."""
        self.sock.sendall(encode_message(text))

    def is_alive(self) -> bool:
        """Whether the receiving thread is still serving the connection."""
        return self._alive.is_set()

    def close(self) -> None:
        """Stop receiving, close the socket and wait for the thread to end."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._alive.clear()
        with suppress(OSError):
            self.sock.shutdown(socket.SHUT_RDWR)
        if threading.current_thread() is not self._thread:
            self._thread.join(STOP_TIMEOUT)
        self.sock.close()