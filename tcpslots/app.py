"""Interactive console that drives a :class:`SimpleServer`."""

from __future__ import annotations

import argparse
import sys
import threading
from typing import Any, List, Optional, Sequence

from .server import MAX_CLIENT, ServerError, SimpleServer

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 12345

HELP_TEXT = (
    "commands:\n"
    "  start                 start listening\n"
    "  stop                  disconnect every client and stop listening\n"
    "  send <id> <message>   send a message to client <id> (1..8)\n"
    "  clear                 clear the received message list\n"
    "  status                show which client slots are connected\n"
    "  messages              show received messages\n"
    "  help                  show this text\n"
    "  quit                  stop the server and leave"
)


class ServerConsole:
    """Start and stop a server, send to clients and collect what they send.

    Client ids seen by the user run from 1 to :data:`MAX_CLIENT`; they map to
    the server's slots 0 to ``MAX_CLIENT - 1``.
    """

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
        self.host = host
        self.port = port
        self._server: Optional[SimpleServer] = None
        self._messages: List[str] = []
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        """Whether a server is currently started."""
        return self._server is not None

    @property
    def address(self) -> Any:
        """The address the running server listens on, or None."""
        return self._server.address if self._server is not None else None

    def _received(self, client_id: int, text: str) -> None:
        with self._lock:
            self._messages.append(text)

    def start(self) -> bool:
        """Start the server unless one is running; raises ServerError on failure."""
        if self._server is not None:
            return False
        self._server = SimpleServer(self.host, self.port, self._received)
        return True

    def stop(self) -> bool:
        """Stop the running server; return False if none was running."""
        server, self._server = self._server, None
        if server is None:
            return False
        server.close()
        return True

    def send(self, client_id: int, message: str) -> bool:
        """Send a message to client ``client_id`` (1-based).

        Returns False when nothing was sent: empty message, no server,
        an id outside 1..MAX_CLIENT, or an empty slot.
        """
        if not message or self._server is None:
            return False
        if not 1 <= client_id <= MAX_CLIENT:
            return False
        return self._server.send(client_id - 1, message)

    def clear(self) -> None:
        """Forget every received message."""
        with self._lock:
            self._messages.clear()

    def client_status(self) -> List[bool]:
        """Connection state of each slot, client 1 first."""
        server = self._server
        if server is None:
            return [False] * MAX_CLIENT
        return [server.is_connected(slot) for slot in range(MAX_CLIENT)]

    def messages(self) -> List[str]:
        """Messages received so far, oldest first."""
        with self._lock:
            return list(self._messages)

    def _status_text(self) -> str:
        return " ".join(
            f"{number}:{'on' if connected else 'off'}"
            for number, connected in enumerate(self.client_status(), start=1)
        )

    def handle_command(self, line: str) -> Optional[str]:
        """Run one console command and return its output.

        Returns None when the command asks to quit. Raises ValueError for an
        unknown or malformed command.
        """
        parts = line.strip().split(maxsplit=2)
        if not parts:
            return ""
        command, args = parts[0].lower(), parts[1:]

        if command in ("quit", "exit"):
            self.stop()
            return None
        if command == "help":
            return HELP_TEXT
        if command == "start":
            if self.start():
                return f"listening on {self.address[0]}:{self.address[1]}"
            return "already running"
        if command == "stop":
            return "stopped" if self.stop() else "not running"
        if command == "clear":
            self.clear()
            return "cleared"
        if command == "status":
            return self._status_text()
        if command == "messages":
            return "\n".join(self.messages())
        if command == "send":
            if len(args) < 2:
                raise ValueError("usage: send <id> <message>")
            try:
                client_id = int(args[0])
            except ValueError:
                raise ValueError(f"invalid client id: {args[0]!r}") from None
            return "sent" if self.send(client_id, args[1]) else "not sent"
        raise ValueError(f"unknown command: {command!r}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Read console commands from standard input until quit or end of input."""
    parser = argparse.ArgumentParser(prog="tcpslots", description="Simple multi-client TCP server console.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    options = parser.parse_args(argv)

    console = ServerConsole(options.host, options.port)
    try:
        for line in sys.stdin:
            try:
                output = console.handle_command(line)
            except (ValueError, ServerError, OSError) as exc:
                print(f"error: {exc}", file=sys.stderr)
                continue
            if output is None:
                break
            if output:
                print(output)
    finally:
        console.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())