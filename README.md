# tcpslots

A small TCP server that holds up to eight clients, each in a numbered
slot. Text received from any client is collected into a message log, and
text can be sent to any connected client by its slot number.

## Installing

    pip install .

## The console

    tcpslots [--host HOST] [--port PORT]

`--host` defaults to `127.0.0.1` and `--port` to `12345`. The command
reads one command per line from standard input, prints each command's
output on standard output, and stops at `quit`, `exit` or the end of
input; the server is stopped on the way out. No prompt is printed, and
errors (an unknown command, a bad client id, a port that cannot be bound)
are written to standard error as `error: ...` without ending the session.

| Command            | What it does                                               |
|--------------------|------------------------------------------------------------|
| `start`            | Start listening and print the address, or `already running` |
| `stop`             | Disconnect every client and stop listening                 |
| `send <id> <text>` | Send text to client `<id>` (1 to 8); prints `sent` or `not sent` |
| `status`           | Show each slot as `1:on 2:off ...`                         |
| `messages`         | Show every message received so far, oldest first           |
| `clear`            | Empty the message log                                      |
| `help`             | List the commands                                          |
| `quit` / `exit`    | Stop the server and leave                                  |

Client ids in the console run from 1 to 8. A send with an empty message,
with no server running, to an id outside 1 to 8, or to an empty slot
sends nothing and prints `not sent`.

## Using it from Python

```python
from tcpslots.server import SimpleServer

def on_received(client_id, text):
    print(f"client {client_id}: {text}")

with SimpleServer("127.0.0.1", 12345, on_received) as server:
    ...
    if server.is_connected(0):
        server.send(0, "hello")
    print(server.connected_ids())
```

`tcpslots.server.SimpleServer` numbers its slots from 0 to 7
(`MAX_CLIENT` is 8). A new connection takes the lowest free slot; a
connection that arrives while every slot is taken is accepted and closed
at once. A slot becomes free again when its client disconnects.

- `send(client_id, text)` returns `False` for an empty slot and raises
  `IndexError` for an id outside 0 to 7.
- `is_connected(client_id)` returns `False` for any id outside the range.
- `connected_ids()` lists the occupied slots in ascending order.
- `address` gives the address the server listens on (bind to port 0 to
  let the system pick one).
- `close()` disconnects every client and stops listening; leaving the
  `with` block does the same.
- If the socket cannot be created, bound or put to listening, the
  constructor raises `ServerError`.

`on_received` is called from the client's receiving thread, once for
every chunk read from its socket (up to 16384 bytes), so one message sent
by a client may arrive split or joined with another.

`tcpslots.client.ClientConnection` is the per-client object the server
creates: it runs its own receiving thread and reports through
`on_received(client_id, text)` and `on_closed(client_id)`. Text goes over
the wire as UTF-8; `encode_message` and `decode_message` do the
conversion, dropping everything from the first NUL character on and
replacing bytes that are not valid UTF-8.

`tcpslots.app.ServerConsole` wraps a server together with the message
log. It is the object behind the `tcpslots` command and can be driven
from code through `start`, `stop`, `send`, `clear`, `client_status`,
`messages` and `handle_command`. `handle_command` returns the command's
output, `None` for `quit`, and raises `ValueError` for an unknown or
malformed command.

## What it does not do

There is no graphical window: the console does not refresh slot status
or show arriving messages by itself; use `status` and `messages` to look.
Messages are not framed or stored anywhere beyond the in-memory log, and
there is no client program; any TCP client, such as a terminal tool that
opens a raw connection, can talk to the server.