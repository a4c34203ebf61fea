import socket
import threading
import time

import pytest

from tcpslots.client import BUFSIZE, ClientConnection, decode_message, encode_message


def wait_for(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class Recorder:
    def __init__(self):
        self.received = []
        self.closed = []
        self.lock = threading.Lock()

    def on_received(self, client_id, text):
        with self.lock:
            self.received.append((client_id, text))

    def on_closed(self, client_id):
        with self.lock:
            self.closed.append(client_id)


@pytest.fixture
def pair():
    ours, peer = socket.socketpair()
    peer.settimeout(5)
    recorder = Recorder()
    conn = ClientConnection(ours, ("peer", 0), 3, recorder.on_received, recorder.on_closed)
    yield conn, peer, recorder
    conn.close()
    peer.close()


def test_decode_full_buffer_keeps_every_byte():
    data = b"x" * BUFSIZE
    assert decode_message(data) == "x" * BUFSIZE


def test_decode_stops_at_nul():
    assert decode_message(b"abc\0def") == "abc"


def test_encode_stops_at_nul():
    assert encode_message("abc\0def") == b"abc"


@pytest.mark.parametrize("text", ["hello", "안녕하세요", "", "a b\r\nc"])
def test_encode_decode_round_trip(text):
    assert decode_message(encode_message(text)) == text


def test_received_data_is_reported_with_id(pair):
    conn, peer, recorder = pair
    peer.sendall(b"hi there")
    wait_for(lambda: recorder.received == [(3, "hi there")])
    assert recorder.received == [(3, "hi there")]
    assert conn.is_alive() is True


def test_send_reaches_peer(pair):
    conn, peer, _ = pair
    conn.send("yo")
    assert peer.recv(100) == b"yo"


def test_peer_disconnect_reports_closed(pair):
    conn, peer, recorder = pair
    peer.close()
    assert wait_for(lambda: recorder.closed == [3])
    assert conn.is_alive() is False


def test_close_stops_thread_and_notifies_once(pair):
    conn, peer, recorder = pair
    assert conn.is_alive() is True
    conn.close()
    conn.close()
    assert conn.is_alive() is False
    assert peer.recv(100) == b""
    assert wait_for(lambda: recorder.closed == [3])
    time.sleep(0.05)
    assert recorder.closed == [3]


def test_send_after_close_raises(pair):
    conn, _, _ = pair
    conn.close()
    with pytest.raises(OSError):
        conn.send("late")