import socket
import threading
import time

import pytest

from fivefan.backends import LocalBackendClient
from fivefan.config import LocalBackendConfig
from fivefan.errors import TransportError
from fivefan.transport import RequestsTransport, TransportResponse


@pytest.fixture
def silent_server():
    """Accepts connections but never answers."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(8)
    yield f"http://127.0.0.1:{sock.getsockname()[1]}"
    sock.close()


@pytest.fixture
def trickle_server():
    """Sends headers at once, then one body byte every 0.3s, forever."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(8)
    sock.settimeout(0.2)
    stop = threading.Event()

    def serve():
        while not stop.is_set():
            try:
                conn, _ = sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            with conn:
                conn.recv(65536)
                try:
                    conn.sendall(b"HTTP/1.1 200 OK\r\n"
                                 b"Content-Type: application/json\r\n"
                                 b"Content-Length: 100000\r\n\r\n")
                    while not stop.wait(0.3):
                        conn.sendall(b" ")
                except OSError:
                    pass

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{sock.getsockname()[1]}"
    stop.set()
    sock.close()
    thread.join(timeout=2)


@pytest.fixture
def closed_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}"


def test_response_ok_range():
    assert TransportResponse(200).ok
    assert TransportResponse(204).ok
    assert not TransportResponse(301).ok
    assert not TransportResponse(500).ok


def test_silent_server_times_out(silent_server):
    start = time.monotonic()
    with pytest.raises(TransportError) as excinfo:
        RequestsTransport().request(f"{silent_server}/api/tags", timeout=0.5)
    assert excinfo.value.timed_out is True
    assert time.monotonic() - start < 2.0


def test_local_generate_gives_up_on_silent_server(silent_server):
    client = LocalBackendClient(LocalBackendConfig(url=silent_server, timeout=0.5),
                                RequestsTransport())
    start = time.monotonic()
    assert client.generate("persona", "hello", voice="hear") is None
    assert time.monotonic() - start < 2.0


def test_refused_connection(closed_port):
    with pytest.raises(TransportError) as excinfo:
        RequestsTransport().request(f"{closed_port}/v1/models", timeout=1.0)
    assert excinfo.value.timed_out is False


def test_trickling_body_stops_at_deadline(trickle_server):
    start = time.monotonic()
    with pytest.raises(TransportError) as excinfo:
        RequestsTransport().request(f"{trickle_server}/api/generate", method="POST",
                                    body={"prompt": "hi"}, timeout=1.0)
    assert excinfo.value.timed_out is True
    assert time.monotonic() - start < 1.5


def test_local_generate_gives_up_on_trickling_server(trickle_server):
    client = LocalBackendClient(LocalBackendConfig(url=trickle_server, timeout=1.0),
                                RequestsTransport())
    start = time.monotonic()
    assert client.generate("sys", "hi") is None
    assert time.monotonic() - start < 1.5
