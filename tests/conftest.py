import pytest
import socket
import threading
import time
import os

from dataclasses import dataclass, field
from typing import Callable
from contextlib import contextmanager
from queue import Queue
from urllib.parse import quote

from memkv import requests_transport


Handler = Callable[[socket.socket, bytes], None]


@dataclass
class ServerDetails:
    base_url: str = ""
    requests: Queue = field(default_factory=Queue)


def read_request(sock: socket.socket) -> bytes:
    data = b""
    while b"\r\n\r\n" not in data:
        chunk = sock.recv(4096)
        if not chunk:
            return data
        data += chunk

    head, _, body = data.partition(b"\r\n\r\n")
    content_length = 0
    for line in head.split(b"\r\n")[1:]:
        key, _, value = line.partition(b":")
        if key.strip().lower() == b"content-length":
            content_length = int(value.strip())

    while len(body) < content_length:
        chunk = sock.recv(4096)
        if not chunk:
            break
        body += chunk
    return head + b"\r\n\r\n" + body


def canned(body: bytes = b"", status: str = "200 OK", extra_headers: str = "") -> Handler:
    def handler(client_sock: socket.socket, request: bytes):
        head = f"HTTP/1.1 {status}\r\nContent-Length: {len(body)}\r\n{extra_headers}Connection: close\r\n\r\n"
        client_sock.sendall(head.encode("ascii") + body)
    return handler


@pytest.fixture(autouse=True)
def transport_initialized():
    requests_transport.global_init()
    yield


@pytest.fixture
def server_factory():
    @contextmanager
    def _factory(kind: str, handler: Handler):
        details = ServerDetails()
        stop_event = threading.Event()
        socket_path = ""

        if kind == "tcp":
            listener_sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            listener_sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener_sock.bind(("127.0.0.1", 0))
            host, port = listener_sock.getsockname()
            details.base_url = f"http://{host}:{port}"
        elif kind == "unix":
            socket_path = f"/tmp/memkv_client_test_{os.getpid()}_{time.time_ns()}.sock"
            if os.path.exists(socket_path):
                os.remove(socket_path)
            listener_sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            listener_sock.bind(socket_path)
            details.base_url = f"http+unix://{quote(socket_path, safe='')}"
        else:
            pytest.fail(f"Unknown server kind for server_factory: {kind}")

        def server_loop():
            while not stop_event.is_set():
                try:
                    client_sock, _ = listener_sock.accept()
                except socket.timeout:
                    continue
                except OSError:
                    break
                with client_sock:
                    client_sock.settimeout(2.0)
                    try:
                        request = read_request(client_sock)
                        details.requests.put(request)
                        handler(client_sock, request)
                    except OSError:
                        pass

        listener_sock.settimeout(0.1)
        listener_sock.listen()
        server_thread = threading.Thread(target=server_loop, daemon=True)
        server_thread.start()
        try:
            yield details
        finally:
            stop_event.set()
            server_thread.join(timeout=3.0)
            listener_sock.close()
            if socket_path and os.path.exists(socket_path):
                os.remove(socket_path)

    return _factory


@pytest.fixture
def closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
