"""Integration tests against real sockets on the loopback interface.

These open local TCP servers with asyncio and send requests through the default
httpx transport, without any mocking.

Usage:
    pytest -v -m integration
"""

import asyncio
import socket
import time

import pytest
from webrequest import rest
from webrequest.core.options import MaterializationMode, RequestOptions
from webrequest.exceptions import TransactionError

pytestmark = pytest.mark.integration  # Mark all tests in this module as integration tests

HTTP_OK_RESPONSE = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: text/plain; charset=utf-8\r\n"
    b"Content-Length: 5\r\n"
    b"Connection: close\r\n"
    b"\r\n"
    b"hello"
)


async def _silent_handler(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    """Accepts the connection and never answers; returns once the client hangs up."""
    try:
        await reader.read(-1)
    finally:
        writer.close()


async def _ok_handler(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    try:
        await reader.readuntil(b"\r\n\r\n")
        writer.write(HTTP_OK_RESPONSE)
        await writer.drain()
    finally:
        writer.close()


@pytest.fixture(autouse=True)
def no_environment_proxies(monkeypatch):
    """AUTOUSE: Loopback requests must not be routed through a proxy taken from the environment."""
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)


def _unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.mark.asyncio
async def test_server_that_never_answers_times_out():
    """A GET with a 1 second timeout against a silent server fails with code 0 well before the default timeout."""
    server = await asyncio.start_server(_silent_handler, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]

    try:
        started = time.monotonic()
        with pytest.raises(TransactionError) as exc_info:
            await rest.get(f"http://127.0.0.1:{port}/slow", RequestOptions(timeout_seconds=1))
        elapsed = time.monotonic() - started
    finally:
        server.close()

    error = exc_info.value
    assert error.response_code == 0
    assert error.connection_error is True
    assert str(error).startswith("REST Error: 0\n")
    assert elapsed < 5


@pytest.mark.asyncio
async def test_get_from_local_server():
    server = await asyncio.start_server(_ok_handler, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]

    try:
        response = await rest.get(
            f"http://127.0.0.1:{port}/greeting",
            RequestOptions(timeout_seconds=5, materialization=MaterializationMode.BOTH),
        )
    finally:
        server.close()

    assert response.success is True
    assert response.response_code == 200
    assert response.text == "hello"
    assert response.data == b"hello"


@pytest.mark.asyncio
async def test_refused_connection_is_connection_error():
    port = _unused_port()

    with pytest.raises(TransactionError) as exc_info:
        await rest.delete(f"http://127.0.0.1:{port}/items/1", RequestOptions(timeout_seconds=5))

    assert exc_info.value.response_code == 0
    assert exc_info.value.connection_error is True
