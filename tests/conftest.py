"""
Pytest configuration for relay tests.

Configures pytest-asyncio for async test support and provides loopback
UDP fixtures plus logger and sender pool doubles.
"""

import asyncio
import socket
import pytest

from typing import Callable, Generator, Iterable

from fanout.logging import Entry
from fanout.relay import Destination, SenderPool


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


class RecordingLogger:
    """Collects entries instead of writing them to a stream."""

    def __init__(self) -> None:
        self.entries: list[Entry] = []

    async def log(
        self,
        entry: Entry,
        name: str | None = None,
        template: str | None = None,
    ):
        self.entries.append(entry)

    async def batch(
        self,
        *entries: Entry,
        name: str | None = None,
        template: str | None = None,
    ):
        self.entries.extend(entries)

    async def close(self):
        pass

    @property
    def messages(self) -> list[str]:
        return [entry.message for entry in self.entries]

    def of_type(self, entry_type: type[Entry]) -> list[Entry]:
        return [entry for entry in self.entries if isinstance(entry, entry_type)]


class FailingSenderPool(SenderPool):
    """Real sender pool that refuses to send to the given ports."""

    def __init__(self, failing_ports: Iterable[int]) -> None:
        super().__init__()
        self.failing_ports = set(failing_ports)
        self.attempts: list[tuple[bytes, Destination]] = []

    async def send(self, payload: bytes, destination: Destination) -> None:
        self.attempts.append((payload, destination))

        if destination.port in self.failing_ports:
            raise OSError(f"Destination {destination.endpoint_key} is unreachable")

        await super().send(payload, destination)


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def failing_sender_pool() -> Generator[Callable[..., FailingSenderPool], None, None]:
    pools: list[FailingSenderPool] = []

    def create_pool(*failing_ports: int) -> FailingSenderPool:
        pool = FailingSenderPool(failing_ports)
        pools.append(pool)
        return pool

    yield create_pool

    for pool in pools:
        pool.close()


@pytest.fixture
def udp_socket() -> Generator[Callable[[], socket.socket], None, None]:
    """Factory for non-blocking UDP sockets bound to an ephemeral loopback port."""
    sockets: list[socket.socket] = []

    def create_socket() -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.bind(("127.0.0.1", 0))
        sock.setblocking(False)
        sockets.append(sock)
        return sock

    yield create_socket

    for sock in sockets:
        sock.close()


@pytest.fixture
def receive_datagram() -> Callable:
    async def receive(
        sock: socket.socket,
        timeout: float = 2.0,
    ) -> bytes:
        loop = asyncio.get_running_loop()
        data, _ = await asyncio.wait_for(
            loop.sock_recvfrom(sock, 65535),
            timeout=timeout,
        )

        return data

    return receive


@pytest.fixture
def send_datagram() -> Callable:
    async def send(
        sock: socket.socket,
        payload: bytes,
        target: socket.socket,
    ):
        loop = asyncio.get_running_loop()
        await loop.sock_sendto(sock, payload, target.getsockname())

    return send
