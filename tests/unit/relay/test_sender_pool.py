"""
Tests for SenderPool and Destination.

Covers:
- Happy path: sends reach loopback receivers through one socket per family
- Negative path: non-IP addresses, unsupported families, closed pools
- Edge cases: IPv6 destinations when the host supports them
"""

import socket

import pytest

from fanout.relay import (
    Destination,
    SenderPool,
    UnsupportedAddressFamilyError,
)


def has_ipv6_loopback() -> bool:
    if not socket.has_ipv6:
        return False

    try:
        with socket.socket(socket.AF_INET6, socket.SOCK_DGRAM) as sock:
            sock.bind(("::1", 0))

    except OSError:
        return False

    return True


class TestDestination:
    """Tests for Destination."""

    def test_family_follows_address(self) -> None:
        """IPv4 and IPv6 literals map onto their socket family."""
        assert Destination("a", "127.0.0.1", 31001).family == socket.AF_INET
        assert Destination("b", "::1", 31001).family == socket.AF_INET6

    def test_endpoint_key(self) -> None:
        """The endpoint key is address and port joined by a colon."""
        destination = Destination("Dash app", "127.0.0.1", 31001)

        assert destination.endpoint == ("127.0.0.1", 31001)
        assert destination.endpoint_key == "127.0.0.1:31001"

    def test_hostname_is_rejected(self) -> None:
        """Destinations must already be resolved to an IP address."""
        with pytest.raises(UnsupportedAddressFamilyError):
            Destination("Dash app", "localhost", 31001)


class TestSenderPoolHappyPath:
    """Happy path tests for SenderPool."""

    @pytest.mark.asyncio
    async def test_send_reaches_receiver(
        self,
        udp_socket,
        receive_datagram,
    ) -> None:
        """A payload sent through the pool arrives unchanged."""
        receiver = udp_socket()
        port = receiver.getsockname()[1]
        pool = SenderPool()

        try:
            await pool.send(b"telemetry", Destination("Dash app", "127.0.0.1", port))

            assert await receive_datagram(receiver) == b"telemetry"

        finally:
            pool.close()

    @pytest.mark.asyncio
    async def test_one_socket_per_family(
        self,
        udp_socket,
        receive_datagram,
    ) -> None:
        """Destinations of the same family share a single sender."""
        first = udp_socket()
        second = udp_socket()
        pool = SenderPool()

        try:
            await pool.send(b"a", Destination("first", "127.0.0.1", first.getsockname()[1]))
            await pool.send(b"b", Destination("second", "127.0.0.1", second.getsockname()[1]))

            assert await receive_datagram(first) == b"a"
            assert await receive_datagram(second) == b"b"
            assert pool.families == [socket.AF_INET]

        finally:
            pool.close()

    @pytest.mark.asyncio
    @pytest.mark.skipif(not has_ipv6_loopback(), reason="IPv6 loopback unavailable")
    async def test_ipv6_destination(
        self,
        receive_datagram,
    ) -> None:
        """IPv6 destinations get their own sender."""
        receiver = socket.socket(socket.AF_INET6, socket.SOCK_DGRAM)
        receiver.bind(("::1", 0))
        receiver.setblocking(False)
        pool = SenderPool()

        try:
            await pool.send(b"v6", Destination("v6", "::1", receiver.getsockname()[1]))

            assert await receive_datagram(receiver) == b"v6"
            assert socket.AF_INET6 in pool.families

        finally:
            pool.close()
            receiver.close()


class TestSenderPoolNegativePath:
    """Negative path tests for SenderPool."""

    def test_unsupported_family_is_rejected(self) -> None:
        """Only IPv4 and IPv6 senders can be created."""
        pool = SenderPool()

        with pytest.raises(UnsupportedAddressFamilyError):
            pool._get_sender(socket.AF_UNIX)

        assert pool.families == []

    @pytest.mark.asyncio
    async def test_send_after_close_fails(self) -> None:
        """A closed pool refuses to create new senders."""
        pool = SenderPool()
        pool.close()

        with pytest.raises(RuntimeError):
            await pool.send(b"late", Destination("Dash app", "127.0.0.1", 31001))

    def test_close_is_idempotent(self) -> None:
        """Closing twice is harmless."""
        pool = SenderPool()

        pool.close()
        pool.close()

        assert pool.families == []
