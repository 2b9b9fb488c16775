import asyncio
import socket
import threading
from typing import Dict

from fanout.relay.errors import UnsupportedAddressFamilyError
from fanout.relay.models import Destination, SUPPORTED_FAMILIES


class SenderPool:
    """
    One outbound UDP socket per address family, shared by every send to
    destinations of that family.

    Sockets are created on first use and stay open until ``close()``.

    Usage:
        pool = SenderPool()

        try:
            await pool.send(payload, destination)

        finally:
            pool.close()
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._loop = loop
        self._senders: Dict[socket.AddressFamily, socket.socket] = {}
        self._lock = threading.Lock()
        self._closed = False

    @property
    def families(self) -> list[socket.AddressFamily]:
        return list(self._senders.keys())

    async def send(
        self,
        payload: bytes,
        destination: Destination,
    ) -> None:
        sender = self._get_sender(destination.family)

        if self._loop is None:
            self._loop = asyncio.get_event_loop()

        await self._loop.sock_sendto(
            sender,
            payload,
            destination.endpoint,
        )

    def _get_sender(self, family: socket.AddressFamily) -> socket.socket:
        if family not in SUPPORTED_FAMILIES:
            raise UnsupportedAddressFamilyError(
                f"Target address family '{family!r}' is not supported."
            )

        with self._lock:
            if self._closed:
                raise RuntimeError("Sender pool is closed.")

            sender = self._senders.get(family)
            if sender is None:
                sender = socket.socket(family, socket.SOCK_DGRAM)
                sender.setblocking(False)

                self._senders[family] = sender

        return sender

    def close(self) -> None:
        with self._lock:
            for sender in self._senders.values():
                sender.close()

            self._senders.clear()
            self._closed = True
