"""
Receive/forward loop.

Each iteration waits for one datagram on the listener, counts it, then
sends the same bytes to every destination in configured order. A failed
send is counted and, subject to the error log gate, logged; it never
stops the remaining sends or the loop.

The blocking receive races the shutdown signal, so cancelling the signal
ends the loop without another datagram having to arrive. Sends already
issued for the current datagram finish before the loop returns.
"""

import asyncio
import ipaddress
import socket
from typing import Sequence

from fanout.logging import Logger
from fanout.logging.fanout_logging_models import ForwardError
from fanout.relay.errors import (
    ReceiveError,
    RelayConfigError,
    UnsupportedAddressFamilyError,
)
from fanout.relay.gate import ErrorLogGate
from fanout.relay.models import Destination
from fanout.relay.senders import SenderPool
from fanout.relay.stats import ForwardStats

from .shutdown_signal import ShutdownSignal


MAX_DATAGRAM_SIZE = 65535


class ForwardLoop:
    def __init__(
        self,
        listener: socket.socket,
        destinations: Sequence[Destination],
        sender_pool: SenderPool,
        stats: ForwardStats,
        error_log_gate: ErrorLogGate,
        shutdown: ShutdownSignal,
        receive_buffer_size: int = MAX_DATAGRAM_SIZE,
        logger: Logger | None = None,
    ) -> None:
        self._destinations = validate_destinations(destinations)

        self._listener = listener
        self._listener.setblocking(False)

        self._sender_pool = sender_pool
        self._stats = stats
        self._error_log_gate = error_log_gate
        self._shutdown = shutdown
        self._receive_buffer_size = validate_receive_buffer_size(receive_buffer_size)

        if logger is None:
            logger = Logger()

        self._logger = logger
        self._loop: asyncio.AbstractEventLoop | None = None
        self._shutdown_waiter: asyncio.Task | None = None

    async def run(self) -> None:
        self._loop = asyncio.get_event_loop()
        self._shutdown_waiter = self._loop.create_task(self._shutdown.wait())

        try:
            while not self._shutdown.cancelled:
                payload = await self._receive()
                if payload is None:
                    break

                self._stats.record_inbound(len(payload))

                await self._forward(payload)

        finally:
            if not self._shutdown_waiter.done():
                self._shutdown_waiter.cancel()

                try:
                    await self._shutdown_waiter

                except asyncio.CancelledError:
                    if asyncio.current_task().cancelling():
                        raise

            self._shutdown_waiter = None

    async def _receive(self) -> bytes | None:
        """
        Returns the next datagram, or None once shutdown has been requested.
        """
        receive_task = self._loop.create_task(
            self._loop.sock_recvfrom(
                self._listener,
                self._receive_buffer_size,
            )
        )

        try:
            await asyncio.wait(
                [receive_task, self._shutdown_waiter],
                return_when=asyncio.FIRST_COMPLETED,
            )

        finally:
            if not receive_task.done():
                receive_task.cancel()

                try:
                    await receive_task

                except asyncio.CancelledError:
                    # Only the receive was cancelled unless run() itself is.
                    if asyncio.current_task().cancelling():
                        raise

        if receive_task.cancelled():
            return None

        try:
            payload, _ = receive_task.result()

        except OSError as err:
            raise ReceiveError(f"Receive failed: {err}") from err

        return payload

    async def _forward(self, payload: bytes) -> None:
        for destination in self._destinations:
            try:
                await self._sender_pool.send(payload, destination)

            except UnsupportedAddressFamilyError:
                raise

            except Exception as err:
                self._stats.record_failure()

                if self._error_log_gate.should_log(destination.label):
                    await self._logger.log(
                        ForwardError(
                            message=f"Forward error to {destination.label}: {err}",
                            target=destination.label,
                            target_host=destination.address,
                            target_port=destination.port,
                            error=str(err),
                        )
                    )

                continue

            self._stats.record_forward()


def validate_destinations(
    destinations: Sequence[Destination],
) -> tuple[Destination, ...]:
    validated = tuple(destinations)

    if len(validated) == 0:
        raise RelayConfigError("At least one destination is required.")

    seen: set[tuple[ipaddress.IPv4Address | ipaddress.IPv6Address, int]] = set()
    for destination in validated:
        key = (ipaddress.ip_address(destination.address), destination.port)

        if key in seen:
            raise RelayConfigError(
                f"Duplicate destination endpoint: {destination.endpoint_key}"
            )

        seen.add(key)

    return validated


def validate_receive_buffer_size(receive_buffer_size: int) -> int:
    # Smaller reads silently truncate datagrams.
    if receive_buffer_size < MAX_DATAGRAM_SIZE:
        raise RelayConfigError(
            f"Receive buffer size must be at least {MAX_DATAGRAM_SIZE} bytes, got {receive_buffer_size}."
        )

    return receive_buffer_size
