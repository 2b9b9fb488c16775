import socket
from typing import Sequence

from fanout.logging import Logger
from fanout.logging.fanout_logging_models import RelayError, RelayInfo

from .errors import ReceiveError
from .gate import ErrorLogGate
from .models import Destination
from .reporting import StatsReporter
from .senders import SenderPool
from .server import (
    ForwardLoop,
    MAX_DATAGRAM_SIZE,
    ShutdownSignal,
    create_listener,
    validate_destinations,
    validate_receive_buffer_size,
)
from .stats import ForwardStats


class UDPForwarder:
    """
    Owns the listener, the sender pool and the counters for one relay run,
    and drives the forward loop alongside the stats reporter until the
    shutdown signal is raised.

    Usage:
        forwarder = UDPForwarder(
            "0.0.0.0",
            30000,
            destinations,
            stats_interval=5,
        )

        await forwarder.run()
    """

    def __init__(
        self,
        listen_address: str,
        listen_port: int,
        destinations: Sequence[Destination],
        stats_interval: float = 5,
        error_log_interval: float = 5.0,
        receive_buffer_size: int = MAX_DATAGRAM_SIZE,
        shutdown: ShutdownSignal | None = None,
        sender_pool: SenderPool | None = None,
        listener: socket.socket | None = None,
        logger: Logger | None = None,
    ) -> None:
        if logger is None:
            logger = Logger()

        if shutdown is None:
            shutdown = ShutdownSignal()

        if sender_pool is None:
            sender_pool = SenderPool()

        self.listen_address = listen_address
        self.listen_port = listen_port

        self.stats = ForwardStats()
        self.shutdown = shutdown
        self.sender_pool = sender_pool
        self.error_log_gate = ErrorLogGate(error_log_interval)

        self._logger = logger
        self._listener = listener
        self._destinations = validate_destinations(destinations)
        self._stats_interval = stats_interval
        self._receive_buffer_size = validate_receive_buffer_size(receive_buffer_size)

    @property
    def listener(self) -> socket.socket | None:
        return self._listener

    def bind(self) -> socket.socket:
        if self._listener is None:
            self._listener = create_listener(
                self.listen_address,
                self.listen_port,
            )

            self.listen_address, self.listen_port = self._listener.getsockname()[:2]

        return self._listener

    def stop(self) -> bool:
        """Raises the shutdown signal. Returns True on the first call only."""
        return self.shutdown.cancel()

    async def run(self) -> None:
        forward_loop = ForwardLoop(
            self.bind(),
            self._destinations,
            self.sender_pool,
            self.stats,
            self.error_log_gate,
            self.shutdown,
            receive_buffer_size=self._receive_buffer_size,
            logger=self._logger,
        )

        reporter = StatsReporter(
            self.stats,
            self._stats_interval,
            self.shutdown,
            logger=self._logger,
        )

        reporter.start()

        try:
            await forward_loop.run()

        except ReceiveError as err:
            await self._logger.log(
                RelayError(
                    message=f"Forwarder failed: {err}",
                    listen_host=self.listen_address,
                    listen_port=self.listen_port,
                )
            )

            raise

        else:
            await self._logger.log(
                RelayInfo(
                    message="Stopping forwarder...",
                    listen_host=self.listen_address,
                    listen_port=self.listen_port,
                )
            )

        finally:
            self.shutdown.cancel()
            await reporter.stop()

            self.close()

        await self._logger.log(
            RelayInfo(
                message="Forwarder stopped.",
                listen_host=self.listen_address,
                listen_port=self.listen_port,
            )
        )

    def close(self) -> None:
        self.sender_pool.close()

        if self._listener is not None:
            self._listener.close()
            self._listener = None

