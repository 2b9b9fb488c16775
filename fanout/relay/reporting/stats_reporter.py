import asyncio

from fanout.logging import Logger
from fanout.logging.fanout_logging_models import RelayStats
from fanout.relay.server.shutdown_signal import ShutdownSignal
from fanout.relay.stats import ForwardStats


class StatsReporter:
    """
    Logs a counter snapshot every ``interval_seconds``. An interval of
    zero disables reporting and ``start()`` creates no task.
    """

    def __init__(
        self,
        stats: ForwardStats,
        interval_seconds: float,
        shutdown: ShutdownSignal,
        logger: Logger | None = None,
    ) -> None:
        if interval_seconds < 0:
            raise ValueError("Stats interval cannot be negative.")

        self._stats = stats
        self._interval = interval_seconds
        self._shutdown = shutdown

        if logger is None:
            logger = Logger()

        self._logger = logger
        self._task: asyncio.Task | None = None

    @property
    def enabled(self) -> bool:
        return self._interval > 0

    def start(self) -> asyncio.Task | None:
        if not self.enabled:
            return None

        if self._task is None:
            self._task = asyncio.create_task(self.run())

        return self._task

    async def run(self) -> None:
        while not self._shutdown.cancelled:
            try:
                await asyncio.wait_for(
                    self._shutdown.wait(),
                    timeout=self._interval,
                )

            except asyncio.TimeoutError:
                await self.report()

    async def report(self) -> None:
        snapshot = self._stats.snapshot()

        await self._logger.log(
            RelayStats(
                message=(
                    f"Stats | in: {snapshot.inbound_packets} packets ({snapshot.inbound_bytes} bytes) | "
                    f"out: {snapshot.outbound_sends} sends | failed: {snapshot.failures}"
                ),
                inbound_packets=snapshot.inbound_packets,
                inbound_bytes=snapshot.inbound_bytes,
                outbound_sends=snapshot.outbound_sends,
                failures=snapshot.failures,
            )
        )

    async def stop(self) -> None:
        """Waits for the reporting task after the shutdown signal is raised."""
        if self._task is None:
            return

        self._shutdown.cancel()

        try:
            await self._task

        except asyncio.CancelledError:
            pass

        self._task = None
