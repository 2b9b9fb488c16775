import asyncio


class ShutdownSignal:
    """
    Cancellation token shared by the forward loop and the stats reporter.
    ``cancel()`` may be called any number of times; only the first call
    has an effect.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """Returns True only for the call that raised the signal."""
        if self._event.is_set():
            return False

        self._event.set()
        return True

    async def wait(self) -> None:
        await self._event.wait()
