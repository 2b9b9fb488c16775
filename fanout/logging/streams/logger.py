import asyncio
from typing import Dict

from fanout.logging.models import Entry, LogRecord

from .logger_stream import LoggerStream


DEFAULT_STREAM = "default"


class Logger:
    """
    Routes entries to named LoggerStreams, creating each stream on first
    use. Records are attributed to the code that called ``log()`` or
    ``batch()``.

    Usage:
        logger = Logger()

        try:
            await logger.log(RelayNotice(message="Created default config: forwarder.json"))

        finally:
            await logger.close()
    """

    def __init__(self) -> None:
        self._streams: Dict[str, LoggerStream] = {}

    def __getitem__(self, name: str) -> LoggerStream:
        stream = self._streams.get(name)

        if stream is None:
            stream = LoggerStream(name=name)
            self._streams[name] = stream

        return stream

    def configure(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ) -> LoggerStream:
        stream = self[name or DEFAULT_STREAM]

        if template:
            stream.template = template

        if path:
            stream.path = path

        return stream

    async def log(
        self,
        entry: Entry,
        name: str | None = None,
        template: str | None = None,
    ):
        await self[name or DEFAULT_STREAM].log(
            LogRecord.capture(entry, depth=1),
            template=template,
        )

    async def batch(
        self,
        *entries: Entry,
        name: str | None = None,
        template: str | None = None,
    ):
        stream = self[name or DEFAULT_STREAM]

        # Sequential so multi-line banners keep their order.
        for entry in entries:
            await stream.log(
                LogRecord.capture(entry, depth=1),
                template=template,
            )

    async def close(self):
        if len(self._streams) > 0:
            await asyncio.gather(*[
                stream.close() for stream in self._streams.values()
            ])
