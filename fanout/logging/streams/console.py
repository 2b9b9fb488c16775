import asyncio
import io
import os
import sys

from fanout.logging.config import StreamType

from .protocol import LoggerProtocol


class Console:
    """
    One console output (stdout or stderr) for a LoggerStream.

    The process descriptor is duplicated so closing the console never
    closes the interpreter's own stream. Pipes and terminals are written
    through an asyncio stream writer; regular files, and streams without
    a descriptor (such as captured test output), are written from the
    default executor.
    """

    def __init__(self, stream_type: StreamType) -> None:
        self.stream_type = stream_type

        self._stream: io.TextIOBase | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._owns_stream = False

    @property
    def source(self) -> io.TextIOBase:
        if self.stream_type == StreamType.STDERR:
            return sys.stderr

        return sys.stdout

    async def open(self, loop: asyncio.AbstractEventLoop) -> None:
        source = self.source

        try:
            fileno = source.fileno()

        except (AttributeError, OSError, ValueError):
            self._stream = source
            return

        duplicate = await loop.run_in_executor(None, os.dup, fileno)

        self._stream = os.fdopen(duplicate, mode="w", encoding="utf-8")
        self._owns_stream = True

        try:
            transport, protocol = await loop.connect_write_pipe(
                LoggerProtocol,
                self._stream,
            )

        except (ValueError, OSError):
            return

        self._writer = asyncio.StreamWriter(transport, protocol, None, loop)

    async def write(
        self,
        loop: asyncio.AbstractEventLoop,
        line: str,
    ) -> None:
        if self._writer is None:
            await loop.run_in_executor(None, self._write_line, line)

        elif self._writer.is_closing() is False:
            self._writer.write(line.encode() + b"\n")
            await self._writer.drain()

    def _write_line(self, line: str) -> None:
        if self._stream is not None and self._stream.closed is False:
            self._stream.write(line + "\n")
            self._stream.flush()

    async def close(self) -> None:
        if self._writer is not None:
            # The transport owns the duplicated stream and closes it.
            if self._writer.is_closing() is False:
                await self._writer.drain()
                self._writer.close()

        elif self._owns_stream and self._stream.closed is False:
            self._stream.close()

        self._writer = None
        self._stream = None
        self._owns_stream = False
