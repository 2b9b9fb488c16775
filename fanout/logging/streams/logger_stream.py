import asyncio
import io
import pathlib
import sys
from typing import Dict

import msgspec

from fanout.logging.config import LoggingConfig, StreamType
from fanout.logging.models import Entry, LogRecord

from .console import Console


DEFAULT_TEMPLATE = "{timestamp} - {level} - {message}"


class LoggerStream:
    """
    Filters, formats and writes log records for one logger name.

    Records at ERROR and above go to stderr, the rest to the configured
    output. When a log path is set, here or in ``LoggingConfig``, every
    written record is also appended to that file as a JSON line.
    """

    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ) -> None:
        if name is None:
            name = "default"

        self.name = name
        self.template = template
        self.path = path

        self._config = LoggingConfig()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._open_lock = asyncio.Lock()
        self._file_lock = asyncio.Lock()
        self._consoles: Dict[StreamType, Console] = {}
        self._logfiles: Dict[str, io.BufferedWriter] = {}
        self._initialized = False

    @property
    def logfile_path(self) -> str | None:
        return self.path or self._config.path

    async def initialize(self) -> None:
        async with self._open_lock:
            if self._initialized:
                return

            self._loop = asyncio.get_running_loop()

            for stream_type in StreamType:
                console = Console(stream_type)
                await console.open(self._loop)

                self._consoles[stream_type] = console

            self._initialized = True

    async def log(
        self,
        entry_or_record: Entry | LogRecord,
        template: str | None = None,
    ) -> None:
        if isinstance(entry_or_record, LogRecord):
            record = entry_or_record

        else:
            record = LogRecord.capture(entry_or_record, depth=1)

        entry = record.entry
        if self._config.enabled(self.name, entry.level) is False:
            return

        if self._initialized is False:
            await self.initialize()

        line = entry.render(
            template or self.template or DEFAULT_TEMPLATE,
            **record.context(),
        )

        stream_type = self._config.output
        if self._config.is_error(entry.level):
            stream_type = StreamType.STDERR

        try:
            await self._consoles[stream_type].write(self._loop, line)

        except (OSError, RuntimeError, ValueError) as err:
            await self._loop.run_in_executor(
                None,
                write_fallback,
                f"{record.timestamp} - ERROR - {self.name} could not write to {stream_type.value}: {err} - {line}",
            )

        if logfile_path := self.logfile_path:
            async with self._file_lock:
                await self._loop.run_in_executor(
                    None,
                    self._append_record,
                    record,
                    logfile_path,
                )

    def _append_record(
        self,
        record: LogRecord,
        logfile_path: str,
    ) -> None:
        logfile = self._logfiles.get(logfile_path)

        if logfile is None or logfile.closed:
            resolved_path = pathlib.Path(logfile_path).absolute()
            resolved_path.parent.mkdir(parents=True, exist_ok=True)

            logfile = open(resolved_path, "ab")
            self._logfiles[logfile_path] = logfile

        logfile.write(msgspec.json.encode(record) + b"\n")
        logfile.flush()

    def _close_logfiles(self) -> None:
        for logfile in self._logfiles.values():
            if logfile.closed is False:
                logfile.close()

        self._logfiles.clear()

    async def close(self) -> None:
        if self._initialized is False:
            return

        for console in self._consoles.values():
            await console.close()

        async with self._file_lock:
            await self._loop.run_in_executor(None, self._close_logfiles)

        self._consoles.clear()
        self._initialized = False


def write_fallback(line: str) -> None:
    if sys.stderr is not None and sys.stderr.closed is False:
        sys.stderr.write(line + "\n")
        sys.stderr.flush()
