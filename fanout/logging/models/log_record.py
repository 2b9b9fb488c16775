from __future__ import annotations

import datetime
import sys
import threading
from typing import Any, Dict

import msgspec

from .entry import Entry


def utc_timestamp() -> str:
    return datetime.datetime.now(datetime.UTC).isoformat()


class LogRecord(msgspec.Struct, kw_only=True):
    """An entry plus where and when it was logged. Encoded as one JSON line."""

    entry: Entry
    filename: str
    function_name: str
    line_number: int
    thread_id: int = msgspec.field(default_factory=threading.get_native_id)
    timestamp: str = msgspec.field(default_factory=utc_timestamp)

    @classmethod
    def capture(cls, entry: Entry, depth: int = 1) -> LogRecord:
        """
        Attribute ``entry`` to the frame ``depth`` levels above the caller
        of ``capture()``. A depth of one names whoever called the logging
        method that is capturing.
        """
        frame = sys._getframe(depth + 1)
        code = frame.f_code

        return cls(
            entry=entry,
            filename=code.co_filename,
            function_name=code.co_name,
            line_number=frame.f_lineno,
        )

    def context(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "function_name": self.function_name,
            "line_number": self.line_number,
            "thread_id": self.thread_id,
            "timestamp": self.timestamp,
        }
