from __future__ import annotations
from pydantic import BaseModel, StrictStr, StrictInt, field_validator
from typing import Callable, Dict, Literal, Union

from fanout.relay.server import MAX_DATAGRAM_SIZE

from .time_parser import TimeParser

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    FANOUT_CONFIG_PATH: StrictStr = "forwarder.json"
    FANOUT_ERROR_LOG_INTERVAL: StrictStr = "5s"
    FANOUT_RECEIVE_BUFFER_SIZE: StrictInt = 65535
    FANOUT_LOG_LEVEL: Literal[
        "trace", "debug", "info", "warn", "error", "critical", "fatal"
    ] = "info"
    FANOUT_LOG_OUTPUT: Literal["stdout", "stderr"] = "stdout"
    FANOUT_LOG_PATH: StrictStr | None = None

    @field_validator("FANOUT_ERROR_LOG_INTERVAL")
    @classmethod
    def check_error_log_interval(cls, interval: str) -> str:
        TimeParser(interval)
        return interval

    @field_validator("FANOUT_RECEIVE_BUFFER_SIZE")
    @classmethod
    def check_receive_buffer_size(cls, size: int) -> int:
        if size < MAX_DATAGRAM_SIZE:
            raise ValueError(
                f"FANOUT_RECEIVE_BUFFER_SIZE must be at least {MAX_DATAGRAM_SIZE} bytes."
            )

        return size

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "FANOUT_CONFIG_PATH": str,
            "FANOUT_ERROR_LOG_INTERVAL": str,
            "FANOUT_RECEIVE_BUFFER_SIZE": int,
            "FANOUT_LOG_LEVEL": str,
            "FANOUT_LOG_OUTPUT": str,
            "FANOUT_LOG_PATH": str,
        }

    @property
    def error_log_interval(self) -> float:
        return TimeParser(self.FANOUT_ERROR_LOG_INTERVAL).time

    def get_logging_config(self) -> dict:
        """Keyword arguments for ``LoggingConfig.update()``."""
        return {
            'log_level': self.FANOUT_LOG_LEVEL,
            'log_output': self.FANOUT_LOG_OUTPUT,
            'log_path': self.FANOUT_LOG_PATH,
        }
