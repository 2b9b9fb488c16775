import contextvars
from dataclasses import dataclass, replace
from typing import Literal

from fanout.logging.models import LogLevel, LogLevelName
from .stream_type import StreamType


LogOutput = Literal['stdout', 'stderr']


@dataclass(frozen=True, slots=True)
class LoggingSettings:
    level: LogLevel = LogLevel.INFO
    output: StreamType = StreamType.STDOUT
    path: str | None = None
    disabled: frozenset[str] = frozenset()


_logging_settings: contextvars.ContextVar[LoggingSettings] = contextvars.ContextVar(
    "_logging_settings",
    default=LoggingSettings(),
)


class LoggingConfig:
    """
    View over the active logging settings. Settings live in a context
    variable, so tasks inherit them and changes made inside a task stay
    in that task.
    """

    def __init__(self) -> None:
        self._settings = _logging_settings

    @property
    def settings(self) -> LoggingSettings:
        return self._settings.get()

    def update(
        self,
        log_path: str | None = None,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
    ):
        changes = {}

        if log_path:
            changes["path"] = log_path

        if log_level:
            changes["level"] = LogLevel.to_level(log_level)

        if log_output:
            changes["output"] = StreamType(log_output)

        if changes:
            self._settings.set(
                replace(self.settings, **changes)
            )

    def disable(self, logger_name: str):
        settings = self.settings

        if logger_name not in settings.disabled:
            self._settings.set(
                replace(settings, disabled=settings.disabled | {logger_name})
            )

    def enabled(self, logger_name: str, log_level: LogLevel) -> bool:
        settings = self.settings
        return logger_name not in settings.disabled and log_level.at_least(settings.level)

    def is_error(self, log_level: LogLevel) -> bool:
        return log_level.at_least(LogLevel.ERROR)

    @property
    def level(self) -> LogLevel:
        return self.settings.level

    @property
    def output(self) -> StreamType:
        return self.settings.output

    @property
    def path(self) -> str | None:
        return self.settings.path
