from .config import (
    LoggingConfig as LoggingConfig,
    LoggingSettings as LoggingSettings,
    LogOutput as LogOutput,
)
from .models import (
    Entry as Entry,
    LogLevel as LogLevel,
    LogLevelName as LogLevelName,
    LogRecord as LogRecord,
)
from .streams import (
    Logger as Logger,
    LoggerStream as LoggerStream,
)
