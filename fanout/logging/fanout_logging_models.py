from .models import Entry, LogLevel


class RelayInfo(Entry, kw_only=True):
    listen_host: str
    listen_port: int
    level: LogLevel = LogLevel.INFO

class RelayError(Entry, kw_only=True):
    listen_host: str
    listen_port: int
    level: LogLevel = LogLevel.ERROR

class RelayStartup(Entry, kw_only=True):
    config_path: str
    listen_host: str
    listen_port: int
    targets: list[str]
    stats_interval: int
    level: LogLevel = LogLevel.INFO

class RelayNotice(Entry, kw_only=True):
    """Operator-facing notices that are not tied to a bound listener."""
    level: LogLevel = LogLevel.INFO

class StartupFailed(Entry, kw_only=True):
    error: str
    level: LogLevel = LogLevel.ERROR

class ForwardError(Entry, kw_only=True):
    target: str
    target_host: str
    target_port: int
    error: str
    level: LogLevel = LogLevel.ERROR

class RelayStats(Entry, kw_only=True):
    inbound_packets: int
    inbound_bytes: int
    outbound_sends: int
    failures: int
    level: LogLevel = LogLevel.INFO
