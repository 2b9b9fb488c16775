from .errors import (
    ReceiveError as ReceiveError,
    RelayConfigError as RelayConfigError,
    UnsupportedAddressFamilyError as UnsupportedAddressFamilyError,
)
from .forwarder import UDPForwarder as UDPForwarder
from .gate import ErrorLogGate as ErrorLogGate
from .models import (
    Destination as Destination,
    ForwardStatsSnapshot as ForwardStatsSnapshot,
)
from .reporting import StatsReporter as StatsReporter
from .senders import SenderPool as SenderPool
from .server import (
    ForwardLoop as ForwardLoop,
    ShutdownSignal as ShutdownSignal,
    create_listener as create_listener,
)
from .stats import ForwardStats as ForwardStats
