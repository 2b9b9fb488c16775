from .forward_loop import (
    ForwardLoop as ForwardLoop,
    MAX_DATAGRAM_SIZE as MAX_DATAGRAM_SIZE,
    validate_destinations as validate_destinations,
    validate_receive_buffer_size as validate_receive_buffer_size,
)
from .listener import create_listener as create_listener
from .shutdown_signal import ShutdownSignal as ShutdownSignal
