"""
Concurrent relay counters.

The forward loop is the only writer on the event loop, but the counters
may be incremented from worker threads as well, so every update takes the
lock that guards the counter it touches. Reads for a snapshot are single
attribute loads and need no lock.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field

from fanout.relay.models import ForwardStatsSnapshot


@dataclass(slots=True)
class ForwardStats:

    inbound_packets: int = 0
    inbound_bytes: int = 0
    outbound_sends: int = 0
    failures: int = 0
    _inbound_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _outbound_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _failure_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_inbound(self, payload_size: int) -> None:
        with self._inbound_lock:
            self.inbound_packets += 1
            self.inbound_bytes += payload_size

    def record_forward(self) -> None:
        with self._outbound_lock:
            self.outbound_sends += 1

    def record_failure(self) -> None:
        with self._failure_lock:
            self.failures += 1

    def snapshot(self) -> ForwardStatsSnapshot:
        return ForwardStatsSnapshot(
            inbound_packets=self.inbound_packets,
            inbound_bytes=self.inbound_bytes,
            outbound_sends=self.outbound_sends,
            failures=self.failures,
        )
