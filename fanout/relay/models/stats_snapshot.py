from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ForwardStatsSnapshot:
    """
    Point-in-time copy of the relay counters. Each field is read on its
    own, so the four values may come from slightly different instants.
    """

    inbound_packets: int
    inbound_bytes: int
    outbound_sends: int
    failures: int
