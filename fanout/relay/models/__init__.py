from .destination import (
    Destination as Destination,
    SUPPORTED_FAMILIES as SUPPORTED_FAMILIES,
    address_family as address_family,
)
from .stats_snapshot import ForwardStatsSnapshot as ForwardStatsSnapshot
