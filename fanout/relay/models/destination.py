import ipaddress
import socket
from dataclasses import dataclass, field

from fanout.relay.errors import UnsupportedAddressFamilyError


SUPPORTED_FAMILIES = (
    socket.AF_INET,
    socket.AF_INET6,
)


def address_family(address: str) -> socket.AddressFamily:
    try:
        parsed = ipaddress.ip_address(address)

    except ValueError:
        raise UnsupportedAddressFamilyError(
            f"Address '{address}' is not an IPv4 or IPv6 address."
        )

    if parsed.version == 6:
        return socket.AF_INET6

    return socket.AF_INET


@dataclass(frozen=True, slots=True)
class Destination:
    """A labelled, already-resolved forwarding endpoint."""

    label: str
    address: str
    port: int
    family: socket.AddressFamily = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "family", address_family(self.address))

    @property
    def endpoint(self) -> tuple[str, int]:
        return (self.address, self.port)

    @property
    def endpoint_key(self) -> str:
        return f"{self.address}:{self.port}"
