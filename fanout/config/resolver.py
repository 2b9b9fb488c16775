import asyncio
import ipaddress
import socket
from typing import Sequence

from fanout.logging import Logger
from fanout.logging.fanout_logging_models import RelayNotice
from fanout.relay.models import Destination

from .errors import ConfigError
from .forwarder_config import ForwardTarget


async def resolve_address(
    host: str,
    prefer_ipv4: bool = True,
) -> str:
    """
    Resolve ``host`` to a single IP address string. ``*`` means the IPv4
    wildcard and IP literals are returned unchanged.
    """
    if host == "*":
        return "0.0.0.0"

    try:
        return str(ipaddress.ip_address(host))

    except ValueError:
        pass

    loop = asyncio.get_event_loop()

    try:
        address_info = await loop.getaddrinfo(
            host,
            None,
            type=socket.SOCK_DGRAM,
        )

    except socket.gaierror as err:
        raise ConfigError(f"Host '{host}' could not be resolved.") from err

    addresses = [
        (family, sockaddr[0]) for family, _, _, _, sockaddr in address_info
        if family in (socket.AF_INET, socket.AF_INET6)
    ]

    if len(addresses) == 0:
        raise ConfigError(f"Host '{host}' could not be resolved.")

    if prefer_ipv4:
        for family, address in addresses:
            if family == socket.AF_INET:
                return address

    for family, address in addresses:
        if family == socket.AF_INET6:
            return address

    return addresses[0][1]


async def resolve_targets(
    targets: Sequence[ForwardTarget],
    logger: Logger | None = None,
) -> list[Destination]:
    if logger is None:
        logger = Logger()

    resolved: list[Destination] = []
    seen: set[str] = set()

    for target in targets:
        address = await resolve_address(target.host, prefer_ipv4=True)
        destination = Destination(
            label=target.label,
            address=address,
            port=target.port,
        )

        dedupe_key = destination.endpoint_key.lower()
        if dedupe_key in seen:
            await logger.log(
                RelayNotice(
                    message=f"Skipping duplicate target endpoint: {destination.endpoint_key}",
                )
            )

            continue

        seen.add(dedupe_key)
        resolved.append(destination)

    if len(resolved) == 0:
        raise ConfigError("No unique target endpoints were resolved.")

    return resolved
