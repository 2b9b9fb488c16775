import socket

from fanout.relay.models import address_family


def create_listener(
    listen_address: str,
    listen_port: int,
) -> socket.socket:
    """
    Bind the inbound UDP socket. The family follows the listen address,
    so ``::`` listens on IPv6 and ``0.0.0.0`` on IPv4.
    """
    family = address_family(listen_address)

    listener = socket.socket(family, socket.SOCK_DGRAM, socket.IPPROTO_UDP)

    try:
        listener.bind((listen_address, listen_port))

    except OSError:
        listener.close()
        raise

    listener.setblocking(False)

    return listener
