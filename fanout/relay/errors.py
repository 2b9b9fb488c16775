class RelayConfigError(Exception):
    """Invalid input handed to the relay core."""


class UnsupportedAddressFamilyError(RelayConfigError):
    pass


class ReceiveError(Exception):
    """The inbound socket failed while waiting for a datagram."""
