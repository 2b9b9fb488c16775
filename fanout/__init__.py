"""
UDP fan-out relay.

Receives datagrams on one local port and replicates each one, unmodified,
to every configured destination endpoint.
"""
