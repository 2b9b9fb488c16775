import asyncio


class LoggerProtocol(asyncio.streams.FlowControlMixin, asyncio.Protocol):
    """
    Write-only protocol backing the stdout/stderr stream writers. Flow
    control comes from asyncio so ``StreamWriter.drain()`` pauses when
    the pipe buffer is full.
    """

    def __init__(self) -> None:
        super().__init__()
        self.transport: asyncio.WriteTransport | None = None

    def connection_made(self, transport: asyncio.WriteTransport) -> None:
        self.transport = transport
