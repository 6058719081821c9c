"""UDP protocol used for a single SRV query."""
import asyncio
from .config import logger


class SrvQueryProtocol(asyncio.DatagramProtocol):
    """Sends one DNS query and resolves a future with the matching reply."""

    def __init__(self, query: bytes, query_id: int, future: asyncio.Future):
        self.query = query
        self.query_id = query_id
        self.future = future
        self.transport = None

    def connection_made(self, transport):
        """Called when the socket is ready; the query goes out immediately."""
        self.transport = transport
        transport.sendto(self.query)

    def datagram_received(self, data, addr):
        """Called when a UDP datagram is received."""
        if self.future.done():
            return
        if len(data) < 2 or int.from_bytes(data[:2], 'big') != self.query_id:
            # Late reply to an earlier query or spoofed packet
            logger.debug(f"Ignoring DNS reply with unexpected id from {addr}")
            return
        self.future.set_result(data)

    def error_received(self, exc):
        """Called on ICMP errors such as port unreachable."""
        if not self.future.done():
            self.future.set_exception(exc)

    def connection_lost(self, exc):
        if exc is not None and not self.future.done():
            self.future.set_exception(exc)
