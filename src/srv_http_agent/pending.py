"""Buffered view of an outgoing HTTP/1.1 request head."""
from typing import List, Optional
import h11
import httpx


class PendingRequest:
    """
    Wraps an httpx request together with its pending-write buffer.

    ``output`` holds byte chunks queued for the socket. Once the head has
    been queued, the first chunk starts with the serialized header block
    terminated by a blank line; later chunks are body bytes.
    """

    def __init__(self, request: httpx.Request):
        self.request = request
        self.output: List[bytes] = []
        self._header: Optional[bytes] = None

    @property
    def header(self) -> bytes:
        """Serialized header block, rendered on first access."""
        if self._header is None:
            self._header = self.render_header()
        return self._header

    def set_header(self, name: str, value: str):
        self.request.headers[name] = value

    def invalidate_header(self):
        """Drop the cached header so the next access re-renders it."""
        self._header = None

    def render_header(self) -> bytes:
        """Serialize the request line and headers from current state."""
        event = h11.Request(
            method=self.request.method,
            target=self.request.url.raw_path,
            headers=list(self.request.headers.raw),
        )
        return h11.Connection(our_role=h11.CLIENT).send(event)

    def queue_header(self):
        """Queue the header block for writing if nothing is queued yet."""
        if not self.output:
            self.output.append(self.header)

    def write(self, data: bytes):
        """Queue body bytes; the first write carries the header with it."""
        if not self.output:
            self.output.append(self.header + data)
        else:
            self.output.append(data)
