"""SRV lookups against a nameserver over UDP or DNS-over-HTTPS."""
import asyncio
from typing import List, Optional, Tuple
import httpx
from dnslib import DNSRecord, QTYPE, RCODE
from dnslib.dns import DNSError
from dnslib.label import DNSLabelError
from .config import logger, NAMESERVER, NAMESERVER_PORT, LOOKUP_TIMEOUT, DOH_URL
from .errors import SrvLookupError
from .protocol import SrvQueryProtocol
from .records import ServiceRecord


def build_srv_query(name: str) -> DNSRecord:
    """Build an SRV question for a query name."""
    return DNSRecord.question(name, "SRV")


def encode_srv_query(name: str, query_id: Optional[int] = None) -> Tuple[bytes, int]:
    """
    Build and pack an SRV question.

    Raises:
        SrvLookupError: If the name cannot be encoded, e.g. it is too long
    """
    try:
        query = build_srv_query(name)
        if query_id is not None:
            query.header.id = query_id
        return query.pack(), query.header.id
    except (DNSLabelError, DNSError) as e:
        raise SrvLookupError(name, f"cannot encode query: {e}") from e


def parse_srv_response(name: str, data: bytes) -> List[ServiceRecord]:
    """
    Extract the SRV answers from a raw DNS reply.

    Args:
        name: The query name, used in error messages
        data: Raw DNS reply bytes

    Returns:
        The SRV records in answer order, possibly empty

    Raises:
        SrvLookupError: If the reply is malformed or carries an error rcode
    """
    try:
        reply = DNSRecord.parse(data)
    except DNSError as e:
        raise SrvLookupError(name, f"malformed reply: {e}") from e

    rcode = reply.header.rcode
    if rcode != RCODE.NOERROR:
        raise SrvLookupError(name, RCODE.forward.get(rcode, str(rcode)))

    if reply.header.tc:
        logger.warning(f"Truncated SRV reply for {name}, using partial answer")

    records = []
    for rr in reply.rr:
        # Skip CNAME chains and anything else that is not the SRV answer
        if rr.rtype != QTYPE.SRV:
            continue
        # A target of "." means the service is decidedly not available
        if str(rr.rdata.target) in ('.', ''):
            continue
        records.append(ServiceRecord.from_rr(rr))
    return records


class UdpSrvLookup:
    """Query a nameserver directly over UDP."""

    def __init__(
        self,
        nameserver: str = NAMESERVER,
        port: int = NAMESERVER_PORT,
        timeout: float = LOOKUP_TIMEOUT,
    ):
        self.nameserver = nameserver
        self.port = port
        self.timeout = timeout

    async def __call__(self, name: str) -> List[ServiceRecord]:
        data, query_id = encode_srv_query(name)
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: SrvQueryProtocol(data, query_id, future),
                remote_addr=(self.nameserver, self.port)
            )
        except OSError as e:
            raise SrvLookupError(name, str(e)) from e

        try:
            reply = await asyncio.wait_for(future, self.timeout)
        except asyncio.TimeoutError as e:
            raise SrvLookupError(name, f"no reply from {self.nameserver} within {self.timeout}s") from e
        except OSError as e:
            raise SrvLookupError(name, str(e)) from e
        finally:
            transport.close()

        return parse_srv_response(name, reply)


class DohSrvLookup:
    """Query a DNS-over-HTTPS endpoint with wire-format messages."""

    def __init__(
        self,
        url: str = DOH_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = LOOKUP_TIMEOUT,
    ):
        if not url:
            raise ValueError("A DoH URL must be provided")
        self.url = url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __call__(self, name: str) -> List[ServiceRecord]:
        headers = {
            "Content-Type": "application/dns-message",
            "Accept": "application/dns-message"
        }
        # RFC 8484 asks for id 0 so replies stay cacheable
        data, _ = encode_srv_query(name, query_id=0)

        if self._client is None:
            self._client = httpx.AsyncClient()

        try:
            resp = await self._client.post(self.url, content=data, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise SrvLookupError(name, f"DoH request to {self.url} failed: {e}") from e

        return parse_srv_response(name, resp.content)

    async def aclose(self):
        """Close the HTTP client if this lookup created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None


def default_lookup():
    """Pick the lookup configured through the environment."""
    if DOH_URL:
        return DohSrvLookup(DOH_URL)
    return UdpSrvLookup()
