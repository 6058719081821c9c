"""SRV-aware connection agent for httpx."""
import random
from typing import Awaitable, Callable, Optional
import h11
import httpx
from .cache import SrvCache
from .config import logger, DEFAULT_SERVICE, CACHE_TTL
from .errors import ConfigurationError, SrvLookupError
from .metrics import AgentMetrics
from .pending import PendingRequest
from .redirect import retarget
from .resolver import SrvResolver
from .selection import select_record

DEFAULT_PORTS = {"http": 80, "https": 443}

Dispatch = Callable[[PendingRequest, str, int, Optional[str]], Awaitable[httpx.Response]]


def normalize_service(service) -> str:
    """Validate a service prefix and make sure it ends with a dot."""
    if not isinstance(service, str):
        raise ConfigurationError(f"Service option must be a string, got {type(service).__name__}")
    if service and not service.endswith('.'):
        service = service + '.'
    return service


class TransportDispatcher:
    """
    Sends requests to an explicit host and port.

    Connections are handled by ``httpx.AsyncHTTPTransport``; one transport
    is kept per local address so each keeps its own pool. A fixed
    ``transport`` replaces that and serves every local address.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None, **transport_options):
        self.transport = transport
        self.transport_options = transport_options
        self._transports = {}

    def transport_for(self, local_address: Optional[str]) -> httpx.AsyncBaseTransport:
        if self.transport is not None:
            return self.transport
        transport = self._transports.get(local_address)
        if transport is None:
            transport = httpx.AsyncHTTPTransport(local_address=local_address, **self.transport_options)
            self._transports[local_address] = transport
        return transport

    async def __call__(
        self,
        pending: PendingRequest,
        host: str,
        port: int,
        local_address: Optional[str] = None,
    ) -> httpx.Response:
        request = pending.request
        original_url = request.url
        original_port = original_url.port or DEFAULT_PORTS.get(original_url.scheme)

        if (host, port) != (original_url.host, original_port):
            request.url = original_url.copy_with(host=host, port=port)

        try:
            response = await self.transport_for(local_address).handle_async_request(request)
        finally:
            # Callers keep seeing the URL they asked for
            request.url = original_url

        response.request = request
        return response

    async def aclose(self):
        for transport in self._transports.values():
            await transport.aclose()
        self._transports = {}
        if self.transport is not None:
            await self.transport.aclose()


class ServiceAgent(httpx.AsyncBaseTransport):
    """
    Transport that routes each request through an SRV lookup.

    The query name is the service prefix followed by the request host. When
    the lookup yields records, the most preferred one (RFC 2782 priority and
    weight) replaces the connection target and the Host header. Lookup
    failures and empty answers leave the request untouched.

    Example:
        async with httpx.AsyncClient(transport=ServiceAgent(service="_api._tcp")) as client:
            resp = await client.get("http://example.com/status")
    """

    def __init__(
        self,
        service: str = DEFAULT_SERVICE,
        resolver: Optional[SrvResolver] = None,
        dispatch: Optional[Dispatch] = None,
        local_address: Optional[str] = None,
        cache_ttl: float = CACHE_TTL,
        rng: Optional[random.Random] = None,
        metrics: Optional[AgentMetrics] = None,
        **transport_options,
    ):
        """
        Initialize the agent.

        Args:
            service: SRV prefix such as ``_http._tcp.``; may be empty
            resolver: Resolver to use, a cached UDP/DoH resolver when omitted
            dispatch: Callable taking (pending, host, port, local_address)
            local_address: Local address to bind outgoing connections to
            cache_ttl: Freshness interval for the default resolver's cache
            rng: Random source for weighted selection
            metrics: Metrics tracker shared with the default resolver
            **transport_options: Passed to httpx.AsyncHTTPTransport
        """
        self.service = normalize_service(service)
        if dispatch is not None and transport_options:
            raise ConfigurationError("Transport options cannot be combined with a custom dispatch")

        self.metrics = metrics or AgentMetrics()
        if resolver is None:
            resolver = SrvResolver(cache=SrvCache(cache_ttl), metrics=self.metrics)
        elif resolver.metrics is None:
            resolver.metrics = self.metrics
        self.resolver = resolver
        self.dispatch = dispatch or TransportDispatcher(**transport_options)
        self.local_address = local_address
        self.rng = rng

    def query_name(self, host: str) -> str:
        return self.service + host

    async def add_request(
        self,
        pending: PendingRequest,
        host: str,
        port: int,
        local_address: Optional[str] = None,
    ) -> httpx.Response:
        """
        Resolve, retarget and dispatch one request.

        Mirrors the dispatch signature: if no SRV target is found the
        request goes out with exactly the host, port and local address given.
        """
        name = self.query_name(host)

        try:
            records = await self.resolver.resolve(name)
        except SrvLookupError as e:
            logger.warning(f"{e}; using {host}:{port}")
            self.metrics.record_fallback()
            return await self.dispatch(pending, host, port, local_address)

        selected = select_record(records, self.rng)
        if selected is None:
            logger.debug(f"No SRV records for {name}; using {host}:{port}")
            self.metrics.record_fallback(empty=True)
            return await self.dispatch(pending, host, port, local_address)

        original_host = pending.request.headers.get("Host")
        try:
            target_host, target_port = retarget(pending, selected, port)
        except h11.LocalProtocolError as e:
            logger.warning(f"Cannot rewrite queued header for {selected.target}: {e}; using {host}:{port}")
            if original_host is not None:
                pending.set_header("Host", original_host)
            pending.invalidate_header()
            self.metrics.record_fallback()
            return await self.dispatch(pending, host, port, local_address)

        logger.debug(f"[SRV] {name} -> {target_host}:{target_port}")
        self.metrics.record_redirect()
        return await self.dispatch(pending, target_host, target_port, local_address)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Handle an async HTTP request."""
        url = request.url
        port = url.port or DEFAULT_PORTS.get(url.scheme, 80)
        return await self.add_request(PendingRequest(request), url.host, port, self.local_address)

    async def aclose(self) -> None:
        """Close the transport."""
        close = getattr(self.dispatch, 'aclose', None)
        if close is not None:
            await close()
        await self.resolver.aclose()
