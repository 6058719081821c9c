"""SRV record based request routing for httpx."""
from .agent import ServiceAgent, TransportDispatcher, normalize_service
from .cache import SrvCache
from .errors import ConfigurationError, SrvLookupError
from .lookup import DohSrvLookup, UdpSrvLookup
from .pending import PendingRequest
from .records import ServiceRecord
from .redirect import retarget
from .resolver import SrvResolver
from .selection import order_records, select_record

__all__ = [
    'ConfigurationError',
    'DohSrvLookup',
    'PendingRequest',
    'ServiceAgent',
    'ServiceRecord',
    'SrvCache',
    'SrvLookupError',
    'SrvResolver',
    'TransportDispatcher',
    'UdpSrvLookup',
    'normalize_service',
    'order_records',
    'retarget',
    'select_record',
]
