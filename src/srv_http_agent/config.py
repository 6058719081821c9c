"""Configuration module for srv-http-agent."""
import os
import logging


def _first_nameserver(path='/etc/resolv.conf'):
    try:
        with open(path) as handle:
            for line in handle:
                parts = line.split()
                if len(parts) >= 2 and parts[0] == 'nameserver':
                    return parts[1]
    except OSError:
        pass
    return '127.0.0.1'


# --- Configuration ---
DEFAULT_SERVICE = os.getenv('SRV_SERVICE', '_http._tcp.')
CACHE_ENABLED = os.getenv('SRV_CACHE_ENABLED', 'true').lower() == 'true'
CACHE_TTL = float(os.getenv('SRV_CACHE_TTL', 600))

NAMESERVER = os.getenv('SRV_NAMESERVER') or _first_nameserver()
NAMESERVER_PORT = int(os.getenv('SRV_NAMESERVER_PORT', 53))
LOOKUP_TIMEOUT = float(os.getenv('SRV_LOOKUP_TIMEOUT', 5.0))

# When set, SRV lookups go over DNS-over-HTTPS instead of plain UDP
DOH_URL = os.getenv('SRV_DOH_URL', '').strip() or None

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

# --- Logging Setup ---
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger("srv-agent")
