"""Entry point for srv-http-agent."""
import asyncio
import sys
import httpx
from .agent import ServiceAgent
from .config import logger, DEFAULT_SERVICE

__all__ = ['main']

USAGE = "usage: srv-http-agent URL [SERVICE]"


async def fetch(url: str, service: str) -> int:
    """GET a URL through the agent and log where it went."""
    agent = ServiceAgent(service=service)
    async with httpx.AsyncClient(transport=agent) as client:
        try:
            resp = await client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e}")
            return 1
        logger.info(f"{resp.status_code} {resp.reason_phrase} via Host: {resp.request.headers.get('host')}")
        agent.metrics.log_stats()
    return 0 if resp.is_success else 1


def main():
    """Main entry point for the srv-http-agent console script."""
    args = sys.argv[1:]
    if not 1 <= len(args) <= 2:
        print(USAGE, file=sys.stderr)
        sys.exit(2)
    service = args[1] if len(args) == 2 else DEFAULT_SERVICE
    try:
        sys.exit(asyncio.run(fetch(args[0], service)))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
