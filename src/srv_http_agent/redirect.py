"""Retargeting of requests whose head may already be queued."""
from typing import Tuple
from .config import logger
from .pending import PendingRequest
from .records import ServiceRecord

HEADER_TERMINATOR = b"\r\n\r\n"


def effective_target(selected: ServiceRecord, fallback_port: int) -> Tuple[str, int]:
    """Host and port to connect to; SRV port 0 keeps the caller's port."""
    return selected.target, selected.port or fallback_port


def retarget(pending: PendingRequest, selected: ServiceRecord, fallback_port: int) -> Tuple[str, int]:
    """
    Point a request at the selected SRV target.

    Rewrites the Host header, re-renders the header block and, when a head
    is already queued, swaps it for the new one. Bytes after the old header
    terminator are kept as they are. Running this twice with the same
    record gives the same result.

    Args:
        pending: The request and its pending-write buffer
        selected: The SRV record chosen for this request
        fallback_port: Port the caller asked for, used when the record's port is 0

    Returns:
        The effective (host, port)
    """
    host, port = effective_target(selected, fallback_port)

    pending.set_header("Host", f"{host}:{port}")
    pending.invalidate_header()

    # Only a queued head needs re-rendering here; otherwise it renders on demand
    if pending.output:
        header = pending.header
        first = pending.output[0]
        end = first.find(HEADER_TERMINATOR)
        if end == -1:
            logger.warning("Queued chunk has no header terminator, replacing it whole")
            pending.output[0] = header
        else:
            pending.output[0] = header + first[end + len(HEADER_TERMINATOR):]

    return host, port
