"""Priority/weight ordering of SRV records (RFC 2782)."""
import random
from itertools import groupby
from typing import List, Optional, Sequence
from .records import ServiceRecord


def _weighted_order(group: List[ServiceRecord], rng) -> List[ServiceRecord]:
    """Weighted random permutation of one priority tier."""
    remaining = list(group)
    result = []
    while len(remaining) > 1:
        total_weight = sum(r.weight for r in remaining)
        w = rng.randrange(total_weight) if total_weight > 0 else 0

        # All-zero tiers fall through to index 0 and keep their order
        index = 0
        cumulative = 0
        for i, record in enumerate(remaining):
            cumulative += record.weight
            if cumulative > w:
                index = i
                break

        result.append(remaining.pop(index))
    result.extend(remaining)
    return result


def order_records(records: Sequence[ServiceRecord], rng: Optional[random.Random] = None) -> List[ServiceRecord]:
    """
    Order SRV records for connection attempts.

    Records are grouped by priority (lowest value first). Inside each group
    records are drawn one at a time, each with probability proportional to
    its weight among those not yet drawn.

    Args:
        records: The records returned by an SRV lookup
        rng: Random source, the ``random`` module when omitted

    Returns:
        A new list holding every input record exactly once
    """
    rng = rng or random
    # sorted() is stable, so records keep their answer order inside a tier
    by_priority = sorted(records, key=lambda r: r.priority)
    result = []
    for _, group in groupby(by_priority, key=lambda r: r.priority):
        result.extend(_weighted_order(list(group), rng))
    return result


def select_record(records: Sequence[ServiceRecord], rng: Optional[random.Random] = None) -> Optional[ServiceRecord]:
    """Return the most preferred record, or None when there are none."""
    ordered = order_records(records, rng)
    return ordered[0] if ordered else None
