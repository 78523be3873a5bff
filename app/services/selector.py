"""
Weighted Destination Selector

Picks one destination URL from a cloaked link's destination list, with
probability proportional to each destination's weight.

Algorithm: weighted reservoir sampling with a reservoir of one. Each
positively weighted destination replaces the current pick with probability
weight / (running total including itself). After the whole list is seen,
every destination has been kept with probability weight / total weight.
One pass, constant memory, no cumulative table.

The function is pure: the random source is passed in, nothing else is read
or written. The "use the first entry" fallback lives in the redirect service,
not here.
"""

import random
from typing import Callable, Optional, Sequence

from app.db.models import DestinationRecord

RandomSource = Callable[[], float]


def select_weighted_destination(
    destinations: Optional[Sequence[DestinationRecord]],
    rng: RandomSource = random.random,
) -> Optional[str]:
    """
    Select a destination URL by weighted random choice.

    Args:
        destinations: Destinations in stored order. Missing weight counts as 1;
            weight <= 0 is never selected.
        rng: Zero-argument callable returning a float uniform on [0, 1)

    Returns:
        The chosen URL, or None when no destination has a positive weight

    Example:
        select_weighted_destination([DestinationRecord(url="https://a.example", weight=2),
                                     DestinationRecord(url="https://b.example", weight=0)])
        -> "https://a.example"
    """
    if not destinations:
        return None

    selected_url: Optional[str] = None
    total_weight = 0.0

    for destination in destinations:
        weight = destination.effective_weight
        if weight <= 0:
            continue

        if rng() * (total_weight + weight) < weight:
            selected_url = destination.url

        total_weight += weight

    return selected_url
