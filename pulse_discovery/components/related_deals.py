"""Related deals from the same venue."""

from typing import Iterable, List, Optional

from ..models.deal import Deal


def _same_venue(identity: str, other: Optional[str]) -> bool:
    if not other:
        return False
    return other == identity or other.lower() == identity.lower()


def find_related_deals(deal: Optional[Deal], pool: Iterable[Deal]) -> List[Deal]:
    """
    Other deals offered by the same venue.

    Venues are identified by name (case-insensitive), falling back to the
    venue identifier. The result is uncapped; callers slice as needed.
    """
    if deal is None:
        return []

    identity = deal.venue_identity
    if not identity:
        return []

    return [
        other
        for other in pool
        if other.id != deal.id and _same_venue(identity, other.venue_identity)
    ]
