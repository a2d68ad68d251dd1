"""Filter engine for narrowing and ranking deals."""

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional

from ..models.deal import Deal
from ..models.filter import DealFilters
from .deal_scorer import DealScorer
from .venue_directory import VenueDirectory

logger = logging.getLogger(__name__)

VALID_UNTIL_PATTERN = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})")


def is_deal_expired(deal: Deal, now: datetime) -> bool:
    """
    Check whether a deal's ``valid_until`` date has passed.

    The date is read as local calendar parts, and the deal stays valid
    through the last instant of that day. Missing or unparseable dates never expire.
    """
    if not deal.valid_until or not isinstance(deal.valid_until, str):
        return False

    match = VALID_UNTIL_PATTERN.match(deal.valid_until)
    if not match:
        return False

    year, month, day = (int(part) for part in match.groups())
    try:
        end_of_day = now.replace(
            year=year, month=month, day=day, hour=23, minute=59, second=59, microsecond=999999
        )
    except ValueError:
        logger.debug(f"Unparseable valid_until for deal {deal.id}: {deal.valid_until}")
        return False

    return end_of_day < now


class DealFilterEngine:
    """Applies value, expiry, search, and category filters to deals."""

    def __init__(
        self,
        scorer: Optional[DealScorer] = None,
        venue_directory: Optional[VenueDirectory] = None,
    ):
        """Initialize filter engine."""
        self.scorer = scorer or DealScorer()
        self.venue_directory = venue_directory or VenueDirectory()

    def filter_deals(
        self,
        pool: Iterable[Deal],
        filters: DealFilters,
        now: datetime,
        search_query: Optional[str] = None,
    ) -> List[Deal]:
        """
        Filter deals and rank them best first.

        Args:
            pool: Deals supplied by the fetch layer
            filters: Current filter selections
            now: Current time in the local timezone
            search_query: Free-text search

        Returns:
            New list sorted by descending score; ties keep input order
        """
        deals = list(pool)
        total = len(deals)

        deals = [deal for deal in deals if self.scorer.is_real_deal(deal)]
        deals = [deal for deal in deals if not is_deal_expired(deal, now)]

        query = (search_query or "").strip().lower()
        if query:
            deals = [deal for deal in deals if self.matches_query(deal, query)]

        selected = filters.category_set
        if selected is not None:
            deals = [deal for deal in deals if deal.category in selected]

        result = sorted(deals, key=self.scorer.score, reverse=True)

        logger.debug(f"Deal filter kept {len(result)} of {total}")
        return result

    def matches_query(self, deal: Deal, query: str) -> bool:
        """Case-insensitive match on title, description, or venue name."""
        fields = [
            deal.title or "",
            deal.description or "",
            deal.venue_name or "",
            self.venue_directory.venue_name(deal),
        ]
        return any(query in value.lower() for value in fields)
