"""Cross-section search over classes, events, deals, and services."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from ..models.deal import Deal
from ..models.filter import ALL, SearchResults
from ..models.listing import Listing, ListingKind
from ..models.service import Service
from .deal_filter import DealFilterEngine, is_deal_expired
from .deal_scorer import DealScorer
from .event_filter import EventFilterEngine
from .venue_directory import VenueDirectory

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 5

# Service categories with their own filter chip; everything else is "Other"
MAIN_SERVICE_CATEGORIES = [
    "Restaurants & Dining",
    "Retail & Shopping",
    "Cafes & Bakeries",
    "Outdoor Adventures",
    "Auto Services",
    "Real Estate",
    "Fitness & Gyms",
    "Recreation & Sports",
    "Health & Wellness",
    "Construction & Building",
    "Outdoor Gear & Shops",
    "Community Services",
    "Hotels & Lodging",
    "Web & Marketing",
    "Financial Services",
    "Medical Clinics",
    "Photography",
    "Attractions",
    "Churches & Religious",
    "Salons & Spas",
    "Arts & Culture",
]


def service_matches_query(service: Service, query: str) -> bool:
    """Case-insensitive match on service name, category, or address."""
    fields = [service.name or "", service.category or "", service.address or ""]
    return any(query in value.lower() for value in fields)


def filter_services(
    pool: Iterable[Service],
    search_query: Optional[str] = None,
    category: Optional[str] = ALL,
) -> List[Service]:
    """
    Filter the services directory.

    Selecting "Other" keeps services outside the main category list.
    """
    query = (search_query or "").strip().lower()
    services = []

    for service in pool:
        if query and not service_matches_query(service, query):
            continue

        if category and category.lower() != ALL:
            if category == "Other":
                if service.category in MAIN_SERVICE_CATEGORIES:
                    continue
            elif service.category != category:
                continue

        services.append(service)

    return services


class CrossSectionSearchEngine:
    """Searches each content section independently with its own result cap."""

    def __init__(
        self,
        scorer: Optional[DealScorer] = None,
        venue_directory: Optional[VenueDirectory] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ):
        """Initialize search engine."""
        self.scorer = scorer or DealScorer()
        self.venue_directory = venue_directory or VenueDirectory()
        self.limit = limit
        self.event_engine = EventFilterEngine(self.venue_directory)
        self.deal_engine = DealFilterEngine(self.scorer, self.venue_directory)

    def search(
        self,
        query: Optional[str],
        listings: Iterable[Listing],
        deals: Iterable[Deal],
        services: Iterable[Service],
        now: datetime,
        limit: Optional[int] = None,
    ) -> SearchResults:
        """
        Search every section for a query.

        Results keep pool order; each section is capped at ``limit`` on its own.
        """
        results = SearchResults()
        normalized = (query or "").strip().lower()
        if not normalized:
            return results

        cap = self.limit if limit is None else limit

        for listing in listings:
            if not self._is_upcoming(listing, now):
                continue
            if not self.event_engine.matches_query(listing, normalized):
                continue

            if listing.kind == ListingKind.CLASS:
                bucket = results.classes
            elif listing.kind == ListingKind.EVENT:
                bucket = results.events
            else:
                continue

            if len(bucket) < cap:
                bucket.append(listing)

        for deal in deals:
            if len(results.deals) >= cap:
                break
            if not self.scorer.is_real_deal(deal) or is_deal_expired(deal, now):
                continue
            if self.deal_engine.matches_query(deal, normalized):
                results.deals.append(deal)

        for service in services:
            if len(results.services) >= cap:
                break
            if service_matches_query(service, normalized):
                results.services.append(service)

        logger.debug(
            f"Search '{normalized}' found {len(results.classes)} classes, "
            f"{len(results.events)} events, {len(results.deals)} deals, "
            f"{len(results.services)} services"
        )
        return results

    def _is_upcoming(self, listing: Listing, now: datetime) -> bool:
        return listing.has_valid_start and listing.start >= now
