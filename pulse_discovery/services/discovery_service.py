"""
Discovery service that wires the filtering, scoring, and search components.

The service owns the clock: every engine component receives ``now`` as a
parameter, and the service fills it in from the configured timezone when
the caller does not supply one.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..components.category_normalizer import normalize_deal_category
from ..components.deal_filter import DealFilterEngine
from ..components.deal_scorer import DealScorer
from ..components.deal_titles import generate_smart_deal_title
from ..components.event_filter import EventFilterEngine
from ..components.listing_insights import (
    date_event_counts,
    deal_category_options,
    event_category_options,
    quick_filter_counts,
    relaxation_suggestions,
    search_suggestions,
)
from ..components.related_deals import find_related_deals
from ..components.search_engine import CrossSectionSearchEngine, filter_services
from ..components.venue_directory import VenueDirectory
from ..models.config import EngineConfig
from ..models.deal import Deal, SavingsDisplay
from ..models.filter import (
    DealFilters,
    FilterSuggestion,
    ListingFilters,
    QuickFilterCounts,
    SearchResults,
    validate_kids_age_range,
)
from ..models.listing import Listing
from ..models.service import Service, Venue
from ..utils.logging import get_logger, setup_logging


class DiscoveryService:
    """
    Entry point for the presentation layer.

    Holds no record pools of its own; every call receives the pools the
    fetch layer currently has and returns a fresh collection.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        venues: Iterable[Venue] = (),
        configure_logging: bool = False,
    ):
        """
        Initialize discovery service.

        Args:
            config: Engine configuration (defaults if omitted)
            venues: Venue table used to resolve venue names
            configure_logging: Set up package logging from the configured
                log level and log directory
        """
        self.config = config or EngineConfig()
        self.config.validate()
        if configure_logging:
            setup_logging(self.config.log_dir, self.config.log_level)
        self.logger = get_logger("discovery.service", {"timezone": self.config.timezone})

        self.venues = list(venues)
        self.venue_directory = VenueDirectory(self.venues)
        self.scorer = DealScorer(self.config.real_deal_threshold)
        self.event_engine = EventFilterEngine(
            self.venue_directory,
            happening_now_hours=self.config.happening_now_hours,
            upcoming_days=self.config.upcoming_days,
            default_kids_age_range=self.default_kids_age_range,
        )
        self.deal_engine = DealFilterEngine(self.scorer, self.venue_directory)
        self.search_engine = CrossSectionSearchEngine(
            self.scorer, self.venue_directory, self.config.search_limit
        )

    @property
    def default_kids_age_range(self) -> Tuple[int, int]:
        low, high = self.config.default_kids_age_range
        return low, high

    def local_now(self) -> datetime:
        """Current time in the configured local timezone."""
        return datetime.now(self.config.tzinfo)

    def _resolve_now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else self.local_now()

    def filter_listings(
        self,
        pool: Sequence[Listing],
        section: str,
        filters: ListingFilters,
        search_query: Optional[str] = None,
        kids_age_range: Optional[Tuple[int, int]] = None,
        now: Optional[datetime] = None,
    ) -> List[Listing]:
        """Filtered, sorted listings for the events or classes section."""
        filters.validate()
        if kids_age_range is not None:
            kids_age_range = tuple(kids_age_range)
            validate_kids_age_range(kids_age_range)

        result = self.event_engine.filter_listings(
            pool, section, filters, self._resolve_now(now), search_query, kids_age_range
        )
        self.logger.info(
            "Filtered listings",
            extra={
                "section": section,
                "day": filters.day,
                "pool_size": len(pool),
                "result_count": len(result),
            },
        )
        return result

    def filter_deals(
        self,
        pool: Sequence[Deal],
        filters: DealFilters,
        search_query: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[Deal]:
        """Real, unexpired deals ranked by score."""
        filters.validate()
        result = self.deal_engine.filter_deals(
            pool, filters, self._resolve_now(now), search_query
        )
        self.logger.info(
            "Filtered deals",
            extra={"pool_size": len(pool), "result_count": len(result)},
        )
        return result

    def search(
        self,
        query: Optional[str],
        listings: Iterable[Listing],
        deals: Iterable[Deal],
        services: Iterable[Service],
        now: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> SearchResults:
        """Search every section, each capped independently."""
        results = self.search_engine.search(
            query, listings, deals, services, self._resolve_now(now), limit
        )
        self.logger.info(
            "Cross-section search",
            extra={"query": (query or "").strip(), "total_results": results.total},
        )
        return results

    def filter_services(
        self, pool: Iterable[Service], search_query: Optional[str] = None, category: str = "All"
    ) -> List[Service]:
        return filter_services(pool, search_query, category)

    def related_deals(self, deal: Deal, pool: Iterable[Deal], limit: Optional[int] = None) -> List[Deal]:
        related = find_related_deals(deal, pool)
        return related if limit is None else related[:limit]

    def deal_card(self, deal: Deal) -> Dict[str, object]:
        """Display fields for a deal card."""
        savings: Optional[SavingsDisplay] = self.scorer.savings_display(deal)
        venue_name = self.venue_directory.venue_name(deal)
        return {
            "id": deal.id,
            "title": generate_smart_deal_title(deal, venue_name),
            "venue_name": venue_name,
            "category": normalize_deal_category(deal.category),
            "savings": savings,
            "score": self.scorer.score(deal),
        }

    def event_category_options(
        self, pool: Iterable[Listing], section: str, day: str, now: Optional[datetime] = None
    ) -> List[str]:
        return event_category_options(pool, section, day, self._resolve_now(now))

    def deal_category_options(self, pool: Iterable[Deal]) -> List[str]:
        return deal_category_options(pool)

    def quick_filter_counts(
        self, pool: Iterable[Listing], section: str, now: Optional[datetime] = None
    ) -> QuickFilterCounts:
        return quick_filter_counts(
            pool, section, self._resolve_now(now), self.config.happening_now_hours
        )

    def date_event_counts(
        self, pool: Iterable[Listing], section: str, now: Optional[datetime] = None
    ) -> Dict[str, int]:
        return date_event_counts(
            pool, section, self._resolve_now(now), self.config.date_count_horizon_days
        )

    def search_suggestions(self, listings: Iterable[Listing]) -> List[str]:
        return search_suggestions(listings, self.venues)

    def relaxation_suggestions(
        self,
        pool: List[Listing],
        section: str,
        filters: ListingFilters,
        search_query: Optional[str] = None,
        kids_age_range: Optional[Tuple[int, int]] = None,
        now: Optional[datetime] = None,
    ) -> List[FilterSuggestion]:
        """Ways out of an empty listings view."""
        return relaxation_suggestions(
            self.event_engine,
            pool,
            section,
            filters,
            self._resolve_now(now),
            search_query,
            kids_age_range,
        )
