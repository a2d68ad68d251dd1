"""
Aggregates that drive the filter UI.

Category option lists, quick-filter badge counts, per-day counts for the
date picker, search suggestions, and ways out of an empty result set.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.deal import Deal
from ..models.filter import (
    ALL,
    FilterSuggestion,
    ListingFilters,
    QuickFilterCounts,
)
from ..models.listing import Listing
from ..models.service import Venue
from .category_normalizer import DEAL_CATEGORIES, OTHER_CATEGORY, normalize_deal_category
from .event_filter import EventFilterEngine, listing_in_section
from .time_windows import HAPPENING_NOW_HOURS, resolve_day_window, start_of_day

logger = logging.getLogger(__name__)

ALL_OPTION = "All"

RELAXABLE_FILTERS = ["time", "price", "age", "category"]
FILTER_LABELS = {
    "time": {"morning": "Morning", "afternoon": "Afternoon", "evening": "Evening"},
    "price": {"free": "Free", "paid": "Paid"},
    "age": {"kids": "Kids", "adults": "Adults"},
}


def _upcoming(pool: Iterable[Listing], section: Optional[str], now: datetime) -> List[Listing]:
    return [
        listing
        for listing in pool
        if listing.has_valid_start
        and listing_in_section(listing, section)
        and listing.start >= now
    ]


def event_category_options(
    pool: Iterable[Listing], section: Optional[str], day: str, now: datetime
) -> List[str]:
    """Categories with at least one listing in the section and day window."""
    window = resolve_day_window(day, now)
    categories = {
        listing.category
        for listing in pool
        if listing.has_valid_start
        and listing.category
        and listing_in_section(listing, section)
        and window.contains(listing.start)
    }
    return [ALL_OPTION] + sorted(categories)


def deal_category_options(pool: Iterable[Deal]) -> List[str]:
    """Normalized deal categories present in the pool, in canonical order."""
    present = {normalize_deal_category(deal.category) for deal in pool}
    options = [category for category in DEAL_CATEGORIES if category in present]
    if OTHER_CATEGORY in present:
        options.append(OTHER_CATEGORY)
    return [ALL_OPTION] + options


def quick_filter_counts(
    pool: Iterable[Listing],
    section: Optional[str],
    now: datetime,
    happening_now_hours: int = HAPPENING_NOW_HOURS,
) -> QuickFilterCounts:
    """Badge counts for the happening-now, free, and weekend chips."""
    listings = [
        listing
        for listing in pool
        if listing.has_valid_start and listing_in_section(listing, section)
    ]

    happening_window = resolve_day_window("happeningNow", now, happening_now_hours)
    weekend_window = resolve_day_window("thisWeekend", now)

    happening_now = sum(1 for l in listings if happening_window.contains(l.start))
    free_upcoming = sum(1 for l in listings if l.start >= now and l.is_free)
    # The badge counts the whole weekend, including what already started
    this_weekend = sum(
        1 for l in listings if weekend_window.start <= l.start < weekend_window.end
    )

    return QuickFilterCounts(
        happening_now=happening_now,
        free_upcoming=free_upcoming,
        this_weekend=this_weekend,
    )


def date_event_counts(
    pool: Iterable[Listing],
    section: Optional[str],
    now: datetime,
    horizon_days: int = 14,
) -> Dict[str, int]:
    """Upcoming listing counts keyed by ``YYYY-MM-DD`` within the horizon."""
    horizon_end = start_of_day(now) + timedelta(days=horizon_days)
    counts: Dict[str, int] = {}

    for listing in _upcoming(pool, section, now):
        if listing.start >= horizon_end:
            continue
        key = listing.start.strftime("%Y-%m-%d")
        counts[key] = counts.get(key, 0) + 1

    return counts


def search_suggestions(listings: Iterable[Listing], venues: Iterable[Venue]) -> List[str]:
    """Unique venue names and listing titles for search autocomplete."""
    suggestions = {venue.name for venue in venues if venue.name}
    suggestions.update(listing.title for listing in listings if listing.title)
    return sorted(suggestions, key=lambda value: (value.lower(), value))


def relaxation_suggestions(
    engine: EventFilterEngine,
    pool: List[Listing],
    section: Optional[str],
    filters: ListingFilters,
    now: datetime,
    search_query: Optional[str] = None,
    kids_age_range: Optional[Tuple[int, int]] = None,
    max_suggestions: int = 3,
) -> List[FilterSuggestion]:
    """
    Suggest filters to drop when a filtered view comes back empty.

    Each active filter is reset to "all" on its own; only resets that would
    produce results are suggested.
    """
    suggestions = []

    for key in RELAXABLE_FILTERS:
        value = getattr(filters, key)
        if key == "category":
            if filters.category_set is None:
                continue
        elif not value or value == ALL:
            continue

        relaxed = replace(filters, **{key: ALL})
        count = len(
            engine.filter_listings(pool, section, relaxed, now, search_query, kids_age_range)
        )
        if count > 0:
            if key == "category":
                label = ", ".join(sorted(filters.category_set))
            else:
                label = FILTER_LABELS.get(key, {}).get(value, value)
            suggestions.append(
                FilterSuggestion(
                    filter_key=key,
                    label=f'Remove "{label}" filter',
                    replacement=ALL,
                    count=count,
                )
            )

    if filters.day == "happeningNow":
        suggestions.append(
            FilterSuggestion(
                filter_key="day",
                label="Show upcoming instead",
                replacement="today",
                count=None,
            )
        )

    logger.debug(f"Built {len(suggestions)} relaxation suggestions")
    return suggestions[:max_suggestions]
