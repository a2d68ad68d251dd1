"""
Unit tests for filter UI aggregates.
"""

import pytest
from factories import local, make_deal, make_listing

from pulse_discovery.components.event_filter import EventFilterEngine
from pulse_discovery.components.listing_insights import (
    date_event_counts,
    deal_category_options,
    event_category_options,
    quick_filter_counts,
    relaxation_suggestions,
    search_suggestions,
)
from pulse_discovery.models.filter import ListingFilters, QuickFilterCounts
from pulse_discovery.models.listing import ListingKind
from pulse_discovery.models.service import Venue


class TestCategoryOptions:
    """Test cases for category option lists."""

    def test_event_categories_in_window(self, wednesday_evening):
        pool = [
            make_listing(id="1", category="Music", kind=ListingKind.EVENT),
            make_listing(id="2", category="Arts", kind=ListingKind.EVENT),
            make_listing(id="3", category="Fitness", kind=ListingKind.CLASS),
            make_listing(
                id="4", category="Markets", kind=ListingKind.EVENT, start=local(2026, 2, 10, 9)
            ),
            make_listing(id="5", category="", kind=ListingKind.EVENT),
        ]

        options = event_category_options(pool, "events", "today", wednesday_evening)

        assert options == ["All", "Arts", "Music"]

    def test_deal_categories_in_canonical_order(self):
        pool = [
            make_deal(id="1", category="Salons & Spas"),
            make_deal(id="2", category="Glass Repair"),
            make_deal(id="3", category="Craft Brewery"),
            make_deal(id="4", category="Restaurants & Dining"),
        ]

        assert deal_category_options(pool) == ["All", "Food & Drink", "Beauty", "Other"]

    def test_empty_pools(self, wednesday_evening):
        assert event_category_options([], "events", "today", wednesday_evening) == ["All"]
        assert deal_category_options([]) == ["All"]


class TestQuickFilterCounts:
    """Test cases for quick_filter_counts."""

    def test_counts(self, wednesday_evening):
        pool = [
            make_listing(id="now", title="Running Late", start=local(2026, 2, 18, 16)),
            make_listing(id="free", title="Free Jam", price="Free", start=local(2026, 2, 19, 19)),
            make_listing(id="fri", title="Friday Social", start=local(2026, 2, 20, 20)),
            make_listing(id="sun", title="Sunday Hike", price="free", start=local(2026, 2, 22, 8)),
            make_listing(id="evt", title="Concert", kind=ListingKind.EVENT, start=local(2026, 2, 21)),
        ]

        counts = quick_filter_counts(pool, "classes", wednesday_evening)

        assert counts == QuickFilterCounts(happening_now=1, free_upcoming=2, this_weekend=2)

    def test_weekend_badge_counts_the_whole_weekend(self, saturday_afternoon):
        pool = [
            make_listing(id="1", start=local(2026, 2, 20, 19)),
            make_listing(id="2", start=local(2026, 2, 21, 10)),
            make_listing(id="3", start=local(2026, 2, 21, 19)),
        ]

        counts = quick_filter_counts(pool, "classes", saturday_afternoon)

        assert counts.this_weekend == 3


class TestDateEventCounts:
    """Test cases for date_event_counts."""

    def test_counts_by_day_within_horizon(self, wednesday_evening):
        pool = [
            make_listing(id="1", start=local(2026, 2, 18, 18)),
            make_listing(id="2", start=local(2026, 2, 18, 20)),
            make_listing(id="3", start=local(2026, 2, 18, 9)),
            make_listing(id="4", start=local(2026, 2, 25, 10)),
            make_listing(id="5", start=local(2026, 3, 3, 23)),
            make_listing(id="6", start=local(2026, 3, 4, 0)),
            make_listing(id="7", start=None),
        ]

        counts = date_event_counts(pool, "classes", wednesday_evening)

        assert counts == {"2026-02-18": 2, "2026-02-25": 1, "2026-03-03": 1}

    def test_custom_horizon(self, wednesday_evening):
        pool = [make_listing(id="1", start=local(2026, 2, 19, 10))]

        assert date_event_counts(pool, "classes", wednesday_evening, horizon_days=1) == {}


class TestSearchSuggestions:
    """Test cases for search_suggestions."""

    def test_unique_sorted_names_and_titles(self):
        listings = [
            make_listing(title="Pottery Wheel"),
            make_listing(id="2", title="archery"),
            make_listing(id="3", title="Pottery Wheel"),
        ]
        venues = [Venue(id="v1", name="Brackendale Art Gallery"), Venue(id="v2", name="")]

        assert search_suggestions(listings, venues) == [
            "archery",
            "Brackendale Art Gallery",
            "Pottery Wheel",
        ]


class TestRelaxationSuggestions:
    """Test cases for relaxation_suggestions."""

    @pytest.fixture
    def engine(self):
        return EventFilterEngine()

    @pytest.fixture
    def pool(self):
        return [
            make_listing(id="1", title="Evening Yoga", price="$15", start=local(2026, 2, 19, 19)),
            make_listing(id="2", title="Kids Art", age_group="Kids", category="Arts",
                         price="$10", start=local(2026, 2, 19, 16)),
        ]

    def test_suggests_filters_that_would_help(self, engine, pool, wednesday_evening):
        """Test dropping time alone finds nothing free, dropping price finds one."""
        filters = ListingFilters(price="free", time="evening")
        suggestions = relaxation_suggestions(engine, pool, "classes", filters, wednesday_evening)

        assert len(suggestions) == 1
        assert suggestions[0].filter_key == "price"
        assert suggestions[0].label == 'Remove "Free" filter'
        assert suggestions[0].replacement == "all"
        assert suggestions[0].count == 1

    def test_category_label_lists_selection(self, engine, pool, wednesday_evening):
        filters = ListingFilters(category=["Music", "Dance"])

        suggestions = relaxation_suggestions(engine, pool, "classes", filters, wednesday_evening)

        assert suggestions[0].filter_key == "category"
        assert suggestions[0].label == 'Remove "Dance, Music" filter'

    def test_happening_now_offers_upcoming(self, engine, pool, wednesday_evening):
        filters = ListingFilters(day="happeningNow")

        suggestions = relaxation_suggestions(engine, pool, "classes", filters, wednesday_evening)

        assert suggestions[-1].filter_key == "day"
        assert suggestions[-1].replacement == "today"
        assert suggestions[-1].count is None

    def test_no_active_filters(self, engine, pool, wednesday_evening):
        assert relaxation_suggestions(engine, pool, "classes", ListingFilters(), wednesday_evening) == []
