"""
Unit tests for backend row parsing.
"""

from datetime import date, datetime, timezone

import pytest
from factories import PACIFIC, local

from pulse_discovery.components.category_normalizer import OTHER_CATEGORY
from pulse_discovery.components.deal_filter import DealFilterEngine
from pulse_discovery.components.related_deals import find_related_deals
from pulse_discovery.components.venue_directory import VenueDirectory
from pulse_discovery.components.record_parser import RecordParser, strip_html
from pulse_discovery.models.deal import DiscountType
from pulse_discovery.models.filter import DealFilters
from pulse_discovery.models.listing import ListingKind
from pulse_discovery.models.service import Venue
from pulse_discovery.utils.error_handling import ErrorCategory, get_error_tracker


@pytest.fixture
def parser():
    return RecordParser("America/Vancouver")


@pytest.fixture(autouse=True)
def clean_tracker():
    get_error_tracker().clear()
    yield
    get_error_tracker().clear()


class TestStripHtml:
    """Test cases for strip_html."""

    def test_plain_text_passes_through(self):
        assert strip_html("  Bring a mat  ") == "Bring a mat"

    def test_empty_values(self):
        assert strip_html(None) == ""
        assert strip_html("") == ""

    def test_breaks_and_entities(self):
        assert strip_html("Line one<br>Line two &amp; more") == "Line one\nLine two & more"

    def test_list_items_become_bullets(self):
        assert strip_html("<ul><li>Mats</li><li>Water</li></ul>") == "• Mats\n• Water"

    def test_excess_blank_lines_collapse(self):
        assert strip_html("<p>One</p><br><br><br><p>Two</p>") == "One\n\nTwo"

    def test_schedule_prefix_and_book_now_removed(self):
        text = (
            "Monday, February 23, 2026, 4:00 PM - 6:00 PM, "
            "Book now Learn to throw on the wheel"
        )

        assert strip_html(text) == "Learn to throw on the wheel"


class TestParseListing:
    """Test cases for RecordParser.parse_listing."""

    def test_iso_start_with_offset(self, parser):
        listing = parser.parse_listing(
            {
                "id": 7,
                "title": " Pottery Wheel ",
                "start": "2026-02-19T02:00:00+00:00",
                "kind": "CLASS",
                "tags": "Ceramics, Arts ,",
                "price": 0,
                "featured": "true",
            }
        )

        assert listing.id == "7"
        assert listing.title == "Pottery Wheel"
        assert listing.start == local(2026, 2, 18, 18, 0)
        assert listing.start.tzinfo == PACIFIC
        assert listing.kind == ListingKind.CLASS
        assert listing.tags == ["Ceramics", "Arts"]
        assert listing.price == "0"
        assert listing.featured is True

    def test_naive_start_is_local(self, parser):
        listing = parser.parse_listing({"title": "Trivia", "start_at": "2026-02-20 19:30"})

        assert listing.start == local(2026, 2, 20, 19, 30)

    def test_date_and_time_fields(self, parser):
        listing = parser.parse_listing(
            {"title": "Market", "startDate": "2026-02-21", "startTime": "10:15", "eventType": "event"}
        )

        assert listing.start == local(2026, 2, 21, 10, 15)
        assert listing.kind == ListingKind.EVENT

    def test_date_only_defaults_to_morning(self, parser):
        listing = parser.parse_listing({"title": "Market", "start_date": date(2026, 2, 21)})

        assert listing.start == local(2026, 2, 21, 9, 0)

    def test_aware_datetime_is_converted(self, parser):
        start = datetime(2026, 2, 19, 2, 0, tzinfo=timezone.utc)

        listing = parser.parse_listing({"title": "Late Show", "start": start})

        assert listing.start == local(2026, 2, 18, 18, 0)

    def test_unusable_start_becomes_none(self, parser):
        listing = parser.parse_listing({"title": "Mystery", "start": "not a date"})

        assert listing.start is None
        assert listing.has_valid_start is False

    def test_unknown_kind_and_camel_case_fields(self, parser):
        listing = parser.parse_listing(
            {
                "title": "Open Gym",
                "kind": "workshop",
                "venueId": "v1",
                "venueName": "Squamish Rec Centre",
                "ageGroup": "Teens & Adults",
                "description": "<p>Drop in</p>",
            }
        )

        assert listing.kind is None
        assert listing.venue_id == "v1"
        assert listing.venue_name == "Squamish Rec Centre"
        assert listing.age_group == "Teens & Adults"
        assert listing.description == "Drop in"

    def test_generated_id_is_stable(self, parser):
        row = {"title": "Trivia", "start": "2026-02-20 19:30", "venue_id": "v2"}

        first = parser.parse_listing(row)
        second = parser.parse_listing(dict(row))

        assert first.id == second.id
        assert first.id.startswith("rec_")
        assert len(first.id) == 12

    def test_non_mapping_row_raises(self, parser):
        with pytest.raises(ValueError, match="mapping"):
            parser.parse_listing(["Trivia"])


class TestParseDeal:
    """Test cases for RecordParser.parse_deal."""

    def test_structured_fields(self, parser):
        deal = parser.parse_deal(
            {
                "id": "d1",
                "title": "Growler Tuesday",
                "discountType": "PERCENT",
                "discountValue": "25",
                "originalPrice": "$30.00",
                "dealPrice": "22.5",
                "savingsPercent": "25%",
                "validUntil": date(2026, 3, 1),
                "business_name": "Howe Sound Brewing",
                "category": "Craft Brewery",
            }
        )

        assert deal.discount_type == DiscountType.PERCENT
        assert deal.discount_value == 25.0
        assert deal.discount == "25% off"
        assert deal.original_price == 30.0
        assert deal.deal_price == 22.5
        assert deal.savings_percent == 25.0
        assert deal.valid_until == "2026-03-01"
        assert deal.venue_name == "Howe Sound Brewing"
        assert deal.category == "Craft Brewery"

    def test_defaults(self, parser):
        deal = parser.parse_deal({"id": "d2", "title": "Happy Hour"})

        assert deal.venue_name == "Local Business"
        assert deal.venue_identity is None
        assert deal.category == OTHER_CATEGORY
        assert deal.discount_type is None
        assert deal.discount == "Special Offer"
        assert deal.deal_price is None

    def test_venue_id_without_name_resolves_through_table(self, parser, wednesday_evening):
        """Test a deal with only a venue id is found by the venue table name."""
        deal = parser.parse_deal({"id": "a", "title": "50% off pints", "venue_id": "v1"})
        directory = VenueDirectory([Venue(id="v1", name="Howe Sound Brewing")])
        engine = DealFilterEngine(venue_directory=directory)

        result = engine.filter_deals(
            [deal], DealFilters(), wednesday_evening, search_query="howe sound"
        )

        assert deal.venue_name is None
        assert deal.venue_id == "v1"
        assert result == [deal]

    def test_deals_from_different_venue_ids_are_not_related(self, parser):
        first = parser.parse_deal({"id": "a", "title": "50% off pints", "venue_id": "v1"})
        second = parser.parse_deal({"id": "b", "title": "BOGO tacos", "venue_id": "v2"})
        third = parser.parse_deal({"id": "c", "title": "Free chips", "venueId": "v1"})

        assert find_related_deals(first, [first, second, third]) == [third]

    @pytest.mark.parametrize(
        "discount_type, value, expected",
        [
            ("fixed", 10, "$10 off"),
            ("fixed", 7.5, "$7.5 off"),
            ("bogo", None, "Buy One Get One"),
            ("free_item", None, "Free Item"),
            ("mystery", None, "Special Offer"),
        ],
    )
    def test_derived_discount_text(self, parser, discount_type, value, expected):
        deal = parser.parse_deal(
            {"id": "d", "title": "Deal", "discount_type": discount_type, "discount_value": value}
        )

        assert deal.discount == expected

    def test_explicit_discount_text_is_kept(self, parser):
        deal = parser.parse_deal(
            {"id": "d", "title": "Deal", "discount_type": "percent", "discount_value": 10,
             "discount": "10% off pints"}
        )

        assert deal.discount == "10% off pints"

    def test_zero_deal_price_is_kept(self, parser):
        deal = parser.parse_deal({"id": "d", "title": "Kids eat free", "deal_price": 0})

        assert deal.deal_price == 0.0

    def test_unusable_numbers_become_none(self, parser):
        deal = parser.parse_deal(
            {"id": "d", "title": "Deal", "original_price": "call us", "deal_price": True}
        )

        assert deal.original_price is None
        assert deal.deal_price is None


class TestParseService:
    """Test cases for RecordParser.parse_service."""

    def test_service(self, parser):
        service = parser.parse_service(
            {"id": 12, "name": "Chief Yoga", "category": "Fitness & Gyms", "address": "38 Cleveland Ave"}
        )

        assert service.id == "12"
        assert service.name == "Chief Yoga"
        assert service.category == "Fitness & Gyms"

    def test_name_required(self, parser):
        with pytest.raises(ValueError, match="name"):
            parser.parse_service({"name": "  "})


class TestBatchParsing:
    """Test cases for batch parsing with skipped rows."""

    def test_malformed_rows_are_skipped_and_recorded(self, parser):
        rows = [{"name": "Chief Yoga"}, {"name": ""}, "garbage", {"name": "Garibaldi Glass"}]

        services = parser.parse_services(rows)

        assert [s.name for s in services] == ["Chief Yoga", "Garibaldi Glass"]
        errors = get_error_tracker().get_component_errors("record.parser")
        assert len(errors) == 2
        assert all(e.category == ErrorCategory.DATA_VALIDATION for e in errors)
        assert errors[0].context == {"record_type": "service", "index": 1}

    def test_listings_and_deals(self, parser):
        listings = parser.parse_listings([{"title": "Trivia", "start": "2026-02-20 19:30"}, None])
        deals = parser.parse_deals([{"id": "d", "title": "BOGO tacos"}])

        assert len(listings) == 1
        assert len(deals) == 1
        assert get_error_tracker().get_error_stats()["total_errors"] == 1


class TestRecordParserInit:
    """Test cases for RecordParser construction."""

    def test_unknown_timezone(self):
        with pytest.raises(ValueError, match="Unknown timezone"):
            RecordParser("Mars/Olympus_Mons")
