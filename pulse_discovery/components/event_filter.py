"""Filter engine for narrowing and ordering event and class listings."""

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from ..models.filter import (
    ALL,
    CLOCK_TIME_PATTERN,
    DEFAULT_KIDS_AGE_RANGE,
    PRENATAL_AGE_RANGE,
    SECTION_CLASSES,
    SECTION_EVENTS,
    ListingFilters,
)
from ..models.listing import Listing, ListingKind
from .time_windows import HAPPENING_NOW_HOURS, UPCOMING_DAYS, resolve_day_window
from .venue_directory import VenueDirectory

logger = logging.getLogger(__name__)

SECTION_KINDS = {
    SECTION_EVENTS: ListingKind.EVENT,
    SECTION_CLASSES: ListingKind.CLASS,
}

# Local hour ranges [start, end) for the symbolic time-of-day filter
TIME_OF_DAY_RANGES = {
    "morning": (5, 12),
    "afternoon": (12, 17),
    "evening": (17, 24),
}

ADULT_AGE_GROUPS = {"All Ages", "19+", "Teens & Adults"}
FAMILY_CATEGORIES = {"Kids", "Family"}
PRENATAL_KEYWORDS = ["prenatal", "perinatal", "pregnant"]

# Listings whose age range cannot be read from their text pass the kids filter
PASS_UNPARSEABLE_AGE_RANGE = True


def section_kind(section: Optional[str]) -> Optional[ListingKind]:
    """Listing kind shown in a section, or None for other sections."""
    return SECTION_KINDS.get(section or "")


def listing_in_section(listing: Listing, section: Optional[str]) -> bool:
    kind = section_kind(section)
    return kind is None or listing.kind == kind


class EventFilterEngine:
    """Applies section, day, search, age, category, time, and price filters."""

    # Booking status scraped in place of a class name
    BAD_TITLE_PATTERNS = [
        r"^\(\d+\s+Reserved,\s+\d+\s+Open\)$",
    ]
    MIN_TITLE_LENGTH = 3

    AGE_RANGE_PATTERN = r"(?:ages?\s*)?(\d+)\s*[-–]\s*(\d+)"

    def __init__(
        self,
        venue_directory: Optional[VenueDirectory] = None,
        happening_now_hours: int = HAPPENING_NOW_HOURS,
        upcoming_days: int = UPCOMING_DAYS,
        default_kids_age_range: Tuple[int, int] = DEFAULT_KIDS_AGE_RANGE,
    ):
        """
        Initialize filter engine.

        Args:
            venue_directory: Venue table for venue-name search
            happening_now_hours: Look-back for the happeningNow window
            upcoming_days: Look-ahead for the today window
            default_kids_age_range: Kids range that means no sub-range was picked
        """
        self.venue_directory = venue_directory or VenueDirectory()
        self.happening_now_hours = happening_now_hours
        self.upcoming_days = upcoming_days
        self.default_kids_age_range = tuple(default_kids_age_range)
        self.bad_title_regexes = [re.compile(pattern) for pattern in self.BAD_TITLE_PATTERNS]
        self.age_range_regex = re.compile(self.AGE_RANGE_PATTERN, re.IGNORECASE)

    def filter_listings(
        self,
        pool: Iterable[Listing],
        section: Optional[str],
        filters: ListingFilters,
        now: datetime,
        search_query: Optional[str] = None,
        kids_age_range: Optional[Tuple[int, int]] = None,
    ) -> List[Listing]:
        """
        Filter and sort listings for the current UI selections.

        Args:
            pool: Listings supplied by the fetch layer
            section: "events", "classes", or anything else for no section filter
            filters: Current filter selections
            now: Current time in the local timezone
            search_query: Free-text search
            kids_age_range: Age sub-range for the kids filter; None for no sub-range

        Returns:
            New list, featured first, then by ascending start
        """
        listings = [listing for listing in pool if self.is_displayable(listing)]
        total = len(listings)

        listings = [l for l in listings if listing_in_section(l, section)]

        window = resolve_day_window(
            filters.day, now, self.happening_now_hours, self.upcoming_days
        )
        listings = [l for l in listings if window.contains(l.start)]

        query = (search_query or "").strip().lower()
        if query:
            listings = [l for l in listings if self.matches_query(l, query)]

        if filters.age == "kids":
            listings = [l for l in listings if self.matches_kids(l, kids_age_range)]
        elif filters.age == "adults":
            listings = [l for l in listings if self.matches_adults(l)]

        selected = filters.category_set
        if selected is not None:
            listings = [l for l in listings if self.matches_category(l, selected)]

        if filters.time and filters.time != ALL:
            listings = [l for l in listings if self.matches_time(l, filters.time)]

        if filters.price == "free":
            listings = [l for l in listings if l.is_free]
        elif filters.price == "paid":
            listings = [l for l in listings if not l.is_free]

        result = sorted(listings, key=lambda l: (not l.featured, l.start))

        logger.debug(
            f"Listing filter kept {len(result)} of {total} "
            f"(section={section}, day={filters.day})"
        )
        return result

    def is_displayable(self, listing: Listing) -> bool:
        """Drop listings with no usable start or a known bad-data title."""
        if not listing.has_valid_start:
            return False

        title = listing.title or ""
        if len(title) < self.MIN_TITLE_LENGTH:
            return False

        return not any(regex.match(title) for regex in self.bad_title_regexes)

    def matches_query(self, listing: Listing, query: str) -> bool:
        """Case-insensitive match on title, description, venue, or tags."""
        fields = [
            listing.title or "",
            listing.description or "",
            self.venue_directory.venue_name(listing),
        ]
        if any(query in value.lower() for value in fields):
            return True
        return any(query in tag.lower() for tag in listing.tags or [])

    def parse_age_range(self, text: str) -> Optional[Tuple[int, int]]:
        """Read an "N-M" or "Ages N-M" range out of free text."""
        match = self.age_range_regex.search(text)
        if not match:
            return None
        return int(match.group(1)), int(match.group(2))

    def matches_kids(
        self, listing: Listing, kids_age_range: Optional[Tuple[int, int]] = None
    ) -> bool:
        if "Kids" not in (listing.age_group or ""):
            return False

        if kids_age_range is None:
            return True

        low, high = kids_age_range
        if (low, high) == self.default_kids_age_range:
            return True

        text = f"{listing.title} {listing.description}".lower()

        if (low, high) == PRENATAL_AGE_RANGE:
            return any(keyword in text for keyword in PRENATAL_KEYWORDS)

        parsed = self.parse_age_range(text)
        if parsed is None:
            return PASS_UNPARSEABLE_AGE_RANGE

        listing_min, listing_max = parsed
        return listing_min <= high and listing_max >= low

    @staticmethod
    def matches_adults(listing: Listing) -> bool:
        age_group = listing.age_group or ""
        return "Adults" in age_group or age_group in ADULT_AGE_GROUPS

    @staticmethod
    def matches_category(listing: Listing, selected) -> bool:
        """A listing passes if it matches any of the selected categories."""
        tags = listing.tags or []
        age_group = listing.age_group or ""

        for category in selected:
            if category in FAMILY_CATEGORIES:
                if any(
                    marker in age_group or any(marker in tag for tag in tags)
                    for marker in FAMILY_CATEGORIES
                ):
                    return True
            elif listing.category == category or category in tags:
                return True

        return False

    @staticmethod
    def matches_time(listing: Listing, time_filter: str) -> bool:
        """Symbolic time-of-day range, or an inclusive HH:MM minimum start."""
        if time_filter in TIME_OF_DAY_RANGES:
            start_hour, end_hour = TIME_OF_DAY_RANGES[time_filter]
            return start_hour <= listing.start.hour < end_hour

        if CLOCK_TIME_PATTERN.match(time_filter):
            hours, minutes = (int(part) for part in time_filter.split(":"))
            listing_minutes = listing.start.hour * 60 + listing.start.minute
            return listing_minutes >= hours * 60 + minutes

        # Unknown time selections do not narrow the results
        return True
