"""
Filter criteria and result models.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from .deal import Deal
from .listing import Listing
from .service import Service

ALL = "all"

SECTION_EVENTS = "events"
SECTION_CLASSES = "classes"

DAY_KEYS = (
    "anytime",
    "happeningNow",
    "today",
    "tomorrow",
    "thisWeekend",
    "thisWeek",
    "nextWeek",
)
AGE_VALUES = (ALL, "kids", "adults")
PRICE_VALUES = (ALL, "free", "paid")
TIME_RANGES = (ALL, "morning", "afternoon", "evening")

DEFAULT_KIDS_AGE_RANGE: Tuple[int, int] = (0, 18)
PRENATAL_AGE_RANGE: Tuple[int, int] = (-1, 0)

DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
CLOCK_TIME_PATTERN = re.compile(r"^\d{1,2}:\d{2}$")

CategorySelection = Union[str, Iterable[str], None]


def normalize_category_selection(category: CategorySelection) -> Optional[FrozenSet[str]]:
    """
    Turn a single category or a collection of categories into a set.

    Returns None when the selection is unrestricted ("all", empty, or None).
    """
    if category is None:
        return None

    if isinstance(category, str):
        values = [category]
    else:
        values = list(category)

    selected = frozenset(value for value in values if value)
    if not selected or any(value.lower() == ALL for value in selected):
        return None

    return selected


@dataclass
class ListingFilters:
    """UI filter selections for the events and classes sections."""

    day: str = "today"
    age: str = ALL
    category: CategorySelection = ALL
    time: str = ALL
    price: str = ALL

    def validate(self) -> bool:
        """Validate the shape of the filter selections."""
        if not isinstance(self.day, str) or not self.day:
            raise ValueError("Day filter must be a non-empty string")

        if self.age not in AGE_VALUES:
            raise ValueError(f"Age filter must be one of: {list(AGE_VALUES)}")

        if self.price not in PRICE_VALUES:
            raise ValueError(f"Price filter must be one of: {list(PRICE_VALUES)}")

        if self.time not in TIME_RANGES and not CLOCK_TIME_PATTERN.match(self.time):
            raise ValueError(
                f"Time filter must be one of {list(TIME_RANGES)} or an HH:MM value"
            )

        if self.category is not None and not isinstance(self.category, str):
            for value in self.category:
                if not isinstance(value, str):
                    raise ValueError("All selected categories must be strings")

        return True

    @property
    def category_set(self) -> Optional[FrozenSet[str]]:
        return normalize_category_selection(self.category)


@dataclass
class DealFilters:
    """UI filter selections for the deals section."""

    category: CategorySelection = ALL

    def validate(self) -> bool:
        """Validate the shape of the filter selections."""
        if self.category is not None and not isinstance(self.category, str):
            for value in self.category:
                if not isinstance(value, str):
                    raise ValueError("All selected categories must be strings")

        return True

    @property
    def category_set(self) -> Optional[FrozenSet[str]]:
        return normalize_category_selection(self.category)


def validate_kids_age_range(kids_age_range: Tuple[int, int]) -> bool:
    """Validate a kids age sub-range such as (2, 5) or the prenatal sentinel."""
    if len(kids_age_range) != 2:
        raise ValueError("Kids age range must have exactly two values")

    low, high = kids_age_range
    if not isinstance(low, int) or not isinstance(high, int):
        raise ValueError("Kids age range values must be integers")

    if low > high:
        raise ValueError("Kids age range minimum cannot exceed maximum")

    if low < PRENATAL_AGE_RANGE[0]:
        raise ValueError("Kids age range minimum cannot be below -1")

    return True


@dataclass
class SearchResults:
    """Per-section results of a cross-section search."""

    classes: List[Listing] = field(default_factory=list)
    events: List[Listing] = field(default_factory=list)
    deals: List[Deal] = field(default_factory=list)
    services: List[Service] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.classes) + len(self.events) + len(self.deals) + len(self.services)

    def non_empty_sections(self) -> Dict[str, list]:
        """Sections that produced at least one match."""
        sections = {
            SECTION_CLASSES: self.classes,
            SECTION_EVENTS: self.events,
            "deals": self.deals,
            "services": self.services,
        }
        return {name: results for name, results in sections.items() if results}


@dataclass
class QuickFilterCounts:
    """Badge counts for the quick-filter chips."""

    happening_now: int
    free_upcoming: int
    this_weekend: int


@dataclass
class FilterSuggestion:
    """A way out of an empty result set."""

    filter_key: str
    label: str
    replacement: str
    count: Optional[int]
