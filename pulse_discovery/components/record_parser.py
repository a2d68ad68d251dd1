"""
Record parsing components for the discovery engine.

This module converts rows delivered by the backend (dicts with snake_case
or camelCase keys) into typed Listing, Deal, and Service records, cleaning
scraped HTML and coercing loosely typed numeric and date fields.
"""

import hashlib
import logging
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from bs4 import BeautifulSoup
from dateutil import parser as date_parser
from dateutil import tz

from ..models.deal import PLACEHOLDER_VENUE_NAME, Deal, DiscountType
from ..models.listing import Listing, ListingKind
from ..models.service import Service
from ..utils.error_handling import ErrorCategory, ErrorSeverity, get_error_tracker
from .category_normalizer import OTHER_CATEGORY

logger = logging.getLogger(__name__)

DEFAULT_START_TIME = "09:00"

# Leading "Monday, February 23, 2026, 4:00 PM - 6:00 PM, ..." blocks from the class scraper
SCHEDULE_PREFIX_PATTERN = re.compile(
    r"^(?:(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday),\s+\w+\s+\d{1,2},"
    r"\s+\d{4},\s+\d{1,2}:\d{2}\s+[AP]M\s*-\s*\d{1,2}:\d{2}\s+[AP]M[,\s]*)+",
    re.IGNORECASE,
)
BOOK_NOW_PATTERN = re.compile(r"^Book now\s*", re.IGNORECASE)

DISCOUNT_TEXT = {
    DiscountType.BOGO: "Buy One Get One",
    DiscountType.FREE_ITEM: "Free Item",
}


def strip_html(text: Optional[str]) -> str:
    """
    Convert scraped HTML to plain text.

    Line breaks, paragraphs, and list items become newlines, entities are
    decoded, and leading schedule blocks and "Book now" prefixes are removed.
    """
    if not text:
        return ""

    if "<" in text or "&" in text:
        soup = BeautifulSoup(text, "html.parser")
        for line_break in soup.find_all("br"):
            line_break.replace_with("\n")
        for item in soup.find_all("li"):
            item.insert(0, "• ")
            item.append("\n")
        for paragraph in soup.find_all("p"):
            paragraph.append("\n")
        clean_text = soup.get_text()
    else:
        clean_text = text

    clean_text = SCHEDULE_PREFIX_PATTERN.sub("", clean_text)
    clean_text = BOOK_NOW_PATTERN.sub("", clean_text)
    clean_text = re.sub(r"\n{3,}", "\n\n", clean_text)

    return clean_text.strip()


def _field(row: Dict[str, Any], *names: str) -> Any:
    """First non-None value among alternative key spellings."""
    for name in names:
        value = row.get(name)
        if value is not None:
            return value
    return None


def _to_float(value: Any) -> Optional[float]:
    """Lenient numeric coercion; unusable values become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        cleaned = value.strip().replace("$", "").replace(",", "").rstrip("%")
        if not cleaned:
            return None
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


class RecordParser:
    """Converts backend rows into engine records."""

    def __init__(self, timezone: str = "America/Vancouver"):
        """
        Initialize record parser.

        Args:
            timezone: IANA name of the local timezone listings are scheduled in
        """
        self.tzinfo = tz.gettz(timezone)
        if self.tzinfo is None:
            raise ValueError(f"Unknown timezone: {timezone}")

    # Listings

    def parse_listing(self, row: Dict[str, Any]) -> Listing:
        """
        Parse one listing row.

        Raises:
            ValueError: If the row is not a mapping
        """
        if not isinstance(row, dict):
            raise ValueError(f"Listing row must be a mapping, got {type(row).__name__}")

        title = str(row.get("title") or "").strip()
        start = self._parse_start(row)

        return Listing(
            id=self._record_id(row, title, start),
            title=title,
            start=start,
            kind=self._parse_kind(_field(row, "kind", "event_type", "eventType")),
            description=strip_html(row.get("description")),
            venue_id=_field(row, "venue_id", "venueId"),
            venue_name=_field(row, "venue_name", "venueName"),
            age_group=str(_field(row, "age_group", "ageGroup") or ""),
            category=str(row.get("category") or ""),
            tags=self._parse_tags(row.get("tags")),
            price=self._parse_price(row.get("price")),
            featured=_to_bool(row.get("featured")),
            recurrence=_field(row, "recurrence", "recurring"),
        )

    def _parse_start(self, row: Dict[str, Any]) -> Optional[datetime]:
        """Start instant in the local timezone, or None when unusable."""
        raw_start = _field(row, "start", "start_at", "startAt")

        try:
            if isinstance(raw_start, datetime):
                return self._localize(raw_start)

            if isinstance(raw_start, str) and raw_start.strip():
                return self._localize(date_parser.parse(raw_start))

            start_date = _field(row, "start_date", "startDate", "date")
            if isinstance(start_date, date) and not isinstance(start_date, datetime):
                start_date = start_date.isoformat()
            if not start_date:
                return None

            start_time = _field(row, "start_time", "startTime") or DEFAULT_START_TIME
            return self._localize(date_parser.parse(f"{start_date} {start_time}"))

        except (ValueError, OverflowError, TypeError) as e:
            logger.debug(f"Unparseable start for '{row.get('title')}': {e}")
            return None

    def _localize(self, moment: datetime) -> datetime:
        if moment.tzinfo is None:
            return moment.replace(tzinfo=self.tzinfo)
        return moment.astimezone(self.tzinfo)

    @staticmethod
    def _parse_kind(value: Any) -> Optional[ListingKind]:
        try:
            return ListingKind(str(value).strip().lower())
        except ValueError:
            return None

    @staticmethod
    def _parse_tags(value: Any) -> List[str]:
        if not value:
            return []
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return [str(tag) for tag in value if tag]

    @staticmethod
    def _parse_price(value: Any) -> Optional[str]:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return _format_number(value)
        text = str(value).strip()
        return text or None

    # Deals

    def parse_deal(self, row: Dict[str, Any]) -> Deal:
        """
        Parse one deal row.

        Raises:
            ValueError: If the row is not a mapping
        """
        if not isinstance(row, dict):
            raise ValueError(f"Deal row must be a mapping, got {type(row).__name__}")

        title = str(row.get("title") or "").strip()
        discount_type = self._parse_discount_type(_field(row, "discount_type", "discountType"))
        discount_value = _to_float(_field(row, "discount_value", "discountValue"))
        discount = _field(row, "discount")
        if not discount:
            discount = self._discount_text(discount_type, discount_value)

        venue_id = _field(row, "venue_id", "venueId")
        venue_name = _field(row, "venue_name", "venueName", "business_name")
        if not venue_name and not venue_id:
            venue_name = PLACEHOLDER_VENUE_NAME

        return Deal(
            id=self._record_id(row, title, None),
            title=title,
            description=strip_html(row.get("description")),
            category=row.get("category") or OTHER_CATEGORY,
            venue_id=venue_id,
            venue_name=venue_name,
            schedule=str(row.get("schedule") or ""),
            valid_until=self._parse_valid_until(_field(row, "valid_until", "validUntil")),
            discount_type=discount_type,
            discount_value=discount_value,
            discount=str(discount),
            savings_percent=_to_float(_field(row, "savings_percent", "savingsPercent")),
            original_price=_to_float(_field(row, "original_price", "originalPrice")),
            deal_price=_to_float(_field(row, "deal_price", "dealPrice")),
            featured=_to_bool(row.get("featured")),
            terms=str(_field(row, "terms", "terms_conditions") or ""),
        )

    @staticmethod
    def _parse_discount_type(value: Any) -> Optional[DiscountType]:
        if not value:
            return None
        try:
            return DiscountType(str(value).strip().lower())
        except ValueError:
            logger.debug(f"Unknown discount type: {value}")
            return None

    @staticmethod
    def _discount_text(
        discount_type: Optional[DiscountType], discount_value: Optional[float]
    ) -> str:
        """Human discount text derived from the structured fields."""
        if discount_type == DiscountType.PERCENT and discount_value is not None:
            return f"{_format_number(discount_value)}% off"
        if discount_type == DiscountType.FIXED and discount_value is not None:
            return f"${_format_number(discount_value)} off"
        return DISCOUNT_TEXT.get(discount_type, "Special Offer")

    @staticmethod
    def _parse_valid_until(value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        text = str(value).strip()
        return text or None

    # Services

    def parse_service(self, row: Dict[str, Any]) -> Service:
        """
        Parse one service row.

        Raises:
            ValueError: If the row is not a mapping or has no name
        """
        if not isinstance(row, dict):
            raise ValueError(f"Service row must be a mapping, got {type(row).__name__}")

        name = str(row.get("name") or "").strip()
        if not name:
            raise ValueError("Service name cannot be empty")

        return Service(
            name=name,
            category=str(row.get("category") or ""),
            address=row.get("address"),
            id=None if row.get("id") is None else str(row.get("id")),
        )

    # Batches

    def parse_listings(self, rows: Iterable[Dict[str, Any]]) -> List[Listing]:
        return self._parse_batch(rows, self.parse_listing, "listing")

    def parse_deals(self, rows: Iterable[Dict[str, Any]]) -> List[Deal]:
        return self._parse_batch(rows, self.parse_deal, "deal")

    def parse_services(self, rows: Iterable[Dict[str, Any]]) -> List[Service]:
        return self._parse_batch(rows, self.parse_service, "service")

    def _parse_batch(self, rows, parse, record_type: str) -> list:
        """Parse rows, skipping and recording the ones that fail."""
        records = []
        rows = list(rows)

        for index, row in enumerate(rows):
            try:
                records.append(parse(row))
            except ValueError as e:
                logger.warning(f"Skipping malformed {record_type} row {index}: {e}")
                get_error_tracker().record_error(
                    component="record.parser",
                    category=ErrorCategory.DATA_VALIDATION,
                    severity=ErrorSeverity.LOW,
                    message=f"Malformed {record_type} row skipped: {e}",
                    exception=e,
                    context={"record_type": record_type, "index": index},
                )

        logger.info(f"Parsed {len(records)} of {len(rows)} {record_type} rows")
        return records

    @staticmethod
    def _record_id(row: Dict[str, Any], title: str, start: Optional[datetime]) -> str:
        """Row id, or a stable hash of the row's identifying fields."""
        if row.get("id") is not None:
            return str(row["id"])

        content = f"{title}{start.isoformat() if start else ''}{row.get('venue_id') or ''}"
        return f"rec_{hashlib.md5(content.encode()).hexdigest()[:8]}"
