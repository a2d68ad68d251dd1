"""
Deal data models.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Shown for deals that carry neither a business name nor a venue id
PLACEHOLDER_VENUE_NAME = "Local Business"


class DiscountType(Enum):
    """Structured discount types."""

    PERCENT = "percent"
    FIXED = "fixed"
    FREE_ITEM = "free_item"
    BOGO = "bogo"
    SPECIAL = "special"


class SavingsType(Enum):
    """Kinds of savings badges shown on deal cards."""

    PERCENT = "percent"
    DOLLAR = "dollar"
    FREE = "free"
    BOGO = "bogo"
    PRICE = "price"


@dataclass
class Deal:
    """A time-bounded promotional offer tied to a venue."""

    id: str
    title: str
    description: str = ""
    category: Optional[str] = None
    venue_id: Optional[str] = None
    venue_name: Optional[str] = None
    schedule: str = ""
    valid_until: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[float] = None
    discount: str = ""
    savings_percent: Optional[float] = None
    original_price: Optional[float] = None
    deal_price: Optional[float] = None
    featured: bool = False
    terms: str = ""

    @property
    def venue_identity(self) -> Optional[str]:
        """
        Venue name, falling back to the venue identifier.

        The placeholder name does not identify a venue.
        """
        name = self.venue_name if self.venue_name != PLACEHOLDER_VENUE_NAME else None
        return name or self.venue_id or None


@dataclass(frozen=True)
class SavingsDisplay:
    """Short savings label for a deal card, e.g. "40% OFF"."""

    text: str
    type: SavingsType
