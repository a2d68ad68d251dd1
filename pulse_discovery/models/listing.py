"""
Listing (event/class) data models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class ListingKind(Enum):
    """Kinds of scheduled listings."""

    EVENT = "event"
    CLASS = "class"


@dataclass
class Listing:
    """An event or class with a single start instant."""

    id: str
    title: str
    start: Optional[datetime]
    kind: Optional[ListingKind]
    description: str = ""
    venue_id: Optional[str] = None
    venue_name: Optional[str] = None
    age_group: str = ""
    category: str = ""
    tags: List[str] = field(default_factory=list)
    price: Optional[str] = None
    featured: bool = False
    recurrence: Optional[str] = None

    @property
    def has_valid_start(self) -> bool:
        """Whether the start instant is a usable datetime."""
        return isinstance(self.start, datetime)

    @property
    def is_free(self) -> bool:
        """Whether the price is the literal string "free"."""
        return isinstance(self.price, str) and self.price.strip().lower() == "free"
