"""
Data models for the Pulse Discovery engine.

This module contains the record types (listings, deals, services, venues),
the filter criteria supplied by callers, and result containers.
"""

from .config import EngineConfig
from .deal import Deal, DiscountType, SavingsDisplay, SavingsType
from .filter import (
    DealFilters,
    FilterSuggestion,
    ListingFilters,
    QuickFilterCounts,
    SearchResults,
)
from .listing import Listing, ListingKind
from .service import Service, Venue

__all__ = [
    "Listing",
    "ListingKind",
    "Deal",
    "DiscountType",
    "SavingsDisplay",
    "SavingsType",
    "Service",
    "Venue",
    "ListingFilters",
    "DealFilters",
    "SearchResults",
    "QuickFilterCounts",
    "FilterSuggestion",
    "EngineConfig",
]
