"""
Core components of the Pulse Discovery engine.

This module contains category normalization, day-window resolution, deal
scoring, the listing and deal filter engines, cross-section search, and
record parsing.
"""

from .category_normalizer import normalize_deal_category
from .deal_filter import DealFilterEngine, is_deal_expired
from .deal_scorer import DealScorer, DealValueExtractor, is_real_deal, score_deal
from .event_filter import EventFilterEngine
from .record_parser import RecordParser, strip_html
from .related_deals import find_related_deals
from .search_engine import CrossSectionSearchEngine, filter_services
from .time_windows import TimeWindow, resolve_day_window
from .venue_directory import VenueDirectory

__all__ = [
    "normalize_deal_category",
    "resolve_day_window",
    "TimeWindow",
    "DealScorer",
    "DealValueExtractor",
    "score_deal",
    "is_real_deal",
    "EventFilterEngine",
    "DealFilterEngine",
    "is_deal_expired",
    "CrossSectionSearchEngine",
    "filter_services",
    "find_related_deals",
    "RecordParser",
    "strip_html",
    "VenueDirectory",
]
