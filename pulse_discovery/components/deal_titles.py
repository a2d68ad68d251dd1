"""Smart display titles for deal cards."""

import re

from ..models.deal import Deal

MAX_TITLE_LENGTH = 45
TRUNCATE_AT = 42
MIN_WORD_BREAK = 25
FALLBACK_TITLE = "Special Offer"

GENERIC_TITLES = [
    "happy hour",
    "family night",
    "date night",
    "special",
    "deal",
    "promo",
    "offer",
]

VALUE_MARKER = re.compile(r"\$\d+|\d+%|\bfree\b|\bhalf\s+price\b|\bbogo\b", re.IGNORECASE)


def generate_smart_deal_title(deal: Deal, venue_name: str = "") -> str:
    """
    Produce a short, descriptive deal title.

    Titles that already state their value are kept; generic titles get the
    venue appended; long titles are cut at a word break.
    """
    title = deal.title or ""
    is_generic = title.lower().strip() in GENERIC_TITLES

    if VALUE_MARKER.search(title) and len(title) <= MAX_TITLE_LENGTH and not is_generic:
        return title

    if is_generic and venue_name:
        return f"{title} @ {venue_name}"

    if len(title) > MAX_TITLE_LENGTH:
        shortened = title[:TRUNCATE_AT]
        last_space = shortened.rfind(" ")
        if last_space > MIN_WORD_BREAK:
            return shortened[:last_space] + "..."
        return shortened + "..."

    return title or FALLBACK_TITLE
