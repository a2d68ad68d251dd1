"""
Deal quality scoring and savings labels.

Deals are ranked by the economic value that can be extracted from their
structured discount fields, falling back to figures parsed out of the
title and discount text.
"""

import logging
import math
import re
from typing import Optional

from ..models.deal import Deal, DiscountType, SavingsDisplay, SavingsType

logger = logging.getLogger(__name__)

REAL_DEAL_THRESHOLD = 15

# (minimum, bonus) pairs; the first matching tier wins
PERCENT_TIERS = [(50, 100), (40, 85), (30, 70), (20, 55), (10, 40)]
DOLLAR_TIERS = [(100, 90), (50, 70), (25, 50), (10, 30)]

FREE_BONUS = 45
BOGO_BONUS = 60
HALF_PRICE_BONUS = 55
DEAL_PRICE_BONUS = 10
BOTH_PRICES_BONUS = 15
FEATURED_BONUS = 25

VAGUE_SCORE_CEILING = 20
VAGUE_PENALTY = 20
VAGUE_SCORE_FLOOR = 5

# Parsed values below this are too small to headline a card
MIN_PARSED_DISPLAY_VALUE = 10


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _format_amount(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def _positive(value: Optional[float]) -> float:
    """Numeric field value, with missing or non-positive values as 0."""
    if value is None or value <= 0:
        return 0
    return value


class DealValueExtractor:
    """Extracts discount magnitudes from structured fields and free text."""

    PERCENT_PATTERN = r"(\d+)\s*%"
    DOLLAR_PATTERN = r"\$(\d+)"
    # Dollar savings phrasing used for display labels
    SAVE_DOLLAR_PATTERNS = [
        r"save\s*\$(\d+)",
        r"\$(\d+)\s*off",
    ]
    FREE_KEYWORDS = ["free"]
    BOGO_KEYWORDS = ["bogo", "buy one get one"]
    HALF_PRICE_KEYWORDS = ["half price", "1/2 price"]

    def __init__(self):
        """Initialize value extractor."""
        self.percent_regex = re.compile(self.PERCENT_PATTERN)
        self.dollar_regex = re.compile(self.DOLLAR_PATTERN)
        self.save_dollar_regexes = [
            re.compile(pattern, re.IGNORECASE) for pattern in self.SAVE_DOLLAR_PATTERNS
        ]

    @staticmethod
    def title_text(deal: Deal) -> str:
        return (deal.title or "").lower()

    def search_text(self, deal: Deal) -> str:
        """Lower-cased title and discount text, space separated."""
        return f"{self.title_text(deal)} {(deal.discount or '').lower()}"

    def parse_percent(self, text: str) -> int:
        """First "NN%" figure in the text, or 0."""
        match = self.percent_regex.search(text)
        return int(match.group(1)) if match else 0

    def parse_dollar(self, text: str) -> int:
        """First "$NN" figure in the text, or 0."""
        match = self.dollar_regex.search(text)
        return int(match.group(1)) if match else 0

    def parse_save_dollar(self, text: str) -> int:
        """Dollar figure from "save $N" or "$N off" phrasing, or 0."""
        for regex in self.save_dollar_regexes:
            match = regex.search(text)
            if match:
                return int(match.group(1))
        return 0

    def effective_percent(self, deal: Deal) -> float:
        """
        Resolve the percentage discount.

        Precedence: structured percent discount, then ``savings_percent``,
        then a percentage parsed from the title and discount text.
        """
        discount_value = _positive(deal.discount_value)
        if discount_value and deal.discount_type == DiscountType.PERCENT:
            return discount_value

        savings_percent = _positive(deal.savings_percent)
        if savings_percent:
            return savings_percent

        return self.parse_percent(self.search_text(deal))

    def effective_dollar(self, deal: Deal) -> float:
        """
        Resolve the dollar discount.

        Precedence: structured fixed discount, then a dollar amount parsed
        from the title and discount text.
        """
        discount_value = _positive(deal.discount_value)
        if discount_value and deal.discount_type == DiscountType.FIXED:
            return discount_value

        return self.parse_dollar(self.search_text(deal))

    @staticmethod
    def actual_savings(deal: Deal) -> float:
        """
        Original minus deal price.

        Only computed when a deal price is present; a deal price of 0 means
        free, a missing deal price means unknown.
        """
        original_price = _positive(deal.original_price)
        if original_price and deal.deal_price is not None:
            return original_price - deal.deal_price
        return 0

    def has_keyword(self, deal: Deal, keywords) -> bool:
        title = self.title_text(deal)
        return any(keyword in title for keyword in keywords)

    def is_free(self, deal: Deal) -> bool:
        return (
            self.has_keyword(deal, self.FREE_KEYWORDS)
            or deal.discount_type == DiscountType.FREE_ITEM
        )

    def is_bogo(self, deal: Deal) -> bool:
        return self.has_keyword(deal, self.BOGO_KEYWORDS)

    def is_half_price(self, deal: Deal) -> bool:
        return self.has_keyword(deal, self.HALF_PRICE_KEYWORDS)


class DealScorer:
    """Scores deals by extractable value and derives savings labels."""

    def __init__(self, threshold: int = REAL_DEAL_THRESHOLD):
        """
        Initialize deal scorer.

        Args:
            threshold: Minimum score for a deal to count as a real deal
        """
        self.threshold = threshold
        self.extractor = DealValueExtractor()

    def score(self, deal: Deal) -> int:
        """Compute the non-negative quality score of a deal."""
        extractor = self.extractor
        effective_percent = extractor.effective_percent(deal)
        effective_dollar = extractor.effective_dollar(deal)
        actual_savings = extractor.actual_savings(deal)

        score = 0

        for minimum, bonus in PERCENT_TIERS:
            if effective_percent >= minimum:
                score += bonus
                break

        for minimum, bonus in DOLLAR_TIERS:
            if effective_dollar >= minimum or actual_savings >= minimum:
                score += bonus
                break

        if extractor.is_free(deal):
            score += FREE_BONUS
        if extractor.is_bogo(deal):
            score += BOGO_BONUS
        if extractor.is_half_price(deal):
            score += HALF_PRICE_BONUS

        deal_price = _positive(deal.deal_price)
        if deal_price:
            score += DEAL_PRICE_BONUS
            if _positive(deal.original_price):
                score += BOTH_PRICES_BONUS

        if deal.featured:
            score += FEATURED_BONUS

        if (
            deal.discount_type == DiscountType.SPECIAL
            and not effective_percent
            and not effective_dollar
            and score < VAGUE_SCORE_CEILING
        ):
            score = max(VAGUE_SCORE_FLOOR, score - VAGUE_PENALTY)

        logger.debug(f"Score for deal {deal.id}: {score}")
        return score

    def is_real_deal(self, deal: Deal) -> bool:
        """Check whether the deal carries enough concrete value to show."""
        return self.score(deal) >= self.threshold

    def savings_display(self, deal: Deal) -> Optional[SavingsDisplay]:
        """
        Derive the headline savings label for a deal card.

        The first applicable rule wins, in this order: structured percent,
        savings percent, structured fixed discount, original minus deal
        price, parsed percent (>= 10), parsed "save $N"/"$N off" (>= 10),
        FREE, BOGO, half price, then the bare deal price.
        """
        extractor = self.extractor
        discount_value = _positive(deal.discount_value)
        savings_percent = _positive(deal.savings_percent)
        original_price = _positive(deal.original_price)
        deal_price = _positive(deal.deal_price)

        if deal.discount_type == DiscountType.PERCENT and discount_value:
            return SavingsDisplay(
                f"{_round_half_up(discount_value)}% OFF", SavingsType.PERCENT
            )
        if savings_percent:
            return SavingsDisplay(
                f"{_round_half_up(savings_percent)}% OFF", SavingsType.PERCENT
            )

        if deal.discount_type == DiscountType.FIXED and discount_value:
            return SavingsDisplay(
                f"SAVE ${_round_half_up(discount_value)}", SavingsType.DOLLAR
            )
        if (
            original_price
            and deal.deal_price is not None
            and original_price > deal.deal_price
        ):
            savings = _round_half_up(original_price - deal.deal_price)
            return SavingsDisplay(f"SAVE ${savings}", SavingsType.DOLLAR)

        parsed_percent = extractor.parse_percent(extractor.search_text(deal))
        if parsed_percent >= MIN_PARSED_DISPLAY_VALUE:
            return SavingsDisplay(f"{parsed_percent}% OFF", SavingsType.PERCENT)

        parsed_dollar = extractor.parse_save_dollar(extractor.title_text(deal))
        if parsed_dollar >= MIN_PARSED_DISPLAY_VALUE:
            return SavingsDisplay(f"SAVE ${parsed_dollar}", SavingsType.DOLLAR)

        if extractor.is_free(deal):
            return SavingsDisplay("FREE", SavingsType.FREE)
        if extractor.is_bogo(deal):
            return SavingsDisplay("BOGO", SavingsType.BOGO)
        if extractor.is_half_price(deal):
            return SavingsDisplay("50% OFF", SavingsType.PERCENT)

        if deal_price:
            return SavingsDisplay(f"${_format_amount(deal_price)}", SavingsType.PRICE)

        return None


_default_scorer = DealScorer()


def score_deal(deal: Deal) -> int:
    """Score a deal with the default threshold scorer."""
    return _default_scorer.score(deal)


def is_real_deal(deal: Deal) -> bool:
    """Check a deal against the default real-deal threshold."""
    return _default_scorer.is_real_deal(deal)


def get_savings_display(deal: Deal) -> Optional[SavingsDisplay]:
    """Savings label using the default scorer."""
    return _default_scorer.savings_display(deal)
