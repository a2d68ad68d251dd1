"""Maps raw scraped deal categories onto the closed set of UI categories."""

from typing import Dict, Optional

OTHER_CATEGORY = "Other"

DEAL_CATEGORIES = [
    "Food & Drink",
    "Fitness",
    "Wellness",
    "Family",
    "Entertainment",
    "Retail",
    "Beauty",
    "Services",
]

DEAL_CATEGORY_MAP: Dict[str, str] = {
    # Food & Drink
    "Food & Drink": "Food & Drink",
    "Restaurants & Dining": "Food & Drink",
    "Cafes & Bakeries": "Food & Drink",
    "Breweries & Distilleries": "Food & Drink",
    "Craft Brewery": "Food & Drink",
    "Grocery & Markets": "Food & Drink",
    "Farms & Markets": "Food & Drink",
    "Catering": "Food & Drink",
    # Fitness
    "Fitness": "Fitness",
    "Fitness & Gyms": "Fitness",
    "Fitness & Wellness": "Fitness",
    "Yoga & Pilates": "Fitness",
    # Wellness
    "Wellness": "Wellness",
    "Health & Wellness": "Wellness",
    "Medical Clinics": "Wellness",
    "Dental": "Wellness",
    "Pharmacy": "Wellness",
    "Veterinary": "Wellness",
    # Family
    "Family": "Family",
    "Childcare": "Family",
    "Childcare & Education": "Family",
    "Middle School": "Family",
    # Entertainment
    "Entertainment": "Entertainment",
    "Attractions": "Entertainment",
    "Arts & Culture": "Entertainment",
    "Recreation & Sports": "Entertainment",
    # Retail
    "Retail": "Retail",
    "Retail & Shopping": "Retail",
    "Outdoor Gear & Shops": "Retail",
    # Beauty
    "Beauty": "Beauty",
    "Salons & Spas": "Beauty",
    "Massage & Bodywork": "Beauty",
    # Services
    "Services": "Services",
    "Auto Services": "Services",
    "Home Improvement": "Services",
    "Professional Services": "Services",
    "Real Estate": "Services",
    "Technology & IT": "Services",
}


def normalize_deal_category(raw: Optional[str]) -> str:
    """Return the UI category for a raw category, or "Other" if unknown."""
    if not raw or not isinstance(raw, str):
        return OTHER_CATEGORY
    return DEAL_CATEGORY_MAP.get(raw, OTHER_CATEGORY)
