"""Automatic expense categorization from free-text descriptions"""

import logging
from dataclasses import dataclass
from typing import List, Optional
from homefin.domain.models import CategorySuggestion

logger = logging.getLogger(__name__)

MIN_MATCH_SCORE = 0.3
FALLBACK_CATEGORY = "Other"
FALLBACK_CONFIDENCE = 0.1


@dataclass(frozen=True)
class CategoryRule:
    keywords: tuple[str, ...]
    category: str
    subcategory: Optional[str]
    confidence: float


# Order matters only for ties: the first rule reaching the best score wins
CATEGORY_RULES: List[CategoryRule] = [
    # Housing
    CategoryRule(("rent", "landlord", "lease", "apartment", "housing"), "Housing", "Rent", 0.95),
    CategoryRule(("insurance", "renters insurance", "home insurance"), "Housing", "Insurance", 0.9),
    # Food & dining
    CategoryRule(
        ("starbucks", "coffee", "cafe", "dunkin", "peet's", "dutch bros", "tim hortons", "caribou coffee"),
        "Food",
        "Coffee",
        0.95,
    ),
    CategoryRule(
        ("whole foods", "trader joe's", "safeway", "kroger", "albertsons", "grocery", "supermarket", "market"),
        "Food",
        "Groceries",
        0.9,
    ),
    CategoryRule(
        (
            "restaurant",
            "dining",
            "chipotle",
            "mcdonald's",
            "burger king",
            "taco bell",
            "subway",
            "panera",
            "chick-fil-a",
        ),
        "Food",
        "Restaurants",
        0.85,
    ),
    # Transportation
    CategoryRule(("uber", "lyft", "taxi", "cab", "rideshare"), "Transportation", "Rideshare", 0.95),
    CategoryRule(
        ("shell", "chevron", "exxon", "mobil", "bp", "gas", "fuel", "gasoline", "petrol"),
        "Transportation",
        "Gas",
        0.9,
    ),
    CategoryRule(("parking", "park", "garage"), "Transportation", "Parking", 0.85),
    # Entertainment
    CategoryRule(
        ("netflix", "hulu", "disney+", "amazon prime", "hbo", "spotify", "apple music", "streaming"),
        "Entertainment",
        "Subscriptions",
        0.95,
    ),
    CategoryRule(("cinema", "movie", "theater", "theatre", "amc", "regal"), "Entertainment", "Movies", 0.9),
    # Utilities
    CategoryRule(("electric", "electricity", "power", "pge", "utility"), "Utilities", "Electric", 0.9),
    CategoryRule(("internet", "comcast", "xfinity", "at&t", "verizon", "spectrum"), "Utilities", "Internet", 0.9),
    CategoryRule(("phone", "mobile", "t-mobile", "sprint", "wireless"), "Utilities", "Phone", 0.85),
    # Shopping
    CategoryRule(
        ("amazon", "ebay", "target", "walmart", "costco", "best buy"),
        "Shopping",
        "Online Shopping",
        0.8,
    ),
]


def auto_categorize_expense(description: str, amount: float) -> CategorySuggestion:
    """
    Suggest a category by keyword matching.

    Each contained keyword scores rule_confidence * len(keyword) / len(description), so a
    keyword covering most of a short merchant string beats one buried in a long note.
    Scores at or below 0.3 fall back to "Other" with confidence 0.1. `amount` is accepted
    for API symmetry and does not affect the result.
    """
    lowered = description.lower()

    best_rule: Optional[CategoryRule] = None
    best_score = 0.0

    for rule in CATEGORY_RULES:
        for keyword in rule.keywords:
            if keyword in lowered:
                score = rule.confidence * (len(keyword) / len(description))
                if score > best_score:
                    best_score = score
                    best_rule = rule

    if best_rule and best_score > MIN_MATCH_SCORE:
        return CategorySuggestion(
            category=best_rule.category,
            subcategory=best_rule.subcategory,
            confidence=min(best_score, 1.0),
        )

    return CategorySuggestion(category=FALLBACK_CATEGORY, confidence=FALLBACK_CONFIDENCE)


def learn_from_user_correction(
    description: str,
    original_category: str,
    corrected_category: str,
    corrected_subcategory: Optional[str] = None,
) -> None:
    """Record a user's category correction; rules are static, so this only logs it"""
    logger.info(
        "Category correction recorded",
        extra={
            "step": "categorization_correction",
            "description": description,
            "from_category": original_category,
            "to_category": corrected_category,
            "to_subcategory": corrected_subcategory,
        },
    )
