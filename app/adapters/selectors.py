"""
Selector cascades for the DOM-Heuristic Extractor.

Each field is an ordered list of CSS selectors paired with a parser that
doubles as the validity predicate: a parser returning None rejects the
element and the cascade moves on. Kept as data so the lists can be tested
and extended without touching extraction logic.
"""
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from app.utils.parsing import clip_description, parse_count, parse_number, parse_title


@dataclass(frozen=True)
class FieldRule:
    """Ordered selectors for one field plus the parser/validity predicate."""
    field: str
    selectors: Tuple[str, ...]
    parse: Callable[[str], Optional[Any]]


TITLE_RULE = FieldRule(
    field="title",
    selectors=(
        'h1[data-pl="product-title"]',
        ".product-title-text",
        "h1.pdp-product-name",
        ".product-title",
        '[data-pl="product-title"]',
        "h1",
        ".pdp-product-title",
    ),
    parse=parse_title,
)

SALE_PRICE_RULE = FieldRule(
    field="sale_price",
    selectors=(
        ".price-current",
        ".notranslate",
        '[data-pl="main-price"]',
        ".price",
        ".pdp-price",
        ".product-price-value",
    ),
    parse=parse_number,
)

ORIGINAL_PRICE_RULE = FieldRule(
    field="original_price",
    selectors=(
        ".price-original",
        ".price-was",
        '[data-pl="origin-price"]',
        ".price-before",
        ".original-price",
    ),
    parse=parse_number,
)

RATING_RULE = FieldRule(
    field="rating",
    selectors=(
        '[data-pl="rating-score"]',
        ".overview-rating-average",
        ".rating-value",
        ".pdp-review-score",
    ),
    parse=parse_number,
)

REVIEWS_RULE = FieldRule(
    field="reviews",
    selectors=(
        '[data-pl="reviews-count"]',
        ".reviews-count",
        ".review-count",
        ".pdp-review-count",
    ),
    parse=parse_count,
)

DESCRIPTION_RULE = FieldRule(
    field="description",
    selectors=(
        ".product-description",
        ".detail-desc",
        '[data-pl="description"]',
        ".product-detail-desc",
    ),
    parse=clip_description,
)

TEXT_RULES: Tuple[FieldRule, ...] = (
    TITLE_RULE,
    SALE_PRICE_RULE,
    ORIGINAL_PRICE_RULE,
    RATING_RULE,
    REVIEWS_RULE,
    DESCRIPTION_RULE,
)

IMAGE_SELECTORS: Tuple[str, ...] = (
    ".images-view img",
    ".product-images img",
    ".pdp-product-img-container img",
    "[data-src]",
    "[data-image]",
)

# Preference order when reading an image element
IMAGE_ATTRIBUTES: Tuple[str, ...] = ("data-src", "src", "data-image")

SPEC_CONTAINER_SELECTORS: Tuple[str, ...] = (
    ".product-prop",
    ".props-item",
    ".spec-item",
    ".product-parameter-item",
)

SPEC_LABEL_SELECTOR = ".props-name, .spec-label, dt, .product-parameter-name"
SPEC_VALUE_SELECTOR = ".props-value, .spec-value, dd, .product-parameter-value"
