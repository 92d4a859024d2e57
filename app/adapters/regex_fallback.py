"""
Regex-Fallback Extractor.

Last resort over the raw page text. Runs after every other strategy and only
patches a sale price or image list that is still missing.
"""
import math
import re
from typing import List, Optional, Tuple

from app.models.product import PartialProduct
from app.utils.logger import LayerLogger

_AMOUNT = r"(\d[\d,]*(?:\.\d+)?)"

# Tried in order; the first positive match wins
PRICE_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = (
    ("currency_prefixed", re.compile(r"(?:USD|US\s*\$|[$€£])\s*\$?\s*" + _AMOUNT, re.I)),
    ("currency_suffixed", re.compile(_AMOUNT + r"\s*(?:USD|EUR|GBP|[$€£])", re.I)),
    ("quoted_key", re.compile(r'"(?:salePrice|price|minPrice|minAmount)"\s*:\s*"?\s*' + _AMOUNT, re.I)),
    ("labeled", re.compile(r"\bprice\s*:\s*\$?\s*" + _AMOUNT, re.I)),
)

IMAGE_URL_RE = re.compile(r"https?://[^\"'\s<>]+?\.(?:jpg|jpeg|png|webp)\b", re.I)
EXCLUDED_IMAGE_MARKERS = ("placeholder", "logo", "icon")
MAX_FALLBACK_IMAGES = 10


class RegexFallbackExtractor:
    """Patch missing sale price and images from raw page text."""

    def __init__(self, logger: Optional[LayerLogger] = None):
        self.logger = logger or LayerLogger("regex_fallback")

    def patch(self, html: str, record: PartialProduct) -> PartialProduct:
        """Fill record.sale_price and record.images in place when still missing."""
        if not record.sale_price:
            self.logger.log_fallback(
                from_source="structured_extraction",
                to_source="regex_price",
                reason="sale price missing or zero",
            )
            price = self.find_price(html)
            if price is not None:
                record.sale_price = price

        if not record.images:
            self.logger.log_fallback(
                from_source="structured_extraction",
                to_source="regex_images",
                reason="no images found",
            )
            record.images = self.find_images(html)

        return record

    def find_price(self, html: str) -> Optional[float]:
        if not html:
            return None

        for name, pattern in PRICE_PATTERNS:
            for match in pattern.finditer(html):
                try:
                    value = float(match.group(1).replace(",", ""))
                except ValueError:
                    continue
                if math.isfinite(value) and value > 0:
                    self.logger.log_decision(
                        decision="regex_price_matched",
                        reason=name,
                        price=value,
                    )
                    return value
        return None

    def find_images(self, html: str) -> List[str]:
        if not html:
            return []

        # dict preserves first-seen order while deduplicating
        unique = dict.fromkeys(IMAGE_URL_RE.findall(html))
        images = [
            url for url in unique
            if not any(marker in url.lower() for marker in EXCLUDED_IMAGE_MARKERS)
        ]
        return images[:MAX_FALLBACK_IMAGES]
