"""
URL Identifier Extractor.
Gates the pipeline: a URL with no recognizable product ID is never fetched.
"""
import re
from typing import Optional, Tuple

# Ordered: item page with slug, bare numeric page, store product page
IDENTIFIER_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"/item/[^/]*?(\d+)\.html"),
    re.compile(r"/(\d+)\.html"),
    re.compile(r"/store/product/[^/]*?(\d+)\.html"),
)


def extract_product_id(url: Optional[str]) -> Optional[str]:
    """
    Return the numeric product ID from a product URL, or None.

    The query string and fragment are ignored. Never raises.
    """
    if not url:
        return None

    clean_url = url.split("?", 1)[0].split("#", 1)[0]

    for pattern in IDENTIFIER_PATTERNS:
        match = pattern.search(clean_url)
        if match:
            return match.group(1)

    return None
