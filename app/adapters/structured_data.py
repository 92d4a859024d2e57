"""
Structured-Data Extractor.

Reads schema.org Product data from <script type="application/ld+json">
blocks. Scripts that fail to parse are skipped; the first Product node wins
and multiple Product nodes are never merged.
"""
import re
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from app.models.product import PartialProduct
from app.utils.logger import LayerLogger
from app.utils.parsing import to_float, to_int, to_text, try_json_loads

JSONLD_TYPE_RE = re.compile(r"application/ld\+json", re.I)


def flatten_jsonld(data: Any) -> List[Dict[str, Any]]:
    """
    Flatten JSON-LD structure into a list of schema nodes.

    Handles single objects with @type, @graph containers and arrays.
    """
    nodes = []

    if isinstance(data, dict):
        if "@graph" in data:
            nodes.extend(flatten_jsonld(data["@graph"]))
        if "@type" in data:
            nodes.append(data)

    elif isinstance(data, list):
        for item in data:
            nodes.extend(flatten_jsonld(item))

    return nodes


def is_product_node(node: Dict[str, Any]) -> bool:
    schema_type = node.get("@type")
    if isinstance(schema_type, list):
        return "Product" in schema_type
    return schema_type == "Product"


def normalize_jsonld_images(image_data: Any) -> List[str]:
    """
    Normalize JSON-LD image field to list of URLs.

    Handles:
    - String: single URL
    - List[str]: array of URLs
    - List[dict]: array of ImageObject
    - dict: single ImageObject
    """
    images = []

    if isinstance(image_data, str):
        images.append(image_data)
    elif isinstance(image_data, list):
        for img in image_data:
            images.extend(normalize_jsonld_images(img))
    elif isinstance(image_data, dict):
        url = image_data.get("url") or image_data.get("@id") or image_data.get("contentUrl")
        if isinstance(url, str):
            images.append(url)

    return [img for img in images if img]


class StructuredDataExtractor:
    """Extract a partial product from linked-data scripts."""

    def __init__(self, logger: Optional[LayerLogger] = None):
        self.logger = logger or LayerLogger("structured_data")

    def extract(self, soup: BeautifulSoup) -> PartialProduct:
        """Return the first Product node's fields, or an empty partial."""
        node = self.find_product_node(soup)
        if node is None:
            self.logger.log_action(
                "jsonld_extraction",
                "no_product_found",
            )
            return PartialProduct()

        result = self.parse_product(node)
        self.logger.log_extraction(
            source="structured_data",
            fields_present=result.get_present_fields(),
            fields_missing=result.get_missing_fields(),
        )
        return result

    def find_product_node(self, soup: BeautifulSoup) -> Optional[Dict[str, Any]]:
        """Return the first Product node across all parseable scripts."""
        for index, script in enumerate(soup.find_all("script", attrs={"type": JSONLD_TYPE_RE})):
            raw = script.string or script.get_text()
            data = try_json_loads(raw.strip() if raw else None)
            if data is None:
                self.logger.log_parse_failure(
                    source="structured_data",
                    error="invalid JSON-LD script",
                    script_index=index,
                )
                continue

            for node in flatten_jsonld(data):
                if is_product_node(node):
                    return node

        return None

    def parse_product(self, data: Dict[str, Any]) -> PartialProduct:
        """
        Parse a JSON-LD Product object into a partial product.

        Linked data rarely distinguishes sale from list price, so the offer
        price fills both.
        """
        price = self._parse_offer_price(data.get("offers"))

        rating = data.get("aggregateRating")
        if not isinstance(rating, dict):
            rating = {}

        return PartialProduct(
            title=to_text(data.get("name")),
            sale_price=price,
            original_price=price,
            rating=to_float(rating.get("ratingValue")),
            reviews=to_int(rating.get("reviewCount") or rating.get("ratingCount")),
            images=normalize_jsonld_images(data.get("image")),
            description=to_text(data.get("description")),
        )

    def _parse_offer_price(self, offers: Any) -> Optional[float]:
        # Handle array of offers
        if isinstance(offers, list) and len(offers) > 0:
            offers = offers[0]

        if not isinstance(offers, dict):
            return None

        return to_float(offers.get("price")) or to_float(offers.get("lowPrice"))
