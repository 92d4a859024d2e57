"""
DOM-Heuristic Extractor.

Walks the parsed document with per-field selector cascades (see
app.adapters.selectors) and then fills remaining gaps from any linked-data
Product node on the page.
"""
from typing import Any, List, Optional

from bs4 import BeautifulSoup, Tag

from app.adapters.selectors import (
    IMAGE_ATTRIBUTES,
    IMAGE_SELECTORS,
    SPEC_CONTAINER_SELECTORS,
    SPEC_LABEL_SELECTOR,
    SPEC_VALUE_SELECTOR,
    TEXT_RULES,
    FieldRule,
)
from app.adapters.structured_data import StructuredDataExtractor
from app.config import config
from app.models.product import PartialProduct, SpecItem, compute_discount, is_absent
from app.utils.logger import LayerLogger

# Fields the linked-data enrichment pass may fill
ENRICHABLE_FIELDS = ("title", "rating", "reviews", "description", "images")
# Linked-data enrichment also replaces a zero in these fields
ZERO_IS_MISSING_FIELDS = ("rating", "reviews")


def element_text(element: Tag) -> str:
    """Element text with whitespace runs collapsed."""
    return " ".join(element.get_text().split())


def normalize_image_url(src: Optional[str], site_origin: str) -> Optional[str]:
    """
    Make an image URL absolute, or return None when it is unusable.

    ``//host/a.jpg`` becomes ``https://host/a.jpg`` and ``/a.jpg`` is joined
    to the site origin. Non-http URLs and placeholders are rejected.
    """
    if not src:
        return None
    src = src.strip()

    if src.startswith("//"):
        src = "https:" + src
    elif src.startswith("/"):
        src = site_origin.rstrip("/") + src

    if not src.startswith(("http://", "https://")):
        return None
    if "placeholder" in src.lower():
        return None
    return src


class DOMHeuristicExtractor:
    """Extract a partial product from visible page markup."""

    def __init__(
        self,
        site_origin: Optional[str] = None,
        structured_data: Optional[StructuredDataExtractor] = None,
        logger: Optional[LayerLogger] = None,
    ):
        self.site_origin = site_origin or config.SITE_ORIGIN
        self.logger = logger or LayerLogger("dom_heuristics")
        self.structured_data = structured_data or StructuredDataExtractor(logger=self.logger)

    def extract(self, soup: BeautifulSoup) -> PartialProduct:
        result = PartialProduct()

        for rule in TEXT_RULES:
            value = self.first_match(soup, rule)
            if value is not None:
                setattr(result, rule.field, value)

        result.images = self.extract_images(soup)
        result.specs = self.extract_specs(soup)
        result.discount = compute_discount(result.original_price, result.sale_price)

        self._enrich_from_structured_data(soup, result)

        self.logger.log_extraction(
            source="dom_heuristics",
            fields_present=result.get_present_fields(),
            fields_missing=result.get_missing_fields(),
        )
        return result

    def first_match(self, soup: BeautifulSoup, rule: FieldRule) -> Optional[Any]:
        """Return the first parsed value any element of any selector yields."""
        for selector in rule.selectors:
            for element in self._select(soup, selector):
                value = rule.parse(element_text(element))
                if value is not None:
                    self.logger.log_decision(
                        decision=f"{rule.field}_selector_matched",
                        reason=selector,
                    )
                    return value
        return None

    def extract_images(self, soup: BeautifulSoup) -> List[str]:
        """Collect images from the first selector that yields any."""
        images: List[str] = []

        for selector in IMAGE_SELECTORS:
            for element in self._select(soup, selector):
                src = next(
                    (element.get(attr) for attr in IMAGE_ATTRIBUTES if element.get(attr)),
                    None,
                )
                url = normalize_image_url(src, self.site_origin)
                if url and url not in images:
                    images.append(url)
            if images:
                break

        return images

    def extract_specs(self, soup: BeautifulSoup) -> List[SpecItem]:
        """Read label/value pairs from the first container selector that matches."""
        specs: List[SpecItem] = []

        for selector in SPEC_CONTAINER_SELECTORS:
            containers = self._select(soup, selector)
            if not containers:
                continue

            for container in containers:
                label_el = container.select_one(SPEC_LABEL_SELECTOR)
                value_el = container.select_one(SPEC_VALUE_SELECTOR)
                label = element_text(label_el) if label_el else ""
                value = element_text(value_el) if value_el else ""
                if label and value:
                    specs.append(SpecItem(label=label, value=value))
            break

        return specs

    def _enrich_from_structured_data(self, soup: BeautifulSoup, result: PartialProduct) -> None:
        node = self.structured_data.find_product_node(soup)
        if node is None:
            return

        linked = self.structured_data.parse_product(node)
        filled = []
        for name in ENRICHABLE_FIELDS:
            current = getattr(result, name)
            missing = is_absent(current) or (name in ZERO_IS_MISSING_FIELDS and current == 0)
            if missing and not is_absent(getattr(linked, name)):
                setattr(result, name, getattr(linked, name))
                filled.append(name)

        if filled:
            self.logger.log_action(
                "jsonld_enrichment",
                "completed",
                fields_filled=filled,
            )

    def _select(self, soup: BeautifulSoup, selector: str) -> List[Tag]:
        try:
            return soup.select(selector)
        except Exception as e:
            self.logger.log_parse_failure(
                source="dom_heuristics",
                error=str(e),
                selector=selector,
            )
            return []
