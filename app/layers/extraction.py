"""
Extraction Layer - the multi-strategy cascade.

Order of strategies:
1. Embedded state (window.runParams)
2. Linked data (JSON-LD Product), only if 1 found nothing
3. DOM heuristics, only if 1 and 2 found nothing
4. Regex fallback, always, patching missing price/images
5. Normalizer, always, last

Each call parses its own document and owns its own accumulator, so one
ExtractionLayer can serve any number of concurrent requests.
"""
from typing import Optional

from bs4 import BeautifulSoup

from app.adapters.dom_heuristics import DOMHeuristicExtractor
from app.adapters.embedded_state import EmbeddedStateExtractor
from app.adapters.regex_fallback import RegexFallbackExtractor
from app.adapters.structured_data import StructuredDataExtractor
from app.layers.normalizer import RecordNormalizer
from app.models.product import PartialProduct, ProductRecord
from app.utils.logger import LayerLogger


class ExtractionLayer:
    """Run the strategy cascade over one page and return a normalized record."""

    def __init__(
        self,
        embedded_state: Optional[EmbeddedStateExtractor] = None,
        structured_data: Optional[StructuredDataExtractor] = None,
        dom_heuristics: Optional[DOMHeuristicExtractor] = None,
        regex_fallback: Optional[RegexFallbackExtractor] = None,
        normalizer: Optional[RecordNormalizer] = None,
        logger: Optional[LayerLogger] = None,
    ):
        self.logger = logger or LayerLogger("extraction_layer")
        self.embedded_state = embedded_state or EmbeddedStateExtractor()
        self.structured_data = structured_data or StructuredDataExtractor()
        self.dom_heuristics = dom_heuristics or DOMHeuristicExtractor(structured_data=self.structured_data)
        self.regex_fallback = regex_fallback or RegexFallbackExtractor()
        self.normalizer = normalizer or RecordNormalizer()

    def extract(self, url: str, html: str) -> ProductRecord:
        """
        Extract a product record from raw page HTML.

        Args:
            url: The product page URL (for diagnostics)
            html: The fetched page body

        Returns:
            Fully normalized ProductRecord; never raises for bad markup
        """
        html = html or ""
        self.logger.log_action("extraction", "started", url=url, content_length=len(html))

        record = PartialProduct()
        record.merge(self.embedded_state.extract(html))

        if record.is_empty():
            self.logger.log_fallback(
                from_source="embedded_state",
                to_source="structured_data",
                reason="No product data in embedded state",
                url=url,
            )
            soup = BeautifulSoup(html, "lxml")
            record.merge(self.structured_data.extract(soup))

            if record.is_empty():
                self.logger.log_fallback(
                    from_source="structured_data",
                    to_source="dom_heuristics",
                    reason="No Product JSON-LD found",
                    url=url,
                )
                record.merge(self.dom_heuristics.extract(soup))

        self.regex_fallback.patch(html, record)

        product = self.normalizer.normalize(record)

        self.logger.log_action(
            "extraction",
            "completed",
            url=url,
            title=product.title,
            price=product.sale_price,
            images=len(product.images),
            rating=product.rating,
            reviews=product.reviews,
        )
        return product
