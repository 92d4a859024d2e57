"""
Ingestion Layer for the Product Page Extractor.
Gates the URL, fetches the page once and hands it to the extraction cascade.
"""
from typing import Optional

from app.adapters.page_fetcher import PageFetcher
from app.errors import IdentifierNotFound
from app.layers.extraction import ExtractionLayer
from app.layers.identifier import extract_product_id
from app.models.product import ProductRecord
from app.utils.logger import LayerLogger


class IngestionLayer:
    """
    Ingestion Layer - one product URL in, one normalized record out.

    This layer:
    - Rejects URLs with no recognizable product ID before any network call
    - Fetches the page exactly once (no retries)
    - Runs the extraction cascade over the fetched HTML

    Fetch failures propagate as FetchFailed / FetchTimeout.
    """

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        extraction: Optional[ExtractionLayer] = None,
    ):
        self.logger = LayerLogger("ingestion_layer")
        self.fetcher = fetcher or PageFetcher()
        self.extraction = extraction or ExtractionLayer()

    async def ingest(self, url: str) -> ProductRecord:
        """
        Fetch and extract the product at url.

        Raises:
            IdentifierNotFound: URL matches no known product URL shape
            FetchFailed: the page could not be fetched
            FetchTimeout: the fetch exceeded the request timeout
        """
        product_id = extract_product_id(url)
        if product_id is None:
            self.logger.log_decision(
                decision="reject_url",
                reason="No product ID pattern matched",
                url=url,
            )
            raise IdentifierNotFound(url)

        self.logger.log_action("ingestion", "started", url=url, product_id=product_id)

        html = await self.fetcher.fetch(url)
        product = self.extraction.extract(url, html)

        self.logger.log_action("ingestion", "completed", url=url, product_id=product_id)
        return product
