"""
Record Normalizer.
Turns whatever the extraction cascade produced into a complete ProductRecord.
"""
from typing import List, Optional, Union

from app.config import config
from app.models.product import PartialProduct, ProductRecord, SpecItem, compute_discount
from app.utils.logger import LayerLogger
from app.utils.parsing import DESCRIPTION_MAX_LENGTH, finite_or_none

DEFAULT_TITLE = "Product"
MAX_RATING = 5.0


class RecordNormalizer:
    """
    Final pass of the pipeline.

    Fills every field with a type-safe default and derives the discount from
    the final prices, so an incomplete extraction is still valid output.
    Normalizing an already-normalized record returns an equal record.
    """

    def __init__(
        self,
        placeholder_image: Optional[str] = None,
        logger: Optional[LayerLogger] = None,
    ):
        self.placeholder_image = placeholder_image or config.PLACEHOLDER_IMAGE
        self.logger = logger or LayerLogger("normalizer")

    def normalize(self, record: Union[PartialProduct, ProductRecord]) -> ProductRecord:
        if isinstance(record, ProductRecord):
            record = record.to_partial()

        defaulted = record.get_missing_fields()

        sale_price = max(finite_or_none(record.sale_price) or 0.0, 0.0)
        original_price = max(finite_or_none(record.original_price) or 0.0, 0.0) or sale_price
        rating = min(max(finite_or_none(record.rating) or 0.0, 0.0), MAX_RATING)
        reviews = max(record.reviews or 0, 0)

        images = self._dedupe(record.images)
        if not images:
            images = [self.placeholder_image]

        description = (record.description or "").strip()[:DESCRIPTION_MAX_LENGTH]

        normalized = ProductRecord(
            title=(record.title or "").strip() or DEFAULT_TITLE,
            sale_price=sale_price,
            original_price=original_price,
            discount=compute_discount(original_price, sale_price),
            rating=rating,
            reviews=reviews,
            images=images,
            description=description,
            specs=self._clean_specs(record.specs),
        )

        self.logger.log_action(
            "normalization",
            "completed",
            defaulted_fields=defaulted,
            images_count=len(normalized.images),
            has_discount=normalized.discount is not None,
        )
        return normalized

    def _dedupe(self, images: List[str]) -> List[str]:
        return list(dict.fromkeys(img.strip() for img in images if img and img.strip()))

    def _clean_specs(self, specs: List[SpecItem]) -> List[SpecItem]:
        return [
            SpecItem(label=spec.label.strip(), value=spec.value.strip())
            for spec in specs
            if spec.label.strip() and spec.value.strip()
        ]
