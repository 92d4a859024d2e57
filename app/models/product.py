"""
Product models for the Product Page Extractor.

PartialProduct is what each extraction strategy returns; ProductRecord is the
finished, normalized record handed back to callers.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


PRODUCT_FIELDS = (
    "title",
    "sale_price",
    "original_price",
    "discount",
    "rating",
    "reviews",
    "images",
    "description",
    "specs",
)


def is_absent(value: Any) -> bool:
    """A field is absent when it is None, an empty string or an empty list."""
    return value is None or value == "" or value == []


def compute_discount(original_price: Optional[float], sale_price: Optional[float]) -> Optional[int]:
    """Percentage off, only when original > sale > 0."""
    if not original_price or not sale_price:
        return None
    if not original_price > sale_price > 0:
        return None
    return round((original_price - sale_price) / original_price * 100)


class SpecItem(BaseModel):
    """Specification label/value pair."""
    label: str
    value: str


class PartialProduct(BaseModel):
    """
    Progressively populated product data.

    Strategies fill whatever they can find; the accumulator merges them with
    fill-if-absent semantics so an earlier strategy's value is never replaced.
    """
    title: Optional[str] = None
    sale_price: Optional[float] = None
    original_price: Optional[float] = None
    discount: Optional[int] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    images: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    specs: List[SpecItem] = Field(default_factory=list)

    def merge(self, other: "PartialProduct") -> "PartialProduct":
        """Copy fields from other that are still absent here."""
        for name in PRODUCT_FIELDS:
            if is_absent(getattr(self, name)) and not is_absent(getattr(other, name)):
                setattr(self, name, getattr(other, name))
        return self

    def get_present_fields(self) -> List[str]:
        """Return list of non-empty fields."""
        return [name for name in PRODUCT_FIELDS if not is_absent(getattr(self, name))]

    def get_missing_fields(self) -> List[str]:
        """Return list of empty fields."""
        return [name for name in PRODUCT_FIELDS if is_absent(getattr(self, name))]

    def is_empty(self) -> bool:
        return not self.get_present_fields()


class ProductRecord(BaseModel):
    """
    Normalized product record - every field present and type-correct.

    Attributes are snake_case; the wire format (by_alias) is camelCase.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(min_length=1)
    sale_price: float = Field(ge=0.0)
    original_price: float = Field(ge=0.0)
    discount: Optional[int] = Field(default=None, ge=0, le=100)
    rating: float = Field(ge=0.0, le=5.0, default=0.0)
    reviews: int = Field(ge=0, default=0)
    images: List[str] = Field(min_length=1)
    description: str = ""
    specs: List[SpecItem] = Field(default_factory=list)

    def to_response(self) -> dict:
        """Serialize for the API envelope; discount is omitted when absent."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_partial(self) -> PartialProduct:
        return PartialProduct(**self.model_dump())
