"""
Unit tests for the record normalizer.
"""
import pytest

from app.layers.normalizer import RecordNormalizer
from app.models.product import PartialProduct, ProductRecord, SpecItem


@pytest.fixture
def normalizer():
    return RecordNormalizer()


def test_empty_partial_gets_every_default(normalizer, placeholder_image):
    record = normalizer.normalize(PartialProduct())

    assert record.title == "Product"
    assert record.sale_price == 0
    assert record.original_price == 0
    assert record.discount is None
    assert record.rating == 0
    assert record.reviews == 0
    assert record.images == [placeholder_image]
    assert record.description == ""
    assert record.specs == []


def test_original_price_defaults_to_sale_price(normalizer):
    record = normalizer.normalize(PartialProduct(sale_price=14.5))
    assert record.original_price == 14.5
    assert record.discount is None


@pytest.mark.parametrize("original,sale,expected", [
    (100.0, 80.0, 20),
    (25.98, 12.99, 50),
    (3.0, 2.0, 33),
    (80.0, 100.0, None),
    (50.0, 50.0, None),
    (100.0, 0.0, None),
    (None, 50.0, None),
])
def test_discount_law(normalizer, original, sale, expected):
    record = normalizer.normalize(PartialProduct(original_price=original, sale_price=sale))
    assert record.discount == expected


def test_stale_discount_is_recomputed(normalizer):
    record = normalizer.normalize(PartialProduct(sale_price=10, original_price=10, discount=40))
    assert record.discount is None


def test_values_are_clamped_into_range(normalizer):
    record = normalizer.normalize(PartialProduct(
        sale_price=-3,
        original_price=-1,
        rating=7.2,
        reviews=-5,
    ))

    assert record.sale_price == 0
    assert record.original_price == 0
    assert record.rating == 5.0
    assert record.reviews == 0


def test_images_deduplicated_in_order(normalizer):
    record = normalizer.normalize(PartialProduct(images=[
        "https://x/a.jpg", "https://x/b.jpg", "https://x/a.jpg", " ",
    ]))
    assert record.images == ["https://x/a.jpg", "https://x/b.jpg"]


def test_description_truncated(normalizer):
    record = normalizer.normalize(PartialProduct(description="d" * 1500))
    assert len(record.description) == 1000


def test_blank_title_and_empty_specs_dropped(normalizer):
    record = normalizer.normalize(PartialProduct(
        title="   ",
        specs=[SpecItem(label="Color", value="Red"), SpecItem(label="Size", value=" ")],
    ))

    assert record.title == "Product"
    assert record.specs == [SpecItem(label="Color", value="Red")]


def test_normalizer_is_idempotent(normalizer):
    once = normalizer.normalize(PartialProduct(
        title="Travel Backpack 40L",
        sale_price=39.99,
        original_price=79.99,
        rating=4.4,
        reviews=2011,
        images=["https://x/a.jpg", "https://x/a.jpg"],
        description="Water resistant.",
        specs=[SpecItem(label="Material", value="Nylon")],
    ))
    twice = normalizer.normalize(once)

    assert twice == once
    assert once.discount == 50


def test_output_invariants_hold_for_partial_inputs(normalizer):
    partials = [
        PartialProduct(),
        PartialProduct(title="x", rating=-1),
        PartialProduct(sale_price=5, reviews=3, images=["https://x/a.jpg"]),
        PartialProduct(original_price=9, rating=5.5, description=" spaced "),
    ]
    for partial in partials:
        record = normalizer.normalize(partial)
        assert record.title
        assert record.sale_price >= 0
        assert record.original_price >= 0
        assert record.reviews >= 0
        assert 0 <= record.rating <= 5
        assert record.images


def test_response_uses_camel_case_and_omits_missing_discount(normalizer):
    plain = normalizer.normalize(PartialProduct(title="Plain item title", sale_price=5))
    discounted = normalizer.normalize(PartialProduct(sale_price=5, original_price=10))

    body = plain.to_response()
    assert body["salePrice"] == 5
    assert body["originalPrice"] == 5
    assert "discount" not in body
    assert "sale_price" not in body
    assert discounted.to_response()["discount"] == 50


def test_product_record_rejects_empty_images():
    with pytest.raises(ValueError):
        ProductRecord(title="t", sale_price=0, original_price=0, images=[])


def test_non_finite_values_are_defaulted(normalizer):
    record = normalizer.normalize(PartialProduct(
        sale_price=4.0,
        original_price=float("inf"),
        rating=float("nan"),
    ))
    assert record.sale_price == 4.0
    assert record.original_price == 4.0
    assert record.discount is None
    assert record.rating == 0
