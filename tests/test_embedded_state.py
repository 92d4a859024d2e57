"""
Unit tests for the embedded-state extractor and its balanced-brace scan.
"""
import json

import pytest

from app.adapters.embedded_state import EmbeddedStateExtractor, capture_balanced_object


def runparams_page(state) -> str:
    payload = state if isinstance(state, str) else json.dumps(state)
    return (
        "<html><head><script>"
        f"window.runParams = {payload};\n"
        "var csrfToken = {token: 'abc'};"
        "</script></head><body><h1>Some other heading text</h1></body></html>"
    )


def assert_balanced(captured: str):
    depth = 0
    for idx, ch in enumerate(captured):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        if idx < len(captured) - 1:
            assert depth > 0
    assert depth == 0


class TestCaptureBalancedObject:

    def test_stops_where_depth_returns_to_zero(self):
        text = 'window.runParams = {"a": {"b": {"c": 1}}, "d": 2}; var x = {"e": 3};'
        captured = capture_balanced_object(text)
        assert captured == '{"a": {"b": {"c": 1}}, "d": 2}'
        assert_balanced(captured)

    def test_braces_inside_strings_do_not_count(self):
        text = 'x = {"label": "}{ tricky \\" }", "n": {"m": 1}} trailing }'
        captured = capture_balanced_object(text)
        assert json.loads(captured) == {"label": '}{ tricky " }', "n": {"m": 1}}

    def test_unterminated_object_returns_none(self):
        assert capture_balanced_object('window.runParams = {"a": {"b": 1}') is None

    def test_no_opening_brace_returns_none(self):
        assert capture_balanced_object("window.runParams = null;") is None

    def test_start_offset_skips_earlier_objects(self):
        text = '{"skip": 1} marker {"keep": 2}'
        assert capture_balanced_object(text, text.index("marker")) == '{"keep": 2}'


class TestEmbeddedStateExtractor:

    def test_nested_product_info_path(self):
        html = runparams_page({
            "data": {
                "productInfoComponent": {
                    "subject": "Wireless Earbuds Pro",
                    "price": {
                        "salePrice": {"value": "12.50"},
                        "origPrice": {"value": 25},
                    },
                    "rating": {"averageStar": "4.7", "totalValidNum": 1234},
                    "imagePathList": [
                        "https://ae01.alicdn.com/kf/a.jpg",
                        "https://ae01.alicdn.com/kf/b.jpg",
                    ],
                    "description": "Great sound.",
                }
            }
        })

        product = EmbeddedStateExtractor().extract(html)

        assert product.title == "Wireless Earbuds Pro"
        assert product.sale_price == 12.5
        assert product.original_price == 25.0
        assert product.rating == 4.7
        assert product.reviews == 1234
        assert product.images == [
            "https://ae01.alicdn.com/kf/a.jpg",
            "https://ae01.alicdn.com/kf/b.jpg",
        ]
        assert product.description == "Great sound."
        assert product.specs == []

    def test_top_level_path_with_flat_prices(self):
        html = runparams_page({
            "productInfoComponent": {
                "title": "Desk Lamp",
                "price": {"salePrice": 9.99, "origPrice": 19.99},
                "averageStar": 4.1,
                "totalValidNum": "87",
                "images": ["https://ae01.alicdn.com/kf/lamp.png"],
            }
        })

        product = EmbeddedStateExtractor().extract(html)

        assert product.title == "Desk Lamp"
        assert product.sale_price == 9.99
        assert product.original_price == 19.99
        assert product.rating == 4.1
        assert product.reviews == 87
        assert product.images == ["https://ae01.alicdn.com/kf/lamp.png"]

    def test_sku_module_path_is_last_resort(self):
        html = runparams_page({
            "data": {
                "skuModule": {"salePrice": "3.20"},
                "otherComponent": {"subject": "ignored"},
            }
        })

        product = EmbeddedStateExtractor().extract(html)

        assert product.sale_price == 3.2
        assert product.title is None

    def test_nested_path_wins_over_top_level(self):
        html = runparams_page({
            "productInfoComponent": {"subject": "Top level"},
            "data": {"productInfoComponent": {"subject": "Nested"}},
        })

        assert EmbeddedStateExtractor().extract(html).title == "Nested"

    def test_missing_marker_yields_empty(self):
        html = "<html><script>window.otherState = {\"a\": 1};</script></html>"
        assert EmbeddedStateExtractor().extract(html).is_empty()

    def test_malformed_json_yields_empty_without_raising(self):
        html = runparams_page("{data: {productInfoComponent: {subject: 'not json'}}}")
        assert EmbeddedStateExtractor().extract(html).is_empty()

    def test_unterminated_state_yields_empty(self):
        html = '<script>window.runParams = {"data": {"productInfoComponent": {"subject": "x"}'
        assert EmbeddedStateExtractor().extract(html).is_empty()

    def test_unresolvable_path_yields_empty(self):
        html = runparams_page({"data": {"somethingElse": {"subject": "x"}}})
        assert EmbeddedStateExtractor().extract(html).is_empty()

    def test_scan_is_bounded_by_window(self):
        html = runparams_page({
            "data": {"productInfoComponent": {"subject": "A" * 200}}
        })
        assert EmbeddedStateExtractor(window=100).extract(html).is_empty()

    @pytest.mark.parametrize("html", ["", "window.runParams", "window.runParams = "])
    def test_degenerate_inputs(self, html):
        assert EmbeddedStateExtractor().load_state(html) is None

    def test_guard_before_assignment_is_skipped(self):
        state = {"data": {"productInfoComponent": {"subject": "Real State Title"}}}
        html = (
            "<script>if (window.runParams) { boot(); }</script>"
            "<script>if (window.runParams == null) { wait(); }</script>"
            f"<script>window.runParams = {json.dumps(state)};</script>"
        )
        assert EmbeddedStateExtractor().extract(html).title == "Real State Title"

    def test_guard_without_assignment_yields_empty(self):
        html = "<script>if (window.runParams) { boot({\"subject\": \"x\"}); }</script>"
        assert EmbeddedStateExtractor().load_state(html) is None

    @pytest.mark.parametrize("payload", [
        '{"averageStar": NaN, "totalValidNum": 1e400}',
        '{"averageStar": Infinity, "totalValidNum": -Infinity}',
    ])
    def test_non_finite_numbers_are_dropped(self, payload):
        html = runparams_page(
            '{"data": {"productInfoComponent": {"subject": "Finite Only Product",'
            ' "price": {"salePrice": {"value": 1e400}, "origPrice": {"value": 12.5}},'
            f' "rating": {payload}}}}}}}'
        )
        product = EmbeddedStateExtractor().extract(html)
        assert product.title == "Finite Only Product"
        assert product.sale_price is None
        assert product.original_price == 12.5
        assert product.rating is None
        assert product.reviews is None
