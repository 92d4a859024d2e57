"""
Embedded-State Extractor.

Reads the product straight out of the client-side state object the page
assigns to ``window.runParams``. The object is located with a balanced-brace
scan because regexes cannot bound arbitrarily nested JSON.
"""
import re
from typing import Any, Dict, Optional, Sequence, Tuple

from app.config import config
from app.models.product import PartialProduct
from app.utils.logger import LayerLogger
from app.utils.parsing import to_float, to_int, to_text, try_json_loads

EMBEDDED_STATE_MARKER = "window.runParams"

# Probed in order; the first path resolving to a dict wins
PRODUCT_PATHS: Tuple[Tuple[str, ...], ...] = (
    ("data", "productInfoComponent"),
    ("productInfoComponent",),
    ("data", "skuModule"),
)


def capture_balanced_object(text: str, start: int = 0) -> Optional[str]:
    """
    Return the first complete ``{...}`` object in text at or after start.

    Depth goes up on ``{`` and down on ``}``; braces inside JSON string
    literals do not count. Returns None when no object starts or the scan
    runs off the end before depth returns to zero.
    """
    open_idx = text.find("{", start)
    if open_idx == -1:
        return None

    depth = 0
    in_string = False
    escape = False
    for idx in range(open_idx, len(text)):
        ch = text[idx]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[open_idx:idx + 1]

    return None


def _walk(data: Any, path: Sequence[str]) -> Any:
    node = data
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


class EmbeddedStateExtractor:
    """Extract a partial product from the page's embedded global state."""

    def __init__(
        self,
        marker: str = EMBEDDED_STATE_MARKER,
        window: Optional[int] = None,
        logger: Optional[LayerLogger] = None,
    ):
        self.marker = marker
        # Only an assignment counts; guards such as `if (window.runParams)` or `==` are skipped
        self.assignment_re = re.compile(re.escape(marker) + r"\s*=(?!=)")
        self.window = window or config.EMBEDDED_STATE_WINDOW
        self.logger = logger or LayerLogger("embedded_state")

    def extract(self, html: str) -> PartialProduct:
        """Return whatever product fields the embedded state yields (possibly none)."""
        state = self.load_state(html)
        if state is None:
            return PartialProduct()

        product = self._resolve_product_node(state)
        if product is None:
            self.logger.log_action(
                "embedded_state_extraction",
                "no_product_found",
                top_level_keys=list(state.keys())[:20],
            )
            return PartialProduct()

        result = self._parse_product_node(product)
        self.logger.log_extraction(
            source="embedded_state",
            fields_present=result.get_present_fields(),
            fields_missing=result.get_missing_fields(),
        )
        return result

    def load_state(self, html: str) -> Optional[Dict[str, Any]]:
        """Locate, capture and parse the state object; None on any failure."""
        match = self.assignment_re.search(html) if html else None
        if match is None:
            self.logger.log_action("embedded_state_extraction", "marker_not_found")
            return None

        # Scan at most `window` chars past the marker
        snippet = html[match.start():match.start() + self.window]
        raw = capture_balanced_object(snippet, match.end() - match.start())
        if raw is None:
            self.logger.log_parse_failure(
                source="embedded_state",
                error="unterminated object after marker",
                window=self.window,
            )
            return None

        state = try_json_loads(raw)
        if not isinstance(state, dict):
            self.logger.log_parse_failure(
                source="embedded_state",
                error="captured object is not valid JSON",
                captured_length=len(raw),
            )
            return None

        return state

    def _resolve_product_node(self, state: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for path in PRODUCT_PATHS:
            node = _walk(state, path)
            if isinstance(node, dict):
                self.logger.log_decision(
                    decision="product_path_resolved",
                    reason=".".join(path),
                )
                return node
        return None

    def _parse_product_node(self, product: Dict[str, Any]) -> PartialProduct:
        rating = product.get("rating")
        if not isinstance(rating, dict):
            rating = product

        images = product.get("imagePathList") or product.get("images") or []
        if isinstance(images, str):
            images = [images]
        elif not isinstance(images, list):
            images = []

        return PartialProduct(
            title=to_text(product.get("subject")) or to_text(product.get("title")),
            sale_price=self._price_value(product, "salePrice"),
            original_price=(
                self._price_value(product, "origPrice")
                or self._price_value(product, "originalPrice")
            ),
            rating=to_float(rating.get("averageStar")),
            reviews=to_int(rating.get("totalValidNum")),
            images=[img for img in images if isinstance(img, str) and img],
            description=to_text(product.get("description")),
        )

    def _price_value(self, product: Dict[str, Any], key: str) -> Optional[float]:
        """Resolve price.<key>.value, then price.<key>, then <key> itself."""
        price = product.get("price")
        candidates = []
        if isinstance(price, dict):
            candidates.append(price.get(key))
        candidates.append(product.get(key))

        for candidate in candidates:
            if isinstance(candidate, dict):
                value = to_float(candidate.get("value"))
            else:
                value = to_float(candidate)
            if value is not None:
                return value
        return None
