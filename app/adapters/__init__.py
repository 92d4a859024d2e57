"""Adapters package initialization."""
from app.adapters.page_fetcher import PageFetcher
from app.adapters.embedded_state import EmbeddedStateExtractor
from app.adapters.structured_data import StructuredDataExtractor
from app.adapters.dom_heuristics import DOMHeuristicExtractor
from app.adapters.regex_fallback import RegexFallbackExtractor

__all__ = [
    "PageFetcher",
    "EmbeddedStateExtractor",
    "StructuredDataExtractor",
    "DOMHeuristicExtractor",
    "RegexFallbackExtractor",
]
