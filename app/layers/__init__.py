"""Layers package initialization."""
from app.layers.identifier import extract_product_id
from app.layers.normalizer import RecordNormalizer
from app.layers.extraction import ExtractionLayer
from app.layers.ingestion import IngestionLayer

__all__ = [
    "extract_product_id",
    "RecordNormalizer",
    "ExtractionLayer",
    "IngestionLayer",
]
