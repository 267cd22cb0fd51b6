"""Extraction processing helpers."""

from listingforms.processing.extractors import (
    extract,
    extract_amenities,
    extract_area,
    extract_bathrooms,
    extract_bedrooms,
    extract_contacts,
    extract_location,
    extract_price,
    extract_property_type,
)
from listingforms.processing.normalization import ContentCleaner, generate_title
from listingforms.processing.paths import MISSING, assign_path, deep_merge, resolve_path, split_path

__all__ = [
    "MISSING",
    "ContentCleaner",
    "assign_path",
    "deep_merge",
    "extract",
    "extract_amenities",
    "extract_area",
    "extract_bathrooms",
    "extract_bedrooms",
    "extract_contacts",
    "extract_location",
    "extract_price",
    "extract_property_type",
    "generate_title",
    "resolve_path",
    "split_path",
]
