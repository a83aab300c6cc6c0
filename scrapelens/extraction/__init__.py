"""Extraction package — language-model field extraction."""

from scrapelens.extraction.client import ExtractionRequest, check_service, extract_fields
from scrapelens.extraction.normalize import StructuredRecord, normalize_response

__all__ = [
    "extract_fields",
    "check_service",
    "normalize_response",
    "ExtractionRequest",
    "StructuredRecord",
]
