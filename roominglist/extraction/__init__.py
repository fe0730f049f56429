"""
Extraction of booking snapshots from OCR text.
"""

from .extractor import (
    ExtractionProvider,
    MockExtractionProvider,
    GeminiExtractionProvider,
    SnapshotExtractor,
    combine_pages
)

__all__ = [
    'ExtractionProvider',
    'MockExtractionProvider',
    'GeminiExtractionProvider',
    'SnapshotExtractor',
    'combine_pages'
]
