"""
analysis.py

Request pipeline shared by all upload endpoints.

Two ways to analyze a document:
- model path: provider returns candidate JSON -> normalizer
- OCR path:   provider returns page texts -> text extractor -> normalizer

Both paths check the content-hash cache first and store successful
results. Provider errors are not caught here; the API layer turns
them into HTTP responses.
"""

import logging
from typing import Any, Dict, List, Protocol, Tuple

from cmr_service.schemas.document import DocumentRecord
from cmr_service.services.cache import ResultCache, content_key
from cmr_service.services.normalizer import normalize
from cmr_service.services.text_extractor import analyze_pages

logger = logging.getLogger(__name__)


class ModelAnalyzer(Protocol):
    def analyze(self, file_bytes: bytes, media_type: str) -> Dict[str, Any]:
        ...


class PageTextProvider(Protocol):
    def extract_pages(self, file_bytes: bytes, media_type: str) -> List[str]:
        ...


class DocumentAnalysisService:
    """
    Runs one provider for one upload, with caching.

    Cache keys are "<provider>:<sha256 of bytes>", so the same file
    analyzed by two providers gets two entries.
    """

    def __init__(self, cache: ResultCache):
        self.cache = cache

    def analyze_with_model(
        self,
        provider_name: str,
        analyzer: ModelAnalyzer,
        file_bytes: bytes,
        media_type: str
    ) -> Tuple[DocumentRecord, bool]:
        """
        Returns:
        - (record, cached) where cached is True on a cache hit
        """

        key = content_key(provider_name, file_bytes)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Cache hit: {key}")
            return cached, True

        candidate = analyzer.analyze(file_bytes, media_type)
        record = normalize(candidate)

        self.cache.set(key, record)
        return record, False

    def analyze_with_ocr(
        self,
        provider_name: str,
        provider: PageTextProvider,
        file_bytes: bytes,
        media_type: str
    ) -> Tuple[DocumentRecord, bool]:
        """
        Same as analyze_with_model, but for text-only providers.
        Page 1 is parsed as the CMR, page 2 as the invoice.
        """

        key = content_key(provider_name, file_bytes)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Cache hit: {key}")
            return cached, True

        pages = provider.extract_pages(file_bytes, media_type)
        cmr_text = pages[0] if len(pages) > 0 else ""
        invoice_text = pages[1] if len(pages) > 1 else ""

        record = analyze_pages(cmr_text, invoice_text)

        self.cache.set(key, record)
        return record, False
