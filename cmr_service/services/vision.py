"""
vision.py

Text extraction with Google Cloud Vision (DOCUMENT_TEXT_DETECTION).

- Images are sent to document_text_detection directly
- PDFs are sent inline to batch_annotate_files; the synchronous API
  reads the first 5 pages, only the first two are used downstream

Credentials come from GOOGLE_APPLICATION_CREDENTIALS as usual for
Google client libraries.
"""

import logging
from typing import Any, List, Optional

from google.cloud import vision

from cmr_service.services.errors import ProviderError, ProviderNotConfiguredError

logger = logging.getLogger(__name__)


class GoogleVisionService:

    def __init__(self, client: Optional[Any] = None):
        try:
            self.client = client or vision.ImageAnnotatorClient()
        except Exception as e:
            # DefaultCredentialsError and friends
            raise ProviderNotConfiguredError(f"Google Vision not initialized: {str(e)}")

    def extract_pages(self, file_bytes: bytes, media_type: str) -> List[str]:
        logger.info(f"Google Vision: start ({media_type}, {len(file_bytes)} bytes)")

        try:
            if media_type == "application/pdf":
                pages = self._pdf_pages(file_bytes)
            else:
                pages = [self._image_text(file_bytes)]
        except ProviderError:
            raise
        except Exception as e:
            logger.error(f"Google Vision failed: {str(e)}")
            raise ProviderError(f"Google Vision request failed: {str(e)}")

        logger.info(f"Google Vision: done ({len(pages)} pages)")
        return pages

    def _image_text(self, file_bytes: bytes) -> str:
        response = self.client.document_text_detection(
            image=vision.Image(content=file_bytes)
        )
        if response.error.message:
            raise ProviderError(f"Vision error: {response.error.message}")
        return response.full_text_annotation.text or ""

    def _pdf_pages(self, file_bytes: bytes) -> List[str]:
        request = vision.AnnotateFileRequest(
            input_config=vision.InputConfig(
                content=file_bytes,
                mime_type="application/pdf"
            ),
            features=[vision.Feature(type_=vision.Feature.Type.DOCUMENT_TEXT_DETECTION)],
        )
        response = self.client.batch_annotate_files(requests=[request])

        pages: List[str] = []
        for file_response in response.responses:
            if file_response.error.message:
                raise ProviderError(f"Vision error: {file_response.error.message}")
            for page_response in file_response.responses:
                if page_response.error.message:
                    raise ProviderError(f"Vision error: {page_response.error.message}")
                pages.append(page_response.full_text_annotation.text or "")
        return pages
