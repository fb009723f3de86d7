"""
document_ai.py

Text extraction with Google Document AI.

Document AI returns the full document text plus, for every page,
"text anchors" pointing into that text. We rebuild the text of each
page from its anchors so page 1 (CMR) and page 2 (invoice) can be
parsed separately.

This file only returns text. Field extraction happens in
services/text_extractor.py.
"""

import json
import logging
from typing import Any, List, Optional

from google.api_core.client_options import ClientOptions
from google.cloud import documentai
from google.oauth2 import service_account

from cmr_service.services.errors import ProviderError, ProviderNotConfiguredError

logger = logging.getLogger(__name__)


def text_from_anchor(full_text: str, text_anchor: Any) -> str:
    """
    Rebuild the text a layout element points to.

    A text anchor is a list of (start_index, end_index) segments into
    the document's full text. Missing anchors or empty text give "".
    """
    segments = getattr(text_anchor, "text_segments", None)
    if not full_text or not segments:
        return ""

    out = ""
    for segment in segments:
        start = int(segment.start_index or 0)
        end = int(segment.end_index or 0)
        if end > start:
            out += full_text[start:end]
    return out


def page_texts(document: Any) -> List[str]:
    """Text of every page of a processed document, in page order."""
    full_text = getattr(document, "text", "") or ""
    pages = getattr(document, "pages", None) or []
    return [text_from_anchor(full_text, page.layout.text_anchor) for page in pages]


class DocumentAIService:
    """
    Thin wrapper over DocumentProcessorServiceClient.process_document.

    Credentials come as a service account JSON string (environment
    variable), not a key file on disk.
    """

    def __init__(
        self,
        credentials_json: Optional[str],
        project_id: Optional[str],
        location: Optional[str],
        processor_id: Optional[str],
        client: Optional[Any] = None
    ):
        if not project_id or not location or not processor_id:
            raise ProviderNotConfiguredError(
                "GCP_PROJECT_ID / GCP_LOCATION / DOC_AI_PROCESSOR_ID are not set"
            )

        self.processor_name = (
            f"projects/{project_id}/locations/{location}/processors/{processor_id}"
        )

        if client is not None:
            self.client = client
            return

        if not credentials_json:
            raise ProviderNotConfiguredError("GCP_DOC_AI_KEY_JSON is not set")

        try:
            credentials = service_account.Credentials.from_service_account_info(
                json.loads(credentials_json)
            )
        except ValueError as e:
            raise ProviderNotConfiguredError(f"Invalid GCP_DOC_AI_KEY_JSON: {str(e)}")

        self.client = documentai.DocumentProcessorServiceClient(
            credentials=credentials,
            client_options=ClientOptions(
                api_endpoint=f"{location}-documentai.googleapis.com"
            ),
        )

    def extract_pages(self, file_bytes: bytes, media_type: str) -> List[str]:
        """
        Run the processor and return one text per page.

        Raises:
        - ProviderError if the API call fails
        """

        logger.info(f"Document AI: start ({media_type}, {len(file_bytes)} bytes)")

        request = documentai.ProcessRequest(
            name=self.processor_name,
            raw_document=documentai.RawDocument(content=file_bytes, mime_type=media_type),
        )

        try:
            result = self.client.process_document(request=request)
        except Exception as e:
            logger.error(f"Document AI failed: {str(e)}")
            raise ProviderError(f"Document AI request failed: {str(e)}")

        pages = page_texts(result.document)
        logger.info(f"Document AI: done ({len(pages)} pages)")
        return pages
