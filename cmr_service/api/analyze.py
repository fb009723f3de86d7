"""
analyze.py (API)

Text endpoint: analyze text the client already has (for example OCR
output from another system) without uploading the document.

Endpoints:
- POST /analyze/text - pattern extraction + normalization
"""

from fastapi import APIRouter, HTTPException, status

from cmr_service.schemas.document import AnalysisResponse, TextAnalysisRequest
from cmr_service.services.text_extractor import analyze_pages

# Create router
router = APIRouter()


@router.post(
    "/text",
    response_model=AnalysisResponse,
    status_code=status.HTTP_200_OK,
    summary="Extract CMR / invoice fields from plain text",
    description=(
        "Send the text of the CMR page (and optionally the invoice page). "
        "Fields are found with label patterns and normalized. "
        "Text results are not cached."
    )
)
def analyze_text(request: TextAnalysisRequest):
    """
    What happens here:
    1. Validate raw_text is not blank
    2. Extract fields from the CMR text and the invoice text
    3. Normalize and return

    Errors:
    - 400 Bad Request: raw_text is empty
    """

    if not request.raw_text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Raw text cannot be empty"
        )

    record = analyze_pages(request.raw_text, request.invoice_text)
    return AnalysisResponse(analysis=record, cached=False)
