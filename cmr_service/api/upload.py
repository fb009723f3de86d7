"""
upload.py (API Route)

Upload endpoints: one per analysis provider.

Endpoints:
- POST /upload                - OpenAI reads the document and returns JSON
- POST /upload/document-ai    - Google Document AI text -> pattern extractor
- POST /upload/google-vision  - Google Vision text -> pattern extractor
- POST /upload/tesseract      - local Tesseract text -> pattern extractor

Every endpoint returns the same envelope:
{"status": "ok", "analysis": {...}, "cached": false}

Flow:
User uploads file -> validation -> DocumentAnalysisService
-> provider (or cache) -> normalizer -> JSON

This file does NOT:
- Save files to disk (everything stays in memory)
- Parse or clean fields itself
"""

import logging
from typing import Callable, Tuple

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from cmr_service import config
from cmr_service.api.dependencies import (
    get_analysis_service,
    get_document_ai,
    get_google_vision,
    get_openai_analyzer,
    get_tesseract,
)
from cmr_service.schemas.document import AnalysisResponse, DocumentRecord
from cmr_service.services.analysis import DocumentAnalysisService
from cmr_service.services.document_ai import DocumentAIService
from cmr_service.services.errors import (
    ProviderError,
    ProviderNotConfiguredError,
    UnsupportedMediaTypeError,
)
from cmr_service.services.media import resolve_media_type
from cmr_service.services.ocr import OCRService
from cmr_service.services.openai_analyzer import OpenAIAnalyzerService
from cmr_service.services.vision import GoogleVisionService

logger = logging.getLogger(__name__)

# Create a router for upload endpoints
# This router will be registered in main.py
router = APIRouter()


async def read_upload(file: UploadFile) -> Tuple[bytes, str]:
    """
    Validate an uploaded document and read it into memory.

    Returns:
    - (file_bytes, media_type)

    Errors:
    - 400: no file name or empty file
    - 413: file larger than MAX_UPLOAD_BYTES
    - 415: not a PDF, PNG or JPEG
    """

    # Step 1: A file must have been sent
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Document file is required"
        )

    # Step 2: Media type from content type or extension
    try:
        media_type = resolve_media_type(file.content_type, file.filename)
    except UnsupportedMediaTypeError as error:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=str(error)
        )

    # Step 3: Read bytes (one extra byte tells us the limit was passed)
    file_bytes = await file.read(config.MAX_UPLOAD_BYTES + 1)

    if not file_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded document is empty"
        )

    if len(file_bytes) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Document is larger than {config.MAX_UPLOAD_BYTES} bytes"
        )

    return file_bytes, media_type


async def run_analysis(
    provider_name: str,
    call: Callable[[], Tuple[DocumentRecord, bool]]
) -> AnalysisResponse:
    """
    Run a (blocking) provider call off the event loop and translate
    provider errors into HTTP errors.

    - ProviderNotConfiguredError -> 500
    - ProviderError              -> 502 (upstream failed)
    - anything else              -> 500
    """

    try:
        record, cached = await run_in_threadpool(call)

    except ProviderNotConfiguredError as error:
        logger.error(f"{provider_name} not configured: {error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Analysis provider not configured: {str(error)}"
        )

    except ProviderError as error:
        logger.error(f"{provider_name} failed: {error}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(error)
        )

    except Exception as error:
        logger.exception(f"{provider_name} analysis crashed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to analyze the document: {str(error)}"
        )

    logger.info(f"{provider_name} analysis done (cached={cached})")
    return AnalysisResponse(analysis=record, cached=cached)


@router.post(
    "",
    response_model=AnalysisResponse,
    status_code=status.HTTP_200_OK,
    summary="Analyze a CMR + invoice with OpenAI",
    description=(
        "Upload a PDF, PNG or JPEG. The document is sent to the OpenAI "
        "Responses API, which returns the CMR and invoice fields as JSON. "
        "The result is normalized and cached by content hash."
    )
)
async def upload_openai(
    file: UploadFile = File(...),
    service: DocumentAnalysisService = Depends(get_analysis_service),
    analyzer: OpenAIAnalyzerService = Depends(get_openai_analyzer)
):
    file_bytes, media_type = await read_upload(file)
    return await run_analysis(
        "openai",
        lambda: service.analyze_with_model("openai", analyzer, file_bytes, media_type)
    )


@router.post(
    "/document-ai",
    response_model=AnalysisResponse,
    status_code=status.HTTP_200_OK,
    summary="Analyze a CMR + invoice with Google Document AI",
    description=(
        "Upload a PDF, PNG or JPEG. Document AI extracts the text of each page; "
        "page 1 is parsed as the CMR and page 2 as the invoice."
    )
)
async def upload_document_ai(
    file: UploadFile = File(...),
    service: DocumentAnalysisService = Depends(get_analysis_service),
    provider: DocumentAIService = Depends(get_document_ai)
):
    file_bytes, media_type = await read_upload(file)
    return await run_analysis(
        "docai",
        lambda: service.analyze_with_ocr("docai", provider, file_bytes, media_type)
    )


@router.post(
    "/google-vision",
    response_model=AnalysisResponse,
    status_code=status.HTTP_200_OK,
    summary="Analyze a CMR + invoice with Google Vision OCR",
    description=(
        "Upload a PDF, PNG or JPEG. Google Vision reads the text; "
        "fields are then found with label patterns."
    )
)
async def upload_google_vision(
    file: UploadFile = File(...),
    service: DocumentAnalysisService = Depends(get_analysis_service),
    provider: GoogleVisionService = Depends(get_google_vision)
):
    file_bytes, media_type = await read_upload(file)
    return await run_analysis(
        "vision",
        lambda: service.analyze_with_ocr("vision", provider, file_bytes, media_type)
    )


@router.post(
    "/tesseract",
    response_model=AnalysisResponse,
    status_code=status.HTTP_200_OK,
    summary="Analyze a CMR + invoice with local Tesseract OCR",
    description="Offline variant of /upload/google-vision using Tesseract."
)
async def upload_tesseract(
    file: UploadFile = File(...),
    service: DocumentAnalysisService = Depends(get_analysis_service),
    provider: OCRService = Depends(get_tesseract)
):
    file_bytes, media_type = await read_upload(file)
    return await run_analysis(
        "tesseract",
        lambda: service.analyze_with_ocr("tesseract", provider, file_bytes, media_type)
    )
