"""
dependencies.py

FastAPI dependencies that hand services to the routes.

Providers are built per request from config.py values. Tests replace
these functions through app.dependency_overrides, so no route ever
builds a provider client itself.
"""

from fastapi import Depends, HTTPException, Request, status

from cmr_service import config
from cmr_service.services.analysis import DocumentAnalysisService
from cmr_service.services.cache import ResultCache
from cmr_service.services.document_ai import DocumentAIService
from cmr_service.services.errors import ProviderNotConfiguredError
from cmr_service.services.ocr import OCRService
from cmr_service.services.openai_analyzer import OpenAIAnalyzerService
from cmr_service.services.vision import GoogleVisionService


def _not_configured(error: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Analysis provider not configured: {str(error)}"
    )


def get_result_cache(request: Request) -> ResultCache:
    # Created once in main.create_app()
    return request.app.state.result_cache


def get_analysis_service(
    cache: ResultCache = Depends(get_result_cache)
) -> DocumentAnalysisService:
    return DocumentAnalysisService(cache=cache)


def get_openai_analyzer() -> OpenAIAnalyzerService:
    if not config.OPENAI_API_KEY:
        raise _not_configured(ProviderNotConfiguredError("OPENAI_API_KEY is not set"))
    return OpenAIAnalyzerService(api_key=config.OPENAI_API_KEY, model=config.OPENAI_MODEL)


def get_document_ai() -> DocumentAIService:
    try:
        return DocumentAIService(
            credentials_json=config.GCP_DOC_AI_KEY_JSON,
            project_id=config.GCP_PROJECT_ID,
            location=config.GCP_LOCATION,
            processor_id=config.DOC_AI_PROCESSOR_ID,
        )
    except ProviderNotConfiguredError as error:
        raise _not_configured(error)


def get_google_vision() -> GoogleVisionService:
    try:
        return GoogleVisionService()
    except ProviderNotConfiguredError as error:
        raise _not_configured(error)


def get_tesseract() -> OCRService:
    return OCRService(tesseract_cmd=config.TESSERACT_CMD)
