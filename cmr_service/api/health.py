"""
health.py (API)

Liveness check. Also reports which providers have their settings in
place, so a missing key shows up before the first upload fails.
"""

from fastapi import APIRouter

from cmr_service import config

router = APIRouter()


@router.get(
    "",
    status_code=200,
    summary="Health check",
    description="Health check endpoint for the CMR / invoice analyzer"
)
def health_check():
    return {
        "status": "ok",
        "providers": {
            "openai": bool(config.OPENAI_API_KEY),
            "document_ai": bool(
                config.GCP_DOC_AI_KEY_JSON
                and config.GCP_PROJECT_ID
                and config.GCP_LOCATION
                and config.DOC_AI_PROCESSOR_ID
            ),
            "google_vision": bool(config.GOOGLE_APPLICATION_CREDENTIALS),
            "tesseract": True,
        },
    }
