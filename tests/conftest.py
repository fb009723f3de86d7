# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from cmr_service.main import app
from cmr_service.api.dependencies import (
    get_document_ai,
    get_google_vision,
    get_openai_analyzer,
    get_tesseract,
)
from cmr_service.services.cache import InMemoryResultCache
from cmr_service.services.errors import ProviderError

from fakes import FakeModelAnalyzer, FakePageProvider
from samples import CMR_PAGE, INVOICE_PAGE

@pytest.fixture
def model_analyzer():
    return FakeModelAnalyzer(result={
        "cmr": {
            "exporter": {"name": "  ACME LLC ", "address": None},
            "importer": {"name": "Baku Motors", "id": 1402345671},
            "vin": "1m8gdm9axkp042788",
            "gross_weight_kg": "1450,5 KG",
        },
        "invoice": {"invoice_no": "INV-2024/117", "vin": "SHORTVIN"},
    })

@pytest.fixture
def page_provider():
    return FakePageProvider(pages=[CMR_PAGE, INVOICE_PAGE])

# --- Fresh cache per test and fake providers instead of real clients ---
@pytest.fixture(autouse=True)
def override_providers(model_analyzer, page_provider):
    app.state.result_cache = InMemoryResultCache(ttl_seconds=60)
    app.dependency_overrides[get_openai_analyzer] = lambda: model_analyzer
    app.dependency_overrides[get_document_ai] = lambda: page_provider
    app.dependency_overrides[get_google_vision] = lambda: page_provider
    app.dependency_overrides[get_tesseract] = lambda: page_provider
    yield
    app.dependency_overrides.clear()

@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c

@pytest.fixture
def failing_provider():
    return FakePageProvider(error=ProviderError("Vision error: quota exceeded"))
