from cmr_service import config
from cmr_service.main import app
from cmr_service.api.dependencies import get_google_vision, get_openai_analyzer
from cmr_service.services.errors import ProviderNotConfiguredError, ProviderResponseError

from fakes import FakeModelAnalyzer
from samples import VALID_VIN


PDF = ("pack.pdf", b"%PDF-1.4 fake document", "application/pdf")


def test_openai_upload(client, model_analyzer):
    r = client.post("/upload", files={"file": PDF})
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["cached"] is False

    cmr = body["analysis"]["cmr"]
    assert cmr["exporter"] == {"name": "ACME LLC", "address": ""}
    assert cmr["importer"] == {"name": "Baku Motors", "address": "", "id": "1402345671"}
    assert cmr["vin"] == VALID_VIN
    assert cmr["gross_weight_kg"] == "1450.5"
    assert cmr["goods_name"] == ""
    # invalid VIN discarded, never truncated
    assert body["analysis"]["invoice"]["vin"] == ""
    assert body["analysis"]["invoice"]["invoice_no"] == "INV-2024/117"
    assert model_analyzer.calls == 1


def test_second_upload_is_cached(client, model_analyzer):
    first = client.post("/upload", files={"file": PDF}).json()
    second = client.post("/upload", files={"file": PDF}).json()
    assert first["cached"] is False
    assert second["cached"] is True
    assert second["analysis"] == first["analysis"]
    assert model_analyzer.calls == 1


def test_cache_is_per_provider(client, model_analyzer, page_provider):
    client.post("/upload", files={"file": PDF})
    r = client.post("/upload/document-ai", files={"file": PDF})
    assert r.json()["cached"] is False
    assert page_provider.calls == ["application/pdf"]


def test_document_ai_upload(client):
    r = client.post("/upload/document-ai", files={"file": PDF})
    assert r.status_code == 200
    analysis = r.json()["analysis"]
    assert analysis["cmr"]["exporter"]["name"] == "ACME LLC"
    assert analysis["cmr"]["loading_place"] == "Hamburg, DE"
    assert analysis["cmr"]["date"] == "12.03.2024"
    assert analysis["invoice"]["invoice_no"] == "INV-2024/117"
    assert analysis["invoice"]["total_amount"] == "18500,00"


def test_google_vision_upload_image(client, page_provider):
    r = client.post("/upload/google-vision", files={"file": ("scan.jpg", b"\xff\xd8\xff", "image/jpeg")})
    assert r.status_code == 200
    assert page_provider.calls == ["image/jpeg"]


def test_tesseract_upload_uses_extension(client, page_provider):
    r = client.post(
        "/upload/tesseract",
        files={"file": ("scan.png", b"\x89PNG data", "application/octet-stream")},
    )
    assert r.status_code == 200
    assert page_provider.calls == ["image/png"]


def test_empty_file_rejected(client, model_analyzer):
    r = client.post("/upload", files={"file": ("empty.pdf", b"", "application/pdf")})
    assert r.status_code == 400
    assert model_analyzer.calls == 0


def test_unsupported_type_rejected(client):
    r = client.post("/upload", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert r.status_code == 415


def test_missing_file_rejected(client):
    r = client.post("/upload")
    assert r.status_code == 422


def test_too_large_rejected(client, monkeypatch):
    monkeypatch.setattr(config, "MAX_UPLOAD_BYTES", 10)
    r = client.post("/upload", files={"file": ("big.pdf", b"x" * 11, "application/pdf")})
    assert r.status_code == 413


def test_provider_failure_is_bad_gateway(client, failing_provider):
    app.dependency_overrides[get_google_vision] = lambda: failing_provider
    r = client.post("/upload/google-vision", files={"file": PDF})
    assert r.status_code == 502
    assert "quota exceeded" in r.json()["detail"]


def test_bad_model_output_is_bad_gateway(client):
    analyzer = FakeModelAnalyzer(error=ProviderResponseError("No JSON object in model output"))
    app.dependency_overrides[get_openai_analyzer] = lambda: analyzer
    r = client.post("/upload", files={"file": PDF})
    assert r.status_code == 502


def test_failed_analysis_not_cached(client):
    analyzer = FakeModelAnalyzer(error=ProviderResponseError("bad"))
    app.dependency_overrides[get_openai_analyzer] = lambda: analyzer
    client.post("/upload", files={"file": PDF})
    assert len(app.state.result_cache) == 0


def test_provider_not_configured(client):
    analyzer = FakeModelAnalyzer(error=ProviderNotConfiguredError("OPENAI_API_KEY is not set"))
    app.dependency_overrides[get_openai_analyzer] = lambda: analyzer
    r = client.post("/upload", files={"file": PDF})
    assert r.status_code == 500
    assert "not configured" in r.json()["detail"]


def test_missing_openai_key(client, monkeypatch):
    app.dependency_overrides.pop(get_openai_analyzer)
    monkeypatch.setattr(config, "OPENAI_API_KEY", None)
    r = client.post("/upload", files={"file": PDF})
    assert r.status_code == 500


def test_unexpected_error_is_500(client):
    analyzer = FakeModelAnalyzer(error=KeyError("surprise"))
    app.dependency_overrides[get_openai_analyzer] = lambda: analyzer
    r = client.post("/upload", files={"file": PDF})
    assert r.status_code == 500
