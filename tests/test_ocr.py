import fitz
import pytest
from PIL import Image

from cmr_service.services.errors import ProviderError
from cmr_service.services.ocr import OCRService


def make_pdf(*page_texts):
    document = fitz.open()
    for text in page_texts:
        page = document.new_page()
        page.insert_text((72, 72), text)
    data = document.tobytes()
    document.close()
    return data


def test_pdf_with_embedded_text_skips_tesseract():
    pdf = make_pdf("Sender: ACME LLC", "Invoice No: 55", "Page three")
    pages = OCRService().extract_pages(pdf, "application/pdf")
    # only the CMR and invoice pages are read
    assert len(pages) == 2
    assert "ACME LLC" in pages[0]
    assert "Invoice No: 55" in pages[1]


def test_broken_pdf_is_provider_error():
    with pytest.raises(ProviderError):
        OCRService().extract_pages(b"not a pdf", "application/pdf")


def test_preprocess_returns_binary_image():
    image = Image.new("RGB", (400, 200), color=(40, 40, 40))
    processed = OCRService()._preprocess_image(image)
    assert processed.mode == "L"
    assert processed.size[0] == 1500
    # thresholded to pure black and white
    assert set(processed.getdata()) <= {0, 255}
