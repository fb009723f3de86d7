"""
ocr.py

Local OCR with Tesseract. Used when no cloud provider is wanted
(offline runs, development, or as a cheap fallback).

Supported file types:
- PDF (normal PDF and scanned PDF)
- PNG / JPG / JPEG (image files)

This file:
- Only returns text, one string per page
- Does NOT save files anywhere
- Does NOT contain FastAPI routes
"""

import io
import logging
from typing import List, Optional

import cv2
import fitz  # Used to read PDF files (PyMuPDF)
import numpy as np
import pytesseract  # OCR engine to read text from images
from PIL import Image  # Used for image handling

from cmr_service.services.errors import ProviderError

logger = logging.getLogger(__name__)

# Page 1 = CMR, page 2 = invoice. Later pages are not analyzed.
MAX_PAGES = 2


class OCRService:
    """
    OCRService is responsible for one job only:
    reading a document and returning the text of each page.

    PDFs with embedded text are read directly (fast and exact).
    Scanned pages and images go through Tesseract.
    """

    def __init__(self, tesseract_cmd: Optional[str] = None):
        """
        Parameters:
        - tesseract_cmd: path to the tesseract binary, when it is not on PATH
        """

        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def extract_pages(self, file_bytes: bytes, media_type: str) -> List[str]:
        """
        Main entry point used by the analysis service.

        Parameters:
        - file_bytes: uploaded file data (kept in memory)
        - media_type: application/pdf, image/png or image/jpeg

        Returns:
        - list of page texts

        Raises:
        - ProviderError if the file cannot be opened or Tesseract fails
        """

        logger.info(f"Tesseract OCR: start ({media_type}, {len(file_bytes)} bytes)")

        try:
            if media_type == "application/pdf":
                pages = self._extract_from_pdf(file_bytes)
            else:
                pages = [self._extract_from_image(Image.open(io.BytesIO(file_bytes)))]
        except Exception as e:
            logger.error(f"Tesseract OCR failed: {str(e)}")
            raise ProviderError(f"Local OCR failed: {str(e)}")

        logger.info(f"Tesseract OCR: done ({len(pages)} pages)")
        return pages

    def _extract_from_pdf(self, file_bytes: bytes) -> List[str]:
        """
        Read the first pages of a PDF.

        What happens here:
        1. Try to extract text directly (for normal PDFs)
        2. If a page has no text, it is scanned
        3. Render that page at 300 DPI and OCR it
        """

        pages: List[str] = []

        with fitz.open(stream=file_bytes, filetype="pdf") as pdf_document:
            for page_index in range(min(len(pdf_document), MAX_PAGES)):
                page = pdf_document[page_index]

                # Step 1: Embedded text
                page_text = page.get_text().strip()
                if page_text:
                    pages.append(page_text)
                    continue

                # Step 2: Scanned page, render and OCR
                pixmap = page.get_pixmap(dpi=300)
                image = Image.open(io.BytesIO(pixmap.tobytes("png")))
                pages.append(self._extract_from_image(image))

        return pages

    def _extract_from_image(self, image: Image.Image) -> str:
        processed = self._preprocess_image(image)

        # PSM 6 = uniform block of text, fits form-like documents
        return pytesseract.image_to_string(processed, config="--oem 3 --psm 6").strip()

    def _preprocess_image(self, image: Image.Image) -> Image.Image:
        """
        Prepare a printed document page for Tesseract.

        What happens here:
        1. Upscale small images (width below 1500px)
        2. Convert to grayscale
        3. Enhance contrast with CLAHE
        4. Otsu thresholding (black text on white)
        """

        # Step 1: PIL -> numpy (drop alpha, keep 3 channels)
        img_array = np.array(image.convert("RGB"))

        height, width = img_array.shape[:2]
        if width < 1500:
            scale = 1500 / width
            img_array = cv2.resize(
                img_array,
                (1500, int(height * scale)),
                interpolation=cv2.INTER_CUBIC
            )

        # Step 2: Grayscale
        gray = cv2.cvtColor(img_array, cv2.COLOR_RGB2GRAY)

        # Step 3: Contrast
        clahe = cv2.createCLAHE(clipLimit=2.0, tileGridSize=(8, 8))
        enhanced = clahe.apply(gray)

        # Step 4: Binarize
        _, binary = cv2.threshold(
            enhanced,
            0,
            255,
            cv2.THRESH_BINARY + cv2.THRESH_OTSU
        )

        # Dark background with light text: invert
        if np.mean(binary) < 127:
            binary = cv2.bitwise_not(binary)

        return Image.fromarray(binary)
