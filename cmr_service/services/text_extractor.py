"""
text_extractor.py

Reads CMR / invoice fields out of plain text (OCR output) with the
ordered pattern table from patterns.py.

Used when a provider only gives us text (Document AI, Google Vision,
Tesseract) instead of structured JSON.

What happens here:
1. Clean the text once (line endings, spaces, blank lines)
2. For each field, try its rules in order, first match wins
3. Report missing fields as None
4. Map the flat fields into the nested candidate shape
5. Hand the candidate to the normalizer

Nothing in this file raises. Bad input simply gives empty results.
"""

import re
from typing import Any, Dict, Iterable, Optional

from cmr_service.schemas.document import DocumentRecord, ExtractedFields
from cmr_service.services.normalizer import normalize
from cmr_service.services.patterns import FIELD_RULES, PatternRule


LINE_BREAK_RE = re.compile(r"\r\n?")
HORIZONTAL_SPACE_RE = re.compile(r"[ \t]+")
BLANK_LINES_RE = re.compile(r"\n{3,}")


def clean_text(raw_text: Any) -> str:
    """
    Normalize OCR text before any pattern runs.

    - CRLF / CR become LF
    - runs of spaces and tabs become one space
    - 3 or more newlines become exactly 2
    - leading / trailing whitespace is removed
    """
    if not isinstance(raw_text, str):
        return ""
    text = LINE_BREAK_RE.sub("\n", raw_text)
    text = HORIZONTAL_SPACE_RE.sub(" ", text)
    text = BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def match_first(text: str, rules: Iterable[PatternRule]) -> Optional[str]:
    """Return the trimmed capture of the first matching rule, else None."""
    if not text:
        return None
    for rule in rules:
        match = rule.pattern.search(text)
        if not match:
            continue
        value = match.group(rule.group)
        if value and value.strip():
            return value.strip()
    return None


def extract_from_text(raw_text: Any) -> ExtractedFields:
    """
    Best-effort field extraction from raw document text.

    Parameters:
    - raw_text: text of one page (None or non-string counts as empty)

    Returns:
    - ExtractedFields with None for every field no rule matched

    Example:
    "Exporter: ACME LLC\\nVIN: 1M8GDM9AXKP042788\\nGross weight: 450,5 kg"
    gives exporter_name="ACME LLC", vin="1M8GDM9AXKP042788",
    gross_weight="450.5".
    """
    text = clean_text(raw_text)

    values: Dict[str, Optional[str]] = {}
    for field in FIELD_RULES:
        value = match_first(text, field.rules)
        if value is not None and field.decimal:
            value = value.replace(",", ".")
        values[field.name] = value

    return ExtractedFields(**values)


def build_candidate(
    cmr_fields: ExtractedFields,
    invoice_fields: Optional[ExtractedFields] = None
) -> Dict[str, Any]:
    """
    Put flat extractor output into the nested DocumentRecord shape.

    Values stay None where nothing was found. The normalizer turns
    them into empty strings. Addresses are never read from text.
    """
    invoice_fields = invoice_fields or ExtractedFields()

    return {
        "cmr": {
            "exporter": {"name": cmr_fields.exporter_name, "address": None},
            "importer": {
                "name": cmr_fields.importer_name,
                "address": None,
                "id": cmr_fields.importer_id,
            },
            "goods_name": cmr_fields.goods_name,
            "vin": cmr_fields.vin,
            "gross_weight_kg": cmr_fields.gross_weight,
            "loading_place": cmr_fields.loading_place,
            "delivery_place": cmr_fields.delivery_place,
            "date": cmr_fields.cmr_date,
        },
        "invoice": {
            "exporter": {"name": invoice_fields.exporter_name, "address": None},
            "importer": {
                "name": invoice_fields.importer_name,
                "address": None,
                "id": invoice_fields.importer_id,
            },
            "goods_name": invoice_fields.goods_name,
            "vin": invoice_fields.vin,
            "invoice_no": invoice_fields.invoice_no,
            "invoice_date": invoice_fields.invoice_date,
            "total_amount": invoice_fields.total_amount,
        },
    }


def analyze_pages(cmr_text: Any, invoice_text: Any = None) -> DocumentRecord:
    """
    Full text path: extract both pages and normalize.

    Page 1 of a scanned pack is the CMR, page 2 the invoice.
    A missing invoice page leaves the invoice record empty.
    """
    cmr_fields = extract_from_text(cmr_text)
    invoice_fields = extract_from_text(invoice_text)
    return normalize(build_candidate(cmr_fields, invoice_fields))
