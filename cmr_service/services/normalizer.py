"""
normalizer.py

Turns an unvalidated candidate (model JSON or extractor output) into a
DocumentRecord where every declared field exists and is a string.

The candidate can be anything JSON-like: a dict with missing keys,
null values, numbers where strings are expected, a list, a plain
string, or None. Nothing here raises; the worst case is a record
full of empty strings.

Field rules:
- text fields:      trimmed
- VIN fields:       uppercased, trimmed, must be exactly 17 chars from
                    A-H, J-N, P, R-Z, 0-9 (no I, O, Q) or become ""
- gross weight:     uppercased, trimmed, "," replaced by ".", then the
                    first numeric run is kept ("" when there is none)

Known quirk: the comma swap happens before the numeric run is taken,
so a thousands separator is misread. "1,234.5" becomes "1.234.5" and
then "1.234". Downstream consumers may already rely on this, so it is
kept as is.

This file does NOT:
- Call any provider or read files
- Log per field (it runs on every request)
"""

import re
from typing import Any, Dict

from pydantic import BaseModel

from cmr_service.schemas.document import (
    CmrRecord,
    DocumentRecord,
    ExporterParty,
    ImporterParty,
    InvoiceRecord,
)


VIN_RE = re.compile(r"^[A-HJ-NPR-Z0-9]{17}$")
NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]+)?")


def _as_mapping(value: Any) -> Dict[str, Any]:
    """Anything that is not a dict (or a model) counts as an empty object."""
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, dict):
        return value
    return {}


def normalize_text(value: Any) -> str:
    """
    Coerce one leaf value to a trimmed string.

    Strings are trimmed, numbers are printed, everything else
    (None, bools, lists, dicts) becomes "".
    """
    if isinstance(value, str):
        return value.strip()
    # bool is an int subclass, but True is not a field value
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        try:
            return str(value).strip()
        except ValueError:
            # int too long to print (sys.get_int_max_str_digits)
            return ""
    return ""


def normalize_vin(value: Any) -> str:
    vin = normalize_text(value).upper()
    if VIN_RE.match(vin):
        return vin
    return ""


def normalize_weight(value: Any) -> str:
    weight = normalize_text(value).upper().replace(",", ".")
    match = NUMBER_RE.search(weight)
    return match.group(0) if match else ""


def _normalize_exporter(value: Any) -> ExporterParty:
    data = _as_mapping(value)
    return ExporterParty(
        name=normalize_text(data.get("name")),
        address=normalize_text(data.get("address")),
    )


def _normalize_importer(value: Any) -> ImporterParty:
    data = _as_mapping(value)
    return ImporterParty(
        name=normalize_text(data.get("name")),
        address=normalize_text(data.get("address")),
        id=normalize_text(data.get("id")),
    )


def _normalize_cmr(value: Any) -> CmrRecord:
    data = _as_mapping(value)
    return CmrRecord(
        exporter=_normalize_exporter(data.get("exporter")),
        importer=_normalize_importer(data.get("importer")),
        goods_name=normalize_text(data.get("goods_name")),
        vin=normalize_vin(data.get("vin")),
        gross_weight_kg=normalize_weight(data.get("gross_weight_kg")),
        loading_place=normalize_text(data.get("loading_place")),
        delivery_place=normalize_text(data.get("delivery_place")),
        date=normalize_text(data.get("date")),
    )


def _normalize_invoice(value: Any) -> InvoiceRecord:
    data = _as_mapping(value)
    return InvoiceRecord(
        exporter=_normalize_exporter(data.get("exporter")),
        importer=_normalize_importer(data.get("importer")),
        goods_name=normalize_text(data.get("goods_name")),
        vin=normalize_vin(data.get("vin")),
        invoice_no=normalize_text(data.get("invoice_no")),
        invoice_date=normalize_text(data.get("invoice_date")),
        total_amount=normalize_text(data.get("total_amount")),
    )


def normalize(candidate: Any) -> DocumentRecord:
    """
    Build a conformant DocumentRecord from any candidate value.

    The input is never mutated; a new record is always returned.
    Passing a DocumentRecord back in gives an equal record, so
    normalize(normalize(x)) == normalize(x).

    Called by:
    - services/analysis.py for provider output
    - services/text_extractor.py after pattern extraction
    """
    data = _as_mapping(candidate)
    return DocumentRecord(
        cmr=_normalize_cmr(data.get("cmr")),
        invoice=_normalize_invoice(data.get("invoice")),
    )
