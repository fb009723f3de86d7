"""
patterns.py

Label-anchored regular expressions used to read fields from OCR text.

Each field has an ORDERED list of rules. The extractor tries them in
order and the first rule that matches wins, even if a later rule would
match earlier in the text. This is how a "VIN: ..." label beats a bare
17-character run that happens to appear first.

The table is plain data so every rule can be tested on its own
(see tests/test_patterns.py).
"""

import re
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class PatternRule:
    """One regex and the capture group holding the value."""

    pattern: re.Pattern
    group: int = 1


@dataclass(frozen=True)
class FieldRule:
    """
    All rules for one field, in priority order.

    decimal=True marks measured quantities: a decimal comma in the
    captured value is rewritten to a period ("450,5" -> "450.5").
    Amounts are left as captured, their commas may be thousands
    separators.
    """

    name: str
    rules: Tuple[PatternRule, ...]
    decimal: bool = False


def _rule(regex: str, flags: int = re.IGNORECASE, group: int = 1) -> PatternRule:
    return PatternRule(re.compile(regex, flags), group)


# Shared fragments
VIN_CHARS = r"[A-HJ-NPR-Z0-9]{17}"
NUMBER = r"([0-9]+(?:[.,][0-9]+)?)"
DATE = r"([0-9]{1,2}[./-][0-9]{1,2}[./-][0-9]{2,4})"
PARTY_VALUE = r"[:\s]*([^\n]{3,120})"
PLACE_VALUE = r"[:\s]*([^\n]{2,80})"

ANY_DATE = _rule(r"\b" + DATE + r"\b", flags=0)


FIELD_RULES: Tuple[FieldRule, ...] = (
    FieldRule("vin", (
        _rule(r"\bVIN[:\s]*(" + VIN_CHARS + r")\b"),
        # bare run, case sensitive so ordinary words are not picked up
        _rule(r"\b(" + VIN_CHARS + r")\b", flags=0),
    )),
    FieldRule("gross_weight", (
        _rule(r"\bGross\s*weight[:\s]*" + NUMBER + r"\s*(kg)?\b"),
        _rule(r"\bBrut(?:to)?[:\s]*" + NUMBER + r"\b"),
        _rule(r"\bGross[:\s]*" + NUMBER + r"\b"),
    ), decimal=True),
    FieldRule("exporter_name", (
        _rule(r"\bExporter" + PARTY_VALUE),
        _rule(r"\bSender" + PARTY_VALUE),
        _rule(r"\bConsignor" + PARTY_VALUE),
    )),
    FieldRule("importer_name", (
        _rule(r"\bImporter" + PARTY_VALUE),
        _rule(r"\bReceiver" + PARTY_VALUE),
        _rule(r"\bConsignee" + PARTY_VALUE),
    )),
    FieldRule("importer_id", (
        _rule(r"\bTax\s*ID\b[:\s]*([A-Z0-9\-]{4,30})\b"),
        _rule(r"\bID\b[:\s]*([A-Z0-9\-]{4,30})\b"),
    )),
    FieldRule("goods_name", (
        _rule(r"\bGoods(?:\s*description)?" + PARTY_VALUE),
        _rule(r"\bDescription" + PARTY_VALUE),
    )),
    FieldRule("loading_place", (
        _rule(r"\bLoading\s*place" + PLACE_VALUE),
        _rule(r"\bPlace\s*of\s*taking\s*over" + PLACE_VALUE),
    )),
    FieldRule("delivery_place", (
        _rule(r"\bDelivery\s*place" + PLACE_VALUE),
        _rule(r"\bPlace\s*designated\s*for\s*delivery" + PLACE_VALUE),
    )),
    FieldRule("cmr_date", (
        _rule(r"\b(?:CMR\s*)?Date(?:\s*of\s*issue)?[:\s]*" + DATE + r"\b"),
        ANY_DATE,
    )),
    FieldRule("invoice_no", (
        _rule(r"\bInvoice\s*(?:Number|No\.?|#)[:\s]*([A-Z0-9\-/]+)"),
    )),
    FieldRule("invoice_date", (
        _rule(r"\bInvoice\s*date[:\s]*" + DATE + r"\b"),
        _rule(r"\bDate[:\s]*" + DATE + r"\b"),
        ANY_DATE,
    )),
    FieldRule("total_amount", (
        _rule(r"\bGrand\s*Total[:\s]*" + NUMBER + r"\s*([A-Z]{3})?\b"),
        _rule(r"\bTotal(?:\s*Amount)?[:\s]*" + NUMBER + r"\s*([A-Z]{3})?\b"),
    )),
)

RULES_BY_FIELD: Dict[str, FieldRule] = {rule.name: rule for rule in FIELD_RULES}
