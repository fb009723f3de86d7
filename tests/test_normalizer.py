import pytest

from cmr_service.schemas.document import DocumentRecord
from cmr_service.services.normalizer import (
    normalize,
    normalize_text,
    normalize_vin,
    normalize_weight,
)


GARBAGE = [
    None,
    {},
    [],
    [1, 2, 3],
    "cmr",
    42,
    3.5,
    True,
    {"cmr": None, "invoice": "nope"},
    {"cmr": [], "invoice": 7},
    {"cmr": {"exporter": "ACME", "importer": ["x"], "vin": {"a": 1}}},
    {"cmr": {"exporter": {"name": {"deep": {"er": [None]}}}}},
    {"cmr": {"gross_weight_kg": None, "date": False}, "extra": {"x": 1}},
    {"cmr": {"goods_name": 10 ** 5000, "gross_weight_kg": 10 ** 5000}},
]


@pytest.mark.parametrize("candidate", GARBAGE)
def test_normalize_is_total(candidate):
    record = normalize(candidate)
    assert isinstance(record, DocumentRecord)
    # every leaf is a string
    dumped = record.model_dump()
    for section in ("cmr", "invoice"):
        for key, value in dumped[section].items():
            if isinstance(value, dict):
                assert all(isinstance(v, str) for v in value.values())
            else:
                assert isinstance(value, str), key


@pytest.mark.parametrize("candidate", GARBAGE + [
    {"cmr": {"vin": " 1m8gdm9axkp042788 ", "gross_weight_kg": "1,234.5 kg"}},
    {"invoice": {"exporter": {"name": "  A  "}, "total_amount": 100}},
])
def test_normalize_is_idempotent(candidate):
    once = normalize(candidate)
    assert normalize(once) == once
    assert normalize(once.model_dump()) == once


def test_default_nested_objects():
    record = normalize({})
    assert record.cmr.exporter.model_dump() == {"name": "", "address": ""}
    assert record.cmr.importer.model_dump() == {"name": "", "address": "", "id": ""}
    assert record.invoice.exporter.model_dump() == {"name": "", "address": ""}
    assert record.invoice.importer.model_dump() == {"name": "", "address": "", "id": ""}


def test_valid_vin_kept():
    assert normalize({"cmr": {"vin": "1M8GDM9AXKP042788"}}).cmr.vin == "1M8GDM9AXKP042788"


def test_vin_uppercased_and_trimmed():
    assert normalize({"invoice": {"vin": "  1m8gdm9axkp042788\n"}}).invoice.vin == "1M8GDM9AXKP042788"


def test_short_vin_rejected():
    assert normalize({"cmr": {"vin": "1M8GDM9AXKP04278"}}).cmr.vin == ""


def test_vin_with_letter_o_rejected():
    assert normalize({"cmr": {"vin": "1M8GDM9AXKPO42788"}}).cmr.vin == ""


@pytest.mark.parametrize("vin", ["1M8GDM9AXKPI42788", "1M8GDM9AXKPQ42788", "1M8GDM9AXKP0427889"])
def test_invalid_vins_never_truncated(vin):
    assert normalize_vin(vin) == ""


def test_weight_extraction():
    assert normalize({"cmr": {"gross_weight_kg": "  1234.5 KG "}}).cmr.gross_weight_kg == "1234.5"


def test_weight_decimal_comma():
    assert normalize_weight("450,5 kg") == "450.5"


def test_weight_thousands_separator_quirk():
    # comma becomes a period before the numeric run is taken
    assert normalize_weight("1,234.5") == "1.234"


def test_weight_without_number():
    assert normalize_weight("unknown") == ""
    assert normalize_weight(None) == ""


def test_weight_ignores_non_ascii_digits():
    assert normalize_weight("٤٥٠ kg") == ""
    assert normalize_weight("٤٥٠ / 450 kg") == "450"


def test_huge_int_becomes_empty():
    assert normalize_text(10 ** 5000) == ""
    assert normalize({"cmr": {"goods_name": 10 ** 5000}}).cmr.goods_name == ""


def test_weight_from_number():
    assert normalize_weight(450) == "450"
    assert normalize_weight(450.5) == "450.5"


def test_text_coercion():
    assert normalize_text("  ACME LLC \t") == "ACME LLC"
    assert normalize_text(None) == ""
    assert normalize_text(12) == "12"
    assert normalize_text(True) == ""
    assert normalize_text(["a"]) == ""
    assert normalize_text({"a": 1}) == ""


def test_input_not_mutated():
    candidate = {"cmr": {"vin": " 1m8gdm9axkp042788 "}}
    normalize(candidate)
    assert candidate == {"cmr": {"vin": " 1m8gdm9axkp042788 "}}


def test_extra_fields_ignored():
    record = normalize({"cmr": {"unknown": "x", "goods_name": " Car "}, "other": 1})
    assert record.cmr.goods_name == "Car"
    assert "unknown" not in record.cmr.model_dump()
