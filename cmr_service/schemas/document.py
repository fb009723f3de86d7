"""
document.py (Schemas)

This file defines the canonical record returned for every analyzed
document: a CMR consignment note (page 1) and a commercial invoice (page 2).

Rules shared by every model here:
- Every leaf field is a string
- An empty string means "not found"
- Nested party objects are always present, never null

Records are frozen. Once the normalizer builds one it can be cached and
handed to several requests without anyone changing it.

This file does NOT:
- Clean or validate values (see services/normalizer.py)
- Read documents or call AI providers
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ExporterParty(BaseModel):
    """Sender / consignor of the goods."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", examples=["ACME LLC"])
    address: str = Field(default="", examples=["Berliner Str. 5, Hamburg"])


class ImporterParty(BaseModel):
    """Receiver / consignee of the goods. `id` is the tax or company id."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", examples=["Baku Motors"])
    address: str = Field(default="", examples=["Nizami 10, Baku"])
    id: str = Field(default="", examples=["1402345671"])


class CmrRecord(BaseModel):
    """
    Fields read from the CMR transport document.

    gross_weight_kg holds a numeric-looking string such as "450.5",
    or "" when no weight could be read.
    """

    model_config = ConfigDict(frozen=True)

    exporter: ExporterParty = Field(default_factory=ExporterParty)
    importer: ImporterParty = Field(default_factory=ImporterParty)
    goods_name: str = ""
    vin: str = Field(default="", examples=["1M8GDM9AXKP042788"])
    gross_weight_kg: str = Field(default="", examples=["450.5"])
    loading_place: str = ""
    delivery_place: str = ""
    date: str = ""


class InvoiceRecord(BaseModel):
    """Fields read from the commercial invoice."""

    model_config = ConfigDict(frozen=True)

    exporter: ExporterParty = Field(default_factory=ExporterParty)
    importer: ImporterParty = Field(default_factory=ImporterParty)
    goods_name: str = ""
    vin: str = ""
    invoice_no: str = Field(default="", examples=["INV-2024/117"])
    invoice_date: str = Field(default="", examples=["12.03.2024"])
    total_amount: str = Field(default="", examples=["18500.00"])


class DocumentRecord(BaseModel):
    """The full analysis result: one CMR and one invoice."""

    model_config = ConfigDict(frozen=True)

    cmr: CmrRecord = Field(default_factory=CmrRecord)
    invoice: InvoiceRecord = Field(default_factory=InvoiceRecord)


class ExtractedFields(BaseModel):
    """
    Flat output of the text-pattern extractor.

    Unlike DocumentRecord, a field here is None when no pattern matched.
    This keeps "the extractor found nothing" apart from the normalizer's
    empty-string default.
    """

    exporter_name: Optional[str] = None
    importer_name: Optional[str] = None
    importer_id: Optional[str] = None
    goods_name: Optional[str] = None
    vin: Optional[str] = None
    gross_weight: Optional[str] = None
    loading_place: Optional[str] = None
    delivery_place: Optional[str] = None
    cmr_date: Optional[str] = None
    invoice_no: Optional[str] = None
    invoice_date: Optional[str] = None
    total_amount: Optional[str] = None


class AnalysisResponse(BaseModel):
    """Envelope returned by every analysis endpoint."""

    status: str = Field(default="ok", description="Always 'ok' on success")
    analysis: DocumentRecord = Field(
        ...,
        description="Normalized CMR and invoice data"
    )
    cached: bool = Field(
        default=False,
        description="True when the result came from the content-hash cache"
    )


class TextAnalysisRequest(BaseModel):
    """
    Request body for POST /analyze/text.

    raw_text is read as the CMR page. invoice_text, when given, is read
    as the invoice page; otherwise the invoice is left empty.
    """

    raw_text: str = Field(
        ...,
        description="Plain text of the CMR page (for example OCR output)",
        examples=["Exporter: ACME LLC\nVIN: 1M8GDM9AXKP042788\nGross weight: 450,5 kg"]
    )
    invoice_text: Optional[str] = Field(
        default=None,
        description="Plain text of the invoice page (optional)"
    )
