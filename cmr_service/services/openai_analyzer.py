"""
openai_analyzer.py

Sends an uploaded CMR + invoice document straight to the OpenAI
Responses API and gets structured JSON back.

This is the "model" path: no OCR step, the model reads the PDF or
image itself and fills the schema.

This file:
- Builds the extraction prompt
- Calls the Responses API
- Parses the JSON out of the model answer

This file does NOT:
- Normalize or validate fields (services/normalizer.py does that)
- Cache results (services/analysis.py does that)
"""

import base64
import json
import logging
import re
from typing import Any, Dict

from openai import OpenAI

from cmr_service.services.errors import ProviderError, ProviderResponseError

logger = logging.getLogger(__name__)


EXTRACTION_PROMPT = """
Extract structured data from CMR (page1) and Invoice (page2).
Return STRICT JSON only.
Schema:
{
  "cmr": {
    "exporter": {"name": string|null, "address": string|null},
    "importer": {"name": string|null, "address": string|null, "id": string|null},
    "goods_name": string|null,
    "vin": string|null,
    "gross_weight_kg": string|null,
    "loading_place": string|null,
    "delivery_place": string|null,
    "date": string|null
  },
  "invoice": {
    "exporter": {"name": string|null, "address": string|null},
    "importer": {"name": string|null, "address": string|null, "id": string|null},
    "goods_name": string|null,
    "vin": string|null,
    "invoice_no": string|null,
    "invoice_date": string|null,
    "total_amount": string|null
  }
}

Return ONLY raw JSON. Do NOT wrap in ```json fences. Do NOT add any extra text.
"""

FENCE_START_RE = re.compile(r"^```(?:json)?", re.IGNORECASE)
FENCE_END_RE = re.compile(r"```$")


def parse_model_json(raw: Any) -> Dict[str, Any]:
    """
    Pull the JSON object out of a model answer.

    Models sometimes wrap the answer in ```json fences or add a
    sentence around it, even when told not to.

    What happens here:
    1. Strip code fences
    2. Keep text from the first "{" to the last "}"
    3. Parse it

    Raises:
    - ProviderResponseError if no object is found or it is not valid JSON
    """

    text = str(raw or "").strip()
    text = FENCE_END_RE.sub("", FENCE_START_RE.sub("", text)).strip()

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ProviderResponseError(f"No JSON object in model output. Raw: {text[:300]}")

    try:
        parsed = json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise ProviderResponseError(f"Model returned invalid JSON: {e}. Raw: {text[:300]}")

    if not isinstance(parsed, dict):
        raise ProviderResponseError("Model output is not a JSON object")

    return parsed


class OpenAIAnalyzerService:
    """
    Document analysis with the OpenAI Responses API.

    PDFs are sent as input_file, PNG/JPEG as input_image.
    """

    def __init__(self, api_key: str, model: str = "gpt-4.1-mini"):
        """
        Parameters:
        - api_key: OpenAI API key
        - model: Responses API model name
        """

        self.client = OpenAI(api_key=api_key)
        self.model = model

        logger.info(f"OpenAI analyzer initialized (model={model})")

    def _file_part(self, file_bytes: bytes, media_type: str) -> Dict[str, Any]:
        encoded = base64.b64encode(file_bytes).decode("utf-8")
        data_url = f"data:{media_type};base64,{encoded}"

        if media_type == "application/pdf":
            return {
                "type": "input_file",
                "filename": "document.pdf",
                "file_data": data_url,
            }
        return {"type": "input_image", "image_url": data_url}

    def analyze(self, file_bytes: bytes, media_type: str) -> Dict[str, Any]:
        """
        Ask the model for the CMR / invoice JSON.

        Parameters:
        - file_bytes: uploaded document
        - media_type: application/pdf, image/png or image/jpeg

        Returns:
        - candidate dict (not yet normalized)

        Raises:
        - ProviderResponseError when the answer holds no usable JSON
        - ProviderError when the API call itself fails
        """

        logger.info(f"OpenAI analysis: start ({media_type}, {len(file_bytes)} bytes)")

        try:
            # Step 1: Send prompt + document in one user message
            response = self.client.responses.create(
                model=self.model,
                input=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "input_text", "text": EXTRACTION_PROMPT},
                            self._file_part(file_bytes, media_type),
                        ],
                    }
                ],
            )
        except Exception as e:
            logger.error(f"OpenAI analysis failed: {str(e)}")
            raise ProviderError(f"OpenAI request failed: {str(e)}")

        # Step 2: Collect the text answer
        output_text = (getattr(response, "output_text", None) or "").strip()
        logger.info(f"OpenAI analysis: done ({len(output_text)} chars)")

        # Step 3: Parse JSON (raises ProviderResponseError)
        return parse_model_json(output_text)
