"""
errors.py

Exceptions raised by the provider services.

API routes catch these and turn them into HTTP responses.
The normalizer and the text extractor never raise any of them.
"""


class ProviderError(RuntimeError):
    """An external AI / OCR provider call failed."""


class ProviderNotConfiguredError(ProviderError):
    """Credentials or settings for a provider are missing."""


class ProviderResponseError(ProviderError):
    """The provider answered, but the answer could not be used."""


class UnsupportedMediaTypeError(ValueError):
    """The uploaded file is not a PDF, PNG or JPEG."""
