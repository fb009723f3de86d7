"""
media.py

Media type handling for uploaded documents.
Only PDF, PNG and JPEG uploads are analyzed.
"""

from typing import Optional

from cmr_service.services.errors import UnsupportedMediaTypeError


SUPPORTED_MEDIA_TYPES = {
    "application/pdf": ".pdf",
    "image/png": ".png",
    "image/jpeg": ".jpg",
}

EXTENSION_MEDIA_TYPES = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


def resolve_media_type(content_type: Optional[str], filename: Optional[str]) -> str:
    """
    Decide the media type of an upload.

    The declared content type wins when it is one we support.
    Browsers often send "application/octet-stream", so the file
    extension is used as a fallback.

    Raises:
    - UnsupportedMediaTypeError when neither gives PDF, PNG or JPEG
    """

    declared = (content_type or "").split(";")[0].strip().lower()
    if declared == "image/jpg":
        declared = "image/jpeg"
    if declared in SUPPORTED_MEDIA_TYPES:
        return declared

    name = (filename or "").lower()
    for extension, media_type in EXTENSION_MEDIA_TYPES.items():
        if name.endswith(extension):
            return media_type

    raise UnsupportedMediaTypeError(
        "Unsupported file type. Only PDF, PNG, JPG and JPEG are allowed."
    )
