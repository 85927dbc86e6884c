from __future__ import annotations

import base64
import logging
import mimetypes
from dataclasses import dataclass
from typing import Optional

from carbontrack.errors import FileReadError

logger = logging.getLogger(__name__)

EXTENSION_MIME_TYPES = {
    "pdf": "application/pdf",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
    "csv": "text/csv",
}
UPLOAD_EXTENSIONS = list(EXTENSION_MIME_TYPES)
ACCEPTED_MIME_TYPES = {"application/pdf", "text/csv"}
ACCEPTED_MIME_PREFIXES = ("image/",)
SOFT_SIZE_LIMIT_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class UploadPayload:
    name: str
    mime_type: str
    data: str
    size: int


def is_accepted_mime_type(mime_type: Optional[str]) -> bool:
    if not mime_type:
        return False
    normalized = mime_type.strip().lower()
    return normalized in ACCEPTED_MIME_TYPES or normalized.startswith(ACCEPTED_MIME_PREFIXES)


def resolve_mime_type(name: str, declared: Optional[str] = None) -> Optional[str]:
    """Prefer an accepted browser-declared type, otherwise go by the file name.

    Browsers often declare CSV files as application/vnd.ms-excel or
    application/octet-stream, so a declared type outside the accepted set never
    overrides the extension.
    """
    declared = declared.strip().lower() if declared and declared.strip() else None
    if is_accepted_mime_type(declared):
        return declared

    guessed, _ = mimetypes.guess_type(name)
    if is_accepted_mime_type(guessed):
        return guessed

    extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    return EXTENSION_MIME_TYPES.get(extension) or declared or guessed


def _read_bytes(upload: object) -> bytes:
    if hasattr(upload, "getvalue"):
        return upload.getvalue()
    if hasattr(upload, "read"):
        return upload.read()
    raise TypeError(f"Unsupported upload object: {type(upload).__name__}")


def read_upload(upload: object) -> UploadPayload:
    """Read an uploaded file into base64 text ready for the analysis request."""
    if upload is None:
        raise FileReadError("No file uploaded.")

    name = str(getattr(upload, "name", "") or "upload")
    mime_type = resolve_mime_type(name, getattr(upload, "type", None))
    if not is_accepted_mime_type(mime_type):
        raise FileReadError(f"Unsupported file type for '{name}': {mime_type or 'unknown'}")

    try:
        raw = _read_bytes(upload)
    except (OSError, ValueError, TypeError) as exc:
        raise FileReadError(f"Unable to read uploaded file '{name}'.") from exc

    if not raw:
        raise FileReadError(f"Uploaded file '{name}' is empty.")

    if len(raw) > SOFT_SIZE_LIMIT_BYTES:
        logger.warning("Upload '%s' is %.1f MB, above the recommended 10 MB.", name, len(raw) / 1024 / 1024)

    return UploadPayload(
        name=name,
        mime_type=mime_type,
        data=base64.b64encode(raw).decode("ascii"),
        size=len(raw),
    )
