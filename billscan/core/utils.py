"""
Utility functions and constants for bill review.
"""

import datetime as dt
import json
import mimetypes
import time
from pathlib import Path
from typing import Any, Optional

# File type constants
IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".bmp", ".webp"}
PDF_EXTS = {".pdf"}
SUPPORTED_EXTS = IMAGE_EXTS.union(PDF_EXTS)

MIME_OVERRIDES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".pdf": "application/pdf",
}


def guess_mime_type(path: Path) -> str:
    """MIME type for an upload, falling back to octet-stream."""
    ext = path.suffix.lower()
    if ext in MIME_OVERRIDES:
        return MIME_OVERRIDES[ext]
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"


def to_text(value: Any) -> str:
    """Normalize a field value received from the OCR service to text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def timestamp_suffix(now: Optional[dt.datetime] = None) -> str:
    """Return a filename-safe timestamp: YYYYmmdd-HHMMSS."""
    return (now or dt.datetime.now()).strftime("%Y%m%d-%H%M%S")


def epoch_millis() -> int:
    return int(time.time() * 1000)


def size_fmt(n: int) -> str:
    """Format a byte count for console output."""
    if n < 1024:
        return f"{n} B"
    if n < 1024 * 1024:
        return f"{n / 1024:.1f} KB"
    return f"{n / (1024 * 1024):.1f} MB"
