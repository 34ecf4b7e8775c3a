"""Helpers for reading local files before they are uploaded or inlined."""

from __future__ import annotations

import mimetypes
from pathlib import Path

from genai_client.models import InlineDataPart


def read_upload_file(file_path: Path | str) -> bytes:
    """Return the raw bytes of ``file_path``."""
    resolved_path = Path(file_path)
    if not resolved_path.is_file():
        message = f"File not found: {resolved_path}"
        raise FileNotFoundError(message)
    return resolved_path.read_bytes()


def guess_mime_type(file_path: Path | str) -> str:
    """Infer a MIME type from the file name."""
    media_type, _ = mimetypes.guess_type(Path(file_path))
    if media_type is None:
        message = f"Cannot infer MIME type for file: {file_path}"
        raise ValueError(message)
    return media_type


def read_inline_part(file_path: Path | str, mime_type: str | None = None) -> InlineDataPart:
    """Read a small file and embed it as base64 inline data."""
    return InlineDataPart.from_bytes(read_upload_file(file_path), mime_type or guess_mime_type(file_path))
