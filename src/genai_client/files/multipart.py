"""``multipart/related`` encoding for file uploads.

The upload body carries two parts in a fixed order: the JSON file metadata,
then the raw file bytes tagged with the file's MIME type.
"""

from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from genai_client.models import FileMetadata

FILES_NAME_PREFIX = "files/"
METADATA_CONTENT_TYPE = "application/json; charset=utf-8"
CRLF = "\r\n"


class RandomSource(Protocol):
    """Anything exposing ``random()`` like :mod:`random` does."""

    def random(self) -> float:
        """Return a float in ``[0.0, 1.0)``."""
        ...


@dataclass(frozen=True, slots=True)
class MultipartUpload:
    """An encoded upload body together with the headers that describe it."""

    body: bytes
    boundary: str
    headers: dict[str, str] = field(default_factory=dict)


def generate_boundary(rng: RandomSource | None = None) -> str:
    """Concatenate the fractional digits of two random draws.

    Collisions only need to be unlikely against file content, so the
    non-cryptographic generator is enough.
    """
    source = rng or random
    return "".join(f"{source.random():.16f}"[2:] for _ in range(2))


def normalize_file_name(name: str) -> str:
    """Prefix a bare file id with ``files/``; a name holding ``/`` is kept as is."""
    return name if "/" in name else f"{FILES_NAME_PREFIX}{name}"


def build_upload_metadata(file_metadata: FileMetadata) -> dict[str, Any]:
    """Return the JSON object sent ahead of the file bytes."""
    upload: dict[str, Any] = {"mimeType": file_metadata.mime_type}
    if file_metadata.display_name is not None:
        upload["displayName"] = file_metadata.display_name
    if file_metadata.name is not None:
        upload["name"] = normalize_file_name(file_metadata.name)
    return {"file": upload}


def build_multipart_upload(
    file_bytes: bytes,
    file_metadata: FileMetadata,
    *,
    rng: RandomSource | None = None,
) -> MultipartUpload:
    """Encode ``file_bytes`` and its metadata as a ``multipart/related`` body."""
    boundary = generate_boundary(rng)
    metadata_json = json.dumps(build_upload_metadata(file_metadata), separators=(",", ":"))
    delimiter = f"--{boundary}"
    head = (
        f"{delimiter}{CRLF}"
        f"Content-Type: {METADATA_CONTENT_TYPE}{CRLF}{CRLF}"
        f"{metadata_json}{CRLF}"
        f"{delimiter}{CRLF}"
        f"Content-Type: {file_metadata.mime_type}{CRLF}{CRLF}"
    )
    tail = f"{CRLF}{delimiter}--"
    headers = {
        "X-Goog-Upload-Protocol": "multipart",
        "Content-Type": f"multipart/related; boundary={boundary}",
    }
    return MultipartUpload(
        body=head.encode("utf-8") + file_bytes + tail.encode("utf-8"),
        boundary=boundary,
        headers=headers,
    )
