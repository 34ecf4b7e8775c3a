from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from genai_client.errors import MissingApiKeyError, ResponseError, TransportError
from genai_client.files.manager import FileManager, parse_file_id
from genai_client.files.multipart import build_multipart_upload
from genai_client.models import FileMetadata, FileState

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from genai_client.requests.transport import HttpTransport

    TransportFactory = Callable[[Callable[[httpx.Request], httpx.Response]], HttpTransport]

FILE_RECORD = {
    "name": "files/catname",
    "displayName": "mrcat",
    "mimeType": "image/jpeg",
    "sizeBytes": "12",
    "uri": "https://generativelanguage.googleapis.com/v1beta/files/catname",
    "state": "ACTIVE",
}


def test_upload_posts_multipart_body(
    tmp_path: Path,
    mock_transport: TransportFactory,
    recorded_requests: list[httpx.Request],
    fixed_random: Callable[..., object],
) -> None:
    """Uploads read the file and post the encoded envelope to the upload endpoint."""
    image_path = tmp_path / "cat.jpg"
    image_path.write_bytes(b"\xff\xd8cat-bytes")
    metadata = FileMetadata(mime_type="image/jpeg", display_name="mrcat", name="catname")
    transport = mock_transport(lambda _request: httpx.Response(200, json={"file": FILE_RECORD}))
    manager = FileManager("secret-key", transport=transport, rng=fixed_random(0.25, 0.5))  # type: ignore[arg-type]

    result = manager.upload_file(image_path, metadata)

    rng = fixed_random(0.25, 0.5)
    expected = build_multipart_upload(b"\xff\xd8cat-bytes", metadata, rng=rng)  # type: ignore[arg-type]
    request = recorded_requests[0]
    assert str(request.url) == "https://generativelanguage.googleapis.com/upload/v1beta/files"
    assert request.method == "POST"
    assert request.headers["x-goog-upload-protocol"] == "multipart"
    assert request.headers["content-type"] == f"multipart/related; boundary={expected.boundary}"
    assert request.headers["x-goog-api-key"] == "secret-key"
    assert request.content == expected.body
    assert result.file.name == "files/catname"
    assert result.file.state is FileState.ACTIVE


def test_upload_missing_file_fails_before_any_request(
    tmp_path: Path,
    mock_transport: TransportFactory,
    recorded_requests: list[httpx.Request],
) -> None:
    """A file that cannot be read never reaches the encoder or the network."""
    transport = mock_transport(lambda _request: httpx.Response(200, json={"file": FILE_RECORD}))
    manager = FileManager("secret-key", transport=transport)

    with pytest.raises(FileNotFoundError, match="File not found"):
        manager.upload_file(tmp_path / "missing.jpg", FileMetadata(mime_type="image/jpeg"))

    assert recorded_requests == []


def test_list_files_sends_paging_params(
    mock_transport: TransportFactory,
    recorded_requests: list[httpx.Request],
) -> None:
    """Paging options become query parameters on a GET."""
    body = {"files": [FILE_RECORD], "nextPageToken": "page-2"}
    manager = FileManager("secret-key", transport=mock_transport(lambda _request: httpx.Response(200, json=body)))

    result = manager.list_files(page_size=5, page_token="page-1")

    request = recorded_requests[0]
    assert request.method == "GET"
    assert request.url.path == "/v1beta/files"
    assert dict(request.url.params) == {"pageSize": "5", "pageToken": "page-1"}
    assert [file.display_name for file in result.files] == ["mrcat"]
    assert result.next_page_token == "page-2"


def test_list_files_empty_response(mock_transport: TransportFactory) -> None:
    """An empty listing is returned as an empty page."""
    manager = FileManager("secret-key", transport=mock_transport(lambda _request: httpx.Response(200, json={})))

    result = manager.list_files()

    assert result.files == []
    assert result.next_page_token is None


def test_get_and_delete_strip_files_prefix(
    mock_transport: TransportFactory,
    recorded_requests: list[httpx.Request],
) -> None:
    """Both ``catname`` and ``files/catname`` address the same file."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            return httpx.Response(200, json={})
        return httpx.Response(200, json=FILE_RECORD)

    manager = FileManager("secret-key", transport=mock_transport(handler))

    record = manager.get_file("files/catname")
    manager.delete_file("catname")

    assert record.uri.endswith("/files/catname")
    assert [(request.method, request.url.path) for request in recorded_requests] == [
        ("GET", "/v1beta/files/catname"),
        ("DELETE", "/v1beta/files/catname"),
    ]


def test_parse_file_id() -> None:
    """Only a leading files/ prefix is removed."""
    assert parse_file_id("files/abc") == "abc"
    assert parse_file_id("abc") == "abc"


def test_manager_requires_api_key() -> None:
    """An empty key is rejected up front."""
    with pytest.raises(MissingApiKeyError):
        FileManager("")


def test_unexpected_success_bodies_map_to_client_errors(mock_transport: TransportFactory) -> None:
    """File calls report undecodable or mis-shaped bodies through the client errors."""
    html = FileManager("secret-key", transport=mock_transport(lambda _request: httpx.Response(200, text="<html/>")))
    wrong_shape = FileManager(
        "secret-key",
        transport=mock_transport(lambda _request: httpx.Response(200, json={"files": [{"name": 3}]})),
    )

    with pytest.raises(TransportError):
        html.get_file("catname")
    with pytest.raises(ResponseError, match="ListFilesResponse"):
        wrong_shape.list_files()
