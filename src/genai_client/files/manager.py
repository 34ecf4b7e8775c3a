"""Files API: upload, list, inspect and delete uploaded files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from genai_client.errors import MissingApiKeyError
from genai_client.files.multipart import RandomSource, build_multipart_upload
from genai_client.logger import BaseComponent
from genai_client.media.files import read_upload_file
from genai_client.models import FileMetadataResponse, ListFilesResponse, UploadFileResponse
from genai_client.requests.request import FilesRequestUrl, FilesTask
from genai_client.requests.transport import HttpTransport, get_headers, resolve_request_options

if TYPE_CHECKING:
    from pathlib import Path

    from genai_client.models import FileMetadata, RequestOptions
    from genai_client.settings import Settings


def parse_file_id(file_id: str) -> str:
    """Strip a leading ``files/`` from a file name."""
    return file_id.removeprefix("files/")


class FileManager(BaseComponent):
    """Client for the files API."""

    def __init__(
        self,
        api_key: str,
        request_options: RequestOptions | None = None,
        *,
        transport: HttpTransport | None = None,
        app_settings: Settings | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        """Bind the manager to an API key and optional transport overrides."""
        if not api_key:
            message = "An API key is required to use the files API."
            raise MissingApiKeyError(message)
        self.api_key = api_key
        self._request_options = resolve_request_options(request_options, app_settings)
        self._transport = transport or HttpTransport(app_settings=app_settings)
        self._rng = rng

    def upload_file(self, file_path: Path | str, file_metadata: FileMetadata) -> UploadFileResponse:
        """Upload a local file with its metadata."""
        self.log_start("upload_file", mime_type=file_metadata.mime_type, display_name=file_metadata.display_name)
        file_bytes = read_upload_file(file_path)
        upload = build_multipart_upload(file_bytes, file_metadata, rng=self._rng)
        url = self._url(FilesTask.UPLOAD)
        headers = {**get_headers(url), **upload.headers}
        result = UploadFileResponse.from_payload(self._transport.send_json(url, headers, upload.body))
        self.log_end("upload_file", file_name=result.file.name, size_bytes=len(file_bytes))
        return result

    def list_files(self, *, page_size: int | None = None, page_token: str | None = None) -> ListFilesResponse:
        """List uploaded files, one page at a time."""
        self.log_start("list_files", page_size=page_size, has_token=page_token is not None)
        url = self._url(FilesTask.LIST)
        if page_size:
            url.append_param("pageSize", str(page_size))
        if page_token:
            url.append_param("pageToken", page_token)
        result = ListFilesResponse.from_payload(self._transport.send_json(url, get_headers(url), method="GET"))
        self.log_end("list_files", count=len(result.files), has_next=result.next_page_token is not None)
        return result

    def get_file(self, file_id: str) -> FileMetadataResponse:
        """Fetch metadata for one file; accepts ``abc`` or ``files/abc``."""
        self.log_start("get_file", file_id=file_id)
        url = self._url(FilesTask.GET)
        url.append_path(parse_file_id(file_id))
        result = FileMetadataResponse.from_payload(self._transport.send_json(url, get_headers(url), method="GET"))
        self.log_end("get_file", state=result.state.value)
        return result

    def delete_file(self, file_id: str) -> None:
        """Delete one file."""
        self.log_start("delete_file", file_id=file_id)
        url = self._url(FilesTask.DELETE)
        url.append_path(parse_file_id(file_id))
        self._transport.send(url, get_headers(url), method="DELETE")
        self.log_end("delete_file", file_id=file_id)

    def _url(self, task: FilesTask) -> FilesRequestUrl:
        return FilesRequestUrl(task, self.api_key, self._request_options)
