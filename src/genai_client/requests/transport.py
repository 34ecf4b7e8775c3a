"""HTTP transport for API calls, built on httpx."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx

from genai_client.errors import TransportError
from genai_client.logger import BaseComponent
from genai_client.models import RequestOptions
from genai_client.requests.request import FilesRequestUrl, RequestUrl, get_client_headers
from genai_client.settings import Settings, settings

if TYPE_CHECKING:
    from collections.abc import Mapping

type Url = RequestUrl | FilesRequestUrl


def resolve_request_options(
    request_options: RequestOptions | None,
    app_settings: Settings | None = None,
) -> RequestOptions:
    """Fill unset request options from settings."""
    active = app_settings or settings
    options = request_options or RequestOptions()
    return options.model_copy(
        update={
            "timeout": options.timeout or active.timeout,
            "api_version": options.api_version or active.api_version,
            "base_url": options.base_url or active.base_url,
        },
    )


def get_headers(url: Url) -> dict[str, str]:
    """Headers common to every call: client tag, API key and custom headers."""
    headers = {
        "x-goog-api-client": get_client_headers(),
        "x-goog-api-key": url.api_key,
    }
    options = url.request_options
    if options:
        for name, value in options.custom_headers.items():
            if name.lower() in headers:
                message = f"Cannot set reserved header name {name}"
                raise TransportError(message)
            headers[name] = value
    return headers


class HttpTransport(BaseComponent):
    """Sends one request per call; no retries and no shared connection pool."""

    def __init__(self, *, client: httpx.Client | None = None, app_settings: Settings | None = None) -> None:
        """Use ``client`` for every call when given, otherwise open one per call.

        An injected client keeps its own proxy; the per-call timeout still applies.
        """
        self._client = client
        self._settings = app_settings or settings

    def send(
        self,
        url: Url,
        headers: Mapping[str, str],
        body: bytes | str | None = None,
        *,
        method: str = "POST",
    ) -> httpx.Response:
        """Perform the exchange and return the successful response."""
        target = str(url)
        timeout = self._timeout(url)
        self.log_start("http_request", method=method, url=target)
        self.log_io(
            direction="request",
            headers=dict(headers),
            body_bytes=len(body) if body is not None else 0,
        )
        try:
            if self._client is not None:
                response = self._client.request(method, target, headers=headers, content=body, timeout=timeout)
            else:
                with httpx.Client(proxy=self._settings.http_proxy, timeout=timeout) as client:
                    response = client.request(method, target, headers=headers, content=body)
        except httpx.HTTPError as exc:
            message = f"Error fetching from {target}: {exc}"
            self.logger.error("http_error", url=target, error=str(exc))
            raise TransportError(message) from exc

        if not response.is_success:
            raise self._error_from_response(target, response)
        self.log_io(direction="response", status=response.status_code, body_bytes=len(response.content))
        self.log_end("http_request", status=response.status_code)
        return response

    def send_json(
        self,
        url: Url,
        headers: Mapping[str, str],
        body: bytes | str | None = None,
        *,
        method: str = "POST",
    ) -> Any:
        """Like :meth:`send`, returning the decoded JSON body."""
        response = self.send(url, headers, body, method=method)
        try:
            return response.json()
        except ValueError as exc:
            message = f"Error parsing response from {url}: [{response.status_code} {response.reason_phrase}] {exc}"
            raise TransportError(
                message,
                status=response.status_code,
                status_text=response.reason_phrase,
            ) from exc

    def post_json(self, url: Url, payload: Mapping[str, Any]) -> Any:
        """POST a JSON body and return the decoded JSON answer."""
        headers = {**get_headers(url), "Content-Type": "application/json"}
        return self.send_json(url, headers, json.dumps(payload))

    def _timeout(self, url: Url) -> float:
        options = url.request_options
        return options.timeout if options and options.timeout else self._settings.timeout

    def _error_from_response(self, target: str, response: httpx.Response) -> TransportError:
        message = ""
        error_details: list[dict[str, Any]] | None = None
        try:
            error = response.json()["error"]
            message = error["message"]
            if error.get("details"):
                error_details = error["details"]
                message += f" {json.dumps(error_details)}"
        except (ValueError, KeyError, TypeError):
            self.logger.warning("unparsable_error_body", url=target, status=response.status_code)
        self.logger.error("http_status_error", url=target, status=response.status_code)
        return TransportError(
            f"Error fetching from {target}: [{response.status_code} {response.reason_phrase}] {message}",
            status=response.status_code,
            status_text=response.reason_phrase,
            error_details=error_details,
        )
