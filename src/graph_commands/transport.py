"""Generic request invoker for Microsoft Graph (lightweight HTTP)."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator

import httpx

from . import auth, config
from .errors import NotFoundError, TransportError

logger = logging.getLogger(__name__)


class GraphTransport:
    """Sends one Graph request at a time and maps failures to package errors.

    ``url`` may be absolute (a ``self`` link returned by Graph) or a path
    relative to ``config.GRAPH_BASE``. Query fragments built by
    ``handles.with_query`` can be passed in the URL itself.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        get_headers: Callable[[], dict[str, str]] | None = None,
        base_url: str | None = None,
    ):
        self._client = client or httpx.Client(timeout=config.TIMEOUT)
        self._get_headers = get_headers or auth.get_headers
        self.base_url = (base_url or config.GRAPH_BASE).rstrip("/")

    def __enter__(self) -> GraphTransport:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def absolute(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    def invoke(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        content: bytes | str | None = None,
        files: list | None = None,
        headers: dict[str, str] | None = None,
        raw: bool = False,
    ) -> Any:
        """Send a request and return the decoded body.

        ``files`` is passed to httpx as-is for multipart bodies. Returns parsed
        JSON for JSON responses, text when ``raw`` is set or the response is
        not JSON, and None for empty bodies.
        """
        full_url = self.absolute(url)
        request_headers = dict(self._get_headers())
        if headers:
            request_headers.update(headers)

        logger.debug("%s %s", method, full_url)
        try:
            resp = self._client.request(
                method,
                full_url,
                json=json,
                content=content,
                files=files,
                headers=request_headers,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {full_url} failed: {exc}", url=full_url) from exc

        if resp.status_code == 404:
            raise NotFoundError(full_url, _error_message(resp) or "Resource not found")
        if resp.is_error:
            message = _error_message(resp) or resp.reason_phrase
            raise TransportError(
                f"{method} {full_url} returned {resp.status_code}: {message}",
                status=resp.status_code,
                url=full_url,
            )

        if not resp.content:
            return None
        if raw or "json" not in resp.headers.get("content-type", ""):
            return resp.text
        return resp.json()

    def get(self, url: str, **kwargs) -> Any:
        return self.invoke("GET", url, **kwargs)

    def get_collection(self, url: str, headers: dict[str, str] | None = None) -> Iterator[dict]:
        """Yield every item of a collection, following @odata.nextLink."""
        next_url: str | None = url
        while next_url:
            data = self.invoke("GET", next_url, headers=headers) or {}
            yield from data.get("value", [])
            next_url = data.get("@odata.nextLink")


def _error_message(resp: httpx.Response) -> str | None:
    """Pull the Graph error message out of a failed response, if any."""
    try:
        data = resp.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            return error.get("message")
    return None
