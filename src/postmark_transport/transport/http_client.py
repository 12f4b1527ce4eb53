"""httpx-backed JSON client used by the Postmark transport."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from ..core.interfaces import HttpClientError, HttpResponse

LOGGER = logging.getLogger(__name__)


class HttpxJsonClient:
    """Thin synchronous JSON POST client.

    Timeouts are taken from configuration only; the client never retries.
    A client passed in by the caller is left open on :meth:`close`.
    """

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def __enter__(self) -> HttpxJsonClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        headers: Mapping[str, str],
    ) -> HttpResponse:
        """POST ``payload`` as JSON and decode the JSON response body."""
        request_headers = {"Accept": "application/json", **headers}
        try:
            response = self._client.post(url, json=dict(payload), headers=request_headers)
        except httpx.HTTPError as exc:
            LOGGER.error("HTTP request to %s failed: %s", url, exc)
            raise HttpClientError(f"HTTP request to {url} failed: {exc}") from exc

        return HttpResponse(
            status_code=response.status_code,
            body=_decode_body(response),
            reason=response.reason_phrase,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


def _decode_body(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        LOGGER.warning(
            "Response with status %d was not valid JSON", response.status_code
        )
        return {}
    if not isinstance(data, dict):
        return {}
    return data


__all__ = ["HttpxJsonClient"]
