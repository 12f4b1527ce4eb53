"""Protocol interfaces for decoupling the transport from its HTTP client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol


class HttpClientError(RuntimeError):
    """Raised when an HTTP exchange fails or returns an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportError(RuntimeError):
    """Raised when the provider rejects a message or cannot be reached.

    ``code`` is the provider's error code (``0`` when none was returned) and
    ``status_code`` the HTTP status, or ``None`` for network faults. The
    underlying HTTP fault, if any, is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        code: int = 0,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Status and decoded JSON body of a completed HTTP exchange."""

    status_code: int
    body: Mapping[str, Any] = field(default_factory=dict)
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    @property
    def failed(self) -> bool:
        return self.status_code >= 400

    def json(self, key: str, default: Any = None) -> Any:
        """Return a top-level field of the decoded body."""
        return self.body.get(key, default)

    def to_exception(self) -> HttpClientError | None:
        """Describe a 4xx/5xx status as an exception, or return ``None``."""
        if not self.failed:
            return None
        reason = f" {self.reason}" if self.reason else ""
        return HttpClientError(
            f"HTTP request returned status code {self.status_code}{reason}",
            status_code=self.status_code,
        )


class JsonHttpClient(Protocol):
    """Minimal HTTP capability required by the transport."""

    def post_json(
        self,
        url: str,
        payload: Mapping[str, Any],
        headers: Mapping[str, str],
    ) -> HttpResponse:
        """POST ``payload`` as JSON and return the decoded response.

        Raises:
            HttpClientError: If no response could be obtained.
        """
        raise NotImplementedError


__all__ = ["HttpClientError", "HttpResponse", "JsonHttpClient", "TransportError"]
