"""Postmark transport: sends one message per call through the HTTP API."""

from __future__ import annotations

import logging

from ..core.config import PostmarkSettings
from ..core.interfaces import HttpClientError, JsonHttpClient, TransportError
from ..core.models import EmailMessage, Envelope, SentMessage
from .http_client import HttpxJsonClient
from .translator import MessageTranslator

LOGGER = logging.getLogger(__name__)

POSTMARK_ENDPOINT = "https://api.postmarkapp.com/email"
TOKEN_HEADER = "X-Postmark-Server-Token"


class PostmarkTransport:
    """Transport delivering :class:`EmailMessage` objects via Postmark.

    The instance holds only immutable configuration, so concurrent sends
    are independent of each other. Failures are never retried.
    """

    def __init__(
        self,
        http: JsonHttpClient,
        token: str,
        message_stream: str | None = None,
    ) -> None:
        self._http = http
        self._token = token
        self._translator = MessageTranslator(message_stream)

    @classmethod
    def from_settings(
        cls, settings: PostmarkSettings, http: JsonHttpClient | None = None
    ) -> PostmarkTransport:
        """Create a transport from configuration, defaulting to httpx."""
        if not settings.token:
            raise ValueError("Postmark token not configured")
        client = http or HttpxJsonClient(settings.timeout_seconds)
        return cls(client, settings.token, settings.message_stream)

    def __enter__(self) -> PostmarkTransport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __str__(self) -> str:
        return "postmark"

    def send(
        self, message: EmailMessage, envelope: Envelope | None = None
    ) -> SentMessage:
        """Send ``message`` and return the record carrying Postmark's id.

        Args:
            message: The message to deliver.
            envelope: Delivery sender/recipients; derived from the message
                when omitted.

        Raises:
            TransportError: If Postmark rejects the message or cannot be
                reached.
        """
        if envelope is None:
            envelope = Envelope.from_message(message)
        sent_message = SentMessage(message, envelope)
        payload = self._translator.build_payload(message, envelope)

        LOGGER.info(
            "Sending email via Postmark to %d recipient(s): %s",
            len(envelope.recipients),
            message.subject,
        )
        LOGGER.debug("Postmark payload fields: %s", sorted(payload))

        try:
            response = self._http.post_json(
                POSTMARK_ENDPOINT,
                payload,
                {TOKEN_HEADER: self._token},
            )
        except HttpClientError as exc:
            LOGGER.error("Postmark request failed: %s", exc)
            raise self._translator.failure_from_fault(exc) from exc

        outcome = self._translator.interpret_response(sent_message, response)
        if isinstance(outcome, TransportError):
            LOGGER.error(
                "Postmark rejected email (HTTP %d, code %d): %s",
                response.status_code,
                outcome.code,
                outcome.message,
            )
            raise outcome

        LOGGER.info("Email accepted by Postmark with id %s", outcome.message_id)
        return outcome

    def close(self) -> None:
        """Close the HTTP collaborator when it supports closing."""
        close = getattr(self._http, "close", None)
        if callable(close):
            close()


__all__ = ["POSTMARK_ENDPOINT", "PostmarkTransport", "TOKEN_HEADER"]
