"""Mapping between provider-agnostic messages and the Postmark wire format."""

from __future__ import annotations

import base64
from collections.abc import Iterable
from typing import Any

from ..core.interfaces import HttpClientError, HttpResponse, TransportError
from ..core.models import Address, Attachment, EmailMessage, Envelope, SentMessage

# Headers already carried by dedicated payload fields.
BYPASS_HEADERS = frozenset(
    {
        "from",
        "to",
        "cc",
        "bcc",
        "subject",
        "content-type",
        "sender",
        "reply-to",
    }
)


class MessageTranslator:
    """Build Postmark ``/email`` payloads and interpret API responses.

    The translator performs no I/O; the only configuration it holds is the
    optional message stream stamped on every payload.
    """

    def __init__(self, message_stream: str | None = None) -> None:
        self._message_stream = message_stream

    @property
    def message_stream(self) -> str | None:
        return self._message_stream

    def build_payload(self, message: EmailMessage, envelope: Envelope) -> dict[str, Any]:
        """Return the JSON-ready payload for ``message`` delivered via ``envelope``.

        Empty fields are left out entirely, since Postmark treats a field
        sent empty differently from one not sent.
        """
        payload: dict[str, Any] = {
            "From": str(envelope.sender),
            "To": _stringify(_effective_recipients(message, envelope)),
            "Cc": _stringify(message.cc),
            "Bcc": _stringify(message.bcc),
            "Subject": message.subject,
            "HtmlBody": message.html_body,
            "TextBody": message.text_body,
            "ReplyTo": _stringify(message.reply_to),
            "Attachments": [_attachment_entry(item) for item in message.attachments],
            "MessageStream": self._message_stream,
        }

        metadata: dict[str, str] = {}
        headers: list[dict[str, str]] = []
        for header in message.headers:
            if header.name.lower() in BYPASS_HEADERS:
                continue
            if header.kind == "tag":
                # Postmark accepts a single tag; the last one wins.
                payload["Tag"] = header.value
            elif header.kind == "metadata":
                metadata[header.key or ""] = header.value
            else:
                headers.append({"Name": header.name, "Value": header.value})
        payload["Metadata"] = metadata
        payload["Headers"] = headers

        return {key: value for key, value in payload.items() if value}

    def interpret_response(
        self, sent_message: SentMessage, response: HttpResponse
    ) -> SentMessage | TransportError:
        """Finalise ``sent_message`` on success, or describe the failure."""
        if response.ok:
            message_id = response.json("MessageID")
            if not isinstance(message_id, str) or not message_id:
                return TransportError(
                    "Postmark response did not include a MessageID",
                    status_code=response.status_code,
                )
            sent_message.set_message_id(message_id)
            return sent_message

        message = response.json("Message")
        if not isinstance(message, str) or not message:
            message = f"Postmark request failed with HTTP status {response.status_code}"
        error = TransportError(
            message,
            _error_code(response.json("ErrorCode")),
            status_code=response.status_code,
        )
        error.__cause__ = response.to_exception()
        return error

    def failure_from_fault(self, fault: HttpClientError) -> TransportError:
        """Describe a request that produced no response at all."""
        error = TransportError(str(fault), 0, status_code=fault.status_code)
        error.__cause__ = fault
        return error


def _effective_recipients(message: EmailMessage, envelope: Envelope) -> list[Address]:
    copies = {*message.cc, *message.bcc}
    return [address for address in envelope.recipients if address not in copies]


def _stringify(addresses: Iterable[Address]) -> str:
    return ",".join(str(address) for address in addresses)


def _attachment_entry(attachment: Attachment) -> dict[str, str]:
    entry = {
        "Name": attachment.filename,
        "Content": base64.b64encode(attachment.content).decode("ascii"),
        "ContentType": attachment.content_type,
    }
    if attachment.content_id is not None:
        entry["ContentID"] = attachment.content_id
    return entry


def _error_code(raw: Any) -> int:
    if isinstance(raw, bool):
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


__all__ = ["BYPASS_HEADERS", "MessageTranslator"]
