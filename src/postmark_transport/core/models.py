"""Provider-agnostic email models consumed by the transport."""

from __future__ import annotations

import mimetypes
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from email.utils import parseaddr
from pathlib import Path
from typing import Literal

HeaderKind = Literal["plain", "tag", "metadata"]
Disposition = Literal["attachment", "inline"]

TAG_HEADER_NAME = "X-Tag"
METADATA_HEADER_PREFIX = "X-Metadata-"

# RFC 5322 specials; a display name holding any of them must be quoted.
_SPECIALS = re.compile(r'[][\\()<>@,:;".]')


@dataclass(frozen=True, slots=True)
class Address:
    """Mailbox address with an optional display name."""

    email: str
    name: str | None = None

    def __str__(self) -> str:
        if not self.name:
            return self.email
        name = self.name
        if _SPECIALS.search(name):
            escaped = name.replace("\\", "\\\\").replace('"', '\\"')
            name = f'"{escaped}"'
        return f"{name} <{self.email}>"

    @classmethod
    def parse(cls, raw: str) -> Address:
        """Build an address from ``"Name <email>"`` or a bare email."""
        name, email_address = parseaddr(raw)
        if not email_address:
            msg = f"Cannot parse email address from {raw!r}"
            raise ValueError(msg)
        return cls(email=email_address, name=name or None)


@dataclass(frozen=True, slots=True)
class Attachment:
    """File attached to an outgoing message."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
    disposition: Disposition = "attachment"

    def __post_init__(self) -> None:
        if self.disposition not in ("attachment", "inline"):
            msg = f"Unsupported attachment disposition: {self.disposition!r}"
            raise ValueError(msg)

    @property
    def is_inline(self) -> bool:
        return self.disposition == "inline"

    @property
    def content_id(self) -> str | None:
        """Content-ID referenced from HTML bodies, set for inline parts only."""
        if not self.is_inline:
            return None
        return f"cid:{self.filename}"

    @classmethod
    def from_path(cls, path: Path | str, *, inline: bool = False) -> Attachment:
        """Read an attachment from disk, guessing its content type."""
        file_path = Path(path)
        content_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            filename=file_path.name,
            content=file_path.read_bytes(),
            content_type=content_type or "application/octet-stream",
            disposition="inline" if inline else "attachment",
        )


@dataclass(frozen=True, slots=True)
class Header:
    """Message header classified once as plain, tag, or metadata.

    Tag and metadata headers are application annotations that providers may
    promote to dedicated fields; ``key`` is only set for metadata headers.
    """

    kind: HeaderKind
    name: str
    value: str
    key: str | None = None

    @classmethod
    def plain(cls, name: str, value: str) -> Header:
        return cls(kind="plain", name=name, value=value)

    @classmethod
    def tag(cls, value: str) -> Header:
        return cls(kind="tag", name=TAG_HEADER_NAME, value=value)

    @classmethod
    def metadata(cls, key: str, value: str) -> Header:
        if not key:
            raise ValueError("Metadata header key must not be empty")
        return cls(
            kind="metadata",
            name=f"{METADATA_HEADER_PREFIX}{key}",
            value=value,
            key=key,
        )

    @classmethod
    def parse(cls, name: str, value: str) -> Header:
        """Classify a raw ``name: value`` header."""
        lowered = name.lower()
        if lowered == TAG_HEADER_NAME.lower():
            return cls.tag(value)
        prefix = METADATA_HEADER_PREFIX.lower()
        if lowered.startswith(prefix) and len(name) > len(prefix):
            return cls.metadata(name[len(prefix) :], value)
        return cls.plain(name, value)


# pylint: disable=too-many-instance-attributes
@dataclass(frozen=True, slots=True)
class EmailMessage:
    """Immutable outgoing email independent of any provider."""

    subject: str = ""
    html_body: str | None = None
    text_body: str | None = None
    from_addresses: tuple[Address, ...] = ()
    sender: Address | None = None
    to: tuple[Address, ...] = ()
    cc: tuple[Address, ...] = ()
    bcc: tuple[Address, ...] = ()
    reply_to: tuple[Address, ...] = ()
    headers: tuple[Header, ...] = ()
    attachments: tuple[Attachment, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists from callers while keeping the instance hashable.
        for name in (
            "from_addresses",
            "to",
            "cc",
            "bcc",
            "reply_to",
            "headers",
            "attachments",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name)))


@dataclass(frozen=True, slots=True)
class Envelope:
    """Delivery-level sender and recipients, which may differ from headers."""

    sender: Address
    recipients: tuple[Address, ...]

    def __post_init__(self) -> None:
        if not self.sender.email:
            raise ValueError("Envelope sender must have an email address")
        recipients = tuple(_unique(self.recipients))
        if not recipients:
            raise ValueError("Envelope must have at least one recipient")
        object.__setattr__(self, "recipients", recipients)

    @classmethod
    def from_message(cls, message: EmailMessage) -> Envelope:
        """Derive the envelope from the message's own address lists."""
        sender = message.sender
        if sender is None and message.from_addresses:
            sender = message.from_addresses[0]
        if sender is None:
            raise ValueError("Cannot derive envelope: message has no From address")
        recipients = (
            *message.to,
            *message.cc,
            *message.bcc,
            *message.reply_to,
        )
        return cls(sender=sender, recipients=recipients)


def _unique(addresses: Iterable[Address]) -> Iterable[Address]:
    seen: set[Address] = set()
    for address in addresses:
        if address in seen:
            continue
        seen.add(address)
        yield address


@dataclass(slots=True)
class SentMessage:
    """Outcome of a send; the message id is assigned once, on success."""

    original_message: EmailMessage
    envelope: Envelope
    _message_id: str | None = field(default=None, init=False, repr=False)

    @property
    def message_id(self) -> str | None:
        return self._message_id

    def set_message_id(self, message_id: str) -> None:
        """Record the provider identifier; a second assignment is an error."""
        if self._message_id is not None:
            msg = f"Message id already set to {self._message_id!r}"
            raise RuntimeError(msg)
        self._message_id = message_id


__all__ = [
    "Address",
    "Attachment",
    "Disposition",
    "EmailMessage",
    "Envelope",
    "Header",
    "HeaderKind",
    "SentMessage",
]
