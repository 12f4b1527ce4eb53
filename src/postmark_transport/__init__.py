"""Postmark email transport."""

from .core import (
    Address,
    Attachment,
    EmailMessage,
    Envelope,
    Header,
    SentMessage,
    TransportError,
)
from .transport import MessageTranslator, PostmarkTransport

__all__ = [
    "Address",
    "Attachment",
    "EmailMessage",
    "Envelope",
    "Header",
    "MessageTranslator",
    "PostmarkTransport",
    "SentMessage",
    "TransportError",
]
