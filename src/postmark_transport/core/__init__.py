"""Core models, configuration, and logging for the Postmark transport."""

from .config import AppSettings, PostmarkSettings, load_app_settings
from .interfaces import (
    HttpClientError,
    HttpResponse,
    JsonHttpClient,
    TransportError,
)
from .logging import configure_logging
from .models import (
    Address,
    Attachment,
    EmailMessage,
    Envelope,
    Header,
    SentMessage,
)

__all__ = [
    "Address",
    "AppSettings",
    "Attachment",
    "EmailMessage",
    "Envelope",
    "Header",
    "HttpClientError",
    "HttpResponse",
    "JsonHttpClient",
    "PostmarkSettings",
    "SentMessage",
    "TransportError",
    "configure_logging",
    "load_app_settings",
]
