"""Transport adapters for the Postmark email API."""

from ..core.interfaces import TransportError
from .http_client import HttpxJsonClient
from .postmark_client import POSTMARK_ENDPOINT, PostmarkTransport
from .translator import MessageTranslator

__all__ = [
    "HttpxJsonClient",
    "MessageTranslator",
    "POSTMARK_ENDPOINT",
    "PostmarkTransport",
    "TransportError",
]
