"""Python SDK for the XRPL.Sale token sale platform."""

from .client import XRPLSaleClient
from .config import ClientConfig, Environment
from .errors import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    ParseError,
    RateLimitError,
    TransportError,
    ValidationError,
    XRPLSaleError,
)
from .retry import RetryPolicy, RetryState
from .signature import compute_signature, verify_signature
from .version import __version__
from .webhooks import WebhookDispatcher, WebhookEventType, WebhookReceiver, parse_webhook_event

__all__ = [
    "XRPLSaleClient",
    "ClientConfig",
    "Environment",
    "RetryPolicy",
    "RetryState",
    "WebhookDispatcher",
    "WebhookEventType",
    "WebhookReceiver",
    "compute_signature",
    "parse_webhook_event",
    "verify_signature",
    "XRPLSaleError",
    "APIError",
    "AuthenticationError",
    "ConfigurationError",
    "NotFoundError",
    "ParseError",
    "RateLimitError",
    "TransportError",
    "ValidationError",
    "__version__",
]
