"""
Core module for Talkkit.

Exports:
- MailProviderHandler: protocol implemented by email provider handlers
- Error taxonomy shared by the adapters
- Logging helpers
"""

from .exceptions import (
    TalkkitError,
    AuthenticationError,
    WebhookValidationError,
    ConfigurationError,
    TransportError,
)
from .logging import configure_logging, mask_secret
from .webhooks import MailProviderHandler

__all__ = [
    "TalkkitError",
    "AuthenticationError",
    "WebhookValidationError",
    "ConfigurationError",
    "TransportError",
    "configure_logging",
    "mask_secret",
    "MailProviderHandler",
]
