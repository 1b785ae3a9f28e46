"""
Talkkit: inbound webhook -> reply adapters.

Provides an SMS adapter (Twilio) and an email adapter (Mailgun). Each adapter
is independent; they only share the error types and helpers in ``core``.
"""

__version__ = "0.1.0"

from .core import (
    AuthenticationError,
    ConfigurationError,
    MailProviderHandler,
    TalkkitError,
    TransportError,
    WebhookValidationError,
)

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "MailProviderHandler",
    "TalkkitError",
    "TransportError",
    "WebhookValidationError",
]
