"""
Custom exception classes for Talkkit.

This module defines the error types raised by the SMS and email adapters.
Inbound failures are converted to HTTP responses by the webhook handler;
outbound failures reach the caller unchanged.
"""

from typing import Optional


class TalkkitError(Exception):
    """Base exception class for all adapter errors."""
    pass

class AuthenticationError(TalkkitError):
    """Raised when an inbound webhook signature is missing or invalid."""
    pass

class WebhookValidationError(TalkkitError):
    """Raised when an inbound payload does not match the expected fields."""
    pass

class ConfigurationError(TalkkitError):
    """Raised when configuration is invalid or missing."""
    pass

class TransportError(TalkkitError):
    """Raised when a provider API call returns a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
