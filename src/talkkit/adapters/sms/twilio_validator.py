"""Twilio request signature validation."""

import logging
from typing import Any, Mapping

from twilio.request_validator import RequestValidator

logger = logging.getLogger(__name__)


class TwilioSignatureValidator:
    """Validates Twilio webhook signatures."""

    def __init__(self, auth_token: str):
        """Initialize validator with Twilio auth token."""
        self.validator = RequestValidator(auth_token)

    def validate_request(
        self,
        url: str,
        post_vars: Mapping[str, Any],
        signature: str
    ) -> bool:
        """
        Validate Twilio webhook request signature.

        Args:
            url: The full URL that Twilio called (including https://)
            post_vars: Mapping of POST parameters
            signature: X-Twilio-Signature header value

        Returns:
            True if signature is valid, False otherwise
        """
        try:
            is_valid = self.validator.validate(url, flatten_form(post_vars), signature)
        except Exception as e:
            logger.error("Error during signature validation: %s", str(e))
            return False

        if not is_valid:
            logger.warning(
                "Twilio signature validation failed for URL: %s",
                url.split('?')[0]
            )
        return is_valid


def flatten_form(post_vars: Mapping[str, Any]) -> dict[str, str]:
    """Reduce form data to the plain string parameters Twilio signs."""
    form_data = {}
    for key, value in post_vars.items():
        if isinstance(value, list) and len(value) == 1:
            value = value[0]
        if isinstance(value, str):
            form_data[key] = value
        # Twilio never sends file parts; anything else is skipped
    return form_data
