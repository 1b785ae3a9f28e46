"""Configuration and webhook schema for the SMS adapter (YAML-based)."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from ...core.exceptions import ConfigurationError


class SMSSettings(BaseModel):
    """Application settings loaded from a YAML file."""

    # Twilio credentials
    twilio_account_sid: str
    twilio_auth_token: SecretStr

    # URL Twilio signs requests against; derived from the request when unset
    handler_url: Optional[str] = None
    webhook_path: str = "/twilio/sms"

    # Logging
    log_level: str = "INFO"

    @field_validator("webhook_path")
    @classmethod
    def _leading_slash(cls, v: str) -> str:
        return v if v.startswith("/") else f"/{v}"


def load_settings(config_path: Path) -> SMSSettings:
    """Load SMSSettings from a YAML file."""
    if not config_path:
        raise ConfigurationError("Config path is required")
    p = Path(config_path)
    if not p.exists():
        raise ConfigurationError(f"Config file not found: {p}")
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        # Allow top-level 'sms' key or flat structure
        if isinstance(data.get("sms"), dict):
            data = data["sms"]
        return SMSSettings(**data)
    except Exception as e:
        raise ConfigurationError(f"Failed to load config from {p}: {e}") from e


class TwilioWebhookRequest(BaseModel):
    """Twilio incoming message webhook parameters.

    See https://www.twilio.com/docs/messaging/guides/webhook-request
    """

    model_config = ConfigDict(extra="ignore")

    # Core fields
    MessageSid: str
    AccountSid: str
    From: str
    To: str
    Body: str = Field(description="Text body of the message")

    # Geographic data about the sender
    FromCity: Optional[str] = None
    FromState: Optional[str] = None
    FromZip: Optional[str] = None
    FromCountry: Optional[str] = None


class MessageContext(BaseModel):
    """Context for a message received from Twilio, passed to the handler."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    from_: str = Field(alias="from")
    message_id: str = Field(alias="messageId")


class TwilioCredentials(BaseModel):
    """Credentials for the Twilio account."""

    account_sid: str
    auth_token: SecretStr


class TwilioOptions(BaseModel):
    """
    Options for the Twilio SMS service.

    handler_url is the URL Twilio sends the webhook to. Signatures are
    computed over it, so set it when the app runs behind a proxy.
    """

    credentials: TwilioCredentials
    handler_url: Optional[str] = None


def options_from_settings(settings: SMSSettings) -> TwilioOptions:
    """Build service options from loaded settings."""
    return TwilioOptions(
        credentials=TwilioCredentials(
            account_sid=settings.twilio_account_sid,
            auth_token=settings.twilio_auth_token,
        ),
        handler_url=settings.handler_url,
    )
