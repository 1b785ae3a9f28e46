"""Configuration management for the email adapter (YAML-based)."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, SecretStr, model_validator

from ...core.exceptions import ConfigurationError

DEFAULT_API_URL = "https://api.mailgun.net"
EU_API_URL = "https://api.eu.mailgun.net"


class Sender(BaseModel):
    """Display name and address replies are sent from."""

    name: str
    email: str


class MailgunAuth(BaseModel):
    """Mailgun sending credentials for one domain."""

    api_key: SecretStr
    domain: str
    # EU-region domains use EU_API_URL
    api_url: str = DEFAULT_API_URL


class MailgunReplyOptions(BaseModel):
    """Required information for replying to an email."""

    sender: Optional[Sender] = None
    reply_to: Optional[str] = None


class EmailSettings(BaseModel):
    """Application settings loaded from a YAML file."""

    # Mailgun credentials
    mailgun_api_key: SecretStr
    mailgun_domain: str
    mailgun_api_url: str = DEFAULT_API_URL

    # Reply identity; checked when a reply is sent
    sender_name: Optional[str] = None
    sender_email: Optional[str] = None
    reply_to: Optional[str] = None

    # Logging
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _sender_is_complete(self) -> "EmailSettings":
        if bool(self.sender_name) != bool(self.sender_email):
            missing = "sender_email" if self.sender_name else "sender_name"
            raise ValueError(f"{missing} must be set together with the other sender field")
        return self

    def auth(self) -> MailgunAuth:
        return MailgunAuth(
            api_key=self.mailgun_api_key,
            domain=self.mailgun_domain,
            api_url=self.mailgun_api_url,
        )

    def reply_options(self) -> MailgunReplyOptions:
        sender = None
        if self.sender_name and self.sender_email:
            sender = Sender(name=self.sender_name, email=self.sender_email)
        return MailgunReplyOptions(sender=sender, reply_to=self.reply_to)


def load_settings(config_path: Path) -> EmailSettings:
    """Load EmailSettings from a YAML file."""
    if not config_path:
        raise ConfigurationError("Config path is required")
    p = Path(config_path)
    if not p.exists():
        raise ConfigurationError(f"Config file not found: {p}")
    try:
        with open(p, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        # Allow top-level 'email' key or flat structure
        if isinstance(data.get("email"), dict):
            data = data["email"]
        return EmailSettings(**data)
    except Exception as e:
        raise ConfigurationError(f"Failed to load config from {p}: {e}") from e
