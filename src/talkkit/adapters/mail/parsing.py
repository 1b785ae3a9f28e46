"""Parsing of Mailgun inbound route webhooks."""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ...core.exceptions import WebhookValidationError


class MailgunEmailData(BaseModel):
    """Fields of a Mailgun inbound email webhook.

    Only the fields used for replying are typed; every other field Mailgun
    posts is kept as an extra attribute.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    From: str
    Subject: str
    message_id: str = Field(alias="Message-Id")
    References: Optional[list[str]] = None
    in_reply_to: Optional[str] = Field(default=None, alias="In-Reply-To")

    sender: Optional[str] = None
    recipient: Optional[str] = None
    body_plain: Optional[str] = Field(default=None, alias="body-plain")
    stripped_text: Optional[str] = Field(default=None, alias="stripped-text")

    @field_validator("References", mode="before")
    @classmethod
    def _split_references(cls, v):
        # The header is a whitespace-separated list of message ids
        if isinstance(v, str):
            return v.split() or None
        return v


class MailgunSendResponse(BaseModel):
    """Response body of the Mailgun send-message endpoint."""

    id: str
    message: Optional[str] = None


def parse_email_form_data(form: Mapping[str, Any]) -> MailgunEmailData:
    """
    Parse webhook form data into MailgunEmailData.

    Args:
        form: Already-received form fields (dict or starlette FormData)

    Returns:
        The typed webhook data

    Raises:
        WebhookValidationError: if From, Subject or Message-Id is missing
    """
    try:
        return MailgunEmailData.model_validate(dict(form.items()))
    except ValidationError as e:
        raise WebhookValidationError(f"Invalid Mailgun webhook: {e}") from e
