"""Mailgun email webhook handler."""

import logging
from typing import Any, Mapping, Optional

import httpx

from ...core.exceptions import ConfigurationError, TransportError
from .config import MailgunAuth, MailgunReplyOptions
from .parsing import MailgunEmailData, MailgunSendResponse, parse_email_form_data

logger = logging.getLogger(__name__)

REPLY_PREFIX = "Re: "


class MailgunHandler:
    """Replies to one inbound Mailgun email."""

    def __init__(
        self,
        webhook_data: MailgunEmailData,
        auth: MailgunAuth,
        reply: MailgunReplyOptions,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.webhook_data = webhook_data
        self.api_key = auth.api_key
        self.domain = auth.domain
        self.api_url = auth.api_url.rstrip("/")
        self.sender = reply.sender
        self.reply_to = reply.reply_to
        self.http_client = http_client

    @property
    def messages_url(self) -> str:
        return f"{self.api_url}/v3/{self.domain}/messages"

    def determine_reply_subject(self) -> str:
        """
        Determine the subject of the reply.

        Returns:
            The original subject if it already starts with "Re: ",
            otherwise the subject with "Re: " prepended
        """
        subject = self.webhook_data.Subject
        if subject.startswith(REPLY_PREFIX):
            return subject
        return f"{REPLY_PREFIX}{subject}"

    def build_reply_fields(self, text: str) -> list[tuple[str, str]]:
        """Build the form fields of the reply message."""
        if not self.sender:
            raise ConfigurationError("Sender is not set")
        if not self.reply_to:
            raise ConfigurationError("Reply-To is not set")

        fields = [
            ("from", f"{self.sender.name} <{self.sender.email}>"),
            ("to", self.webhook_data.From),
            ("subject", self.determine_reply_subject()),
            ("text", text),
            ("h:Reply-To", self.reply_to),
            ("h:In-Reply-To", self.webhook_data.message_id),
        ]
        if self.webhook_data.References:
            fields.append(("h:References", " ".join(self.webhook_data.References)))
        return fields

    async def reply(self, text: str) -> str:
        """
        Reply to the email from the webhook.

        Args:
            text: The text to reply with

        Returns:
            The ID of the email sent

        Raises:
            ConfigurationError: if the sender or Reply-To is not set
            TransportError: if Mailgun answers with a non-success status
        """
        fields = self.build_reply_fields(text)

        if self.http_client is not None:
            response = await self._post(self.http_client, fields)
        else:
            async with httpx.AsyncClient() as client:
                response = await self._post(client, fields)

        if not response.is_success:
            logger.error(
                "Mailgun rejected reply to %s: %s",
                self.webhook_data.message_id, response.status_code
            )
            raise TransportError(
                f"Failed to send email: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = MailgunSendResponse.model_validate(response.json())
        except ValueError as e:
            # The email is already queued; callers must not retry on this
            raise TransportError(
                f"Mailgun accepted the email but returned an unexpected body: {response.text}",
                status_code=response.status_code,
                body=response.text,
            ) from e
        logger.info("Sent reply %s to %s", data.id, self.webhook_data.message_id)
        return data.id

    async def _post(
        self,
        client: httpx.AsyncClient,
        fields: list[tuple[str, str]],
    ) -> httpx.Response:
        # (None, value) parts make httpx send multipart/form-data without filenames
        return await client.post(
            self.messages_url,
            auth=("api", self.api_key.get_secret_value()),
            files=[(name, (None, value)) for name, value in fields],
        )

    def get_thread_root_message_id(self) -> str:
        """
        Get the root message ID of the thread.

        Returns:
            The first entry of References, or the webhook's own
            Message-Id when there are no references
        """
        if not self.webhook_data.References:
            return self.webhook_data.message_id
        return self.webhook_data.References[0]


def mailgun(
    webhook_data: Mapping[str, Any],
    auth: MailgunAuth,
    reply: MailgunReplyOptions,
    http_client: Optional[httpx.AsyncClient] = None,
) -> MailgunHandler:
    """
    Create the webhook handler for Mailgun.

    Args:
        webhook_data: The raw webhook form data
        auth: The authentication credentials for Mailgun
        reply: Required information for replying to the email
        http_client: Optional client to send requests with

    Returns:
        A new MailgunHandler
    """
    parsed = parse_email_form_data(webhook_data)
    return MailgunHandler(parsed, auth, reply, http_client=http_client)
