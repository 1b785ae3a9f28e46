"""Twilio SMS webhook handler and outbound sender."""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Mapping, Optional, Union

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError
from twilio.rest import Client as TwilioClient
from twilio.rest.api.v2010.account.message import MessageInstance
from twilio.twiml.messaging_response import MessagingResponse

from ...core.exceptions import AuthenticationError, WebhookValidationError
from ...core.logging import mask_secret
from .config import (
    MessageContext,
    SMSSettings,
    TwilioCredentials,
    TwilioOptions,
    TwilioWebhookRequest,
    options_from_settings,
)
from .twilio_validator import TwilioSignatureValidator, flatten_form

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Twilio-Signature"

# A string is sent back to the user as a text message; None sends an empty reply.
TwilioIncomingResponse = Optional[str]

MessageHandler = Callable[
    [MessageContext],
    Union[TwilioIncomingResponse, Awaitable[TwilioIncomingResponse]],
]


class TwilioSMSConvo:
    """Validates incoming Twilio webhooks and dispatches them to a handler."""

    def __init__(
        self,
        credentials: TwilioCredentials,
        handle_incoming: MessageHandler,
        handler_url: Optional[str] = None,
    ):
        self.account_sid = credentials.account_sid
        self.validator = TwilioSignatureValidator(
            credentials.auth_token.get_secret_value()
        )
        self.handle_incoming = handle_incoming
        self.handler_url = handler_url

    async def handle_post(self, request: Request) -> Response:
        """Handle an incoming Twilio webhook and answer with TwiML."""
        try:
            data = await self._verified_request(request)
        except AuthenticationError as e:
            logger.warning("Rejected Twilio webhook: %s", e)
            return PlainTextResponse(str(e), status_code=401)
        except WebhookValidationError as e:
            logger.warning("Rejected Twilio webhook: %s", e)
            return PlainTextResponse(str(e), status_code=400)

        context = MessageContext(
            message=data.Body,
            from_=data.From,
            message_id=data.MessageSid,
        )
        logger.info("Dispatching message %s", data.MessageSid)

        response = await self._dispatch(context)

        twiml = MessagingResponse()
        twiml.message(response if response is not None else "")

        return Response(content=str(twiml), media_type="text/xml")

    async def _dispatch(self, context: MessageContext) -> TwilioIncomingResponse:
        """Run the handler; sync handlers run in the default executor."""
        if inspect.iscoroutinefunction(self.handle_incoming):
            return await self.handle_incoming(context)

        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(None, self.handle_incoming, context)
        if inspect.isawaitable(response):
            response = await response
        return response

    async def _verified_request(self, request: Request) -> TwilioWebhookRequest:
        """Run the signature, schema and signature-verification checks in order."""
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            raise AuthenticationError("No Twilio signature found")

        form = await request.form()
        params = flatten_form(form)

        data = self.parse_webhook(params)

        url = self.handler_url or str(request.url)
        if not self.validator.validate_request(url, params, signature):
            raise AuthenticationError("Invalid Twilio webhook")

        return data

    @staticmethod
    def parse_webhook(params: Mapping[str, str]) -> TwilioWebhookRequest:
        """Validate raw form parameters against the webhook schema."""
        try:
            return TwilioWebhookRequest.model_validate(dict(params))
        except ValidationError as e:
            # Field names only; inputs carry the sender number and message body
            logger.error(
                "Error validating Twilio webhook, invalid schema: %s",
                [err["loc"] for err in e.errors(include_input=False)]
            )
            raise WebhookValidationError("Invalid Twilio webhook") from e

    async def send(
        self,
        message: str,
        from_: str,
        to: str,
        twilio: TwilioClient,
    ) -> MessageInstance:
        """Send an outbound SMS; provider errors propagate to the caller."""
        # The Twilio SDK is synchronous
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            lambda: twilio.messages.create(body=message, from_=from_, to=to),
        )


@dataclass
class TwilioService:
    """A Twilio SMS service: a webhook handler plus an SMS sender."""

    convo: TwilioSMSConvo
    client: TwilioClient

    async def handle_post(self, request: Request) -> Response:
        return await self.convo.handle_post(request)

    async def send_sms(self, message: str, from_: str, to: str) -> MessageInstance:
        return await self.convo.send(message, from_, to, self.client)


def twilio(
    on_message: MessageHandler,
    options: TwilioOptions,
    client: Optional[TwilioClient] = None,
) -> TwilioService:
    """
    Create a Twilio SMS service.

    Args:
        on_message: Handles an incoming message; may return a string to reply with
        options: Credentials and optional webhook URL
        client: Twilio REST client; built from the credentials when omitted

    Returns:
        A TwilioService exposing handle_post and send_sms
    """
    credentials = options.credentials
    convo = TwilioSMSConvo(credentials, on_message, options.handler_url)
    if client is None:
        client = TwilioClient(
            credentials.account_sid,
            credentials.auth_token.get_secret_value(),
        )
    return TwilioService(convo=convo, client=client)


def create_app(
    settings: SMSSettings,
    on_message: MessageHandler,
    client: Optional[TwilioClient] = None,
) -> FastAPI:
    """Factory function to create the FastAPI webhook app."""
    service = twilio(on_message, options_from_settings(settings), client=client)

    app = FastAPI(
        title="Talkkit SMS",
        description="Twilio SMS webhook adapter",
        version="0.1.0"
    )
    app.state.sms = service

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "talkkit-sms"}

    @app.post(settings.webhook_path, response_class=Response)
    async def handle_sms_webhook(request: Request):
        """Handle incoming Twilio SMS webhook."""
        return await service.handle_post(request)

    logger.info(
        "SMS webhook mounted at %s for account %s",
        settings.webhook_path, mask_secret(settings.twilio_account_sid)
    )
    return app
