"""Tests for replying to Mailgun emails."""

import base64

import httpx
import pytest

from talkkit.adapters.mail import (
    MailgunAuth,
    MailgunHandler,
    MailgunReplyOptions,
    Sender,
    mailgun,
)
from talkkit.adapters.mail.config import EU_API_URL
from talkkit.core import ConfigurationError, MailProviderHandler, TransportError


class RecordingTransport:
    """Mock transport that records requests and answers with a fixed response."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def _ok(message_id: str = "<20240101.1@mg.example.com>") -> httpx.Response:
    return httpx.Response(200, json={"id": message_id, "message": "Queued. Thank you."})


def _handler(form, auth, reply, transport: RecordingTransport) -> MailgunHandler:
    return mailgun(form, auth, reply, http_client=transport.client())


# Subject handling

@pytest.mark.parametrize(
    "subject, expected",
    [
        ("Order #1", "Re: Order #1"),
        ("Re: Order #1", "Re: Order #1"),
        ("RE: Order #1", "Re: RE: Order #1"),
        ("re: Order #1", "Re: re: Order #1"),
        ("Re:Order #1", "Re: Re:Order #1"),
    ],
)
def test_reply_subject(email_form, mailgun_auth, reply_options, subject, expected):
    email_form["Subject"] = subject
    handler = mailgun(email_form, mailgun_auth, reply_options)

    assert handler.determine_reply_subject() == expected


def test_reply_subject_is_idempotent(email_form, mailgun_auth, reply_options):
    handler = mailgun(email_form, mailgun_auth, reply_options)
    once = handler.determine_reply_subject()

    email_form["Subject"] = once
    again = mailgun(email_form, mailgun_auth, reply_options).determine_reply_subject()

    assert again == once == "Re: Order #1"


# Thread root

def test_thread_root_is_first_reference(email_form, mailgun_auth, reply_options):
    email_form["References"] = "id-1 id-2"
    handler = mailgun(email_form, mailgun_auth, reply_options)

    assert handler.get_thread_root_message_id() == "id-1"


def test_thread_root_falls_back_to_message_id(email_form, mailgun_auth, reply_options):
    del email_form["References"]
    handler = mailgun(email_form, mailgun_auth, reply_options)

    assert handler.get_thread_root_message_id() == "<msg-3@example.org>"


# Reply

def test_handler_implements_protocol(email_form, mailgun_auth, reply_options):
    assert isinstance(mailgun(email_form, mailgun_auth, reply_options), MailProviderHandler)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "options, error",
    [
        (MailgunReplyOptions(reply_to="r@mg.example.com"), "Sender is not set"),
        (
            MailgunReplyOptions(sender=Sender(name="Support", email="s@mg.example.com")),
            "Reply-To is not set",
        ),
        (MailgunReplyOptions(), "Sender is not set"),
    ],
)
async def test_reply_without_identity_never_hits_network(email_form, mailgun_auth, options, error):
    transport = RecordingTransport(_ok())
    handler = _handler(email_form, mailgun_auth, options, transport)

    with pytest.raises(ConfigurationError, match=error):
        await handler.reply("Thanks!")

    assert transport.requests == []


@pytest.mark.asyncio
async def test_reply_posts_multipart_form(email_form, mailgun_auth, reply_options):
    transport = RecordingTransport(_ok())
    handler = _handler(email_form, mailgun_auth, reply_options, transport)

    message_id = await handler.reply("It ships tomorrow.")

    assert message_id == "<20240101.1@mg.example.com>"
    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.mailgun.net/v3/mg.example.com/messages"
    assert request.headers["content-type"].startswith("multipart/form-data")

    expected_auth = base64.b64encode(b"api:key-abc").decode()
    assert request.headers["authorization"] == f"Basic {expected_auth}"

    body = request.content.decode()
    for name, value in [
        ("from", "Support <support@mg.example.com>"),
        ("to", "Alice <alice@example.org>"),
        ("subject", "Re: Order #1"),
        ("text", "It ships tomorrow."),
        ("h:Reply-To", "reply+thread@mg.example.com"),
        ("h:In-Reply-To", "<msg-3@example.org>"),
        ("h:References", "<id-1@example.org> <id-2@example.org>"),
    ]:
        assert f'name="{name}"\r\n\r\n{value}\r\n' in body


@pytest.mark.asyncio
async def test_reply_omits_references_when_absent(email_form, mailgun_auth, reply_options):
    del email_form["References"]
    transport = RecordingTransport(_ok())
    handler = _handler(email_form, mailgun_auth, reply_options, transport)

    await handler.reply("Hello")

    assert 'name="h:References"' not in transport.requests[0].content.decode()


@pytest.mark.asyncio
async def test_reply_failure_carries_response_body(email_form, mailgun_auth, reply_options):
    transport = RecordingTransport(
        httpx.Response(401, text="Forbidden: invalid private key")
    )
    handler = _handler(email_form, mailgun_auth, reply_options, transport)

    with pytest.raises(TransportError) as excinfo:
        await handler.reply("Hello")

    assert "Forbidden: invalid private key" in str(excinfo.value)
    assert excinfo.value.status_code == 401
    assert excinfo.value.body == "Forbidden: invalid private key"


@pytest.mark.asyncio
async def test_reply_uses_configured_api_url(email_form, reply_options):
    auth = MailgunAuth(api_key="key-abc", domain="mg.example.eu", api_url=EU_API_URL)
    transport = RecordingTransport(_ok("<eu@mg.example.eu>"))
    handler = _handler(email_form, auth, reply_options, transport)

    assert await handler.reply("Hallo") == "<eu@mg.example.eu>"
    assert str(transport.requests[0].url) == "https://api.eu.mailgun.net/v3/mg.example.eu/messages"


@pytest.mark.asyncio
async def test_reply_accepts_body_with_only_id(email_form, mailgun_auth, reply_options):
    transport = RecordingTransport(httpx.Response(200, json={"id": "<only-id@mg.example.com>"}))
    handler = _handler(email_form, mailgun_auth, reply_options, transport)

    assert await handler.reply("Hello") == "<only-id@mg.example.com>"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>queued</html>"),
        httpx.Response(200, json={"message": "Queued. Thank you."}),
    ],
)
async def test_reply_unexpected_success_body(email_form, mailgun_auth, reply_options, response):
    transport = RecordingTransport(response)
    handler = _handler(email_form, mailgun_auth, reply_options, transport)

    with pytest.raises(TransportError) as excinfo:
        await handler.reply("Hello")

    assert excinfo.value.status_code == 200
    assert excinfo.value.body == response.text
    assert len(transport.requests) == 1
