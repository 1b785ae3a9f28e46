"""Shared fixtures for the Talkkit tests."""

import sys
from pathlib import Path

import pytest
from twilio.request_validator import RequestValidator

# Ensure src is importable without an installed package
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from talkkit.adapters.mail import MailgunAuth, MailgunReplyOptions, Sender  # noqa: E402
from talkkit.adapters.sms import SMSSettings  # noqa: E402

TWILIO_AUTH_TOKEN = "12345678901234567890123456789012"
TWILIO_ACCOUNT_SID = "AC00000000000000000000000000000000"


def sign(url: str, params: dict, token: str = TWILIO_AUTH_TOKEN) -> str:
    """Compute the X-Twilio-Signature Twilio would send."""
    return RequestValidator(token).compute_signature(url, params)


@pytest.fixture
def sms_settings() -> SMSSettings:
    return SMSSettings(
        twilio_account_sid=TWILIO_ACCOUNT_SID,
        twilio_auth_token=TWILIO_AUTH_TOKEN,
    )


@pytest.fixture
def sms_params() -> dict:
    return {
        "MessageSid": "SM1111",
        "AccountSid": TWILIO_ACCOUNT_SID,
        "From": "+15550001111",
        "To": "+15550002222",
        "Body": "Hi there",
    }


@pytest.fixture
def mailgun_auth() -> MailgunAuth:
    return MailgunAuth(api_key="key-abc", domain="mg.example.com")


@pytest.fixture
def reply_options() -> MailgunReplyOptions:
    return MailgunReplyOptions(
        sender=Sender(name="Support", email="support@mg.example.com"),
        reply_to="reply+thread@mg.example.com",
    )


@pytest.fixture
def email_form() -> dict:
    return {
        "From": "Alice <alice@example.org>",
        "Subject": "Order #1",
        "Message-Id": "<msg-3@example.org>",
        "References": "<id-1@example.org> <id-2@example.org>",
        "sender": "alice@example.org",
        "recipient": "support@mg.example.com",
        "body-plain": "Where is my order?",
        "timestamp": "1700000000",
    }
