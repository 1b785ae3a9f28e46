"""
Mailgun email adapter.

Parses Mailgun inbound route webhooks and replies to them through the
Mailgun messages API, keeping the reply in the original thread.
"""

from .adapter import MailgunHandler, mailgun
from .config import EmailSettings, MailgunAuth, MailgunReplyOptions, Sender, load_settings
from .parsing import MailgunEmailData, MailgunSendResponse, parse_email_form_data

__all__ = [
    "EmailSettings",
    "MailgunAuth",
    "MailgunEmailData",
    "MailgunHandler",
    "MailgunReplyOptions",
    "MailgunSendResponse",
    "Sender",
    "load_settings",
    "mailgun",
    "parse_email_form_data",
]
