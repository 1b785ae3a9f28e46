"""
Twilio SMS adapter.

Receives Twilio SMS webhooks, verifies their signature, hands the message to
a user handler and answers with TwiML. Also sends outbound SMS.
"""

from .adapter import TwilioService, TwilioSMSConvo, create_app, twilio
from .config import MessageContext, SMSSettings, TwilioCredentials, TwilioOptions, load_settings

__all__ = [
    "MessageContext",
    "SMSSettings",
    "TwilioCredentials",
    "TwilioOptions",
    "TwilioService",
    "TwilioSMSConvo",
    "create_app",
    "load_settings",
    "twilio",
]
