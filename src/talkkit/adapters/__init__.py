"""Provider adapters: ``sms`` (Twilio) and ``mail`` (Mailgun)."""
