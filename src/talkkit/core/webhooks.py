"""Interfaces shared by the provider adapters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MailProviderHandler(Protocol):
    """Handler built from an inbound email webhook that can reply to it.

    Implementations wrap one provider (Mailgun, ...) and one inbound message.
    """

    async def reply(self, text: str) -> str:
        """Reply to the email from the webhook and return the sent email's ID."""
        ...
