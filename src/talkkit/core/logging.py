"""
Logging helpers for Talkkit.

Logging is diagnostic only: adapters log through module-level standard
loggers and never write to persistent storage themselves.
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the CLI entry points."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def mask_secret(value: Optional[str], visible: int = 8) -> str:
    """
    Render an identifier for display without leaking all of it.

    Args:
        value: Identifier such as an account SID or domain key
        visible: Number of leading characters to keep

    Returns:
        The first ``visible`` characters followed by ``...``
    """
    if not value:
        return "<unset>"
    if len(value) <= visible:
        return "*" * len(value)
    return f"{value[:visible]}..."
