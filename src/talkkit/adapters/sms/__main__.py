"""CLI entry point for the SMS adapter."""

import asyncio
import importlib
from pathlib import Path

import typer
import uvicorn
from typing_extensions import Annotated

from ...core.logging import configure_logging, mask_secret
from .adapter import MessageHandler, create_app, twilio
from .config import load_settings, options_from_settings

app = typer.Typer(
    name="talkkit-sms",
    help="Twilio SMS webhook adapter"
)


def load_handler(spec: str) -> MessageHandler:
    """Import a handler given as 'package.module:function'."""
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise typer.BadParameter("Handler must look like 'package.module:function'")
    module = importlib.import_module(module_name)
    handler = getattr(module, attr, None)
    if not callable(handler):
        raise typer.BadParameter(f"{spec} is not callable")
    return handler


@app.command()
def run(
    handler: Annotated[str, typer.Option("--handler", help="Message handler as module:function")],
    host: Annotated[str, typer.Option("--host", "-h", help="Host to bind to")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port to bind to")] = 8812,
    config: Annotated[Path, typer.Option("--config", "-c", help="Path to YAML config file")] = Path("talkkit.yaml"),
):
    """Run the SMS webhook server."""
    try:
        settings = load_settings(config)
        on_message = load_handler(handler)
    except Exception as e:
        typer.echo(f"Error loading configuration: {e}", err=True)
        raise typer.Exit(1)

    configure_logging(settings.log_level)
    fastapi_app = create_app(settings, on_message)

    typer.echo(f"Starting SMS adapter on {host}:{port}")
    typer.echo(f"Webhook endpoint: {settings.webhook_path}")

    try:
        uvicorn.run(
            fastapi_app,
            host=host,
            port=port,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        typer.echo("\nShutting down...")


@app.command()
def send(
    message: Annotated[str, typer.Argument(help="Text to send")],
    from_: Annotated[str, typer.Option("--from", help="Sender phone number")],
    to: Annotated[str, typer.Option("--to", help="Recipient phone number")],
    config: Annotated[Path, typer.Option("--config", "-c", help="Path to YAML config file")] = Path("talkkit.yaml"),
):
    """Send a single outbound SMS."""
    try:
        settings = load_settings(config)
    except Exception as e:
        typer.echo(f"Error loading configuration: {e}", err=True)
        raise typer.Exit(1)

    configure_logging(settings.log_level)
    # Outbound only; inbound messages are never dispatched here
    service = twilio(lambda context: None, options_from_settings(settings))

    try:
        sent = asyncio.run(service.send_sms(message, from_, to))
    except Exception as e:
        typer.echo(f"Send failed: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Sent message {sent.sid} ({sent.status})")


@app.command()
def validate_config(
    config: Annotated[Path, typer.Option("--config", "-c", help="Path to YAML config file")] = Path("talkkit.yaml"),
):
    """Validate configuration without starting the server."""
    try:
        settings = load_settings(config)
        typer.echo("✅ Configuration is valid")
        typer.echo(f"Twilio Account SID: {mask_secret(settings.twilio_account_sid)}")
        typer.echo(f"Webhook path: {settings.webhook_path}")
        if settings.handler_url:
            typer.echo(f"Handler URL: {settings.handler_url}")
    except Exception as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
