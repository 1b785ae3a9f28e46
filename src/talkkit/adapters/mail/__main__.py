"""CLI entry point for the email adapter."""

import asyncio
from pathlib import Path

import typer
import yaml
from typing_extensions import Annotated

from ...core.logging import configure_logging, mask_secret
from .adapter import mailgun
from .config import load_settings

app = typer.Typer(
    name="talkkit-mail",
    help="Mailgun email reply adapter"
)


@app.command()
def reply(
    text: Annotated[str, typer.Argument(help="Reply text")],
    webhook: Annotated[Path, typer.Option("--webhook", "-w", help="YAML/JSON file with the inbound webhook fields")],
    config: Annotated[Path, typer.Option("--config", "-c", help="Path to YAML config file")] = Path("talkkit.yaml"),
):
    """Reply to a stored inbound webhook payload."""
    try:
        settings = load_settings(config)
        with open(webhook, "r", encoding="utf-8") as f:
            # JSON is valid YAML
            webhook_data = yaml.safe_load(f) or {}
        handler = mailgun(webhook_data, settings.auth(), settings.reply_options())
    except Exception as e:
        typer.echo(f"Error loading input: {e}", err=True)
        raise typer.Exit(1)

    configure_logging(settings.log_level)

    try:
        message_id = asyncio.run(handler.reply(text))
    except Exception as e:
        typer.echo(f"Reply failed: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Sent {message_id}")
    typer.echo(f"Thread root: {handler.get_thread_root_message_id()}")


@app.command()
def validate_config(
    config: Annotated[Path, typer.Option("--config", "-c", help="Path to YAML config file")] = Path("talkkit.yaml"),
):
    """Validate configuration without sending anything."""
    try:
        settings = load_settings(config)
        typer.echo("✅ Configuration is valid")
        typer.echo(f"Mailgun domain: {settings.mailgun_domain}")
        typer.echo(f"Mailgun API: {settings.mailgun_api_url}")
        typer.echo(f"API key: {mask_secret(settings.mailgun_api_key.get_secret_value(), 4)}")
        options = settings.reply_options()
        if options.sender:
            typer.echo(f"Sender: {options.sender.name} <{options.sender.email}>")
        else:
            typer.echo("⚠️  Sender is not set; replies will fail")
        if options.reply_to:
            typer.echo(f"Reply-To: {options.reply_to}")
        else:
            typer.echo("⚠️  Reply-To is not set; replies will fail")
    except Exception as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
