"""Main CLI entry point for lnquery."""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from lnquery import __version__
from lnquery.application.processor import build_processor
from lnquery.channels.infrastructure.static_gateway import StaticGateway
from lnquery.exceptions import ConfigurationError
from lnquery.intents.classifier import RegexIntentClassifier
from lnquery.utils.config import get_settings
from lnquery.utils.logging import configure_logging

app = typer.Typer(
    name="lnquery",
    help="⚡ Ask questions about your Lightning channels in plain English",
    rich_markup_mode="rich",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]lnquery[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log at DEBUG level (logs go to stderr).",
    ),
) -> None:
    """
    lnquery - natural-language queries over Lightning channel data.
    """
    if verbose:
        settings = get_settings()
        configure_logging(log_level="DEBUG", json_logs=settings.json_logs, dev_mode=settings.dev_mode)


def _load_gateway(fixture: Path | None) -> StaticGateway:
    path = fixture or get_settings().fixture_path
    if path is None:
        raise ConfigurationError(
            "No channel fixture given; pass --fixture or set LNQUERY_FIXTURE_PATH",
            setting="fixture_path",
        )
    return StaticGateway.from_file(path)


@app.command("query")
def query_command(
    text: str = typer.Argument(..., help="Question, e.g. 'show me unhealthy channels'"),
    fixture: Path | None = typer.Option(
        None,
        "--fixture",
        "-f",
        help="JSON channel fixture (defaults to LNQUERY_FIXTURE_PATH)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full response as JSON"),
) -> None:
    """Answer a question about the node's channels."""
    try:
        gateway = _load_gateway(fixture)
    except ConfigurationError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(1)

    response = asyncio.run(build_processor(gateway).execute_query(text))

    if as_json:
        typer.echo(json.dumps(response.to_dict(), indent=2))
    elif response.is_error:
        console.print(f"[red]{response.text}[/red]")
    else:
        console.print(response.text, highlight=False, markup=False)

    if response.is_error:
        raise typer.Exit(1)


@app.command("classify")
def classify_command(
    text: str = typer.Argument(..., help="Question to classify"),
    as_json: bool = typer.Option(False, "--json", help="Print the intent as JSON"),
) -> None:
    """Show how a question is classified, without querying any node."""
    intent = RegexIntentClassifier().classify(text)

    if as_json:
        typer.echo(json.dumps(intent.to_dict(), indent=2))
        return

    table = Table(title="Intent", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Domain", intent.domain.value)
    table.add_row("Operation", intent.operation.value)
    table.add_row("Kind", intent.kind.value)
    for name, value in intent.attributes.to_dict().items():
        table.add_row(f"Attribute: {name}", str(value))
    if intent.error is not None:
        table.add_row("Error", intent.error.message)
    console.print(table)


@app.command("version")
def version_command() -> None:
    """Show the version."""
    console.print(f"[bold blue]lnquery[/bold blue] version {__version__}")


if __name__ == "__main__":
    app()
