"""Main Typer application for the imagectl CLI.

This module contains the main Typer app instance and registers all command
groups. It handles global options like profile selection, API origin
override, debug logging and output formatting.
"""

import logging
import os
import sys
from typing import Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape
from rich.logging import RichHandler
from rich.traceback import install

from . import __version__
from .cmds import url_app, config_app
from .config import ConfigManager, Profile, ENV_API_URL
from .exceptions import ConfigError
from .render import OutputFormatter, FORMATS
from .resolver import ImageResolver
from .utils.exceptions import format_error_for_user

install(show_locals=False)

app = typer.Typer(
    name="imagectl",
    help="Resolve stored image references into displayable URLs",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
output_formatter = OutputFormatter(console)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"imagectl {__version__}")
        raise typer.Exit()


def output_format_callback(value: Optional[str]) -> Optional[str]:
    """Validate the output format option."""
    if value is not None and value.lower() not in FORMATS:
        raise typer.BadParameter(f"Must be one of: {', '.join(FORMATS)}")
    return value.lower() if value else value


def configure_logging(debug: bool) -> None:
    """Send log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=debug)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        "-p",
        help="Configuration profile to use",
    ),
    api_url: Optional[str] = typer.Option(
        None,
        "--api-url",
        help=f"API origin override (also read from {ENV_API_URL})",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format (table, json, yaml)",
        callback=output_format_callback,
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """imagectl - resolve stored image references into displayable URLs.

    Relative references are served by the configured API origin, and
    Cloudinary-hosted images can be resized, cropped and re-encoded through
    URL transformations.

    Examples:
        # Resolve a bare filename against the local backend
        imagectl url resolve building2.jpeg

        # Faculty card variant of a Cloudinary image
        imagectl url preset faculty.card https://res.cloudinary.com/demo/image/upload/v1/f.jpg

        # Use another backend for one call
        imagectl --api-url https://api.example.edu url resolve /uploads/a.png
    """
    configure_logging(debug)

    try:
        config_manager = ConfigManager()
        profile_obj = config_manager.resolve_profile(profile)
        if api_url:
            profile_obj = Profile(**{**profile_obj.model_dump(), "api_url": api_url.rstrip("/")})
    except (ConfigError, PydanticValidationError) as e:
        console.print(f"[red]{escape(format_error_for_user(e, debug))}[/red]")
        raise typer.Exit(1)

    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["output_format"] = output_format
    ctx.obj["console"] = console
    ctx.obj["config_manager"] = config_manager
    ctx.obj["output_formatter"] = output_formatter
    ctx.obj["profile"] = profile_obj
    ctx.obj["resolver"] = ImageResolver.from_profile(profile_obj)

    if debug:
        console.print("[dim]Debug mode enabled[/dim]")
        console.print(f"[dim]Using profile: {profile_obj.name} ({profile_obj.origin})[/dim]")
        if os.getenv(ENV_API_URL):
            console.print(f"[dim]Environment override active: {ENV_API_URL}[/dim]")


app.add_typer(url_app, name="url", help="Resolve and transform image URLs")
app.add_typer(config_app, name="config", help="Manage configuration profiles")


def cli() -> None:
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    cli()
