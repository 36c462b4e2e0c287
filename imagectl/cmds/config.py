"""Configuration management commands for imagectl.

This module provides commands for managing configuration profiles, each of
which names the API origin used to resolve uploaded images.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.prompt import Prompt, Confirm

from ..config import ConfigManager
from ..resolver import DEFAULT_API_ORIGIN, DEFAULT_CLOUD_MARKER
from .common import get_console, get_formatter, handle_exceptions

app = typer.Typer()


def get_config_manager(ctx: typer.Context) -> ConfigManager:
    return ctx.obj["config_manager"]


@app.command()
@handle_exceptions
def init(
    ctx: typer.Context,
    profile_name: str = typer.Option("default", "--name", "-n", help="Profile name"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="API origin serving /uploads/"),
    cloud_marker: str = typer.Option(DEFAULT_CLOUD_MARKER, "--cloud-marker", help="Substring identifying Cloudinary URLs"),
    timeout: int = typer.Option(10, "--timeout", help="Health check timeout in seconds"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Prompt for missing values"),
    validate: bool = typer.Option(False, "--validate", help="Check the API health endpoint before saving"),
    activate: bool = typer.Option(True, "--activate/--no-activate", help="Make this the active profile"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing profile"),
) -> None:
    """Initialize a new configuration profile.

    Examples:
        # Local backend
        imagectl config init --api-url http://localhost:5000

        # Production profile, checked against /api/health
        imagectl config init --name production --api-url https://api.example.edu --validate

        # Interactive setup
        imagectl config init --interactive
    """
    console = get_console(ctx)
    config_manager = get_config_manager(ctx)

    if interactive:
        console.print(f"[bold blue]Setting up profile: {profile_name}[/bold blue]")
        if not api_url:
            api_url = Prompt.ask("API origin", default=DEFAULT_API_ORIGIN)
        cloud_marker = Prompt.ask("Cloudinary marker", default=cloud_marker)

    profile = config_manager.create_profile(
        name=profile_name,
        api_url=(api_url or DEFAULT_API_ORIGIN).rstrip("/"),
        cloud_marker=cloud_marker,
        timeout=timeout,
        overwrite=force,
        validate_connection=validate,
    )

    if activate:
        config_manager.set_active_profile(profile.name)

    console.print(f"[green]Profile '{profile.name}' saved ({profile.origin})[/green]")


@app.command("list")
@handle_exceptions
def list_profiles(ctx: typer.Context) -> None:
    """List configuration profiles."""
    profiles = get_config_manager(ctx).list_profiles()
    if not profiles:
        get_console(ctx).print("[yellow]No profiles configured. Run 'imagectl config init' first.[/yellow]")
        return

    get_formatter(ctx).render(
        profiles,
        format=ctx.obj.get("output_format"),
        columns=["name", "api_url", "cloud_marker", "active"],
        title="Profiles",
    )


@app.command()
@handle_exceptions
def show(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Profile name (defaults to the profile in use)"),
) -> None:
    """Show a profile, or the one currently in use."""
    config_manager = get_config_manager(ctx)
    profile = config_manager.get_profile(name) if name else ctx.obj["profile"]

    get_formatter(ctx).render(
        profile.model_dump(),
        format=ctx.obj.get("output_format"),
        title=f"Profile: {profile.name}",
    )


@app.command()
@handle_exceptions
def use(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Profile to activate"),
) -> None:
    """Set the active profile."""
    get_config_manager(ctx).set_active_profile(name)
    get_console(ctx).print(f"[green]Active profile: {name}[/green]")


@app.command()
@handle_exceptions
def delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Profile to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a configuration profile."""
    config_manager = get_config_manager(ctx)
    config_manager.get_profile(name)

    if not yes and not Confirm.ask(f"Delete profile '{name}'?", default=False):
        get_console(ctx).print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    config_manager.delete_profile(name)
    get_console(ctx).print(f"[green]Profile '{name}' deleted[/green]")


@app.command("export")
@handle_exceptions
def export_profile(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Profile to export"),
    file_path: Path = typer.Argument(..., help="Destination JSON file"),
) -> None:
    """Export a profile to a JSON file."""
    get_config_manager(ctx).export_profile(name, file_path)
    get_console(ctx).print(f"[green]Exported '{name}' to {file_path}[/green]")


@app.command("import")
@handle_exceptions
def import_profile(
    ctx: typer.Context,
    file_path: Path = typer.Argument(..., help="JSON file to import"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing profile"),
) -> None:
    """Import a profile from a JSON file."""
    profile = get_config_manager(ctx).import_profile(file_path, overwrite=overwrite)
    get_console(ctx).print(f"[green]Imported profile '{profile.name}'[/green]")


@app.command()
@handle_exceptions
def validate(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Profile name (defaults to the profile in use)"),
) -> None:
    """Check that a profile's API origin responds."""
    config_manager = get_config_manager(ctx)
    profile = config_manager.get_profile(name) if name else ctx.obj["profile"]

    config_manager.validate_connection(profile)
    get_console(ctx).print(f"[green]{profile.origin} is reachable[/green]")
