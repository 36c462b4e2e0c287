"""Helpers shared by command modules."""

import functools
from typing import Any, Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..exceptions import ImageCtlError, ConfigError
from ..render import OutputFormatter
from ..resolver import ImageResolver
from ..utils.exceptions import format_error_for_user


def _console(ctx: Optional[typer.Context]) -> Console:
    if ctx is not None and isinstance(ctx.obj, dict) and ctx.obj.get("console"):
        return ctx.obj["console"]
    return Console()


def _command_context(args: tuple, kwargs: dict) -> Optional[typer.Context]:
    ctx = kwargs.get("ctx")
    if ctx is None:
        ctx = next((arg for arg in args if isinstance(arg, typer.Context)), None)
    return ctx


def handle_exceptions(func: Callable) -> Callable:
    """Decorator to handle common exceptions in commands."""
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        ctx = _command_context(args, kwargs)
        try:
            return func(*args, **kwargs)
        except ImageCtlError as e:
            debug = ctx.obj.get("debug", False) if ctx is not None and isinstance(ctx.obj, dict) else False
            console = _console(ctx)
            console.print(f"[red]{escape(format_error_for_user(e, debug))}[/red]")
            if not debug and not isinstance(e, ConfigError):
                console.print("[dim]Use --debug for more details[/dim]")
            raise typer.Exit(1)
        except KeyboardInterrupt:
            _console(ctx).print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(130)
    return wrapper


def get_resolver(ctx: typer.Context) -> ImageResolver:
    """Get the resolver built by the main callback."""
    return ctx.obj["resolver"]


def get_formatter(ctx: typer.Context) -> OutputFormatter:
    """Get the output formatter from context."""
    return ctx.obj["output_formatter"]


def get_console(ctx: typer.Context) -> Console:
    return _console(ctx)
