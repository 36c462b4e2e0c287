"""Image URL commands for imagectl.

This module provides commands for resolving stored image references into
displayable URLs, applying Cloudinary transformations, and inspecting
references.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from ..exceptions import RecordFileError
from ..models import ImageRef, TransformationSpec
from ..models.transformation import is_known_preset
from ..presets import ImagePresets
from ..records import extract_reference, record_image_url
from .common import get_console, get_formatter, get_resolver, handle_exceptions

app = typer.Typer()


def emit_url(ctx: typer.Context, ref: Optional[str], url: Optional[str]) -> None:
    """Print a single URL, or a structured document when json/yaml is requested."""
    output_format = ctx.obj.get("output_format")
    if output_format:
        get_formatter(ctx).render({"ref": ref, "url": url}, format=output_format)
        if url is None:
            raise typer.Exit(1)
        return

    if url is None:
        get_console(ctx).print("[yellow]No image reference given[/yellow]")
        raise typer.Exit(1)

    typer.echo(url)


def parse_params(params: Optional[List[str]]) -> Dict[str, str]:
    """Parse ``key=value`` transformation parameters, keeping their order."""
    parsed: Dict[str, str] = {}
    for param in params or []:
        key, sep, value = param.partition("=")
        key = key.strip()
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{param}'", param_hint="--param")
        parsed[key] = value.strip()
    return parsed


def load_records(file_path: Path) -> List[Any]:
    """Load records from a JSON file.

    Accepts a list of records, a single record, or an API envelope with the
    records under ``data``.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except OSError as e:
        raise RecordFileError(f"Cannot read records: {e}", file_path=str(file_path))
    except json.JSONDecodeError as e:
        raise RecordFileError(f"Invalid JSON: {e}", file_path=str(file_path))

    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list):
        return payload

    raise RecordFileError("Expected a JSON object or array of records", file_path=str(file_path))


@app.command()
@handle_exceptions
def resolve(
    ctx: typer.Context,
    refs: List[str] = typer.Argument(..., help="Image references to resolve"),
) -> None:
    """Resolve image references into complete URLs.

    Examples:
        # Bare filename served by the API
        imagectl url resolve building2.jpeg

        # Several references at once
        imagectl --output json url resolve /uploads/a.png b.png https://example.com/c.jpg
    """
    resolver = get_resolver(ctx)

    if len(refs) == 1:
        emit_url(ctx, refs[0], resolver.resolve(refs[0]))
        return

    rows = [
        {"ref": ref, "kind": ImageRef(raw=ref).kind.value, "url": resolver.resolve(ref)}
        for ref in refs
    ]
    get_formatter(ctx).render(rows, format=ctx.obj.get("output_format"), title="Resolved images")


@app.command()
@handle_exceptions
def thumbnail(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Image reference"),
    width: int = typer.Option(400, "--width", "-w", help="Thumbnail width"),
    height: int = typer.Option(300, "--height", help="Thumbnail height"),
) -> None:
    """Get a filled thumbnail URL for an image.

    Non-Cloudinary images are returned resolved but untransformed.

    Examples:
        imagectl url thumbnail https://res.cloudinary.com/demo/image/upload/v1/x.jpg --width 200 --height 150
    """
    emit_url(ctx, ref, get_resolver(ctx).resolve_thumbnail(ref, width, height))


@app.command()
@handle_exceptions
def responsive(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Image reference"),
    size: str = typer.Option("medium", "--size", "-s", help="Size preset (small, medium, large)"),
) -> None:
    """Get a responsive width URL for an image.

    Examples:
        imagectl url responsive https://res.cloudinary.com/demo/image/upload/v1/x.jpg --size large
    """
    if not is_known_preset(size):
        get_console(ctx).print(f"[yellow]Unknown size '{size}', using medium[/yellow]", highlight=False)
    emit_url(ctx, ref, get_resolver(ctx).resolve_responsive(ref, size))


@app.command()
@handle_exceptions
def optimize(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Image reference"),
    width: Optional[int] = typer.Option(None, "--width", "-w", help="Target width"),
    height: Optional[int] = typer.Option(None, "--height", help="Target height"),
    crop: str = typer.Option("fill", "--crop", help="Crop mode"),
    gravity: Optional[str] = typer.Option(None, "--gravity", help="Crop gravity (e.g. face)"),
    quality: str = typer.Option("auto", "--quality", help="Quality"),
    image_format: str = typer.Option("auto", "--format", help="Delivery format"),
    params: Optional[List[str]] = typer.Option(None, "--param", help="Extra transformation as key=value (repeatable)"),
) -> None:
    """Get an image URL with custom Cloudinary transformations.

    Examples:
        # Face-centred faculty card
        imagectl url optimize https://res.cloudinary.com/demo/image/upload/v1/f.jpg -w 250 --height 300 --gravity face

        # Extra raw transformation
        imagectl url optimize https://res.cloudinary.com/demo/image/upload/v1/f.jpg --param e=grayscale
    """
    options = {
        "width": width,
        "height": height,
        "crop": crop,
        "gravity": gravity,
        "quality": quality,
        "format": image_format,
    }
    options.update(parse_params(params))
    spec = TransformationSpec(**options)
    emit_url(ctx, ref, get_resolver(ctx).resolve_optimized(ref, spec))


@app.command()
@handle_exceptions
def classify(
    ctx: typer.Context,
    refs: List[str] = typer.Argument(..., help="Image references to classify"),
) -> None:
    """Show how image references are interpreted."""
    resolver = get_resolver(ctx)
    rows = []
    for ref in refs:
        image_ref = ImageRef(raw=ref)
        rows.append({
            "ref": ref,
            "kind": image_ref.kind.value,
            "cloudinary": image_ref.is_cloudinary(resolver.cloud_marker),
            "public_id": resolver.extract_cloudinary_public_id(ref),
        })
    get_formatter(ctx).render(rows, format=ctx.obj.get("output_format"), title="Image references")


@app.command("public-id")
@handle_exceptions
def public_id(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Cloudinary URL"),
) -> None:
    """Extract the public ID from a Cloudinary URL."""
    result = get_resolver(ctx).extract_cloudinary_public_id(ref)
    if result is None:
        get_console(ctx).print("[yellow]Not a versioned Cloudinary URL[/yellow]")
        raise typer.Exit(1)
    typer.echo(result)


@app.command()
@handle_exceptions
def placeholder(
    ctx: typer.Context,
    width: int = typer.Option(400, "--width", "-w", help="Placeholder width"),
    height: int = typer.Option(300, "--height", help="Placeholder height"),
    text: str = typer.Option("No Image", "--text", help="Placeholder text"),
) -> None:
    """Generate a placeholder image URL."""
    emit_url(ctx, None, get_resolver(ctx).placeholder(width, height, text))


@app.command()
@handle_exceptions
def avatar(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name to render as initials"),
    size: int = typer.Option(400, "--size", "-s", help="Avatar size"),
) -> None:
    """Generate an initials avatar URL."""
    emit_url(ctx, None, get_resolver(ctx).avatar(name, size=size))


@app.command()
@handle_exceptions
def preset(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Preset name, e.g. faculty.card"),
    ref: str = typer.Argument(..., help="Image reference"),
) -> None:
    """Apply a named page preset to an image.

    Examples:
        imagectl url preset news.hero https://res.cloudinary.com/demo/image/upload/v1/n.jpg
    """
    presets = ImagePresets(get_resolver(ctx))
    emit_url(ctx, ref, presets.apply(name, ref))


@app.command("presets")
@handle_exceptions
def list_presets(ctx: typer.Context) -> None:
    """List available page presets."""
    presets = ImagePresets(get_resolver(ctx))
    sample = "https://res.cloudinary.com/demo/image/upload/v1/sample.jpg"
    rows = [
        {"preset": name, "example": presets.apply(name, sample)}
        for name in presets.names()
    ]
    get_formatter(ctx).render(rows, format=ctx.obj.get("output_format"), title="Image presets")


@app.command()
@handle_exceptions
def record(
    ctx: typer.Context,
    file_path: Path = typer.Argument(..., help="JSON file with API records"),
    name_field: str = typer.Option("title", "--name-field", help="Field used for the avatar fallback"),
    preset_name: Optional[str] = typer.Option(None, "--preset", help="Apply a page preset to found images"),
) -> None:
    """Resolve the image of each record in a JSON file.

    Records without an image get an initials avatar.

    Examples:
        curl -s http://localhost:5000/api/news > news.json
        imagectl url record news.json --preset news.card
    """
    resolver = get_resolver(ctx)
    presets = ImagePresets(resolver)
    apply = presets.get(preset_name) if preset_name else None

    rows = []
    for index, item in enumerate(load_records(file_path)):
        ref = extract_reference(item)
        if ref and apply:
            url = apply(ref)
        else:
            url = record_image_url(item, resolver, fallback_name_field=name_field)

        label = None
        if isinstance(item, dict):
            label = item.get(name_field) or item.get("name") or item.get("title")
        rows.append({"index": index, "label": label, "ref": ref, "url": url})

    get_formatter(ctx).render(rows, format=ctx.obj.get("output_format"), title=f"Images in {file_path.name}")
