"""Sprite command - synthesize a sprite from selection.json."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from icomoon_ingest.cli.utils import get_config
from icomoon_ingest.exceptions import IconIngestError
from icomoon_ingest.models import UploadedAsset
from icomoon_ingest.parsers.selection import generate_sprite_from_selection
from icomoon_ingest.validation import validate

console = Console(stderr=True)


@click.command()
@click.argument("selection", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Output file (default: stdout)")
@click.pass_context
def sprite(ctx: click.Context, selection: Path, output: Path | None) -> None:
    """Build an SVG sprite from the path data in SELECTION."""
    try:
        asset = UploadedAsset.from_path(selection)
        validate(asset, "json", get_config(ctx).max_upload_size)
        svg = generate_sprite_from_selection(asset.content)
    except IconIngestError as e:
        console.print(f"[red]Error ({e.code}):[/red] {escape(e.message)}")
        raise SystemExit(1) from e

    if output is None:
        click.echo(svg)
        return

    output.write_text(svg, encoding="utf-8")
    console.print(f"[green]Sprite written:[/green] {escape(str(output))}")
