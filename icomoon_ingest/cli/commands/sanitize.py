"""Sanitize command - clean an untrusted SVG file."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from icomoon_ingest.cli.utils import get_config
from icomoon_ingest.exceptions import IconIngestError
from icomoon_ingest.models import UploadedAsset
from icomoon_ingest.svg.sanitizer import sanitize_svg
from icomoon_ingest.validation import validate

console = Console(stderr=True)


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Output file (default: stdout)")
@click.pass_context
def sanitize(ctx: click.Context, input_file: Path, output: Path | None) -> None:
    """Sanitize an SVG file and write the result.

    INPUT_FILE: SVG file to clean.
    """
    try:
        asset = UploadedAsset.from_path(input_file)
        validate(asset, "svg", get_config(ctx).max_upload_size)
        cleaned = sanitize_svg(asset.content)
    except IconIngestError as e:
        console.print(f"[red]Error ({e.code}):[/red] {escape(e.message)}")
        raise SystemExit(1) from e

    if output is None:
        click.echo(cleaned)
        return

    output.write_text(cleaned, encoding="utf-8")
    console.print(f"[green]Sanitized:[/green] {escape(str(input_file))} -> {escape(str(output))}")
