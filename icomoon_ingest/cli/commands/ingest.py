"""Import command - load selection.json and/or sprite uploads."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from icomoon_ingest.api import IconIngestor
from icomoon_ingest.cli.utils import catalog_table, get_config, get_store, print_messages
from icomoon_ingest.models import UploadedAsset

console = Console()


@click.command("import")
@click.argument(
    "files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--show/--no-show", default=True, help="Print the resulting catalog")
@click.pass_context
def ingest(ctx: click.Context, files: tuple[Path, ...], show: bool) -> None:
    """Import IcoMoon export files.

    FILES: selection.json and/or sprite .svg files, processed in order.
    """
    ingestor = IconIngestor(store=get_store(ctx), config=get_config(ctx))

    failed = 0
    result = None
    for path in files:
        result = ingestor.ingest(UploadedAsset.from_path(path))
        print_messages(console, result.errors, result.warnings)
        if not result.success:
            failed += 1
            console.print(f"[red]Failed:[/red] {escape(str(path))} ({result.error_code})")
            continue

        summary = f"[green]Imported:[/green] {escape(str(path))} ({len(result.catalog)} icons"
        if result.sprite_generated:
            summary += ", sprite generated"
        console.print(summary + ")")

    if show and result is not None and result.success:
        console.print(catalog_table(result.catalog))

    if failed:
        raise SystemExit(1)
