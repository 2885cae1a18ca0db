"""Catalog command - inspect or clear the stored catalog."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.markup import escape

from icomoon_ingest.api import IconIngestor
from icomoon_ingest.cli.utils import catalog_table, get_config, get_store
from icomoon_ingest.exceptions import StoreError

console = Console()


@click.group()
def catalog() -> None:
    """Stored catalog commands."""
    pass


@catalog.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print the catalog as JSON")
@click.pass_context
def list_icons(ctx: click.Context, as_json: bool) -> None:
    """List icons in the stored catalog."""
    store = get_store(ctx, required=True)
    try:
        icons = store.get_catalog()
    except StoreError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1) from e

    if as_json:
        click.echo(json.dumps(icons.to_list(), indent=2))
        return

    console.print(catalog_table(icons, title="Stored Icons"))
    console.print(f"\n[bold]Total:[/bold] {len(icons)} icons")


@catalog.command("clear")
@click.confirmation_option(prompt="Delete the stored catalog and sprite?")
@click.pass_context
def clear_icons(ctx: click.Context) -> None:
    """Delete the stored catalog and sprite."""
    ingestor = IconIngestor(store=get_store(ctx, required=True), config=get_config(ctx))
    result = ingestor.clear()
    if not result.success:
        console.print(f"[red]Error:[/red] {escape('; '.join(result.errors))}")
        raise SystemExit(1)
    console.print("[green]All icons have been cleared.[/green]")
