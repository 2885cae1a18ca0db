"""Helpers shared by CLI commands."""

from __future__ import annotations

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from icomoon_ingest.config import Config
from icomoon_ingest.models import IconCatalog
from icomoon_ingest.store import CatalogStore, FileCatalogStore, MemoryCatalogStore


def get_config(ctx: click.Context) -> Config:
    obj = ctx.obj or {}
    return obj.get("config") or Config.load()


def get_store(ctx: click.Context, required: bool = False) -> CatalogStore:
    """File store for ``--store-dir``; an in-memory store otherwise."""
    config = get_config(ctx)
    if config.store_dir is not None:
        return FileCatalogStore(config.store_dir)
    if required:
        raise click.UsageError("--store-dir (or store_dir in the config) is required")
    return MemoryCatalogStore()


def catalog_table(catalog: IconCatalog, title: str = "Icons") -> Table:
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Class", style="green")
    table.add_column("Unicode", style="yellow")
    table.add_column("Aliases", style="magenta")
    table.add_column("Tags", style="dim")

    for icon in catalog:
        table.add_row(
            escape(icon.name),
            escape(icon.css_class),
            icon.unicode or "",
            escape(", ".join(icon.aliases)),
            escape(", ".join(icon.tags)),
        )
    return table


def print_messages(console: Console, errors: list[str], warnings: list[str]) -> None:
    for message in warnings:
        console.print(f"[yellow]Warning:[/yellow] {escape(message)}")
    for message in errors:
        console.print(f"[red]Error:[/red] {escape(message)}")
