"""Entry point for the ``icomoon-ingest`` command."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from icomoon_ingest import __version__
from icomoon_ingest.cli.commands import catalog, ingest, sanitize, sprite
from icomoon_ingest.config import LOG_LEVELS, Config
from icomoon_ingest.exceptions import ConfigError
from icomoon_ingest.logging_setup import setup_logging

console = Console(stderr=True)


@click.group()
@click.version_option(__version__, prog_name="icomoon-ingest")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file (default: $ICOMOON_INGEST_CONFIG)",
)
@click.option(
    "--store-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding icons.json and sprite.svg",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging verbosity",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    store_dir: Path | None,
    log_level: str | None,
) -> None:
    """Import IcoMoon exports into a sanitized icon catalog."""
    try:
        config = Config.load(config_path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1) from e

    if store_dir is not None:
        config.store_dir = store_dir
    if log_level is not None:
        config.log_level = log_level.upper()

    setup_logging(config.log_level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["log_level"] = config.log_level


cli.add_command(ingest)
cli.add_command(sanitize)
cli.add_command(sprite)
cli.add_command(catalog)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
