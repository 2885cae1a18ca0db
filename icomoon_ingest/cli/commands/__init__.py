"""CLI commands for icomoon-ingest."""

from icomoon_ingest.cli.commands.catalog import catalog
from icomoon_ingest.cli.commands.ingest import ingest
from icomoon_ingest.cli.commands.sanitize import sanitize
from icomoon_ingest.cli.commands.sprite import sprite

__all__ = ["ingest", "sanitize", "sprite", "catalog"]
