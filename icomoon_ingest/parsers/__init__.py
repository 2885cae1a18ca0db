"""Parsers for IcoMoon exports.

This subpackage provides:
- selection.json decoding into an icon catalog and raw path data
- SVG sprite decoding into an icon catalog
"""

from icomoon_ingest.parsers.selection import (
    catalog_from_selection,
    extract_paths,
    generate_sprite_from_selection,
    load_selection,
    parse_selection_json,
)
from icomoon_ingest.parsers.sprite import (
    extract_symbol,
    merge_sprite_catalog,
    parse_svg_sprite,
)

__all__ = [
    "catalog_from_selection",
    "extract_paths",
    "generate_sprite_from_selection",
    "load_selection",
    "parse_selection_json",
    "extract_symbol",
    "merge_sprite_catalog",
    "parse_svg_sprite",
]
