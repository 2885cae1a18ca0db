"""IcoMoon selection.json parsing.

Consumed subset::

    {
      "preferences": {"fontPref": {"prefix": "icon-"}},
      "icons": [
        {"properties": {"name": "home,house", "code": 59648},
         "icon": {"tags": ["home"], "paths": ["M0 0..."], "width": 1024,
                  "attrs": [{"fill": "#000"}]}}
      ],
      "height": 1024
    }
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from typing import Any

from icomoon_ingest.exceptions import MalformedJsonError, NoPathsError
from icomoon_ingest.models import DEFAULT_GRID, Icon, IconCatalog, PathSpec
from icomoon_ingest.svg.sprite import build_sprite

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "icon-"


def load_selection(raw: bytes | str) -> dict[str, Any]:
    """Decode a selection.json document.

    Raises:
        MalformedJsonError: Not valid JSON, or the top level is not an object.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedJsonError(f"JSON parse error: {e}") from e
    if not isinstance(data, dict):
        raise MalformedJsonError("JSON parse error: top level must be an object")
    return data


def parse_selection_json(raw: bytes | str, default_prefix: str = DEFAULT_PREFIX) -> IconCatalog:
    """Decode selection.json bytes into an icon catalog."""
    return catalog_from_selection(load_selection(raw), default_prefix)


def catalog_from_selection(
    data: Mapping[str, Any], default_prefix: str = DEFAULT_PREFIX
) -> IconCatalog:
    """Build a catalog from decoded selection.json data.

    Entries without ``properties.name`` are skipped. Duplicate names are kept.
    """
    prefix = _get(data, "preferences", "fontPref", "prefix")
    if not isinstance(prefix, str):
        prefix = default_prefix

    icons = []
    for entry in _icon_entries(data):
        names = _split_names(_get(entry, "properties", "name"))
        if names is None:
            continue
        primary, aliases = names[0], names[1:]
        icons.append(
            Icon(
                name=primary,
                css_class=prefix + primary,
                unicode=_hex_code(_get(entry, "properties", "code")),
                tags=_string_list(_get(entry, "icon", "tags")),
                aliases=tuple(aliases),
            )
        )

    catalog = IconCatalog(icons)
    logger.debug("Parsed %d icons from selection.json (prefix %r)", len(catalog), prefix)
    return catalog


def extract_paths(data: Mapping[str, Any], default_grid: int = DEFAULT_GRID) -> dict[str, PathSpec]:
    """Collect per-icon path data for sprite synthesis.

    ``width`` defaults to the document ``height`` (the grid), which defaults
    to 1024. A repeated name replaces the earlier entry in place.
    """
    grid = data.get("height")
    if not _is_number(grid):
        grid = default_grid

    paths: dict[str, PathSpec] = {}
    for entry in _icon_entries(data):
        names = _split_names(_get(entry, "properties", "name"))
        raw_paths = _get(entry, "icon", "paths")
        if names is None or not isinstance(raw_paths, list):
            continue

        width = _get(entry, "icon", "width")
        raw_attrs = _get(entry, "icon", "attrs")
        attrs = raw_attrs if isinstance(raw_attrs, list) else []

        paths[names[0]] = PathSpec(
            paths=tuple(p for p in raw_paths if isinstance(p, str)),
            width=width if _is_number(width) else grid,
            grid=grid,
            attrs=tuple(a if isinstance(a, dict) else {} for a in attrs),
        )
    return paths


def generate_sprite_from_selection(raw: bytes | str) -> str:
    """Synthesize a sprite document straight from selection.json bytes.

    Raises:
        MalformedJsonError: The manifest does not decode.
        NoPathsError: No icon carries path data.
    """
    specs = extract_paths(load_selection(raw))
    if not specs:
        raise NoPathsError()
    return build_sprite(specs).to_svg()


def _icon_entries(data: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    icons = data.get("icons")
    if not isinstance(icons, list):
        return []
    return [entry for entry in icons if isinstance(entry, dict)]


def _get(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _split_names(value: Any) -> list[str] | None:
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    return [token.strip() for token in str(value).split(",")]


def _hex_code(code: Any) -> str | None:
    if code is None or isinstance(code, bool):
        return None
    try:
        return format(int(code), "x")
    except (TypeError, ValueError, OverflowError):
        logger.debug("Ignoring non-numeric code %r", code)
        return None


def _string_list(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(item) for item in value if isinstance(item, (str, int, float)))


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )
