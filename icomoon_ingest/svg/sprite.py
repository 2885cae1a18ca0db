"""Sprite synthesis from selection.json path data.

The output is not passed back through the sanitizer, so everything that
reaches the document goes through lxml (which escapes values) and through the
sanitizer's attribute policy (which drops ``on*`` and unknown names).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from lxml import etree

from icomoon_ingest.models import (
    ICON_ID_PREFIX,
    SVG_NS,
    PathSpec,
    SpriteDocument,
    SpritePath,
    Symbol,
)
from icomoon_ingest.svg.sanitizer import clean_attributes

logger = logging.getLogger(__name__)

SPRITE_STYLE = "display:none;"

# Characters that are illegal in XML 1.0 (tab, LF and CR are legal)
_ILLEGAL_XML_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")
_XML_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*(?::[A-Za-z_][A-Za-z0-9_.\-]*)?$")


def build_sprite(path_specs: Mapping[str, PathSpec]) -> SpriteDocument:
    """Build one ``<symbol>`` per name, in mapping order."""
    symbols = []
    for name, spec in path_specs.items():
        view_box = f"0 0 {_format_number(spec.width)} {_format_number(spec.grid)}"
        paths = tuple(
            SpritePath(d=_xml_text(d), attrs=_path_attributes(spec.attrs_for(index)))
            for index, d in enumerate(spec.paths)
        )
        symbols.append(
            Symbol(id=f"{ICON_ID_PREFIX}{_xml_text(name)}", view_box=view_box, paths=paths)
        )
    logger.debug("Synthesized sprite with %d symbols", len(symbols))
    return SpriteDocument(symbols=tuple(symbols))


def render_sprite(document: SpriteDocument) -> str:
    """Serialize a sprite as ``<svg xmlns=... style="display:none;">``."""
    root = etree.Element(f"{{{SVG_NS}}}svg", nsmap={None: SVG_NS})
    root.set("style", SPRITE_STYLE)
    # Empty text keeps explicit end tags: <symbol ...></symbol>, <path ...></path>
    root.text = ""
    for symbol in document.symbols:
        symbol_el = etree.SubElement(root, f"{{{SVG_NS}}}symbol")
        symbol_el.set("id", symbol.id)
        symbol_el.set("viewBox", symbol.view_box)
        symbol_el.text = ""
        for path in symbol.paths:
            path_el = etree.SubElement(symbol_el, f"{{{SVG_NS}}}path")
            path_el.set("d", path.d)
            for name, value in path.attrs:
                path_el.set(name, value)
            path_el.text = ""
    return etree.tostring(root, encoding="unicode")


def _path_attributes(attrs: Mapping[str, Any]) -> tuple[tuple[str, str], ...]:
    pairs = []
    for name, value in attrs.items():
        if not isinstance(name, str) or not _XML_NAME_RE.match(name):
            logger.debug("Dropped path attribute with invalid name %r", name)
            continue
        # xlink:href and friends would need namespace declarations
        if ":" in name:
            continue
        if value is None or isinstance(value, (dict, list)):
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        pairs.append((name, _xml_text(str(value))))
    return tuple(clean_attributes(pairs))


def _xml_text(value: str) -> str:
    return _ILLEGAL_XML_CHARS_RE.sub("", value)


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
