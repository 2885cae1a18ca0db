"""SVG sprite parsing.

Reads ``<symbol id="icon-..." viewBox="...">`` entries out of an IcoMoon
sprite. Parsing goes through defusedxml, so DTDs and entities are refused.
"""

from __future__ import annotations

import logging
import re
from xml.sax.saxutils import escape

from lxml import etree

from icomoon_ingest.exceptions import InvalidSvgError
from icomoon_ingest.models import ICON_ID_PREFIX, Icon, IconCatalog, strip_icon_prefix
from icomoon_ingest.svg.safe_xml import local_name, parse_readonly, parse_tree
from icomoon_ingest.svg.sanitizer import check_declarations

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS_RE = re.compile(r"[^a-zA-Z0-9_-]")


def parse_svg_sprite(raw: bytes | str) -> IconCatalog:
    """Extract one icon per ``<symbol>`` with a non-empty ``id``.

    Raises:
        MalformedXmlError: The sprite is not well-formed XML.
        DoctypeNotAllowedError, EntityNotAllowedError: DTD constructs present.
    """
    root = parse_readonly(raw)

    icons = []
    for element in root.iter():
        if not _is_symbol(element.tag):
            continue
        symbol_id = element.get("id")
        if not symbol_id:
            continue
        name = strip_icon_prefix(symbol_id)
        icons.append(
            Icon(
                name=name,
                css_class=ICON_ID_PREFIX + name,
                view_box=element.get("viewBox"),
                symbol_id=symbol_id,
            )
        )

    logger.debug("Parsed %d symbols from sprite", len(icons))
    return IconCatalog(icons)


def merge_sprite_catalog(existing: IconCatalog, incoming: IconCatalog) -> IconCatalog:
    """A sprite upload only fills an empty catalog; it never overwrites one."""
    if existing.is_empty:
        return incoming
    return existing


def extract_symbol(raw: bytes, name: str) -> tuple[str, str] | None:
    """Find ``icon-{name}`` in a sprite and return ``(viewBox, inner markup)``.

    ``name`` may carry the ``icon-`` prefix; characters outside
    ``[A-Za-z0-9_-]`` are dropped before the lookup. Returns ``None`` when the
    symbol is absent.
    """
    safe_name = _UNSAFE_NAME_CHARS_RE.sub("", strip_icon_prefix(name))
    if not safe_name:
        return None

    check_declarations(raw)
    try:
        root = parse_tree(raw)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise InvalidSvgError("Could not parse sprite.", details={"error": str(e)}) from e

    wanted = ICON_ID_PREFIX + safe_name
    for element in root.iter():
        if _is_symbol(element.tag) and element.get("id") == wanted:
            inner = escape(element.text or "") + "".join(
                etree.tostring(child, encoding="unicode", with_tail=True)
                for child in element
            )
            return element.get("viewBox", ""), inner
    return None


def _is_symbol(tag: object) -> bool:
    # Same case rule as the sanitizer whitelist, which keeps <Symbol>
    return local_name(tag).lower() == "symbol"
