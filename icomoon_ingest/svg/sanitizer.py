"""
SVG sanitization.

Whitelist-based cleaning of untrusted SVG before it is stored or served.
SVG can carry executable content (``<script>``, ``on*`` handlers,
``javascript:`` links, CSS expressions), so everything not explicitly
allowed is removed.

Stages:

1. Reject DOCTYPE / ENTITY declarations by substring, before any parser runs.
2. Keep only the span from the first ``<svg`` to the last ``</svg>``.
3. Parse with lxml, entities and network disabled.
4. Remove elements in three collect-then-remove passes: scripts, anything
   carrying an ``on*`` attribute (with its subtree), non-whitelisted tags.
5. Drop non-whitelisted attributes, then apply the href and style rules.
6. Serialize.

The span in stage 2 is greedy: a buffer with several sibling ``<svg>`` roots
collapses into one span that usually fails to parse as a single document.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from lxml import etree

from icomoon_ingest.exceptions import (
    DoctypeNotAllowedError,
    EmptySvgError,
    EntityNotAllowedError,
    InvalidSvgError,
    SanitizationFailedError,
)
from icomoon_ingest.models import XLINK_NS
from icomoon_ingest.svg.safe_xml import local_name, parse_tree

logger = logging.getLogger(__name__)

XML_NS = "http://www.w3.org/XML/1998/namespace"

ALLOWED_ELEMENTS = frozenset([
    "svg", "symbol", "defs", "g", "path", "circle", "rect", "ellipse",
    "line", "polyline", "polygon", "title", "desc", "use", "clipPath",
    "mask", "linearGradient", "radialGradient", "stop", "pattern",
])

ALLOWED_ATTRIBUTES = frozenset([
    # Structure
    "xmlns", "viewBox", "width", "height", "id", "class",
    # Paint
    "fill", "stroke", "stroke-width", "stroke-linecap", "stroke-linejoin",
    "stroke-miterlimit", "stroke-dasharray", "stroke-dashoffset",
    "opacity", "fill-opacity", "stroke-opacity",
    # Geometry
    "d", "x", "y", "x1", "x2", "y1", "y2", "cx", "cy", "r", "rx", "ry",
    "points", "transform", "style",
    # Gradients
    "gradientUnits", "gradientTransform", "spreadMethod", "offset",
    "stop-color", "stop-opacity",
    # References
    "clip-path", "mask", "href", "xlink:href",
    # Accessibility
    "aria-hidden", "role", "focusable",
])

_ALLOWED_ELEMENTS_LOWER = frozenset(e.lower() for e in ALLOWED_ELEMENTS)
_ALLOWED_ATTRIBUTES_LOWER = frozenset(a.lower() for a in ALLOWED_ATTRIBUTES)

DANGEROUS_STYLE_PATTERNS = [
    re.compile(r"expression\s*\(", re.IGNORECASE),
    re.compile(r"javascript\s*:", re.IGNORECASE),
    re.compile(r"vbscript\s*:", re.IGNORECASE),
    re.compile(r"@import", re.IGNORECASE),
    re.compile(r"behavior\s*:", re.IGNORECASE),
    re.compile(r"-moz-binding", re.IGNORECASE),
]

_DOCTYPE_MARKER = b"<!doctype"
_ENTITY_MARKER = b"<!entity"
_JAVASCRIPT_HREF_RE = re.compile(r"^\s*javascript:", re.IGNORECASE)
_HREF_ATTRIBUTES = ("href", "xlink:href")
_NS_PREFIXES = {XLINK_NS: "xlink", XML_NS: "xml"}


def sanitize_svg(svg_content: bytes | str) -> str:
    """Sanitize untrusted SVG and return it as an XML string.

    Args:
        svg_content: Raw SVG bytes (``str`` is encoded as UTF-8).

    Returns:
        Sanitized SVG markup without an XML declaration.

    Raises:
        EmptySvgError: Input is empty.
        DoctypeNotAllowedError: Input contains ``<!DOCTYPE``.
        EntityNotAllowedError: Input contains ``<!ENTITY``.
        InvalidSvgError: Input is not well-formed XML.
        SanitizationFailedError: Nothing serializable is left.
    """
    if isinstance(svg_content, str):
        svg_content = svg_content.encode("utf-8")

    if not svg_content or not svg_content.strip():
        raise EmptySvgError()

    check_declarations(svg_content)
    svg_content = extract_svg_span(svg_content)

    try:
        root = parse_tree(svg_content)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise InvalidSvgError(
            "Invalid SVG file. Could not parse XML content.",
            details={"error": str(e)},
        ) from e

    _sanitize_tree(root)

    try:
        return etree.tostring(root, encoding="unicode")
    except (etree.SerialisationError, ValueError, TypeError) as e:
        raise SanitizationFailedError("Failed to sanitize SVG content.") from e


def check_declarations(svg_content: bytes) -> None:
    """Refuse DTD and entity declarations anywhere in the raw bytes.

    NUL bytes are dropped before searching, so the ASCII markers are also
    found in UTF-16 and UTF-32 input. ``parse_tree`` refuses any DTD that
    still reaches the parser.
    """
    lowered = svg_content.replace(b"\x00", b"").lower()
    if _DOCTYPE_MARKER in lowered:
        logger.warning("Rejected SVG with a DOCTYPE declaration")
        raise DoctypeNotAllowedError()
    if _ENTITY_MARKER in lowered:
        logger.warning("Rejected SVG with an ENTITY declaration")
        raise EntityNotAllowedError()


def extract_svg_span(svg_content: bytes) -> bytes:
    """Return the bytes from the first ``<svg`` to the last ``</svg>``.

    Input without such a span is returned unchanged.
    """
    lowered = svg_content.lower()
    start = lowered.find(b"<svg")
    end = lowered.rfind(b"</svg>")
    if start == -1 or end == -1 or end < start:
        return svg_content
    return svg_content[start : end + len(b"</svg>")]


def sanitize_style(style: str) -> str:
    """Return ``style`` unchanged, or ``""`` when any dangerous pattern matches.

    A ``url(javascript:...)`` fragment always matches the ``javascript:``
    pattern, so such styles are dropped whole rather than trimmed.
    """
    for pattern in DANGEROUS_STYLE_PATTERNS:
        if pattern.search(style):
            return ""
    return style


def clean_attribute(name: str, value: str) -> str | None:
    """Apply the attribute policy to one attribute.

    ``name`` is the qualified name as written (``xlink:href``, ``viewBox``).
    Returns the value to keep, or ``None`` to drop the attribute.
    """
    lowered = name.lower()
    if lowered.startswith("on"):
        return None
    if lowered not in _ALLOWED_ATTRIBUTES_LOWER and not lowered.startswith("data-"):
        return None
    if lowered in _HREF_ATTRIBUTES and _JAVASCRIPT_HREF_RE.match(value):
        return None
    if lowered == "style":
        value = sanitize_style(value)
        if not value.strip():
            return None
    return value


def clean_attributes(attributes: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Filter ``(name, value)`` pairs through ``clean_attribute``, keeping order."""
    cleaned = []
    for name, value in attributes:
        kept = clean_attribute(name, value)
        if kept is not None:
            cleaned.append((name, kept))
    return cleaned


def is_allowed_element(name: str) -> bool:
    return name.lower() in _ALLOWED_ELEMENTS_LOWER


def _sanitize_tree(root: etree._Element) -> None:
    scripts = [el for el in root.iter() if local_name(el.tag).lower() == "script"]
    _remove_all(scripts, "script")

    with_handlers = [el for el in root.iter() if _has_event_handler(el)]
    _remove_all(with_handlers, "event handler")

    disallowed = [el for el in root.iter() if not is_allowed_element(local_name(el.tag))]
    _remove_all(disallowed, "disallowed element")

    for element in root.iter():
        _sanitize_attributes(element)

    etree.cleanup_namespaces(root)


def _has_event_handler(element: etree._Element) -> bool:
    return any(local_name(key).lower().startswith("on") for key in element.attrib)


def _remove_all(elements: list[etree._Element], reason: str) -> None:
    for element in elements:
        parent = element.getparent()
        if parent is None:
            raise SanitizationFailedError(
                "Failed to sanitize SVG content.",
                details={"removed_root": local_name(element.tag), "reason": reason},
            )
        parent.remove(element)
    if elements:
        logger.debug("Removed %d element(s): %s", len(elements), reason)


def _qualified_name(key: str) -> str | None:
    if not key.startswith("{"):
        return key
    namespace, local = key[1:].split("}", 1)
    prefix = _NS_PREFIXES.get(namespace)
    if prefix is None:
        return None
    return f"{prefix}:{local}"


def _sanitize_attributes(element: etree._Element) -> None:
    to_remove = []
    to_update = {}
    for key, value in element.attrib.items():
        name = _qualified_name(key)
        kept = clean_attribute(name, value) if name is not None else None
        if kept is None:
            to_remove.append(key)
        elif kept != value:
            to_update[key] = kept

    for key in to_remove:
        del element.attrib[key]
    for key, value in to_update.items():
        element.set(key, value)
