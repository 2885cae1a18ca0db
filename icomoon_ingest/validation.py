"""Upload gatekeeping.

Runs before any parser sees the bytes, so the size ceiling bounds the worst
case cost of everything downstream.
"""

from __future__ import annotations

import logging
import re

from icomoon_ingest.config import MAX_UPLOAD_SIZE
from icomoon_ingest.exceptions import (
    EmptyFileError,
    ExtensionMismatchError,
    FileTooLargeError,
    MimeMismatchError,
    NotSvgError,
    ScriptNotAllowedError,
)
from icomoon_ingest.models import UploadedAsset

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES: dict[str, frozenset[str]] = {
    "json": frozenset({"application/json", "text/plain"}),
    "svg": frozenset({"image/svg+xml", "text/plain", "application/octet-stream"}),
}

# Bytes inspected for binary markers
_SNIFF_WINDOW = 8192

_SVG_TAG_RE = re.compile(r"<svg[\s>/]")
_HTML_RE = re.compile(r"^<(?:!doctype\s+html|html[\s>])")
_SVG_START_BYTES_RE = re.compile(rb"<svg[^>]*>", re.IGNORECASE)


def sniff_mime(content: bytes) -> str:
    """Guess a MIME type from content bytes, ignoring any declared header."""
    if not content:
        return "application/x-empty"
    if b"\x00" in content[:_SNIFF_WINDOW]:
        return "application/octet-stream"

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return "application/octet-stream"

    stripped = text.strip()
    if not stripped:
        return "text/plain"

    if stripped[0] in "{[" and stripped[-1] in "}]":
        return "application/json"

    lowered = stripped.lower()
    if lowered.startswith("<"):
        if _HTML_RE.match(lowered):
            return "text/html"
        if _SVG_TAG_RE.search(lowered):
            return "image/svg+xml"
        return "text/xml"

    return "text/plain"


def validate(
    asset: UploadedAsset, expected_kind: str, max_size: int = MAX_UPLOAD_SIZE
) -> None:
    """Check an upload against the rules for ``expected_kind``.

    Rules run in order: size, emptiness, extension, sniffed MIME type.

    Raises:
        FileTooLargeError, EmptyFileError, ExtensionMismatchError,
        MimeMismatchError
    """
    if expected_kind not in ALLOWED_MIME_TYPES:
        raise ValueError(f"Unknown upload kind: {expected_kind!r}")

    size = max(asset.size or 0, len(asset.content))
    if size > max_size:
        logger.warning("Rejected %s: %d bytes exceeds %d", asset.filename, size, max_size)
        raise FileTooLargeError(size, max_size)

    if not asset.content:
        raise EmptyFileError(asset.filename)

    if asset.extension != expected_kind:
        raise ExtensionMismatchError(asset.filename, expected_kind)

    mime_type = sniff_mime(asset.content)
    if mime_type not in ALLOWED_MIME_TYPES[expected_kind]:
        logger.warning("Rejected %s: sniffed %s", asset.filename, mime_type)
        raise MimeMismatchError(mime_type, expected_kind)

    logger.debug("Accepted %s (%d bytes, %s)", asset.filename, size, mime_type)


def precheck_svg(content: bytes, reject_scripts: bool = True) -> None:
    """Content gate for sprite uploads, run before sanitizing.

    Raises:
        NotSvgError: No ``<svg`` start tag in the bytes.
        ScriptNotAllowedError: A ``<script`` substring is present.
    """
    if not _SVG_START_BYTES_RE.search(content):
        raise NotSvgError()
    if reject_scripts and b"<script" in content.lower():
        logger.warning("Rejected SVG containing a script tag")
        raise ScriptNotAllowedError()
