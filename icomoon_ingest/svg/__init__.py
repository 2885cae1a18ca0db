"""SVG handling for icomoon-ingest.

This subpackage provides:
- Hardened XML loading (lxml and defusedxml, no DTDs or entities)
- Whitelist sanitization of untrusted SVG
- Sprite synthesis from path data
"""

from icomoon_ingest.svg.sanitizer import clean_attributes, sanitize_style, sanitize_svg
from icomoon_ingest.svg.sprite import build_sprite, render_sprite

__all__ = [
    "sanitize_svg",
    "sanitize_style",
    "clean_attributes",
    "build_sprite",
    "render_sprite",
]
