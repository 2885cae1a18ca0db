"""Pytest configuration and shared fixtures for icomoon-ingest tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest

from icomoon_ingest.models import UploadedAsset


@pytest.fixture
def selection_data() -> dict[str, Any]:
    """Return a small selection.json document with two icons."""
    return {
        "IcoMoonType": "selection",
        "height": 1024,
        "preferences": {"fontPref": {"prefix": "icon-", "metadata": {"fontFamily": "icomoon"}}},
        "icons": [
            {
                "properties": {"name": "home,house", "code": 59648},
                "icon": {
                    "tags": ["home", "building"],
                    "paths": ["M1024 590.444l-512-397.426-512 397.428v-162.038l512-397.426z"],
                    "width": 1024,
                    "attrs": [{"fill": "#000"}],
                },
            },
            {
                "properties": {"name": "user", "code": 59649},
                "icon": {
                    "tags": ["person"],
                    "paths": ["M576 706.612v-52.78", "M0 0h1024v1024z"],
                    "width": 896,
                },
            },
        ],
    }


@pytest.fixture
def selection_bytes(selection_data: dict[str, Any]) -> bytes:
    """Return the selection document encoded as JSON bytes."""
    return json.dumps(selection_data).encode("utf-8")


@pytest.fixture
def sprite_bytes() -> bytes:
    """Return a clean IcoMoon-style SVG sprite."""
    return (
        b'<svg xmlns="http://www.w3.org/2000/svg" style="display:none;">\n'
        b'  <symbol id="icon-home" viewBox="0 0 1024 1024">'
        b'<path d="M1024 590l-512-397z"/></symbol>\n'
        b'  <symbol id="icon-star" viewBox="0 0 32 32">'
        b'<path d="M32 12l-11-1z" fill="#ff0"/></symbol>\n'
        b"</svg>"
    )


@pytest.fixture
def hostile_sprite_bytes() -> bytes:
    """Return a sprite carrying event handlers and foreign elements."""
    return (
        b'<svg xmlns="http://www.w3.org/2000/svg" '
        b'xmlns:xlink="http://www.w3.org/1999/xlink">'
        b'<symbol id="icon-user" viewBox="0 0 24 24">'
        b'<path onclick="steal()" d="M1 1"/>'
        b'<path d="M2 2" style="behavior: url(x.htc)"/>'
        b"</symbol>"
        b'<symbol id="icon-link" viewBox="0 0 24 24">'
        b'<use xlink:href="javascript:alert(1)"/>'
        b'<foreignObject><p xmlns="http://www.w3.org/1999/xhtml">hi</p></foreignObject>'
        b"</symbol>"
        b"</svg>"
    )


@pytest.fixture
def make_asset() -> Callable[..., UploadedAsset]:
    """Return a factory for in-memory uploads."""

    def _make(filename: str, content: bytes, size: int | None = None) -> UploadedAsset:
        return UploadedAsset(filename=filename, content=content, size=size)

    return _make


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "security: malicious-input tests for the sanitizer and parsers"
    )
