"""Integration tests for IconIngestor.

Each test drives the full validate → parse → sanitize/synthesize → store
sequence through the public API and checks both the result object and what
ended up in the store.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from icomoon_ingest import (
    Config,
    FileCatalogStore,
    Icon,
    IconCatalog,
    IconIngestor,
    MemoryCatalogStore,
    UploadedAsset,
)
from icomoon_ingest.exceptions import StoreError


@pytest.fixture
def ingestor() -> IconIngestor:
    return IconIngestor(MemoryCatalogStore())


class FailingStore(MemoryCatalogStore):
    """Memory store whose catalog or sprite writes raise StoreError."""

    def __init__(self, fail_on: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.fail_on = fail_on

    def save_catalog(self, catalog: IconCatalog) -> None:
        if self.fail_on == "catalog":
            raise StoreError("disk full")
        super().save_catalog(catalog)

    def save_sprite(self, svg: str) -> None:
        if self.fail_on == "sprite":
            raise StoreError("disk full")
        super().save_sprite(svg)


class TestSelectionUpload:
    """selection.json uploads."""

    def test_populates_catalog_and_sprite(
        self,
        ingestor: IconIngestor,
        make_asset: Callable[..., UploadedAsset],
        selection_bytes: bytes,
    ) -> None:
        """An empty store gets the catalog and a synthesized sprite."""
        result = ingestor.ingest(make_asset("selection.json", selection_bytes))

        assert result.success, result.errors
        assert result.kind == "json"
        assert result.catalog_replaced
        assert result.sprite_generated
        assert ingestor.store.get_catalog().names() == ["home", "user"]
        sprite = ingestor.store.get_sprite()
        assert sprite is not None
        assert '<symbol id="icon-home" viewBox="0 0 1024 1024">' in sprite
        assert result.sprite == sprite

    def test_existing_sprite_not_regenerated(
        self, make_asset: Callable[..., UploadedAsset], selection_bytes: bytes
    ) -> None:
        """A stored sprite is left alone; only the catalog is replaced."""
        store = MemoryCatalogStore(
            catalog=IconCatalog([Icon(name="old", css_class="icon-old")]), sprite="<svg/>"
        )
        result = IconIngestor(store).ingest(make_asset("selection.json", selection_bytes))

        assert result.success
        assert not result.sprite_generated
        assert result.sprite is None
        assert store.get_sprite() == "<svg/>"
        assert store.get_catalog().names() == ["home", "user"]

    def test_no_paths_warns(
        self, ingestor: IconIngestor, make_asset: Callable[..., UploadedAsset]
    ) -> None:
        """Without path data the catalog is stored and a warning is returned."""
        raw = json.dumps({"icons": [{"properties": {"name": "a"}}]}).encode()
        result = ingestor.ingest(make_asset("selection.json", raw))

        assert result.success
        assert not result.sprite_generated
        assert ingestor.store.get_sprite() is None
        assert result.warnings == ["No SVG paths found in selection.json; no sprite generated."]

    def test_duplicate_names_warn(
        self, ingestor: IconIngestor, make_asset: Callable[..., UploadedAsset]
    ) -> None:
        """Duplicate names are kept and reported."""
        raw = json.dumps({
            "icons": [
                {"properties": {"name": "a"}, "icon": {"paths": ["M0 0"]}},
                {"properties": {"name": "a"}, "icon": {"paths": ["M1 1"]}},
            ]
        }).encode()
        result = ingestor.ingest(make_asset("selection.json", raw))

        assert result.success
        assert result.catalog.names() == ["a", "a"]
        assert "Duplicate icon names: a" in result.warnings

    def test_config_prefix_used_as_fallback(
        self, make_asset: Callable[..., UploadedAsset], selection_data: dict[str, Any]
    ) -> None:
        """default_prefix applies when the manifest has no preferences."""
        del selection_data["preferences"]
        ingestor = IconIngestor(config=Config(default_prefix="im-"))
        result = ingestor.ingest(make_asset("selection.json", json.dumps(selection_data).encode()))
        assert result.catalog[0].css_class == "im-home"

    def test_malformed_json(
        self, ingestor: IconIngestor, make_asset: Callable[..., UploadedAsset]
    ) -> None:
        """Broken JSON fails without touching the store."""
        result = ingestor.ingest(make_asset("selection.json", b'{"icons": ['))

        assert not result.success
        assert result.error_code == "json_parse_error"
        assert result.errors
        assert ingestor.store.get_catalog().is_empty
        assert ingestor.store.get_sprite() is None

    def test_oversized(self, make_asset: Callable[..., UploadedAsset]) -> None:
        """The configured ceiling is enforced."""
        ingestor = IconIngestor(config=Config(max_upload_size=16))
        result = ingestor.ingest(make_asset("selection.json", b'{"icons": [], "height": 1024}'))
        assert result.error_code == "file_too_large"


class TestSpriteUpload:
    """SVG sprite uploads."""

    def test_fills_empty_catalog(
        self,
        ingestor: IconIngestor,
        make_asset: Callable[..., UploadedAsset],
        sprite_bytes: bytes,
    ) -> None:
        """Symbols become the catalog when none exists."""
        result = ingestor.ingest(make_asset("symbol-defs.svg", sprite_bytes))

        assert result.success, result.errors
        assert result.kind == "svg"
        assert result.catalog_replaced
        assert ingestor.store.get_catalog().names() == ["home", "star"]
        assert ingestor.store.get_sprite() == result.sprite
        assert "icon-star" in result.sprite

    def test_keeps_existing_catalog(
        self, make_asset: Callable[..., UploadedAsset], sprite_bytes: bytes
    ) -> None:
        """An existing catalog survives; the sprite is still stored."""
        existing = IconCatalog([Icon(name="x", css_class="icon-x")])
        store = MemoryCatalogStore(catalog=existing)
        result = IconIngestor(store).ingest(make_asset("symbol-defs.svg", sprite_bytes))

        assert result.success
        assert not result.catalog_replaced
        assert result.catalog is existing
        assert store.get_catalog() is existing
        assert store.get_sprite() is not None
        assert result.warnings == [
            "Existing catalog of 1 icons kept; sprite symbols were not merged."
        ]

    @pytest.mark.security
    def test_hostile_sprite_is_sanitized(
        self,
        ingestor: IconIngestor,
        make_asset: Callable[..., UploadedAsset],
        hostile_sprite_bytes: bytes,
    ) -> None:
        """Handlers, javascript links, bad styles and foreign elements are stripped."""
        result = ingestor.ingest(make_asset("icons.svg", hostile_sprite_bytes))

        assert result.success, result.errors
        stored = ingestor.store.get_sprite()
        assert stored is not None
        for needle in ("onclick", "javascript", "behavior", "foreignObject", "xhtml"):
            assert needle not in stored
        assert 'd="M2 2"' in stored
        assert ingestor.store.get_catalog().names() == ["user", "link"]

    @pytest.mark.security
    def test_script_rejected(
        self, ingestor: IconIngestor, make_asset: Callable[..., UploadedAsset]
    ) -> None:
        """By default a sprite containing <script is refused."""
        raw = b'<svg><symbol id="icon-a"><script>alert(1)</script></symbol></svg>'
        result = ingestor.ingest(make_asset("icons.svg", raw))

        assert not result.success
        assert result.error_code == "script_not_allowed"
        assert ingestor.store.get_sprite() is None

    @pytest.mark.security
    def test_script_stripped_when_allowed(self, make_asset: Callable[..., UploadedAsset]) -> None:
        """With reject_scripts off, the sanitizer removes the script instead."""
        ingestor = IconIngestor(config=Config(reject_scripts=False))
        raw = b'<svg><symbol id="icon-a"><script>alert(1)</script></symbol></svg>'
        result = ingestor.ingest(make_asset("icons.svg", raw))

        assert result.success, result.errors
        assert "script" not in result.sprite
        assert result.catalog.names() == ["a"]

    @pytest.mark.security
    def test_doctype_leaves_store_untouched(
        self, make_asset: Callable[..., UploadedAsset], sprite_bytes: bytes
    ) -> None:
        """A rejected upload changes nothing."""
        store = MemoryCatalogStore(sprite="<svg/>")
        raw = b'<!DOCTYPE svg [<!ENTITY x "boom">]><svg><symbol id="icon-a">&x;</symbol></svg>'
        result = IconIngestor(store).ingest(make_asset("icons.svg", raw))

        assert not result.success
        assert result.error_code == "doctype_not_allowed"
        assert store.get_sprite() == "<svg/>"
        assert store.get_catalog().is_empty

    def test_not_svg(self, ingestor: IconIngestor, make_asset: Callable[..., UploadedAsset]) -> None:
        """Text without an svg tag fails the content gate."""
        result = ingestor.ingest(make_asset("icons.svg", b"just some text"))
        assert result.error_code == "not_svg"


class TestDispatchAndClear:
    """Extension dispatch and clearing."""

    def test_unsupported_extension(
        self, ingestor: IconIngestor, make_asset: Callable[..., UploadedAsset]
    ) -> None:
        """Other extensions fail with invalid_type."""
        result = ingestor.ingest(make_asset("icons.txt", b"{}"))
        assert not result.success
        assert result.kind == "txt"
        assert result.error_code == "invalid_type"

    def test_clear(
        self,
        ingestor: IconIngestor,
        make_asset: Callable[..., UploadedAsset],
        selection_bytes: bytes,
    ) -> None:
        """clear() removes catalog and sprite."""
        ingestor.ingest(make_asset("selection.json", selection_bytes))
        result = ingestor.clear()

        assert result.success
        assert result.kind == "clear"
        assert ingestor.store.get_catalog().is_empty
        assert ingestor.store.get_sprite() is None

    def test_file_store_end_to_end(
        self,
        tmp_path: Path,
        make_asset: Callable[..., UploadedAsset],
        selection_bytes: bytes,
        sprite_bytes: bytes,
    ) -> None:
        """Selection then sprite: catalog from JSON, sprite synthesized once."""
        store = FileCatalogStore(tmp_path)
        ingestor = IconIngestor(store)

        first = ingestor.ingest(make_asset("selection.json", selection_bytes))
        assert first.sprite_generated

        second = ingestor.ingest(make_asset("symbol-defs.svg", sprite_bytes))
        assert second.success
        assert not second.catalog_replaced
        assert FileCatalogStore(tmp_path).get_catalog().names() == ["home", "user"]
        assert "icon-star" in store.sprite_path.read_text(encoding="utf-8")


class TestStoreFailures:
    """A failed write leaves the store as it was before the upload."""

    def test_selection_sprite_write_fails(
        self, make_asset: Callable[..., UploadedAsset], selection_bytes: bytes
    ) -> None:
        """The catalog is not replaced when the synthesized sprite cannot be written."""
        existing = IconCatalog([Icon(name="x", css_class="icon-x")])
        store = FailingStore("sprite", catalog=existing)
        result = IconIngestor(store).ingest(make_asset("selection.json", selection_bytes))

        assert not result.success
        assert result.error_code == "store_error"
        assert store.get_catalog() is existing
        assert store.get_sprite() is None

    def test_selection_catalog_write_fails(
        self, make_asset: Callable[..., UploadedAsset], selection_bytes: bytes
    ) -> None:
        """The synthesized sprite is removed again when the catalog write fails."""
        store = FailingStore("catalog")
        result = IconIngestor(store).ingest(make_asset("selection.json", selection_bytes))

        assert not result.success
        assert result.error_code == "store_error"
        assert store.get_catalog().is_empty
        assert store.get_sprite() is None

    def test_sprite_upload_catalog_write_fails(
        self, make_asset: Callable[..., UploadedAsset], sprite_bytes: bytes
    ) -> None:
        """The previous sprite is put back when the catalog write fails."""
        store = FailingStore("catalog", sprite="<svg/>")
        result = IconIngestor(store).ingest(make_asset("symbol-defs.svg", sprite_bytes))

        assert not result.success
        assert result.error_code == "store_error"
        assert store.get_catalog().is_empty
        assert store.get_sprite() == "<svg/>"

    def test_sprite_upload_sprite_write_fails(
        self, make_asset: Callable[..., UploadedAsset], sprite_bytes: bytes
    ) -> None:
        store = FailingStore("sprite")
        result = IconIngestor(store).ingest(make_asset("symbol-defs.svg", sprite_bytes))

        assert not result.success
        assert result.error_code == "store_error"
        assert store.get_catalog().is_empty
        assert store.get_sprite() is None

    def test_file_store_rollback(
        self,
        tmp_path: Path,
        make_asset: Callable[..., UploadedAsset],
        selection_bytes: bytes,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """On disk, a failed catalog write leaves no new sprite.svg behind."""
        store = FileCatalogStore(tmp_path)

        def fail(catalog: IconCatalog) -> None:
            raise StoreError("disk full")

        monkeypatch.setattr(store, "save_catalog", fail)
        result = IconIngestor(store).ingest(make_asset("selection.json", selection_bytes))

        assert result.error_code == "store_error"
        assert not store.sprite_path.exists()
        assert not store.catalog_path.exists()
