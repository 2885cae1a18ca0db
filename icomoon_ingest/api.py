"""High-level ingestion API.

Example:
    >>> from icomoon_ingest import IconIngestor, UploadedAsset
    >>> ingestor = IconIngestor()
    >>> result = ingestor.ingest(UploadedAsset.from_path("selection.json"))
    >>> result.success, len(result.catalog)
"""

from __future__ import annotations

import logging

from icomoon_ingest.config import Config
from icomoon_ingest.exceptions import ExtensionMismatchError, IconIngestError
from icomoon_ingest.models import IconCatalog, IngestResult, UploadedAsset
from icomoon_ingest.parsers.selection import (
    catalog_from_selection,
    extract_paths,
    load_selection,
)
from icomoon_ingest.parsers.sprite import merge_sprite_catalog, parse_svg_sprite
from icomoon_ingest.store import CatalogStore, MemoryCatalogStore
from icomoon_ingest.svg.sanitizer import sanitize_svg
from icomoon_ingest.svg.sprite import build_sprite
from icomoon_ingest.validation import precheck_svg, validate

logger = logging.getLogger(__name__)


class IconIngestor:
    """Runs uploads through validate → parse → sanitize/synthesize → store.

    Every public method returns an ``IngestResult``; library errors never
    escape. Nothing is written to the store unless all pure stages succeed, and
    a failed catalog write puts the previous sprite back.
    """

    def __init__(
        self,
        store: CatalogStore | None = None,
        config: Config | None = None,
    ) -> None:
        self.store = store if store is not None else MemoryCatalogStore()
        self.config = config or Config()

    def ingest(self, asset: UploadedAsset) -> IngestResult:
        """Dispatch on the file extension."""
        if asset.extension == "json":
            return self.ingest_selection(asset)
        if asset.extension == "svg":
            return self.ingest_sprite(asset)
        result = IngestResult(success=False, kind=asset.extension or "unknown")
        return self._fail(result, ExtensionMismatchError(asset.filename, "json or .svg"))

    def ingest_selection(self, asset: UploadedAsset) -> IngestResult:
        """Replace the catalog from a selection.json upload.

        A sprite is synthesized from the path data only when the store has
        none yet.
        """
        result = IngestResult(success=False, kind="json")
        try:
            validate(asset, "json", self.config.max_upload_size)
            data = load_selection(asset.content)
            catalog = catalog_from_selection(data, self.config.default_prefix)

            sprite = None
            if self.store.get_sprite() is None:
                specs = extract_paths(data, self.config.default_grid)
                if specs:
                    sprite = build_sprite(specs).to_svg()
                else:
                    result.warnings.append(
                        "No SVG paths found in selection.json; no sprite generated."
                    )

            self._warn_duplicates(catalog, result)
            self._commit(catalog, sprite)
        except IconIngestError as e:
            return self._fail(result, e)

        result.success = True
        result.catalog = catalog
        result.catalog_replaced = True
        result.sprite = sprite
        result.sprite_generated = sprite is not None
        logger.info(
            "Imported %d icons from %s%s",
            len(catalog),
            asset.filename,
            " (sprite generated)" if sprite is not None else "",
        )
        return result

    def ingest_sprite(self, asset: UploadedAsset) -> IngestResult:
        """Store a sanitized sprite; fill the catalog only if it is empty."""
        result = IngestResult(success=False, kind="svg")
        try:
            validate(asset, "svg", self.config.max_upload_size)
            precheck_svg(asset.content, reject_scripts=self.config.reject_scripts)
            sanitized = sanitize_svg(asset.content)
            incoming = parse_svg_sprite(sanitized.encode("utf-8"))

            existing = self.store.get_catalog()
            catalog = merge_sprite_catalog(existing, incoming)
            replaced = catalog is incoming

            if replaced:
                self._warn_duplicates(catalog, result)
            else:
                result.warnings.append(
                    f"Existing catalog of {len(existing)} icons kept; "
                    "sprite symbols were not merged."
                )
            self._commit(catalog if replaced else None, sanitized)
        except IconIngestError as e:
            return self._fail(result, e)

        result.success = True
        result.catalog = catalog
        result.catalog_replaced = replaced
        result.sprite = sanitized
        logger.info("Imported SVG sprite %s with %d icons", asset.filename, len(incoming))
        return result

    def clear(self) -> IngestResult:
        """Delete the catalog and the stored sprite."""
        result = IngestResult(success=False, kind="clear")
        try:
            self.store.clear_catalog()
        except IconIngestError as e:
            return self._fail(result, e)
        result.success = True
        result.catalog = IconCatalog()
        return result

    def _commit(self, catalog: IconCatalog | None, sprite: str | None) -> None:
        """Write the sprite, then the catalog.

        If the catalog write fails after the sprite was written, the previous
        sprite is put back so the store is left as it was. The original
        error is re-raised either way.
        """
        previous = self.store.get_sprite() if sprite is not None else None
        if sprite is not None:
            self.store.save_sprite(sprite)
        if catalog is None:
            return
        try:
            self.store.save_catalog(catalog)
        except IconIngestError:
            if sprite is not None:
                self._restore_sprite(previous)
            raise

    def _restore_sprite(self, previous: str | None) -> None:
        try:
            if previous is None:
                self.store.clear_sprite()
            else:
                self.store.save_sprite(previous)
        except IconIngestError as e:
            logger.error("Could not restore the previous sprite: %s", e)

    @staticmethod
    def _warn_duplicates(catalog: IconCatalog, result: IngestResult) -> None:
        duplicates = catalog.duplicate_names()
        if duplicates:
            result.warnings.append(f"Duplicate icon names: {', '.join(duplicates)}")

    @staticmethod
    def _fail(result: IngestResult, error: IconIngestError) -> IngestResult:
        logger.warning("Ingest failed (%s): %s", error.code, error)
        result.error = error
        result.errors.append(error.message)
        return result
