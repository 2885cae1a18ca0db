"""Catalog persistence.

The pipeline only needs whole-catalog replace. Stores do no locking; a
caller that runs concurrent uploads must serialize writers itself.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from icomoon_ingest.exceptions import StoreError
from icomoon_ingest.models import IconCatalog

logger = logging.getLogger(__name__)


class CatalogStore(Protocol):
    def get_catalog(self) -> IconCatalog: ...

    def save_catalog(self, catalog: IconCatalog) -> None: ...

    def clear_catalog(self) -> None:
        """Remove the catalog and any stored sprite."""
        ...

    def get_sprite(self) -> str | None: ...

    def save_sprite(self, svg: str) -> None: ...

    def clear_sprite(self) -> None: ...


class MemoryCatalogStore:
    """Process-local store, mainly for tests and one-shot CLI runs."""

    def __init__(self, catalog: IconCatalog | None = None, sprite: str | None = None) -> None:
        self._catalog = catalog or IconCatalog()
        self._sprite = sprite

    def get_catalog(self) -> IconCatalog:
        return self._catalog

    def save_catalog(self, catalog: IconCatalog) -> None:
        self._catalog = catalog

    def clear_catalog(self) -> None:
        self._catalog = IconCatalog()
        self._sprite = None

    def get_sprite(self) -> str | None:
        return self._sprite

    def save_sprite(self, svg: str) -> None:
        self._sprite = svg

    def clear_sprite(self) -> None:
        self._sprite = None


class FileCatalogStore:
    """Directory-backed store: ``icons.json`` plus ``sprite.svg``.

    Each file is replaced atomically (temp file in the same directory, then
    ``os.replace``), so readers never see a half-written catalog.
    """

    CATALOG_FILE = "icons.json"
    SPRITE_FILE = "sprite.svg"

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    @property
    def catalog_path(self) -> Path:
        return self.directory / self.CATALOG_FILE

    @property
    def sprite_path(self) -> Path:
        return self.directory / self.SPRITE_FILE

    def get_catalog(self) -> IconCatalog:
        if not self.catalog_path.exists():
            return IconCatalog()
        try:
            data = json.loads(self.catalog_path.read_text(encoding="utf-8"))
            return IconCatalog.from_list(data.get("icons", []))
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            raise StoreError(
                f"Could not read catalog: {e}", details={"path": str(self.catalog_path)}
            ) from e

    def save_catalog(self, catalog: IconCatalog) -> None:
        payload = json.dumps({"version": 1, "icons": catalog.to_list()}, indent=2)
        self._write_atomic(self.catalog_path, payload)
        logger.info("Saved %d icons to %s", len(catalog), self.catalog_path)

    def clear_catalog(self) -> None:
        for path in (self.catalog_path, self.sprite_path):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise StoreError(f"Could not delete {path}: {e}") from e
        logger.info("Cleared catalog in %s", self.directory)

    def get_sprite(self) -> str | None:
        if not self.sprite_path.exists():
            return None
        try:
            return self.sprite_path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Could not read sprite: {e}") from e

    def save_sprite(self, svg: str) -> None:
        self._write_atomic(self.sprite_path, svg)
        logger.info("Saved sprite to %s", self.sprite_path)

    def clear_sprite(self) -> None:
        try:
            self.sprite_path.unlink(missing_ok=True)
        except OSError as e:
            raise StoreError(f"Could not delete {self.sprite_path}: {e}") from e

    def _write_atomic(self, path: Path, content: str) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreError(
                f"Failed to write {path.name}: {e}", details={"path": str(path)}
            ) from e
