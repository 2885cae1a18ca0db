"""icomoon-ingest: Safe ingestion of IcoMoon icon-font exports.

This library turns untrusted IcoMoon exports into an icon catalog and a
canonical SVG sprite:
- selection.json parsing (names, aliases, codepoints, tags, path data)
- SVG sprite parsing with DTDs and entities refused
- Whitelist SVG sanitization against stored XSS
- Deterministic sprite synthesis from path data

Example:
    >>> from icomoon_ingest import IconIngestor, UploadedAsset
    >>> ingestor = IconIngestor()
    >>> result = ingestor.ingest(UploadedAsset.from_path("selection.json"))
"""

from icomoon_ingest.api import IconIngestor
from icomoon_ingest.config import Config
from icomoon_ingest.exceptions import (
    DoctypeNotAllowedError,
    EntityNotAllowedError,
    FormatError,
    IconIngestError,
    SanitizationError,
    SecurityError,
    ValidationError,
)
from icomoon_ingest.models import (
    Icon,
    IconCatalog,
    IngestResult,
    PathSpec,
    SpriteDocument,
    UploadedAsset,
)
from icomoon_ingest.store import FileCatalogStore, MemoryCatalogStore

__version__ = "0.1.0"

__all__ = [
    # Main API
    "IconIngestor",
    "IngestResult",
    "Config",
    # Data model
    "Icon",
    "IconCatalog",
    "PathSpec",
    "SpriteDocument",
    "UploadedAsset",
    # Stores
    "MemoryCatalogStore",
    "FileCatalogStore",
    # Exceptions
    "IconIngestError",
    "ValidationError",
    "FormatError",
    "SecurityError",
    "SanitizationError",
    "DoctypeNotAllowedError",
    "EntityNotAllowedError",
    # Metadata
    "__version__",
]
