"""Data model shared by the parsers, the synthesizer and the store."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

# Prefix IcoMoon puts in front of every symbol id
ICON_ID_PREFIX = "icon-"
DEFAULT_GRID = 1024


def strip_icon_prefix(name: str) -> str:
    """Return ``name`` without a single leading ``icon-``."""
    if name.startswith(ICON_ID_PREFIX):
        return name[len(ICON_ID_PREFIX) :]
    return name


@dataclass(frozen=True)
class Icon:
    """A single catalog entry.

    ``css_class`` is serialized under the key ``class``.
    """

    name: str
    css_class: str
    unicode: str | None = None
    tags: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    view_box: str | None = None
    symbol_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "class": self.css_class,
            "unicode": self.unicode,
            "tags": list(self.tags),
            "aliases": list(self.aliases),
        }
        if self.view_box is not None:
            data["viewBox"] = self.view_box
        if self.symbol_id is not None:
            data["id"] = self.symbol_id
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Icon:
        return cls(
            name=str(data["name"]),
            css_class=str(data.get("class", ICON_ID_PREFIX + str(data["name"]))),
            unicode=data.get("unicode") or None,
            tags=tuple(str(t) for t in data.get("tags") or ()),
            aliases=tuple(str(a) for a in data.get("aliases") or ()),
            view_box=data.get("viewBox"),
            symbol_id=data.get("id"),
        )


class IconCatalog:
    """Ordered, immutable collection of icons in source order.

    Names are not required to be unique; ``duplicate_names`` reports repeats.
    """

    __slots__ = ("_icons",)

    def __init__(self, icons: Iterable[Icon] = ()) -> None:
        self._icons: tuple[Icon, ...] = tuple(icons)

    def __iter__(self) -> Iterator[Icon]:
        return iter(self._icons)

    def __len__(self) -> int:
        return len(self._icons)

    def __getitem__(self, index: int) -> Icon:
        return self._icons[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IconCatalog):
            return NotImplemented
        return self._icons == other._icons

    def __hash__(self) -> int:
        return hash(self._icons)

    def __repr__(self) -> str:
        return f"IconCatalog({len(self._icons)} icons)"

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None

    @property
    def is_empty(self) -> bool:
        return not self._icons

    def names(self) -> list[str]:
        return [icon.name for icon in self._icons]

    def find(self, name: str) -> Icon | None:
        """Look up an icon by ``home`` or ``icon-home``."""
        name = strip_icon_prefix(name)
        for icon in self._icons:
            if icon.name == name:
                return icon
        return None

    def duplicate_names(self) -> list[str]:
        counts = Counter(icon.name for icon in self._icons)
        return [name for name, count in counts.items() if count > 1]

    def to_list(self) -> list[dict[str, Any]]:
        return [icon.to_dict() for icon in self._icons]

    @classmethod
    def from_list(cls, items: Iterable[Mapping[str, Any]]) -> IconCatalog:
        return cls(Icon.from_dict(item) for item in items)


@dataclass(frozen=True)
class PathSpec:
    """Raw vector data for one icon, used only to synthesize a sprite."""

    paths: tuple[str, ...]
    width: float
    grid: float = DEFAULT_GRID
    attrs: tuple[Mapping[str, Any], ...] = ()

    def attrs_for(self, index: int) -> Mapping[str, Any]:
        if index < len(self.attrs):
            return self.attrs[index]
        return {}


@dataclass(frozen=True)
class SpritePath:
    d: str
    attrs: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class Symbol:
    id: str
    view_box: str
    paths: tuple[SpritePath, ...] = ()


@dataclass(frozen=True)
class SpriteDocument:
    """A root ``<svg>`` bundling icons as ``<symbol>`` elements."""

    symbols: tuple[Symbol, ...] = ()

    @property
    def symbol_ids(self) -> list[str]:
        return [symbol.id for symbol in self.symbols]

    def to_svg(self) -> str:
        from icomoon_ingest.svg.sprite import render_sprite

        return render_sprite(self)


@dataclass
class UploadedAsset:
    """Ephemeral upload: raw bytes plus what the client declared about them."""

    filename: str
    content: bytes
    size: int | None = None

    def __post_init__(self) -> None:
        if self.size is None:
            self.size = len(self.content)

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lstrip(".").lower()

    @classmethod
    def from_path(cls, path: str | Path) -> UploadedAsset:
        path = Path(path)
        content = path.read_bytes()
        return cls(filename=path.name, content=content, size=len(content))


@dataclass
class IngestResult:
    """Outcome of one pipeline call."""

    success: bool
    kind: str
    catalog: IconCatalog = field(default_factory=IconCatalog)
    sprite: str | None = None
    sprite_generated: bool = False
    catalog_replaced: bool = False
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: Exception | None = None

    @property
    def error_code(self) -> str | None:
        return getattr(self.error, "code", None) if self.error else None
