"""Core data model for workshop bundles.

- Standalone frozen dataclasses with stable fields and no circular imports.
- Identity (`Bundle.__eq__` / `__hash__`) is the bundle id alone.
- Storage order is `Bundle.order_key` (updated, then id); it is never used
  for identity lookups.

This module must not import codecs/store/remote/cli.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1

# Keep as a plain assignment (no typing.TypeAlias).
ItemId = int


def _require_uint(value: Any, *, bits: int, where: str) -> int:
    # bool is a subclass of int; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{where}: expected int, got {type(value).__name__}")
    limit = U32_MAX if bits == 32 else U64_MAX
    if value < 0 or value > limit:
        raise ValueError(f"{where}: {value} is out of range for an unsigned {bits}-bit id")
    return value


def _item_tuple(values: Iterable[Any], *, where: str) -> tuple[ItemId, ...]:
    if isinstance(values, (str, bytes)):
        raise TypeError(f"{where}: expected a sequence of ids, got {type(values).__name__}")
    return tuple(_require_uint(v, bits=64, where=f"{where}[{i}]") for i, v in enumerate(values))


def _require_utc(value: Any, *, where: str) -> datetime:
    if not isinstance(value, datetime):
        raise TypeError(f"{where}: expected datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        raise ValueError(f"{where}: naive datetimes are not accepted")
    return value.astimezone(timezone.utc)


def _norm_name(value: Any, *, where: str) -> str:
    """Normalize a display name to what a `--# name` line can carry: one line, stripped."""
    if not isinstance(value, str):
        raise TypeError(f"{where}: expected str, got {type(value).__name__}")
    return " ".join(value.splitlines()).strip()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CollectionLink:
    """Link from a bundle to a remote workshop collection.

    `include` holds collection members that were also listed in the bundle;
    `exclude` holds members the bundle did not list. Both follow the order the
    remote returned them in.
    """

    id: ItemId
    include: tuple[ItemId, ...] = ()
    exclude: tuple[ItemId, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _require_uint(self.id, bits=64, where="CollectionLink.id"))
        object.__setattr__(self, "include", _item_tuple(self.include, where="CollectionLink.include"))
        object.__setattr__(self, "exclude", _item_tuple(self.exclude, where="CollectionLink.exclude"))


@dataclass(frozen=True, eq=False)
class Bundle:
    """A named, persisted set of workshop item ids.

    Two bundles are equal iff their ids match. Instances are immutable; an
    update is a full replacement (see `BundleStore.upsert`).
    """

    id: int
    name: str
    updated: datetime
    collection: CollectionLink | None = None
    items: tuple[ItemId, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _require_uint(self.id, bits=32, where="Bundle.id"))
        object.__setattr__(self, "name", _norm_name(self.name, where="Bundle.name"))
        object.__setattr__(self, "updated", _require_utc(self.updated, where="Bundle.updated"))
        if self.collection is not None and not isinstance(self.collection, CollectionLink):
            raise TypeError(f"Bundle.collection: expected CollectionLink, got {type(self.collection).__name__}")
        object.__setattr__(self, "items", _item_tuple(self.items, where="Bundle.items"))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bundle):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def order_key(self) -> tuple[datetime, int]:
        return (self.updated, self.id)

    def all_items(self) -> tuple[ItemId, ...]:
        """Owned items followed by collection-confirmed items."""
        if self.collection is None:
            return self.items
        return self.items + self.collection.include


@dataclass(frozen=True)
class ParsedBundle:
    """Result of scanning bundle text, before the store assigns an id."""

    name: str
    updated: datetime
    items: tuple[ItemId, ...]
    collection_id: ItemId | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _norm_name(self.name, where="ParsedBundle.name"))
        object.__setattr__(self, "updated", _require_utc(self.updated, where="ParsedBundle.updated"))
        object.__setattr__(self, "items", _item_tuple(self.items, where="ParsedBundle.items"))
        if self.collection_id is not None:
            _require_uint(self.collection_id, bits=64, where="ParsedBundle.collection_id")


@dataclass(frozen=True)
class CollectionData:
    """What a collection check reports back about a remote collection."""

    id: ItemId
    title: str
    preview_url: str | None = None
    items: tuple[ItemId, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", _item_tuple(self.items, where="CollectionData.items"))

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "preview_url": self.preview_url,
            "items": [str(x) for x in self.items],
        }
