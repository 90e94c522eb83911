"""Offline `WorkshopClient` backed by a JSON catalog.

Catalog schema:
{
  "<item id>": {
    "title": "My Collection",
    "file_type": "Collection",          # optional, default "Community"
    "preview_url": "https://...",       # optional
    "children": ["123", "456"]          # optional
  },
  ...
}

Ids may be given as JSON strings or integers. Unknown ids resolve to a
`FileNotFound` failure.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from wsbundle.core.model import U64_MAX, ItemId

from .client import QueryCallback, WorkshopFailure, WorkshopItem


def _require_dict(value: Any, *, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{where}: expected JSON object, got {type(value).__name__}")
    return value


def _parse_id(value: Any, *, where: str) -> ItemId:
    if isinstance(value, bool):
        raise ValueError(f"{where}: expected an id, got bool")
    s = str(value).strip()
    if not s or not s.isascii() or not s.isdigit():
        raise ValueError(f"{where}: expected a numeric id, got {value!r}")
    item_id = int(s)
    if item_id > U64_MAX:
        raise ValueError(f"{where}: {item_id} is out of range for an unsigned 64-bit id")
    return item_id


class CatalogWorkshop:
    def __init__(self, items: Mapping[ItemId, WorkshopItem]) -> None:
        self._items = dict(items)

    @classmethod
    def from_json_dict(cls, data: Any) -> "CatalogWorkshop":
        obj = _require_dict(data, where="catalog")
        items: dict[ItemId, WorkshopItem] = {}
        for raw_id, raw_entry in obj.items():
            item_id = _parse_id(raw_id, where="catalog key")
            entry = _require_dict(raw_entry, where=f"catalog[{raw_id}]")
            children = entry.get("children")
            if children is not None:
                if not isinstance(children, list):
                    raise ValueError(f"catalog[{raw_id}].children: expected JSON array")
                children = tuple(_parse_id(c, where=f"catalog[{raw_id}].children[*]") for c in children)
            items[item_id] = WorkshopItem(
                id=item_id,
                title=str(entry.get("title", "")),
                file_type=str(entry.get("file_type", "Community")),
                preview_url=entry.get("preview_url"),
                children=children,
            )
        return cls(items)

    @classmethod
    def from_path(cls, path: str | Path) -> "CatalogWorkshop":
        p = Path(path)
        with p.open("r", encoding="utf-8") as f:
            return cls.from_json_dict(json.load(f))

    def query_item(
        self,
        item_id: ItemId,
        *,
        include_children: bool,
        max_cache_age: int,
        callback: QueryCallback,
    ) -> None:
        item = self._items.get(item_id)
        if item is None:
            callback(WorkshopFailure("FileNotFound"))
            return
        if not include_children and item.children is not None:
            item = WorkshopItem(
                id=item.id,
                title=item.title,
                file_type=item.file_type,
                preview_url=item.preview_url,
            )
        callback(item)
