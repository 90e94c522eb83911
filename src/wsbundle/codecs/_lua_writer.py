"""Internal writer helpers for the Lua bundle codec.

This is a private module; public API is in `lua_bundle.py`.
"""

from __future__ import annotations

from datetime import datetime
from email.utils import format_datetime
from typing import Iterable, Mapping

from wsbundle.config import DIRECTIVE_MARKER, EXPORT_HEADER, STEAM_FILEDETAILS_URL
from wsbundle.core.model import Bundle, ItemId

LOOP_OPEN = "for _,w in ipairs({"
LOOP_CLOSE = "}) do resource.AddWorkshop(w) end"


def _fmt_rfc2822(dt: datetime) -> str:
    # Aware UTC datetimes render with a "+0000" offset.
    return format_datetime(dt)


def _one_line(s: str) -> str:
    # A newline inside a directive value or comment would break the line grammar.
    return " ".join(s.splitlines())


def _directive(key: str, value: str | None = None) -> str:
    if value is None:
        return f"{DIRECTIVE_MARKER} {key}"
    return f"{DIRECTIVE_MARKER} {key} {_one_line(value)}"


def _format_header(bundle: Bundle) -> list[str]:
    lines: list[str] = list(EXPORT_HEADER)
    lines.append(_directive("bundle"))
    lines.append(_directive("name", bundle.name))
    if bundle.collection is not None:
        lines.append(_directive("collection", str(bundle.collection.id)))
    lines.append(_directive("updated", _fmt_rfc2822(bundle.updated)))
    return lines


def _format_items(items: Iterable[ItemId], item_names: Mapping[ItemId, str]) -> list[str]:
    lines: list[str] = []
    for item in items:
        line = f'"{item}",'
        name = item_names.get(item)
        if name:
            line += f" -- {_one_line(name)}"
        lines.append(line)
    return lines


def _format_collection_block(
    bundle: Bundle,
    item_names: Mapping[ItemId, str],
    collection_title: str | None,
) -> list[str]:
    collection = bundle.collection
    if collection is None:
        return []
    lines = ["", "-- Collection"]
    if collection_title:
        lines.append(f"-- {_one_line(collection_title)}")
    lines.append("-- " + STEAM_FILEDETAILS_URL.format(id=collection.id))
    lines.extend(_format_items(collection.include, item_names))
    return lines
