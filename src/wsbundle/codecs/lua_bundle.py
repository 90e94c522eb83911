"""Lua bundle codec (import + export).

A bundle file is an ordinary Lua script that Garry's Mod servers can run
as-is. Metadata rides along in `--#` comment directives and every workshop
item is a numeric string literal at the start of a line:

    -- generated by wsbundle
    --# bundle
    --# name My Server Pack
    --# collection 123456789
    --# updated Sun, 18 Oct 2026 12:00:00 +0000
    for _,w in ipairs({

    "104815552", -- Some Addon
    ...

    }) do resource.AddWorkshop(w) end

Import is tolerant: unknown directives, bad values, non-numeric literals and
unparseable timestamps are skipped. The only fatal condition is a text with no
items at all.

Only the first `--# bundle` marker is honored; a second marker ends the scan,
so anything after it (directives and items alike) is ignored.

Export is deterministic and renders from the in-memory bundle, not from any
original text. Parse -> export is *not* byte-stable; it preserves the name,
collection id and the multiset of items (owned + collection-included).
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Mapping

from wsbundle.codecs._lua_parser import Directive, ItemLiteral, iter_tokens, parse_rfc2822, parse_u64
from wsbundle.codecs._lua_writer import LOOP_CLOSE, LOOP_OPEN, _format_collection_block, _format_header, _format_items
from wsbundle.core.errors import BundleIOError, NoItemsFoundError
from wsbundle.core.model import Bundle, ItemId, ParsedBundle, utc_now


# ----------------------------
# Public API
# ----------------------------


def parse_bundle_text(text: str, *, now: datetime | None = None) -> ParsedBundle:
    """Scan bundle text into a `ParsedBundle`.

    Args:
        text: The raw Lua source.
        now: Default `updated` timestamp when no valid `--# updated` directive
            is present (defaults to the current UTC time).

    Raises:
        NoItemsFoundError: if no numeric item literal was found.
    """
    if not isinstance(text, str):
        raise TypeError(f"parse_bundle_text: expected str, got {type(text).__name__}")

    bundle_start = False
    name = ""
    collection_id: int | None = None
    updated = now if now is not None else utc_now()
    items: list[ItemId] = []

    for token in iter_tokens(text):
        if isinstance(token, ItemLiteral):
            item = parse_u64(token.body)
            if item is not None:
                items.append(item)
            continue

        assert isinstance(token, Directive)
        if token.key == "bundle":
            if bundle_start:
                break
            bundle_start = True
            continue

        if token.value is None:
            continue

        if token.key == "name":
            name = token.value
        elif token.key == "collection":
            parsed_id = parse_u64(token.value)
            if parsed_id is not None:
                collection_id = parsed_id
        elif token.key == "updated":
            parsed_ts = parse_rfc2822(token.value)
            if parsed_ts is not None:
                updated = parsed_ts

    if not items:
        raise NoItemsFoundError()

    return ParsedBundle(name=name, updated=updated, items=tuple(items), collection_id=collection_id)


def read_bundle(path: str | Path, *, now: datetime | None = None) -> ParsedBundle:
    """Read a Lua bundle file from disk and parse it.

    Raises:
        BundleIOError: if the file cannot be read as UTF-8 text.
        NoItemsFoundError: see `parse_bundle_text`.
    """
    p = Path(path)
    if not p.is_file():
        raise BundleIOError(f"not a file: {p}", context={"path": str(p)})
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise BundleIOError(f"cannot read bundle file: {e}", context={"path": str(p)}) from e
    return parse_bundle_text(text, now=now)


def format_bundle(
    bundle: Bundle,
    *,
    item_names: Mapping[ItemId, str] | None = None,
    collection_title: str | None = None,
) -> str:
    """Render a bundle as Lua source.

    Args:
        bundle: The bundle to render.
        item_names: Optional id -> display name map; names become trailing
            `-- name` comments. Ids without a name get no comment.
        collection_title: Optional title printed above the collection block.
    """
    names: Mapping[ItemId, str] = item_names or {}

    lines = _format_header(bundle)
    lines.append(LOOP_OPEN)
    lines.append("")
    lines.extend(_format_items(bundle.items, names))
    lines.extend(_format_collection_block(bundle, names, collection_title))
    lines.append("")
    lines.append(LOOP_CLOSE)
    return "\n".join(lines) + "\n"


def write_bundle(
    path: str | Path,
    bundle: Bundle,
    *,
    item_names: Mapping[ItemId, str] | None = None,
    collection_title: str | None = None,
) -> Path:
    """Write `format_bundle(...)` output to `path` and return the path."""
    out_text = format_bundle(bundle, item_names=item_names, collection_title=collection_title)
    out_path = Path(path)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" prevents newline translation on write.
        with out_path.open("w", encoding="utf-8", newline="") as f:
            f.write(out_text)
    except OSError as e:
        raise BundleIOError(f"cannot write bundle file: {e}", context={"path": str(out_path)}) from e
    return out_path
