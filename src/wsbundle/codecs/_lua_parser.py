"""Internal scanning helpers for the Lua bundle codec.

Private module for tokenizing; public API is in `lua_bundle.py`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Iterator

from wsbundle.core.model import U64_MAX

# One match per line, anchored after leading whitespace. Either:
#   - an item literal: "123", '123', [[123]] or [==[123]==] (levels must match)
#   - a directive:     --# key [value...]
_BUNDLE_DATA_RE = re.compile(
    r"^[ \t]*(?:"
    r"(?P<open>\"|'|\[(?P<level>=*)\[)(?P<item>[0-9]+)(?:(?P=open)|\](?P=level)\])"
    r"|--#[ \t]*(?P<key>.+?)(?:[ \t]+(?P<value>.+)|$)"
    r")",
    flags=re.MULTILINE,
)


@dataclass(frozen=True)
class Directive:
    key: str
    value: str | None


@dataclass(frozen=True)
class ItemLiteral:
    body: str


Token = Directive | ItemLiteral


def _normalize_newlines(text: str) -> str:
    # `$` in MULTILINE mode only stops at "\n"; a stray "\r" would end up in values.
    return text.replace("\r\n", "\n").replace("\r", "\n")


def iter_tokens(text: str) -> Iterator[Token]:
    """Yield directive and item tokens in source order."""
    for m in _BUNDLE_DATA_RE.finditer(_normalize_newlines(text)):
        key = m.group("key")
        if key is not None:
            value = m.group("value")
            yield Directive(key=key.strip(), value=value.strip() if value is not None else None)
        else:
            yield ItemLiteral(body=m.group("item"))


def parse_u64(s: str) -> int | None:
    """Parse an unsigned 64-bit decimal id; None if not a valid u64."""
    s = s.strip()
    if not s or not s.isascii() or not s.isdigit():
        return None
    value = int(s)
    if value > U64_MAX:
        return None
    return value


def parse_rfc2822(s: str) -> datetime | None:
    """Parse an RFC-2822 timestamp into an aware UTC datetime; None on failure."""
    try:
        parsed = parsedate_to_datetime(s)
        if parsed is None:
            return None
        if parsed.tzinfo is None:
            # "-0000" means UTC with unknown local offset.
            parsed = parsed.replace(tzinfo=timezone.utc)
        # Near datetime.max/min the UTC shift can leave the representable range.
        return parsed.astimezone(timezone.utc)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None
