"""Codecs for importing/exporting bundle text formats.

Only the Lua `resource.AddWorkshop` format is supported.
"""

from __future__ import annotations

from .lua_bundle import format_bundle, parse_bundle_text, read_bundle, write_bundle

__all__ = [
    "parse_bundle_text",
    "read_bundle",
    "format_bundle",
    "write_bundle",
]
