"""wsbundle core: data model, diff engine and error taxonomy.

This package is intentionally standalone and must not import CLI/codecs/store
to avoid circular dependencies.
"""

from __future__ import annotations

from .diff import CollectionDiff, diff_collection
from .errors import (
    BundleError,
    BundleIOError,
    BundleNotFoundError,
    BundleParseError,
    BundleSerializationError,
    InvalidCollectionError,
    LookupCancelledError,
    LookupTimeoutError,
    NoItemsFoundError,
    SteamError,
)
from .model import U32_MAX, U64_MAX, Bundle, CollectionData, CollectionLink, ItemId, ParsedBundle, utc_now

__all__ = [
    "Bundle",
    "CollectionLink",
    "CollectionData",
    "ParsedBundle",
    "ItemId",
    "U32_MAX",
    "U64_MAX",
    "utc_now",
    "CollectionDiff",
    "diff_collection",
    "BundleError",
    "BundleIOError",
    "BundleParseError",
    "NoItemsFoundError",
    "BundleSerializationError",
    "BundleNotFoundError",
    "SteamError",
    "LookupTimeoutError",
    "LookupCancelledError",
    "InvalidCollectionError",
]
