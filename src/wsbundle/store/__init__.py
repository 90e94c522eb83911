"""Bundle persistence (one msgpack record per bundle on disk)."""

from __future__ import annotations

from .bundles import BundleStore
from .codec import decode_bundle, encode_bundle

__all__ = [
    "BundleStore",
    "encode_bundle",
    "decode_bundle",
]
