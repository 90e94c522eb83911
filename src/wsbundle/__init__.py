"""wsbundle: workshop bundle management.

Parses Lua `resource.AddWorkshop` bundle scripts, reconciles them against
workshop collections, persists them and exports them back to Lua.
"""

from __future__ import annotations

from wsbundle.codecs import format_bundle, parse_bundle_text
from wsbundle.core import Bundle, BundleError, CollectionLink
from wsbundle.service import BundleService
from wsbundle.store import BundleStore

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Bundle",
    "CollectionLink",
    "BundleError",
    "BundleService",
    "BundleStore",
    "parse_bundle_text",
    "format_bundle",
]
