"""Error taxonomy for bundle operations.

Every failure surfaced to a caller is a `BundleError` carrying a stable
machine-readable `code` (the frontend matches on these strings) plus optional
context for logs.

Parse-level anomalies (bad directive values, non-numeric item bodies, broken
timestamps) never raise; only an import that yields zero items does.
"""

from __future__ import annotations

from typing import Any


class BundleError(Exception):
    """Base class for all wsbundle errors."""

    code: str = "ERR_BUNDLE"

    def __init__(self, message: str | None = None, context: dict[str, Any] | None = None) -> None:
        self.message = message or self.code
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


class BundleIOError(BundleError):
    """Storage or filesystem failure."""

    code = "ERR_IO_ERROR"


class BundleParseError(BundleError):
    """Structural failure in bundle text. Reserved; the scanner is tolerant."""

    code = "ERR_BUNDLE_PARSE_ERROR"


class NoItemsFoundError(BundleError):
    """The imported text contained no numeric item literals."""

    code = "ERR_BUNDLE_NO_ITEMS_FOUND"


class BundleSerializationError(BundleError):
    """A persisted bundle record could not be encoded or decoded."""

    code = "ERR_SERIALIZATION"


class BundleNotFoundError(BundleError):
    code = "ERR_BUNDLE_NOT_FOUND"

    def __init__(self, bundle_id: int) -> None:
        super().__init__(f"bundle {bundle_id} does not exist", context={"bundle_id": bundle_id})
        self.bundle_id = bundle_id


class SteamError(BundleError):
    """The remote workshop collaborator reported a failure.

    `steam_code` is opaque: whatever diagnostic the client handed back.
    """

    def __init__(self, steam_code: str, context: dict[str, Any] | None = None) -> None:
        self.steam_code = str(steam_code)
        self.code = f"ERR_STEAM_ERROR:{self.steam_code}"
        super().__init__(self.code, context=context)


class LookupTimeoutError(SteamError):
    def __init__(self, item_id: int, timeout: float) -> None:
        super().__init__("Timeout", context={"item_id": item_id, "timeout": timeout})


class LookupCancelledError(SteamError):
    def __init__(self, item_id: int) -> None:
        super().__init__("Cancelled", context={"item_id": item_id})


class InvalidCollectionError(BundleError):
    """The remote item exists but is not a collection, or has no children."""

    code = "ERR_INVALID_COLLECTION"
