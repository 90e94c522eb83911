"""Collection queries on top of a `WorkshopClient`.

Lookups never touch the bundle store; callers run them before entering any
store critical section.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from wsbundle.config import COLLECTION_FILE_TYPE, DEFAULT_CACHE_MAX_AGE, DEFAULT_LOOKUP_TIMEOUT
from wsbundle.core.errors import BundleError, InvalidCollectionError
from wsbundle.core.model import CollectionData, ItemId

from .client import WorkshopClient
from .pending import PendingLookup

logger = logging.getLogger(__name__)


class CollectionLookup:
    def __init__(
        self,
        client: WorkshopClient,
        *,
        timeout: float | None = DEFAULT_LOOKUP_TIMEOUT,
        cache_max_age: int = DEFAULT_CACHE_MAX_AGE,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._cache_max_age = cache_max_age

    def begin(self, collection_id: ItemId) -> PendingLookup:
        """Start a children-including query; the returned handle can be waited on or cancelled."""
        pending = PendingLookup(collection_id)
        self._client.query_item(
            collection_id,
            include_children=True,
            max_cache_age=self._cache_max_age,
            callback=pending.resolve,
        )
        return pending

    def check_collection(self, collection_id: ItemId, *, with_children: bool = False) -> CollectionData:
        """Confirm `collection_id` is a collection with children.

        Children are returned in `CollectionData.items` only when
        `with_children` is set.

        Raises:
            InvalidCollectionError: the item is not a collection, has no children,
                or reported children that are not u64 ids.
            SteamError: the remote failed, timed out or was cancelled.
        """
        item = self.begin(collection_id).wait(self._timeout)
        if item.file_type != COLLECTION_FILE_TYPE or item.children is None:
            raise InvalidCollectionError(
                context={"collection_id": collection_id, "file_type": item.file_type},
            )
        try:
            data = CollectionData(
                id=collection_id,
                title=item.title,
                preview_url=item.preview_url,
                items=item.children,
            )
        except (TypeError, ValueError) as e:
            raise InvalidCollectionError(
                f"collection {collection_id} reported invalid children: {e}",
                context={"collection_id": collection_id},
            ) from e
        return data if with_children else replace(data, items=())

    def fetch_collection_items(self, collection_id: ItemId) -> tuple[ItemId, ...] | None:
        """Best-effort children fetch; None when the collection is unavailable."""
        try:
            return self.check_collection(collection_id, with_children=True).items
        except BundleError as e:
            logger.warning("collection %d unavailable: %s", collection_id, e)
            return None
