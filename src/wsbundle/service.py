"""Bundle operations exposed to the application shell.

`BundleService` wires the codec, the diff engine, the remote lookup and the
store together. Remote lookups always run before the store lock is taken.

Remote failure policy:
- import (path or pasted text): best-effort; the bundle keeps its collection
  link with empty include/exclude lists.
- `new_bundle(based_on_collection=...)` and `check_bundle_collection`: fatal.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from wsbundle.codecs.lua_bundle import format_bundle, parse_bundle_text, read_bundle, write_bundle
from wsbundle.core.diff import diff_collection
from wsbundle.core.model import Bundle, CollectionData, CollectionLink, ItemId, ParsedBundle
from wsbundle.remote.lookup import CollectionLookup
from wsbundle.store.bundles import BundleStore

logger = logging.getLogger(__name__)


class BundleService:
    def __init__(self, store: BundleStore, lookup: CollectionLookup) -> None:
        self.store = store
        self.lookup = lookup

    # ----------------------------
    # Reads
    # ----------------------------

    def list_bundles(self) -> list[Bundle]:
        return self.store.list_bundles()

    def get_bundle(self, bundle_id: int) -> Bundle:
        return self.store.get(bundle_id)

    # ----------------------------
    # Import
    # ----------------------------

    def _resolve_collection(self, parsed: ParsedBundle) -> tuple[CollectionLink | None, tuple[ItemId, ...]]:
        if parsed.collection_id is None:
            return None, parsed.items

        children = self.lookup.fetch_collection_items(parsed.collection_id)
        if children is None:
            logger.warning(
                "importing %r without collection enrichment (collection %d unavailable)",
                parsed.name,
                parsed.collection_id,
            )
            return CollectionLink(id=parsed.collection_id), parsed.items

        diff = diff_collection(parsed.items, children)
        link = CollectionLink(id=parsed.collection_id, include=diff.include, exclude=diff.exclude)
        return link, diff.items

    def _store_parsed(self, parsed: ParsedBundle) -> Bundle:
        collection, items = self._resolve_collection(parsed)
        return self.store.add(parsed, collection=collection, items=items)

    def paste_bundle(self, pasted: str) -> Bundle:
        """Import bundle text pasted by the user."""
        return self._store_parsed(parse_bundle_text(pasted))

    def import_bundle(self, path: str | Path) -> Bundle:
        """Import a Lua bundle file."""
        return self._store_parsed(read_bundle(path))

    # ----------------------------
    # Mutations
    # ----------------------------

    def new_bundle(self, name: str, based_on_collection: ItemId | None = None) -> Bundle:
        collection: CollectionLink | None = None
        if based_on_collection is not None:
            data = self.lookup.check_collection(based_on_collection, with_children=True)
            collection = CollectionLink(id=based_on_collection, include=data.items)
        return self.store.create(name, collection=collection)

    def update_bundle(self, bundle: Bundle) -> Bundle:
        """Replace the stored bundle with the same id (or store it if new)."""
        return self.store.upsert(bundle)

    def delete_bundle(self, bundle_id: int) -> Bundle:
        return self.store.delete(bundle_id)

    def check_bundle_collection(self, collection_id: ItemId, with_children: bool = False) -> CollectionData:
        return self.lookup.check_collection(collection_id, with_children=with_children)

    # ----------------------------
    # Export
    # ----------------------------

    def export_bundle(
        self,
        bundle_id: int,
        *,
        item_names: Mapping[ItemId, str] | None = None,
        collection_title: str | None = None,
        out: str | Path | None = None,
    ) -> str:
        """Render a stored bundle as Lua; also write it to `out` when given."""
        bundle = self.store.get(bundle_id)
        if out is not None:
            write_bundle(out, bundle, item_names=item_names, collection_title=collection_title)
        return format_bundle(bundle, item_names=item_names, collection_title=collection_title)
