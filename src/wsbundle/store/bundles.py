"""File-backed bundle store.

One file per bundle under the store root, named by the bundle's decimal id
and holding a record from `wsbundle.store.codec`.

A single lock protects both the id counter and the table. Identity lookups go
through an id-keyed dict; the `updated`-ordered listing is a separate sorted
index of `(updated, id)` keys, so changing a bundle's timestamp can never hide
or duplicate it.

The in-memory table is only touched after the disk write succeeded.
"""

from __future__ import annotations

import logging
import os
import threading
from bisect import bisect_left, insort
from datetime import datetime
from pathlib import Path
from typing import Iterable

from wsbundle.core.errors import BundleIOError, BundleNotFoundError, BundleSerializationError
from wsbundle.core.model import U32_MAX, Bundle, CollectionLink, ItemId, ParsedBundle, utc_now

from .codec import decode_bundle, encode_bundle

logger = logging.getLogger(__name__)


class BundleStore:
    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)
        self._lock = threading.Lock()
        self._by_id: dict[int, Bundle] = {}
        self._order: list[tuple[datetime, int]] = []
        self._next_id = 0

    @classmethod
    def open(cls, root: str | Path) -> "BundleStore":
        """Open (and create if needed) a store directory, loading every readable bundle.

        Entries that fail to read or decode are logged and skipped. The id
        counter resumes above the largest id found.
        """
        store = cls(root)
        try:
            store._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BundleIOError(f"cannot create bundle directory: {e}", context={"root": str(store._root)}) from e
        store._load()
        return store

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, bundle_id: int) -> Path:
        return self._root / str(bundle_id)

    def _load(self) -> None:
        max_id = 0
        try:
            entries = sorted(self._root.iterdir())
        except OSError as e:
            raise BundleIOError(f"cannot list bundle directory: {e}", context={"root": str(self._root)}) from e
        for entry in entries:
            if not entry.is_file() or entry.name.endswith(".tmp"):
                continue
            try:
                bundle = decode_bundle(entry.read_bytes())
            except (OSError, BundleSerializationError) as e:
                logger.warning("skipping unreadable bundle file %s: %s", entry, e)
                continue
            if bundle.id in self._by_id:
                logger.warning("skipping %s: duplicate bundle id %d", entry, bundle.id)
                continue
            max_id = max(max_id, bundle.id)
            self._insert_locked(bundle)
        self._next_id = max_id
        logger.debug("loaded %d bundles from %s", len(self._by_id), self._root)

    # ----------------------------
    # Locked helpers (caller holds self._lock)
    # ----------------------------

    def _allocate_id_locked(self) -> int:
        if self._next_id >= U32_MAX:
            raise BundleIOError("bundle id space exhausted")
        self._next_id += 1
        return self._next_id

    def _insert_locked(self, bundle: Bundle) -> None:
        previous = self._by_id.get(bundle.id)
        if previous is not None:
            pos = bisect_left(self._order, previous.order_key)
            del self._order[pos]
        self._by_id[bundle.id] = bundle
        insort(self._order, bundle.order_key)

    def _persist_locked(self, bundle: Bundle) -> None:
        data = encode_bundle(bundle)
        path = self._path(bundle.id)
        tmp = path.with_name(path.name + ".tmp")
        try:
            with tmp.open("wb") as f:
                f.write(data)
            os.replace(tmp, path)
        except OSError as e:
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.debug("could not remove temp file %s", tmp)
            raise BundleIOError(f"cannot write bundle {bundle.id}: {e}", context={"path": str(path)}) from e
        logger.debug("persisted bundle %d (%d bytes)", bundle.id, len(data))

    # ----------------------------
    # Public API
    # ----------------------------

    def allocate_id(self) -> int:
        """Reserve and return the next bundle id. Never returns the same id twice."""
        with self._lock:
            return self._allocate_id_locked()

    def upsert(self, bundle: Bundle) -> Bundle:
        """Persist `bundle` and insert it, replacing any bundle with the same id."""
        with self._lock:
            self._persist_locked(bundle)
            self._insert_locked(bundle)
            # Ids written by callers (eg update of a freshly allocated id) must
            # never be handed out again.
            self._next_id = max(self._next_id, bundle.id)
        return bundle

    def create(
        self,
        name: str,
        *,
        collection: CollectionLink | None = None,
        items: Iterable[ItemId] = (),
        updated: datetime | None = None,
    ) -> Bundle:
        """Allocate an id, persist a new bundle and return it."""
        with self._lock:
            bundle = Bundle(
                id=self._allocate_id_locked(),
                name=name,
                updated=updated if updated is not None else utc_now(),
                collection=collection,
                items=tuple(items),
            )
            self._persist_locked(bundle)
            self._insert_locked(bundle)
        logger.info("created bundle %d %r (%d items)", bundle.id, bundle.name, len(bundle.items))
        return bundle

    def add(
        self,
        parsed: ParsedBundle,
        *,
        collection: CollectionLink | None = None,
        items: Iterable[ItemId] | None = None,
    ) -> Bundle:
        """Store an imported bundle, keeping its parsed name and timestamp."""
        return self.create(
            parsed.name,
            collection=collection,
            items=parsed.items if items is None else items,
            updated=parsed.updated,
        )

    def delete(self, bundle_id: int) -> Bundle:
        with self._lock:
            bundle = self._by_id.get(bundle_id)
            if bundle is None:
                raise BundleNotFoundError(bundle_id)
            try:
                self._path(bundle_id).unlink(missing_ok=True)
            except OSError as e:
                raise BundleIOError(f"cannot delete bundle {bundle_id}: {e}") from e
            del self._by_id[bundle_id]
            pos = bisect_left(self._order, bundle.order_key)
            del self._order[pos]
        logger.info("deleted bundle %d", bundle_id)
        return bundle

    def get(self, bundle_id: int) -> Bundle:
        with self._lock:
            bundle = self._by_id.get(bundle_id)
        if bundle is None:
            raise BundleNotFoundError(bundle_id)
        return bundle

    def list_bundles(self) -> list[Bundle]:
        """All bundles, oldest `updated` first (ties broken by id)."""
        with self._lock:
            return [self._by_id[bundle_id] for _, bundle_id in self._order]

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)

    def __contains__(self, bundle_id: object) -> bool:
        with self._lock:
            return bundle_id in self._by_id
