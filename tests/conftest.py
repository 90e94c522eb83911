"""Pytest configuration.

This repo follows the `src/` layout. Some environments may invoke a `pytest`
entrypoint from a different Python install than the one used for
`python -m pip install -e ...`, which can cause `import wsbundle` to fail.

To keep things robust, we ensure `src/` is on `sys.path` during tests.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


# =============================================================================
# Shared Test Helpers
# =============================================================================


class FakeWorkshop:
    """Scripted `WorkshopClient`.

    - `items`: id -> WorkshopItem returned on query
    - `failures`: id -> failure code reported instead
    - `deferred=True`: callbacks are held until `release()` is called
    """

    def __init__(self, items: dict[int, Any] | None = None, failures: dict[int, str] | None = None, deferred: bool = False):
        self.items = dict(items or {})
        self.failures = dict(failures or {})
        self.deferred = deferred
        self.calls: list[dict[str, Any]] = []
        self._held: list[tuple[Any, Any]] = []

    def _outcome(self, item_id: int) -> Any:
        from wsbundle.remote.client import WorkshopFailure

        if item_id in self.failures:
            return WorkshopFailure(self.failures[item_id])
        if item_id in self.items:
            return self.items[item_id]
        return WorkshopFailure("FileNotFound")

    def query_item(self, item_id: int, *, include_children: bool, max_cache_age: int, callback: Any) -> None:
        self.calls.append(
            {"item_id": item_id, "include_children": include_children, "max_cache_age": max_cache_age}
        )
        if self.deferred:
            self._held.append((callback, self._outcome(item_id)))
            return
        callback(self._outcome(item_id))

    def release(self) -> None:
        held, self._held = self._held, []
        for callback, outcome in held:
            callback(outcome)


def make_collection(item_id: int, children: list[int], *, title: str = "My Collection") -> Any:
    from wsbundle.remote.client import WorkshopItem

    return WorkshopItem(
        id=item_id,
        title=title,
        file_type="Collection",
        preview_url=f"https://example.invalid/{item_id}.png",
        children=tuple(children),
    )


def make_addon(item_id: int, *, title: str = "Some Addon") -> Any:
    from wsbundle.remote.client import WorkshopItem

    return WorkshopItem(id=item_id, title=title, file_type="Community")


def ts(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


@pytest.fixture()
def workshop() -> FakeWorkshop:
    return FakeWorkshop()


@pytest.fixture()
def service(tmp_path: Path, workshop: FakeWorkshop) -> Any:
    from wsbundle.remote.lookup import CollectionLookup
    from wsbundle.service import BundleService
    from wsbundle.store.bundles import BundleStore

    store = BundleStore.open(tmp_path / "bundles")
    return BundleService(store, CollectionLookup(workshop, timeout=1.0))
