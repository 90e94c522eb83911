from __future__ import annotations

import os
import threading
from dataclasses import replace
from pathlib import Path

import msgpack
import pytest

from conftest import ts
from wsbundle.core.errors import BundleIOError, BundleNotFoundError, BundleSerializationError
from wsbundle.core.model import Bundle, CollectionLink, ParsedBundle
from wsbundle.store.bundles import BundleStore
from wsbundle.store.codec import decode_bundle, encode_bundle


def _bundle(bundle_id: int, updated_day: int, *, name: str = "b") -> Bundle:
    return Bundle(id=bundle_id, name=name, updated=ts(2024, 1, updated_day), items=(bundle_id * 10,))


def test_codec_roundtrip_with_collection() -> None:
    bundle = Bundle(
        id=7,
        name="Pack ünicode",
        updated=ts(2024, 3, 4, 5, 6, 7).replace(microsecond=123456),
        collection=CollectionLink(id=2**64 - 1, include=(1, 2), exclude=(3,)),
        items=(2**63, 0, 42),
    )

    data = encode_bundle(bundle)
    decoded = decode_bundle(data)

    assert decoded.id == 7
    assert decoded.name == bundle.name
    assert decoded.updated == bundle.updated
    assert decoded.collection == bundle.collection
    assert decoded.items == bundle.items
    assert encode_bundle(decoded) == data


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"\xc1",
        msgpack.packb({"id": 1}),
        msgpack.packb([99, 1, "x", 0, None, b""], use_bin_type=True),
        msgpack.packb([1, 1, "x", 0, None, b"\x00\x01"], use_bin_type=True),
        msgpack.packb([1, -5, "x", 0, None, b""], use_bin_type=True),
    ],
)
def test_codec_rejects_malformed_records(data: bytes) -> None:
    with pytest.raises(BundleSerializationError):
        decode_bundle(data)


def test_open_creates_directory_and_starts_empty(tmp_path: Path) -> None:
    root = tmp_path / "data" / "bundles"

    store = BundleStore.open(root)

    assert root.is_dir()
    assert len(store) == 0
    assert store.list_bundles() == []
    assert store.allocate_id() == 1


def test_create_persists_one_file_per_bundle(tmp_path: Path) -> None:
    store = BundleStore.open(tmp_path)

    a = store.create("first", items=(1, 2))
    b = store.create("second", collection=CollectionLink(id=9, include=(5,)))

    assert (a.id, b.id) == (1, 2)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["1", "2"]
    assert decode_bundle((tmp_path / "2").read_bytes()).collection == CollectionLink(id=9, include=(5,))


def test_reopen_restores_bundles_and_continues_ids(tmp_path: Path) -> None:
    store = BundleStore.open(tmp_path)
    store.upsert(_bundle(5, 3))
    store.upsert(_bundle(2, 1))
    store.upsert(_bundle(9, 2))

    reopened = BundleStore.open(tmp_path)

    assert [b.id for b in reopened.list_bundles()] == [2, 9, 5]
    assert reopened.allocate_id() == 10


def test_open_skips_undecodable_entries(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    store = BundleStore.open(tmp_path)
    store.upsert(_bundle(3, 1))
    (tmp_path / "4").write_bytes(b"definitely not msgpack \xff\xfe")
    (tmp_path / "subdir").mkdir()

    with caplog.at_level("WARNING", logger="wsbundle.store.bundles"):
        reopened = BundleStore.open(tmp_path)

    assert [b.id for b in reopened.list_bundles()] == [3]
    assert reopened.allocate_id() == 4
    assert any("skipping" in r.getMessage() for r in caplog.records)


def test_upsert_replaces_by_id_and_keeps_updated_order(tmp_path: Path) -> None:
    store = BundleStore.open(tmp_path)
    for bundle_id, day in [(1, 10), (2, 20), (3, 30)]:
        store.upsert(_bundle(bundle_id, day))

    # Moving bundle 3 to the oldest timestamp must not duplicate or lose it.
    store.upsert(replace(_bundle(3, 30), updated=ts(2024, 1, 1), name="moved"))

    listed = store.list_bundles()
    assert [b.id for b in listed] == [3, 1, 2]
    assert store.get(3).name == "moved"
    assert len(store) == 3
    assert decode_bundle((tmp_path / "3").read_bytes()).name == "moved"


def test_allocate_id_never_repeats_after_upsert_of_higher_id(tmp_path: Path) -> None:
    store = BundleStore.open(tmp_path)
    first = store.allocate_id()
    store.upsert(_bundle(50, 1))

    second = store.allocate_id()

    assert first == 1
    assert second == 51


def test_failed_write_leaves_table_unchanged(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = BundleStore.open(tmp_path)
    original = store.upsert(_bundle(1, 5, name="original"))

    def _boom(src: object, dst: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", _boom)

    with pytest.raises(BundleIOError):
        store.upsert(replace(original, name="changed"))
    with pytest.raises(BundleIOError):
        store.create("never stored")

    monkeypatch.undo()
    assert store.get(1).name == "original"
    assert [b.id for b in store.list_bundles()] == [1]
    assert not list(tmp_path.glob("*.tmp"))
    assert decode_bundle((tmp_path / "1").read_bytes()).name == "original"


def test_add_keeps_parsed_timestamp(tmp_path: Path) -> None:
    store = BundleStore.open(tmp_path)
    parsed = ParsedBundle(name="imported", updated=ts(2001, 2, 3), items=(1, 2, 3))

    bundle = store.add(parsed, items=(2, 3), collection=CollectionLink(id=8, include=(1,)))

    assert bundle.updated == ts(2001, 2, 3)
    assert bundle.items == (2, 3)
    assert bundle.name == "imported"


def test_delete_removes_file_and_entry(tmp_path: Path) -> None:
    store = BundleStore.open(tmp_path)
    bundle = store.create("gone")

    store.delete(bundle.id)

    assert bundle.id not in store
    assert not (tmp_path / str(bundle.id)).exists()
    with pytest.raises(BundleNotFoundError):
        store.delete(bundle.id)
    with pytest.raises(BundleNotFoundError):
        store.get(bundle.id)
    # Deleted ids are not handed out again.
    assert store.allocate_id() == bundle.id + 1


def test_concurrent_creates_get_unique_ids(tmp_path: Path) -> None:
    store = BundleStore.open(tmp_path)
    ids: list[int] = []
    ids_lock = threading.Lock()

    def worker() -> None:
        for _ in range(10):
            bundle = store.create("c")
            with ids_lock:
                ids.append(bundle.id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(ids) == list(range(1, 81))
    assert len(BundleStore.open(tmp_path)) == 80
