"""Binary record codec for persisted bundles.

Each bundle file holds one MessagePack array with a fixed field order:

    [format_version, id, name, updated_us, collection, items]

- `updated_us`: microseconds since the Unix epoch, UTC.
- `collection`: nil, or `[id, include, exclude]`.
- every item list is a `bin` of big-endian unsigned 64-bit integers.

Identical bundles always encode to identical bytes.
"""

from __future__ import annotations

import struct
from datetime import datetime, timedelta, timezone
from typing import Any

import msgpack

from wsbundle.config import RECORD_FORMAT_VERSION
from wsbundle.core.errors import BundleSerializationError
from wsbundle.core.model import Bundle, CollectionLink, ItemId

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_U64 = struct.Struct(">Q")


def _pack_ids(ids: tuple[ItemId, ...]) -> bytes:
    return struct.pack(f">{len(ids)}Q", *ids)


def _unpack_ids(data: Any, *, where: str) -> tuple[ItemId, ...]:
    if not isinstance(data, (bytes, bytearray)):
        raise BundleSerializationError(f"{where}: expected bin, got {type(data).__name__}")
    if len(data) % _U64.size:
        raise BundleSerializationError(f"{where}: length {len(data)} is not a multiple of {_U64.size}")
    return tuple(x for (x,) in _U64.iter_unpack(bytes(data)))


def _to_epoch_us(dt: datetime) -> int:
    delta = dt - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


def _from_epoch_us(us: int) -> datetime:
    return _EPOCH + timedelta(microseconds=us)


def encode_bundle(bundle: Bundle) -> bytes:
    collection: list[Any] | None = None
    if bundle.collection is not None:
        collection = [
            bundle.collection.id,
            _pack_ids(bundle.collection.include),
            _pack_ids(bundle.collection.exclude),
        ]
    record = [
        RECORD_FORMAT_VERSION,
        bundle.id,
        bundle.name,
        _to_epoch_us(bundle.updated),
        collection,
        _pack_ids(bundle.items),
    ]
    try:
        return msgpack.packb(record, use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as e:
        raise BundleSerializationError(f"cannot encode bundle {bundle.id}: {e}") from e


def decode_bundle(data: bytes) -> Bundle:
    """Decode one persisted record.

    Raises:
        BundleSerializationError: on malformed bytes, an unknown format
            version, or field values the model rejects.
    """
    try:
        record = msgpack.unpackb(data, raw=False)
    except (msgpack.UnpackException, ValueError) as e:
        raise BundleSerializationError(f"cannot decode bundle record: {e}") from e

    if not isinstance(record, list) or len(record) != 6:
        raise BundleSerializationError("bundle record: expected a 6-field array")

    version, bundle_id, name, updated_us, raw_collection, raw_items = record
    if version != RECORD_FORMAT_VERSION:
        raise BundleSerializationError(
            f"bundle record: unsupported format version {version!r}",
            context={"expected": RECORD_FORMAT_VERSION},
        )
    if not isinstance(updated_us, int):
        raise BundleSerializationError("bundle record: updated must be an integer")

    try:
        collection: CollectionLink | None = None
        if raw_collection is not None:
            if not isinstance(raw_collection, list) or len(raw_collection) != 3:
                raise BundleSerializationError("bundle record: collection must be a 3-field array")
            collection = CollectionLink(
                id=raw_collection[0],
                include=_unpack_ids(raw_collection[1], where="collection.include"),
                exclude=_unpack_ids(raw_collection[2], where="collection.exclude"),
            )
        return Bundle(
            id=bundle_id,
            name=name,
            updated=_from_epoch_us(updated_us),
            collection=collection,
            items=_unpack_ids(raw_items, where="items"),
        )
    except (TypeError, ValueError, OverflowError) as e:
        raise BundleSerializationError(f"bundle record: {e}") from e
