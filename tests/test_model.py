from __future__ import annotations

from datetime import datetime

import pytest

from conftest import ts
from wsbundle.core.model import U64_MAX, Bundle, CollectionLink, ParsedBundle


def test_bundle_equality_is_by_id_only() -> None:
    a = Bundle(id=1, name="A", updated=ts(2020, 1, 1), items=(1,))
    b = Bundle(id=1, name="B", updated=ts(2021, 1, 1), items=(2, 3))
    c = Bundle(id=2, name="A", updated=ts(2020, 1, 1), items=(1,))

    assert a == b
    assert a != c
    assert len({a, b, c}) == 2


def test_order_key_sorts_by_updated_then_id() -> None:
    newer = Bundle(id=1, name="n", updated=ts(2022, 1, 1))
    older = Bundle(id=2, name="o", updated=ts(2021, 1, 1))
    tie = Bundle(id=3, name="t", updated=ts(2021, 1, 1))

    ordered = sorted([newer, tie, older], key=lambda b: b.order_key)

    assert [b.id for b in ordered] == [2, 3, 1]


def test_bundle_coerces_sequences_to_tuples() -> None:
    bundle = Bundle(
        id=1,
        name="x",
        updated=ts(2020, 1, 1),
        collection=CollectionLink(id=5, include=[1], exclude=[2]),
        items=[3, 4],
    )

    assert bundle.items == (3, 4)
    assert bundle.collection is not None
    assert bundle.collection.include == (1,)
    assert bundle.all_items() == (3, 4, 1)


@pytest.mark.parametrize(
    "kwargs, exc",
    [
        ({"id": -1}, ValueError),
        ({"id": 2**32}, ValueError),
        ({"id": True}, TypeError),
        ({"items": (U64_MAX + 1,)}, ValueError),
        ({"items": ("1",)}, TypeError),
        ({"items": "123"}, TypeError),
        ({"updated": datetime(2020, 1, 1)}, ValueError),
    ],
)
def test_bundle_rejects_invalid_fields(kwargs: dict, exc: type) -> None:
    base = {"id": 1, "name": "x", "updated": ts(2020, 1, 1), "items": (1,)}
    base.update(kwargs)
    with pytest.raises(exc):
        Bundle(**base)


def test_parsed_bundle_validates_collection_id() -> None:
    with pytest.raises(ValueError):
        ParsedBundle(name="x", updated=ts(2020, 1, 1), items=(1,), collection_id=U64_MAX + 1)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Pack ", "Pack"),
        ("  Padded\t", "Padded"),
        ("two\nlines", "two lines"),
        ("crlf\r\nname\r\n", "crlf name"),
    ],
)
def test_names_are_normalized_to_one_stripped_line(raw: str, expected: str) -> None:
    assert Bundle(id=1, name=raw, updated=ts(2020, 1, 1)).name == expected
    assert ParsedBundle(name=raw, updated=ts(2020, 1, 1), items=(1,)).name == expected


def test_bundle_rejects_non_str_name() -> None:
    with pytest.raises(TypeError):
        Bundle(id=1, name=None, updated=ts(2020, 1, 1))  # type: ignore[arg-type]
