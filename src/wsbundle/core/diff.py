"""Collection diff engine.

Classifies the members of a remote collection against a bundle's own item
list. Pure function; the remote lookup happens elsewhere.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from typing import Iterable

from .model import ItemId


@dataclass(frozen=True)
class CollectionDiff:
    include: tuple[ItemId, ...]
    items: tuple[ItemId, ...]
    exclude: tuple[ItemId, ...]


def diff_collection(items: Iterable[ItemId], remote_children: Iterable[ItemId]) -> CollectionDiff:
    """Partition `remote_children` against `items`.

    For each remote child, in remote order:
      - if it is still among the bundle's items, its first occurrence is moved
        out of `items` and appended to `include`;
      - otherwise it is appended to `exclude`.

    Membership uses a sorted index (binary search); the returned `items` keep
    their original insertion order minus the moved entries.
    """
    remaining = list(items)
    index = sorted(remaining)

    include: list[ItemId] = []
    exclude: list[ItemId] = []
    for child in remote_children:
        pos = bisect_left(index, child)
        if pos < len(index) and index[pos] == child:
            del index[pos]
            remaining.remove(child)
            include.append(child)
        else:
            exclude.append(child)

    return CollectionDiff(include=tuple(include), items=tuple(remaining), exclude=tuple(exclude))
