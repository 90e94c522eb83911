"""Workshop collaborator interface.

The remote workshop query is asynchronous: a client accepts a request plus a
completion callback and invokes the callback exactly once, on any thread,
with either a `WorkshopItem` or a `WorkshopFailure`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, Union

from wsbundle.core.model import ItemId


@dataclass(frozen=True)
class WorkshopItem:
    id: ItemId
    title: str
    file_type: str
    preview_url: str | None = None
    # None when children were not requested or the item has none.
    children: tuple[ItemId, ...] | None = None


@dataclass(frozen=True)
class WorkshopFailure:
    """Failure reported by the remote; `code` is passed through untouched."""

    code: str


QueryOutcome = Union[WorkshopItem, WorkshopFailure]
QueryCallback = Callable[[QueryOutcome], None]


class WorkshopClient(Protocol):
    def query_item(
        self,
        item_id: ItemId,
        *,
        include_children: bool,
        max_cache_age: int,
        callback: QueryCallback,
    ) -> None:
        """Start a metadata query for `item_id`; report through `callback`."""
        ...
