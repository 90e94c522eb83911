"""Blocking bridge over a callback-style workshop query.

`PendingLookup.resolve` is handed to the client as its completion callback;
`wait()` blocks the caller on a `concurrent.futures.Future` until the callback
fires, the optional timeout elapses, or someone calls `cancel()`.
"""

from __future__ import annotations

import logging
from concurrent.futures import CancelledError, Future, InvalidStateError
from concurrent.futures import TimeoutError as FutureTimeoutError

from wsbundle.core.errors import LookupCancelledError, LookupTimeoutError, SteamError
from wsbundle.core.model import ItemId

from .client import QueryOutcome, WorkshopFailure, WorkshopItem

logger = logging.getLogger(__name__)


class PendingLookup:
    def __init__(self, item_id: ItemId) -> None:
        self.item_id = item_id
        self._future: Future[WorkshopItem] = Future()

    def resolve(self, outcome: QueryOutcome) -> None:
        """Completion callback. Late results (after cancel/timeout) are dropped."""
        try:
            if isinstance(outcome, WorkshopFailure):
                self._future.set_exception(SteamError(outcome.code, context={"item_id": self.item_id}))
            else:
                self._future.set_result(outcome)
        except InvalidStateError:
            logger.debug("dropping late workshop result for %d", self.item_id)

    def cancel(self) -> bool:
        """Abandon the lookup. Returns False if it already completed."""
        return self._future.cancel()

    def done(self) -> bool:
        return self._future.done()

    def wait(self, timeout: float | None = None) -> WorkshopItem:
        """Block until the lookup resolves.

        Raises:
            SteamError: the remote reported a failure.
            LookupTimeoutError: `timeout` elapsed; the lookup is cancelled.
            LookupCancelledError: `cancel()` was called.
        """
        try:
            return self._future.result(timeout=timeout)
        except CancelledError as e:
            raise LookupCancelledError(self.item_id) from e
        except FutureTimeoutError as e:
            if not self._future.cancel():
                # The callback landed between the timeout and the cancel.
                return self._future.result()
            raise LookupTimeoutError(self.item_id, timeout or 0.0) from e
