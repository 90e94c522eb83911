"""Remote workshop collaborator: interface, blocking bridge and collection queries."""

from __future__ import annotations

from .catalog import CatalogWorkshop
from .client import QueryCallback, QueryOutcome, WorkshopClient, WorkshopFailure, WorkshopItem
from .lookup import CollectionLookup
from .pending import PendingLookup

__all__ = [
    "WorkshopClient",
    "WorkshopItem",
    "WorkshopFailure",
    "QueryOutcome",
    "QueryCallback",
    "PendingLookup",
    "CollectionLookup",
    "CatalogWorkshop",
]
