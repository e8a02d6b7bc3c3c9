"""
Read-models: local, read-only snapshots of the store tables that reload
themselves whenever the table changes.
"""

from pokeinventory.readmodels.base import EntityReadModel
from pokeinventory.readmodels.inventory import InventoryReadModel
from pokeinventory.readmodels.sales import SalesReadModel
from pokeinventory.readmodels.watchlist import WatchlistReadModel

__all__ = [
    "EntityReadModel",
    "InventoryReadModel",
    "SalesReadModel",
    "WatchlistReadModel",
]
