"""
Service layer for pokeinventory.
Command services that validate form input, write to the store and reload
the affected read-model:
- InventoryService: add, edit, delete and import inventory cards
- SalesService: delete recorded sales
- WatchlistService: add, re-status and delete watchlist items
"""

from pokeinventory.services.inventory import InventoryService
from pokeinventory.services.sales import SalesService
from pokeinventory.services.watchlist import WatchlistService

__all__ = [
    "InventoryService",
    "SalesService",
    "WatchlistService",
]
