from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from pokeinventory.changes import ChangeFeed, TablePoller, track_changes
from pokeinventory.config import LOGGER, POLL_INTERVAL_SECONDS, SALE_DECREMENT_ATTEMPTS
from pokeinventory.metrics import DashboardReadModel
from pokeinventory.models import TABLE_MODELS
from pokeinventory.readmodels import (
    InventoryReadModel,
    SalesReadModel,
    WatchlistReadModel,
)
from pokeinventory.services import InventoryService, SalesService, WatchlistService
from pokeinventory.store import Store
from pokeinventory.workflows import SaleRecordingWorkflow


class AppSession:
    """
    Everything one operator session needs, wired together: the store, its
    change feed, the three read-models, the dashboard and the commands.

    Nothing here is a module-level singleton; create one AppSession and pass
    it to whatever needs it.
    """

    def __init__(
        self,
        sessionmaker_: sessionmaker[Session],
        feed: ChangeFeed | None = None,
        decrement_attempts: int = SALE_DECREMENT_ATTEMPTS,
    ) -> None:
        self.Session: sessionmaker[Session] = sessionmaker_
        self.feed = feed if feed is not None else ChangeFeed()
        self.store = Store(sessionmaker_, self.feed)
        self._untrack = track_changes(sessionmaker_, self.feed)
        self.poller: TablePoller | None = None

        self.inventory = InventoryReadModel(self.store)
        self.sales = SalesReadModel(self.store)
        self.watchlist = WatchlistReadModel(self.store)
        self.dashboard = DashboardReadModel(self.inventory, self.sales, self.watchlist)

        self.inventory_service = InventoryService(self.store, self.inventory)
        self.sales_service = SalesService(self.store, self.sales)
        self.watchlist_service = WatchlistService(self.store, self.watchlist)
        self.sale_recording = SaleRecordingWorkflow(
            self.store, self.sales, self.inventory, attempts=decrement_attempts
        )

    def __enter__(self) -> "AppSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def start(self, poll: bool = False, interval: float = POLL_INTERVAL_SECONDS) -> None:
        """
        Start delivering change notifications and open every read-model.
        With `poll`, changes written by other processes are picked up too.
        """
        self.feed.start()
        if poll and self.poller is None:
            self.poller = TablePoller(
                self.Session, self.feed, TABLE_MODELS, interval=interval
            )
            self.poller.start()
        self.dashboard.open()
        LOGGER.debug("Session started")

    def close(self) -> None:
        """Release subscriptions and stop background threads."""
        self.dashboard.close()
        for model in (self.inventory, self.sales, self.watchlist):
            model.close()
        if self.poller is not None:
            self.poller.stop()
            self.poller = None
        self.feed.stop()
        self._untrack()
        LOGGER.debug("Session closed")
