from pokeinventory.config import WATCHLIST_TABLE
from pokeinventory.models import WatchStatus
from pokeinventory.store import Row

from .base import EntityReadModel


class WatchlistReadModel(EntityReadModel):
    """Watched listings, most recently updated first."""

    table = WATCHLIST_TABLE
    order_by = "updated_at"
    search_fields = ("title", "source", "status")

    def with_status(self, status: WatchStatus | str) -> list[Row]:
        value = status.value if isinstance(status, WatchStatus) else status
        return [row for row in self.rows if row.get("status") == value]
