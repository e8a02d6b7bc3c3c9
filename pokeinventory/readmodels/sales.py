from collections.abc import Iterable

from pokeinventory.config import SALES_TABLE
from pokeinventory.store import Row

from .base import EntityReadModel


class SalesReadModel(EntityReadModel):
    """Sales history, newest sale first."""

    table = SALES_TABLE
    order_by = "sold_at"
    search_fields = ("card_name_snapshot", "platform", "notes")

    def for_card(self, card_id: str) -> list[Row]:
        return [row for row in self.rows if row.get("inventory_id") == card_id]

    def orphaned(self, inventory_rows: Iterable[Row]) -> list[Row]:
        """Sales that point at an inventory card which no longer exists."""
        known = {row.get("id") for row in inventory_rows}
        return [
            row
            for row in self.rows
            if row.get("inventory_id") and row["inventory_id"] not in known
        ]
