from pokeinventory.config import INVENTORY_TABLE
from pokeinventory.store import Row

from .base import EntityReadModel


class InventoryReadModel(EntityReadModel):
    """Inventory cards, most recently updated first."""

    table = INVENTORY_TABLE
    order_by = "updated_at"
    search_fields = ("name", "set_name", "card_number", "tags")

    def by_name(self) -> list[Row]:
        """Rows sorted by card name, the order used when picking a card to sell."""
        return sorted(self.rows, key=lambda row: (row.get("name") or "").lower())

    def ids(self) -> set[str]:
        return {row["id"] for row in self.rows}
