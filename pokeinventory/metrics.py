"""Dashboard totals derived from the inventory, sales and watchlist snapshots."""

from __future__ import annotations

import math
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import asdict, dataclass
from typing import Any

from pokeinventory.models import WatchStatus
from pokeinventory.readmodels import (
    EntityReadModel,
    InventoryReadModel,
    SalesReadModel,
    WatchlistReadModel,
)

Row = Mapping[str, Any]


def as_number(value: Any) -> float:
    """Coerce a stored value to a number. Missing or non-numeric values count as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


@dataclass(frozen=True)
class DashboardMetrics:
    total_quantity: int = 0
    total_cost: float = 0.0
    total_current_value: float = 0.0
    total_revenue: float = 0.0
    total_fees: float = 0.0
    active_watch_count: int = 0
    orphaned_sales: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def compute_metrics(
    inventory: Iterable[Row], sales: Iterable[Row], watchlist: Iterable[Row]
) -> DashboardMetrics:
    """Pure aggregation over the three snapshots. Never raises on bad field values."""
    inventory = list(inventory)
    sales = list(sales)

    total_quantity = 0.0
    total_cost = 0.0
    total_current_value = 0.0
    for card in inventory:
        quantity = as_number(card.get("quantity"))
        total_quantity += quantity
        total_cost += as_number(card.get("buy_price_eur")) * quantity
        # Cards without a current valuation add nothing to the value estimate
        if card.get("current_value_eur") is not None:
            total_current_value += as_number(card.get("current_value_eur")) * quantity

    total_revenue = sum(
        as_number(sale.get("sold_price_eur")) + as_number(sale.get("shipping_eur"))
        for sale in sales
    )
    total_fees = sum(as_number(sale.get("fees_eur")) for sale in sales)

    active_watch_count = sum(
        1 for item in watchlist if item.get("status") == WatchStatus.ACTIVE.value
    )

    known_cards = {card.get("id") for card in inventory}
    orphaned_sales = sum(
        1
        for sale in sales
        if sale.get("inventory_id") and sale["inventory_id"] not in known_cards
    )

    return DashboardMetrics(
        total_quantity=int(total_quantity),
        total_cost=total_cost,
        total_current_value=total_current_value,
        total_revenue=total_revenue,
        total_fees=total_fees,
        active_watch_count=active_watch_count,
        orphaned_sales=orphaned_sales,
    )


class DashboardReadModel:
    """
    Keeps `metrics` in step with the three entity read-models.
    Recomputes whenever any of them replaces its snapshot.
    """

    def __init__(
        self,
        inventory: InventoryReadModel,
        sales: SalesReadModel,
        watchlist: WatchlistReadModel,
    ) -> None:
        self.inventory = inventory
        self.sales = sales
        self.watchlist = watchlist
        self._metrics = DashboardMetrics()
        self._lock = threading.Lock()
        self._listeners: list[Callable[[DashboardMetrics], None]] = []
        self._removers: list[Callable[[], None]] = []
        self.recomputations = 0

    @property
    def sources(self) -> tuple[EntityReadModel, ...]:
        return (self.inventory, self.sales, self.watchlist)

    @property
    def metrics(self) -> DashboardMetrics:
        return self._metrics

    def open(self) -> None:
        """Follow the three read-models, opening any that are not open yet."""
        if not self._removers:
            self._removers = [
                source.add_listener(self._on_source_changed) for source in self.sources
            ]
        for source in self.sources:
            source.open()
        self.recompute()

    def close(self) -> None:
        """Stop following the sources. Listeners added by others stay registered."""
        for remove in self._removers:
            remove()
        self._removers = []

    def add_listener(
        self, listener: Callable[[DashboardMetrics], None]
    ) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def recompute(self) -> DashboardMetrics:
        with self._lock:
            self._metrics = compute_metrics(
                self.inventory.rows, self.sales.rows, self.watchlist.rows
            )
            self.recomputations += 1
            metrics = self._metrics
        for listener in list(self._listeners):
            listener(metrics)
        return metrics

    def _on_source_changed(self, source: EntityReadModel) -> None:
        self.recompute()
