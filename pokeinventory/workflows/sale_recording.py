from dataclasses import dataclass

from pokeinventory.config import (
    INVENTORY_TABLE,
    LOGGER,
    SALE_DECREMENT_ATTEMPTS,
    SALES_TABLE,
)
from pokeinventory.errors import (
    ReconciliationError,
    StoreOperationError,
    ValidationRejection,
)
from pokeinventory.forms import SaleEstimate, SaleForm, clean_text, parse_int
from pokeinventory.readmodels import InventoryReadModel, SalesReadModel
from pokeinventory.result import CommandResult, error, success, warning
from pokeinventory.store import Row, Store


@dataclass
class SaleReceipt:
    """What recording a sale did."""

    sale_id: str
    card_name: str
    quantity: int
    estimate: SaleEstimate
    card_id: str | None = None
    remaining_quantity: int | None = None
    reconciliation: ReconciliationError | None = None

    @property
    def inventory_updated(self) -> bool:
        return self.card_id is not None and self.reconciliation is None


class SaleRecordingWorkflow:
    """
    Records a sale and lowers the stock of the card it came from.

    The two writes are separate: the sale is inserted first and, only if that
    worked and a card was selected, the card quantity is set to
    max(0, current - sold). A failed decrement is retried a bounded number of
    times; after that the sale stays recorded and a reconciliation warning is
    returned instead of rolling anything back.
    """

    def __init__(
        self,
        store: Store,
        sales: SalesReadModel,
        inventory: InventoryReadModel,
        attempts: int = SALE_DECREMENT_ATTEMPTS,
    ) -> None:
        self.store = store
        self.sales = sales
        self.inventory = inventory
        self.attempts = max(1, attempts)

    def preview(self, form: SaleForm) -> SaleEstimate:
        """Cost and profit estimate for the form as currently filled in."""
        card = self.inventory.find(form.inventory_id) if form.inventory_id else None
        return form.estimate(card)

    def record_sale(self, form: SaleForm) -> CommandResult:
        card: Row | None = None
        card_id = clean_text(form.inventory_id)
        if card_id:
            try:
                card = self.inventory.find(card_id) or self.store.get(
                    INVENTORY_TABLE, card_id
                )
            except StoreOperationError as e:
                return error(f"Could not load card {card_id}: {e}")
            if card is None:
                return error(f"Card {card_id} not found")

        payload = form.to_payload(card)
        if payload is None:
            return error(str(ValidationRejection("card_name_snapshot")))

        # Phase 1: the sale itself
        try:
            sale_id = self.store.insert(SALES_TABLE, payload)
        except StoreOperationError as e:
            return error(f"Could not record sale of '{payload['card_name_snapshot']}': {e}")

        receipt = SaleReceipt(
            sale_id=sale_id,
            card_name=payload["card_name_snapshot"],
            quantity=payload["quantity"],
            estimate=form.estimate(card),
            card_id=card["id"] if card is not None else None,
        )

        # Phase 2: stock decrement, only for sales of inventory cards
        if card is not None:
            try:
                receipt.remaining_quantity = self._decrement(
                    sale_id, card["id"], payload["quantity"]
                )
            except ReconciliationError as e:
                LOGGER.warning(str(e))
                receipt.reconciliation = e

        self.sales.refresh()
        if card is not None:
            self.inventory.refresh()

        summary = (
            f"Recorded sale of {receipt.quantity}x {receipt.card_name} "
            f"(profit €{receipt.estimate.profit:.2f})"
        )
        if receipt.reconciliation is not None:
            return warning(f"{summary}. {receipt.reconciliation}", data=receipt)
        return success(summary, data=receipt)

    def _decrement(self, sale_id: str, card_id: str, sold: int) -> int:
        """Lower the card quantity by `sold`, never below zero. Returns the new quantity."""
        reason = "unknown error"
        for attempt in range(1, self.attempts + 1):
            try:
                current = self.store.get(INVENTORY_TABLE, card_id)
                if current is None:
                    raise ReconciliationError(
                        sale_id, card_id, attempt, "card no longer exists"
                    )
                remaining = max(0, parse_int(current.get("quantity")) - sold)
                if self.store.update(INVENTORY_TABLE, card_id, {"quantity": remaining}):
                    return remaining
                raise ReconciliationError(
                    sale_id, card_id, attempt, "card no longer exists"
                )
            except StoreOperationError as e:
                reason = str(e)
                LOGGER.debug(
                    f"Decrement of card {card_id} failed "
                    f"(attempt {attempt}/{self.attempts}): {e}"
                )

        raise ReconciliationError(sale_id, card_id, self.attempts, reason)
