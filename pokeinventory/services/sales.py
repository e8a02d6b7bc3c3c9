from pokeinventory.config import SALES_TABLE
from pokeinventory.errors import StoreOperationError
from pokeinventory.readmodels import SalesReadModel
from pokeinventory.result import CommandResult, error, success
from pokeinventory.store import Store


class SalesService:
    """
    Commands on recorded sales. Recording a sale lives in
    SaleRecordingWorkflow because it also touches the inventory.
    """

    def __init__(self, store: Store, sales: SalesReadModel) -> None:
        self.store = store
        self.sales = sales

    def remove(self, sale_id: str) -> CommandResult:
        """Delete a sale. The sold quantity is not put back into the inventory."""
        try:
            found = self.store.delete(SALES_TABLE, sale_id)
        except StoreOperationError as e:
            return error(f"Could not delete sale {sale_id}: {e}")
        if not found:
            return error(f"Sale {sale_id} not found")

        self.sales.refresh()
        return success(f"Deleted sale {sale_id}")
