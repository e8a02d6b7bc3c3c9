from pokeinventory.config import WATCHLIST_TABLE
from pokeinventory.errors import (
    InvalidStatusError,
    StoreOperationError,
    ValidationRejection,
)
from pokeinventory.forms import WatchItemForm, parse_status
from pokeinventory.models import WatchStatus
from pokeinventory.readmodels import WatchlistReadModel
from pokeinventory.result import CommandResult, error, success
from pokeinventory.store import Store

ALLOWED_STATUSES = [status.value for status in WatchStatus]


class WatchlistService:
    """Commands on watchlist items."""

    def __init__(self, store: Store, items: WatchlistReadModel) -> None:
        self.store = store
        self.items = items

    def add_item(self, form: WatchItemForm) -> CommandResult:
        try:
            payload = form.to_payload()
        except ValueError:
            return error(str(InvalidStatusError(str(form.status), ALLOWED_STATUSES)))
        if payload is None:
            return error(str(ValidationRejection("title")))

        try:
            item_id = self.store.insert(WATCHLIST_TABLE, payload)
        except StoreOperationError as e:
            return error(f"Could not add '{payload['title']}': {e}")

        self.items.refresh()
        return success(f"Watching '{payload['title']}'", data=item_id)

    def set_status(self, item_id: str, status: WatchStatus | str) -> CommandResult:
        """
        Move an item to any status. No transition rules apply; setting the
        status an item already has changes nothing.
        """
        try:
            new_status = parse_status(status)
        except ValueError:
            return error(str(InvalidStatusError(str(status), ALLOWED_STATUSES)))

        try:
            current = self.store.get(WATCHLIST_TABLE, item_id)
            if current is None:
                return error(f"Watch item {item_id} not found")
            if current.get("status") == new_status.value:
                return success(
                    f"Watch item {item_id} is already {new_status.value}",
                    data=item_id,
                )
            found = self.store.update(
                WATCHLIST_TABLE, item_id, {"status": new_status.value}
            )
        except StoreOperationError as e:
            return error(f"Could not update watch item {item_id}: {e}")
        if not found:
            return error(f"Watch item {item_id} not found")

        self.items.refresh()
        return success(f"Watch item {item_id} marked {new_status.value}", data=item_id)

    def remove(self, item_id: str) -> CommandResult:
        try:
            found = self.store.delete(WATCHLIST_TABLE, item_id)
        except StoreOperationError as e:
            return error(f"Could not delete watch item {item_id}: {e}")
        if not found:
            return error(f"Watch item {item_id} not found")

        self.items.refresh()
        return success(f"Deleted watch item {item_id}")
