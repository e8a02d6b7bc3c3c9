from __future__ import annotations

from typing import Any

from pokeinventory.config import INVENTORY_TABLE, LOGGER
from pokeinventory.errors import StoreOperationError, ValidationRejection
from pokeinventory.forms import InventoryForm, inventory_patch
from pokeinventory.readmodels import InventoryReadModel
from pokeinventory.result import CommandResult, error, success, warning
from pokeinventory.store import Store


class InventoryService:
    """
    Commands on inventory cards. Each successful mutation reloads the
    inventory read-model.
    """

    def __init__(self, store: Store, items: InventoryReadModel) -> None:
        self.store = store
        self.items = items

    def add_item(self, form: InventoryForm) -> CommandResult:
        """Add a card. Nothing is sent to the store if the name is blank."""
        payload = form.to_payload()
        if payload is None:
            return error(str(ValidationRejection("name")))

        try:
            card_id = self.store.insert(INVENTORY_TABLE, payload)
        except StoreOperationError as e:
            return error(f"Could not add '{payload['name']}': {e}")

        self.items.refresh()
        return success(f"Added {payload['quantity']}x {payload['name']}", data=card_id)

    def update_item(self, card_id: str, changes: dict[str, Any]) -> CommandResult:
        """Apply edited fields to an existing card."""
        patch = inventory_patch(changes)
        if patch is None:
            return error(str(ValidationRejection("name")))
        if not patch:
            return error("No fields to update")

        try:
            found = self.store.update(INVENTORY_TABLE, card_id, patch)
        except StoreOperationError as e:
            return error(f"Could not update card {card_id}: {e}")
        if not found:
            return error(f"Card {card_id} not found")

        self.items.refresh()
        return success(f"Updated card {card_id}", data=card_id)

    def remove(self, card_id: str) -> CommandResult:
        """
        Delete a card. Sales that reference it are left untouched and keep
        their name snapshot.
        """
        try:
            found = self.store.delete(INVENTORY_TABLE, card_id)
        except StoreOperationError as e:
            return error(f"Could not delete card {card_id}: {e}")
        if not found:
            return error(f"Card {card_id} not found")

        self.items.refresh()
        return success(f"Deleted card {card_id}")

    def import_items(self, entries: list[dict[str, Any]]) -> CommandResult:
        """Add several cards at once, e.g. from an import file."""
        added: list[str] = []
        problems: list[str] = []

        for index, entry in enumerate(entries, start=1):
            payload = InventoryForm.from_mapping(entry).to_payload()
            if payload is None:
                problems.append(f"entry {index}: {ValidationRejection('name')}")
                continue
            try:
                added.append(self.store.insert(INVENTORY_TABLE, payload))
            except StoreOperationError as e:
                problems.append(f"entry {index} ('{payload['name']}'): {e}")

        if added:
            self.items.refresh()

        for problem in problems:
            LOGGER.debug(f"Import skipped {problem}")

        if problems and not added:
            return error(
                "No cards imported:\n" + "\n".join(problems), data=added
            )
        if problems:
            return warning(
                f"Imported {len(added)} card(s), skipped {len(problems)}:\n"
                + "\n".join(problems),
                data=added,
            )
        return success(f"Imported {len(added)} card(s)", data=added)
