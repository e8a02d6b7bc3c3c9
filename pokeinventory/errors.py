"""Exception classes for pokeinventory."""


class Error(Exception):
    """Base class for exceptions in this module."""

    pass


class StoreOperationError(Error):
    """
    Exception raised when a store call (select/insert/update/delete) fails.
    Wraps the underlying database error so callers only deal with one type.
    """

    def __init__(self, operation: str, table: str, reason: str) -> None:
        self.operation = operation
        self.table = table
        self.reason = reason

    def __str__(self) -> str:
        return f"Store {self.operation} on '{self.table}' failed: {self.reason}"


class UnknownTableError(Error):
    """Exception raised when the store is asked for a table it does not know."""

    def __init__(self, table: str) -> None:
        self.table = table

    def __str__(self) -> str:
        return f"Unknown table '{self.table}'"


class ValidationRejection(Error):
    """
    Exception raised when a submission is missing its required text field.
    Forms signal this by returning None; this type is for callers (bulk import)
    that need to report which entry was rejected.
    """

    def __init__(self, field: str) -> None:
        self.field = field

    def __str__(self) -> str:
        return f"Field '{self.field}' is required and cannot be empty"


class InvalidStatusError(Error):
    """Exception raised when a watch item status is not a known value."""

    def __init__(self, status: str, allowed: list[str]) -> None:
        self.status = status
        self.allowed = allowed

    def __str__(self) -> str:
        return (
            f"Invalid status '{self.status}'. "
            f"Allowed values: {', '.join(self.allowed)}"
        )


class ReconciliationError(Error):
    """
    Raised when a sale was stored but the matching inventory decrement
    could not be applied. Inventory and sales history have diverged.
    """

    def __init__(self, sale_id: str, card_id: str, attempts: int, reason: str) -> None:
        self.sale_id = sale_id
        self.card_id = card_id
        self.attempts = attempts
        self.reason = reason

    def __str__(self) -> str:
        return (
            f"Sale {self.sale_id} was recorded but the quantity of card "
            f"{self.card_id} could not be updated after {self.attempts} "
            f"attempt(s): {self.reason}. Please adjust the inventory manually."
        )
