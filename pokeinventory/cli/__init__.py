"""Command modules for the pokeinventory CLI."""

from .commands import dashboard, inventory, sales, watch

# Registry of all command modules
COMMAND_MODULES = [
    inventory,  # Cards owned (add, update, delete, list, import)
    sales,  # Sales history (record, delete, list)
    watch,  # Watchlist (add, status, delete, list)
    dashboard,  # Totals, optionally following live changes
]


def setup_all_parsers(subparsers):
    """Set up all command parsers by calling each module's setup_parser function."""
    for module in COMMAND_MODULES:
        module.setup_parser(subparsers)
