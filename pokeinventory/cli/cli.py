import argparse

from pokeinventory.cli import COMMAND_MODULES, setup_all_parsers
from pokeinventory.config import LOGGER
from pokeinventory.db import Session, initialize_database
from pokeinventory.session import AppSession

# Sub-command attribute set by each command module's parser
SUBCOMMAND_DESTS = {
    "inventory": "inventory_command",
    "sales": "sales_command",
    "watch": "watch_command",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments using modular command parsers."""
    parser = argparse.ArgumentParser(
        prog="pokeinventory",
        description="Track a card collection: inventory, sales and watchlist",
    )
    parser.formatter_class = argparse.RawDescriptionHelpFormatter

    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    setup_all_parsers(subparsers)

    return parser.parse_args(argv)


def validate_args(args: argparse.Namespace) -> str | None:
    """
    Validate the parsed arguments.
    Returns an error message if validation fails, None otherwise.
    """
    if not args.command:
        return "No command specified. Use --help to see available commands."

    dest = SUBCOMMAND_DESTS.get(args.command)
    if dest and not getattr(args, dest, None):
        return (
            f"No {args.command} subcommand specified. "
            f"Use '{args.command} --help' to see available subcommands."
        )

    return None


def route_command(args: argparse.Namespace) -> None:
    """Route parsed arguments to the appropriate command handler."""
    if not initialize_database():
        LOGGER.error("Failed to initialize database")
        return

    modules = {module.__name__.rsplit(".", 1)[-1]: module for module in COMMAND_MODULES}
    module = modules.get(args.command)
    if module is None:
        LOGGER.error(f"Unknown command: {args.command}")
        LOGGER.error("Use --help to see available commands.")
        return

    with AppSession(Session) as app:
        module.handle_command(args, app)
