"""Inventory command handlers for the pokeinventory CLI."""

import argparse

from pokeinventory.cli.helpers import confirm, euro, load_import_file, log_rows
from pokeinventory.config import CONDITIONS, VARIANTS
from pokeinventory.forms import InventoryForm
from pokeinventory.result import CommandResult, error, info, success
from pokeinventory.session import AppSession

# CLI option -> inventory field, shared by `add` and `update`
FIELD_OPTIONS = {
    "set_name": ("--set", "Set name (e.g. Base Set)"),
    "card_number": ("--number", "Card number (e.g. 4/102)"),
    "variant": ("--variant", f"Variant ({', '.join(VARIANTS)})"),
    "language": ("--language", "Language code (default IT)"),
    "condition": ("--condition", f"Condition ({', '.join(CONDITIONS)})"),
    "grade_company": ("--grade-company", "Grading company"),
    "grade_value": ("--grade-value", "Grade"),
    "quantity": ("--quantity", "Number of copies held"),
    "buy_price_eur": ("--buy-price", "Purchase price per copy (€)"),
    "buy_date": ("--buy-date", "Purchase date (YYYY-MM-DD)"),
    "current_value_eur": ("--current-value", "Current value per copy (€)"),
    "target_value_eur": ("--target-value", "Target value per copy (€)"),
    "location": ("--location", "Where the card is kept (binder/box)"),
    "tags": ("--tags", "Tags (e.g. vintage, zard)"),
    "notes": ("--notes", "Notes"),
    "image_url": ("--image-url", "Photo URL"),
}


def _add_field_options(parser: argparse.ArgumentParser) -> None:
    for field, (flag, help_text) in FIELD_OPTIONS.items():
        parser.add_argument(flag, dest=field, help=help_text)
    parser.add_argument(
        "--graded",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="The card is graded (--no-graded to clear)",
    )


def _field_values(args: argparse.Namespace) -> dict:
    values = {
        field: getattr(args, field)
        for field in FIELD_OPTIONS
        if getattr(args, field, None) is not None
    }
    if getattr(args, "graded", None) is not None:
        values["graded"] = args.graded
    return values


def setup_parser(subparsers: argparse._SubParsersAction) -> None:
    """Set up the inventory command parser and its subcommands."""
    inventory_parser = subparsers.add_parser(
        "inventory", help="Commands to manage the cards you own"
    )
    inventory_subparsers = inventory_parser.add_subparsers(dest="inventory_command")

    add_parser = inventory_subparsers.add_parser("add", help="Add a card")
    add_parser.add_argument("name", help="Card name (e.g. Charizard)")
    _add_field_options(add_parser)

    list_parser = inventory_subparsers.add_parser("list", help="List cards")
    list_parser.add_argument(
        "--search", help="Filter by name, set, number or tags"
    )

    update_parser = inventory_subparsers.add_parser("update", help="Edit a card")
    update_parser.add_argument("id", help="Card id")
    update_parser.add_argument("--name", help="New card name")
    _add_field_options(update_parser)

    delete_parser = inventory_subparsers.add_parser("delete", help="Delete a card")
    delete_parser.add_argument("id", help="Card id")
    delete_parser.add_argument(
        "--confirm", action="store_true", help="Skip confirmation prompt"
    )

    import_parser = inventory_subparsers.add_parser(
        "import", help="Add cards listed in a YAML file"
    )
    import_parser.add_argument("yaml_file", help="YAML file with a 'cards' list")


def handle_command(args: argparse.Namespace, app: AppSession) -> None:
    """Route inventory subcommands to their appropriate handlers."""
    handlers = {
        "add": inventory_add,
        "list": inventory_list,
        "update": inventory_update,
        "delete": inventory_delete,
        "import": inventory_import,
    }

    handler = handlers.get(args.inventory_command)
    if handler:
        result = handler(args, app)
        result.log()
        if result.exit_code != 0:
            exit(result.exit_code)
    else:
        result = error(f"Unknown inventory subcommand: {args.inventory_command}")
        result.log()
        exit(1)


def inventory_add(args: argparse.Namespace, app: AppSession) -> CommandResult:
    form = InventoryForm(name=args.name, **_field_values(args))
    return app.inventory_service.add_item(form)


def inventory_list(args: argparse.Namespace, app: AppSession) -> CommandResult:
    app.inventory.refresh()
    if app.inventory.last_error is not None:
        return error(f"Could not load inventory: {app.inventory.last_error}")

    cards = app.inventory.search(getattr(args, "search", None))
    lines = [
        f"{card['id'][:8]:<8} | {card['name'][:30]:<30} | "
        f"{(card.get('set_name') or '')[:18]:<18} | {card.get('condition') or '':<4} | "
        f"{card['quantity']:>4} | {euro(card['buy_price_eur']):>9} | "
        f"{euro(card.get('current_value_eur')):>9}"
        for card in cards
    ]
    log_rows(
        f"{'Id':<8} | {'Name':<30} | {'Set':<18} | {'Cond':<4} | {'Qty':>4} | "
        f"{'Buy':>9} | {'Now':>9}",
        lines,
        "No cards found.",
    )
    return success(f"{len(cards)} / {len(app.inventory)} cards" if cards else None)


def inventory_update(args: argparse.Namespace, app: AppSession) -> CommandResult:
    changes = _field_values(args)
    if args.name is not None:
        changes["name"] = args.name
    return app.inventory_service.update_item(args.id, changes)


def inventory_delete(args: argparse.Namespace, app: AppSession) -> CommandResult:
    if not confirm(f"Delete card {args.id}?", args.confirm):
        return info("Operation cancelled")
    return app.inventory_service.remove(args.id)


def inventory_import(args: argparse.Namespace, app: AppSession) -> CommandResult:
    entries = load_import_file(args.yaml_file)
    if entries is None:
        return error(f"Import file '{args.yaml_file}' not found")
    if not entries:
        return error(f"No cards found in '{args.yaml_file}'")
    return app.inventory_service.import_items(entries)
