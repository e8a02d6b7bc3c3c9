"""Sales command handlers for the pokeinventory CLI."""

import argparse

from pokeinventory.cli.helpers import confirm, euro, log_rows
from pokeinventory.config import DEFAULT_PLATFORM, LOGGER, PLATFORMS
from pokeinventory.forms import SaleForm
from pokeinventory.result import CommandResult, error, info, success
from pokeinventory.session import AppSession


def setup_parser(subparsers: argparse._SubParsersAction) -> None:
    """Set up the sales command parser and its subcommands."""
    sales_parser = subparsers.add_parser("sales", help="Commands to record sales")
    sales_subparsers = sales_parser.add_subparsers(dest="sales_command")

    record_parser = sales_subparsers.add_parser(
        "record", help="Record a sale (lowers the card quantity when --card-id is used)"
    )
    source = record_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--card-id", help="Inventory card that was sold")
    source.add_argument("--name", help="Card name, for cards not in the inventory")
    record_parser.add_argument("--quantity", default="1", help="Copies sold")
    record_parser.add_argument(
        "--platform",
        default=DEFAULT_PLATFORM,
        help=f"Where it was sold ({', '.join(PLATFORMS)})",
    )
    record_parser.add_argument("--price", default="0", help="Sale price (€)")
    record_parser.add_argument("--shipping", default="0", help="Shipping charged (€)")
    record_parser.add_argument("--fees", default="0", help="Fees paid (€)")
    record_parser.add_argument("--notes", help="Notes")
    record_parser.add_argument(
        "--preview",
        action="store_true",
        help="Only show the estimated cost and profit",
    )

    list_parser = sales_subparsers.add_parser("list", help="List recorded sales")
    list_parser.add_argument("--search", help="Filter by card name, platform or notes")

    delete_parser = sales_subparsers.add_parser(
        "delete", help="Delete a sale (the inventory is not restored)"
    )
    delete_parser.add_argument("id", help="Sale id")
    delete_parser.add_argument(
        "--confirm", action="store_true", help="Skip confirmation prompt"
    )


def handle_command(args: argparse.Namespace, app: AppSession) -> None:
    """Route sales subcommands to their appropriate handlers."""
    handlers = {
        "record": sales_record,
        "list": sales_list,
        "delete": sales_delete,
    }

    handler = handlers.get(args.sales_command)
    if handler:
        result = handler(args, app)
        result.log()
        if result.exit_code != 0:
            exit(result.exit_code)
    else:
        result = error(f"Unknown sales subcommand: {args.sales_command}")
        result.log()
        exit(1)


def _form_from_args(args: argparse.Namespace) -> SaleForm:
    return SaleForm(
        inventory_id=args.card_id,
        card_name_snapshot=args.name or "",
        quantity=args.quantity,
        platform=args.platform,
        sold_price_eur=args.price,
        shipping_eur=args.shipping,
        fees_eur=args.fees,
        notes=args.notes,
    )


def sales_record(args: argparse.Namespace, app: AppSession) -> CommandResult:
    form = _form_from_args(args)

    if args.preview:
        app.inventory.refresh()
        if form.inventory_id and app.inventory.find(form.inventory_id) is None:
            return error(f"Card {form.inventory_id} not found")
        estimate = app.sale_recording.preview(form)
        sign = "+" if estimate.profit >= 0 else ""
        LOGGER.info(f"Estimated cost: {euro(estimate.cost)}")
        LOGGER.info(f"Profit: {sign}{euro(estimate.profit)}")
        return success()

    return app.sale_recording.record_sale(form)


def sales_list(args: argparse.Namespace, app: AppSession) -> CommandResult:
    app.sales.refresh()
    if app.sales.last_error is not None:
        return error(f"Could not load sales: {app.sales.last_error}")

    sales = app.sales.search(getattr(args, "search", None))
    lines = [
        f"{sale['id'][:8]:<8} | {sale['sold_at']:%Y-%m-%d} | "
        f"{sale['card_name_snapshot'][:30]:<30} | {sale['quantity']:>3} | "
        f"{(sale.get('platform') or '?')[:10]:<10} | {euro(sale['sold_price_eur']):>9} | "
        f"{euro(sale['shipping_eur']):>8} | {euro(sale['fees_eur']):>8}"
        for sale in sales
    ]
    log_rows(
        f"{'Id':<8} | {'Sold':<10} | {'Card':<30} | {'Qty':>3} | {'Platform':<10} | "
        f"{'Price':>9} | {'Ship':>8} | {'Fees':>8}",
        lines,
        "No sales recorded.",
    )
    return success()


def sales_delete(args: argparse.Namespace, app: AppSession) -> CommandResult:
    if not confirm(f"Delete sale {args.id}?", args.confirm):
        return info("Operation cancelled")
    return app.sales_service.remove(args.id)
