"""Watchlist command handlers for the pokeinventory CLI."""

import argparse

from pokeinventory.cli.helpers import confirm, euro, log_rows
from pokeinventory.config import DEFAULT_WATCH_SOURCE
from pokeinventory.forms import WatchItemForm
from pokeinventory.models import WatchStatus
from pokeinventory.result import CommandResult, error, info, success
from pokeinventory.session import AppSession

STATUS_CHOICES = [status.value for status in WatchStatus]


def setup_parser(subparsers: argparse._SubParsersAction) -> None:
    """Set up the watch command parser and its subcommands."""
    watch_parser = subparsers.add_parser(
        "watch", help="Commands to manage the watchlist"
    )
    watch_subparsers = watch_parser.add_subparsers(dest="watch_command")

    add_parser = watch_subparsers.add_parser("add", help="Watch a listing")
    add_parser.add_argument("title", help="Listing title (e.g. Charizard Base Set NM)")
    add_parser.add_argument("--link", help="Listing URL")
    add_parser.add_argument(
        "--source", default=DEFAULT_WATCH_SOURCE, help="Where the listing is"
    )
    add_parser.add_argument("--seen-price", help="Price seen (€)")
    add_parser.add_argument("--target-price", help="Price you would pay (€)")
    add_parser.add_argument(
        "--status", choices=STATUS_CHOICES, default=WatchStatus.ACTIVE.value
    )
    add_parser.add_argument("--notes", help="Notes")

    list_parser = watch_subparsers.add_parser("list", help="List watched listings")
    list_parser.add_argument("--search", help="Filter by title, source or status")
    list_parser.add_argument("--status", choices=STATUS_CHOICES)

    status_parser = watch_subparsers.add_parser(
        "status", help="Change the status of a listing"
    )
    status_parser.add_argument("id", help="Watch item id")
    status_parser.add_argument("status", choices=STATUS_CHOICES)

    delete_parser = watch_subparsers.add_parser("delete", help="Stop watching a listing")
    delete_parser.add_argument("id", help="Watch item id")
    delete_parser.add_argument(
        "--confirm", action="store_true", help="Skip confirmation prompt"
    )


def handle_command(args: argparse.Namespace, app: AppSession) -> None:
    """Route watch subcommands to their appropriate handlers."""
    handlers = {
        "add": watch_add,
        "list": watch_list,
        "status": watch_status,
        "delete": watch_delete,
    }

    handler = handlers.get(args.watch_command)
    if handler:
        result = handler(args, app)
        result.log()
        if result.exit_code != 0:
            exit(result.exit_code)
    else:
        result = error(f"Unknown watch subcommand: {args.watch_command}")
        result.log()
        exit(1)


def watch_add(args: argparse.Namespace, app: AppSession) -> CommandResult:
    form = WatchItemForm(
        title=args.title,
        link=args.link,
        source=args.source,
        seen_price_eur=args.seen_price,
        target_price_eur=args.target_price,
        status=args.status,
        notes=args.notes,
    )
    return app.watchlist_service.add_item(form)


def watch_list(args: argparse.Namespace, app: AppSession) -> CommandResult:
    app.watchlist.refresh()
    if app.watchlist.last_error is not None:
        return error(f"Could not load watchlist: {app.watchlist.last_error}")

    items = app.watchlist.search(getattr(args, "search", None))
    status = getattr(args, "status", None)
    if status:
        items = [item for item in items if item.get("status") == status]

    lines = [
        f"{item['id'][:8]:<8} | {item['title'][:34]:<34} | "
        f"{(item.get('source') or '')[:10]:<10} | {item['status']:<7} | "
        f"{euro(item.get('seen_price_eur')):>9} | {euro(item.get('target_price_eur')):>9}"
        for item in items
    ]
    log_rows(
        f"{'Id':<8} | {'Title':<34} | {'Source':<10} | {'Status':<7} | "
        f"{'Seen':>9} | {'Target':>9}",
        lines,
        "No watched listings found.",
    )
    return success()


def watch_status(args: argparse.Namespace, app: AppSession) -> CommandResult:
    return app.watchlist_service.set_status(args.id, args.status)


def watch_delete(args: argparse.Namespace, app: AppSession) -> CommandResult:
    if not confirm(f"Stop watching {args.id}?", args.confirm):
        return info("Operation cancelled")
    return app.watchlist_service.remove(args.id)
