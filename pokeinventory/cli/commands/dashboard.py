"""Dashboard command for the pokeinventory CLI."""

import argparse
import time

from pokeinventory.cli.helpers import euro
from pokeinventory.config import LOGGER, POLL_INTERVAL_SECONDS
from pokeinventory.metrics import DashboardMetrics
from pokeinventory.result import CommandResult, error, success
from pokeinventory.session import AppSession


def setup_parser(subparsers: argparse._SubParsersAction) -> None:
    dashboard_parser = subparsers.add_parser(
        "dashboard", help="Show inventory, sales and watchlist totals"
    )
    dashboard_parser.add_argument(
        "--follow",
        action="store_true",
        help="Keep running and print the totals again whenever data changes",
    )
    dashboard_parser.add_argument(
        "--interval",
        type=float,
        default=POLL_INTERVAL_SECONDS,
        help="Seconds between checks for changes made elsewhere (with --follow)",
    )


def handle_command(args: argparse.Namespace, app: AppSession) -> None:
    result = dashboard_follow(args, app) if args.follow else dashboard_show(args, app)
    result.log()
    if result.exit_code != 0:
        exit(result.exit_code)


def log_metrics(metrics: DashboardMetrics) -> None:
    LOGGER.info(f"Cards held:            {metrics.total_quantity}")
    LOGGER.info(f"Inventory cost:        {euro(metrics.total_cost)}")
    LOGGER.info(f"Current value:         {euro(metrics.total_current_value)}")
    LOGGER.info(f"Sales revenue:         {euro(metrics.total_revenue)}")
    LOGGER.info(f"Fees paid:             {euro(metrics.total_fees)}")
    LOGGER.info(f"Active watchlist:      {metrics.active_watch_count}")
    if metrics.orphaned_sales:
        LOGGER.info(f"Sales of deleted cards: {metrics.orphaned_sales}")


def dashboard_show(args: argparse.Namespace, app: AppSession) -> CommandResult:
    for model in app.dashboard.sources:
        model.refresh()
        if model.last_error is not None:
            return error(f"Could not load {model.table}: {model.last_error}")

    log_metrics(app.dashboard.recompute())
    return success()


def dashboard_follow(args: argparse.Namespace, app: AppSession) -> CommandResult:
    """Print the totals, then again after every change until interrupted."""
    app.start(poll=True, interval=args.interval)
    log_metrics(app.dashboard.metrics)
    remove_listener = app.dashboard.add_listener(log_metrics)

    try:
        while True:
            time.sleep(args.interval)
    except KeyboardInterrupt:
        pass
    finally:
        remove_listener()

    return success("Stopped following changes")
