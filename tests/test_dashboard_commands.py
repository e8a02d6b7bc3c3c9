"""Tests for the dashboard CLI command."""

from unittest.mock import MagicMock, patch

from pokeinventory.cli.cli import parse_args
from pokeinventory.cli.commands.dashboard import (
    dashboard_follow,
    dashboard_show,
    handle_command,
    log_metrics,
)
from pokeinventory.errors import StoreOperationError
from pokeinventory.metrics import DashboardMetrics
from pokeinventory.result import CommandResult


def _logged(mock_logger):
    return [call[0][0] for call in mock_logger["info"].call_args_list]


class TestDashboardHandleCommand:
    def test_show_by_default(self, capture_exits):
        args = parse_args(["dashboard"])
        app = MagicMock()

        with patch(
            "pokeinventory.cli.commands.dashboard.dashboard_show",
            return_value=CommandResult(success=True),
        ) as mock_show:
            handle_command(args, app)

        mock_show.assert_called_once_with(args, app)
        capture_exits.assert_not_called()

    def test_follow(self, capture_exits):
        args = parse_args(["dashboard", "--follow"])

        with patch(
            "pokeinventory.cli.commands.dashboard.dashboard_follow",
            return_value=CommandResult(success=False, message="x"),
        ) as mock_follow:
            handle_command(args, MagicMock())

        mock_follow.assert_called_once()
        capture_exits.assert_called_once_with(1)


class TestLogMetrics:
    def test_orphaned_sales_only_when_present(self, mock_logger):
        log_metrics(DashboardMetrics(total_quantity=3, total_cost=25))

        logged = _logged(mock_logger)
        assert "Cards held:            3" in logged
        assert "Inventory cost:        €25.00" in logged
        assert not any("deleted cards" in line for line in logged)

        log_metrics(DashboardMetrics(orphaned_sales=2))
        assert "Sales of deleted cards: 2" in _logged(mock_logger)


class TestDashboardShow:
    def test_show(self, cli_app, mock_logger):
        card_id = cli_app.store.insert(
            "inventory_cards", {"name": "Charizard", "quantity": 2, "buy_price_eur": 10}
        )
        cli_app.store.insert(
            "sales",
            {"inventory_id": card_id, "card_name_snapshot": "Charizard", "sold_price_eur": 30},
        )
        cli_app.store.insert("watchlist", {"title": "Lugia"})

        result = dashboard_show(parse_args(["dashboard"]), cli_app)

        assert result.success is True
        logged = _logged(mock_logger)
        assert "Cards held:            2" in logged
        assert "Sales revenue:         €30.00" in logged
        assert "Active watchlist:      1" in logged

    def test_show_store_failure(self, cli_app, mock_logger):
        with patch.object(
            cli_app.store,
            "select",
            side_effect=StoreOperationError("select", "inventory_cards", "locked"),
        ):
            result = dashboard_show(parse_args(["dashboard"]), cli_app)

        assert result.success is False
        assert "locked" in result.message


class TestDashboardFollow:
    def test_follow_until_interrupted(self, cli_app, mock_logger):
        args = parse_args(["dashboard", "--follow", "--interval", "0.01"])

        with patch(
            "pokeinventory.cli.commands.dashboard.time.sleep",
            side_effect=KeyboardInterrupt,
        ):
            result = dashboard_follow(args, cli_app)

        assert result.message == "Stopped following changes"
        assert cli_app.feed.running is True
        assert cli_app.poller is not None
        assert "Cards held:            0" in _logged(mock_logger)

    def test_follow_prints_again_on_change(self, cli_app, mock_logger):
        args = parse_args(["dashboard", "--follow", "--interval", "0.01"])

        def write_then_stop(seconds):
            cli_app.store.insert("inventory_cards", {"name": "Mew", "quantity": 4})
            cli_app.feed.flush()
            raise KeyboardInterrupt

        with patch(
            "pokeinventory.cli.commands.dashboard.time.sleep",
            side_effect=write_then_stop,
        ):
            dashboard_follow(args, cli_app)

        assert "Cards held:            4" in _logged(mock_logger)

    def test_follow_stops_printing_after_interrupt(self, cli_app, mock_logger):
        args = parse_args(["dashboard", "--follow", "--interval", "0.01"])

        with patch(
            "pokeinventory.cli.commands.dashboard.time.sleep",
            side_effect=KeyboardInterrupt,
        ):
            dashboard_follow(args, cli_app)

        mock_logger["info"].reset_mock()
        cli_app.store.insert("inventory_cards", {"name": "Mew", "quantity": 4})
        cli_app.feed.flush()

        assert cli_app.dashboard.metrics.total_quantity == 4
        mock_logger["info"].assert_not_called()
