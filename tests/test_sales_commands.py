"""Tests for sales CLI commands."""

import argparse
from unittest.mock import MagicMock, patch

import pytest

from pokeinventory.cli.cli import parse_args
from pokeinventory.cli.commands.sales import (
    handle_command,
    sales_delete,
    sales_list,
    sales_record,
)
from pokeinventory.result import CommandResult, MessageType


@pytest.fixture
def card_id(cli_app):
    return cli_app.store.insert(
        "inventory_cards", {"name": "Charizard", "quantity": 5, "buy_price_eur": 10}
    )


class TestSalesHandleCommand:
    @pytest.mark.parametrize(
        "subcommand,handler_name",
        [
            ("record", "sales_record"),
            ("list", "sales_list"),
            ("delete", "sales_delete"),
        ],
    )
    def test_handle_command_valid(self, subcommand, handler_name, capture_exits):
        args = argparse.Namespace(sales_command=subcommand)
        app = MagicMock()

        with patch(f"pokeinventory.cli.commands.sales.{handler_name}") as mock_handler:
            mock_handler.return_value = CommandResult(success=True)

            handle_command(args, app)

            mock_handler.assert_called_once_with(args, app)
            capture_exits.assert_not_called()

    def test_handle_command_unknown(self, capture_exits):
        handle_command(argparse.Namespace(sales_command="unknown"), MagicMock())

        capture_exits.assert_called_once_with(1)


class TestSalesRecord:
    def test_record_for_card(self, cli_app, card_id):
        args = parse_args(
            ["sales", "record", "--card-id", card_id, "--quantity", "2", "--price", "50"]
        )

        result = sales_record(args, cli_app)

        assert result.message_type == MessageType.SUCCESS
        assert result.message == "Recorded sale of 2x Charizard (profit €30.00)"
        assert cli_app.store.get("inventory_cards", card_id)["quantity"] == 3

    def test_record_more_than_stock(self, cli_app, card_id):
        args = parse_args(["sales", "record", "--card-id", card_id, "--quantity", "10"])

        sales_record(args, cli_app)

        assert cli_app.store.get("inventory_cards", card_id)["quantity"] == 0

    def test_record_by_name(self, cli_app, card_id):
        args = parse_args(["sales", "record", "--name", "Mew", "--platform", "Vinted"])

        result = sales_record(args, cli_app)

        assert result.success is True
        sale = cli_app.store.get("sales", result.data.sale_id)
        assert sale["inventory_id"] is None
        assert sale["platform"] == "Vinted"
        assert cli_app.store.get("inventory_cards", card_id)["quantity"] == 5

    def test_record_unknown_card(self, cli_app):
        args = parse_args(["sales", "record", "--card-id", "missing"])

        result = sales_record(args, cli_app)

        assert result.success is False
        assert cli_app.store.select("sales") == []

    def test_preview_writes_nothing(self, cli_app, card_id, mock_logger):
        args = parse_args(
            ["sales", "record", "--card-id", card_id, "--quantity", "2",
             "--price", "15", "--preview"]
        )

        result = sales_record(args, cli_app)

        assert result.success is True
        logged = [call[0][0] for call in mock_logger["info"].call_args_list]
        assert logged == ["Estimated cost: €20.00", "Profit: €-5.00"]
        assert cli_app.store.select("sales") == []
        assert cli_app.store.get("inventory_cards", card_id)["quantity"] == 5

    def test_preview_unknown_card(self, cli_app):
        args = parse_args(["sales", "record", "--card-id", "missing", "--preview"])

        assert sales_record(args, cli_app).success is False


class TestSalesListDelete:
    def test_list(self, cli_app, card_id, mock_logger):
        sales_record(parse_args(["sales", "record", "--card-id", card_id]), cli_app)
        sales_record(parse_args(["sales", "record", "--name", "Mew"]), cli_app)

        result = sales_list(parse_args(["sales", "list", "--search", "mew"]), cli_app)

        assert result.success is True
        logged = "\n".join(call[0][0] for call in mock_logger["info"].call_args_list)
        assert "Mew" in logged
        assert "Charizard" not in logged

    def test_list_empty(self, cli_app, mock_logger):
        sales_list(parse_args(["sales", "list"]), cli_app)

        mock_logger["info"].assert_called_once_with("No sales recorded.")

    def test_delete_keeps_inventory(self, cli_app, card_id):
        sale = sales_record(
            parse_args(["sales", "record", "--card-id", card_id, "--quantity", "2"]), cli_app
        ).data

        result = sales_delete(parse_args(["sales", "delete", sale.sale_id, "--confirm"]), cli_app)

        assert result.success is True
        assert cli_app.store.get("sales", sale.sale_id) is None
        assert cli_app.store.get("inventory_cards", card_id)["quantity"] == 3

    def test_delete_missing(self, cli_app):
        result = sales_delete(parse_args(["sales", "delete", "missing", "--confirm"]), cli_app)

        assert result.success is False

    def test_delete_cancelled(self, cli_app, card_id):
        sale = sales_record(parse_args(["sales", "record", "--card-id", card_id]), cli_app).data

        with patch("builtins.input", return_value="n"):
            result = sales_delete(parse_args(["sales", "delete", sale.sale_id]), cli_app)

        assert result.success is True
        assert result.message_type == MessageType.INFO
        assert result.message == "Operation cancelled"
        assert cli_app.store.get("sales", sale.sale_id) is not None
