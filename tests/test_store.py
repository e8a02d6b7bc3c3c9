"""Tests for the table-addressed store."""

from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from pokeinventory.changes import ChangeFeed
from pokeinventory.errors import StoreOperationError, UnknownTableError
from pokeinventory.store import Store


class TestStoreCrud:
    def test_insert_assigns_id_and_timestamps(self, store):
        card_id = store.insert("inventory_cards", {"name": "Charizard", "quantity": 2})

        row = store.get("inventory_cards", card_id)
        assert row["id"] == card_id
        assert row["name"] == "Charizard"
        assert row["quantity"] == 2
        assert row["variant"] == "normal"
        assert row["created_at"] is not None
        assert row["updated_at"] is not None

    def test_insert_ignores_caller_supplied_id(self, store):
        card_id = store.insert("inventory_cards", {"id": "mine", "name": "Mew"})

        assert card_id != "mine"

    def test_insert_unknown_column_raises(self, store):
        with pytest.raises(StoreOperationError) as exc_info:
            store.insert("inventory_cards", {"name": "Mew", "rarity": "promo"})

        assert "rarity" in str(exc_info.value)

    def test_select_returns_plain_dicts(self, store):
        store.insert("watchlist", {"title": "Lugia"})

        rows = store.select("watchlist")

        assert len(rows) == 1
        assert isinstance(rows[0], dict)
        assert rows[0]["status"] == "active"

    def test_select_filters_and_orders(self, store):
        store.insert("inventory_cards", {"name": "Blastoise", "condition": "NM"})
        store.insert("inventory_cards", {"name": "Abra", "condition": "NM"})
        store.insert("inventory_cards", {"name": "Charizard", "condition": "EX"})

        rows = store.select("inventory_cards", {"condition": "NM"}, order_by="name")
        assert [row["name"] for row in rows] == ["Abra", "Blastoise"]

        rows = store.select("inventory_cards", order_by="name", descending=True)
        assert [row["name"] for row in rows] == ["Charizard", "Blastoise", "Abra"]

    def test_select_unknown_order_column_raises(self, store):
        with pytest.raises(StoreOperationError):
            store.select("inventory_cards", order_by="rarity")

    def test_update_patches_row(self, store):
        card_id = store.insert("inventory_cards", {"name": "Mew", "quantity": 5})

        assert store.update("inventory_cards", card_id, {"quantity": 3}) is True
        assert store.get("inventory_cards", card_id)["quantity"] == 3

    def test_update_missing_row(self, store):
        assert store.update("inventory_cards", "missing", {"quantity": 3}) is False

    def test_integer_too_large_for_column_raises(self, store):
        with pytest.raises(StoreOperationError):
            store.insert("inventory_cards", {"name": "Mew", "quantity": 10**30})

        card_id = store.insert("inventory_cards", {"name": "Mew"})
        with pytest.raises(StoreOperationError):
            store.update("inventory_cards", card_id, {"quantity": 10**30})

    def test_delete(self, store):
        sale_id = store.insert("sales", {"card_name_snapshot": "Mew"})

        assert store.delete("sales", sale_id) is True
        assert store.get("sales", sale_id) is None
        assert store.delete("sales", sale_id) is False

    def test_unknown_table(self, store):
        with pytest.raises(UnknownTableError):
            store.select("cards")


class TestStoreFailures:
    @pytest.fixture
    def failing_store(self):
        failure = OperationalError("SELECT", {}, Exception("database is locked"))
        mock_sessionmaker = Mock(spec=sessionmaker)
        mock_session = Mock(spec=Session)
        mock_session.scalars.side_effect = failure
        mock_session.get.side_effect = failure
        mock_sessionmaker.return_value.__enter__ = Mock(return_value=mock_session)
        mock_sessionmaker.return_value.__exit__ = Mock(return_value=None)
        mock_sessionmaker.begin.return_value.__enter__ = Mock(return_value=mock_session)
        mock_sessionmaker.begin.return_value.__exit__ = Mock(return_value=None)
        return Store(mock_sessionmaker, ChangeFeed())

    @pytest.mark.parametrize(
        "call,operation",
        [
            (lambda s: s.select("sales"), "select"),
            (lambda s: s.get("sales", "x"), "get"),
            (lambda s: s.update("sales", "x", {"notes": "n"}), "update"),
            (lambda s: s.delete("sales", "x"), "delete"),
        ],
    )
    def test_database_errors_wrapped(self, failing_store, call, operation):
        with pytest.raises(StoreOperationError) as exc_info:
            call(failing_store)

        assert exc_info.value.operation == operation
        assert exc_info.value.table == "sales"
        assert "database is locked" in exc_info.value.reason


class TestStoreSubscriptions:
    def test_subscribe_registers_on_feed(self, store, feed):
        subscription = store.subscribe("sales", Mock())

        assert feed.subscriber_count("sales") == 1

        store.unsubscribe(subscription)
        assert feed.subscriber_count("sales") == 0

    def test_subscribe_unknown_table(self, store):
        with pytest.raises(UnknownTableError):
            store.subscribe("cards", Mock())
