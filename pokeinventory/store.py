from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pokeinventory.changes import ChangeCallback, ChangeFeed, Subscription
from pokeinventory.config import LOGGER
from pokeinventory.errors import StoreOperationError, UnknownTableError
from pokeinventory.models import TABLE_MODELS, Base

Row = dict[str, Any]

# Columns assigned by the store, never taken from callers
_STORE_MANAGED = frozenset({"id", "created_at", "updated_at"})


def row_to_dict(obj: Base) -> Row:
    """Copy a mapped object's column values into a plain dict."""
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}


class Store:
    """
    Table-addressed access to the database.

    Every failure is raised as StoreOperationError. Change notifications
    are delivered through the ChangeFeed passed in.
    """

    def __init__(
        self,
        sessionmaker_: sessionmaker[Session],
        feed: ChangeFeed,
        models: Mapping[str, type[Base]] = TABLE_MODELS,
    ) -> None:
        self.Session: sessionmaker[Session] = sessionmaker_
        self.feed = feed
        self.models = dict(models)

    def model_for(self, table: str) -> type[Base]:
        try:
            return self.models[table]
        except KeyError:
            raise UnknownTableError(table) from None

    def _writable(self, model: type[Base], values: Mapping[str, Any]) -> Row:
        columns = model.__table__.columns.keys()
        unknown = set(values) - set(columns)
        if unknown:
            raise StoreOperationError(
                "write", model.__tablename__, f"unknown columns {sorted(unknown)}"
            )
        return {k: v for k, v in values.items() if k not in _STORE_MANAGED}

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        """Return every row of `table` matching `filters`, in the requested order."""
        model = self.model_for(table)
        stmt = select(model)
        try:
            for key, value in (filters or {}).items():
                stmt = stmt.where(getattr(model, key) == value)
            if order_by:
                column = getattr(model, order_by)
                stmt = stmt.order_by(column.desc() if descending else column.asc())
        except AttributeError as e:
            raise StoreOperationError("select", table, str(e)) from e

        try:
            with self.Session() as session:
                return [row_to_dict(obj) for obj in session.scalars(stmt).all()]
        except SQLAlchemyError as e:
            raise StoreOperationError("select", table, str(e)) from e

    def get(self, table: str, row_id: str) -> Row | None:
        """Fetch a single row by id."""
        model = self.model_for(table)
        try:
            with self.Session() as session:
                obj = session.get(model, row_id)
                return row_to_dict(obj) if obj is not None else None
        except SQLAlchemyError as e:
            raise StoreOperationError("get", table, str(e)) from e

    def insert(self, table: str, row: Mapping[str, Any]) -> str:
        """Insert a row and return the id the store assigned to it."""
        model = self.model_for(table)
        values = self._writable(model, row)
        try:
            with self.Session.begin() as session:
                obj = model(**values)
                session.add(obj)
                session.flush()
                new_id = obj.id
        except (SQLAlchemyError, OverflowError) as e:
            raise StoreOperationError("insert", table, str(e)) from e

        LOGGER.debug(f"Inserted {table}/{new_id}")
        return new_id

    def update(self, table: str, row_id: str, patch: Mapping[str, Any]) -> bool:
        """
        Apply a partial update to one row.
        Returns False if no row has that id.
        """
        model = self.model_for(table)
        values = self._writable(model, patch)
        try:
            with self.Session.begin() as session:
                obj = session.get(model, row_id)
                if obj is None:
                    return False
                for key, value in values.items():
                    setattr(obj, key, value)
        except (SQLAlchemyError, OverflowError) as e:
            raise StoreOperationError("update", table, str(e)) from e

        LOGGER.debug(f"Updated {table}/{row_id}: {sorted(values)}")
        return True

    def delete(self, table: str, row_id: str) -> bool:
        """Delete one row. Returns False if no row has that id."""
        model = self.model_for(table)
        try:
            with self.Session.begin() as session:
                obj = session.get(model, row_id)
                if obj is None:
                    return False
                session.delete(obj)
        except SQLAlchemyError as e:
            raise StoreOperationError("delete", table, str(e)) from e

        LOGGER.debug(f"Deleted {table}/{row_id}")
        return True

    def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        """Call `callback(table)` whenever `table` changes."""
        self.model_for(table)
        return self.feed.subscribe(table, callback)

    def unsubscribe(self, subscription: Subscription) -> None:
        self.feed.unsubscribe(subscription)
