from __future__ import annotations

import weakref

from sqlalchemy import Engine, create_engine, inspect
from sqlalchemy.orm import sessionmaker

from pokeinventory.config import DB_CONNECTION_STRING, LOGGER
from pokeinventory.models import register_models
from pokeinventory.models.base import Base

# Simple module-level database setup
engine = create_engine(DB_CONNECTION_STRING)
Session = sessionmaker(engine)

# Engines already initialized in this process
_initialized_engines: weakref.WeakSet[Engine] = weakref.WeakSet()


def initialize_database(engine_: Engine | None = None) -> bool:
    """Create any missing tables. Call this once at application startup."""
    target = engine_ if engine_ is not None else engine

    if target in _initialized_engines:
        return True

    try:
        inspector = inspect(target)
        register_models()

        model_tables = Base.metadata.tables.keys()
        existing_tables = inspector.get_table_names()

        tables_to_create = set(model_tables) - set(existing_tables)

        if tables_to_create:
            LOGGER.debug(f"Creating missing database tables: {tables_to_create}")
            Base.metadata.create_all(bind=target)
        else:
            LOGGER.debug(
                f"Database already initialized with {len(model_tables)} tables"
            )

        _initialized_engines.add(target)
        return True
    except Exception as e:
        LOGGER.error(f"Error initializing database: {e}")
        return False
