"""Pytest configuration and shared fixtures for pokeinventory tests."""

import tempfile
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import yaml
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from pokeinventory.changes import ChangeFeed
from pokeinventory.config import LOGGER
from pokeinventory.models import Base
from pokeinventory.session import AppSession
from pokeinventory.store import Store


@pytest.fixture
def engine(tmp_path):
    """
    File-backed SQLite database. Each thread gets its own connection, as
    the change feed dispatches refreshes from a background thread.
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'inventory.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine)


@pytest.fixture
def feed():
    feed = ChangeFeed()
    yield feed
    feed.stop()


@pytest.fixture
def store(session_factory, feed):
    return Store(session_factory, feed)


@pytest.fixture
def app(session_factory):
    """A started AppSession over the test database."""
    app = AppSession(session_factory)
    app.start()
    yield app
    app.close()


@pytest.fixture
def cli_app(session_factory):
    """An AppSession as the CLI uses it: not started, read-models refreshed on demand."""
    with AppSession(session_factory) as app:
        yield app


@pytest.fixture
def mock_store():
    """Store double whose calls can be inspected and made to fail."""
    store = Mock(spec=Store)
    store.select.return_value = []
    store.get.return_value = None
    store.update.return_value = True
    store.delete.return_value = True
    store.insert.return_value = "new-id"
    return store


@pytest.fixture
def mock_logger():
    """Mock logger to capture log messages."""
    with (
        patch.object(LOGGER, "info") as mock_info,
        patch.object(LOGGER, "error") as mock_error,
        patch.object(LOGGER, "warning") as mock_warning,
    ):
        yield {
            "info": mock_info,
            "error": mock_error,
            "warning": mock_warning,
        }


@pytest.fixture
def temp_yaml_file():
    """Create a temporary inventory import file."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(
            {
                "cards": [
                    {"name": "Charizard", "set_name": "Base Set", "quantity": 2},
                    {"name": "Blastoise", "buy_price_eur": "35.50"},
                ]
            },
            f,
        )
        temp_path = Path(f.name)

    yield temp_path

    if temp_path.exists():
        temp_path.unlink()


@pytest.fixture(autouse=True)
def capture_exits():
    """Capture system exits to prevent tests from actually exiting."""
    with patch("builtins.exit") as mock_exit, patch("sys.exit"):
        yield mock_exit
