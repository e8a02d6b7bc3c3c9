import logging
import os
import platform
import sys
from pathlib import Path
from typing import Final


def get_app_data_dir() -> Path:
    """Get the platform-appropriate directory for application data."""

    system = platform.system()
    home = Path.home()

    if system == "Darwin":  # macOS
        app_dir = home / "Library" / "Application Support" / "pokeinventory"
    elif system == "Windows":
        appdata = os.environ.get("APPDATA")
        if appdata:
            app_dir = Path(appdata) / "pokeinventory"
        else:
            app_dir = home / "AppData" / "Roaming" / "pokeinventory"
    else:  # Linux and other Unix-like systems
        xdg_data_home = os.environ.get("XDG_DATA_HOME")
        if xdg_data_home:
            app_dir = Path(xdg_data_home) / "pokeinventory"
        else:
            app_dir = home / ".local" / "share" / "pokeinventory"

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


APP_DATA_DIR = get_app_data_dir()
DB_PATH = APP_DATA_DIR / "inventory.db"
DB_CONNECTION_STRING = os.environ.get("POKEINVENTORY_DB_URL", f"sqlite:///{DB_PATH}")

# Table names as seen by the store and the change feed
INVENTORY_TABLE: Final[str] = "inventory_cards"
SALES_TABLE: Final[str] = "sales"
WATCHLIST_TABLE: Final[str] = "watchlist"

# How many times the inventory decrement is attempted after a sale is stored
SALE_DECREMENT_ATTEMPTS: Final[int] = int(
    os.environ.get("POKEINVENTORY_SALE_DECREMENT_ATTEMPTS", "3")
)
POLL_INTERVAL_SECONDS: Final[float] = float(
    os.environ.get("POKEINVENTORY_POLL_INTERVAL", "2.0")
)

# Largest value a SQLite INTEGER column holds (signed 64-bit)
MAX_INTEGER: Final[int] = 2**63 - 1

# Values offered by the forms. Storage accepts any string.
CONDITIONS: Final[tuple[str, ...]] = ("MT", "NM", "EX", "GD", "LP", "PL", "PO")
VARIANTS: Final[tuple[str, ...]] = ("normal", "holo", "reverse", "1st", "promo", "other")
PLATFORMS: Final[tuple[str, ...]] = ("Cardmarket", "eBay", "Instagram", "Vinted", "Altro")

DEFAULT_VARIANT: Final[str] = "normal"
DEFAULT_LANGUAGE: Final[str] = "IT"
DEFAULT_CONDITION: Final[str] = "NM"
DEFAULT_PLATFORM: Final[str] = "Cardmarket"
DEFAULT_WATCH_SOURCE: Final[str] = "eBay"


def setup_logger() -> logging.Logger:
    logger = logging.getLogger("pokeinventory")
    logger.setLevel(logging.DEBUG)

    c_handler = logging.StreamHandler(sys.stdout)
    log_file = APP_DATA_DIR / "pokeinventory.log"
    f_handler = logging.FileHandler(log_file)
    c_handler.setLevel(logging.INFO)
    f_handler.setLevel(logging.DEBUG)

    log_format = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    c_handler.setFormatter(log_format)
    f_handler.setFormatter(log_format)

    logger.addHandler(c_handler)
    logger.addHandler(f_handler)

    return logger


LOGGER: Final[logging.Logger] = setup_logger()
