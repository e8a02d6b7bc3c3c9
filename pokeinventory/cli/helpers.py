"""Helper functions shared by the CLI commands."""

from pathlib import Path
from typing import Any

import yaml

from pokeinventory.config import LOGGER


def load_import_file(path: str) -> list[dict[str, Any]] | None:
    """
    Load card entries from a YAML import file:

        cards:
          - name: Charizard
            set_name: Base Set
            quantity: 2
    Returns None if the file does not exist.
    """
    yaml_path = Path(path)
    if not yaml_path.exists():
        return None

    with open(yaml_path) as f:
        content = yaml.safe_load(f) or {}

    cards = content.get("cards", []) if isinstance(content, dict) else content
    return [entry for entry in cards or [] if isinstance(entry, dict)]


def confirm(prompt: str, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    answer = input(f"{prompt} (y/n): ")
    return answer.strip().lower() == "y"


def euro(value: Any) -> str:
    if value is None:
        return "-"
    return f"€{float(value):.2f}"


def log_rows(header: str, lines: list[str], empty_message: str) -> None:
    """Log a simple table: a header, a rule, then one line per row."""
    if not lines:
        LOGGER.info(empty_message)
        return

    LOGGER.info(header)
    LOGGER.info("-" * len(header))
    for line in lines:
        LOGGER.info(line)
