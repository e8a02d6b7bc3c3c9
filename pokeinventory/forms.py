"""
Form input handling: turns raw user-entered values into mutation payloads.

Input is lenient on purpose. Empty or non-numeric numbers fall back to the
field default instead of rejecting the whole submission. The only hard
requirement per entity is its name/title: without it `to_payload()`
returns None and nothing is sent to the store.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from datetime import date
from typing import Any

from pokeinventory.config import (
    DEFAULT_CONDITION,
    DEFAULT_LANGUAGE,
    DEFAULT_PLATFORM,
    DEFAULT_VARIANT,
    DEFAULT_WATCH_SOURCE,
    MAX_INTEGER,
)
from pokeinventory.models import WatchStatus
from pokeinventory.store import Row


def clean_text(value: Any) -> str | None:
    """Strip a text value; blank becomes None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_number(value: Any, default: float = 0.0, minimum: float | None = 0.0) -> float:
    """Parse a number, falling back to `default` and clamping to `minimum`."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    if minimum is not None and number < minimum:
        return minimum
    return number


def parse_int(value: Any, default: int = 0, minimum: int | None = 0) -> int:
    """Parse a whole number, truncating decimals and capping it to what the store holds."""
    number = parse_number(value, float(default), None)
    result = max(-MAX_INTEGER - 1, min(int(number), MAX_INTEGER))
    if minimum is not None and result < minimum:
        return minimum
    return result


def parse_optional_number(value: Any) -> float | None:
    """Like parse_number, but blank input means "not set" rather than 0."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_number(value, 0.0)


def parse_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    text = clean_text(value)
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y", "on")
    return bool(value)


def parse_status(value: Any) -> WatchStatus:
    """Map user input onto a WatchStatus. Raises ValueError for unknown values."""
    if isinstance(value, WatchStatus):
        return value
    return WatchStatus(str(value).strip().lower())


@dataclass
class InventoryForm:
    """Raw values entered for a new inventory card."""

    name: Any = ""
    set_name: Any = None
    card_number: Any = None
    variant: Any = None
    language: Any = None
    condition: Any = None
    graded: Any = False
    grade_company: Any = None
    grade_value: Any = None
    quantity: Any = 1
    buy_price_eur: Any = 0
    buy_date: Any = None
    current_value_eur: Any = None
    target_value_eur: Any = None
    location: Any = None
    tags: Any = None
    notes: Any = None
    image_url: Any = None

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "InventoryForm":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_payload(self) -> Row | None:
        name = clean_text(self.name)
        if not name:
            return None

        return {
            "name": name,
            "set_name": clean_text(self.set_name),
            "card_number": clean_text(self.card_number),
            "variant": clean_text(self.variant) or DEFAULT_VARIANT,
            "language": clean_text(self.language) or DEFAULT_LANGUAGE,
            "condition": clean_text(self.condition) or DEFAULT_CONDITION,
            "graded": parse_bool(self.graded),
            "grade_company": clean_text(self.grade_company),
            "grade_value": clean_text(self.grade_value),
            "quantity": parse_int(self.quantity, default=1),
            "buy_price_eur": parse_number(self.buy_price_eur),
            "buy_date": parse_date(self.buy_date),
            "current_value_eur": parse_optional_number(self.current_value_eur),
            "target_value_eur": parse_optional_number(self.target_value_eur),
            "location": clean_text(self.location),
            "tags": clean_text(self.tags),
            "notes": clean_text(self.notes),
            "image_url": clean_text(self.image_url),
        }


# Parsers for the inventory fields that can be edited after creation
_INVENTORY_PATCH_PARSERS = {
    "name": clean_text,
    "set_name": clean_text,
    "card_number": clean_text,
    "variant": clean_text,
    "language": clean_text,
    "condition": clean_text,
    "graded": parse_bool,
    "grade_company": clean_text,
    "grade_value": clean_text,
    "quantity": lambda v: parse_int(v, default=0),
    "buy_price_eur": parse_number,
    "buy_date": parse_date,
    "current_value_eur": parse_optional_number,
    "target_value_eur": parse_optional_number,
    "location": clean_text,
    "tags": clean_text,
    "notes": clean_text,
    "image_url": clean_text,
}


def inventory_patch(changes: dict[str, Any]) -> Row | None:
    """
    Build an update patch from edited inventory fields.
    Unknown fields are ignored. Returns None if the name would be blanked.
    """
    patch = {
        key: _INVENTORY_PATCH_PARSERS[key](value)
        for key, value in changes.items()
        if key in _INVENTORY_PATCH_PARSERS
    }
    if "name" in patch and not patch["name"]:
        return None
    return patch


@dataclass(frozen=True)
class SaleEstimate:
    cost: float
    profit: float


@dataclass
class SaleForm:
    """
    Raw values entered for a sale. Either `inventory_id` selects a card,
    or `card_name_snapshot` names one that is not in the inventory.
    """

    inventory_id: Any = None
    card_name_snapshot: Any = ""
    quantity: Any = 1
    platform: Any = DEFAULT_PLATFORM
    sold_price_eur: Any = 0
    shipping_eur: Any = 0
    fees_eur: Any = 0
    notes: Any = None

    @property
    def sold_quantity(self) -> int:
        return parse_int(self.quantity, default=1, minimum=1)

    def to_payload(self, card: Row | None = None) -> Row | None:
        """`card` is the selected inventory row, if any."""
        if card is not None:
            card_name = clean_text(card.get("name"))
        else:
            card_name = clean_text(self.card_name_snapshot)
        if not card_name:
            return None

        return {
            "inventory_id": card["id"] if card is not None else None,
            "card_name_snapshot": card_name,
            "quantity": self.sold_quantity,
            "platform": clean_text(self.platform),
            "sold_price_eur": parse_number(self.sold_price_eur),
            "shipping_eur": parse_number(self.shipping_eur),
            "fees_eur": parse_number(self.fees_eur),
            "notes": clean_text(self.notes),
        }

    def estimate(self, card: Row | None = None) -> SaleEstimate:
        """Estimated cost and profit of this sale. Not persisted anywhere."""
        unit_cost = parse_number(card.get("buy_price_eur")) if card else 0.0
        cost = unit_cost * self.sold_quantity
        profit = (
            parse_number(self.sold_price_eur)
            + parse_number(self.shipping_eur)
            - parse_number(self.fees_eur)
            - cost
        )
        return SaleEstimate(cost=cost, profit=profit)


@dataclass
class WatchItemForm:
    title: Any = ""
    link: Any = None
    source: Any = DEFAULT_WATCH_SOURCE
    seen_price_eur: Any = None
    target_price_eur: Any = None
    status: Any = WatchStatus.ACTIVE
    notes: Any = None

    def to_payload(self) -> Row | None:
        """Raises ValueError if `status` is not a known watch status."""
        title = clean_text(self.title)
        if not title:
            return None

        return {
            "title": title,
            "link": clean_text(self.link),
            "source": clean_text(self.source),
            "seen_price_eur": parse_optional_number(self.seen_price_eur),
            "target_price_eur": parse_optional_number(self.target_price_eur),
            "status": parse_status(self.status).value,
            "notes": clean_text(self.notes),
        }
