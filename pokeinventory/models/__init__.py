from .base import Base
from .inventory import InventoryCard
from .sale import Sale
from .watch_item import WatchItem, WatchStatus


def register_models() -> list:
    return [InventoryCard, Sale, WatchItem]


# Table name -> mapped class, as addressed by the store
TABLE_MODELS: dict[str, type[Base]] = {
    model.__tablename__: model for model in register_models()
}

__all__ = [
    "Base",
    "InventoryCard",
    "Sale",
    "TABLE_MODELS",
    "WatchItem",
    "WatchStatus",
    "register_models",
]
