from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id, utcnow


class WatchStatus(Enum):
    """Statuses a watch item can be moved to. Any status may follow any other."""

    ACTIVE = "active"
    BOUGHT = "bought"
    CLOSED = "closed"


class WatchItem(Base):
    """
    A listing the collector is keeping an eye on.
    `status` is stored as a plain string so older rows with other values still load.
    """

    __tablename__ = "watchlist"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    link: Mapped[str | None] = mapped_column(String(500))
    source: Mapped[str | None] = mapped_column(String(100))
    seen_price_eur: Mapped[float | None] = mapped_column(Float())
    target_price_eur: Mapped[float | None] = mapped_column(Float())
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=WatchStatus.ACTIVE.value, index=True
    )
    notes: Mapped[str | None] = mapped_column(Text())

    created_at: Mapped[datetime] = mapped_column(
        DateTime(), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(), nullable=False, default=utcnow, onupdate=utcnow, index=True
    )
