from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id, utcnow


class Sale(Base):
    """
    A recorded sale. Immutable once created.

    `inventory_id` is advisory only (no foreign key): deleting the card
    leaves the sale in place, identified by `card_name_snapshot`.
    """

    __tablename__ = "sales"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    inventory_id: Mapped[str | None] = mapped_column(String(36), index=True)
    card_name_snapshot: Mapped[str] = mapped_column(String(255), nullable=False)

    quantity: Mapped[int] = mapped_column(Integer(), nullable=False, default=1)
    platform: Mapped[str | None] = mapped_column(String(50))
    sold_price_eur: Mapped[float] = mapped_column(Float(), nullable=False, default=0)
    shipping_eur: Mapped[float] = mapped_column(Float(), nullable=False, default=0)
    fees_eur: Mapped[float] = mapped_column(Float(), nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text())

    created_at: Mapped[datetime] = mapped_column(
        DateTime(), nullable=False, default=utcnow
    )
    sold_at: Mapped[datetime] = mapped_column(
        DateTime(), nullable=False, default=utcnow, index=True
    )
