from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id, utcnow


class InventoryCard(Base):
    """
    A physical card owned by the collector.
    `quantity` is the count currently held; recording a sale lowers it.
    """

    __tablename__ = "inventory_cards"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    set_name: Mapped[str | None] = mapped_column(String(255))
    card_number: Mapped[str | None] = mapped_column(String(50))
    variant: Mapped[str | None] = mapped_column(String(50), default="normal")
    language: Mapped[str | None] = mapped_column(String(20), default="IT")
    condition: Mapped[str | None] = mapped_column(String(20), default="NM")

    # Grading
    graded: Mapped[bool | None] = mapped_column(Boolean(), default=False)
    grade_company: Mapped[str | None] = mapped_column(String(50))
    grade_value: Mapped[str | None] = mapped_column(String(20))

    # Quantities and prices (per unit)
    quantity: Mapped[int] = mapped_column(Integer(), nullable=False, default=1)
    buy_price_eur: Mapped[float] = mapped_column(Float(), nullable=False, default=0)
    buy_date: Mapped[date | None] = mapped_column(Date())
    current_value_eur: Mapped[float | None] = mapped_column(Float())
    target_value_eur: Mapped[float | None] = mapped_column(Float())

    location: Mapped[str | None] = mapped_column(String(255))
    tags: Mapped[str | None] = mapped_column(String(255))
    notes: Mapped[str | None] = mapped_column(Text())
    image_url: Mapped[str | None] = mapped_column(String(500))

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(), nullable=False, default=utcnow, onupdate=utcnow, index=True
    )
