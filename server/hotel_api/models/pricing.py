"""Seasonal pricing model definition."""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.clock import utcnow
from ..core.database import Base

if TYPE_CHECKING:
    from .hotel import RoomType


class SeasonalPricing(Base):
    """
    Date-range-scoped price multiplier for a room type.

    Bounds are inclusive. When several active rules cover the same date the
    highest priority wins, and the newest rule breaks a priority tie.
    """

    __tablename__ = "seasonal_pricing"

    pricing_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    room_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("room_types.room_type_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    season_name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    price_multiplier: Mapped[Decimal] = mapped_column(Numeric(4, 2), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("start_date < end_date", name="ck_seasonal_pricing_dates_ordered"),
        CheckConstraint(
            "price_multiplier > 0 AND price_multiplier <= 5",
            name="ck_seasonal_pricing_multiplier_range"
        ),
        CheckConstraint("priority >= 1 AND priority <= 10", name="ck_seasonal_pricing_priority_range"),
    )

    room_type: Mapped["RoomType"] = relationship("RoomType", back_populates="pricing_rules")

    def covers(self, on_date: date) -> bool:
        """True when this rule is active and its range includes ``on_date``."""
        return self.is_active and self.start_date <= on_date <= self.end_date

    def __repr__(self) -> str:
        return (
            f"<SeasonalPricing(pricing_id={self.pricing_id}, room_type_id={self.room_type_id}, "
            f"season_name='{self.season_name}', multiplier={self.price_multiplier}, "
            f"priority={self.priority})>"
        )
