"""Booking model definition."""

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.clock import utcnow
from ..core.database import Base

if TYPE_CHECKING:
    from .hotel import RoomType
    from .payment import Payment
    from .review import Review
    from .user import User


class BookingStatus(str, Enum):
    """Booking status enumeration."""
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class Booking(Base):
    """Booking entity: one room of one type for the nights [check_in, check_out)."""

    __tablename__ = "bookings"

    booking_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    room_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("room_types.room_type_id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.CONFIRMED,
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("check_in < check_out", name="ck_booking_dates_ordered"),
        CheckConstraint("status IN ('CONFIRMED', 'CANCELLED')", name="ck_booking_status_valid"),
    )

    user: Mapped["User"] = relationship("User", back_populates="bookings")
    room_type: Mapped["RoomType"] = relationship("RoomType", back_populates="bookings")
    payment: Mapped["Payment | None"] = relationship(
        "Payment",
        back_populates="booking",
        cascade="all, delete-orphan",
        uselist=False
    )
    review: Mapped["Review | None"] = relationship(
        "Review",
        back_populates="booking",
        cascade="all, delete-orphan",
        uselist=False
    )

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    def __repr__(self) -> str:
        return (
            f"<Booking(booking_id={self.booking_id}, user_id={self.user_id}, "
            f"room_type_id={self.room_type_id}, check_in={self.check_in}, "
            f"check_out={self.check_out}, status={self.status})>"
        )
