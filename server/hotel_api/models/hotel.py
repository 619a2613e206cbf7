"""Hotel, room type and room inventory model definitions."""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .booking import Booking
    from .city import City
    from .pricing import SeasonalPricing
    from .review import Review


class Hotel(Base):
    """Hotel entity."""

    __tablename__ = "hotels"

    hotel_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    city_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("cities.city_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name: Mapped[str] = mapped_column(String(150), nullable=False, index=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[Decimal | None] = mapped_column(Numeric(2, 1), nullable=True)

    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 5)", name="ck_hotel_rating_range"),
    )

    city: Mapped["City"] = relationship("City", back_populates="hotels")
    room_types: Mapped[list["RoomType"]] = relationship(
        "RoomType",
        back_populates="hotel",
        cascade="all, delete-orphan"
    )
    reviews: Mapped[list["Review"]] = relationship("Review", back_populates="hotel")

    def __repr__(self) -> str:
        return f"<Hotel(hotel_id={self.hotel_id}, name='{self.name}', city_id={self.city_id})>"


class RoomType(Base):
    """A sellable kind of room within a hotel, priced per night."""

    __tablename__ = "room_types"

    room_type_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    hotel_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("hotels.hotel_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    base_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    max_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=2)

    __table_args__ = (
        CheckConstraint("base_price >= 0", name="ck_room_type_base_price_non_negative"),
        CheckConstraint("max_guests > 0", name="ck_room_type_max_guests_positive"),
    )

    hotel: Mapped["Hotel"] = relationship("Hotel", back_populates="room_types")
    inventory: Mapped[list["RoomInventory"]] = relationship(
        "RoomInventory",
        back_populates="room_type",
        cascade="all, delete-orphan"
    )
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="room_type")
    pricing_rules: Mapped[list["SeasonalPricing"]] = relationship(
        "SeasonalPricing",
        back_populates="room_type",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return (
            f"<RoomType(room_type_id={self.room_type_id}, hotel_id={self.hotel_id}, "
            f"name='{self.name}', base_price={self.base_price})>"
        )


class RoomInventory(Base):
    """Number of rooms of one type still sellable for one night."""

    __tablename__ = "room_inventory"

    room_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("room_types.room_type_id", ondelete="CASCADE"),
        primary_key=True
    )
    stay_date: Mapped[date] = mapped_column(Date, primary_key=True, index=True)
    qty: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("qty >= 0", name="ck_room_inventory_qty_non_negative"),
    )

    room_type: Mapped["RoomType"] = relationship("RoomType", back_populates="inventory")

    def __repr__(self) -> str:
        return f"<RoomInventory(room_type_id={self.room_type_id}, stay_date={self.stay_date}, qty={self.qty})>"
