"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.booking import BookingStatus
from ..models.payment import PaymentMethod, PaymentStatus
from .common import Pagination


class CreateBookingRequest(BaseModel):
    """Request schema for booking a room type."""

    room_type_id: int = Field(..., ge=1, description="Room type to book")
    check_in: date = Field(..., description="First night of the stay (YYYY-MM-DD)")
    check_out: date = Field(..., description="Departure date (YYYY-MM-DD), not a night of the stay")
    payment_method: PaymentMethod = Field(
        PaymentMethod.CARD, description="Method recorded on the pending payment"
    )


class BookingCreated(BaseModel):
    """Response data for a newly created booking."""

    booking_id: int
    status: BookingStatus
    total_amount: float
    hotel_name: str
    room_type: str
    check_in: date
    check_out: date
    nights: int


class BookingDetail(BaseModel):
    """Booking with room, hotel, city, payment and guest details."""

    booking_id: int
    user_id: int
    check_in: date
    check_out: date
    status: BookingStatus
    created_at: datetime
    room_type: str
    max_guests: int
    hotel: str
    address: Optional[str] = None
    rating: Optional[float] = None
    city: str
    country: str
    total_amount: Optional[float] = None
    payment_id: Optional[int] = None
    payment_method: Optional[PaymentMethod] = None
    payment_status: Optional[PaymentStatus] = None
    guest_name: str
    guest_email: str


class BookingSummary(BaseModel):
    """Booking entry in a user's booking list."""

    booking_id: int
    check_in: date
    check_out: date
    status: BookingStatus
    created_at: datetime
    room_type: str
    hotel: str
    rating: Optional[float] = None
    city: str
    total_amount: Optional[float] = None
    payment_id: Optional[int] = None
    payment_status: Optional[PaymentStatus] = None


class BookingList(BaseModel):
    """Paginated booking list."""

    bookings: List[BookingSummary]
    pagination: Pagination
