"""Room availability, calendar and price quote schemas."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class Availability(BaseModel):
    """Availability of a room type for a stay."""

    room_type_id: int
    room_type_name: str
    hotel_name: str
    check_in: date
    check_out: date
    nights: int = Field(..., ge=1)
    available: bool = Field(..., description="True when every night has a free room")
    available_count: int = Field(..., ge=0, description="Fewest free rooms over the stay")
    price_per_night: float = Field(..., description="Seasonal price on the check-in date")
    total_amount: float


class CalendarDay(BaseModel):
    """Free rooms and price for one night."""

    stay_date: date
    available_rooms: int
    price_per_night: Optional[float] = None


class Calendar(BaseModel):
    """Day-by-day availability of a room type."""

    room_type_id: int
    calendar: List[CalendarDay]


class NightlyPrice(BaseModel):
    """Seasonal price of one night of a stay."""

    stay_date: date
    price: float


class PriceQuote(BaseModel):
    """Night-by-night price breakdown for a stay."""

    room_type_id: int
    check_in: date
    check_out: date
    nights: int = Field(..., ge=1)
    nightly_prices: List[NightlyPrice]
    total_amount: float
