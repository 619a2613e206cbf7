"""Hotel-related Pydantic schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field


class HotelSummary(BaseModel):
    """Hotel entry in a search listing."""

    hotel_id: int
    city_id: int
    name: str
    address: Optional[str] = None
    rating: Optional[float] = None
    city_name: str
    country: str


class RoomTypeWithPrice(BaseModel):
    """Room type with its seasonal price for today."""

    room_type_id: int
    name: str
    base_price: float
    max_guests: int
    current_price: Optional[float] = Field(None, description="Seasonal price per night today")


class HotelDetail(BaseModel):
    """Hotel detail with review summary and room types."""

    hotel_id: int
    name: str
    address: Optional[str] = None
    rating: Optional[float] = None
    city_name: str
    country: str
    total_reviews: int = Field(..., ge=0)
    average_rating: Optional[float] = Field(
        None, description="Mean review rating, or the hotel rating when unreviewed"
    )
    room_types: List[RoomTypeWithPrice]
