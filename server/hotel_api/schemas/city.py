"""City and city hotel listing schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class City(BaseModel):
    """City response schema."""

    model_config = ConfigDict(from_attributes=True)

    city_id: int
    name: str
    country: str


class CityHotel(BaseModel):
    """Hotel entry in a city listing, with room type count and starting price."""

    hotel_id: int
    name: str
    address: Optional[str] = None
    rating: Optional[float] = None
    city_name: str
    country: str
    room_types_count: int = Field(..., ge=0, description="Number of room types offered")
    price_from: Optional[float] = Field(None, description="Lowest base price among room types")
