"""Seasonal pricing schemas."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SeasonalPricingFields(BaseModel):
    """Fields shared by create and update requests."""

    model_config = ConfigDict(str_strip_whitespace=True)

    season_name: str = Field(..., min_length=3, max_length=50, description="Season name (3-50 characters)")
    description: Optional[str] = Field(None, max_length=500, description="Free-form description")
    start_date: date = Field(..., description="First day the rule applies (YYYY-MM-DD)")
    end_date: date = Field(..., description="Last day the rule applies, inclusive (YYYY-MM-DD)")
    price_multiplier: float = Field(..., ge=0.1, le=5.0, description="Factor applied to the base price")
    priority: int = Field(1, ge=1, le=10, description="Higher priority wins when rules overlap")


class CreateSeasonalPricingRequest(SeasonalPricingFields):
    """Request schema for adding a pricing rule."""

    room_type_id: int = Field(..., ge=1, description="Room type the rule prices")


class UpdateSeasonalPricingRequest(SeasonalPricingFields):
    """Request schema for replacing a pricing rule's fields."""

    is_active: bool = Field(True, description="Inactive rules are ignored when pricing")


class SeasonalPricingRule(BaseModel):
    """Pricing rule with its room type and hotel."""

    pricing_id: int
    room_type_id: int
    season_name: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    price_multiplier: float
    priority: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    room_type_name: str
    base_price: float
    hotel_name: str
    hotel_id: int
    city_name: Optional[str] = None


class CurrentPrice(BaseModel):
    """Price of a room type on one date compared with its base price."""

    room_type_id: int
    room_type_name: str
    hotel_name: str
    base_price: float
    current_price: float
    price_change_percent: float = Field(..., description="Percentage difference from the base price")
    active_season: Optional[str] = Field(None, description="Name of the rule in effect, if any")
    date: str = Field(..., description="Date the price applies to (YYYY-MM-DD)")
