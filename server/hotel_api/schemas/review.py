"""Review-related Pydantic schemas."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .common import Pagination


class UpdateReviewRequest(BaseModel):
    """Request schema for editing a review."""

    model_config = ConfigDict(str_strip_whitespace=True)

    rating: int = Field(..., ge=1, le=5, description="Rating between 1 and 5")
    review_title: str = Field(..., min_length=5, max_length=200, description="Review title (5-200 characters)")
    review_text: str = Field(..., min_length=10, max_length=2000, description="Review text (10-2000 characters)")


class CreateReviewRequest(UpdateReviewRequest):
    """Request schema for reviewing a booking."""

    booking_id: int = Field(..., ge=1, description="Booking being reviewed")


class ReviewCreated(BaseModel):
    """Response data for a newly created review."""

    review_id: int
    rating: int
    review_title: str
    review_text: str
    created_at: datetime
    is_verified: bool
    hotel_name: str
    hotel_id: int


class HotelReview(BaseModel):
    """Review entry in a hotel's review list."""

    review_id: int
    rating: int
    review_title: str
    review_text: str
    helpful_count: int
    created_at: datetime
    is_verified: bool
    reviewer_name: str


class ReviewDetail(HotelReview):
    """Review with its hotel and city."""

    hotel_name: str
    hotel_id: int
    city_name: str


class ReviewList(BaseModel):
    """Paginated review list."""

    reviews: List[HotelReview]
    pagination: Pagination
