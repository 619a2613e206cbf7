"""Hotel router for hotel search, details and reviews."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import ApiError, InternalServerError
from ..core.responses import api_success
from ..services.hotel_service import HotelService
from ..services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/hotels", tags=["hotels"])

DB_DEPENDENCY = Depends(get_db)


@router.get("")
async def search_hotels(
    city_id: Optional[int] = Query(None, ge=1),
    search: Optional[str] = Query(None, max_length=100),
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Search hotels by city and name or address."""
    try:
        return api_success(await HotelService(db).search_hotels(city_id=city_id, search=search))

    except ApiError:
        raise

    except Exception as e:
        logger.error("Unexpected error searching hotels", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError("Failed to fetch hotels", error=str(e))


@router.get("/{hotel_id}")
async def get_hotel(
    hotel_id: int,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Get hotel details with room types priced for today."""
    try:
        return api_success(await HotelService(db).get_hotel_detail(hotel_id))

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error fetching hotel",
            extra={"hotel_id": hotel_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to fetch hotel details", error=str(e))


@router.get("/{hotel_id}/reviews")
async def get_hotel_reviews(
    hotel_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    rating_filter: Optional[int] = Query(None, ge=1, le=5),
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """List a hotel's reviews, newest first."""
    try:
        reviews = await ReviewService(db).list_hotel_reviews(
            hotel_id, page=page, limit=limit, rating_filter=rating_filter
        )
        return api_success(reviews)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error fetching hotel reviews",
            extra={"hotel_id": hotel_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to fetch hotel reviews", error=str(e))
