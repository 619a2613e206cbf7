"""City router for browsing cities and their hotels."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import ApiError, InternalServerError
from ..core.responses import api_success
from ..services.city_service import CityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cities", tags=["cities"])

DB_DEPENDENCY = Depends(get_db)


@router.get("")
async def list_cities(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """List every city ordered by name."""
    try:
        return api_success(await CityService(db).list_cities())

    except ApiError:
        raise

    except Exception as e:
        logger.error("Unexpected error listing cities", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError("Failed to fetch cities", error=str(e))


@router.get("/{city_id}/hotels")
async def list_city_hotels(
    city_id: int,
    rating_min: Optional[float] = Query(None, ge=0, le=5),
    rating_max: Optional[float] = Query(None, ge=0, le=5),
    sort_by: str = Query("name", description="name, rating or price_from"),
    order: str = Query("ASC", description="ASC or DESC"),
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """List a city's hotels with their room type count and starting price."""
    try:
        hotels = await CityService(db).list_city_hotels(
            city_id,
            rating_min=rating_min,
            rating_max=rating_max,
            sort_by=sort_by,
            order=order,
        )
        return api_success(hotels)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error listing city hotels",
            extra={"city_id": city_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to fetch hotels", error=str(e))
