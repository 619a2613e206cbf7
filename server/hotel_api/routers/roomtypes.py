"""Room type router for availability, calendar and price lookups."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import ApiError, InternalServerError
from ..core.responses import api_success
from ..services.room_type_service import RoomTypeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/roomtypes", tags=["room types"])

DB_DEPENDENCY = Depends(get_db)
CHECK_IN_QUERY = Query(..., description="First night (YYYY-MM-DD)")
CHECK_OUT_QUERY = Query(..., description="Departure date (YYYY-MM-DD)")


@router.get("/{room_type_id}/availability")
async def check_availability(
    room_type_id: int,
    check_in: date = CHECK_IN_QUERY,
    check_out: date = CHECK_OUT_QUERY,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Check whether a room type is free for every night of a stay, and its price."""
    try:
        availability = await RoomTypeService(db).check_availability(room_type_id, check_in, check_out)
        return api_success(availability)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error checking availability",
            extra={"room_type_id": room_type_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to check availability", error=str(e))


@router.get("/{room_type_id}/calendar")
async def get_calendar(
    room_type_id: int,
    start_date: Optional[date] = Query(None, description="First day (default today)"),
    end_date: Optional[date] = Query(None, description="Last day, inclusive (default today + 30)"),
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Day-by-day free rooms and nightly price."""
    try:
        calendar = await RoomTypeService(db).get_calendar(room_type_id, start_date, end_date)
        return api_success(calendar)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error fetching calendar",
            extra={"room_type_id": room_type_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to fetch calendar", error=str(e))


@router.get("/{room_type_id}/pricing")
async def quote_price(
    room_type_id: int,
    check_in: date = CHECK_IN_QUERY,
    check_out: date = CHECK_OUT_QUERY,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Night-by-night seasonal price breakdown for a stay."""
    try:
        quote = await RoomTypeService(db).quote_price(room_type_id, check_in, check_out)
        return api_success(quote)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error quoting price",
            extra={"room_type_id": room_type_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to calculate pricing", error=str(e))
