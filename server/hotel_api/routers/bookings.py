"""Booking router for booking operations."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import CurrentUser, IdempotencyKey, ensure_owner_or_admin
from ..core.exceptions import ApiError, ErrorRule, InternalServerError, translate_procedure_error
from ..core.responses import api_success
from ..procedures import ProcedureError
from ..schemas.auth import TokenUser
from ..schemas.booking import CreateBookingRequest
from ..services.booking_service import BookingService
from ..services.idempotency_service import IdempotencyService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])
users_router = APIRouter(prefix="/users", tags=["bookings"])

DB_DEPENDENCY = Depends(get_db)

CREATE_BOOKING_ERRORS: list[ErrorRule] = [
    ("Insufficient inventory", 409, "Selected dates are not available"),
    ("Room type not found", 404, "Room type not found"),
    ("Check-out date must be after", 400, "Check-out date must be after check-in date"),
]

CANCEL_BOOKING_ERRORS: list[ErrorRule] = [
    ("already cancelled", 400, "Booking is already cancelled"),
    ("after check-in", 400, "Cannot cancel a booking after check-in"),
    ("Booking not found", 404, "Booking not found"),
]


@router.post("", status_code=201)
async def create_booking(
    request: CreateBookingRequest,
    current_user: TokenUser = CurrentUser,
    idempotency_key: Optional[str] = IdempotencyKey,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """
    Book a room type for a stay.

    Optionally idempotent based on the Idempotency-Key header.
    """
    booking_service = BookingService(db)

    async def operation() -> JSONResponse:
        try:
            booking = await booking_service.create_booking(current_user.user_id, request)
        except ProcedureError as e:
            raise translate_procedure_error(e, CREATE_BOOKING_ERRORS, "Failed to create booking")
        return api_success(booking, "Booking created successfully", status_code=201)

    try:
        return await IdempotencyService(db).run(
            idempotency_key,
            scope=f"bookings/create:{current_user.user_id}",
            request_body=request.model_dump(mode="json"),
            operation=operation,
        )

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in booking creation",
            extra={
                "user_id": current_user.user_id,
                "room_type_id": request.room_type_id,
                "error": str(e)
            },
            exc_info=True
        )
        raise InternalServerError("Failed to create booking", error=str(e))


@router.get("")
async def list_my_bookings(
    status: Optional[str] = Query(None, description="CONFIRMED or CANCELLED"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: TokenUser = CurrentUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """List the caller's own bookings, newest first."""
    try:
        bookings = await BookingService(db).list_user_bookings(
            current_user.user_id, status=status, page=page, limit=limit
        )
        return api_success(bookings)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error listing bookings",
            extra={"user_id": current_user.user_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to fetch bookings", error=str(e))


@router.get("/{booking_id}")
async def get_booking(
    booking_id: int,
    current_user: TokenUser = CurrentUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Get booking details. Owner or admin only."""
    try:
        booking = await BookingService(db).get_booking_detail(booking_id)
        ensure_owner_or_admin(booking.user_id, current_user)
        return api_success(booking)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error fetching booking",
            extra={"booking_id": booking_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to fetch booking", error=str(e))


@router.put("/{booking_id}/cancel")
async def cancel_booking(
    booking_id: int,
    current_user: TokenUser = CurrentUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Cancel a booking before check-in. Owner or admin only."""
    booking_service = BookingService(db)

    try:
        booking = await booking_service.get_booking(booking_id)
        ensure_owner_or_admin(booking.user_id, current_user)

        try:
            await booking_service.cancel_booking(booking)
        except ProcedureError as e:
            raise translate_procedure_error(e, CANCEL_BOOKING_ERRORS, "Failed to cancel booking")

        return api_success(message="Booking cancelled successfully")

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error cancelling booking",
            extra={"booking_id": booking_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to cancel booking", error=str(e))


@users_router.get("/{user_id}/bookings")
async def list_user_bookings(
    user_id: int,
    status: Optional[str] = Query(None, description="CONFIRMED or CANCELLED"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: TokenUser = CurrentUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """List a user's bookings, newest first. The user themself or an admin only."""
    try:
        ensure_owner_or_admin(user_id, current_user)
        bookings = await BookingService(db).list_user_bookings(
            user_id, status=status, page=page, limit=limit
        )
        return api_success(bookings)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error listing user bookings",
            extra={"user_id": user_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to fetch bookings", error=str(e))
