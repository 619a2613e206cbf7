"""Review router for review CRUD and helpful votes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import CurrentUser
from ..core.exceptions import ApiError, ErrorRule, InternalServerError, translate_procedure_error
from ..core.responses import api_success
from ..procedures import ProcedureError
from ..schemas.auth import TokenUser
from ..schemas.review import CreateReviewRequest, UpdateReviewRequest
from ..services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])

DB_DEPENDENCY = Depends(get_db)

ADD_REVIEW_ERRORS: list[ErrorRule] = [
    ("already exists", 409, "You have already reviewed this booking"),
    ("only review your own", 403, "You can only review your own bookings"),
    ("cancelled booking", 400, "Cannot review a cancelled booking"),
    ("Booking not found", 404, "Booking not found"),
]

MARK_HELPFUL_ERRORS: list[ErrorRule] = [
    ("already marked", 409, "You have already marked this review as helpful"),
    ("Review not found", 404, "Review not found"),
]


@router.post("", status_code=201)
async def create_review(
    request: CreateReviewRequest,
    current_user: TokenUser = CurrentUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Review one of the caller's bookings."""
    try:
        try:
            review = await ReviewService(db).create_review(current_user.user_id, request)
        except ProcedureError as e:
            raise translate_procedure_error(e, ADD_REVIEW_ERRORS, "Failed to add review")

        return api_success(review, "Review added successfully", status_code=201)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error adding review",
            extra={"booking_id": request.booking_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to add review", error=str(e))


# Declared before /{review_id} so "recent" is not parsed as an ID
@router.get("/recent")
async def list_recent_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """List verified reviews across all hotels, newest first."""
    try:
        return api_success(await ReviewService(db).list_recent_reviews(page=page, limit=limit))

    except ApiError:
        raise

    except Exception as e:
        logger.error("Unexpected error listing recent reviews", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError("Failed to fetch recent reviews", error=str(e))


@router.get("/hotel/{hotel_id}")
async def list_hotel_reviews(
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


@router.get("/{review_id}")
async def get_review(
    review_id: int,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Get a review with its hotel and city."""
    try:
        return api_success(await ReviewService(db).get_review(review_id))

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error fetching review",
            extra={"review_id": review_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to fetch review", error=str(e))


@router.put("/{review_id}")
async def update_review(
    review_id: int,
    request: UpdateReviewRequest,
    current_user: TokenUser = CurrentUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Edit a review. Author only."""
    try:
        await ReviewService(db).update_review(review_id, current_user.user_id, request)
        return api_success(message="Review updated successfully")

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error updating review",
            extra={"review_id": review_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to update review", error=str(e))


@router.delete("/{review_id}")
async def delete_review(
    review_id: int,
    current_user: TokenUser = CurrentUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Delete a review and its helpful votes. Author or admin only."""
    try:
        await ReviewService(db).delete_review(review_id, current_user)
        return api_success(message="Review deleted successfully")

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error deleting review",
            extra={"review_id": review_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to delete review", error=str(e))


@router.post("/{review_id}/helpful")
async def mark_review_helpful(
    review_id: int,
    current_user: TokenUser = CurrentUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Mark a review as helpful, once per user."""
    try:
        try:
            await ReviewService(db).mark_helpful(review_id, current_user.user_id)
        except ProcedureError as e:
            raise translate_procedure_error(e, MARK_HELPFUL_ERRORS, "Failed to mark review as helpful")

        return api_success(message="Review marked as helpful")

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error marking review helpful",
            extra={"review_id": review_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to mark review as helpful", error=str(e))
