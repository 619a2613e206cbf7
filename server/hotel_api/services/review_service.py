"""Review service for review CRUD and helpful votes."""

import logging
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import ensure_owner_or_admin
from ..core.exceptions import AuthorizationError, NotFoundError
from ..core.observability import metrics_collector
from ..models.city import City
from ..models.hotel import Hotel
from ..models.review import Review, ReviewHelpfulVote
from ..models.user import User
from ..procedures import ProcedureError, add_review, mark_review_helpful
from ..schemas.auth import TokenUser
from ..schemas.common import Pagination
from ..schemas.review import (
    CreateReviewRequest,
    HotelReview,
    ReviewCreated,
    ReviewDetail,
    ReviewList,
    UpdateReviewRequest,
)

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for review-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _detail_query(self):
        return (
            select(
                Review.review_id,
                Review.rating,
                Review.review_title,
                Review.review_text,
                Review.helpful_count,
                Review.created_at,
                Review.is_verified,
                User.full_name.label("reviewer_name"),
                Hotel.name.label("hotel_name"),
                Hotel.hotel_id,
                City.name.label("city_name"),
            )
            .join(User, Review.user_id == User.user_id)
            .join(Hotel, Review.hotel_id == Hotel.hotel_id)
            .join(City, Hotel.city_id == City.city_id)
        )

    async def _get_review_row(self, review_id: int) -> Review:
        review = await self.db.get(Review, review_id)
        if review is None:
            raise NotFoundError("Review")
        return review

    async def create_review(self, user_id: int, request: CreateReviewRequest) -> ReviewCreated:
        """
        Review a booking through the add_review routine.

        Raises:
            ProcedureError: If the routine rejects the review
        """
        try:
            review = await add_review(
                self.db,
                booking_id=request.booking_id,
                user_id=user_id,
                rating=request.rating,
                review_title=request.review_title,
                review_text=request.review_text,
            )
            await self.db.commit()
        except ProcedureError:
            await self.db.rollback()
            raise

        hotel_name = await self.db.scalar(select(Hotel.name).where(Hotel.hotel_id == review.hotel_id))

        metrics_collector.record_review_created()
        logger.info(
            "Review created",
            extra={"review_id": review.review_id, "booking_id": request.booking_id, "user_id": user_id}
        )

        return ReviewCreated(
            review_id=review.review_id,
            rating=review.rating,
            review_title=review.review_title,
            review_text=review.review_text,
            created_at=review.created_at,
            is_verified=review.is_verified,
            hotel_name=hotel_name,
            hotel_id=review.hotel_id,
        )

    async def get_review(self, review_id: int) -> ReviewDetail:
        """
        Get a review with its reviewer, hotel and city.

        Raises:
            NotFoundError: If the review does not exist
        """
        row = (await self.db.execute(
            self._detail_query().where(Review.review_id == review_id)
        )).mappings().one_or_none()
        if row is None:
            raise NotFoundError("Review")
        return ReviewDetail(**row)

    async def update_review(self, review_id: int, user_id: int, request: UpdateReviewRequest) -> None:
        """
        Replace a review's rating, title and text. Only the author may edit.

        Raises:
            NotFoundError: If the review does not exist
            AuthorizationError: If the caller is not the author
        """
        review = await self._get_review_row(review_id)

        if review.user_id != user_id:
            raise AuthorizationError("You can only update your own reviews")

        review.rating = request.rating
        review.review_title = request.review_title
        review.review_text = request.review_text
        await self.db.commit()

        logger.info("Review updated", extra={"review_id": review_id, "user_id": user_id})

    async def delete_review(self, review_id: int, current_user: TokenUser) -> None:
        """
        Delete a review and its helpful votes. Authors and admins only.

        Raises:
            NotFoundError: If the review does not exist
            AuthorizationError: If the caller is neither author nor admin
        """
        review = await self._get_review_row(review_id)
        ensure_owner_or_admin(review.user_id, current_user)

        await self.db.execute(delete(ReviewHelpfulVote).where(ReviewHelpfulVote.review_id == review_id))
        await self.db.delete(review)
        await self.db.commit()

        logger.info(
            "Review deleted",
            extra={"review_id": review_id, "deleted_by": current_user.user_id}
        )

    async def mark_helpful(self, review_id: int, user_id: int) -> None:
        """
        Record a helpful vote through the mark_review_helpful routine.

        Raises:
            ProcedureError: If the review is missing or the user already voted
        """
        try:
            review = await mark_review_helpful(self.db, review_id, user_id)
            await self.db.commit()
        except ProcedureError:
            await self.db.rollback()
            raise

        logger.info(
            "Review marked helpful",
            extra={"review_id": review_id, "user_id": user_id, "helpful_count": review.helpful_count}
        )

    async def list_hotel_reviews(
        self,
        hotel_id: int,
        page: int = 1,
        limit: int = 10,
        rating_filter: Optional[int] = None,
    ) -> ReviewList:
        """
        List a hotel's reviews, newest first.

        Args:
            hotel_id: Hotel whose reviews to list
            page: Page number (1-based)
            limit: Page size
            rating_filter: Only reviews with exactly this rating
        """
        filters = [Review.hotel_id == hotel_id]
        if rating_filter is not None:
            filters.append(Review.rating == rating_filter)

        stmt = (
            select(
                Review.review_id,
                Review.rating,
                Review.review_title,
                Review.review_text,
                Review.helpful_count,
                Review.created_at,
                Review.is_verified,
                User.full_name.label("reviewer_name"),
            )
            .join(User, Review.user_id == User.user_id)
            .where(*filters)
            .order_by(Review.created_at.desc(), Review.review_id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        total = await self.db.scalar(select(func.count(Review.review_id)).where(*filters))

        return ReviewList(
            reviews=[HotelReview(**row) for row in rows],
            pagination=Pagination.build(page, limit, total or 0),
        )

    async def list_recent_reviews(self, page: int = 1, limit: int = 10) -> list[ReviewDetail]:
        """List verified reviews across all hotels, newest first."""
        stmt = (
            self._detail_query()
            .where(Review.is_verified.is_(True))
            .order_by(Review.created_at.desc(), Review.review_id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        return [ReviewDetail(**row) for row in rows]
