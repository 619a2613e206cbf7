"""Review and helpful-vote model definitions."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.clock import utcnow
from ..core.database import Base

if TYPE_CHECKING:
    from .booking import Booking
    from .hotel import Hotel
    from .user import User


class Review(Base):
    """Guest review, at most one per booking."""

    __tablename__ = "reviews"

    review_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    booking_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("bookings.booking_id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    hotel_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("hotels.hotel_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    review_title: Mapped[str] = mapped_column(String(200), nullable=False)
    review_text: Mapped[str] = mapped_column(Text, nullable=False)
    helpful_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
        CheckConstraint("helpful_count >= 0", name="ck_review_helpful_count_non_negative"),
    )

    booking: Mapped["Booking"] = relationship("Booking", back_populates="review")
    user: Mapped["User"] = relationship("User", back_populates="reviews")
    hotel: Mapped["Hotel"] = relationship("Hotel", back_populates="reviews")
    helpful_votes: Mapped[list["ReviewHelpfulVote"]] = relationship(
        "ReviewHelpfulVote",
        back_populates="review",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return (
            f"<Review(review_id={self.review_id}, booking_id={self.booking_id}, "
            f"hotel_id={self.hotel_id}, rating={self.rating})>"
        )


class ReviewHelpfulVote(Base):
    """A user's "helpful" vote on a review."""

    __tablename__ = "review_helpful_votes"

    vote_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    review_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("reviews.review_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint("review_id", "user_id", name="uq_review_helpful_vote"),
    )

    review: Mapped["Review"] = relationship("Review", back_populates="helpful_votes")

    def __repr__(self) -> str:
        return f"<ReviewHelpfulVote(review_id={self.review_id}, user_id={self.user_id})>"
