"""
Database routines enforcing the booking business rules.

Each routine works inside the caller's open session and transaction: it
reads what it needs (locking inventory and payment rows with
``SELECT ... FOR UPDATE`` where the dialect supports it), applies its
changes, flushes, and never commits. A broken business rule is reported by
raising ``ProcedureError`` with a human-readable message; the caller is
expected to roll back and translate the message into an HTTP response.

Routines:

    get_seasonal_price   price of a room type on a date
    make_booking         reserve one room for every night of a stay
    cancel_booking       release a booking's nights and refund a paid booking
    add_review           review a booking, once
    mark_review_helpful  record a user's helpful vote, once
    add_seasonal_pricing create a pricing rule
"""

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .core.clock import today, utcnow
from .core.observability import get_logger
from .models import (
    Booking,
    BookingStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Review,
    ReviewHelpfulVote,
    RoomInventory,
    RoomType,
    SeasonalPricing,
)

logger = get_logger(__name__)

CENT = Decimal("0.01")
MAX_PRICE_MULTIPLIER = Decimal("5.0")


class ProcedureError(Exception):
    """A business rule enforced by a database routine was violated."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PricingRuleLike(Protocol):
    start_date: date
    end_date: date
    priority: int
    pricing_id: int
    is_active: bool
    price_multiplier: Decimal


# Pure helpers

def nights_between(check_in: date, check_out: date) -> int:
    """Number of nights between two dates; zero or negative when unordered."""
    return (check_out - check_in).days


def stay_dates(check_in: date, check_out: date) -> list[date]:
    """Every night of the stay, check-in inclusive and check-out exclusive."""
    return [check_in + timedelta(days=i) for i in range(max(nights_between(check_in, check_out), 0))]


def apply_multiplier(base_price, multiplier) -> Decimal:
    """Base price scaled by a multiplier, rounded half-up to cents."""
    return (Decimal(str(base_price)) * Decimal(str(multiplier))).quantize(CENT, rounding=ROUND_HALF_UP)


def price_change_percent(multiplier) -> float:
    """Percentage change a multiplier applies to the base price (1.25 -> 25.0)."""
    if multiplier is None:
        return 0.0
    change = (Decimal(str(multiplier)) - 1) * 100
    return float(change.quantize(CENT, rounding=ROUND_HALF_UP))


def resolve_rule(rules: Iterable[PricingRuleLike], on_date: date) -> Optional[PricingRuleLike]:
    """
    Pick the pricing rule in effect on a date.

    Only active rules whose inclusive range covers the date are candidates.
    The highest priority wins; among equal priorities the newest rule
    (highest pricing_id) wins.

    Args:
        rules: Candidate rules for one room type
        on_date: Night being priced

    Returns:
        The winning rule, or None when no rule covers the date
    """
    candidates = [
        rule for rule in rules
        if rule.is_active and rule.start_date <= on_date <= rule.end_date
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda rule: (rule.priority, rule.pricing_id))


# Pricing

async def get_active_rule(
    db: AsyncSession,
    room_type_id: int,
    on_date: date
) -> Optional[SeasonalPricing]:
    """Return the pricing rule in effect for a room type on a date, if any."""
    stmt = (
        select(SeasonalPricing)
        .where(
            SeasonalPricing.room_type_id == room_type_id,
            SeasonalPricing.is_active.is_(True),
            SeasonalPricing.start_date <= on_date,
            SeasonalPricing.end_date >= on_date,
        )
        .order_by(SeasonalPricing.priority.desc(), SeasonalPricing.pricing_id.desc())
        .limit(1)
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def get_seasonal_price(
    db: AsyncSession,
    room_type_id: int,
    on_date: date
) -> Optional[Decimal]:
    """
    Nightly price of a room type on a date.

    Args:
        db: Open session
        room_type_id: Room type to price
        on_date: Night being priced

    Returns:
        Decimal: Base price times the winning rule's multiplier, or the base
        price when no rule applies; None for an unknown room type
    """
    base_price = await db.scalar(
        select(RoomType.base_price).where(RoomType.room_type_id == room_type_id)
    )
    if base_price is None:
        return None

    rule = await get_active_rule(db, room_type_id, on_date)
    return apply_multiplier(base_price, rule.price_multiplier if rule else 1)


async def get_seasonal_prices(
    db: AsyncSession,
    room_type_id: int,
    dates: Sequence[date]
) -> dict[date, Decimal]:
    """Nightly prices for several dates, loading the room type's rules once."""
    base_price = await db.scalar(
        select(RoomType.base_price).where(RoomType.room_type_id == room_type_id)
    )
    if base_price is None or not dates:
        return {}

    rules = (await db.execute(
        select(SeasonalPricing).where(
            SeasonalPricing.room_type_id == room_type_id,
            SeasonalPricing.is_active.is_(True),
            SeasonalPricing.start_date <= max(dates),
            SeasonalPricing.end_date >= min(dates),
        )
    )).scalars().all()

    prices = {}
    for night in dates:
        rule = resolve_rule(rules, night)
        prices[night] = apply_multiplier(base_price, rule.price_multiplier if rule else 1)
    return prices


# Bookings

async def make_booking(
    db: AsyncSession,
    user_id: int,
    room_type_id: int,
    check_in: date,
    check_out: date,
    total_amount: Decimal,
    method: PaymentMethod = PaymentMethod.CARD,
) -> Booking:
    """
    Reserve one room of a type for every night of a stay.

    Locks the stay's inventory rows, takes one room from each night, and
    inserts the booking as CONFIRMED with a PENDING payment for the amount.

    Raises:
        ProcedureError: "Room type not found" or
            "Insufficient inventory for selected dates"
    """
    room_type = await db.get(RoomType, room_type_id)
    if room_type is None:
        raise ProcedureError("Room type not found")

    nights = nights_between(check_in, check_out)
    if nights < 1:
        raise ProcedureError("Check-out date must be after check-in date")

    inventory = (await db.execute(
        select(RoomInventory)
        .where(
            RoomInventory.room_type_id == room_type_id,
            RoomInventory.stay_date >= check_in,
            RoomInventory.stay_date < check_out,
        )
        .order_by(RoomInventory.stay_date)
        .with_for_update()
    )).scalars().all()

    # A night without an inventory row is not sellable
    if len(inventory) != nights or any(row.qty < 1 for row in inventory):
        logger.info(
            "booking_rejected_no_inventory",
            room_type_id=room_type_id,
            check_in=check_in.isoformat(),
            check_out=check_out.isoformat(),
        )
        raise ProcedureError("Insufficient inventory for selected dates")

    for row in inventory:
        row.qty -= 1

    booking = Booking(
        user_id=user_id,
        room_type_id=room_type_id,
        check_in=check_in,
        check_out=check_out,
        status=BookingStatus.CONFIRMED,
        payment=Payment(
            amount=Decimal(str(total_amount)).quantize(CENT, rounding=ROUND_HALF_UP),
            method=method,
            status=PaymentStatus.PENDING,
        ),
    )
    db.add(booking)
    await db.flush()

    logger.info(
        "booking_made",
        booking_id=booking.booking_id,
        user_id=user_id,
        room_type_id=room_type_id,
        nights=nights,
    )
    return booking


async def cancel_booking(
    db: AsyncSession,
    booking_id: int
) -> tuple[Booking, Optional[Payment]]:
    """
    Cancel a booking before its check-in date.

    Returns one room to every night of the stay and marks the booking
    CANCELLED. A successful payment is refunded; a pending one is left as is.

    Returns:
        The cancelled booking and the refunded payment (None when nothing
        was refunded)

    Raises:
        ProcedureError: "Booking not found", "Booking already cancelled" or
            "Cannot cancel a booking after check-in"
    """
    booking = (await db.execute(
        select(Booking).where(Booking.booking_id == booking_id).with_for_update()
    )).scalar_one_or_none()

    if booking is None:
        raise ProcedureError("Booking not found")
    if booking.status == BookingStatus.CANCELLED:
        raise ProcedureError("Booking already cancelled")
    if today() >= booking.check_in:
        raise ProcedureError("Cannot cancel a booking after check-in")

    inventory = (await db.execute(
        select(RoomInventory)
        .where(
            RoomInventory.room_type_id == booking.room_type_id,
            RoomInventory.stay_date >= booking.check_in,
            RoomInventory.stay_date < booking.check_out,
        )
        .with_for_update()
    )).scalars().all()

    for row in inventory:
        row.qty += 1

    booking.status = BookingStatus.CANCELLED

    payment = (await db.execute(
        select(Payment).where(Payment.booking_id == booking_id).with_for_update()
    )).scalar_one_or_none()

    refunded = None
    if payment is not None and payment.status == PaymentStatus.SUCCESS:
        payment.status = PaymentStatus.REFUNDED
        payment.refunded_at = utcnow()
        payment.refund_reason = "Booking cancelled"
        refunded = payment

    await db.flush()

    logger.info(
        "booking_cancelled",
        booking_id=booking_id,
        nights_released=len(inventory),
        refunded=refunded is not None,
    )
    return booking, refunded


# Reviews

async def add_review(
    db: AsyncSession,
    booking_id: int,
    user_id: int,
    rating: int,
    review_title: str,
    review_text: str,
) -> Review:
    """
    Review a booking.

    The review belongs to the hotel of the booked room type and is marked
    verified when the booking's payment succeeded.

    Raises:
        ProcedureError: "Booking not found", "You can only review your own
            bookings", "Cannot review a cancelled booking" or
            "Review already exists for this booking"
    """
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise ProcedureError("Booking not found")
    if booking.user_id != user_id:
        raise ProcedureError("You can only review your own bookings")
    if booking.status == BookingStatus.CANCELLED:
        raise ProcedureError("Cannot review a cancelled booking")

    existing = await db.scalar(select(Review.review_id).where(Review.booking_id == booking_id))
    if existing is not None:
        raise ProcedureError("Review already exists for this booking")

    hotel_id = await db.scalar(
        select(RoomType.hotel_id).where(RoomType.room_type_id == booking.room_type_id)
    )
    payment_status = await db.scalar(select(Payment.status).where(Payment.booking_id == booking_id))

    review = Review(
        booking_id=booking_id,
        user_id=user_id,
        hotel_id=hotel_id,
        rating=rating,
        review_title=review_title,
        review_text=review_text,
        helpful_count=0,
        is_verified=payment_status == PaymentStatus.SUCCESS,
    )
    db.add(review)

    try:
        await db.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent review of the same booking
        raise ProcedureError("Review already exists for this booking") from e

    logger.info("review_added", review_id=review.review_id, booking_id=booking_id, hotel_id=hotel_id)
    return review


async def mark_review_helpful(db: AsyncSession, review_id: int, user_id: int) -> Review:
    """
    Record that a user found a review helpful.

    Raises:
        ProcedureError: "Review not found" or
            "Review already marked as helpful by this user"
    """
    review = (await db.execute(
        select(Review).where(Review.review_id == review_id).with_for_update()
    )).scalar_one_or_none()
    if review is None:
        raise ProcedureError("Review not found")

    voted = await db.scalar(
        select(ReviewHelpfulVote.vote_id).where(
            ReviewHelpfulVote.review_id == review_id,
            ReviewHelpfulVote.user_id == user_id,
        )
    )
    if voted is not None:
        raise ProcedureError("Review already marked as helpful by this user")

    db.add(ReviewHelpfulVote(review_id=review_id, user_id=user_id))
    review.helpful_count += 1

    try:
        await db.flush()
    except IntegrityError as e:
        raise ProcedureError("Review already marked as helpful by this user") from e

    return review


# Seasonal pricing

async def add_seasonal_pricing(
    db: AsyncSession,
    room_type_id: int,
    season_name: str,
    description: Optional[str],
    start_date: date,
    end_date: date,
    price_multiplier,
    priority: int = 1,
) -> SeasonalPricing:
    """
    Create an active pricing rule for a room type.

    Raises:
        ProcedureError: "Room type not found", "Start date must be before
            end date" or "Price multiplier must be between 0 and 5.0"
    """
    room_type = await db.get(RoomType, room_type_id)
    if room_type is None:
        raise ProcedureError("Room type not found")
    if start_date >= end_date:
        raise ProcedureError("Start date must be before end date")

    multiplier = Decimal(str(price_multiplier))
    if multiplier <= 0 or multiplier > MAX_PRICE_MULTIPLIER:
        raise ProcedureError("Price multiplier must be between 0 and 5.0")

    rule = SeasonalPricing(
        room_type_id=room_type_id,
        season_name=season_name,
        description=description,
        start_date=start_date,
        end_date=end_date,
        price_multiplier=multiplier,
        priority=priority,
        is_active=True,
    )
    db.add(rule)
    await db.flush()

    logger.info(
        "seasonal_pricing_added",
        pricing_id=rule.pricing_id,
        room_type_id=room_type_id,
        multiplier=str(multiplier),
    )
    return rule
