"""Unit tests for the booking database routines."""

from datetime import timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import select

from hotel_api.core.clock import today
from hotel_api.models import (
    Booking,
    BookingStatus,
    Payment,
    PaymentStatus,
    RoomInventory,
    User,
)
from hotel_api.procedures import (
    ProcedureError,
    add_review,
    add_seasonal_pricing,
    cancel_booking,
    get_seasonal_price,
    get_seasonal_prices,
    make_booking,
    mark_review_helpful,
)


@pytest_asyncio.fixture
async def user_id(test_session, catalog):
    user = User(full_name="Unit Guest", email="unit@example.com", password_hash="x")
    test_session.add(user)
    await test_session.commit()
    return user.user_id


@pytest.fixture
def room_type_id(catalog):
    return catalog["room_types"]["Harbour Inn/Standard Room"]


def day(offset: int):
    return today() + timedelta(days=offset)


async def inventory_qty(session, room_type_id, offsets):
    rows = await session.execute(
        select(RoomInventory.stay_date, RoomInventory.qty).where(
            RoomInventory.room_type_id == room_type_id,
            RoomInventory.stay_date.in_([day(offset) for offset in offsets]),
        ).order_by(RoomInventory.stay_date)
    )
    return [row.qty for row in rows]


@pytest.mark.asyncio
async def test_make_booking_takes_one_room_per_night(test_session, user_id, room_type_id):
    booking = await make_booking(
        test_session, user_id, room_type_id, day(1), day(4), Decimal("6600.00")
    )
    await test_session.commit()

    assert booking.status == BookingStatus.CONFIRMED
    assert booking.payment.status == PaymentStatus.PENDING
    assert booking.payment.amount == Decimal("6600.00")
    assert await inventory_qty(test_session, room_type_id, [0, 1, 2, 3, 4]) == [2, 1, 1, 1, 2]


@pytest.mark.asyncio
async def test_make_booking_insufficient_inventory(test_session, user_id, room_type_id):
    for _ in range(2):
        await make_booking(test_session, user_id, room_type_id, day(5), day(6), Decimal("2200"))
    await test_session.commit()

    with pytest.raises(ProcedureError, match="Insufficient inventory for selected dates"):
        await make_booking(test_session, user_id, room_type_id, day(4), day(6), Decimal("4400"))
    await test_session.rollback()

    # The failed attempt left the free night untouched
    assert await inventory_qty(test_session, room_type_id, [4, 5]) == [2, 0]


@pytest.mark.asyncio
async def test_make_booking_missing_inventory_rows(test_session, user_id, room_type_id):
    with pytest.raises(ProcedureError, match="Insufficient inventory"):
        await make_booking(test_session, user_id, room_type_id, day(100), day(101), Decimal("2200"))


@pytest.mark.asyncio
async def test_make_booking_unknown_room_type(test_session, user_id):
    with pytest.raises(ProcedureError, match="Room type not found"):
        await make_booking(test_session, user_id, 9999, day(1), day(2), Decimal("1"))


@pytest.mark.asyncio
async def test_make_booking_requires_a_night(test_session, user_id, room_type_id):
    with pytest.raises(ProcedureError, match="Check-out date must be after check-in date"):
        await make_booking(test_session, user_id, room_type_id, day(3), day(3), Decimal("0"))


@pytest.mark.asyncio
async def test_cancel_booking_releases_nights(test_session, user_id, room_type_id):
    booking = await make_booking(test_session, user_id, room_type_id, day(1), day(3), Decimal("4400"))
    await test_session.commit()

    cancelled, refunded = await cancel_booking(test_session, booking.booking_id)
    await test_session.commit()

    assert cancelled.status == BookingStatus.CANCELLED
    assert refunded is None
    assert await inventory_qty(test_session, room_type_id, [1, 2]) == [2, 2]

    with pytest.raises(ProcedureError, match="Booking already cancelled"):
        await cancel_booking(test_session, booking.booking_id)


@pytest.mark.asyncio
async def test_cancel_booking_refunds_successful_payment(test_session, user_id, room_type_id):
    booking = await make_booking(test_session, user_id, room_type_id, day(1), day(2), Decimal("2200"))
    booking.payment.status = PaymentStatus.SUCCESS
    await test_session.commit()

    _, refunded = await cancel_booking(test_session, booking.booking_id)
    await test_session.commit()

    assert refunded is not None
    assert refunded.status == PaymentStatus.REFUNDED
    assert refunded.refund_reason == "Booking cancelled"
    assert refunded.refunded_at is not None


@pytest.mark.asyncio
async def test_cancel_booking_after_check_in(test_session, user_id, room_type_id, monkeypatch):
    booking = await make_booking(test_session, user_id, room_type_id, day(1), day(2), Decimal("2200"))
    await test_session.commit()

    monkeypatch.setattr("hotel_api.procedures.today", lambda: day(2))

    with pytest.raises(ProcedureError, match="Cannot cancel a booking after check-in"):
        await cancel_booking(test_session, booking.booking_id)


@pytest.mark.asyncio
async def test_cancel_unknown_booking(test_session, catalog):
    with pytest.raises(ProcedureError, match="Booking not found"):
        await cancel_booking(test_session, 9999)


@pytest.mark.asyncio
async def test_add_review_rules(test_session, user_id, room_type_id, catalog):
    booking = await make_booking(test_session, user_id, room_type_id, day(1), day(2), Decimal("2200"))
    await test_session.commit()

    with pytest.raises(ProcedureError, match="You can only review your own bookings"):
        await add_review(test_session, booking.booking_id, user_id + 1000, 4, "Decent", "Decent enough stay")

    review = await add_review(test_session, booking.booking_id, user_id, 4, "Decent", "Decent enough stay")
    await test_session.commit()

    assert review.hotel_id == catalog["hotels"]["Harbour Inn"]
    assert review.is_verified is False
    assert review.helpful_count == 0

    with pytest.raises(ProcedureError, match="Review already exists for this booking"):
        await add_review(test_session, booking.booking_id, user_id, 5, "Again", "Trying a second time")


@pytest.mark.asyncio
async def test_add_review_cancelled_booking(test_session, user_id, room_type_id):
    booking = await make_booking(test_session, user_id, room_type_id, day(1), day(2), Decimal("2200"))
    await cancel_booking(test_session, booking.booking_id)
    await test_session.commit()

    with pytest.raises(ProcedureError, match="Cannot review a cancelled booking"):
        await add_review(test_session, booking.booking_id, user_id, 3, "Never went", "Plans changed sadly")


@pytest.mark.asyncio
async def test_mark_review_helpful_once(test_session, user_id, room_type_id):
    booking = await make_booking(test_session, user_id, room_type_id, day(1), day(2), Decimal("2200"))
    review = await add_review(test_session, booking.booking_id, user_id, 5, "Great", "Great little hotel")
    await test_session.commit()

    updated = await mark_review_helpful(test_session, review.review_id, user_id)
    await test_session.commit()
    assert updated.helpful_count == 1

    with pytest.raises(ProcedureError, match="Review already marked as helpful by this user"):
        await mark_review_helpful(test_session, review.review_id, user_id)

    with pytest.raises(ProcedureError, match="Review not found"):
        await mark_review_helpful(test_session, 9999, user_id)


@pytest.mark.asyncio
async def test_seasonal_price_resolution(test_session, room_type_id):
    await add_seasonal_pricing(test_session, room_type_id, "Peak", None, day(0), day(10), Decimal("1.5"))
    await add_seasonal_pricing(test_session, room_type_id, "Gala", None, day(3), day(4), Decimal("2.0"), priority=3)
    await test_session.commit()

    assert await get_seasonal_price(test_session, room_type_id, day(1)) == Decimal("3300.00")
    assert await get_seasonal_price(test_session, room_type_id, day(3)) == Decimal("4400.00")
    assert await get_seasonal_price(test_session, room_type_id, day(20)) == Decimal("2200.00")
    assert await get_seasonal_price(test_session, 9999, day(1)) is None

    prices = await get_seasonal_prices(test_session, room_type_id, [day(2), day(4), day(11)])
    assert prices == {day(2): Decimal("3300.00"), day(4): Decimal("4400.00"), day(11): Decimal("2200.00")}


@pytest.mark.asyncio
@pytest.mark.parametrize("start,end,multiplier,message", [
    (5, 5, "1.2", "Start date must be before end date"),
    (1, 5, "0", "Price multiplier must be between 0 and 5.0"),
    (1, 5, "5.01", "Price multiplier must be between 0 and 5.0"),
])
async def test_add_seasonal_pricing_rules(test_session, room_type_id, start, end, multiplier, message):
    with pytest.raises(ProcedureError, match=message):
        await add_seasonal_pricing(
            test_session, room_type_id, "Bad", None, day(start), day(end), Decimal(multiplier)
        )


@pytest.mark.asyncio
async def test_add_seasonal_pricing_unknown_room_type(test_session, catalog):
    with pytest.raises(ProcedureError, match="Room type not found"):
        await add_seasonal_pricing(test_session, 9999, "Peak", None, day(0), day(3), Decimal("1.2"))


@pytest.mark.asyncio
async def test_booking_rows_persist(test_session, user_id, room_type_id):
    booking = await make_booking(test_session, user_id, room_type_id, day(2), day(3), Decimal("2200"))
    await test_session.commit()

    stored = (await test_session.execute(
        select(Booking.status, Payment.status)
        .join(Payment, Payment.booking_id == Booking.booking_id)
        .where(Booking.booking_id == booking.booking_id)
    )).one()
    assert tuple(stored) == (BookingStatus.CONFIRMED, PaymentStatus.PENDING)
