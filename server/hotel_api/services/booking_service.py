"""Booking service for business logic operations."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import BadRequestError, NotFoundError
from ..core.observability import metrics_collector
from ..models.booking import Booking, BookingStatus
from ..models.city import City
from ..models.hotel import Hotel, RoomType
from ..models.payment import Payment
from ..models.user import User
from ..procedures import ProcedureError, cancel_booking, get_seasonal_price, make_booking
from ..schemas.booking import BookingCreated, BookingDetail, BookingList, BookingSummary, CreateBookingRequest
from ..schemas.common import Pagination
from .room_type_service import validate_stay_dates

logger = logging.getLogger(__name__)


class BookingService:
    """Service for booking-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_booking(self, booking_id: int) -> Booking:
        """
        Get a booking row.

        Raises:
            NotFoundError: If the booking does not exist
        """
        booking = await self.db.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError("Booking")
        return booking

    async def create_booking(self, user_id: int, request: CreateBookingRequest) -> BookingCreated:
        """
        Book a room type for a stay.

        The total is the seasonal price on the check-in date times the number
        of nights; the make_booking routine reserves inventory and records the
        pending payment.

        Args:
            user_id: Guest making the booking
            request: Booking creation request

        Returns:
            BookingCreated: New booking summary

        Raises:
            BadRequestError: If the dates are invalid
            ProcedureError: If the routine rejects the booking
        """
        nights = validate_stay_dates(request.check_in, request.check_out)

        price_per_night = await get_seasonal_price(self.db, request.room_type_id, request.check_in)
        total_amount = (price_per_night or 0) * nights

        try:
            booking = await make_booking(
                self.db,
                user_id=user_id,
                room_type_id=request.room_type_id,
                check_in=request.check_in,
                check_out=request.check_out,
                total_amount=total_amount,
                method=request.payment_method,
            )
            await self.db.commit()
        except ProcedureError as e:
            await self.db.rollback()
            if "Insufficient inventory" in e.message:
                metrics_collector.record_booking_rejected()
            logger.warning(
                "Booking creation rejected",
                extra={
                    "user_id": user_id,
                    "room_type_id": request.room_type_id,
                    "reason": e.message
                }
            )
            raise

        names = (await self.db.execute(
            select(RoomType.name, Hotel.name)
            .join(Hotel, RoomType.hotel_id == Hotel.hotel_id)
            .where(RoomType.room_type_id == request.room_type_id)
        )).one()
        room_type_name, hotel_name = names

        metrics_collector.record_booking_created(hotel_name)
        logger.info(
            "Booking created successfully",
            extra={
                "booking_id": booking.booking_id,
                "user_id": user_id,
                "room_type_id": request.room_type_id,
                "nights": nights,
                "total_amount": str(booking.payment.amount)
            }
        )

        return BookingCreated(
            booking_id=booking.booking_id,
            status=booking.status,
            total_amount=booking.payment.amount,
            hotel_name=hotel_name,
            room_type=room_type_name,
            check_in=booking.check_in,
            check_out=booking.check_out,
            nights=nights,
        )

    async def get_booking_detail(self, booking_id: int) -> BookingDetail:
        """
        Get a booking joined with its room, hotel, city, payment and guest.

        Raises:
            NotFoundError: If the booking does not exist
        """
        stmt = (
            select(
                Booking.booking_id,
                Booking.user_id,
                Booking.check_in,
                Booking.check_out,
                Booking.status,
                Booking.created_at,
                RoomType.name.label("room_type"),
                RoomType.max_guests,
                Hotel.name.label("hotel"),
                Hotel.address,
                Hotel.rating,
                City.name.label("city"),
                City.country,
                Payment.amount.label("total_amount"),
                Payment.payment_id,
                Payment.method.label("payment_method"),
                Payment.status.label("payment_status"),
                User.full_name.label("guest_name"),
                User.email.label("guest_email"),
            )
            .join(RoomType, Booking.room_type_id == RoomType.room_type_id)
            .join(Hotel, RoomType.hotel_id == Hotel.hotel_id)
            .join(City, Hotel.city_id == City.city_id)
            .join(User, Booking.user_id == User.user_id)
            .outerjoin(Payment, Payment.booking_id == Booking.booking_id)
            .where(Booking.booking_id == booking_id)
        )
        row = (await self.db.execute(stmt)).mappings().one_or_none()
        if row is None:
            raise NotFoundError("Booking")
        return BookingDetail(**row)

    async def cancel_booking(self, booking: Booking) -> None:
        """
        Cancel a booking through the cancel_booking routine.

        Args:
            booking: Booking already checked for access by the caller

        Raises:
            BadRequestError: If the booking is already cancelled
            ProcedureError: If the routine refuses the cancellation
        """
        if booking.status == BookingStatus.CANCELLED:
            raise BadRequestError("Booking is already cancelled")

        try:
            _, refunded = await cancel_booking(self.db, booking.booking_id)
            await self.db.commit()
        except ProcedureError:
            await self.db.rollback()
            raise

        metrics_collector.record_booking_cancelled()
        if refunded is not None:
            metrics_collector.record_refund("cancellation")

        logger.info(
            "Booking cancelled",
            extra={"booking_id": booking.booking_id, "refunded": refunded is not None}
        )

    async def list_user_bookings(
        self,
        user_id: int,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> BookingList:
        """
        List a user's bookings, newest first.

        Args:
            user_id: Owner of the bookings
            status: Only bookings in this status (case-insensitive)
            page: Page number (1-based)
            limit: Page size
        """
        filters = [Booking.user_id == user_id]
        if status:
            filters.append(Booking.status == status.upper())

        stmt = (
            select(
                Booking.booking_id,
                Booking.check_in,
                Booking.check_out,
                Booking.status,
                Booking.created_at,
                RoomType.name.label("room_type"),
                Hotel.name.label("hotel"),
                Hotel.rating,
                City.name.label("city"),
                Payment.amount.label("total_amount"),
                Payment.payment_id,
                Payment.status.label("payment_status"),
            )
            .join(RoomType, Booking.room_type_id == RoomType.room_type_id)
            .join(Hotel, RoomType.hotel_id == Hotel.hotel_id)
            .join(City, Hotel.city_id == City.city_id)
            .outerjoin(Payment, Payment.booking_id == Booking.booking_id)
            .where(*filters)
            .order_by(Booking.created_at.desc(), Booking.booking_id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        rows = (await self.db.execute(stmt)).mappings().all()

        total = await self.db.scalar(select(func.count(Booking.booking_id)).where(*filters))

        return BookingList(
            bookings=[BookingSummary(**row) for row in rows],
            pagination=Pagination.build(page, limit, total or 0),
        )
