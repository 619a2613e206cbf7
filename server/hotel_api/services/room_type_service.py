"""Room type service: availability, calendar and price quotes."""

import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.clock import today
from ..core.exceptions import BadRequestError, NotFoundError
from ..models.hotel import Hotel, RoomInventory, RoomType
from ..procedures import get_seasonal_price, get_seasonal_prices, nights_between, stay_dates
from ..schemas.room_type import Availability, Calendar, CalendarDay, NightlyPrice, PriceQuote

logger = logging.getLogger(__name__)

CALENDAR_DEFAULT_DAYS = 30


def validate_stay_dates(check_in: date, check_out: date) -> int:
    """
    Check that a stay starts today or later and lasts at least one night.

    Returns:
        int: Number of nights

    Raises:
        BadRequestError: If check-in is in the past or not before check-out
    """
    if check_in < today():
        raise BadRequestError("Check-in date cannot be in the past")
    if check_in >= check_out:
        raise BadRequestError("Check-out date must be after check-in date")
    return nights_between(check_in, check_out)


class RoomTypeService:
    """Service for room type inventory and pricing lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_room_type(self, room_type_id: int) -> tuple[RoomType, str]:
        """
        Get a room type with its hotel's name.

        Raises:
            NotFoundError: If the room type does not exist
        """
        stmt = (
            select(RoomType, Hotel.name)
            .join(Hotel, RoomType.hotel_id == Hotel.hotel_id)
            .where(RoomType.room_type_id == room_type_id)
        )
        row = (await self.db.execute(stmt)).one_or_none()
        if row is None:
            raise NotFoundError("Room type")
        return row[0], row[1]

    async def check_availability(self, room_type_id: int, check_in: date, check_out: date) -> Availability:
        """
        Check whether a room type can be booked for a stay and what it costs.

        A night without an inventory row counts as sold out. The nightly price
        is the seasonal price on the check-in date.

        Raises:
            BadRequestError: If the dates are invalid
            NotFoundError: If the room type does not exist
        """
        nights = validate_stay_dates(check_in, check_out)
        room_type, hotel_name = await self.get_room_type(room_type_id)

        quantities = (await self.db.execute(
            select(RoomInventory.qty).where(
                RoomInventory.room_type_id == room_type_id,
                RoomInventory.stay_date >= check_in,
                RoomInventory.stay_date < check_out,
            )
        )).scalars().all()

        available_count = min(quantities) if len(quantities) == nights else 0
        price_per_night = await get_seasonal_price(self.db, room_type_id, check_in)

        return Availability(
            room_type_id=room_type_id,
            room_type_name=room_type.name,
            hotel_name=hotel_name,
            check_in=check_in,
            check_out=check_out,
            nights=nights,
            available=available_count > 0,
            available_count=available_count,
            price_per_night=price_per_night,
            total_amount=price_per_night * nights,
        )

    async def get_calendar(
        self,
        room_type_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Calendar:
        """
        Day-by-day free rooms and price for the nights that have inventory.

        Args:
            room_type_id: Room type to list
            start_date: First day (default today)
            end_date: Last day, inclusive (default 30 days after today)

        Raises:
            BadRequestError: If start_date is after end_date
            NotFoundError: If the room type does not exist
        """
        start_date = start_date or today()
        end_date = end_date or today() + timedelta(days=CALENDAR_DEFAULT_DAYS)
        if start_date > end_date:
            raise BadRequestError("Start date must not be after end date")

        await self.get_room_type(room_type_id)

        rows = (await self.db.execute(
            select(RoomInventory.stay_date, RoomInventory.qty)
            .where(
                RoomInventory.room_type_id == room_type_id,
                RoomInventory.stay_date >= start_date,
                RoomInventory.stay_date <= end_date,
            )
            .order_by(RoomInventory.stay_date)
        )).all()

        prices = await get_seasonal_prices(self.db, room_type_id, [row.stay_date for row in rows])

        return Calendar(
            room_type_id=room_type_id,
            calendar=[
                CalendarDay(
                    stay_date=row.stay_date,
                    available_rooms=row.qty,
                    price_per_night=prices.get(row.stay_date),
                )
                for row in rows
            ],
        )

    async def quote_price(self, room_type_id: int, check_in: date, check_out: date) -> PriceQuote:
        """
        Price every night of a stay under the seasonal rules.

        Raises:
            BadRequestError: If the dates are invalid
            NotFoundError: If the room type does not exist
        """
        nights = validate_stay_dates(check_in, check_out)
        await self.get_room_type(room_type_id)

        dates = stay_dates(check_in, check_out)
        prices = await get_seasonal_prices(self.db, room_type_id, dates)

        return PriceQuote(
            room_type_id=room_type_id,
            check_in=check_in,
            check_out=check_out,
            nights=nights,
            nightly_prices=[NightlyPrice(stay_date=night, price=prices[night]) for night in dates],
            total_amount=sum(prices.values()),
        )
