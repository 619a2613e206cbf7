"""Hotel service for hotel search and detail views."""

import logging
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.clock import today
from ..core.exceptions import NotFoundError
from ..models.city import City
from ..models.hotel import Hotel, RoomType
from ..models.review import Review
from ..procedures import get_seasonal_price
from ..schemas.hotel import HotelDetail, HotelSummary, RoomTypeWithPrice

logger = logging.getLogger(__name__)


class HotelService:
    """Service for hotel-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search_hotels(
        self,
        city_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> list[HotelSummary]:
        """
        List hotels, optionally restricted to a city and a name/address search.

        Args:
            city_id: Only hotels in this city
            search: Case-insensitive substring of the hotel name or address

        Returns:
            Matching hotels ordered by name
        """
        stmt = (
            select(
                Hotel.hotel_id,
                Hotel.city_id,
                Hotel.name,
                Hotel.address,
                Hotel.rating,
                City.name.label("city_name"),
                City.country,
            )
            .join(City, Hotel.city_id == City.city_id)
            .order_by(Hotel.name, Hotel.hotel_id)
        )

        if city_id is not None:
            stmt = stmt.where(Hotel.city_id == city_id)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Hotel.name.ilike(pattern), Hotel.address.ilike(pattern)))

        rows = (await self.db.execute(stmt)).mappings().all()
        return [HotelSummary(**row) for row in rows]

    async def get_hotel_detail(self, hotel_id: int) -> HotelDetail:
        """
        Get a hotel with its review summary and room types priced for today.

        The average rating falls back to the hotel's own rating when it has
        no reviews yet.

        Raises:
            NotFoundError: If the hotel does not exist
        """
        stmt = (
            select(
                Hotel.hotel_id,
                Hotel.name,
                Hotel.address,
                Hotel.rating,
                City.name.label("city_name"),
                City.country,
            )
            .join(City, Hotel.city_id == City.city_id)
            .where(Hotel.hotel_id == hotel_id)
        )
        hotel = (await self.db.execute(stmt)).mappings().one_or_none()

        if hotel is None:
            raise NotFoundError("Hotel")

        room_types = (await self.db.execute(
            select(RoomType)
            .where(RoomType.hotel_id == hotel_id)
            .order_by(RoomType.base_price, RoomType.room_type_id)
        )).scalars().all()

        on_date = today()
        priced_room_types = []
        for room_type in room_types:
            priced_room_types.append(RoomTypeWithPrice(
                room_type_id=room_type.room_type_id,
                name=room_type.name,
                base_price=room_type.base_price,
                max_guests=room_type.max_guests,
                current_price=await get_seasonal_price(self.db, room_type.room_type_id, on_date),
            ))

        summary = (await self.db.execute(
            select(func.count(Review.review_id), func.avg(Review.rating))
            .where(Review.hotel_id == hotel_id)
        )).one()
        total_reviews, average = summary

        return HotelDetail(
            **hotel,
            total_reviews=total_reviews or 0,
            average_rating=round(float(average), 1) if average is not None else hotel["rating"],
            room_types=priced_room_types,
        )
