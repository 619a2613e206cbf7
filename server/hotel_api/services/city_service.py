"""City service for browsing cities and their hotels."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.city import City
from ..models.hotel import Hotel, RoomType
from ..schemas.city import City as CitySchema
from ..schemas.city import CityHotel

logger = logging.getLogger(__name__)

SORT_FIELDS = ("name", "rating", "price_from")


class CityService:
    """Service for city-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_cities(self) -> list[CitySchema]:
        """Return every city ordered by name."""
        result = await self.db.execute(select(City).order_by(City.name))
        return [CitySchema.model_validate(city) for city in result.scalars().all()]

    async def list_city_hotels(
        self,
        city_id: int,
        rating_min: Optional[float] = None,
        rating_max: Optional[float] = None,
        sort_by: str = "name",
        order: str = "ASC",
    ) -> list[CityHotel]:
        """
        List the hotels of a city with their room type count and lowest base price.

        Args:
            city_id: City to list
            rating_min: Minimum hotel rating (inclusive)
            rating_max: Maximum hotel rating (inclusive)
            sort_by: One of name, rating, price_from; anything else sorts by name
            order: ASC or DESC (case-insensitive); anything else is ASC

        Returns:
            List of hotels, empty for an unknown city
        """
        room_types_count = func.count(RoomType.room_type_id).label("room_types_count")
        price_from = func.min(RoomType.base_price).label("price_from")

        stmt = (
            select(
                Hotel.hotel_id,
                Hotel.name,
                Hotel.address,
                Hotel.rating,
                City.name.label("city_name"),
                City.country,
                room_types_count,
                price_from,
            )
            .join(City, Hotel.city_id == City.city_id)
            .outerjoin(RoomType, RoomType.hotel_id == Hotel.hotel_id)
            .where(Hotel.city_id == city_id)
            .group_by(Hotel.hotel_id, Hotel.name, Hotel.address, Hotel.rating, City.name, City.country)
        )

        if rating_min is not None:
            stmt = stmt.where(Hotel.rating >= rating_min)
        if rating_max is not None:
            stmt = stmt.where(Hotel.rating <= rating_max)

        sort_columns = {"name": Hotel.name, "rating": Hotel.rating, "price_from": price_from}
        sort_column = sort_columns.get(sort_by, Hotel.name)
        descending = order.upper() == "DESC"
        stmt = stmt.order_by(sort_column.desc() if descending else sort_column.asc(), Hotel.hotel_id)

        rows = (await self.db.execute(stmt)).mappings().all()

        logger.debug(
            "Listed city hotels",
            extra={"city_id": city_id, "count": len(rows), "sort_by": sort_by, "order": order}
        )
        return [CityHotel(**row) for row in rows]
