"""Seasonal pricing service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import BadRequestError, NotFoundError
from ..models.city import City
from ..models.hotel import Hotel, RoomType
from ..models.pricing import SeasonalPricing
from ..procedures import (
    ProcedureError,
    add_seasonal_pricing,
    get_active_rule,
    get_seasonal_price,
    price_change_percent,
)
from ..schemas.pricing import (
    CreateSeasonalPricingRequest,
    CurrentPrice,
    SeasonalPricingRule,
    UpdateSeasonalPricingRequest,
)
from .room_type_service import RoomTypeService

logger = logging.getLogger(__name__)


class PricingService:
    """Service for seasonal pricing rules."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _rule_query(self):
        return (
            select(
                SeasonalPricing.pricing_id,
                SeasonalPricing.room_type_id,
                SeasonalPricing.season_name,
                SeasonalPricing.description,
                SeasonalPricing.start_date,
                SeasonalPricing.end_date,
                SeasonalPricing.price_multiplier,
                SeasonalPricing.priority,
                SeasonalPricing.is_active,
                SeasonalPricing.created_at,
                SeasonalPricing.updated_at,
                RoomType.name.label("room_type_name"),
                RoomType.base_price,
                Hotel.name.label("hotel_name"),
                Hotel.hotel_id,
                City.name.label("city_name"),
            )
            .join(RoomType, SeasonalPricing.room_type_id == RoomType.room_type_id)
            .join(Hotel, RoomType.hotel_id == Hotel.hotel_id)
            .join(City, Hotel.city_id == City.city_id)
        )

    async def list_rules(
        self,
        room_type_id: Optional[int] = None,
        hotel_id: Optional[int] = None,
        is_active: Optional[bool] = None,
        on_date: Optional[date] = None,
    ) -> list[SeasonalPricingRule]:
        """
        List pricing rules, highest priority first, then by start date.

        Args:
            room_type_id: Only rules for this room type
            hotel_id: Only rules for this hotel's room types
            is_active: Only active (True) or inactive (False) rules
            on_date: Only rules whose range covers this date
        """
        stmt = self._rule_query()

        if room_type_id is not None:
            stmt = stmt.where(SeasonalPricing.room_type_id == room_type_id)
        if hotel_id is not None:
            stmt = stmt.where(Hotel.hotel_id == hotel_id)
        if is_active is not None:
            stmt = stmt.where(SeasonalPricing.is_active.is_(is_active))
        if on_date is not None:
            stmt = stmt.where(SeasonalPricing.start_date <= on_date, SeasonalPricing.end_date >= on_date)

        stmt = stmt.order_by(
            SeasonalPricing.priority.desc(),
            SeasonalPricing.start_date,
            SeasonalPricing.pricing_id,
        )
        rows = (await self.db.execute(stmt)).mappings().all()
        return [SeasonalPricingRule(**row) for row in rows]

    async def get_rule(self, pricing_id: int) -> SeasonalPricingRule:
        """
        Get one pricing rule.

        Raises:
            NotFoundError: If the rule does not exist
        """
        stmt = self._rule_query().where(SeasonalPricing.pricing_id == pricing_id)
        row = (await self.db.execute(stmt)).mappings().one_or_none()
        if row is None:
            raise NotFoundError(message="Seasonal pricing rule not found")
        return SeasonalPricingRule(**row)

    async def create_rule(self, request: CreateSeasonalPricingRequest) -> SeasonalPricingRule:
        """
        Create a pricing rule through the add_seasonal_pricing routine.

        Raises:
            ProcedureError: If the routine rejects the rule
        """
        try:
            rule = await add_seasonal_pricing(
                self.db,
                room_type_id=request.room_type_id,
                season_name=request.season_name,
                description=request.description,
                start_date=request.start_date,
                end_date=request.end_date,
                price_multiplier=request.price_multiplier,
                priority=request.priority,
            )
            await self.db.commit()
        except ProcedureError:
            await self.db.rollback()
            raise

        logger.info(
            "Seasonal pricing rule created",
            extra={"pricing_id": rule.pricing_id, "room_type_id": rule.room_type_id}
        )
        return await self.get_rule(rule.pricing_id)

    async def update_rule(self, pricing_id: int, request: UpdateSeasonalPricingRequest) -> None:
        """
        Replace a pricing rule's fields.

        Raises:
            NotFoundError: If the rule does not exist
            BadRequestError: If the start date is not before the end date
        """
        rule = await self.db.get(SeasonalPricing, pricing_id)
        if rule is None:
            raise NotFoundError(message="Seasonal pricing rule not found")

        if request.start_date >= request.end_date:
            raise BadRequestError("Start date must be before end date")

        rule.season_name = request.season_name
        rule.description = request.description
        rule.start_date = request.start_date
        rule.end_date = request.end_date
        rule.price_multiplier = Decimal(str(request.price_multiplier))
        rule.priority = request.priority
        rule.is_active = request.is_active

        await self.db.commit()
        logger.info(
            "Seasonal pricing rule updated",
            extra={"pricing_id": pricing_id, "is_active": request.is_active}
        )

    async def delete_rule(self, pricing_id: int) -> None:
        """
        Delete a pricing rule.

        Raises:
            NotFoundError: If the rule does not exist
        """
        result = await self.db.execute(
            delete(SeasonalPricing).where(SeasonalPricing.pricing_id == pricing_id)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError(message="Seasonal pricing rule not found")

        await self.db.commit()
        logger.info("Seasonal pricing rule deleted", extra={"pricing_id": pricing_id})

    async def get_current_price(self, room_type_id: int, on_date: date) -> CurrentPrice:
        """
        Price a room type on a date and compare it with its base price.

        Raises:
            NotFoundError: If the room type does not exist
        """
        room_type, hotel_name = await RoomTypeService(self.db).get_room_type(room_type_id)

        rule = await get_active_rule(self.db, room_type_id, on_date)
        current_price = await get_seasonal_price(self.db, room_type_id, on_date)

        return CurrentPrice(
            room_type_id=room_type_id,
            room_type_name=room_type.name,
            hotel_name=hotel_name,
            base_price=room_type.base_price,
            current_price=current_price,
            price_change_percent=price_change_percent(rule.price_multiplier if rule else None),
            active_season=rule.season_name if rule else None,
            date=on_date.isoformat(),
        )
