"""Seasonal pricing router: public reads, admin writes."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.clock import today
from ..core.database import get_db
from ..core.dependencies import AdminUser
from ..core.exceptions import ApiError, ErrorRule, InternalServerError, translate_procedure_error
from ..core.responses import api_success
from ..procedures import ProcedureError
from ..schemas.auth import TokenUser
from ..schemas.pricing import CreateSeasonalPricingRequest, UpdateSeasonalPricingRequest
from ..services.pricing_service import PricingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/seasonal-pricing", tags=["seasonal pricing"])

DB_DEPENDENCY = Depends(get_db)

ADD_PRICING_ERRORS: list[ErrorRule] = [
    ("Start date must be before end date", 400, "Start date must be before end date"),
    ("Price multiplier must be between", 400, "Price multiplier must be between 0 and 5.0"),
    ("Room type not found", 404, "Room type not found"),
]


@router.get("")
async def list_pricing_rules(
    room_type_id: Optional[int] = Query(None, ge=1),
    hotel_id: Optional[int] = Query(None, ge=1),
    is_active: Optional[bool] = Query(None),
    on_date: Optional[date] = Query(None, alias="date", description="Only rules covering this date"),
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """List pricing rules, highest priority first."""
    try:
        rules = await PricingService(db).list_rules(
            room_type_id=room_type_id,
            hotel_id=hotel_id,
            is_active=is_active,
            on_date=on_date,
        )
        return api_success(rules)

    except ApiError:
        raise

    except Exception as e:
        logger.error("Unexpected error listing pricing rules", extra={"error": str(e)}, exc_info=True)
        raise InternalServerError("Failed to fetch seasonal pricing", error=str(e))


@router.post("", status_code=201)
async def create_pricing_rule(
    request: CreateSeasonalPricingRequest,
    current_user: TokenUser = AdminUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Create a pricing rule. Admin only."""
    try:
        try:
            rule = await PricingService(db).create_rule(request)
        except ProcedureError as e:
            raise translate_procedure_error(e, ADD_PRICING_ERRORS, "Failed to create seasonal pricing")

        return api_success(rule, "Seasonal pricing created successfully", status_code=201)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error creating pricing rule",
            extra={"room_type_id": request.room_type_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to create seasonal pricing", error=str(e))


@router.get("/room-types/{room_type_id}/current-price")
async def get_current_price(
    room_type_id: int,
    on_date: Optional[date] = Query(None, alias="date", description="Date to price (default today)"),
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Price of a room type on a date compared with its base price."""
    try:
        price = await PricingService(db).get_current_price(room_type_id, on_date or today())
        return api_success(price)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error getting current price",
            extra={"room_type_id": room_type_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to get current price", error=str(e))


@router.get("/{pricing_id}")
async def get_pricing_rule(
    pricing_id: int,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Get one pricing rule."""
    try:
        return api_success(await PricingService(db).get_rule(pricing_id))

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error fetching pricing rule",
            extra={"pricing_id": pricing_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to fetch pricing rule", error=str(e))


@router.put("/{pricing_id}")
async def update_pricing_rule(
    pricing_id: int,
    request: UpdateSeasonalPricingRequest,
    current_user: TokenUser = AdminUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Replace a pricing rule's fields. Admin only."""
    try:
        await PricingService(db).update_rule(pricing_id, request)
        return api_success(message="Seasonal pricing updated successfully")

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error updating pricing rule",
            extra={"pricing_id": pricing_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to update seasonal pricing", error=str(e))


@router.delete("/{pricing_id}")
async def delete_pricing_rule(
    pricing_id: int,
    current_user: TokenUser = AdminUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Delete a pricing rule. Admin only."""
    try:
        await PricingService(db).delete_rule(pricing_id)
        return api_success(message="Seasonal pricing deleted successfully")

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error deleting pricing rule",
            extra={"pricing_id": pricing_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to delete seasonal pricing", error=str(e))
