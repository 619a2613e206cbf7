"""Payment router for charging bookings and refunds."""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import AdminUser, CurrentUser, IdempotencyKey, ensure_owner_or_admin
from ..core.exceptions import ApiError, InternalServerError
from ..core.responses import api_success
from ..schemas.auth import TokenUser
from ..schemas.payment import PaymentRequest, RefundRequest
from ..services.idempotency_service import IdempotencyService
from ..services.payment_service import PaymentGateway, PaymentService, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])

DB_DEPENDENCY = Depends(get_db)
GATEWAY_DEPENDENCY = Depends(get_payment_gateway)
REFUND_BODY = Body(None)


@router.post("")
async def process_payment(
    request: PaymentRequest,
    current_user: TokenUser = CurrentUser,
    idempotency_key: Optional[str] = IdempotencyKey,
    gateway: PaymentGateway = GATEWAY_DEPENDENCY,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """
    Pay for a booking. Booking owner only.

    Optionally idempotent based on the Idempotency-Key header.
    """
    payment_service = PaymentService(db, gateway)

    async def operation() -> JSONResponse:
        payment = await payment_service.process_payment(current_user, request)
        return api_success(payment, "Payment processed successfully")

    try:
        return await IdempotencyService(db).run(
            idempotency_key,
            scope=f"payments/process:{current_user.user_id}",
            request_body=request.model_dump(mode="json"),
            operation=operation,
        )

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in payment processing",
            extra={"booking_id": request.booking_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Payment processing failed", error=str(e))


@router.get("/{payment_id}")
async def get_payment(
    payment_id: int,
    current_user: TokenUser = CurrentUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Get payment details. Booking owner or admin only."""
    try:
        payment = await PaymentService(db).get_payment_detail(payment_id)
        ensure_owner_or_admin(payment.user_id, current_user)
        return api_success(payment)

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error fetching payment",
            extra={"payment_id": payment_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Failed to fetch payment details", error=str(e))


@router.post("/{payment_id}/refund")
async def refund_payment(
    payment_id: int,
    request: Optional[RefundRequest] = REFUND_BODY,
    current_user: TokenUser = AdminUser,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Refund a successful payment. Admin only."""
    try:
        refund = await PaymentService(db).refund_payment(
            payment_id, reason=request.reason if request else None
        )
        return api_success(refund, "Refund processed successfully")

    except ApiError:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in refund processing",
            extra={"payment_id": payment_id, "admin_id": current_user.user_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError("Refund processing failed", error=str(e))
