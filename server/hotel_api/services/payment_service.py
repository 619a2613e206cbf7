"""Payment service: simulated gateway charges and refunds."""

import logging
import random
import time
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.clock import utcnow
from ..core.config import settings
from ..core.exceptions import AuthorizationError, BadRequestError, NotFoundError
from ..core.observability import metrics_collector
from ..models.booking import Booking, BookingStatus
from ..models.hotel import Hotel, RoomType
from ..models.payment import Payment, PaymentMethod, PaymentStatus
from ..schemas.auth import TokenUser
from ..schemas.payment import PaymentDetail, PaymentRequest, PaymentResult, RefundResult

logger = logging.getLogger(__name__)

MIN_CARD_NUMBER_LENGTH = 15
DEFAULT_REFUND_REASON = "Refund requested by admin"


class PaymentGateway:
    """
    Simulated payment gateway.

    Card payments need a card number of at least 15 digits; every attempt
    then fails at random with a configurable rate per method family.
    """

    def __init__(
        self,
        card_failure_rate: float,
        other_failure_rate: float,
        rng: Optional[random.Random] = None,
    ):
        self.card_failure_rate = card_failure_rate
        self.other_failure_rate = other_failure_rate
        self.rng = rng or random.Random()

    def charge(self, method: PaymentMethod, card_number: Optional[str] = None) -> bool:
        """Return True when the simulated charge goes through."""
        if method == PaymentMethod.CARD:
            if not card_number or len(card_number) < MIN_CARD_NUMBER_LENGTH:
                return False
            return self.rng.random() >= self.card_failure_rate

        return self.rng.random() >= self.other_failure_rate


def get_payment_gateway() -> PaymentGateway:
    """Dependency providing the gateway configured from settings."""
    return PaymentGateway(
        card_failure_rate=settings.payment_card_failure_rate,
        other_failure_rate=settings.payment_other_failure_rate,
    )


class PaymentService:
    """Service for payment-related operations."""

    def __init__(self, db: AsyncSession, gateway: Optional[PaymentGateway] = None):
        self.db = db
        self.gateway = gateway or get_payment_gateway()

    async def process_payment(self, current_user: TokenUser, request: PaymentRequest) -> PaymentResult:
        """
        Charge a booking's pending payment.

        Checks run in order: booking exists, caller owns it, booking is not
        cancelled, payment not already completed, payment record exists. The
        success update only applies while the payment is not yet SUCCESS, so
        two concurrent attempts cannot both complete.

        Args:
            current_user: Caller, who must own the booking
            request: Payment request

        Returns:
            PaymentResult: Completed payment

        Raises:
            NotFoundError: If the booking or its payment record does not exist
            AuthorizationError: If the caller does not own the booking
            BadRequestError: If the booking is cancelled, already paid, or the
                charge fails
        """
        stmt = (
            select(Booking, Payment, RoomType.name, Hotel.name)
            .join(RoomType, Booking.room_type_id == RoomType.room_type_id)
            .join(Hotel, RoomType.hotel_id == Hotel.hotel_id)
            .outerjoin(Payment, Payment.booking_id == Booking.booking_id)
            .where(Booking.booking_id == request.booking_id)
        )
        row = (await self.db.execute(stmt)).one_or_none()

        if row is None:
            raise NotFoundError("Booking")

        booking, payment, room_type_name, hotel_name = row

        if booking.user_id != current_user.user_id:
            raise AuthorizationError("Access denied")

        if booking.status == BookingStatus.CANCELLED:
            raise BadRequestError("Cannot pay for cancelled booking")

        if payment is not None and payment.status == PaymentStatus.SUCCESS:
            raise BadRequestError("Payment already completed for this booking")

        if payment is None:
            raise NotFoundError(message="Payment record not found")

        now = utcnow()
        not_completed = (Payment.booking_id == booking.booking_id, Payment.status != PaymentStatus.SUCCESS)

        if not self.gateway.charge(request.payment_method, request.card_number):
            await self.db.execute(
                update(Payment)
                .where(*not_completed)
                .values(status=PaymentStatus.FAILED, paid_at=now)
            )
            await self.db.commit()

            metrics_collector.record_payment(request.payment_method.value, PaymentStatus.FAILED.value)
            logger.warning(
                "Payment declined by gateway",
                extra={"booking_id": booking.booking_id, "method": request.payment_method.value}
            )
            raise BadRequestError("Payment processing failed. Please try again.")

        transaction_ref = f"txn_{int(time.time() * 1000)}_{booking.booking_id}"
        result = await self.db.execute(
            update(Payment)
            .where(*not_completed)
            .values(
                status=PaymentStatus.SUCCESS,
                method=request.payment_method,
                paid_at=now,
                transaction_ref=transaction_ref,
            )
        )

        if result.rowcount == 0:
            # A concurrent attempt completed the payment first
            await self.db.rollback()
            raise BadRequestError("Payment already completed for this booking")

        await self.db.commit()

        metrics_collector.record_payment(request.payment_method.value, PaymentStatus.SUCCESS.value)
        logger.info(
            "Payment processed successfully",
            extra={
                "payment_id": payment.payment_id,
                "booking_id": booking.booking_id,
                "method": request.payment_method.value,
                "transaction_ref": transaction_ref
            }
        )

        return PaymentResult(
            payment_id=payment.payment_id,
            booking_id=booking.booking_id,
            amount=payment.amount,
            status=PaymentStatus.SUCCESS,
            transaction_ref=transaction_ref,
            paid_at=now,
            hotel_name=hotel_name,
            room_type=room_type_name,
        )

    async def get_payment_detail(self, payment_id: int) -> PaymentDetail:
        """
        Get a payment with its booking's stay and hotel.

        Raises:
            NotFoundError: If the payment does not exist
        """
        stmt = (
            select(
                Payment.payment_id,
                Payment.booking_id,
                Payment.amount,
                Payment.method,
                Payment.status,
                Payment.transaction_ref,
                Payment.paid_at,
                Payment.refunded_at,
                Payment.refund_reason,
                Booking.user_id,
                Booking.check_in,
                Booking.check_out,
                RoomType.name.label("room_type"),
                Hotel.name.label("hotel_name"),
            )
            .join(Booking, Payment.booking_id == Booking.booking_id)
            .join(RoomType, Booking.room_type_id == RoomType.room_type_id)
            .join(Hotel, RoomType.hotel_id == Hotel.hotel_id)
            .where(Payment.payment_id == payment_id)
        )
        row = (await self.db.execute(stmt)).mappings().one_or_none()
        if row is None:
            raise NotFoundError("Payment")
        return PaymentDetail(**row)

    async def refund_payment(self, payment_id: int, reason: Optional[str] = None) -> RefundResult:
        """
        Refund a successful payment.

        Raises:
            NotFoundError: If the payment does not exist
            BadRequestError: If the payment was already refunded or never succeeded
        """
        payment = (await self.db.execute(
            select(Payment).where(Payment.payment_id == payment_id).with_for_update()
        )).scalar_one_or_none()

        if payment is None:
            raise NotFoundError("Payment")

        if payment.status == PaymentStatus.REFUNDED:
            raise BadRequestError("Payment already refunded")

        if payment.status != PaymentStatus.SUCCESS:
            raise BadRequestError("Can only refund successful payments")

        refund_reason = reason or DEFAULT_REFUND_REASON
        payment.status = PaymentStatus.REFUNDED
        payment.refunded_at = utcnow()
        payment.refund_reason = refund_reason

        await self.db.commit()

        metrics_collector.record_refund("admin")
        logger.info(
            "Refund processed",
            extra={"payment_id": payment_id, "booking_id": payment.booking_id}
        )

        return RefundResult(
            payment_id=payment.payment_id,
            booking_id=payment.booking_id,
            refund_amount=payment.amount,
            reason=refund_reason,
        )
