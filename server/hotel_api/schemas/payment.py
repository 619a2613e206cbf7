"""Payment-related Pydantic schemas."""

import re
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..models.payment import PaymentMethod, PaymentStatus

_CARD_SEPARATORS = re.compile(r"[\s-]")


def luhn_valid(number: str) -> bool:
    """
    Check a card number against the Luhn checksum.

    Args:
        number: Card number consisting of digits only

    Returns:
        bool: True if the checksum holds
    """
    if not number.isdigit():
        return False

    total = 0
    for index, char in enumerate(reversed(number)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


class PaymentRequest(BaseModel):
    """Request schema for paying a booking."""

    booking_id: int = Field(..., ge=1, description="Booking to pay")
    payment_method: PaymentMethod = Field(..., description="CARD, UPI, NETBANKING or CASH")
    card_number: Optional[str] = Field(None, description="Card number, required for card payments")
    expiry: Optional[str] = Field(
        None, pattern=r"^(0[1-9]|1[0-2])/\d{2}$", description="Card expiry (MM/YY)"
    )
    cvv: Optional[str] = Field(None, min_length=3, max_length=4, description="Card security code")

    @field_validator("card_number")
    @classmethod
    def validate_card_number(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        digits = _CARD_SEPARATORS.sub("", v)
        if not 12 <= len(digits) <= 19 or not luhn_valid(digits):
            raise ValueError("Valid card number required")
        return digits


class PaymentResult(BaseModel):
    """Response data for a successful payment."""

    payment_id: int
    booking_id: int
    amount: float
    status: PaymentStatus
    transaction_ref: str
    paid_at: datetime
    hotel_name: str
    room_type: str


class PaymentDetail(BaseModel):
    """Payment with its booking's stay and hotel."""

    payment_id: int
    booking_id: int
    amount: float
    method: PaymentMethod
    status: PaymentStatus
    transaction_ref: Optional[str] = None
    paid_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None
    refund_reason: Optional[str] = None
    user_id: int
    check_in: date
    check_out: date
    room_type: str
    hotel_name: str


class RefundRequest(BaseModel):
    """Request schema for refunding a payment."""

    reason: Optional[str] = Field(None, max_length=255, description="Reason recorded on the refund")


class RefundResult(BaseModel):
    """Response data for a processed refund."""

    payment_id: int
    booking_id: int
    refund_amount: float
    reason: str
