"""Service layer package."""

from .auth_service import AuthService
from .booking_service import BookingService
from .city_service import CityService
from .hotel_service import HotelService
from .idempotency_service import IdempotencyService
from .payment_service import PaymentGateway, PaymentService, get_payment_gateway
from .pricing_service import PricingService
from .review_service import ReviewService
from .room_type_service import RoomTypeService

__all__ = [
    "AuthService",
    "BookingService",
    "CityService",
    "HotelService",
    "IdempotencyService",
    "PaymentGateway",
    "PaymentService",
    "PricingService",
    "ReviewService",
    "RoomTypeService",
    "get_payment_gateway",
]
