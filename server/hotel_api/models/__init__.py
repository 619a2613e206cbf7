"""Models module exporting all database models."""

from .booking import Booking, BookingStatus
from .city import City
from .hotel import Hotel, RoomInventory, RoomType
from .idempotency import IdempotencyRecord
from .payment import Payment, PaymentMethod, PaymentStatus
from .pricing import SeasonalPricing
from .review import Review, ReviewHelpfulVote
from .user import User, UserRole

__all__ = [
    # Accounts
    "User",
    "UserRole",

    # Catalog
    "City",
    "Hotel",
    "RoomType",
    "RoomInventory",
    "SeasonalPricing",

    # Booking entities
    "Booking",
    "BookingStatus",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",

    # Reviews
    "Review",
    "ReviewHelpfulVote",

    # Idempotency entity
    "IdempotencyRecord",
]
