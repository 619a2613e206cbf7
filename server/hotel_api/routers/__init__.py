"""FastAPI routers package."""

from .auth import router as auth_router
from .bookings import router as bookings_router
from .bookings import users_router
from .cities import router as cities_router
from .health import router as health_router
from .hotels import router as hotels_router
from .payments import router as payments_router
from .reviews import router as reviews_router
from .roomtypes import router as roomtypes_router
from .seasonal_pricing import router as seasonal_pricing_router

# Mounted under the versioned API prefix
API_ROUTERS = [
    auth_router,
    cities_router,
    hotels_router,
    roomtypes_router,
    bookings_router,
    users_router,
    payments_router,
    reviews_router,
    seasonal_pricing_router,
]

__all__ = [
    "API_ROUTERS",
    "auth_router",
    "bookings_router",
    "cities_router",
    "health_router",
    "hotels_router",
    "payments_router",
    "reviews_router",
    "roomtypes_router",
    "seasonal_pricing_router",
    "users_router",
]
