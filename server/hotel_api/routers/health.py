"""Service meta endpoints: health check, API documentation map and metrics."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..core.database import check_db
from ..core.observability import get_prometheus_metrics
from ..core.responses import api_success
from ..schemas.health import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["meta"])

API_ENDPOINTS = {
    "auth": {
        "POST /auth/register": "Register a new user",
        "POST /auth/login": "Login user",
        "POST /auth/logout": "Logout user",
    },
    "cities": {
        "GET /cities": "Get all cities",
        "GET /cities/:city_id/hotels": "Get hotels in a city",
    },
    "hotels": {
        "GET /hotels": "Search hotels by city and name",
        "GET /hotels/:hotel_id": "Get hotel details with room types",
        "GET /hotels/:hotel_id/reviews": "Get hotel reviews",
    },
    "roomTypes": {
        "GET /roomtypes/:room_type_id/availability": "Check room availability",
        "GET /roomtypes/:room_type_id/calendar": "Get availability calendar",
        "GET /roomtypes/:room_type_id/pricing": "Get nightly price breakdown for a stay",
    },
    "bookings": {
        "POST /bookings": "Create a new booking",
        "GET /bookings": "Get your bookings",
        "GET /bookings/:booking_id": "Get booking details",
        "PUT /bookings/:booking_id/cancel": "Cancel a booking",
        "GET /users/:user_id/bookings": "Get user bookings",
    },
    "payments": {
        "POST /payments": "Process payment for booking",
        "GET /payments/:payment_id": "Get payment details",
        "POST /payments/:payment_id/refund": "Process refund (Admin only)",
    },
    "reviews": {
        "POST /reviews": "Add a review",
        "GET /reviews/recent": "Get recent reviews",
        "GET /reviews/hotel/:hotel_id": "Get hotel reviews",
        "GET /reviews/:review_id": "Get specific review",
        "PUT /reviews/:review_id": "Update review",
        "DELETE /reviews/:review_id": "Delete review",
        "POST /reviews/:review_id/helpful": "Mark review as helpful",
    },
    "seasonalPricing": {
        "GET /seasonal-pricing": "Get seasonal pricing rules",
        "POST /seasonal-pricing": "Create pricing rule (Admin only)",
        "GET /seasonal-pricing/:pricing_id": "Get specific pricing rule",
        "PUT /seasonal-pricing/:pricing_id": "Update pricing rule (Admin only)",
        "DELETE /seasonal-pricing/:pricing_id": "Delete pricing rule (Admin only)",
        "GET /seasonal-pricing/room-types/:room_type_id/current-price": "Get current price",
    },
}


@router.get("/health", response_model=HealthResponse)
async def health_check() -> JSONResponse:
    """
    Health check endpoint.

    Returns current service status and timestamp.
    """
    response_data = HealthResponse(
        message="Hotel Booking API is running",
        timestamp=datetime.now(timezone.utc),
        version=settings.api_version,
        environment=settings.environment,
    )
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))


@router.get("/ready")
async def readiness_check() -> JSONResponse:
    """Readiness check: the database answers a trivial query."""
    try:
        await check_db()
    except Exception as e:
        logger.warning("Readiness check failed", extra={"error": str(e)})
        return JSONResponse(
            status_code=503,
            content={"success": False, "message": "Database unavailable"},
        )
    return api_success(message="Ready")


@router.get(settings.api_prefix)
async def api_documentation(request: Request) -> JSONResponse:
    """Map of every API endpoint with a short description."""
    base_url = str(request.base_url).rstrip("/") + settings.api_prefix
    return api_success(
        message="Hotel Booking API",
        version=settings.api_version,
        documentation={
            "endpoints": API_ENDPOINTS,
            "authentication": "Bearer token required for protected endpoints",
            "baseUrl": base_url,
        },
    )


@router.get("/metrics", response_class=Response)
async def metrics() -> Response:
    """
    Return Prometheus metrics.

    Returns:
        Response: Prometheus metrics in text format
    """
    return Response(
        content=get_prometheus_metrics(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )
