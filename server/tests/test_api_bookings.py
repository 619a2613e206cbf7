"""Tests for creating, viewing, listing and cancelling bookings."""

from datetime import timedelta

import pytest

from conftest import API
from hotel_api.core.clock import today


def iso(days_from_today: int) -> str:
    return (today() + timedelta(days=days_from_today)).isoformat()


@pytest.mark.asyncio
async def test_create_booking(test_client, guest, deluxe_room, stay):
    """A booking is CONFIRMED and priced at the check-in rate per night."""
    check_in, check_out = stay

    response = await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": deluxe_room, "check_in": check_in, "check_out": check_out},
        headers=guest["headers"],
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Booking created successfully"
    data = body["data"]
    assert data["status"] == "CONFIRMED"
    assert data["nights"] == 2
    assert data["total_amount"] == 9000.0
    assert data["hotel_name"] == "Sea Breeze Residency"
    assert data["room_type"] == "Deluxe Room"


@pytest.mark.asyncio
async def test_create_booking_requires_auth(test_client, deluxe_room, stay):
    check_in, check_out = stay

    response = await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": deluxe_room, "check_in": check_in, "check_out": check_out},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_booking_invalid_dates(test_client, guest, deluxe_room):
    response = await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": deluxe_room, "check_in": iso(-2), "check_out": iso(1)},
        headers=guest["headers"],
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Check-in date cannot be in the past"

    response = await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": deluxe_room, "check_in": iso(3), "check_out": iso(3)},
        headers=guest["headers"],
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Check-out date must be after check-in date"


@pytest.mark.asyncio
async def test_create_booking_unknown_room_type(test_client, guest, stay):
    check_in, check_out = stay

    response = await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": 9999, "check_in": check_in, "check_out": check_out},
        headers=guest["headers"],
    )

    assert response.status_code == 404
    assert response.json()["message"] == "Room type not found"


@pytest.mark.asyncio
async def test_overbooking_is_refused(test_client, guest, other_guest, deluxe_room, stay):
    """With two rooms a night the third overlapping booking gets 409."""
    check_in, check_out = stay
    payload = {"room_type_id": deluxe_room, "check_in": check_in, "check_out": check_out}

    first = await test_client.post(f"{API}/bookings", json=payload, headers=guest["headers"])
    second = await test_client.post(f"{API}/bookings", json=payload, headers=other_guest["headers"])
    third = await test_client.post(f"{API}/bookings", json=payload, headers=guest["headers"])

    assert first.status_code == 201
    assert second.status_code == 201
    assert third.status_code == 409
    assert third.json() == {"success": False, "message": "Selected dates are not available"}

    availability = await test_client.get(
        f"{API}/roomtypes/{deluxe_room}/availability",
        params={"check_in": check_in, "check_out": check_out},
    )
    assert availability.json()["data"]["available_count"] == 0


@pytest.mark.asyncio
async def test_booking_beyond_inventory_is_refused(test_client, guest, deluxe_room):
    """A night without an inventory row cannot be sold."""
    response = await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": deluxe_room, "check_in": iso(59), "check_out": iso(61)},
        headers=guest["headers"],
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_idempotent_booking_replays_response(test_client, guest, deluxe_room, stay):
    """Retrying with the same key returns the first response without booking again."""
    check_in, check_out = stay
    payload = {"room_type_id": deluxe_room, "check_in": check_in, "check_out": check_out}
    headers = {**guest["headers"], "Idempotency-Key": "booking-attempt-1"}

    first = await test_client.post(f"{API}/bookings", json=payload, headers=headers)
    replay = await test_client.post(f"{API}/bookings", json=payload, headers=headers)

    assert first.status_code == 201
    assert replay.status_code == 201
    assert replay.json() == first.json()
    assert replay.headers["Idempotent-Replayed"] == "true"

    listing = await test_client.get(f"{API}/bookings", headers=guest["headers"])
    assert listing.json()["data"]["pagination"]["total_items"] == 1


@pytest.mark.asyncio
async def test_idempotency_key_reused_with_other_body(test_client, guest, deluxe_room, stay):
    check_in, check_out = stay
    headers = {**guest["headers"], "Idempotency-Key": "booking-attempt-2"}

    await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": deluxe_room, "check_in": check_in, "check_out": check_out},
        headers=headers,
    )
    response = await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": deluxe_room, "check_in": check_in, "check_out": iso(5)},
        headers=headers,
    )

    assert response.status_code == 422
    assert response.json()["message"] == "Idempotency key was already used with a different request"


@pytest.mark.asyncio
async def test_get_booking_detail(test_client, guest, booking):
    response = await test_client.get(f"{API}/bookings/{booking['booking_id']}", headers=guest["headers"])

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["hotel"] == "Sea Breeze Residency"
    assert data["city"] == "Mumbai"
    assert data["guest_email"] == "guest@example.com"
    assert data["payment_status"] == "PENDING"
    assert data["payment_method"] == "CARD"
    assert data["total_amount"] == 9000.0


@pytest.mark.asyncio
async def test_booking_visible_to_owner_and_admin_only(test_client, other_guest, admin, booking):
    url = f"{API}/bookings/{booking['booking_id']}"

    assert (await test_client.get(url, headers=other_guest["headers"])).status_code == 403
    assert (await test_client.get(url, headers=admin["headers"])).status_code == 200


@pytest.mark.asyncio
async def test_get_booking_not_found(test_client, guest):
    response = await test_client.get(f"{API}/bookings/9999", headers=guest["headers"])

    assert response.status_code == 404
    assert response.json()["message"] == "Booking not found"


@pytest.mark.asyncio
async def test_list_bookings_with_status_filter(test_client, guest, booking, deluxe_room):
    """Listings are newest first, paginated and filterable by status."""
    second = await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": deluxe_room, "check_in": iso(10), "check_out": iso(12)},
        headers=guest["headers"],
    )
    second_id = second.json()["data"]["booking_id"]
    await test_client.put(f"{API}/bookings/{second_id}/cancel", headers=guest["headers"])

    response = await test_client.get(f"{API}/bookings", headers=guest["headers"])
    data = response.json()["data"]
    assert [item["booking_id"] for item in data["bookings"]] == [second_id, booking["booking_id"]]
    assert data["pagination"] == {"current_page": 1, "per_page": 10, "total_items": 2, "total_pages": 1}

    response = await test_client.get(
        f"{API}/bookings", params={"status": "cancelled"}, headers=guest["headers"]
    )
    assert [item["booking_id"] for item in response.json()["data"]["bookings"]] == [second_id]

    response = await test_client.get(
        f"{API}/bookings", params={"limit": 1, "page": 2}, headers=guest["headers"]
    )
    data = response.json()["data"]
    assert [item["booking_id"] for item in data["bookings"]] == [booking["booking_id"]]
    assert data["pagination"]["total_pages"] == 2


@pytest.mark.asyncio
async def test_user_bookings_route(test_client, guest, other_guest, admin, booking):
    url = f"{API}/users/{guest['user_id']}/bookings"

    own = await test_client.get(url, headers=guest["headers"])
    assert own.status_code == 200
    assert own.json()["data"]["pagination"]["total_items"] == 1

    assert (await test_client.get(url, headers=other_guest["headers"])).status_code == 403
    assert (await test_client.get(url, headers=admin["headers"])).status_code == 200


@pytest.mark.asyncio
async def test_cancel_booking_restores_inventory(test_client, guest, deluxe_room, booking, stay):
    check_in, check_out = stay

    response = await test_client.put(
        f"{API}/bookings/{booking['booking_id']}/cancel", headers=guest["headers"]
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Booking cancelled successfully"}

    availability = await test_client.get(
        f"{API}/roomtypes/{deluxe_room}/availability",
        params={"check_in": check_in, "check_out": check_out},
    )
    assert availability.json()["data"]["available_count"] == 2

    detail = await test_client.get(f"{API}/bookings/{booking['booking_id']}", headers=guest["headers"])
    assert detail.json()["data"]["status"] == "CANCELLED"


@pytest.mark.asyncio
async def test_cancel_twice(test_client, guest, booking):
    url = f"{API}/bookings/{booking['booking_id']}/cancel"

    await test_client.put(url, headers=guest["headers"])
    response = await test_client.put(url, headers=guest["headers"])

    assert response.status_code == 400
    assert response.json()["message"] == "Booking is already cancelled"


@pytest.mark.asyncio
async def test_cancel_on_check_in_day_is_refused(test_client, guest, booking, monkeypatch):
    """Cancellation closes once the check-in date arrives."""
    check_in_day = today() + timedelta(days=1)
    monkeypatch.setattr("hotel_api.procedures.today", lambda: check_in_day)

    response = await test_client.put(
        f"{API}/bookings/{booking['booking_id']}/cancel", headers=guest["headers"]
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Cannot cancel a booking after check-in"


@pytest.mark.asyncio
async def test_cancel_someone_elses_booking(test_client, other_guest, booking):
    response = await test_client.put(
        f"{API}/bookings/{booking['booking_id']}/cancel", headers=other_guest["headers"]
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_cancel_paid_booking_refunds_payment(test_client, guest, paid_booking):
    await test_client.put(f"{API}/bookings/{paid_booking['booking_id']}/cancel", headers=guest["headers"])

    payment_id = paid_booking["payment"]["payment_id"]
    response = await test_client.get(f"{API}/payments/{payment_id}", headers=guest["headers"])

    data = response.json()["data"]
    assert data["status"] == "REFUNDED"
    assert data["refund_reason"] == "Booking cancelled"
