"""Tests for hotel reviews and helpful votes."""

import pytest

from conftest import API

REVIEW_TEXT = "Lovely sea view and very helpful staff throughout our stay."


def review_payload(booking_id: int, rating: int = 5, title: str = "Wonderful stay") -> dict:
    return {
        "booking_id": booking_id,
        "rating": rating,
        "review_title": title,
        "review_text": REVIEW_TEXT,
    }


async def post_review(client, booking: dict, headers: dict, **kwargs) -> dict:
    response = await client.post(
        f"{API}/reviews", json=review_payload(booking["booking_id"], **kwargs), headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_add_review_to_paid_booking_is_verified(test_client, guest, paid_booking):
    response = await test_client.post(
        f"{API}/reviews", json=review_payload(paid_booking["booking_id"]), headers=guest["headers"]
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Review added successfully"
    assert body["data"]["is_verified"] is True
    assert body["data"]["hotel_name"] == "Sea Breeze Residency"
    assert body["data"]["rating"] == 5


@pytest.mark.asyncio
async def test_add_review_to_unpaid_booking_is_unverified(test_client, guest, booking):
    review = await post_review(test_client, booking, guest["headers"])

    assert review["is_verified"] is False


@pytest.mark.asyncio
async def test_one_review_per_booking(test_client, guest, booking):
    await post_review(test_client, booking, guest["headers"])

    response = await test_client.post(
        f"{API}/reviews", json=review_payload(booking["booking_id"]), headers=guest["headers"]
    )

    assert response.status_code == 409
    assert response.json()["message"] == "You have already reviewed this booking"


@pytest.mark.asyncio
async def test_review_someone_elses_booking(test_client, other_guest, booking):
    response = await test_client.post(
        f"{API}/reviews", json=review_payload(booking["booking_id"]), headers=other_guest["headers"]
    )

    assert response.status_code == 403
    assert response.json()["message"] == "You can only review your own bookings"


@pytest.mark.asyncio
async def test_review_cancelled_booking(test_client, guest, booking):
    await test_client.put(f"{API}/bookings/{booking['booking_id']}/cancel", headers=guest["headers"])

    response = await test_client.post(
        f"{API}/reviews", json=review_payload(booking["booking_id"]), headers=guest["headers"]
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Cannot review a cancelled booking"


@pytest.mark.asyncio
async def test_review_unknown_booking(test_client, guest):
    response = await test_client.post(f"{API}/reviews", json=review_payload(9999), headers=guest["headers"])

    assert response.status_code == 404
    assert response.json()["message"] == "Booking not found"


@pytest.mark.asyncio
async def test_review_validation(test_client, guest, booking):
    response = await test_client.post(
        f"{API}/reviews",
        json={"booking_id": booking["booking_id"], "rating": 6, "review_title": "Bad", "review_text": "short"},
        headers=guest["headers"],
    )

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert fields == {"rating", "review_title", "review_text"}


@pytest.mark.asyncio
async def test_hotel_reviews_and_summary(test_client, guest, other_guest, deluxe_room, stay, catalog):
    """Hotel reviews are listed newest first and feed the hotel's average rating."""
    check_in, check_out = stay
    bookings = []
    for user in (guest, other_guest):
        response = await test_client.post(
            f"{API}/bookings",
            json={"room_type_id": deluxe_room, "check_in": check_in, "check_out": check_out},
            headers=user["headers"],
        )
        bookings.append(response.json()["data"])

    first = await post_review(test_client, bookings[0], guest["headers"], rating=5)
    second = await post_review(test_client, bookings[1], other_guest["headers"], rating=2, title="Noisy rooms")

    hotel_id = catalog["hotels"]["Sea Breeze Residency"]

    response = await test_client.get(f"{API}/reviews/hotel/{hotel_id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert [review["review_id"] for review in data["reviews"]] == [second["review_id"], first["review_id"]]
    assert data["reviews"][0]["reviewer_name"] == "Ravi Other"
    assert data["pagination"]["total_items"] == 2

    response = await test_client.get(f"{API}/hotels/{hotel_id}/reviews", params={"rating_filter": 5})
    data = response.json()["data"]
    assert [review["review_id"] for review in data["reviews"]] == [first["review_id"]]

    detail = await test_client.get(f"{API}/hotels/{hotel_id}")
    assert detail.json()["data"]["total_reviews"] == 2
    assert detail.json()["data"]["average_rating"] == 3.5


@pytest.mark.asyncio
async def test_recent_reviews_only_verified(test_client, guest, other_guest, deluxe_room, stay, paid_booking):
    check_in, check_out = stay
    unpaid = await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": deluxe_room, "check_in": check_in, "check_out": check_out},
        headers=other_guest["headers"],
    )

    verified = await post_review(test_client, paid_booking, guest["headers"])
    await post_review(test_client, unpaid.json()["data"], other_guest["headers"])

    response = await test_client.get(f"{API}/reviews/recent")

    assert response.status_code == 200
    reviews = response.json()["data"]
    assert [review["review_id"] for review in reviews] == [verified["review_id"]]
    assert reviews[0]["city_name"] == "Mumbai"


@pytest.mark.asyncio
async def test_get_review(test_client, guest, booking):
    review = await post_review(test_client, booking, guest["headers"])

    response = await test_client.get(f"{API}/reviews/{review['review_id']}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["review_title"] == "Wonderful stay"
    assert data["hotel_name"] == "Sea Breeze Residency"
    assert data["reviewer_name"] == "Asha Guest"
    assert data["helpful_count"] == 0

    missing = await test_client.get(f"{API}/reviews/9999")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Review not found"


@pytest.mark.asyncio
async def test_update_review(test_client, guest, other_guest, booking):
    review = await post_review(test_client, booking, guest["headers"])
    url = f"{API}/reviews/{review['review_id']}"
    changes = {"rating": 4, "review_title": "Good, not perfect", "review_text": REVIEW_TEXT}

    forbidden = await test_client.put(url, json=changes, headers=other_guest["headers"])
    assert forbidden.status_code == 403
    assert forbidden.json()["message"] == "You can only update your own reviews"

    response = await test_client.put(url, json=changes, headers=guest["headers"])
    assert response.status_code == 200
    assert response.json()["message"] == "Review updated successfully"

    data = (await test_client.get(url)).json()["data"]
    assert data["rating"] == 4
    assert data["review_title"] == "Good, not perfect"


@pytest.mark.asyncio
async def test_delete_review(test_client, guest, other_guest, admin, booking):
    review = await post_review(test_client, booking, guest["headers"])
    url = f"{API}/reviews/{review['review_id']}"

    await test_client.post(f"{url}/helpful", headers=other_guest["headers"])

    assert (await test_client.delete(url, headers=other_guest["headers"])).status_code == 403

    response = await test_client.delete(url, headers=admin["headers"])
    assert response.status_code == 200
    assert response.json()["message"] == "Review deleted successfully"

    assert (await test_client.get(url)).status_code == 404


@pytest.mark.asyncio
async def test_mark_helpful_once_per_user(test_client, guest, other_guest, booking):
    review = await post_review(test_client, booking, guest["headers"])
    url = f"{API}/reviews/{review['review_id']}/helpful"

    response = await test_client.post(url, headers=other_guest["headers"])
    assert response.status_code == 200
    assert response.json()["message"] == "Review marked as helpful"

    again = await test_client.post(url, headers=other_guest["headers"])
    assert again.status_code == 409
    assert again.json()["message"] == "You have already marked this review as helpful"

    await test_client.post(url, headers=guest["headers"])

    data = (await test_client.get(f"{API}/reviews/{review['review_id']}")).json()["data"]
    assert data["helpful_count"] == 2


@pytest.mark.asyncio
async def test_mark_helpful_unknown_review(test_client, guest):
    response = await test_client.post(f"{API}/reviews/9999/helpful", headers=guest["headers"])

    assert response.status_code == 404
