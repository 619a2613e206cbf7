"""Tests for seasonal pricing rules and price resolution."""

from datetime import timedelta

import pytest

from conftest import API
from hotel_api.core.clock import today


def iso(days_from_today: int) -> str:
    return (today() + timedelta(days=days_from_today)).isoformat()


def rule_payload(room_type_id: int, start: int, end: int, multiplier: float, **extra) -> dict:
    return {
        "room_type_id": room_type_id,
        "season_name": extra.pop("season_name", "Festive Season"),
        "start_date": iso(start),
        "end_date": iso(end),
        "price_multiplier": multiplier,
        **extra,
    }


async def create_rule(client, admin, payload: dict) -> dict:
    response = await client.post(f"{API}/seasonal-pricing", json=payload, headers=admin["headers"])
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_rule(test_client, admin, deluxe_room):
    response = await test_client.post(
        f"{API}/seasonal-pricing",
        json=rule_payload(deluxe_room, 0, 10, 1.25, description="Diwali week"),
        headers=admin["headers"],
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Seasonal pricing created successfully"
    rule = body["data"]
    assert rule["price_multiplier"] == 1.25
    assert rule["priority"] == 1
    assert rule["is_active"] is True
    assert rule["hotel_name"] == "Sea Breeze Residency"
    assert rule["room_type_name"] == "Deluxe Room"
    assert rule["base_price"] == 4500.0


@pytest.mark.asyncio
async def test_create_rule_requires_admin(test_client, guest, deluxe_room):
    response = await test_client.post(
        f"{API}/seasonal-pricing", json=rule_payload(deluxe_room, 0, 10, 1.25), headers=guest["headers"]
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_rule_rejected_by_routine(test_client, admin, deluxe_room):
    response = await test_client.post(
        f"{API}/seasonal-pricing", json=rule_payload(deluxe_room, 10, 5, 1.25), headers=admin["headers"]
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Start date must be before end date"

    response = await test_client.post(
        f"{API}/seasonal-pricing", json=rule_payload(9999, 1, 5, 1.25), headers=admin["headers"]
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Room type not found"


@pytest.mark.asyncio
@pytest.mark.parametrize("field,value", [
    ("price_multiplier", 5.5),
    ("price_multiplier", 0.05),
    ("priority", 11),
    ("season_name", "ab"),
])
async def test_create_rule_validation(test_client, admin, deluxe_room, field, value):
    payload = rule_payload(deluxe_room, 1, 5, 1.25)
    payload[field] = value

    response = await test_client.post(f"{API}/seasonal-pricing", json=payload, headers=admin["headers"])

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == field


@pytest.mark.asyncio
async def test_current_price_highest_priority_wins(test_client, admin, deluxe_room):
    """Overlapping rules resolve to the highest priority."""
    await create_rule(test_client, admin, rule_payload(deluxe_room, 0, 20, 1.2, season_name="Winter"))
    await create_rule(
        test_client, admin, rule_payload(deluxe_room, 2, 4, 1.5, season_name="New Year", priority=5)
    )

    response = await test_client.get(
        f"{API}/seasonal-pricing/room-types/{deluxe_room}/current-price", params={"date": iso(3)}
    )

    assert response.status_code == 200
    price = response.json()["data"]
    assert price["current_price"] == 6750.0
    assert price["base_price"] == 4500.0
    assert price["price_change_percent"] == 50.0
    assert price["active_season"] == "New Year"
    assert price["date"] == iso(3)

    response = await test_client.get(
        f"{API}/seasonal-pricing/room-types/{deluxe_room}/current-price", params={"date": iso(10)}
    )
    assert response.json()["data"]["active_season"] == "Winter"
    assert response.json()["data"]["current_price"] == 5400.0


@pytest.mark.asyncio
async def test_equal_priority_newest_rule_wins(test_client, admin, deluxe_room):
    await create_rule(test_client, admin, rule_payload(deluxe_room, 0, 5, 1.1, season_name="Older"))
    await create_rule(test_client, admin, rule_payload(deluxe_room, 0, 5, 0.9, season_name="Newer"))

    response = await test_client.get(f"{API}/seasonal-pricing/room-types/{deluxe_room}/current-price")

    price = response.json()["data"]
    assert price["active_season"] == "Newer"
    assert price["current_price"] == 4050.0
    assert price["price_change_percent"] == -10.0


@pytest.mark.asyncio
async def test_current_price_without_rules(test_client, deluxe_room):
    response = await test_client.get(f"{API}/seasonal-pricing/room-types/{deluxe_room}/current-price")

    assert response.status_code == 200
    price = response.json()["data"]
    assert price["current_price"] == 4500.0
    assert price["price_change_percent"] == 0.0
    assert price["active_season"] is None
    assert price["date"] == today().isoformat()


@pytest.mark.asyncio
async def test_current_price_unknown_room_type(test_client, catalog):
    response = await test_client.get(f"{API}/seasonal-pricing/room-types/9999/current-price")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_booking_uses_seasonal_price(test_client, admin, guest, deluxe_room):
    """Bookings charge the check-in night's seasonal price for every night."""
    await create_rule(test_client, admin, rule_payload(deluxe_room, 1, 1 + 5, 2.0))

    response = await test_client.post(
        f"{API}/bookings",
        json={"room_type_id": deluxe_room, "check_in": iso(1), "check_out": iso(3)},
        headers=guest["headers"],
    )

    assert response.status_code == 201
    assert response.json()["data"]["total_amount"] == 18000.0


@pytest.mark.asyncio
async def test_list_rules_with_filters(test_client, admin, deluxe_room, catalog):
    cottage = catalog["room_types"]["Palm Shore Resort/Garden Cottage"]
    low = await create_rule(test_client, admin, rule_payload(deluxe_room, 0, 10, 1.1, priority=1))
    high = await create_rule(test_client, admin, rule_payload(deluxe_room, 20, 30, 1.3, priority=8))
    other = await create_rule(test_client, admin, rule_payload(cottage, 0, 10, 1.2))

    response = await test_client.get(f"{API}/seasonal-pricing")
    ids = [rule["pricing_id"] for rule in response.json()["data"]]
    assert ids[0] == high["pricing_id"]
    assert set(ids) == {low["pricing_id"], high["pricing_id"], other["pricing_id"]}

    response = await test_client.get(f"{API}/seasonal-pricing", params={"room_type_id": deluxe_room})
    assert [rule["pricing_id"] for rule in response.json()["data"]] == [high["pricing_id"], low["pricing_id"]]

    response = await test_client.get(
        f"{API}/seasonal-pricing", params={"hotel_id": catalog["hotels"]["Palm Shore Resort"]}
    )
    assert [rule["pricing_id"] for rule in response.json()["data"]] == [other["pricing_id"]]

    response = await test_client.get(f"{API}/seasonal-pricing", params={"date": iso(25)})
    assert [rule["pricing_id"] for rule in response.json()["data"]] == [high["pricing_id"]]


@pytest.mark.asyncio
async def test_get_update_and_deactivate_rule(test_client, admin, deluxe_room):
    rule = await create_rule(test_client, admin, rule_payload(deluxe_room, 0, 10, 1.5))
    url = f"{API}/seasonal-pricing/{rule['pricing_id']}"

    fetched = await test_client.get(url)
    assert fetched.status_code == 200
    assert fetched.json()["data"]["season_name"] == "Festive Season"

    update = {
        "season_name": "Quiet Season",
        "start_date": iso(0),
        "end_date": iso(10),
        "price_multiplier": 0.8,
        "priority": 3,
        "is_active": False,
    }
    response = await test_client.put(url, json=update, headers=admin["headers"])
    assert response.status_code == 200
    assert response.json()["message"] == "Seasonal pricing updated successfully"

    data = (await test_client.get(url)).json()["data"]
    assert data["season_name"] == "Quiet Season"
    assert data["price_multiplier"] == 0.8
    assert data["is_active"] is False

    # Inactive rules no longer affect the price
    price = await test_client.get(f"{API}/seasonal-pricing/room-types/{deluxe_room}/current-price")
    assert price.json()["data"]["current_price"] == 4500.0

    inactive = await test_client.get(f"{API}/seasonal-pricing", params={"is_active": "false"})
    assert [item["pricing_id"] for item in inactive.json()["data"]] == [rule["pricing_id"]]


@pytest.mark.asyncio
async def test_update_rule_errors(test_client, admin, deluxe_room):
    rule = await create_rule(test_client, admin, rule_payload(deluxe_room, 0, 10, 1.5))
    update = {
        "season_name": "Broken",
        "start_date": iso(10),
        "end_date": iso(2),
        "price_multiplier": 1.1,
    }

    response = await test_client.put(
        f"{API}/seasonal-pricing/{rule['pricing_id']}", json=update, headers=admin["headers"]
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Start date must be before end date"

    update["end_date"] = iso(20)
    response = await test_client.put(f"{API}/seasonal-pricing/9999", json=update, headers=admin["headers"])
    assert response.status_code == 404
    assert response.json()["message"] == "Seasonal pricing rule not found"


@pytest.mark.asyncio
async def test_delete_rule(test_client, admin, deluxe_room):
    rule = await create_rule(test_client, admin, rule_payload(deluxe_room, 0, 10, 1.5))
    url = f"{API}/seasonal-pricing/{rule['pricing_id']}"

    response = await test_client.delete(url, headers=admin["headers"])
    assert response.status_code == 200
    assert response.json()["message"] == "Seasonal pricing deleted successfully"

    assert (await test_client.get(url)).status_code == 404
    assert (await test_client.delete(url, headers=admin["headers"])).status_code == 404
