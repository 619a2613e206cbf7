"""Sample catalog data for local development and tests."""

import logging
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.city import City
from ..models.hotel import Hotel, RoomInventory, RoomType
from ..models.user import User, UserRole
from .clock import today
from .config import settings
from .security import hash_password

logger = logging.getLogger(__name__)

# city -> hotels -> (room type name, base price, max guests)
SAMPLE_CATALOG = {
    ("Mumbai", "India"): [
        ("Sea Breeze Residency", "12 Marine Drive, Mumbai", "4.5", [
            ("Deluxe Room", "4500.00", 2),
            ("Sea View Suite", "9800.00", 4),
        ]),
        ("Harbour Inn", "88 Colaba Causeway, Mumbai", "3.8", [
            ("Standard Room", "2200.00", 2),
        ]),
    ],
    ("Bengaluru", "India"): [
        ("Garden City Grand", "1 MG Road, Bengaluru", "4.2", [
            ("Executive Room", "5200.00", 2),
            ("Family Room", "7400.00", 5),
        ]),
    ],
    ("Goa", "India"): [
        ("Palm Shore Resort", "Calangute Beach Road, Goa", "4.7", [
            ("Beach Villa", "12500.00", 4),
            ("Garden Cottage", "6100.00", 3),
        ]),
    ],
}


async def seed_sample_data(
    session: AsyncSession,
    inventory_days: int = 90,
    rooms_per_night: int = 5,
) -> dict:
    """
    Load cities, hotels, room types, inventory and an admin account.

    Inventory rows start today and cover ``inventory_days`` nights with
    ``rooms_per_night`` sellable rooms each. Nothing is loaded when cities
    already exist.

    Returns:
        dict: Generated ids keyed by ``cities``, ``hotels``, ``room_types``
        (name -> id) and ``admin_id``
    """
    existing = await session.scalar(select(func.count(City.city_id)))
    if existing:
        logger.info("Sample data already present, skipping", extra={"cities": existing})
        return {}

    ids = {"cities": {}, "hotels": {}, "room_types": {}}
    start = today()

    for (city_name, country), hotels in SAMPLE_CATALOG.items():
        city = City(name=city_name, country=country)
        session.add(city)
        await session.flush()
        ids["cities"][city_name] = city.city_id

        for hotel_name, address, rating, room_types in hotels:
            hotel = Hotel(city_id=city.city_id, name=hotel_name, address=address, rating=Decimal(rating))
            session.add(hotel)
            await session.flush()
            ids["hotels"][hotel_name] = hotel.hotel_id

            for room_name, base_price, max_guests in room_types:
                room_type = RoomType(
                    hotel_id=hotel.hotel_id,
                    name=room_name,
                    base_price=Decimal(base_price),
                    max_guests=max_guests,
                )
                session.add(room_type)
                await session.flush()
                ids["room_types"][f"{hotel_name}/{room_name}"] = room_type.room_type_id

                session.add_all([
                    RoomInventory(
                        room_type_id=room_type.room_type_id,
                        stay_date=start + timedelta(days=offset),
                        qty=rooms_per_night,
                    )
                    for offset in range(inventory_days)
                ])

    admin = User(
        full_name="Administrator",
        email=settings.seed_admin_email.lower(),
        password_hash=hash_password(settings.seed_admin_password),
        role=UserRole.ADMIN,
    )
    session.add(admin)
    await session.flush()
    ids["admin_id"] = admin.user_id

    await session.commit()
    logger.info(
        "Sample data created",
        extra={"cities": len(ids["cities"]), "hotels": len(ids["hotels"]), "room_types": len(ids["room_types"])}
    )
    return ids
