#!/usr/bin/env python3
"""Setup script for the hotel booking API."""

import asyncio
import logging
import sys
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from alembic import command
from alembic.config import Config
from hotel_api.core.database import async_session_factory, close_db
from hotel_api.core.seed import seed_sample_data

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def run_migrations():
    """Bring the database schema up to the latest Alembic revision."""
    logger.info("Running database migrations...")

    alembic_cfg = Config(str(server_dir / "db" / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(server_dir / "db" / "alembic"))
    command.upgrade(alembic_cfg, "head")

    logger.info("Database migrations completed")


async def create_sample_data():
    """Load the sample catalog and the admin account."""
    logger.info("Creating sample data...")

    async with async_session_factory() as session:
        try:
            ids = await seed_sample_data(session)
        except Exception as e:
            await session.rollback()
            logger.error(f"Failed to create sample data: {e}")
            raise

    if ids:
        logger.info(f"Created {len(ids['room_types'])} room types across {len(ids['hotels'])} hotels")

    await close_db()


def main():
    """Main setup function."""
    logger.info("Starting hotel booking API setup...")

    # Alembic's async env runs its own event loop
    run_migrations()
    asyncio.run(create_sample_data())

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: cd server && uvicorn hotel_api.main:app --reload")


if __name__ == "__main__":
    main()
