#!/usr/bin/env python3
"""Bootstrap script for the hotel booking API: migrate and seed a sample hotel."""

import asyncio
import logging
import sys
from decimal import Decimal
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from alembic import command
from alembic.config import Config
from sqlalchemy import func, select

from hotel_booking.core.database import async_session_factory, close_db
from hotel_booking.models import Room, RoomType

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_ROOM_TYPES = [
    {
        "name": "Standard Double",
        "description": "Queen bed, garden view",
        "max_occupancy": 3,
        "standard_occupancy": 2,
        "base_price": Decimal("100.00"),
        "additional_guest_charge": Decimal("20.00"),
        "rooms": ["101", "102", "103", "104"],
        "floor": "1",
    },
    {
        "name": "Family Suite",
        "description": "Two bedrooms and a kitchenette",
        "max_occupancy": 6,
        "standard_occupancy": 4,
        "base_price": Decimal("220.00"),
        "additional_guest_charge": Decimal("35.00"),
        "rooms": ["201", "202"],
        "floor": "2",
    },
    {
        "name": "Single",
        "description": "Compact room for one",
        "max_occupancy": 1,
        "standard_occupancy": 1,
        "base_price": Decimal("65.00"),
        "additional_guest_charge": None,
        "rooms": ["301", "302", "303"],
        "floor": "3",
    },
]


def run_migrations() -> None:
    """Upgrade the database schema to the latest revision."""
    alembic_cfg = Config(str(server_dir / "db" / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(server_dir / "db" / "alembic"))

    logger.info("Running database migrations...")
    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations completed")


async def create_sample_data() -> None:
    """Create a sample hotel unless room types already exist."""
    logger.info("Creating sample data...")

    async with async_session_factory() as db:
        try:
            existing = await db.execute(select(func.count()).select_from(RoomType))
            if existing.scalar() > 0:
                logger.info("Sample data already exists, skipping...")
                return

            for sample in SAMPLE_ROOM_TYPES:
                room_type = RoomType(
                    name=sample["name"],
                    description=sample["description"],
                    max_occupancy=sample["max_occupancy"],
                    standard_occupancy=sample["standard_occupancy"],
                    base_price=sample["base_price"],
                    additional_guest_charge=sample["additional_guest_charge"],
                )
                db.add(room_type)
                await db.flush()

                for number in sample["rooms"]:
                    db.add(Room(room_type_id=room_type.id, number=number, floor=sample["floor"]))

            await db.commit()
            logger.info("Sample data created successfully!")

        except Exception as e:
            await db.rollback()
            logger.error(f"Failed to create sample data: {e}")
            raise

    await close_db()


def main() -> None:
    """Main bootstrap function."""
    logger.info("Starting hotel booking API bootstrap...")

    # Alembic's env.py drives its own event loop, so migrate before seeding
    run_migrations()
    asyncio.run(create_sample_data())

    logger.info("Bootstrap completed successfully!")
    logger.info("You can now start the API server with: cd server && uvicorn hotel_booking.main:app --reload")


if __name__ == "__main__":
    main()
