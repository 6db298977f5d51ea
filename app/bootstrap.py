"""
Database Bootstrap

Creates the schema and seeds the menu with sample dishes. Runs at API
startup and can be run by hand as a maintenance step:

    python -m app.bootstrap

Seeding is gated on the menu being empty; it is not a migration system.
A failure exits with status 1.
"""

import asyncio
import logging
import sys

from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import setup_logging
from app.database import fetch_one, get_session_maker, init_db, insert_row, reset_engine
from app.models import MenuItem

logger = logging.getLogger(__name__)

SAMPLE_MENU = [
    {"name": "Margherita Pizza", "description": "Fresh tomato & mozzarella", "price": 250},
    {"name": "Paneer Butter Masala", "description": "Creamy & aromatic", "price": 220},
    {"name": "Veg Biryani", "description": "Fragrant basmati rice", "price": 180},
    {"name": "Garlic Bread", "description": "Crispy & buttery", "price": 80},
    {"name": "Chocolate Brownie", "description": "Rich & fudgy", "price": 120},
]


async def seed_menu_if_empty(db: AsyncSession) -> int:
    """
    Insert the sample menu when the menu table is empty.

    Returns:
        Number of rows inserted (0 when the menu already had rows)
    """
    row = await fetch_one(db, select(func.count().label("c")).select_from(MenuItem.__table__))
    count = row["c"] if row else 0
    if count > 0:
        logger.info("Menu already seeded")
        return 0

    for item in SAMPLE_MENU:
        await insert_row(db, insert(MenuItem.__table__).values(**item))
    await db.commit()

    logger.info(f"Seeded menu with {len(SAMPLE_MENU)} sample items")
    return len(SAMPLE_MENU)


async def init_database() -> None:
    """Create missing tables, then seed the menu if needed."""
    await init_db()
    async with get_session_maker()() as db:
        await seed_menu_if_empty(db)
    logger.info("Database initialized.")


async def _run() -> None:
    try:
        await init_database()
    finally:
        await reset_engine()


def main() -> int:
    """Command-line entry point. Returns the process exit status."""
    setup_logging()
    try:
        asyncio.run(_run())
    except Exception:
        logger.exception("Failed to initialize DB")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
