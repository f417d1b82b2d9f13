"""Create tables and seed or clear the court/timeslot reference data.

Usage:
    python -m scripts.seed migrate   # create tables
    python -m scripts.seed seed      # create tables, then insert courts and timeslots
    python -m scripts.seed clear     # delete reservations, timeslots and courts
"""

import argparse
import asyncio

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from diro.core.config import Settings
from diro.core.database import build_engine, build_session_factory
from diro.models import Base, Court, Reservation, Timeslot

COURTS = [
    {"name": "Lapangan A", "description": "Lapangan badminton utama dengan pencahayaan LED"},
    {"name": "Lapangan B", "description": "Lapangan badminton dengan lantai sintetis"},
    {"name": "Lapangan C", "description": "Lapangan badminton indoor dengan AC"},
    # Kept inactive so the availability grid has something to leave out
    {"name": "Lapangan D", "description": "Lapangan badminton outdoor", "is_active": False},
]

# Hourly from 08:00 to 21:00 with breaks at 12:00 and 17:00
TIMESLOTS = [
    ("08:00", "09:00"),
    ("09:00", "10:00"),
    ("10:00", "11:00"),
    ("11:00", "12:00"),
    ("13:00", "14:00"),
    ("14:00", "15:00"),
    ("15:00", "16:00"),
    ("16:00", "17:00"),
    ("18:00", "19:00"),
    ("19:00", "20:00"),
    ("20:00", "21:00"),
]


async def migrate(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed(db: AsyncSession) -> bool:
    """Insert the reference courts and timeslots. Returns False if already seeded."""
    existing = await db.scalar(select(func.count(Court.id)))
    if existing:
        return False

    db.add_all(Court(**court) for court in COURTS)
    db.add_all(Timeslot(start_time=start, end_time=end) for start, end in TIMESLOTS)
    await db.commit()
    return True


async def clear(db: AsyncSession) -> None:
    # Reservations first: they reference courts and timeslots
    await db.execute(delete(Reservation))
    await db.execute(delete(Timeslot))
    await db.execute(delete(Court))
    await db.commit()


async def main(args: argparse.Namespace) -> None:
    engine = build_engine(Settings())
    session_factory = build_session_factory(engine)

    try:
        if args.command in ("migrate", "seed"):
            await migrate(engine)
            print("Tables created.")

        async with session_factory() as db:
            if args.command == "seed":
                if await seed(db):
                    print(f"Seeded {len(COURTS)} courts and {len(TIMESLOTS)} timeslots.")
                else:
                    print("Database already seeded, skipping.")
            elif args.command == "clear":
                await clear(db)
                print("Database cleared.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manage the Diro database")
    parser.add_argument("command", choices=["migrate", "seed", "clear"])

    parsed = parser.parse_args()
    asyncio.run(main(parsed))
