"""Day availability: every active court with every active timeslot, flagged booked or free.

Only reservations whose booking status is ``paid`` occupy a slot. Pending
reservations (invoice not yet paid) leave the slot open for others.
"""

from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from diro.models.court import Court, Timeslot
from diro.models.reservation import BookingStatus, Reservation


@dataclass
class TimeslotAvailability:
    timeslot: Timeslot
    is_booked: bool


@dataclass
class CourtAvailability:
    court: Court
    timeslots: list[TimeslotAvailability] = field(default_factory=list)


@dataclass
class DayAvailability:
    date: date
    courts: list[CourtAvailability] = field(default_factory=list)


async def get_day_availability(db: AsyncSession, query_date: date) -> DayAvailability:
    courts = await active_courts(db)
    timeslots = await active_timeslots(db)

    day = DayAvailability(date=query_date)
    for court in courts:
        booked = await booked_timeslot_ids(db, court.id, query_date)
        day.courts.append(
            CourtAvailability(
                court=court,
                timeslots=[TimeslotAvailability(timeslot=ts, is_booked=ts.id in booked) for ts in timeslots],
            )
        )
    return day


async def active_courts(db: AsyncSession) -> list[Court]:
    result = await db.execute(select(Court).where(Court.is_active.is_(True)).order_by(Court.id))
    return list(result.scalars().all())


async def active_timeslots(db: AsyncSession) -> list[Timeslot]:
    result = await db.execute(
        select(Timeslot).where(Timeslot.is_active.is_(True)).order_by(Timeslot.start_time, Timeslot.id)
    )
    return list(result.scalars().all())


async def booked_timeslot_ids(db: AsyncSession, court_id: int, query_date: date) -> set[int]:
    """Timeslot ids holding a paid reservation on this court and date."""
    result = await db.execute(
        select(Reservation.timeslot_id).where(
            Reservation.court_id == court_id,
            Reservation.date == query_date,
            Reservation.status == BookingStatus.PAID,
        )
    )
    return set(result.scalars().all())
