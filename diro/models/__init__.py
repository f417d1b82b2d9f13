"""All models imported here for metadata discovery (create_all, seed script)."""

from diro.models.base import Base
from diro.models.court import Court, Timeslot
from diro.models.reservation import BookingStatus, PaymentStatus, Reservation

__all__ = [
    "Base",
    "Court",
    "Timeslot",
    "Reservation",
    "BookingStatus",
    "PaymentStatus",
]
