"""Reservation model.

A reservation holds one court for one timeslot on one date and carries the
linkage to the Xendit invoice that pays for it.
"""

import datetime
import enum
from decimal import Decimal

from sqlalchemy import Date, Enum, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from diro.models.base import Base, TimestampMixin
from diro.models.court import Court, Timeslot


class BookingStatus(enum.StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    PAID = "paid"


class PaymentStatus(enum.StrEnum):
    """Invoice statuses reported by Xendit.

    The reservation column stores the raw provider string, so values outside
    this set are kept as received.
    """

    PENDING = "PENDING"
    PAID = "PAID"
    SETTLED = "SETTLED"
    EXPIRED = "EXPIRED"
    FAILED = "FAILED"

    @classmethod
    def is_known(cls, value: str) -> bool:
        return value in cls._value2member_map_


class Reservation(TimestampMixin, Base):
    __tablename__ = "reservations"

    id: Mapped[int] = mapped_column(primary_key=True)
    court_id: Mapped[int] = mapped_column(ForeignKey("courts.id"), nullable=False)
    timeslot_id: Mapped[int] = mapped_column(ForeignKey("timeslots.id"), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)

    status: Mapped[BookingStatus] = mapped_column(
        Enum(
            BookingStatus,
            name="booking_status",
            values_callable=lambda e: [x.value for x in e],
            native_enum=False,
        ),
        default=BookingStatus.PENDING,
        nullable=False,
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)

    # Payment (Xendit invoice)
    payment_id: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    invoice_url: Mapped[str] = mapped_column(Text, default="", nullable=False)
    payment_status: Mapped[str] = mapped_column(String(50), default="", nullable=False)

    # Relationships
    court: Mapped[Court] = relationship()
    timeslot: Mapped[Timeslot] = relationship()

    __table_args__ = (
        # Slot lookups: availability grid and the paid-reservation check.
        # Not unique: a slot may hold any number of pending/expired attempts.
        Index("ix_reservations_slot", "court_id", "timeslot_id", "date", "status"),
        Index("ix_reservations_date_status", "date", "status"),
    )

    def __repr__(self) -> str:
        return f"<Reservation {self.date} court={self.court_id} timeslot={self.timeslot_id} {self.status}>"
