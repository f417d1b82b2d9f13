"""Reservation admission and payment reconciliation.

Admission runs as a sequence of separately committed steps:

    check slot -> insert pending reservation -> create invoice -> store invoice

If the invoice cannot be created the pending reservation is deleted again.
There is no transaction around the whole sequence and no uniqueness
constraint behind the slot check, so two concurrent requests for the same
slot can both pass the check. Closing that needs either a partial unique
index on paid reservations or an outbox around the invoice call.
"""

import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from diro.core.config import Settings
from diro.models.court import Court, Timeslot
from diro.models.reservation import BookingStatus, PaymentStatus, Reservation
from diro.services.pricing import PricingPolicy, fixed_price
from diro.services.xendit import InvoiceCustomer, InvoiceItem, InvoiceRequest, XenditClient, XenditError

logger = logging.getLogger(__name__)


class ReservationError(Exception):
    """Base class for reservation failures reported back to the client."""


class SlotAlreadyReserved(ReservationError):
    def __init__(self, court_id: int, timeslot_id: int, reservation_date: date):
        self.court_id = court_id
        self.timeslot_id = timeslot_id
        self.reservation_date = reservation_date
        super().__init__("slot is already reserved")


class ReservationTargetNotFound(ReservationError):
    """The court or timeslot does not exist or is not active."""


class ReservationNotFound(ReservationError):
    def __init__(self, reservation_id: int):
        self.reservation_id = reservation_id
        super().__init__(f"reservation {reservation_id} not found")


class InvoiceCreationError(ReservationError):
    def __init__(self, cause: XenditError):
        self.cause = cause
        super().__init__(f"failed to create invoice: {cause}")


# ---------------------------------------------------------------------------
# Admission
# ---------------------------------------------------------------------------


async def create_reservation(
    db: AsyncSession,
    payment_client: XenditClient,
    settings: Settings,
    court_id: int,
    timeslot_id: int,
    reservation_date: date,
    customer: InvoiceCustomer,
    pricing: PricingPolicy | None = None,
) -> tuple[Reservation, str]:
    """Reserve a slot and open an invoice for it.

    Returns the reservation (court and timeslot loaded) and the invoice URL
    the customer should be sent to.
    """
    if await is_slot_reserved(db, court_id, timeslot_id, reservation_date):
        raise SlotAlreadyReserved(court_id, timeslot_id, reservation_date)

    court, timeslot = await _get_slot_target(db, court_id, timeslot_id)
    pricing = pricing or fixed_price(settings.reservation_price)

    reservation = Reservation(
        court_id=court.id,
        timeslot_id=timeslot.id,
        date=reservation_date,
        status=BookingStatus.PENDING,
        total_price=pricing(court, timeslot, reservation_date),
        payment_status=PaymentStatus.PENDING.value,
    )
    db.add(reservation)
    await db.commit()
    logger.info(
        "Reservation %s pending for court %s timeslot %s on %s", reservation.id, court.id, timeslot.id, reservation_date
    )

    invoice_request = build_invoice_request(reservation, court, timeslot, customer, settings)
    try:
        invoice = await payment_client.create_invoice(invoice_request)
    except XenditError as exc:
        logger.warning("Invoice creation failed for reservation %s: %s", reservation.id, exc)
        await _discard(db, reservation)
        raise InvoiceCreationError(exc) from exc

    reservation.payment_id = invoice.id
    reservation.invoice_url = invoice.invoice_url
    reservation.payment_status = invoice.status
    await db.commit()

    return await get_reservation(db, reservation.id), invoice.invoice_url


def build_invoice_request(
    reservation: Reservation,
    court: Court,
    timeslot: Timeslot,
    customer: InvoiceCustomer,
    settings: Settings,
) -> InvoiceRequest:
    """Describe the reservation as a single-item Xendit invoice keyed by the reservation id."""
    day = reservation.date.isoformat()
    price = float(reservation.total_price)
    return InvoiceRequest(
        external_id=str(reservation.id),
        amount=price,
        description=f"Reservation for {court.name} at {day}",
        invoice_duration=settings.invoice_duration_seconds,
        customer=customer,
        success_redirect_url=settings.success_redirect_url,
        failure_redirect_url=settings.failure_redirect_url,
        currency=settings.invoice_currency,
        items=[
            InvoiceItem(
                name=f"Court {court.name} - {timeslot.start_time} to {timeslot.end_time}",
                quantity=1,
                price=price,
                category="Sports",
                url=settings.invoice_item_url,
            )
        ],
        metadata={
            "reservation_id": reservation.id,
            "court_id": court.id,
            "date": day,
        },
    )


async def is_slot_reserved(db: AsyncSession, court_id: int, timeslot_id: int, reservation_date: date) -> bool:
    """True when a paid reservation already holds this slot."""
    result = await db.execute(
        select(func.count(Reservation.id)).where(
            Reservation.court_id == court_id,
            Reservation.timeslot_id == timeslot_id,
            Reservation.date == reservation_date,
            Reservation.status == BookingStatus.PAID,
        )
    )
    return result.scalar_one() > 0


async def _get_slot_target(db: AsyncSession, court_id: int, timeslot_id: int) -> tuple[Court, Timeslot]:
    court = await db.scalar(select(Court).where(Court.id == court_id, Court.is_active.is_(True)))
    if court is None:
        raise ReservationTargetNotFound(f"court {court_id} not found")

    timeslot = await db.scalar(select(Timeslot).where(Timeslot.id == timeslot_id, Timeslot.is_active.is_(True)))
    if timeslot is None:
        raise ReservationTargetNotFound(f"timeslot {timeslot_id} not found")

    return court, timeslot


async def _discard(db: AsyncSession, reservation: Reservation) -> None:
    """Delete a provisional reservation. Failures are logged and not raised."""
    reservation_id = reservation.id
    try:
        await db.delete(reservation)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Could not delete provisional reservation %s", reservation_id)
    else:
        logger.info("Deleted provisional reservation %s", reservation_id)


# ---------------------------------------------------------------------------
# Lookup and payment reconciliation
# ---------------------------------------------------------------------------


async def get_reservation(db: AsyncSession, reservation_id: int) -> Reservation:
    """Load a reservation with its court and timeslot."""
    result = await db.execute(
        select(Reservation)
        .options(selectinload(Reservation.court), selectinload(Reservation.timeslot))
        .where(Reservation.id == reservation_id)
        .execution_options(populate_existing=True)
    )
    reservation = result.scalar_one_or_none()
    if reservation is None:
        raise ReservationNotFound(reservation_id)
    return reservation


async def update_payment_status(db: AsyncSession, reservation_id: int, provider_status: str) -> None:
    """Record the provider's invoice status; ``PAID`` also marks the booking paid.

    The status string is stored as received, recognised or not.
    """
    reservation = await db.get(Reservation, reservation_id)
    if reservation is None:
        raise ReservationNotFound(reservation_id)

    if not PaymentStatus.is_known(provider_status):
        logger.warning("Unrecognised payment status %r for reservation %s", provider_status, reservation_id)

    reservation.payment_status = provider_status
    if provider_status == PaymentStatus.PAID:
        reservation.status = BookingStatus.PAID

    await db.commit()
    logger.info(
        "Reservation %s payment status %s (booking status %s)", reservation_id, provider_status, reservation.status
    )
