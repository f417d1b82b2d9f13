"""Reservation routes: day availability, create (with Xendit invoice), lookup."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from diro.core.config import Settings
from diro.core.database import get_db
from diro.core.dependencies import get_payment_client, get_pricing, get_settings
from diro.schemas import MAX_ID, DayAvailabilityOut, ReservationCreate, ReservationCreated, ReservationOut
from diro.services.availability import get_day_availability
from diro.services.pricing import PricingPolicy
from diro.services.reservations import (
    InvoiceCreationError,
    ReservationNotFound,
    ReservationTargetNotFound,
    SlotAlreadyReserved,
    create_reservation,
    get_reservation,
)
from diro.services.xendit import XenditClient

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("/availability", response_model=DayAvailabilityOut)
async def day_availability(
    query_date: date = Query(..., alias="date", description="Date in YYYY-MM-DD format"),
    db: AsyncSession = Depends(get_db),
):
    """Every active court with every active timeslot, flagged booked when a paid reservation holds it."""
    day = await get_day_availability(db, query_date)
    return DayAvailabilityOut.model_validate(day)


@router.post("", response_model=ReservationCreated, status_code=status.HTTP_201_CREATED)
async def create(
    body: ReservationCreate,
    db: AsyncSession = Depends(get_db),
    payment_client: XenditClient = Depends(get_payment_client),
    settings: Settings = Depends(get_settings),
    pricing: PricingPolicy = Depends(get_pricing),
):
    try:
        reservation, invoice_url = await create_reservation(
            db,
            payment_client,
            settings,
            court_id=body.court_id,
            timeslot_id=body.timeslot_id,
            reservation_date=body.date,
            customer=body.customer.to_invoice_customer(),
            pricing=pricing,
        )
    except SlotAlreadyReserved as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from None
    except ReservationTargetNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    except InvoiceCreationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from None

    return ReservationCreated(reservation=ReservationOut.model_validate(reservation), invoice_url=invoice_url)


@router.get("/{reservation_id}", response_model=ReservationOut)
async def get_one(reservation_id: int = Path(gt=0, le=MAX_ID), db: AsyncSession = Depends(get_db)):
    try:
        return await get_reservation(db, reservation_id)
    except ReservationNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
