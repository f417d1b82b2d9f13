"""Xendit webhook handler.

Xendit posts the invoice callback whenever an invoice changes state. The
invoice ``external_id`` is the reservation id we sent when creating it.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from diro.core.database import get_db
from diro.core.dependencies import verify_callback_token
from diro.schemas import MAX_ID, WebhookAck
from diro.services.reservations import ReservationNotFound, update_payment_status
from diro.services.xendit import InvoiceCallback

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def parse_external_id(external_id: str) -> int | None:
    """Reservation id carried in ``external_id``, or None unless it is plain decimal digits in id range."""
    if not (external_id.isascii() and external_id.isdigit()):
        return None
    reservation_id = int(external_id)
    if not 1 <= reservation_id <= MAX_ID:
        return None
    return reservation_id


@router.post("/xendit", response_model=WebhookAck, dependencies=[Depends(verify_callback_token)])
async def xendit_webhook(payload: InvoiceCallback, db: AsyncSession = Depends(get_db)):
    reservation_id = parse_external_id(payload.external_id)
    if reservation_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid external_id")

    logger.info("Xendit callback for reservation %s: %s", reservation_id, payload.status)

    try:
        await update_payment_status(db, reservation_id, payload.status)
    except ReservationNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None

    return WebhookAck()
