"""Pydantic schemas for API serialisation."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from diro.services.xendit import InvoiceCustomer

# Largest id a 32-bit signed INTEGER primary key column can hold
MAX_ID = 2**31 - 1


# --- Courts / timeslots ---


class CourtOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class TimeslotOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    start_time: str  # "HH:MM"
    end_time: str  # "HH:MM"
    is_active: bool
    created_at: datetime
    updated_at: datetime


# --- Availability ---


class TimeslotStatusOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timeslot: TimeslotOut
    is_booked: bool


class CourtAvailabilityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    court: CourtOut
    timeslots: list[TimeslotStatusOut]


class DayAvailabilityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    courts: list[CourtAvailabilityOut]


# --- Reservations ---


class CustomerIn(BaseModel):
    given_names: str = Field(min_length=1)
    surname: str | None = None
    email: EmailStr
    mobile_number: str = Field(min_length=1)

    def to_invoice_customer(self) -> InvoiceCustomer:
        return InvoiceCustomer(**self.model_dump())


class ReservationCreate(BaseModel):
    court_id: int = Field(gt=0, le=MAX_ID)
    timeslot_id: int = Field(gt=0, le=MAX_ID)
    date: date
    customer: CustomerIn


class ReservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    court_id: int
    timeslot_id: int
    date: date
    status: str
    total_price: float
    payment_id: str
    invoice_url: str
    payment_status: str
    created_at: datetime
    updated_at: datetime
    court: CourtOut
    timeslot: TimeslotOut


class ReservationCreated(BaseModel):
    reservation: ReservationOut
    invoice_url: str


# --- Webhooks ---


class WebhookAck(BaseModel):
    message: str = "webhook received"
