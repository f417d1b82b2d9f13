"""Pricing policy for reservations.

A policy is any callable taking the court, timeslot and date of a slot and
returning its price. The application ships a flat rate; a per-court or
peak/off-peak policy can be dropped in through ``create_app(pricing=...)``.
"""

from collections.abc import Callable
from datetime import date
from decimal import Decimal

from diro.models.court import Court, Timeslot

PricingPolicy = Callable[[Court, Timeslot, date], Decimal]


def fixed_price(amount: Decimal) -> PricingPolicy:
    """Return a policy that charges the same amount for every slot."""
    amount = Decimal(amount)

    def _price(court: Court, timeslot: Timeslot, reservation_date: date) -> Decimal:
        return amount

    return _price
