from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError

from .. import conf

CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # go through str so floats like 0.2 don't leak binary noise
    return Decimal(str(value))


def rental_days(start_date: date, end_date: date) -> int:
    """Billed days, both boundary days included."""
    if end_date < start_date:
        raise ValidationError(
            {"end_date": "La date de fin doit être postérieure à la date de début"})
    return (end_date - start_date).days + 1


def compute_reservation_total(daily_rate, start_date: date, end_date: date) -> Decimal:
    days = rental_days(start_date, end_date)
    total = to_decimal(daily_rate) * days
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_tax(total, rate=None) -> Decimal:
    """VAT on ``total``, rounded half-up to the cent (0.20 by default)."""
    rate = conf.tax_rate() if rate is None else to_decimal(rate)
    return (to_decimal(total) * rate).quantize(CENTS, rounding=ROUND_HALF_UP)
