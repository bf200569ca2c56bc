import logging
from datetime import date

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from ..models.ledger import (INSURANCE_CATEGORY, LOAN_PAYMENT_CATEGORY,
                             MAINTENANCE_EXPENSE_CATEGORY,
                             RENTAL_INCOME_CATEGORY)
from ..store import FleetStores, default_stores
from .audit_helper import log_action

logger = logging.getLogger(__name__)

FRENCH_MONTHS = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)

# (category, vehicle field holding the monthly amount, description label)
MONTHLY_VEHICLE_CHARGES = (
    (LOAN_PAYMENT_CATEGORY, "monthly_payment", "Mensualité"),
    (INSURANCE_CATEGORY, "insurance_monthly_fee", "Assurance"),
)


def period_key(day: date) -> str:
    return day.strftime("%Y-%m")


def readable_month(day: date) -> str:
    return f"{FRENCH_MONTHS[day.month - 1]} {day.year}"


# ----------------------------
# Reservation income
# ----------------------------
def record_reservation_income(
    reservation,
    vehicle,
    customer,
    *,
    on_date: date | None = None,
    user=None,
    stores: FleetStores | None = None,
):
    """
    Income entry for a reservation that just became confirmed.
    Called once per confirm transition; a second call for the same
    reservation returns the existing entry instead of a duplicate.
    """
    stores = stores or default_stores()

    # idempotency: don't book the same rental twice
    existing = (
        stores.transactions.objects
        .for_source("reservation", reservation.pk)
        .filter(category=RENTAL_INCOME_CATEGORY)
        .first()
    )
    if existing is not None:
        return existing

    if reservation.total_amount <= 0:
        logger.warning(
            "Reservation %s confirmed with a zero total, no income booked",
            reservation.pk,
        )
        return None

    # dangling references fall back to generic labels
    vehicle_info = vehicle.label if vehicle else "Véhicule"
    customer_name = customer.full_name if customer else "Client"

    entry = stores.transactions.create(
        date=on_date or timezone.localdate(),
        type="income",
        category=RENTAL_INCOME_CATEGORY,
        amount=reservation.total_amount,
        description=f"Location de {vehicle_info} à {customer_name}",
        source_type="reservation",
        source_id=reservation.pk,
    )
    log_action(
        action="create",
        instance=entry,
        user=user,
        changes={"amount": str(entry.amount), "reservation": reservation.pk},
    )
    return entry


# ----------------------------
# Maintenance expense
# ----------------------------
def record_maintenance_expense(
    record, vehicle, *, user=None, stores: FleetStores | None = None
):
    """Expense entry for a newly created maintenance record (not on update)."""
    stores = stores or default_stores()

    if record.cost <= 0:
        logger.info("Maintenance %s has no cost, no expense booked", record.pk)
        return None

    if vehicle:
        vehicle_info = f"{vehicle.make} {vehicle.model} ({vehicle.license_plate})"
    else:
        vehicle_info = "Véhicule inconnu"

    entry = stores.transactions.create(
        date=record.date,
        type="expense",
        category=MAINTENANCE_EXPENSE_CATEGORY,
        amount=record.cost,
        description=f"{record.description} - {vehicle_info}",
        source_type="maintenance",
        source_id=record.pk,
    )
    log_action(
        action="create",
        instance=entry,
        user=user,
        changes={"amount": str(entry.amount), "maintenance": record.pk},
    )
    return entry


# ----------------------------
# Monthly vehicle costs
# ----------------------------
def _already_generated(stores, category, vehicle, for_date):
    predicate = Q(
        type="expense",
        category=category,
        source_type="vehicle",
        source_id=vehicle.pk,
    ) & (
        Q(date__year=for_date.year, date__month=for_date.month)
        | Q(period=period_key(for_date))
    )
    return bool(stores.transactions.query(predicate))


def generate_monthly_vehicle_expenses(
    for_date: date | None = None,
    *,
    user=None,
    stores: FleetStores | None = None,
) -> int:
    """
    Book loan payments and insurance fees of every vehicle for the month
    of ``for_date``.

    Workflow, per vehicle and per charge (loan, insurance):
        1. Skip when the vehicle has no positive amount for it.
        2. Skip when an entry with that category for that vehicle is
           already dated in the same calendar month.
        3. Otherwise create one expense dated ``for_date``.
    Returns the number of entries created: re-running for the same month
    returns 0.
    """
    stores = stores or default_stores()
    for_date = for_date or timezone.localdate()
    month_label = readable_month(for_date)
    created = 0

    with transaction.atomic():
        for vehicle in stores.vehicles.get_all():
            for category, amount_field, label in MONTHLY_VEHICLE_CHARGES:
                amount = getattr(vehicle, amount_field)
                if not amount or amount <= 0:
                    continue
                if _already_generated(stores, category, vehicle, for_date):
                    continue

                entry = stores.transactions.create(
                    date=for_date,
                    type="expense",
                    category=category,
                    amount=amount,
                    description=(
                        f"{label} {vehicle.make} {vehicle.model} "
                        f"({vehicle.license_plate}) - {month_label}"
                    ),
                    source_type="vehicle",
                    source_id=vehicle.pk,
                    period=period_key(for_date),
                )
                log_action(
                    action="generate",
                    instance=entry,
                    user=user,
                    changes={"vehicle": vehicle.pk, "period": entry.period},
                )
                created += 1

    logger.info(
        "Monthly vehicle expenses for %s: %d created", period_key(for_date), created)
    return created
