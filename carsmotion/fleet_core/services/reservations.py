import datetime
import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from ..models import Reservation
from ..store import FleetStores, default_stores
from .audit_helper import log_action, snapshot
from .conflicts import ensure_available
from .ledger import record_reservation_income
from .lifecycle import (check_transition, entered_confirmed,
                        on_reservation_status_change)
from .pricing import compute_reservation_total, to_decimal

logger = logging.getLogger(__name__)

# Fields a caller may set on a reservation
RESERVATION_FIELDS = (
    "vehicle_id",
    "customer_id",
    "start_date",
    "end_date",
    "total_amount",
    "status",
    "notes",
)
# Changing any of these re-prices the booking and re-checks the calendar
PRICING_FIELDS = ("vehicle_id", "start_date", "end_date")


def _as_date(value, field):
    if value is None or isinstance(value, datetime.date):
        # datetimes are reduced to their calendar day
        if isinstance(value, datetime.datetime):
            return value.date()
        return value
    parsed = parse_date(str(value)[:10])
    if parsed is None:
        raise ValidationError({field: f"Date invalide: {value}"})
    return parsed


def as_reference(model, name, value):
    """Coerce a reference id ("3" or 3) to the stored type.

    Unparsable ids raise ValidationError keyed on ``name``.
    """
    if value is None or value == "":
        return None
    try:
        return model._meta.get_field(name).to_python(value)
    except ValidationError as exc:
        raise ValidationError({name: exc.messages})


def _normalize(data: dict) -> dict:
    """Accept vehicle/customer or vehicle_id/customer_id, ISO date strings."""
    clean = {}
    for alias in ("vehicle", "customer"):
        if alias in data and f"{alias}_id" not in data:
            value = data[alias]
            clean[f"{alias}_id"] = getattr(value, "pk", value)
    for name in RESERVATION_FIELDS:
        if name in data:
            clean[name] = data[name]
    for alias in ("vehicle", "customer"):
        if f"{alias}_id" in clean:
            clean[f"{alias}_id"] = as_reference(
                Reservation, alias, clean[f"{alias}_id"])
    for name in ("start_date", "end_date"):
        if name in clean:
            clean[name] = _as_date(clean[name], name)
    if clean.get("total_amount") is not None:
        try:
            clean["total_amount"] = to_decimal(clean["total_amount"])
        except InvalidOperation:
            raise ValidationError({"total_amount": "Montant invalide"})
    return clean


def _resolve_total(data, current, merged, stores) -> Decimal:
    """
    Reservation total: the caller's explicit amount wins for this save,
    otherwise it is recomputed when vehicle or dates changed (or on
    creation), otherwise the stored amount is kept.
    """
    if data.get("total_amount") is not None:
        return data["total_amount"]

    pricing_changed = current is None or any(
        merged[f] != getattr(current, f) for f in PRICING_FIELDS
    )
    if not pricing_changed:
        return current.total_amount

    vehicle = stores.vehicles.get_by_id(merged["vehicle_id"])
    if vehicle is None:
        # unknown vehicle: nothing to price from
        return current.total_amount if current else Decimal("0.00")
    return compute_reservation_total(
        vehicle.daily_rate, merged["start_date"], merged["end_date"]
    )


# ----------------------------------------------
# Reservation save workflow
# ----------------------------------------------
def save_reservation(
    data: dict,
    reservation_id=None,
    *,
    user=None,
    today: datetime.date | None = None,
    stores: FleetStores | None = None,
) -> Reservation:
    """
    Create (reservation_id=None) or update a reservation.

    Steps, all inside one database transaction:
        1. validate fields + status transition
        2. conflict check against the vehicle's other bookings
        3. price the booking
        4. write the reservation
        5. move the vehicle status
        6. book the rental income when the reservation enters confirmed
    Any error raised before step 4 leaves the database untouched; an
    error after it rolls every write back.
    """
    stores = stores or default_stores()
    today = today or timezone.localdate()
    data = _normalize(data)

    with transaction.atomic():
        current = None
        if reservation_id is not None:
            current = stores.reservations.get_by_id(reservation_id)
            if current is None:
                raise Reservation.DoesNotExist(
                    f"Reservation {reservation_id} does not exist")

        previous_status = current.status if current else None
        merged = {
            name: data.get(name, getattr(current, name) if current else None)
            for name in RESERVATION_FIELDS
        }
        new_status = merged["status"] or "pending"
        merged["status"] = new_status

        # 1. Validation, before any write
        errors = {}
        for name in ("vehicle_id", "customer_id", "start_date", "end_date"):
            if merged[name] is None:
                errors[name.removesuffix("_id")] = ["Ce champ est requis"]
        if errors:
            raise ValidationError(errors)
        if merged["end_date"] <= merged["start_date"]:
            raise ValidationError(
                {"end_date": "La date de fin doit être postérieure à la date de début"})
        check_transition(previous_status, new_status)

        # 2. Conflict detection (cancelled bookings never block)
        pricing_changed = current is None or any(
            merged[f] != getattr(current, f) for f in PRICING_FIELDS
        )
        if new_status != "cancelled" and (
            pricing_changed or entered_confirmed(previous_status, new_status)
        ):
            ensure_available(
                merged["vehicle_id"],
                merged["start_date"],
                merged["end_date"],
                exclude_reservation_id=reservation_id,
                stores=stores,
            )

        # 3. Pricing
        merged["total_amount"] = _resolve_total(data, current, merged, stores)
        if merged["notes"] is None:
            merged["notes"] = ""

        # 4. Write
        if current is None:
            reservation = stores.reservations.create(**merged)
            action = "create"
        else:
            reservation = stores.reservations.update(current.pk, **merged)
            action = "update"
        log_action(
            action=action,
            instance=reservation,
            user=user,
            changes=snapshot(reservation),
        )

        # 5. Vehicle lifecycle
        on_reservation_status_change(
            reservation, previous_status, new_status,
            today=today, user=user, stores=stores,
        )

        # 6. Ledger, once per confirm transition
        if entered_confirmed(previous_status, new_status):
            record_reservation_income(
                reservation,
                stores.vehicles.get_by_id(reservation.vehicle_id),
                stores.customers.get_by_id(reservation.customer_id),
                on_date=today,
                user=user,
                stores=stores,
            )

    logger.info(
        "Reservation %s saved (%s -> %s)", reservation.pk, previous_status, new_status)
    return reservation


def change_reservation_status(reservation_id, new_status, **kwargs) -> Reservation:
    """Status-only save (confirm / complete / cancel buttons)."""
    return save_reservation({"status": new_status}, reservation_id, **kwargs)


def confirm_reservation(reservation_id, **kwargs) -> Reservation:
    return change_reservation_status(reservation_id, "confirmed", **kwargs)


def complete_reservation(reservation_id, **kwargs) -> Reservation:
    return change_reservation_status(reservation_id, "completed", **kwargs)


def cancel_reservation(reservation_id, **kwargs) -> Reservation:
    return change_reservation_status(reservation_id, "cancelled", **kwargs)


def delete_reservation(
    reservation_id, *, user=None, today=None, stores: FleetStores | None = None
) -> bool:
    """Delete a reservation; a confirmed one releases its vehicle first.

    Income already booked for it stays in the ledger.
    """
    stores = stores or default_stores()
    with transaction.atomic():
        reservation = stores.reservations.get_by_id(reservation_id)
        if reservation is None:
            return False
        stores.reservations.delete(reservation.pk)
        log_action(
            action="delete", instance=reservation, user=user,
            changes=snapshot(reservation),
        )
        if reservation.status == "confirmed":
            on_reservation_status_change(
                reservation, "confirmed", "cancelled",
                today=today, user=user, stores=stores,
            )
    return True


def quote_reservation(vehicle_id, start_date, end_date, *, stores=None) -> dict:
    """Price preview used by the booking form, no write."""
    stores = stores or default_stores()
    start_date = _as_date(start_date, "start_date")
    end_date = _as_date(end_date, "end_date")
    vehicle = stores.vehicles.get_by_id(vehicle_id)
    if vehicle is None:
        raise ObjectDoesNotExist(f"Vehicle {vehicle_id} does not exist")
    total = compute_reservation_total(vehicle.daily_rate, start_date, end_date)
    return {
        "vehicle_id": vehicle.pk,
        "days": (end_date - start_date).days + 1,
        "daily_rate": vehicle.daily_rate,
        "total_amount": total,
    }
