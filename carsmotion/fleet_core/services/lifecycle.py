import logging
from dataclasses import dataclass
from datetime import date

from django.db import transaction
from django.utils import timezone

from ..exceptions import InvalidStatusTransition
from ..models.reservation import RESERVATION_TRANSITIONS
from ..store import FleetStores, default_stores
from .audit_helper import log_action

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VehicleStatusUpdate:
    vehicle_id: int
    previous_status: str
    new_status: str


# ----------------------------------------------
# Reservation state machine
# ----------------------------------------------
def check_transition(previous_status, new_status):
    """Block transitions the reservation workflow doesn't allow.

    Saving without a status change (plain edit) is always allowed.
    """
    if previous_status is not None and previous_status == new_status:
        return
    if new_status not in RESERVATION_TRANSITIONS.get(previous_status, []):
        source = previous_status or "new"
        raise InvalidStatusTransition(
            {"status": f"Cannot go from {source} to {new_status}"})


def entered_confirmed(previous_status, new_status) -> bool:
    """True only on the save that moves a reservation into confirmed."""
    return new_status == "confirmed" and previous_status != "confirmed"


def _other_confirmed(reservation, stores) -> bool:
    return (
        stores.reservations.objects
        .for_vehicle(reservation.vehicle_id)
        .confirmed()
        .exclude(pk=reservation.pk)
        .exists()
    )


def _set_vehicle_status(vehicle, new_status, stores, user=None):
    previous = vehicle.status
    stores.vehicles.update(vehicle.pk, status=new_status)
    log_action(
        action="status",
        instance=vehicle,
        user=user,
        changes={"status": [previous, new_status]},
    )
    logger.info("Vehicle %s: %s -> %s", vehicle.pk, previous, new_status)
    return VehicleStatusUpdate(vehicle.pk, previous, new_status)


# ----------------------------------------------
# Vehicle status driven by reservation events
# ----------------------------------------------
def on_reservation_status_change(
    reservation,
    previous_status,
    new_status,
    *,
    today: date | None = None,
    user=None,
    stores: FleetStores | None = None,
) -> VehicleStatusUpdate | None:
    """
    Move the reserved vehicle between available and rented.

        → confirmed, covering today          : vehicle rented
        confirmed → completed / cancelled    : vehicle available,
                                               unless another confirmed
                                               booking remains
        anything else                        : untouched

    Returns the applied update, or None when the vehicle was not touched
    (including when the vehicle no longer exists).
    """
    if previous_status == new_status:
        return None

    stores = stores or default_stores()
    today = today or timezone.localdate()

    vehicle = stores.vehicles.get_by_id(reservation.vehicle_id)
    if vehicle is None:
        logger.warning(
            "Reservation %s points to missing vehicle %s",
            reservation.pk, reservation.vehicle_id,
        )
        return None

    target = None
    if entered_confirmed(previous_status, new_status):
        # future bookings are flipped later by reconcile_vehicle_statuses()
        if reservation.covers(today):
            target = "rented"
    elif previous_status == "confirmed" and new_status in ("completed", "cancelled"):
        if not _other_confirmed(reservation, stores):
            target = "available"

    if target is None or target == vehicle.status:
        return None
    return _set_vehicle_status(vehicle, target, stores, user=user)


# ----------------------------------------------
# Derived status + reconciliation sweep
# ----------------------------------------------
def derive_vehicle_status(vehicle, today: date | None = None, *, stores=None) -> str:
    """What the status should read today.

    maintenance is a manual flag and always wins; otherwise rented iff a
    confirmed reservation covers today.
    """
    if vehicle.status == "maintenance":
        return "maintenance"
    stores = stores or default_stores()
    today = today or timezone.localdate()
    covering = (
        stores.reservations.objects
        .for_vehicle(vehicle.pk)
        .confirmed()
        .covering(today)
        .exists()
    )
    return "rented" if covering else "available"


def reconcile_vehicle_statuses(
    today: date | None = None, *, user=None, stores: FleetStores | None = None
) -> int:
    """Rewrite every vehicle status that drifted from its derived value.

    Returns the number of vehicles changed; running it twice in a row
    changes nothing the second time.
    """
    stores = stores or default_stores()
    today = today or timezone.localdate()
    changed = 0

    with transaction.atomic():
        for vehicle in stores.vehicles.get_all():
            expected = derive_vehicle_status(vehicle, today, stores=stores)
            if expected != vehicle.status:
                _set_vehicle_status(vehicle, expected, stores, user=user)
                changed += 1

    logger.info("Reconciled vehicle statuses for %s: %d changed", today, changed)
    return changed
