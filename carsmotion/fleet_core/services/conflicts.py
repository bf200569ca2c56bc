import logging
from datetime import date

from ..exceptions import ReservationConflictError
from ..store import FleetStores, default_stores

logger = logging.getLogger(__name__)


def intervals_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive overlap: the two ranges share at least one calendar day.

    Covers new inside existing, existing inside new, and partial overlap
    on either side; a shared boundary day counts.
    """
    return not (end_a < start_b or end_b < start_a)


def find_conflicts(
    vehicle_id,
    start_date: date,
    end_date: date,
    exclude_reservation_id=None,
    *,
    stores: FleetStores | None = None,
):
    """Non-cancelled reservations of the vehicle that overlap [start, end]."""
    stores = stores or default_stores()

    # Unknown vehicle: nothing can be booked on it, so nothing conflicts
    if stores.vehicles.get_by_id(vehicle_id) is None:
        return []

    qs = (
        stores.reservations.objects
        .for_vehicle(vehicle_id)
        .active()
        .overlapping(start_date, end_date)
    )
    if exclude_reservation_id is not None:
        qs = qs.exclude(pk=exclude_reservation_id)
    return list(qs)


def has_overlap(
    vehicle_id,
    start_date: date,
    end_date: date,
    exclude_reservation_id=None,
    *,
    stores: FleetStores | None = None,
) -> bool:
    return bool(
        find_conflicts(
            vehicle_id, start_date, end_date, exclude_reservation_id, stores=stores
        )
    )


def ensure_available(
    vehicle_id,
    start_date: date,
    end_date: date,
    exclude_reservation_id=None,
    *,
    stores: FleetStores | None = None,
):
    """Raise ReservationConflictError when the vehicle is already booked."""
    conflicts = find_conflicts(
        vehicle_id, start_date, end_date, exclude_reservation_id, stores=stores
    )
    if conflicts:
        logger.info(
            "Booking conflict on vehicle %s for %s..%s with reservation(s) %s",
            vehicle_id, start_date, end_date, [r.pk for r in conflicts],
        )
        raise ReservationConflictError(vehicle_id, conflicts)
