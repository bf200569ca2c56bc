import logging

from django.db import transaction

from ..models import MaintenanceRecord
from ..store import FleetStores, default_stores
from .audit_helper import log_action, snapshot
from .ledger import record_maintenance_expense
from .reservations import as_reference

logger = logging.getLogger(__name__)

MAINTENANCE_FIELDS = (
    "vehicle_id",
    "type",
    "date",
    "mileage",
    "description",
    "cost",
    "provider",
    "invoice_reference",
    "notes",
)


def _fields(data: dict) -> dict:
    fields = {name: data[name] for name in MAINTENANCE_FIELDS if name in data}
    if "vehicle" in data and "vehicle_id" not in fields:
        fields["vehicle_id"] = getattr(data["vehicle"], "pk", data["vehicle"])
    if "vehicle_id" in fields:
        fields["vehicle_id"] = as_reference(
            MaintenanceRecord, "vehicle", fields["vehicle_id"])
    return fields


# ----------------------------
# Maintenance workflows
# ----------------------------
def record_maintenance(
    data: dict, *, user=None, stores: FleetStores | None = None
):
    """
    Create a maintenance record and its expense entry.
    Workflow:
        1. Create the record (model validation runs first).
        2. Book the expense, unconditionally: two identical calls give
           two records and two expenses.
        3. Raise the vehicle odometer when the record reads higher.
    Returns (record, expense).
    """
    stores = stores or default_stores()
    with transaction.atomic():
        record = stores.maintenance.create(**_fields(data))
        log_action(
            action="create", instance=record, user=user,
            changes=snapshot(record),
        )

        vehicle = stores.vehicles.get_by_id(record.vehicle_id)
        expense = record_maintenance_expense(
            record, vehicle, user=user, stores=stores)

        if vehicle is not None and record.mileage > vehicle.mileage:
            stores.vehicles.update(vehicle.pk, mileage=record.mileage)
            logger.info(
                "Vehicle %s mileage raised to %s km", vehicle.pk, record.mileage)

    return record, expense


def update_maintenance(
    record_id, data: dict, *, user=None, stores: FleetStores | None = None
) -> MaintenanceRecord | None:
    """Plain merge; the expense booked at creation is left as it is."""
    stores = stores or default_stores()
    with transaction.atomic():
        record = stores.maintenance.update(record_id, **_fields(data))
        if record is not None:
            log_action(
                action="update", instance=record, user=user,
                changes=snapshot(record),
            )
    return record


def delete_maintenance(
    record_id, *, user=None, stores: FleetStores | None = None
) -> bool:
    stores = stores or default_stores()
    with transaction.atomic():
        record = stores.maintenance.get_by_id(record_id)
        if record is None:
            return False
        stores.maintenance.delete(record.pk)
        log_action(action="delete", instance=record, user=user)
    return True
