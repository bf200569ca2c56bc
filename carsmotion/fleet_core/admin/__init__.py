from .actions import (cancel_reservations, complete_reservations,
                      confirm_reservations, mark_inv_as_cancelled,
                      mark_inv_as_paid)
from .auditlog import AgencySettingsAdmin, AuditLogAdmin
from .fleet import CustomerAdmin, MaintenanceRecordAdmin, VehicleAdmin
from .forms import ReservationAdminForm
from .inlines import MaintenanceRecordInline, ReservationInline
from .invoice import InvoiceAdmin
from .ledger import TransactionAdmin
from .mixins import DanglingReferenceMixin
from .reservation import ReservationAdmin
