from django.contrib import admin

from fleet_core.models import MaintenanceRecord, Reservation

from .mixins import DanglingReferenceMixin

# ---------- Vehicle page inlines ----------
# Both are history views: bookings and maintenance are written through
# their own admin pages so the ledger side effects run.


class ReservationInline(DanglingReferenceMixin, admin.TabularInline):
    """Show the vehicle's bookings on the Vehicle page"""

    model = Reservation
    fk_name = "vehicle"
    extra = 0  # don't show "empty" rows by default
    fields = ("customer_label", "start_date", "end_date", "total_amount", "status")
    readonly_fields = fields
    ordering = ("-start_date",)
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class MaintenanceRecordInline(admin.TabularInline):
    model = MaintenanceRecord
    fk_name = "vehicle"
    extra = 0
    fields = ("date", "type", "mileage", "description", "cost", "provider")
    readonly_fields = fields
    ordering = ("-date",)
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
