from django.contrib import admin, messages
from django.shortcuts import redirect
from django.urls import path

from fleet_core.models import Customer, MaintenanceRecord, Vehicle
from ..services import (delete_maintenance, maintenance_alerts,
                        reconcile_vehicle_statuses, record_maintenance,
                        update_maintenance)
from ..services.audit_helper import log_action, snapshot
from ..services.maintenance import MAINTENANCE_FIELDS
from .inlines import MaintenanceRecordInline, ReservationInline
from .mixins import DanglingReferenceMixin


# Register `Vehicle` model
@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "make",
        "model",
        "license_plate",
        "status",
        "mileage",
        "daily_rate",
        "monthly_payment",
        "insurance_monthly_fee",
    )
    list_filter = ("status", "fuel_type", "purchase_type")
    search_fields = ("make", "model", "license_plate")
    inlines = [ReservationInline, MaintenanceRecordInline]

    def get_urls(self):
        urls = super().get_urls()
        custom = [
            path("reconcile/", self.admin_site.admin_view(self.reconcile_view),
                 name="fleet_core_vehicle_reconcile"),
        ]
        return custom + urls

    def reconcile_view(self, request):
        changed = reconcile_vehicle_statuses(user=request.user)
        messages.success(request, f"{changed} vehicle status(es) corrected.")
        return redirect("admin:fleet_core_vehicle_changelist")

    def changelist_view(self, request, extra_context=None):
        # surface overdue service / inspection on the fleet list
        alerts = maintenance_alerts()
        if alerts and request.method == "GET":
            plates = ", ".join(a["vehicle"].license_plate for a in alerts)
            messages.warning(request, f"Entretien ou contrôle technique à prévoir: {plates}")
        return super().changelist_view(request, extra_context)

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        log_action(
            action="update" if change else "create",
            instance=obj,
            user=request.user,
            changes=snapshot(obj),
        )


# Register `Customer` model
@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "last_name",
        "first_name",
        "email",
        "phone",
        "license_number",
        "license_expiry_date",
        "deposit_amount",
    )
    search_fields = ("last_name", "first_name", "email", "license_number")
    list_filter = ("deposit_type", "city")

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        log_action(
            action="update" if change else "create",
            instance=obj,
            user=request.user,
            changes=snapshot(obj),
        )


# Register `MaintenanceRecord` model
@admin.register(MaintenanceRecord)
class MaintenanceRecordAdmin(DanglingReferenceMixin, admin.ModelAdmin):
    list_display = (
        "id", "vehicle_label", "type", "date", "mileage", "cost", "provider")
    list_filter = ("type", "date")
    search_fields = ("description", "provider", "invoice_reference")
    date_hierarchy = "date"

    # Creation books the expense; edits are a plain merge
    def save_model(self, request, obj, form, change):
        data = {name: getattr(obj, name) for name in MAINTENANCE_FIELDS}
        if change:
            saved = update_maintenance(obj.pk, data, user=request.user)
        else:
            saved, _ = record_maintenance(data, user=request.user)
        obj.pk = saved.pk

    def delete_model(self, request, obj):
        delete_maintenance(obj.pk, user=request.user)
