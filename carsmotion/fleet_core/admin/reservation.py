from django.contrib import admin

from fleet_core.models import Reservation
from ..services import delete_reservation, save_reservation
from .actions import (cancel_reservations, complete_reservations,
                      confirm_reservations)
from .forms import ReservationAdminForm
from .mixins import DanglingReferenceMixin


# Register `Reservation` model
@admin.register(Reservation)
class ReservationAdmin(DanglingReferenceMixin, admin.ModelAdmin):
    form = ReservationAdminForm
    list_display = (
        "id",
        "vehicle_label",
        "customer_label",
        "start_date",
        "end_date",
        "total_amount",
        "status",
    )
    list_filter = ("status", "start_date")
    search_fields = (
        "vehicle__license_plate", "customer__last_name", "customer__first_name")
    date_hierarchy = "start_date"
    actions = [confirm_reservations, complete_reservations, cancel_reservations]

    """
        Saves go through save_reservation() so the conflict check,
        pricing, vehicle status and rental income all apply.
    """
    def save_model(self, request, obj, form, change):
        data = {
            name: form.cleaned_data[name]
            for name in ReservationAdminForm.Meta.fields
            if name in form.cleaned_data
        }
        saved = save_reservation(data, obj.pk if change else None, user=request.user)
        # admin redirects / messages read from obj
        obj.pk = saved.pk
        obj.total_amount = saved.total_amount

    def delete_model(self, request, obj):
        delete_reservation(obj.pk, user=request.user)

    def delete_queryset(self, request, queryset):
        for reservation in queryset:
            delete_reservation(reservation.pk, user=request.user)

    def get_readonly_fields(self, request, obj=None):
        # finished bookings are history
        if obj and obj.status in ("completed", "cancelled"):
            return [f.name for f in self.model._meta.fields]
        return super().get_readonly_fields(request, obj)
