from django import forms
from django.core.exceptions import ValidationError

from fleet_core.exceptions import ReservationConflictError
from fleet_core.models import Reservation
from fleet_core.services.conflicts import find_conflicts
from fleet_core.services.lifecycle import check_transition

# -----------------------------
# Custom admin forms
# ----------------------------


class ReservationAdminForm(forms.ModelForm):
    """Reservation form that reports calendar conflicts and refused
    status changes as form errors instead of failing on save."""

    class Meta:
        model = Reservation
        fields = (
            "vehicle",
            "customer",
            "start_date",
            "end_date",
            "total_amount",
            "status",
            "notes",
        )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # left empty → computed from the vehicle daily rate
        self.fields["total_amount"].required = False
        self.fields["total_amount"].help_text = (
            "Laisser vide pour calculer le montant à partir du tarif journalier."
        )

    def clean(self):
        cleaned = super().clean()
        vehicle = cleaned.get("vehicle")
        start = cleaned.get("start_date")
        end = cleaned.get("end_date")
        status = cleaned.get("status")

        previous_status = self.instance.status if self.instance.pk else None
        if status:
            try:
                check_transition(previous_status, status)
            except ValidationError as exc:
                self.add_error("status", exc.message_dict.get("status", exc.messages))

        # cancelled bookings never block the calendar
        if vehicle and start and end and status != "cancelled":
            conflicts = find_conflicts(
                vehicle.pk, start, end, exclude_reservation_id=self.instance.pk)
            if conflicts:
                raise ReservationConflictError(vehicle.pk, conflicts)
        # an empty total is resolved by the save workflow, keep the model
        # default out of construct_instance
        if cleaned.get("total_amount") is None:
            cleaned.pop("total_amount", None)
        return cleaned
