from django.core.exceptions import ValidationError


class ReservationConflictError(ValidationError):
    """Raised when a reservation overlaps another non-cancelled booking
    of the same vehicle."""

    def __init__(self, vehicle_id, conflicts=()):
        self.vehicle_id = vehicle_id
        self.conflicts = list(conflicts)
        ids = ", ".join(str(r.pk) for r in self.conflicts)
        message = "Ce véhicule est déjà réservé pour les dates sélectionnées."
        if ids:
            message = f"{message} (réservation(s) {ids})"
        super().__init__({"start_date": [message], "end_date": [message]})


class InvalidStatusTransition(ValidationError):
    """Raised when a status change is not allowed by the lifecycle."""
    pass
