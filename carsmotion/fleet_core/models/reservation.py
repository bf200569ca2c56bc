from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from ..managers import ReservationManager
from .customer import Customer
from .vehicle import Vehicle

RESERVATION_STATUS_CHOICES = [
    ("pending", "En attente"),
    ("confirmed", "Confirmée"),
    ("completed", "Terminée"),
    ("cancelled", "Annulée"),
]

# Current state vs. allowed next states
# (None = reservation being created)
RESERVATION_TRANSITIONS = {
    None: ["pending", "confirmed"],
    "pending": ["confirmed", "cancelled"],
    "confirmed": ["completed", "cancelled"],
    "completed": [],  # terminal
    "cancelled": [],  # terminal
}

# References that may point to a deleted row, resolved at read time
DANGLING_REFERENCES = ["vehicle", "customer"]


# ---------- Reservation ----------
class Reservation(models.Model):  # One booking of one vehicle by one customer

    # No FK guarantee: deleting a vehicle/customer leaves the id behind
    vehicle = models.ForeignKey(
        Vehicle,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="reservations",
    )
    customer = models.ForeignKey(
        Customer,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="reservations",
    )

    # Both boundary days are booked (and billed)
    start_date = models.DateField()
    end_date = models.DateField()

    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    status = models.CharField(
        max_length=10, choices=RESERVATION_STATUS_CHOICES, default="pending"
    )
    """ Workflow:
        pending   → confirmed → completed
        pending / confirmed → cancelled """
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ReservationManager()

    class Meta:
        ordering = ("-start_date", "-id")
        indexes = [
            models.Index(fields=["vehicle", "status"], name="reservation_vehicle_status_idx"),
            models.Index(fields=["start_date", "end_date"], name="reservation_dates_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="reservation_end_after_start",
            ),
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="reservation_non_negative_total",
            ),
        ]

    def __str__(self):
        return f"Réservation {self.pk} [{self.start_date} → {self.end_date}] ({self.status})"

    def covers(self, day):
        return self.start_date <= day <= self.end_date

    def overlaps(self, start_date, end_date):
        # inclusive: a shared boundary day counts
        return not (self.end_date < start_date or end_date < self.start_date)

    def clean(self):
        if self.vehicle_id is None:
            raise ValidationError({"vehicle": "Veuillez sélectionner un véhicule"})
        if self.customer_id is None:
            raise ValidationError({"customer": "Veuillez sélectionner un client"})
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValidationError(
                {"end_date": "La date de fin doit être postérieure à la date de début"}
            )
        if self.total_amount is not None and self.total_amount < 0:
            raise ValidationError(
                {"total_amount": "Le montant total doit être positif"})

    def save(self, *args, **kwargs):
        # referenced rows are not checked, see DANGLING_REFERENCES
        self.full_clean(exclude=DANGLING_REFERENCES)
        return super().save(*args, **kwargs)
