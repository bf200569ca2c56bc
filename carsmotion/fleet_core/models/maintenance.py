from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from .vehicle import Vehicle

MAINTENANCE_TYPE_CHOICES = [
    ("service", "Entretien"),
    ("repair", "Réparation"),
    ("inspection", "Contrôle technique"),
]


# ---------- Maintenance record ----------
class MaintenanceRecord(models.Model):  # One intervention on one vehicle
    vehicle = models.ForeignKey(
        Vehicle,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="maintenance_records",
    )
    type = models.CharField(max_length=12, choices=MAINTENANCE_TYPE_CHOICES)
    date = models.DateField()
    # Odometer reading at the intervention
    mileage = models.PositiveIntegerField(default=0)
    description = models.CharField(max_length=255)
    cost = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    provider = models.CharField(max_length=150, blank=True, default="")
    invoice_reference = models.CharField(max_length=100, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-date", "-id")
        indexes = [
            models.Index(fields=["vehicle", "type", "date"], name="maintenance_vehicle_type_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(cost__gte=0),
                name="maintenance_non_negative_cost",
            ),
        ]

    def __str__(self):
        return f"{self.get_type_display()} {self.date} ({self.description})"

    def clean(self):
        if self.vehicle_id is None:
            raise ValidationError({"vehicle": "Veuillez sélectionner un véhicule"})
        if self.cost is not None and self.cost < 0:
            raise ValidationError({"cost": "Le coût doit être positif"})

    def save(self, *args, **kwargs):
        self.full_clean(exclude=["vehicle"])
        return super().save(*args, **kwargs)
