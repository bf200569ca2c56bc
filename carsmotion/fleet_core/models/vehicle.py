from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

VEHICLE_STATUS_CHOICES = [
    ("available", "Disponible"),
    ("rented", "Loué"),
    ("maintenance", "En maintenance"),
]


# ---------- Vehicle ----------
class Vehicle(models.Model):  # One car of the rental fleet

    # Identification
    make = models.CharField(max_length=100)
    model = models.CharField(max_length=100)
    year = models.PositiveIntegerField(
        validators=[MinValueValidator(1900), MaxValueValidator(2100)]
    )
    license_plate = models.CharField(max_length=20, unique=True)
    fuel_type = models.CharField(max_length=30)

    # Odometer, only ever raised by maintenance records
    # (manual edits are not checked)
    mileage = models.PositiveIntegerField(default=0)

    # Purchase terms
    """ purchase_type is free text: "cash", "credit", "leasing"...
        monthly_payment / insurance_monthly_fee feed the
        monthly expense generator when > 0 """
    purchase_type = models.CharField(max_length=30)
    purchase_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    monthly_payment = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    contract_duration = models.PositiveIntegerField(
        null=True, blank=True, help_text="Contract duration in months"
    )
    insurance_monthly_fee = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )

    daily_rate = models.DecimalField(max_digits=10, decimal_places=2)

    # available / rented are moved by the reservation lifecycle,
    # maintenance is only ever set by hand
    status = models.CharField(
        max_length=12, choices=VEHICLE_STATUS_CHOICES, default="available"
    )
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("make", "model", "license_plate")
        indexes = [
            models.Index(fields=["status"], name="vehicle_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(daily_rate__gte=0)
                & models.Q(purchase_price__gte=0),
                name="vehicle_non_negative_amounts",
            ),
        ]

    def __str__(self):
        return f"{self.make} {self.model} ({self.license_plate})"

    @property
    def label(self):
        return f"{self.make} {self.model}"

    def clean(self):
        for field in ("monthly_payment", "insurance_monthly_fee"):
            value = getattr(self, field)
            if value is not None and value < 0:
                raise ValidationError({field: "Le montant doit être positif"})

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
