from django.core.exceptions import \
    ValidationError  # Built-in way to raise validation errors
from django.db import models
from django.utils import timezone

DEPOSIT_TYPE_CHOICES = [
    ("vehicle", "Véhicule"),
    ("cash", "Espèces"),
    ("creditCard", "Carte bancaire"),
    ("bankTransfer", "Virement"),
    ("check", "Chèque"),
]


# ---------- Customer ----------
# Person who rents vehicles and receives invoices
class Customer(models.Model):
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)

    # Contact
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")
    address = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    postal_code = models.CharField(max_length=20, blank=True, default="")
    country = models.CharField(max_length=100, blank=True, default="")

    # Driving licence
    license_number = models.CharField(max_length=50, blank=True, default="")
    license_issue_date = models.DateField(null=True, blank=True)
    license_expiry_date = models.DateField(null=True, blank=True)

    # Deposit left by the customer
    """ Example: creditCard 800.00 "**** 4242" """
    deposit_type = models.CharField(
        max_length=20, choices=DEPOSIT_TYPE_CHOICES, blank=True, default=""
    )
    deposit_amount = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    deposit_reference = models.CharField(max_length=100, blank=True, default="")

    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("last_name", "first_name")
        indexes = [
            models.Index(fields=["last_name", "first_name"], name="customer_name_idx"),
        ]

    # Display customer name in admin/UI
    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def _expiry_changed(self):
        # New customers are always checked
        if self._state.adding or not self.pk:
            return True
        orig = Customer.objects.filter(pk=self.pk).values_list(
            "license_expiry_date", flat=True
        ).first()
        return orig != self.license_expiry_date

    def clean(self):
        issue = self.license_issue_date
        expiry = self.license_expiry_date

        if issue and expiry and expiry <= issue:
            raise ValidationError(
                {"license_expiry_date":
                 "La date d'expiration doit être postérieure à la date d'émission"}
            )

        # Expired licences are refused at entry time only,
        # an existing record stays editable after its licence lapses
        if expiry and self._expiry_changed() and expiry <= timezone.localdate():
            raise ValidationError(
                {"license_expiry_date":
                 "La date d'expiration du permis doit être dans le futur"}
            )

        if self.deposit_amount is not None and self.deposit_amount < 0:
            raise ValidationError(
                {"deposit_amount": "Le montant de la caution doit être positif"})

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
