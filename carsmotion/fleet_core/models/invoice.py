from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from ..exceptions import InvalidStatusTransition
from .customer import Customer
from .reservation import Reservation

INV_STATUS_CHOICES = [
    ("unpaid", "Non payée"),
    ("paid", "Payée"),
    ("cancelled", "Annulée"),
]


class Invoice(models.Model):  # Represents a customer invoice

    # human-readable (e.g. "FACT-2025-0001"), generated by services.invoicing
    invoice_number = models.CharField(max_length=32, unique=True)

    # Optional link to the rental being billed; both references
    # may dangle once the target row is deleted
    reservation = models.ForeignKey(
        Reservation,
        null=True,
        blank=True,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="invoices",
    )
    customer = models.ForeignKey(
        Customer,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="invoices",
    )

    issue_date = models.DateField()
    due_date = models.DateField()  # payment deadline, >= issue_date

    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    tax_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    status = models.CharField(
        max_length=10, choices=INV_STATUS_CHOICES, default="unpaid"
    )
    """ Workflow:
        unpaid = issued, waiting for payment.
        paid = settled.
        cancelled = voided, kept for numbering continuity. """
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-issue_date", "-id")
        indexes = [
            models.Index(fields=["customer"], name="invoice_customer_idx"),
            models.Index(fields=["status", "due_date"], name="invoice_status_due_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(due_date__gte=models.F("issue_date")),
                name="invoice_due_after_issue",
            ),
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0)
                & models.Q(tax_amount__gte=0),
                name="invoice_non_negative_amounts",
            ),
        ]

    def __str__(self):
        return self.invoice_number

    def clean(self):
        if self.customer_id is None:
            raise ValidationError({"customer": "Le client est requis"})
        if self.issue_date and self.due_date and self.due_date < self.issue_date:
            raise ValidationError(
                {"due_date":
                 "La date d'échéance doit être postérieure à la date d'émission"}
            )

        # Paid invoices keep their amounts
        if self.pk and self.status == "paid":
            orig = Invoice.objects.filter(pk=self.pk).first()
            if orig is not None and orig.status == "paid":
                changed_fields = [
                    field
                    for field in ("invoice_number", "total_amount", "tax_amount")
                    if getattr(orig, field) != getattr(self, field)
                ]
                if changed_fields:
                    raise ValidationError(
                        f"Cannot modify {changed_fields} on a paid invoice.")

    def save(self, *args, **kwargs):
        self.full_clean(exclude=["reservation", "customer"])
        return super().save(*args, **kwargs)

    def transition_to(self, new_status):
        # Current state vs. allowed next states
        allowed = {
            "unpaid": ["paid", "cancelled"],
            "paid": [],  # "paid" → (no further transitions)
            "cancelled": [],
        }
        # Look up what states are allowed from current self.status
        if new_status not in allowed.get(self.status, []):
            raise InvalidStatusTransition(
                f"Cannot go from {self.status} to {new_status}")

        self.status = new_status
        self.save()
