from django.core.exceptions import ValidationError
from django.db import models

from ..managers import TransactionManager

TRANSACTION_TYPE_CHOICES = [
    ("income", "Recette"),
    ("expense", "Dépense"),
]

# Categories written by the ledger generator
RENTAL_INCOME_CATEGORY = "Locations"
MAINTENANCE_EXPENSE_CATEGORY = "Entretien véhicules"
LOAN_PAYMENT_CATEGORY = "Mensualités véhicules"
INSURANCE_CATEGORY = "Assurances véhicules"

INCOME_CATEGORIES = [
    RENTAL_INCOME_CATEGORY,
    "Caution",
    "Vente véhicule",
    "Subvention",
    "Autre recette",
]
EXPENSE_CATEGORIES = [
    "Entretien",
    "Carburant",
    "Assurance",
    "Taxes",
    "Achat véhicule",
    "Leasing",
    "Salaires",
    "Fournitures",
    "Loyer",
    "Autre dépense",
    MAINTENANCE_EXPENSE_CATEGORY,
    LOAN_PAYMENT_CATEGORY,
    INSURANCE_CATEGORY,
]

# Entity that generated the entry (the "related to" reference)
SOURCE_TYPE_CHOICES = [
    ("vehicle", "Véhicule"),
    ("reservation", "Réservation"),
    ("maintenance", "Maintenance"),
]


# ---------- Ledger entry (journal / cash book row) ----------
class Transaction(models.Model):
    date = models.DateField()
    type = models.CharField(max_length=10, choices=TRANSACTION_TYPE_CHOICES)
    # Free text, but a category of the other type's catalogue is refused
    category = models.CharField(max_length=100)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=400, blank=True, default="")

    # optional polymorphic source info (reservation, maintenance, vehicle)
    source_type = models.CharField(
        max_length=20, choices=SOURCE_TYPE_CHOICES, null=True, blank=True
    )
    source_id = models.BigIntegerField(null=True, blank=True)

    # "YYYY-MM" generation key, only set by the monthly generator
    period = models.CharField(max_length=7, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    objects = TransactionManager()

    class Meta:
        ordering = ("-date", "-id")
        indexes = [
            models.Index(fields=["date"], name="transaction_date_idx"),
            models.Index(fields=["type", "date"], name="transaction_type_date_idx"),
            models.Index(fields=["source_type", "source_id"], name="transaction_source_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="transaction_positive_amount",
            ),
            # one generated row per (category, vehicle, month)
            models.UniqueConstraint(
                fields=["category", "source_type", "source_id", "period"],
                condition=models.Q(period__isnull=False),
                name="uq_transaction_monthly_generation",
            ),
        ]

    def __str__(self):
        sign = "+" if self.type == "income" else "-"
        return f"{self.date} {self.category} {sign}{self.amount}"

    @property
    def signed_amount(self):
        return self.amount if self.type == "income" else -self.amount

    def clean(self):
        if self.amount is not None and self.amount <= 0:
            raise ValidationError({"amount": "Le montant doit être positif"})

        # Semantic check of the category against the entry type
        if self.type == "income" and self.category in EXPENSE_CATEGORIES:
            raise ValidationError(
                {"category": f"'{self.category}' est une catégorie de dépense"})
        if self.type == "expense" and self.category in INCOME_CATEGORIES:
            raise ValidationError(
                {"category": f"'{self.category}' est une catégorie de recette"})

        # source_type and source_id go together
        if (self.source_type is None) != (self.source_id is None):
            raise ValidationError(
                "source_type and source_id must be set together")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
