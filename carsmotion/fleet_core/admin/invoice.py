from django.contrib import admin

from fleet_core.models import Invoice
from ..services.invoicing import next_invoice_number
from ..services.pricing import compute_tax
from .actions import mark_inv_as_cancelled, mark_inv_as_paid
from .mixins import DanglingReferenceMixin


# Register `Invoice` model
@admin.register(Invoice)
class InvoiceAdmin(DanglingReferenceMixin, admin.ModelAdmin):
    list_display = (
        "invoice_number",
        "customer_label",
        "reservation_id",
        "issue_date",
        "due_date",
        "total_amount",
        "tax_amount",
        "status",
    )
    list_filter = ("status", "issue_date")
    search_fields = ("invoice_number", "customer__last_name")
    actions = [mark_inv_as_paid, mark_inv_as_cancelled]
    # status moves only through the actions (transition rules)
    exclude = ("invoice_number", "status")

    def save_model(self, request, obj, form, change):
        if not change:
            # number is generated, sequential per year
            obj.invoice_number = next_invoice_number(obj.issue_date)
            if not form.cleaned_data.get("tax_amount"):
                obj.tax_amount = compute_tax(obj.total_amount)
        super().save_model(request, obj, form, change)

    """ Enforce immutability at admin level """

    def get_readonly_fields(self, request, obj=None):
        # If there is an invoice with "paid" status
        if obj and obj.status == "paid":
            # every field becomes read-only
            return [f.name for f in self.model._meta.fields
                    if f.name not in self.exclude]
        return super().get_readonly_fields(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj and obj.status == "paid":
            return False  # removes "Delete" option from admin for that invoice
        return super().has_delete_permission(request, obj)
