from django.contrib import admin, messages
from django.shortcuts import redirect
from django.urls import path
from django.utils import timezone

from fleet_core.models import Transaction
from ..services import generate_monthly_vehicle_expenses
from ..services.audit_helper import log_action


# Register `Transaction` model
@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "date",
        "type",
        "category",
        "amount",
        "description",
        "source_type",
        "source_id",
    )
    list_filter = ("type", "category", "source_type", "date")
    search_fields = ("description", "category")
    date_hierarchy = "date"
    # generation keys belong to the workflows
    readonly_fields = ("source_type", "source_id", "period")

    def get_urls(self):
        urls = super().get_urls()
        custom = [
            path(
                "generate-monthly/",
                self.admin_site.admin_view(self.generate_monthly_view),
                name="fleet_core_transaction_generate_monthly",
            ),
        ]
        return custom + urls

    def generate_monthly_view(self, request):
        created = generate_monthly_vehicle_expenses(timezone.localdate(), user=request.user)
        if created:
            messages.success(request, f"{created} monthly vehicle expense(s) booked.")
        else:
            messages.info(request, "Monthly vehicle expenses already booked for this month.")
        # send user back to the journal
        return redirect("admin:fleet_core_transaction_changelist")

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        log_action(
            action="update" if change else "create",
            instance=obj,
            user=request.user,
            changes={"amount": str(obj.amount), "category": obj.category},
        )
