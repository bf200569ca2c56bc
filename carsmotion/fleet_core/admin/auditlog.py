from django.contrib import admin

from fleet_core.models import AgencySettings, AuditLog


# Register `AuditLog` model
@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Audit rows are written by the workflows only; the admin can browse them."""

    list_display = (
        "id",
        "created_at",
        "user",
        "action",
        "object_type",
        "object_id",
    )
    search_fields = ("object_type", "object_id", "user__username")
    list_filter = ("action", "object_type", "created_at")
    date_hierarchy = "created_at"
    list_per_page = 50
    actions = None

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related("user")

    # view permission only: the change form renders without a save button
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# Register the `AgencySettings` singleton
@admin.register(AgencySettings)
class AgencySettingsAdmin(admin.ModelAdmin):
    list_display = ("company_name", "vat_number", "company_email", "last_backup_date")
    readonly_fields = ("last_backup_date",)

    # one row only, created on first load
    def has_add_permission(self, request):
        return not AgencySettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
