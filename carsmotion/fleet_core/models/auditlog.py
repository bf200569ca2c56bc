from django.conf import settings  # To access global project settings
from django.db import models


# ---------- Audit / Event log ----------
class AuditLog(
    models.Model
):  # Gives accountability and traceability across the back office
    # Which user performed the action
    # (Nullable when the action was automated, e.g. a Celery beat job)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL
    )
    # Type of event being logged
    action = models.CharField(
        max_length=50
    )  # Common choices: create, update, delete, confirm, generate
    # What kind of object was affected
    object_type = models.CharField(
        max_length=100
    )  # (e.g., "Reservation", "Transaction", "Vehicle")
    object_id = models.CharField(max_length=100)
    # Store before/after details of what changed, in JSON format
    changes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["object_type", "object_id"], name="auditlog_object_idx"),
            models.Index(fields=["created_at"], name="auditlog_created_idx"),
        ]

    def __str__(self):
        time = self.created_at
        usr = self.user or "system"
        return f"[{time:%Y-%m-%d %H:%M}] {usr} {self.action} {self.object_type}({self.object_id})"
