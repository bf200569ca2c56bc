from django.forms.models import model_to_dict

from ..models import AuditLog


def log_action(
    *,
    action: str,
    instance,
    user=None,
    changes: dict | None = None,
):
    """
    Central audit logger.
    Safe to call multiple times (caller ensures idempotency).
    """
    # anonymous / unsaved users are recorded as "system"
    if user is not None and not getattr(user, "pk", None):
        user = None

    return AuditLog.objects.create(
        user=user,
        action=action,
        object_type=instance.__class__.__name__,
        object_id=str(instance.pk),
        changes=changes,
    )


def snapshot(instance, fields=None) -> dict:
    """JSON-friendly view of an instance for AuditLog.changes."""
    return {
        key: (value if isinstance(value, (int, bool, type(None))) else str(value))
        for key, value in model_to_dict(instance, fields=fields).items()
    }
