from django.db.models.signals import post_delete
from django.dispatch import receiver

from .models import Customer, Vehicle
from .services.audit_helper import log_action, snapshot

"""
    Vehicles and customers can be deleted freely: reservations, invoices
    and maintenance records keep their dangling ids. Keep a trace of
    what was removed so those ids can still be explained later.
"""


@receiver(post_delete, sender=Vehicle)
@receiver(post_delete, sender=Customer)
def audit_reference_deleted(sender, instance, **kwargs):
    log_action(action="delete", instance=instance, changes=snapshot(instance))
