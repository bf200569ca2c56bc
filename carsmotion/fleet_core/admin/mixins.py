from django.contrib import admin

from fleet_core.store import default_stores


class DanglingReferenceMixin:
    """
    List columns for the vehicle / customer a row points to.
    The referenced row may have been deleted, so the id is resolved
    through the entity store (None → fallback label) instead of
    ``obj.vehicle`` which would raise.
    Don't combine with select_related on those fields: the inner join
    would hide rows whose reference is gone.
    """

    @admin.display(description="Véhicule")
    def vehicle_label(self, obj):
        vehicle = default_stores().vehicles.get_by_id(obj.vehicle_id)
        return str(vehicle) if vehicle else f"Véhicule inconnu (#{obj.vehicle_id})"

    @admin.display(description="Client")
    def customer_label(self, obj):
        customer = default_stores().customers.get_by_id(obj.customer_id)
        return customer.full_name if customer else f"Client inconnu (#{obj.customer_id})"
