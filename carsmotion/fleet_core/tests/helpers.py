import datetime
from decimal import Decimal

from ..models import Customer, Reservation, Vehicle


class FleetFixturesMixin:
    """Small builders shared by the test cases."""

    _plate_counter = 0

    def make_vehicle(self, **overrides):
        FleetFixturesMixin._plate_counter += 1
        fields = {
            "make": "Peugeot",
            "model": "208",
            "year": 2022,
            "license_plate": f"TS-{FleetFixturesMixin._plate_counter:03d}-AA",
            "fuel_type": "essence",
            "purchase_type": "cash",
            "daily_rate": Decimal("50.00"),
        }
        fields.update(overrides)
        return Vehicle.objects.create(**fields)

    def make_customer(self, **overrides):
        fields = {"first_name": "Alice", "last_name": "Martin"}
        fields.update(overrides)
        return Customer.objects.create(**fields)

    def make_reservation(self, vehicle, customer, start, end, status="pending", **extra):
        """Raw row, no workflow side effects."""
        return Reservation.objects.create(
            vehicle=vehicle,
            customer=customer,
            start_date=start,
            end_date=end,
            status=status,
            total_amount=extra.pop("total_amount", Decimal("0.00")),
            **extra,
        )


def d(year, month, day):
    return datetime.date(year, month, day)
