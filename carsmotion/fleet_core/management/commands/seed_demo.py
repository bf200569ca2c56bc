import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from fleet_core.models import AgencySettings, Customer, Vehicle
from fleet_core.services import (complete_reservation,
                                 generate_monthly_vehicle_expenses,
                                 record_maintenance, save_reservation)

User = get_user_model()

DEMO_VEHICLES = [
    {
        "license_plate": "AB-123-CD",
        "make": "Peugeot",
        "model": "208",
        "year": 2022,
        "fuel_type": "essence",
        "mileage": 18500,
        "purchase_type": "lld",
        "monthly_payment": Decimal("289.00"),
        "contract_duration": 36,
        "insurance_monthly_fee": Decimal("45.00"),
        "daily_rate": Decimal("45.00"),
    },
    {
        "license_plate": "EF-456-GH",
        "make": "Renault",
        "model": "Clio",
        "year": 2021,
        "fuel_type": "diesel",
        "mileage": 42000,
        "purchase_type": "cash",
        "purchase_price": Decimal("16500.00"),
        "insurance_monthly_fee": Decimal("39.00"),
        "daily_rate": Decimal("40.00"),
    },
    {
        "license_plate": "IJ-789-KL",
        "make": "Tesla",
        "model": "Model 3",
        "year": 2023,
        "fuel_type": "électrique",
        "mileage": 9000,
        "purchase_type": "loa",
        "monthly_payment": Decimal("499.00"),
        "contract_duration": 48,
        "insurance_monthly_fee": Decimal("85.00"),
        "daily_rate": Decimal("95.00"),
    },
]


class Command(BaseCommand):
    help = (
        "Create a demo operator, vehicles, customers and a few reservations "
        "going through the real workflows (ledger and statuses included)."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--username", default="demo", help="Username for the demo operator."
        )
        parser.add_argument(
            "--password", default="demo123", help="Password for the demo operator."
        )

    @transaction.atomic
    def handle(self, *args, **options):
        username = options["username"]
        password = options["password"]
        today = timezone.localdate()

        # 1. Operator (staff, so the admin is usable right away)
        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": f"{username}@example.com", "is_staff": True,
                      "is_superuser": True},
        )
        if created:
            user.set_password(password)
            user.save()
        self.stdout.write(
            self.style.SUCCESS(f"Operator: {user.username} (pw={password})"))

        agency = AgencySettings.load()
        if not agency.company_name:
            agency.company_name = "Carsmotion Démo"
            agency.company_email = "contact@example.com"
            agency.save()

        # 2. Fleet
        vehicles = []
        for demo in DEMO_VEHICLES:
            fields = dict(demo)
            plate = fields.pop("license_plate")
            vehicle, _ = Vehicle.objects.get_or_create(license_plate=plate, defaults=fields)
            vehicles.append(vehicle)
        self.stdout.write(self.style.SUCCESS(f"Vehicles: {len(vehicles)}"))

        # 3. Customers
        alice, _ = Customer.objects.get_or_create(
            license_number="DEMO-0001",
            defaults={
                "first_name": "Alice",
                "last_name": "Martin",
                "email": "alice.martin@example.com",
                "city": "Lyon",
                "license_issue_date": datetime.date(2015, 6, 1),
                "license_expiry_date": today + datetime.timedelta(days=5 * 365),
                "deposit_type": "creditCard",
                "deposit_amount": Decimal("800.00"),
            },
        )
        bruno, _ = Customer.objects.get_or_create(
            license_number="DEMO-0002",
            defaults={
                "first_name": "Bruno",
                "last_name": "Petit",
                "email": "bruno.petit@example.com",
                "city": "Paris",
                "license_issue_date": datetime.date(2010, 3, 15),
                "license_expiry_date": today + datetime.timedelta(days=3 * 365),
            },
        )
        self.stdout.write(self.style.SUCCESS("Customers: Alice Martin, Bruno Petit"))

        # 4. Reservations, only on a fresh fleet
        if vehicles[0].reservations.exists():
            self.stdout.write(self.style.NOTICE("Reservations already seeded, skipping."))
            return

        days = datetime.timedelta
        # running rental → vehicle rented, income booked
        save_reservation({
            "vehicle_id": vehicles[0].pk,
            "customer_id": alice.pk,
            "start_date": today - days(2),
            "end_date": today + days(3),
            "status": "confirmed",
        }, user=user, today=today)
        # finished rental → income booked, vehicle back to available
        past = save_reservation({
            "vehicle_id": vehicles[1].pk,
            "customer_id": bruno.pk,
            "start_date": today - days(20),
            "end_date": today - days(15),
            "status": "confirmed",
        }, user=user, today=today)
        complete_reservation(past.pk, user=user, today=today)
        # upcoming request
        save_reservation({
            "vehicle_id": vehicles[2].pk,
            "customer_id": bruno.pk,
            "start_date": today + days(10),
            "end_date": today + days(14),
        }, user=user, today=today)

        # 5. Maintenance + monthly charges
        record_maintenance({
            "vehicle_id": vehicles[1].pk,
            "type": "service",
            "date": today - days(7),
            "mileage": vehicles[1].mileage + 350,
            "description": "Vidange et filtres",
            "cost": Decimal("180.00"),
            "provider": "Garage du Centre",
        }, user=user)
        created = generate_monthly_vehicle_expenses(today, user=user)

        self.stdout.write(self.style.SUCCESS(
            f"Reservations: 3, maintenance: 1, monthly expenses: {created}"))
        self.stdout.write(self.style.SUCCESS("Demo data seeded successfully!"))
