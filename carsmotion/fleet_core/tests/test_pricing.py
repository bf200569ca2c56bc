from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from ..services.pricing import compute_reservation_total, compute_tax, rental_days
from .helpers import d


class PricingTests(TestCase):
    def test_both_boundary_days_are_billed(self):
        self.assertEqual(rental_days(d(2024, 1, 1), d(2024, 1, 3)), 3)
        self.assertEqual(rental_days(d(2024, 1, 1), d(2024, 1, 1)), 1)

    def test_three_days_at_fifty(self):
        total = compute_reservation_total(Decimal("50"), d(2024, 1, 1), d(2024, 1, 3))
        self.assertEqual(total, Decimal("150.00"))
        self.assertEqual(compute_tax(total), Decimal("30.00"))

    def test_month_boundary_and_leap_day(self):
        # 2024-02-27 .. 2024-03-01 = 27, 28, 29, 1
        total = compute_reservation_total(Decimal("45.50"), d(2024, 2, 27), d(2024, 3, 1))
        self.assertEqual(total, Decimal("182.00"))

    def test_end_before_start_rejected(self):
        with self.assertRaises(ValidationError):
            rental_days(d(2024, 1, 3), d(2024, 1, 1))

    def test_tax_rounds_half_up_to_the_cent(self):
        # 0.20 * 10.025 = 2.005 → 2.01
        self.assertEqual(compute_tax(Decimal("10.025")), Decimal("2.01"))

    def test_tax_accepts_floats_without_binary_noise(self):
        self.assertEqual(compute_tax(19.99), Decimal("4.00"))

    @override_settings(FLEET_TAX_RATE=Decimal("0.055"))
    def test_tax_rate_comes_from_settings(self):
        self.assertEqual(compute_tax(Decimal("100")), Decimal("5.50"))

    def test_explicit_rate_wins(self):
        self.assertEqual(compute_tax(Decimal("100"), rate="0.10"), Decimal("10.00"))
