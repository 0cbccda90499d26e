from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from django.test import SimpleTestCase

from bookings.billing import billable_hours, compute_charge

T0 = datetime(2025, 10, 27, 10, 0, tzinfo=dt_timezone.utc)


class BillingTestCase(SimpleTestCase):
    def test_short_stay_bills_one_hour(self):
        self.assertEqual(compute_charge(T0, T0 + timedelta(minutes=5), Decimal('100')), Decimal('100'))

    def test_forty_five_minutes_bills_one_hour(self):
        self.assertEqual(compute_charge(T0, T0 + timedelta(minutes=45), 100), Decimal('100'))

    def test_zero_elapsed_bills_minimum(self):
        self.assertEqual(billable_hours(T0, T0), 1)

    def test_partial_hours_round_up(self):
        self.assertEqual(billable_hours(T0, T0 + timedelta(hours=2, seconds=1)), 3)
        self.assertEqual(compute_charge(T0, T0 + timedelta(hours=2, minutes=1), Decimal('50')), Decimal('150'))

    def test_exact_hours_are_not_rounded(self):
        self.assertEqual(billable_hours(T0, T0 + timedelta(hours=3)), 3)

    def test_end_before_start_bills_minimum(self):
        self.assertEqual(compute_charge(T0, T0 - timedelta(hours=2), Decimal('80')), Decimal('80'))

    def test_charge_never_below_rate(self):
        for minutes in (0, 1, 59, 60, 61, 600, 1441):
            charge = compute_charge(T0, T0 + timedelta(minutes=minutes), Decimal('75.50'))
            self.assertGreaterEqual(charge, Decimal('75.50'))
