import unittest
from datetime import date, datetime, timedelta

import pytest

from validator_economics.models.billing_cycle import (
    BillingCycle,
    most_recent_billing_date,
    next_billing_date,
)


class TestBillingDates(unittest.TestCase):
    def test_most_recent_billing_date(self):
        self.assertEqual(
            most_recent_billing_date(15, date(2025, 3, 20)), date(2025, 3, 15)
        )
        # inclusive of the billing day itself
        self.assertEqual(
            most_recent_billing_date(15, date(2025, 3, 15)), date(2025, 3, 15)
        )
        self.assertEqual(
            most_recent_billing_date(15, date(2025, 3, 14)), date(2025, 2, 15)
        )

    def test_january_rolls_back_to_december(self):
        self.assertEqual(
            most_recent_billing_date(10, date(2025, 1, 5)), date(2024, 12, 10)
        )
        self.assertEqual(next_billing_date(10, date(2024, 12, 10)), date(2025, 1, 10))

    def test_short_months_are_clamped(self):
        self.assertEqual(
            most_recent_billing_date(31, date(2025, 2, 28)), date(2025, 2, 28)
        )
        self.assertEqual(
            most_recent_billing_date(31, date(2025, 3, 15)), date(2025, 2, 28)
        )
        self.assertEqual(
            most_recent_billing_date(30, date(2024, 2, 29)), date(2024, 2, 29)
        )
        self.assertEqual(next_billing_date(31, date(2025, 1, 31)), date(2025, 2, 28))
        self.assertEqual(next_billing_date(31, date(2025, 2, 28)), date(2025, 3, 31))

    def test_invalid_billing_day(self):
        for day in [0, 32, -1]:
            with self.assertRaises(ValueError):
                most_recent_billing_date(day, date(2025, 3, 1))


class TestBillingCycle(unittest.TestCase):
    def test_for_billing_day(self):
        now = datetime(2025, 3, 16, 12, 0)
        cycle = BillingCycle.for_billing_day(1, now)
        self.assertEqual(cycle.start, datetime(2025, 3, 1))
        self.assertEqual(cycle.end, datetime(2025, 4, 1))
        self.assertEqual(cycle.length, timedelta(days=31))
        self.assertEqual(cycle.elapsed, timedelta(days=15, hours=12))
        self.assertAlmostEqual(cycle.elapsed_fraction, 15.5 / 31)
        self.assertEqual(str(cycle), "2025-03-01-to-2025-04-01")

    def test_elapsed_fraction_is_not_clamped(self):
        start = datetime(2025, 3, 1)
        end = datetime(2025, 3, 11)

        late = BillingCycle(start, end, now=datetime(2025, 3, 16))
        self.assertAlmostEqual(late.elapsed_fraction, 1.5)
        self.assertEqual(late.display_elapsed_fraction, 1.0)

        early = BillingCycle(start, end, now=datetime(2025, 2, 26))
        self.assertAlmostEqual(early.elapsed_fraction, -0.3)
        self.assertEqual(early.display_elapsed_fraction, 0.0)

    def test_elapsed_fraction_at_start(self):
        start = datetime(2025, 3, 1)
        cycle = BillingCycle(start, datetime(2025, 4, 1), now=start)
        self.assertEqual(cycle.elapsed_fraction, 0)


def test_empty_cycle_is_rejected():
    start = datetime(2025, 3, 1)
    with pytest.raises(ValueError):
        BillingCycle(start, start, now=start)
    with pytest.raises(ValueError):
        BillingCycle(start, start - timedelta(days=1), now=start)
