"""
Date arithmetic of the monthly billing cycle.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"


def _clamped_date(year: int, month: int, day: int) -> date:
    """`day` of the given month, or the month's last day when it is shorter"""
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def most_recent_billing_date(billing_day: int, today: date) -> date:
    """
    The latest billing date on or before `today`:
    this month's billing day if it has been reached, otherwise last month's.
    """
    if not 1 <= billing_day <= 31:
        raise ValueError(f"Invalid billing day {billing_day}")
    this_month = _clamped_date(today.year, today.month, billing_day)
    if today >= this_month:
        return this_month
    if today.month == 1:
        return _clamped_date(today.year - 1, 12, billing_day)
    return _clamped_date(today.year, today.month - 1, billing_day)


def next_billing_date(billing_day: int, start: date) -> date:
    """Billing date one month after `start`"""
    if start.month == 12:
        return _clamped_date(start.year + 1, 1, billing_day)
    return _clamped_date(start.year, start.month + 1, billing_day)


@dataclass(frozen=True)
class BillingCycle:
    """
    Accounting window [start, end) observed at `now`.
    `now` may lie outside the window (late re-run or clock skew), the elapsed
    fraction then leaves [0, 1] and projections become visible extrapolations.
    """

    start: datetime
    end: datetime
    now: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError(
                f"Billing cycle must end after it starts, got {self.start} -> {self.end}"
            )

    @classmethod
    def for_billing_day(cls, billing_day: int, now: datetime) -> BillingCycle:
        """Cycle containing `now` for cycles starting on `billing_day` at midnight"""
        start = most_recent_billing_date(billing_day, now.date())
        end = next_billing_date(billing_day, start)
        return cls(
            start=datetime.combine(start, datetime.min.time()),
            end=datetime.combine(end, datetime.min.time()),
            now=now,
        )

    @property
    def elapsed(self) -> timedelta:
        """Time passed since the cycle started"""
        return self.now - self.start

    @property
    def length(self) -> timedelta:
        """Total cycle length"""
        return self.end - self.start

    @property
    def elapsed_fraction(self) -> float:
        """Unclamped share of the cycle that has passed"""
        return self.elapsed / self.length

    @property
    def display_elapsed_fraction(self) -> float:
        """Elapsed fraction clamped to [0, 1], for display only"""
        return min(max(self.elapsed_fraction, 0.0), 1.0)

    def __str__(self) -> str:
        return "-to-".join(
            [self.start.strftime(DATE_FORMAT), self.end.strftime(DATE_FORMAT)]
        )
