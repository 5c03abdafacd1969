"""
Tests for billing period arithmetic.

Calendar-month addition with end-of-month clamping, applied once from
the original start.
"""

from datetime import datetime, timezone as dt_timezone

import pytest

from subscriptions.billing import add_months, compute_period_end
from subscriptions.state_machines import BillingInterval


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


class TestAddMonths:
    """Tests for add_months."""

    def test_keeps_day_when_it_exists(self):
        assert add_months(utc(2024, 1, 15), 1) == utc(2024, 2, 15)

    def test_clamps_to_leap_february(self):
        assert add_months(utc(2024, 1, 31), 1) == utc(2024, 2, 29)

    def test_clamps_to_common_february(self):
        assert add_months(utc(2023, 1, 31), 1) == utc(2023, 2, 28)

    def test_clamps_to_thirty_day_month(self):
        assert add_months(utc(2024, 3, 31), 1) == utc(2024, 4, 30)

    def test_rolls_over_year_boundary(self):
        assert add_months(utc(2024, 12, 31), 1) == utc(2025, 1, 31)

    def test_preserves_time_and_tzinfo(self):
        start = utc(2024, 5, 10, 13, 45, 7, 123456)

        end = add_months(start, 1)

        assert (end.hour, end.minute, end.second, end.microsecond) == (13, 45, 7, 123456)
        assert end.tzinfo is dt_timezone.utc

    def test_clamps_once_from_original_start(self):
        """Jan 31 + 3 months lands on Apr 30, not on a day clamped via February."""
        assert add_months(utc(2024, 1, 31), 3) == utc(2024, 4, 30)


class TestComputePeriodEnd:
    """Tests for compute_period_end."""

    @pytest.mark.parametrize(
        "start,interval,expected",
        [
            (utc(2024, 1, 31), BillingInterval.MONTHLY, utc(2024, 2, 29)),
            (utc(2024, 6, 1), BillingInterval.MONTHLY, utc(2024, 7, 1)),
            (utc(2023, 11, 30), BillingInterval.QUARTERLY, utc(2024, 2, 29)),
            (utc(2024, 1, 15), BillingInterval.QUARTERLY, utc(2024, 4, 15)),
            (utc(2024, 2, 29), BillingInterval.ANNUALLY, utc(2025, 2, 28)),
            (utc(2024, 7, 4), BillingInterval.ANNUALLY, utc(2025, 7, 4)),
        ],
    )
    def test_interval_lengths(self, start, interval, expected):
        assert compute_period_end(start, interval) == expected

    def test_end_is_after_start(self):
        start = utc(2024, 1, 31)

        for interval in BillingInterval.values:
            assert compute_period_end(start, interval) > start

    def test_accepts_plain_string_interval(self):
        assert compute_period_end(utc(2024, 1, 1), "monthly") == utc(2024, 2, 1)

    def test_unknown_interval_raises(self):
        with pytest.raises(ValueError, match="Unknown billing interval"):
            compute_period_end(utc(2024, 1, 1), "weekly")
