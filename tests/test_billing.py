import pytest
from datetime import date

from errors import InvalidRecurrence
from models.subscription import Recurrence
from services.billing import (
    DueStatus,
    advance_due_date,
    days_until,
    due_status,
    monthly_equivalent,
    roll_to_next_cycle,
)
from tests.factories import make_subscription


def test_advance_weekly_adds_seven_days():
    assert advance_due_date(date(2024, 12, 28), Recurrence.WEEKLY) == date(2025, 1, 4)


def test_advance_monthly_keeps_day_of_month():
    assert advance_due_date(date(2024, 1, 15), Recurrence.MONTHLY) == date(2024, 2, 15)
    assert advance_due_date(date(2024, 12, 1), Recurrence.MONTHLY) == date(2025, 1, 1)


def test_advance_monthly_clamps_to_end_of_short_month():
    assert advance_due_date(date(2024, 1, 31), Recurrence.MONTHLY) == date(2024, 2, 29)
    assert advance_due_date(date(2023, 1, 31), Recurrence.MONTHLY) == date(2023, 2, 28)


def test_advance_yearly():
    assert advance_due_date(date(2024, 3, 10), Recurrence.YEARLY) == date(2025, 3, 10)
    assert advance_due_date(date(2024, 2, 29), Recurrence.YEARLY) == date(2025, 2, 28)


@pytest.mark.parametrize("month", range(1, 13))
def test_twelve_monthly_steps_equal_one_year(month):
    for day in range(1, 29):
        start = date(2023, month, day)
        stepped = start
        for _ in range(12):
            stepped = advance_due_date(stepped, Recurrence.MONTHLY)
        assert stepped == advance_due_date(start, Recurrence.YEARLY)


@pytest.mark.parametrize("bad", ["Biweekly", None, 30])
def test_invalid_recurrence_is_rejected(bad):
    with pytest.raises(InvalidRecurrence):
        advance_due_date(date(2024, 1, 1), bad)
    with pytest.raises(InvalidRecurrence):
        monthly_equivalent(10, bad)


def test_plain_string_recurrence_is_accepted():
    assert advance_due_date(date(2024, 1, 15), "Monthly") == date(2024, 2, 15)
    assert monthly_equivalent(120, "Yearly") == 10


def test_monthly_equivalent():
    assert monthly_equivalent(12, Recurrence.MONTHLY) == 12
    assert monthly_equivalent(120, Recurrence.YEARLY) == 10
    assert monthly_equivalent(10, Recurrence.WEEKLY) == pytest.approx(43.3333333)


def test_days_until():
    today = date(2024, 1, 10)
    assert days_until(date(2024, 1, 13), today) == 3
    assert days_until(date(2024, 1, 10), today) == 0
    assert days_until(date(2024, 1, 8), today) == -2


@pytest.mark.parametrize("due, expected", [
    (date(2024, 1, 9), DueStatus.OVERDUE),
    (date(2024, 1, 10), DueStatus.DUE_TODAY),
    (date(2024, 1, 16), DueStatus.DUE_SOON),
    (date(2024, 1, 17), DueStatus.UPCOMING),
])
def test_due_status(due, expected):
    subscription = make_subscription(next_due_date=due)
    assert due_status(subscription, today=date(2024, 1, 10)) == expected


def test_roll_to_next_cycle_resets_paid_flag():
    subscription = make_subscription(next_due_date=date(2024, 1, 15), is_paid=True)
    assert roll_to_next_cycle(subscription) == {
        "next_due_date": date(2024, 2, 15),
        "is_paid": False,
    }
