"""
services/billing.py
-------------------
Billing-cycle arithmetic: due-date recurrence, monthly normalization
and due-status classification. Pure functions, no I/O.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional

from dateutil.relativedelta import relativedelta

from errors import InvalidRecurrence
from models.subscription import Recurrence, Subscription

WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12

# relativedelta clamps the day to the end of shorter months (Jan 31 -> Feb 28/29)
_PERIODS = {
    Recurrence.WEEKLY: timedelta(weeks=1),
    Recurrence.MONTHLY: relativedelta(months=1),
    Recurrence.YEARLY: relativedelta(years=1),
}


class DueStatus(str, Enum):
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_SOON = "due_soon"
    UPCOMING = "upcoming"


def _check_recurrence(recurrence) -> Recurrence:
    try:
        return Recurrence(recurrence)
    except ValueError:
        raise InvalidRecurrence(recurrence) from None


def advance_due_date(anchor: date, recurrence: Recurrence) -> date:
    """
    Move a date forward by exactly one billing period.

    Args:
        anchor: Start date or current due date.
        recurrence: Weekly (+7 days), Monthly (+1 calendar month)
            or Yearly (+1 calendar year).

    Returns:
        The next due date.

    Raises:
        InvalidRecurrence: If `recurrence` names no known billing period.
    """
    return anchor + _PERIODS[_check_recurrence(recurrence)]


def monthly_equivalent(amount: float, recurrence: Recurrence) -> float:
    """
    Convert an amount in its native period to a per-month figure.
    No rounding is applied.
    """
    recurrence = _check_recurrence(recurrence)
    if recurrence is Recurrence.MONTHLY:
        return amount
    if recurrence is Recurrence.YEARLY:
        return amount / MONTHS_PER_YEAR
    return amount * WEEKS_PER_YEAR / MONTHS_PER_YEAR


def subscription_monthly_amount(subscription: Subscription) -> float:
    return monthly_equivalent(subscription.amount, subscription.recurrence)


def days_until(target: date, today: Optional[date] = None) -> int:
    """Whole days from `today` to `target`; negative once `target` has passed."""
    today = today or date.today()
    if isinstance(target, datetime):
        target = target.date()
    return (target - today).days


def due_status(subscription: Subscription, today: Optional[date] = None,
               due_soon_days: int = 7) -> DueStatus:
    """Classify a bill by how far away its next due date is."""
    days = days_until(subscription.next_due_date, today)
    if days < 0:
        return DueStatus.OVERDUE
    if days == 0:
        return DueStatus.DUE_TODAY
    if days < due_soon_days:
        return DueStatus.DUE_SOON
    return DueStatus.UPCOMING


def roll_to_next_cycle(subscription: Subscription) -> dict:
    """
    Changes that record a payment: the due date moves one period ahead
    and the new cycle starts unpaid.
    """
    return {
        "next_due_date": advance_due_date(subscription.next_due_date, subscription.recurrence),
        "is_paid": False,
    }
