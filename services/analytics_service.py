"""
services/analytics_service.py
-----------------------------
Derived views over a user's subscriptions: monthly totals, category
breakdown, upcoming bills, budget insights and savings opportunities.

The module-level functions work on any list of subscriptions;
AnalyticsService binds them to a SubscriptionService session.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from config import (
    BUDGET_WARNING_PERCENT,
    DUE_SOON_DAYS,
    TRIAL_ENDING_DAYS,
    UNUSED_AFTER_DAYS,
)
from errors import InvalidRecurrence
from models.analytics import BudgetInsights, SavingsOpportunities, SpendingAnalytics
from models.subscription import Category, Subscription
from models.user import UserProfile
from services.billing import (
    MONTHS_PER_YEAR,
    days_until,
    due_status,
    subscription_monthly_amount,
)
from services.subscription_service import SubscriptionService
from utils.logger import get_logger

logger = get_logger(__name__)

RECOMMEND_CANCEL_UNUSED = "Consider canceling unused subscriptions"
RECOMMEND_REVIEW_ENTERTAINMENT = "Review your entertainment subscriptions"
RECOMMEND_NEARING_LIMIT = "You're approaching your budget limit"


def monthly_amounts(subscriptions: Iterable[Subscription]):
    """Yield (subscription, monthly amount), skipping corrupt recurrences."""
    for subscription in subscriptions:
        try:
            yield subscription, subscription_monthly_amount(subscription)
        except InvalidRecurrence as e:
            logger.error(f"Skipping subscription #{subscription.id} in totals: {e}")


# ── Aggregation ───────────────────────────────────────────

def total_monthly_amount(subscriptions: Iterable[Subscription]) -> float:
    """Sum of monthly-equivalent amounts, paid or not."""
    return sum((amount for _, amount in monthly_amounts(subscriptions)), 0.0)


def total_yearly_amount(subscriptions: Iterable[Subscription]) -> float:
    return total_monthly_amount(subscriptions) * MONTHS_PER_YEAR


def spending_by_category(subscriptions: Iterable[Subscription]) -> dict[Category, float]:
    """Monthly-equivalent spend per category; every category is present."""
    spending = {category: 0.0 for category in Category}
    for subscription, amount in monthly_amounts(subscriptions):
        spending[subscription.category] += amount
    return spending


def upcoming_bills(subscriptions: Iterable[Subscription]) -> list[Subscription]:
    """All subscriptions by next due date; ties keep insertion order."""
    return sorted(subscriptions, key=lambda s: s.next_due_date)


def due_within(subscriptions: Iterable[Subscription], days: int = DUE_SOON_DAYS,
               today: Optional[date] = None) -> list[Subscription]:
    """Upcoming bills due from today up to, but not including, `days` ahead."""
    today = today or date.today()
    return [
        s for s in upcoming_bills(subscriptions)
        if 0 <= days_until(s.next_due_date, today) < days
    ]


def overdue_bills(subscriptions: Iterable[Subscription],
                  today: Optional[date] = None) -> list[Subscription]:
    today = today or date.today()
    return [s for s in upcoming_bills(subscriptions) if days_until(s.next_due_date, today) < 0]


def active_free_trials(subscriptions: Iterable[Subscription]) -> list[Subscription]:
    return [s for s in subscriptions if s.is_free_trial]


def search(subscriptions: Iterable[Subscription], query: str = "",
           trials_only: bool = False) -> list[Subscription]:
    """
    Upcoming bills whose name or category contains `query`, ignoring case.
    An empty query matches everything; `trials_only` keeps free trials only.
    """
    needle = query.strip().lower()
    return [
        s for s in upcoming_bills(subscriptions)
        if (needle in s.name.lower() or needle in s.category.value.lower())
        and (s.is_free_trial or not trials_only)
    ]


# ── Budget insights ───────────────────────────────────────

def budget_insights(total_monthly: float, user: Optional[UserProfile]) -> BudgetInsights:
    """
    Compare monthly spend with the user's budget.

    Without a user context, or with a non-positive budget, the insights
    are unavailable and zeroed defaults are returned.
    """
    if user is None or user.monthly_budget <= 0:
        return BudgetInsights()

    budget = user.monthly_budget
    percentage_used = total_monthly / budget * 100
    overspending = total_monthly > budget

    recommendations = []
    if overspending:
        recommendations.append(RECOMMEND_CANCEL_UNUSED)
        recommendations.append(RECOMMEND_REVIEW_ENTERTAINMENT)
    if percentage_used > BUDGET_WARNING_PERCENT:
        recommendations.append(RECOMMEND_NEARING_LIMIT)

    return BudgetInsights(
        percentage_used=percentage_used,
        remaining_budget=budget - total_monthly,
        overspending=overspending,
        recommendations=recommendations,
    )


# ── Savings opportunities ─────────────────────────────────

def _naive(moment: datetime) -> datetime:
    """Database timestamps are tz-aware; compare them in local time."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def is_trial_ending(subscription: Subscription, today: Optional[date] = None,
                    window_days: int = TRIAL_ENDING_DAYS) -> bool:
    """Active trial ending today or within the window; expired trials excluded."""
    if not subscription.is_free_trial or subscription.trial_end_date is None:
        return False
    return 0 <= days_until(subscription.trial_end_date, today) < window_days


def savings_opportunities(subscriptions: Iterable[Subscription],
                          now: Optional[datetime] = None) -> SavingsOpportunities:
    """
    Flag optimisation candidates. Buckets overlap.

    - unused: created more than UNUSED_AFTER_DAYS ago (no usage signal exists,
      so age is the proxy).
    - price_increases: amount above previous_amount.
    - trial_ending: see is_trial_ending.
    """
    now = now or datetime.now()
    cutoff = now - timedelta(days=UNUSED_AFTER_DAYS)
    subscriptions = list(subscriptions)

    return SavingsOpportunities(
        unused_subscriptions=[
            s for s in subscriptions
            if s.created_at is not None and _naive(s.created_at) < cutoff and s.amount > 0
        ],
        price_increases=[s for s in subscriptions if s.has_price_increase()],
        trial_ending=[s for s in subscriptions if is_trial_ending(s, now.date())],
    )


class AnalyticsService:
    """Analytics for the subscriptions currently held by a session."""

    def __init__(self, session: SubscriptionService):
        self.session = session

    def total_monthly_amount(self) -> float:
        return total_monthly_amount(self.session.subscriptions)

    def total_yearly_amount(self) -> float:
        return total_yearly_amount(self.session.subscriptions)

    def spending_by_category(self) -> dict[Category, float]:
        return spending_by_category(self.session.subscriptions)

    def upcoming_bills(self) -> list[Subscription]:
        return upcoming_bills(self.session.subscriptions)

    def due_within(self, days: int = DUE_SOON_DAYS, today: Optional[date] = None) -> list[Subscription]:
        return due_within(self.session.subscriptions, days, today)

    def overdue_bills(self, today: Optional[date] = None) -> list[Subscription]:
        return overdue_bills(self.session.subscriptions, today)

    def due_statuses(self, today: Optional[date] = None) -> list[tuple]:
        """(subscription, DueStatus) pairs in upcoming order."""
        return [
            (s, due_status(s, today, DUE_SOON_DAYS)) for s in self.upcoming_bills()
        ]

    def active_free_trials(self) -> list[Subscription]:
        return active_free_trials(self.session.subscriptions)

    def search(self, query: str = "", trials_only: bool = False) -> list[Subscription]:
        return search(self.session.subscriptions, query, trials_only)

    def budget_insights(self) -> BudgetInsights:
        return budget_insights(self.total_monthly_amount(), self.session.user)

    def savings_opportunities(self, now: Optional[datetime] = None) -> SavingsOpportunities:
        return savings_opportunities(self.session.subscriptions, now)

    def spending_analytics(self, now: Optional[datetime] = None) -> SpendingAnalytics:
        """Everything the analytics screen shows, computed in one pass."""
        total = self.total_monthly_amount()
        return SpendingAnalytics(
            total_monthly=total,
            total_yearly=total * MONTHS_PER_YEAR,
            by_category=self.spending_by_category(),
            savings_opportunities=self.savings_opportunities(now),
            budget_insights=budget_insights(total, self.session.user),
        )
