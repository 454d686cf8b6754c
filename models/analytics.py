"""
models/analytics.py
-------------------
Result objects returned by the analytics service.
"""

from dataclasses import dataclass, field

from models.subscription import Category, Subscription


@dataclass
class BudgetInsights:
    """Monthly spend compared with the user's budget."""
    percentage_used: float = 0.0
    remaining_budget: float = 0.0
    overspending: bool = False
    recommendations: list[str] = field(default_factory=list)


@dataclass
class SavingsOpportunities:
    """Advisory buckets; a subscription may appear in more than one."""
    unused_subscriptions: list[Subscription] = field(default_factory=list)
    price_increases: list[Subscription] = field(default_factory=list)
    trial_ending: list[Subscription] = field(default_factory=list)


@dataclass
class SpendingAnalytics:
    """Everything the analytics view needs in one object."""
    total_monthly: float
    total_yearly: float
    by_category: dict[Category, float]
    savings_opportunities: SavingsOpportunities
    budget_insights: BudgetInsights
