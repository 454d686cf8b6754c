"""
models/user.py
--------------
Account record carrying the budget context for analytics.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from config import DEFAULT_CURRENCY, DEFAULT_MONTHLY_BUDGET, DEFAULT_TIMEZONE


@dataclass
class UserProfile:
    """
    One record per account.

    Attributes:
        id: Account identifier.
        name: Display name.
        email: Contact address.
        monthly_budget: Self-declared monthly subscription budget.
        currency: ISO currency code used for display only.
        timezone: IANA timezone name used for display only.
        price_increase_alerts: Emit price_increase notifications.
        trial_end_alerts: Emit trial_ending notifications.
    """
    id: str
    name: str = ""
    email: str = ""
    monthly_budget: float = DEFAULT_MONTHLY_BUDGET
    currency: str = DEFAULT_CURRENCY
    timezone: str = DEFAULT_TIMEZONE
    price_increase_alerts: bool = True
    trial_end_alerts: bool = True
    created_at: Optional[datetime] = None
