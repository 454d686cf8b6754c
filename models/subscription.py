"""
models/subscription.py
----------------------
Domain model for recurring bills (subscriptions).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from errors import InvalidRecurrence, ValidationError


class Category(str, Enum):
    """Fixed set of spending categories. Never user-extensible."""
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    RENT = "Rent"
    EDUCATION = "Education"
    HEALTH = "Health"
    TRANSPORT = "Transport"
    FOOD = "Food"
    OTHER = "Other"

    @property
    def color(self) -> str:
        """Display accent for this category."""
        return CATEGORY_COLORS[self]


class Recurrence(str, Enum):
    """Native billing period of a subscription's amount."""
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"


CATEGORY_COLORS: dict[Category, str] = {
    Category.ENTERTAINMENT: "#8B5CF6",
    Category.UTILITIES: "#10B981",
    Category.RENT: "#F59E0B",
    Category.EDUCATION: "#3B82F6",
    Category.HEALTH: "#EF4444",
    Category.TRANSPORT: "#6366F1",
    Category.FOOD: "#F97316",
    Category.OTHER: "#6B7280",
}


@dataclass
class Subscription:
    """
    Represents one recurring bill.

    Attributes:
        id: Identifier assigned by the repository (None for new records).
        user_id: Owning account.
        name: Display name (e.g., 'Netflix', 'Rent').
        amount: Price per native billing period.
        category: One of the fixed categories.
        recurrence: Weekly, Monthly or Yearly.
        next_due_date: Date of the next expected charge.
        start_date: Date the subscription began.
        created_at: Timestamp when the record was created.
        is_paid: True only while the current cycle is settled.
        color: Accent derived from the category; any given value is replaced.
        previous_amount: Last known price, set when the price changes.
        reminder_days: Days before the due date at which to remind.
    """
    name: str
    amount: float
    category: Category
    recurrence: Recurrence
    next_due_date: date
    start_date: date
    user_id: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_paid: bool = False
    color: str = ""
    description: Optional[str] = None
    notes: Optional[str] = None
    is_free_trial: bool = False
    trial_end_date: Optional[date] = None
    previous_amount: Optional[float] = None
    auto_renew: bool = True
    reminder_days: list[int] = field(default_factory=list)

    def __post_init__(self):
        try:
            self.category = Category(self.category)
        except ValueError:
            raise ValidationError(f"Unknown category: {self.category!r}", field="category") from None
        try:
            self.recurrence = Recurrence(self.recurrence)
        except ValueError:
            raise InvalidRecurrence(self.recurrence) from None
        self.color = self.category.color

    def has_price_increase(self) -> bool:
        """Returns True if the current price is above the recorded previous one."""
        return self.previous_amount is not None and self.amount > self.previous_amount

    def __str__(self) -> str:
        status = "✅" if self.is_paid else "⏳"
        return (
            f"{status} {self.name}: {self.amount:.2f} ({self.recurrence.value}) "
            f"[{self.category.value}] - Next: {self.next_due_date}"
        )
