"""
models/notification.py
----------------------
Notification events produced by the scanning checks.
Delivery (push, email) happens elsewhere; these are descriptions only.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4


class NotificationType(str, Enum):
    REMINDER = "reminder"
    PRICE_INCREASE = "price_increase"
    TRIAL_ENDING = "trial_ending"
    OVERDUE = "overdue"
    BUDGET_ALERT = "budget_alert"


@dataclass
class Notification:
    type: NotificationType
    title: str
    message: str
    subscription_id: Optional[str] = None
    user_id: Optional[str] = None
    is_read: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid4()))

    def __str__(self) -> str:
        marker = " " if self.is_read else "•"
        return f"{marker} [{self.type.value}] {self.title}: {self.message}"
