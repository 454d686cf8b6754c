"""
services/notification_service.py
--------------------------------
Scans subscriptions and emits notification events.

The scans do not look for existing equivalent notifications:
running a check twice emits its events twice. Callers that schedule
the checks are responsible for de-duplication.
"""

from datetime import date, datetime
from typing import Iterable, Optional

from config import TRIAL_ALERT_DAYS
from errors import NotFoundError
from models.notification import Notification, NotificationType
from models.subscription import Subscription
from models.user import UserProfile
from repositories.notification_repo import NotificationRepository
from services.billing import days_until
from utils.logger import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Produces notification events and keeps them in an in-memory inbox.

    Args:
        repo: Optional store for emitted events (the delivery side reads
            from it). Without one, events only live in `notifications`.
        user_id: Stamped on every emitted event.
    """

    def __init__(self, repo: Optional[NotificationRepository] = None,
                 user_id: Optional[str] = None):
        self.repo = repo
        self.user_id = user_id
        self.notifications: list[Notification] = []

    # ── Inbox ─────────────────────────────────────────────

    def add_notification(self, notification: Notification) -> Notification:
        """Append an event to the inbox and hand it to the repository."""
        if notification.user_id is None:
            notification.user_id = self.user_id
        if self.repo is not None:
            self.repo.add(notification)
        self.notifications.append(notification)
        return notification

    def mark_as_read(self, notification_id: str) -> Notification:
        for notification in self.notifications:
            if notification.id == notification_id:
                if self.repo is not None:
                    self.repo.mark_as_read(notification_id)
                notification.is_read = True
                return notification
        raise NotFoundError(notification_id)

    def unread(self) -> list[Notification]:
        return [n for n in self.notifications if not n.is_read]

    # ── Scans ─────────────────────────────────────────────

    def check_for_price_increases(self, subscriptions: Iterable[Subscription],
                                  now: Optional[datetime] = None) -> list[Notification]:
        """Emit one price_increase event per subscription priced above its previous amount."""
        emitted = []
        for subscription in subscriptions:
            if not subscription.has_price_increase():
                continue
            increase = subscription.amount - subscription.previous_amount
            emitted.append(self.add_notification(Notification(
                type=NotificationType.PRICE_INCREASE,
                title="Price Increase Alert",
                message=f"{subscription.name} increased by {increase:.2f}",
                subscription_id=subscription.id,
                created_at=now or datetime.now(),
            )))
        if emitted:
            logger.info(f"Emitted {len(emitted)} price increase alerts")
        return emitted

    def check_for_trial_ending(self, subscriptions: Iterable[Subscription],
                               today: Optional[date] = None,
                               now: Optional[datetime] = None) -> list[Notification]:
        """Emit one trial_ending event per free trial ending within TRIAL_ALERT_DAYS (not today)."""
        today = today or date.today()
        emitted = []
        for subscription in subscriptions:
            if not subscription.is_free_trial or subscription.trial_end_date is None:
                continue
            days_left = days_until(subscription.trial_end_date, today)
            if 0 < days_left <= TRIAL_ALERT_DAYS:
                emitted.append(self.add_notification(Notification(
                    type=NotificationType.TRIAL_ENDING,
                    title="Free Trial Ending Soon",
                    message=f"{subscription.name} free trial ends in {days_left} days",
                    subscription_id=subscription.id,
                    created_at=now or datetime.now(),
                )))
        if emitted:
            logger.info(f"Emitted {len(emitted)} trial ending alerts")
        return emitted

    def run_checks(self, subscriptions: Iterable[Subscription],
                   user: Optional[UserProfile] = None,
                   today: Optional[date] = None,
                   now: Optional[datetime] = None) -> list[Notification]:
        """
        Run every scan the user has opted into.
        Without a user context both scans run. `now` stamps every event.
        """
        subscriptions = list(subscriptions)
        emitted = []
        if user is None or user.price_increase_alerts:
            emitted += self.check_for_price_increases(subscriptions, now)
        if user is None or user.trial_end_alerts:
            emitted += self.check_for_trial_ending(subscriptions, today, now)
        return emitted
