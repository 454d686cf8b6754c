"""
main.py
-------
Entry point for the BillPilot daily scan.

Responsibilities:
    - Initialize the database connection pool and schema.
    - For every user: load subscriptions, emit price-increase and
      trial-ending notifications, and log budget status.
    - Meant to be run once a day by cron or a similar scheduler.
"""

from datetime import date, datetime

from config import DUE_SOON_DAYS
from db.connection import init_pool, close_pool
from db.init_db import create_tables
from errors import RemoteFailure
from models.user import UserProfile
from repositories.notification_repo import NotificationRepository
from repositories.subscription_repo import SubscriptionRepository
from repositories.user_repo import UserRepository
from services.analytics_service import AnalyticsService
from services.notification_service import NotificationService
from services.subscription_service import SubscriptionService
from utils.logger import get_logger

logger = get_logger(__name__)


def scan_user(user: UserProfile, today: date | None = None,
              now: datetime | None = None) -> int:
    """
    Run the notification scans for one user.
    `now` stamps the emitted notifications.

    Returns:
        Number of notifications emitted.
    """
    session = SubscriptionService(SubscriptionRepository(), user.id, user)
    session.load()

    notifier = NotificationService(NotificationRepository(), user.id)
    emitted = notifier.run_checks(session.subscriptions, user, today, now)

    analytics = AnalyticsService(session)
    insights = analytics.budget_insights()
    due_soon = analytics.due_within(DUE_SOON_DAYS, today)
    overdue = analytics.overdue_bills(today)

    logger.info(
        f"User {user.id}: {len(session.subscriptions)} subscriptions, "
        f"{insights.percentage_used:.0f}% of budget used, "
        f"{len(due_soon)} due soon, {len(overdue)} overdue, "
        f"{len(emitted)} notifications"
    )
    if insights.overspending:
        logger.warning(
            f"User {user.id} is over budget by {-insights.remaining_budget:.2f} {user.currency}"
        )
    return len(emitted)


def main() -> None:
    """Initialize the database and scan every user."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    # ── 2. Scan users ─────────────────────────────────────
    try:
        users = UserRepository().get_all()
        total = 0
        for user in users:
            try:
                total += scan_user(user)
            except RemoteFailure as e:
                logger.error(f"Scan failed for user {user.id}: {e}")
        logger.info(f"Daily scan finished: {len(users)} users, {total} notifications.")
    finally:
        # ── 3. Cleanup ────────────────────────────────────
        close_pool()


if __name__ == "__main__":
    main()
