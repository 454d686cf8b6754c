from datetime import date, datetime, timedelta

import main
from models.notification import NotificationType
from models.user import UserProfile
from tests.factories import USER_ID, FlakyRepository, RecordingNotificationRepository, make_subscription


def test_scan_user_emits_notifications(monkeypatch):
    today = date(2024, 3, 10)
    stamp = datetime(2024, 3, 10, 6, 0)
    repo = FlakyRepository()
    repo.add(USER_ID, make_subscription(name="Hulu", amount=12, previous_amount=10))
    repo.add(USER_ID, make_subscription(
        name="Trial", is_free_trial=True, trial_end_date=today + timedelta(days=2)
    ))
    notifications = RecordingNotificationRepository()
    monkeypatch.setattr(main, "SubscriptionRepository", lambda: repo)
    monkeypatch.setattr(main, "NotificationRepository", lambda: notifications)

    emitted = main.scan_user(UserProfile(id=USER_ID, monthly_budget=500), today, stamp)

    assert emitted == 2
    assert [n.type for n in notifications.added] == [
        NotificationType.PRICE_INCREASE,
        NotificationType.TRIAL_ENDING,
    ]
    assert all(n.user_id == USER_ID for n in notifications.added)
    assert all(n.created_at == stamp for n in notifications.added)
