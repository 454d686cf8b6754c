import pytest
from datetime import date, datetime, timedelta

from errors import NotFoundError
from models.notification import NotificationType
from models.user import UserProfile
from services.notification_service import NotificationService
from tests.factories import USER_ID, RecordingNotificationRepository, make_subscription

TODAY = date(2024, 3, 10)


@pytest.fixture
def notifier():
    return NotificationService(RecordingNotificationRepository(), USER_ID)


def _trial(name, days_left):
    return make_subscription(
        id=name, name=name, is_free_trial=True, trial_end_date=TODAY + timedelta(days=days_left)
    )


def test_price_increase_event(notifier):
    hulu = make_subscription(id="hulu", name="Hulu", amount=9.99, previous_amount=7.99)
    stamp = datetime(2024, 3, 10, 8, 0)

    [event] = notifier.check_for_price_increases([hulu, make_subscription()], now=stamp)

    assert event.type is NotificationType.PRICE_INCREASE
    assert event.title == "Price Increase Alert"
    assert event.message == "Hulu increased by 2.00"
    assert event.subscription_id == "hulu"
    assert event.user_id == USER_ID
    assert event.is_read is False
    assert event.created_at == stamp
    assert notifier.repo.added == [event]


def test_price_decrease_is_ignored(notifier):
    cheaper = make_subscription(amount=5, previous_amount=7.99)
    assert notifier.check_for_price_increases([cheaper]) == []


def test_scans_do_not_deduplicate(notifier):
    hulu = make_subscription(name="Hulu", amount=9.99, previous_amount=7.99)

    notifier.check_for_price_increases([hulu])
    notifier.check_for_price_increases([hulu])

    assert len(notifier.notifications) == 2
    assert notifier.notifications[0].id != notifier.notifications[1].id


def test_trial_ending_window(notifier):
    subscriptions = [
        _trial("expired", -1),
        _trial("today", 0),
        _trial("one", 1),
        _trial("three", 3),
        _trial("four", 4),
    ]

    events = notifier.check_for_trial_ending(subscriptions, today=TODAY)

    assert [e.subscription_id for e in events] == ["one", "three"]
    assert events[1].type is NotificationType.TRIAL_ENDING
    assert events[1].title == "Free Trial Ending Soon"
    assert events[1].message == "three free trial ends in 3 days"


def test_trial_without_end_date_is_skipped(notifier):
    broken = make_subscription(is_free_trial=True, trial_end_date=None)
    assert notifier.check_for_trial_ending([broken], today=TODAY) == []


def test_run_checks_respects_preferences(notifier):
    subscriptions = [
        make_subscription(id="hike", amount=20, previous_amount=10),
        _trial("trial", 2),
    ]
    user = UserProfile(id=USER_ID, price_increase_alerts=False, trial_end_alerts=True)

    events = notifier.run_checks(subscriptions, user, today=TODAY)

    assert [e.type for e in events] == [NotificationType.TRIAL_ENDING]


def test_run_checks_stamps_events_with_given_time(notifier):
    stamp = datetime(2024, 3, 10, 6, 30)
    subscriptions = [
        make_subscription(id="hike", amount=20, previous_amount=10),
        _trial("trial", 2),
    ]

    events = notifier.run_checks(subscriptions, today=TODAY, now=stamp)

    assert [e.created_at for e in events] == [stamp, stamp]


def test_run_checks_without_user_runs_everything(notifier):
    subscriptions = [
        make_subscription(id="hike", amount=20, previous_amount=10),
        _trial("trial", 2),
    ]
    events = notifier.run_checks(subscriptions, today=TODAY)
    assert len(events) == 2


def test_mark_as_read(notifier):
    [event] = notifier.check_for_price_increases(
        [make_subscription(amount=20, previous_amount=10)]
    )

    notifier.mark_as_read(event.id)

    assert event.is_read is True
    assert notifier.unread() == []
    assert notifier.repo.read == [event.id]
    with pytest.raises(NotFoundError):
        notifier.mark_as_read("missing")


def test_works_without_repository():
    notifier = NotificationService()
    notifier.check_for_price_increases([make_subscription(amount=20, previous_amount=10)])
    assert len(notifier.unread()) == 1
