from datetime import date, datetime

from models.subscription import Category, Recurrence, Subscription
from repositories.memory_repo import InMemorySubscriptionRepository

USER_ID = "user-1"


class FlakyRepository(InMemorySubscriptionRepository):
    """In-memory repository whose writes can be switched to fail."""

    def __init__(self):
        super().__init__()
        self.failing = False

    def _check(self):
        if self.failing:
            raise ConnectionError("backend unreachable")

    def add(self, user_id, subscription):
        self._check()
        return super().add(user_id, subscription)

    def update(self, subscription_id, changes):
        self._check()
        return super().update(subscription_id, changes)

    def delete(self, subscription_id):
        self._check()
        return super().delete(subscription_id)


def make_subscription(**overrides) -> Subscription:
    """Build a Subscription directly, bypassing the service."""
    data = {
        "name": "Netflix",
        "amount": 15.99,
        "category": Category.ENTERTAINMENT,
        "recurrence": Recurrence.MONTHLY,
        "next_due_date": date(2024, 2, 1),
        "start_date": date(2024, 1, 1),
        "created_at": datetime(2024, 1, 1, 9, 0),
        "user_id": USER_ID,
    }
    data.update(overrides)
    return Subscription(**data)


class RecordingNotificationRepository:
    """Stands in for NotificationRepository."""

    def __init__(self):
        self.added = []
        self.read = []

    def add(self, notification):
        self.added.append(notification)
        return notification

    def mark_as_read(self, notification_id):
        self.read.append(notification_id)
        return True


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rowcount = conn.rowcount

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        if self.conn.error is not None:
            raise self.conn.error
        self.conn.executed.append((sql, params))

    def fetchone(self):
        return self.conn.rows[0] if self.conn.rows else None

    def fetchall(self):
        return list(self.conn.rows)


class FakeConnection:
    """Stands in for a pooled psycopg2 connection."""

    def __init__(self, rows=(), rowcount=1, error=None):
        self.rows = list(rows)
        self.rowcount = rowcount
        self.error = error
        self.executed = []
        self.committed = False
        self.rolled_back = False

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True


def install_connection(monkeypatch, module, conn) -> list:
    """Route a repository module's pool calls to `conn`; returns released connections."""
    released = []
    monkeypatch.setattr(module, "get_connection", lambda: conn)
    monkeypatch.setattr(module, "release_connection", released.append)
    return released
