"""
repositories/subscription_repo.py
---------------------------------
Data access layer for subscriptions.
All SQL queries related to the `subscriptions` table live here.
"""

from enum import Enum

import psycopg2

from db.connection import get_connection, release_connection
from errors import InvalidRecurrence, NotFoundError, RemoteFailure, ValidationError
from models.subscription import Subscription
from repositories.base import BaseSubscriptionRepository
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "id", "user_id", "name", "amount", "category", "recurrence",
    "next_due_date", "start_date", "is_paid", "color", "description", "notes",
    "is_free_trial", "trial_end_date", "previous_amount", "auto_renew",
    "reminder_days", "created_at", "updated_at",
)
_SELECT_COLUMNS = ", ".join(_COLUMNS)

# Columns a partial update may touch
_UPDATABLE = frozenset(_COLUMNS) - {"id", "user_id", "created_at", "start_date", "updated_at"}


class SubscriptionRepository(BaseSubscriptionRepository):
    """Repository for CRUD operations on the subscriptions table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, user_id: str, subscription: Subscription) -> Subscription:
        """
        Insert a new subscription.

        Args:
            user_id: Owning account.
            subscription: The Subscription to persist (id is ignored).

        Returns:
            The stored Subscription with `id` and `created_at` populated.
        """
        sql = f"""
            INSERT INTO subscriptions
                (user_id, name, amount, category, recurrence, next_due_date,
                 start_date, is_paid, color, description, notes, is_free_trial,
                 trial_end_date, previous_amount, auto_renew, reminder_days, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s,
                    COALESCE(%s, NOW()))
            RETURNING {_SELECT_COLUMNS};
        """
        params = (
            user_id, subscription.name, subscription.amount,
            subscription.category.value, subscription.recurrence.value,
            subscription.next_due_date, subscription.start_date, subscription.is_paid,
            subscription.color, subscription.description, subscription.notes,
            subscription.is_free_trial, subscription.trial_end_date,
            subscription.previous_amount, subscription.auto_renew,
            list(subscription.reminder_days), subscription.created_at,
        )
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                row = cur.fetchone()
            conn.commit()
            saved = self._row_to_subscription(row)
            logger.info(f"Added subscription '{saved.name}' #{saved.id}")
            return saved
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to add subscription: {e}")
            raise RemoteFailure("Failed to create subscription") from e
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_all(self, user_id: str) -> list[Subscription]:
        """
        Get all subscriptions for a user, oldest first.

        Rows with an unknown recurrence are logged and skipped.
        """
        sql = (
            f"SELECT {_SELECT_COLUMNS} FROM subscriptions "
            "WHERE user_id = %s ORDER BY created_at ASC;"
        )
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                rows = cur.fetchall()
        except psycopg2.Error as e:
            logger.error(f"Failed to fetch subscriptions for user {user_id}: {e}")
            raise RemoteFailure("Failed to fetch subscriptions") from e
        finally:
            release_connection(conn)

        subscriptions = []
        for row in rows:
            try:
                subscriptions.append(self._row_to_subscription(row))
            except (InvalidRecurrence, ValidationError) as e:
                logger.error(f"Skipping subscription #{row[0]}: {e}")
        return subscriptions

    # ── UPDATE ────────────────────────────────────────────

    def update(self, subscription_id: str, changes: dict) -> Subscription:
        """
        Apply a partial update.

        Args:
            subscription_id: Primary key.
            changes: Column -> new value. Enum values are stored by name.

        Returns:
            The updated Subscription.

        Raises:
            NotFoundError: If no row has this id.
        """
        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update columns: {sorted(unknown)}")

        assignments = ", ".join(f"{column} = %s" for column in changes)
        sql = f"""
            UPDATE subscriptions
            SET {assignments}, updated_at = NOW()
            WHERE id = %s
            RETURNING {_SELECT_COLUMNS};
        """
        params = [self._to_db(v) for v in changes.values()] + [subscription_id]
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                row = cur.fetchone()
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to update subscription #{subscription_id}: {e}")
            raise RemoteFailure("Failed to update subscription") from e
        finally:
            release_connection(conn)

        if row is None:
            raise NotFoundError(subscription_id)
        return self._row_to_subscription(row)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, subscription_id: str) -> None:
        """Delete a subscription by ID."""
        sql = "DELETE FROM subscriptions WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (subscription_id,))
                deleted = cur.rowcount > 0
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to delete subscription #{subscription_id}: {e}")
            raise RemoteFailure("Failed to delete subscription") from e
        finally:
            release_connection(conn)

        if not deleted:
            raise NotFoundError(subscription_id)
        logger.info(f"Deleted subscription #{subscription_id}")

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _to_db(value):
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, tuple):
            return list(value)
        return value

    @staticmethod
    def _row_to_subscription(row: tuple) -> Subscription:
        """Convert a database row tuple to a Subscription domain object."""
        data = dict(zip(_COLUMNS, row))
        return Subscription(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            name=data["name"],
            amount=float(data["amount"]),
            category=data["category"],
            recurrence=data["recurrence"],
            next_due_date=data["next_due_date"],
            start_date=data["start_date"],
            is_paid=data["is_paid"],
            description=data["description"],
            notes=data["notes"],
            is_free_trial=data["is_free_trial"],
            trial_end_date=data["trial_end_date"],
            previous_amount=(
                float(data["previous_amount"]) if data["previous_amount"] is not None else None
            ),
            auto_renew=data["auto_renew"],
            reminder_days=list(data["reminder_days"] or []),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
