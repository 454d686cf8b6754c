"""
repositories/notification_repo.py
---------------------------------
Data access layer for notification events.
"""

import psycopg2

from db.connection import get_connection, release_connection
from errors import RemoteFailure
from models.notification import Notification, NotificationType
from utils.logger import get_logger

logger = get_logger(__name__)


class NotificationRepository:
    """Repository for the notifications table."""

    def add(self, notification: Notification) -> Notification:
        """Insert an emitted event; its id is generated client-side."""
        sql = """
            INSERT INTO notifications
                (id, user_id, type, title, message, subscription_id, is_read, created_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s);
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    notification.id, notification.user_id, notification.type.value,
                    notification.title, notification.message,
                    notification.subscription_id, notification.is_read,
                    notification.created_at,
                ))
            conn.commit()
            logger.info(f"Stored {notification.type.value} notification #{notification.id}")
            return notification
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to store notification: {e}")
            raise RemoteFailure("Failed to store notification") from e
        finally:
            release_connection(conn)

    def get_unread(self, user_id: str) -> list[Notification]:
        """Unread notifications for a user, newest first."""
        sql = """
            SELECT id, user_id, type, title, message, subscription_id, is_read, created_at
            FROM notifications
            WHERE user_id = %s AND is_read = FALSE
            ORDER BY created_at DESC;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                return [self._row_to_notification(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to fetch notifications for user {user_id}: {e}")
            raise RemoteFailure("Failed to fetch notifications") from e
        finally:
            release_connection(conn)

    def mark_as_read(self, notification_id: str) -> bool:
        sql = "UPDATE notifications SET is_read = TRUE WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (notification_id,))
                updated = cur.rowcount > 0
            conn.commit()
            return updated
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to mark notification #{notification_id} read: {e}")
            raise RemoteFailure("Failed to update notification") from e
        finally:
            release_connection(conn)

    @staticmethod
    def _row_to_notification(row: tuple) -> Notification:
        return Notification(
            id=str(row[0]),
            user_id=str(row[1]),
            type=NotificationType(row[2]),
            title=row[3],
            message=row[4],
            subscription_id=str(row[5]) if row[5] is not None else None,
            is_read=row[6],
            created_at=row[7],
        )
