"""
repositories/user_repo.py
--------------------------
Data access layer for user records and their monthly budget.
"""

from typing import Optional

import psycopg2

from db.connection import get_connection, release_connection
from errors import NotFoundError, RemoteFailure
from models.user import UserProfile
from utils.logger import get_logger

logger = get_logger(__name__)

_SELECT_USER = """
    SELECT id, name, email, monthly_budget, currency, timezone,
           price_increase_alerts, trial_end_alerts, created_at
    FROM users
"""


class UserRepository:
    """Repository for the users table."""

    def create(self, name: str, email: str, monthly_budget: float,
               currency: str = "USD", timezone: str = "UTC") -> UserProfile:
        """
        Insert a user, or refresh the name/budget of an existing email.
        Uses PostgreSQL's ON CONFLICT (upsert) for atomicity.
        """
        sql = """
            INSERT INTO users (name, email, monthly_budget, currency, timezone)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (email) DO UPDATE
                SET name = EXCLUDED.name, monthly_budget = EXCLUDED.monthly_budget
            RETURNING id, name, email, monthly_budget, currency, timezone,
                      price_increase_alerts, trial_end_alerts, created_at;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (name, email, monthly_budget, currency, timezone))
                row = cur.fetchone()
            conn.commit()
            return self._row_to_user(row)
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to create user {email}: {e}")
            raise RemoteFailure("Failed to create user") from e
        finally:
            release_connection(conn)

    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        """Fetch a user by id, or None."""
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(_SELECT_USER + " WHERE id = %s;", (user_id,))
                row = cur.fetchone()
                return self._row_to_user(row) if row else None
        except psycopg2.Error as e:
            logger.error(f"Failed to fetch user {user_id}: {e}")
            raise RemoteFailure("Failed to fetch user") from e
        finally:
            release_connection(conn)

    def get_all(self) -> list[UserProfile]:
        """Every account, used by the daily scan."""
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(_SELECT_USER + " ORDER BY created_at;")
                return [self._row_to_user(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error(f"Failed to fetch users: {e}")
            raise RemoteFailure("Failed to fetch users") from e
        finally:
            release_connection(conn)

    def set_monthly_budget(self, user_id: str, monthly_budget: float) -> None:
        """Change a user's monthly budget."""
        sql = "UPDATE users SET monthly_budget = %s WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (monthly_budget, user_id))
                updated = cur.rowcount > 0
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to set budget for user {user_id}: {e}")
            raise RemoteFailure("Failed to update budget") from e
        finally:
            release_connection(conn)

        if not updated:
            raise NotFoundError(user_id)
        logger.info(f"Monthly budget for user {user_id} set to {monthly_budget:.2f}")

    @staticmethod
    def _row_to_user(row: tuple) -> UserProfile:
        return UserProfile(
            id=str(row[0]),
            name=row[1] or "",
            email=row[2] or "",
            monthly_budget=float(row[3]),
            currency=row[4],
            timezone=row[5],
            price_increase_alerts=row[6],
            trial_end_alerts=row[7],
            created_at=row[8],
        )
