"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Users table: one account per user, carries the monthly budget
CREATE TABLE IF NOT EXISTS users (
    id                      UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name                    VARCHAR(100),
    email                   VARCHAR(255) UNIQUE,
    monthly_budget          NUMERIC(12,2) NOT NULL DEFAULT 500 CHECK (monthly_budget > 0),
    currency                VARCHAR(5) DEFAULT 'USD',
    timezone                VARCHAR(64) DEFAULT 'UTC',
    price_increase_alerts   BOOLEAN DEFAULT TRUE,
    trial_end_alerts        BOOLEAN DEFAULT TRUE,
    created_at              TIMESTAMPTZ DEFAULT NOW()
);

-- Subscriptions table: one row per recurring bill
CREATE TABLE IF NOT EXISTS subscriptions (
    id              UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id         UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name            VARCHAR(255) NOT NULL,
    amount          NUMERIC(12,2) NOT NULL CHECK (amount > 0),
    category        VARCHAR(20) NOT NULL CHECK (category IN (
                        'Entertainment', 'Utilities', 'Rent', 'Education',
                        'Health', 'Transport', 'Food', 'Other')),
    recurrence      VARCHAR(10) NOT NULL CHECK (recurrence IN ('Weekly', 'Monthly', 'Yearly')),
    next_due_date   DATE NOT NULL,
    start_date      DATE NOT NULL,
    is_paid         BOOLEAN DEFAULT FALSE,
    color           VARCHAR(7) NOT NULL,
    description     TEXT,
    notes           TEXT,
    is_free_trial   BOOLEAN DEFAULT FALSE,
    trial_end_date  DATE,
    previous_amount NUMERIC(12,2),
    auto_renew      BOOLEAN DEFAULT TRUE,
    reminder_days   INT[] DEFAULT '{}',
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Notifications table: emitted events awaiting delivery / read
CREATE TABLE IF NOT EXISTS notifications (
    id              UUID PRIMARY KEY,
    user_id         UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    type            VARCHAR(20) NOT NULL CHECK (type IN (
                        'reminder', 'price_increase', 'trial_ending', 'overdue', 'budget_alert')),
    title           VARCHAR(255) NOT NULL,
    message         TEXT NOT NULL,
    subscription_id UUID REFERENCES subscriptions(id) ON DELETE SET NULL,
    is_read         BOOLEAN DEFAULT FALSE,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_subscriptions_user ON subscriptions(user_id);
CREATE INDEX IF NOT EXISTS idx_subscriptions_due ON subscriptions(user_id, next_due_date);
CREATE INDEX IF NOT EXISTS idx_notifications_unread ON notifications(user_id) WHERE is_read = FALSE;
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
