"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "billpilot")
DB_USER: str = os.getenv("DB_USER", "billpilot_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── Account defaults ──────────────────────────────────────
DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "USD")
DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "UTC")
DEFAULT_MONTHLY_BUDGET: float = float(os.getenv("DEFAULT_MONTHLY_BUDGET", "500"))

# ── Analytics windows ─────────────────────────────────────
DUE_SOON_DAYS: int = int(os.getenv("DUE_SOON_DAYS", "7"))
UNUSED_AFTER_DAYS: int = int(os.getenv("UNUSED_AFTER_DAYS", "30"))
TRIAL_ENDING_DAYS: int = int(os.getenv("TRIAL_ENDING_DAYS", "7"))
TRIAL_ALERT_DAYS: int = int(os.getenv("TRIAL_ALERT_DAYS", "3"))
BUDGET_WARNING_PERCENT: float = float(os.getenv("BUDGET_WARNING_PERCENT", "80"))
